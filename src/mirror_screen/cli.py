"""CLI: show the mirror home screen in the terminal."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.live import Live

from .config import Settings, load_settings
from .exceptions import ConfigError
from .holidays import HolidayLookup
from .location import ConfiguredLocationService, device_country_code, fallback_coordinates
from .log_setup import setup_logger
from .session import ScreenSession
from .ui.screen import MirrorScreen
from .weather.ingest import ForecastIngestor
from .weather.nws import NWSWeatherProvider


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse mirror screen CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Show time, date, holiday and a 12-hour forecast in the terminal."
    )
    parser.add_argument("--lat", type=float, default=None, help="Device latitude override.")
    parser.add_argument("--lon", type=float, default=None, help="Device longitude override.")
    parser.add_argument(
        "--country",
        type=str,
        default=None,
        help="ISO 3166-1 alpha-2 country code for the holiday lookup.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Wait for both fetches, print a single frame and exit.",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Exit live mode after this many seconds.",
    )
    return parser.parse_args(argv)


def _cli_overrides(args: argparse.Namespace) -> dict[str, object]:
    if (args.lat is None) != (args.lon is None):
        raise ConfigError("Pass --lat and --lon together.")
    overrides: dict[str, object] = {}
    if args.lat is not None:
        overrides["MIRROR_LATITUDE"] = args.lat
        overrides["MIRROR_LONGITUDE"] = args.lon
    if args.country:
        overrides["MIRROR_COUNTRY_CODE"] = args.country
    return overrides


def build_session(
    settings: Settings,
    logger: logging.Logger,
    screen: MirrorScreen,
) -> ScreenSession:
    """Wire providers, ingestor and screen into one session."""
    provider = NWSWeatherProvider(settings=settings, logger=logger)
    holidays = HolidayLookup(settings=settings, logger=logger)
    ingestor = ForecastIngestor(
        provider=provider,
        location_service=ConfiguredLocationService.from_settings(settings),
        fallback=fallback_coordinates(settings),
        logger=logger,
        chart_points=settings.forecast_hours,
        label_every=settings.label_every,
        display_tz=settings.display_tz,
    )
    return ScreenSession(
        screen=screen,
        ingestor=ingestor,
        holidays=holidays,
        country_code=lambda: device_country_code(settings),
        logger=logger,
        tick_seconds=settings.clock_tick_seconds,
        closers=[provider.aclose, holidays.aclose],
    )


async def run_once(session: ScreenSession, console: Console, timeout: float) -> None:
    await session.mount()
    try:
        await session.wait_for_fetches(timeout=timeout)
        session.collect()
        console.print(session.screen.render())
    finally:
        await session.unmount()


async def run_live(
    session: ScreenSession,
    console: Console,
    logger: logging.Logger,
    duration: float | None,
) -> None:
    screen = session.screen
    screen.attach_logger(logger)
    try:
        with Live(screen.render(), console=console, auto_refresh=False) as live:
            session.on_tick = lambda: live.update(screen.render(), refresh=True)
            await session.mount()
            try:
                if duration is None:
                    await asyncio.Event().wait()
                else:
                    await asyncio.sleep(duration)
            finally:
                await session.unmount()
    finally:
        screen.detach_logger()


def main(argv: list[str] | None = None) -> int:
    """Run the mirror screen."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()

    try:
        settings = load_settings(**_cli_overrides(args))
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2
    logger = setup_logger(level=settings.log_level)
    logger.info("Starting mirror screen: %s", settings.safe_summary())

    screen = MirrorScreen(forecast_hours=settings.forecast_hours)
    session = build_session(settings, logger, screen)
    try:
        if args.once:
            timeout = settings.weather_timeout_seconds * 2 + settings.holiday_timeout_seconds
            asyncio.run(run_once(session, console, timeout))
        else:
            asyncio.run(run_live(session, console, logger, args.duration))
    except KeyboardInterrupt:
        logger.info("Interrupted; screen closed.")
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
