"""Tests for the screen session lifecycle and result merging."""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timedelta
from types import SimpleNamespace

import httpx
import pytest

from mirror_screen.holidays import HolidayLookup
from mirror_screen.location import ConfiguredLocationService
from mirror_screen.models import Coordinates
from mirror_screen.session import ScreenSession
from mirror_screen.ui.screen import UNAVAILABLE_WEATHER_TEXT, MirrorScreen, default_series
from mirror_screen.weather.ingest import ForecastIngestor
from mirror_screen.weather.models import ChartSeries, ForecastErr, ForecastOk, ForecastOutcome
from mirror_screen.weather.nws import NWSWeatherProvider

JULY_4 = datetime(2024, 7, 4, 18, 30, 0)
LOGGER = logging.getLogger("test_screen_session")


class _FakeIngestor:
    def __init__(self, outcome: ForecastOutcome | None = None, *, block: bool = False) -> None:
        self.outcome = outcome
        self.block = block
        self.cancelled = False

    async def ingest(self) -> ForecastOutcome:
        if self.block:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        if self.outcome is None:
            raise RuntimeError("provider bug")
        return self.outcome


class _FakeHolidays:
    def __init__(self, name: str | None = None, *, block: bool = False) -> None:
        self.name = name
        self.block = block
        self.cancelled = False
        self.calls: list[tuple[date, str]] = []

    async def lookup(self, day: date, country_code: str) -> str | None:
        self.calls.append((day, country_code))
        if self.block:
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        return self.name


def _ok() -> ForecastOk:
    return ForecastOk(
        series=ChartSeries(temperatures=[75.0], precipitation=[10.0], time_labels=["18:00"]),
        summary="Partly Cloudy",
        coordinates=Coordinates(latitude=40.7128, longitude=-74.0060, source="fallback"),
    )


def _session(ingestor: _FakeIngestor, holidays: _FakeHolidays, **kwargs: object) -> ScreenSession:
    return ScreenSession(
        screen=MirrorScreen(),
        ingestor=ingestor,  # type: ignore[arg-type]
        holidays=holidays,  # type: ignore[arg-type]
        country_code=lambda: "US",
        logger=LOGGER,
        clock=lambda: JULY_4,
        tick_seconds=kwargs.pop("tick_seconds", 60.0),  # type: ignore[arg-type]
        **kwargs,  # type: ignore[arg-type]
    )


def test_results_are_applied_at_collect() -> None:
    holidays = _FakeHolidays("Independence Day")
    session = _session(_FakeIngestor(_ok()), holidays)

    async def scenario() -> None:
        await session.mount()
        await session.wait_for_fetches(timeout=1.0)
        assert session.screen.weather_text != "Partly Cloudy"
        session.collect()
        await session.unmount()

    asyncio.run(scenario())
    assert session.screen.weather_text == "Partly Cloudy"
    assert session.screen.holiday == "Independence Day"
    assert session.screen.series.temperatures == [75.0]
    assert holidays.calls == [(date(2024, 7, 4), "US")]


def test_forecast_failure_keeps_default_series() -> None:
    session = _session(
        _FakeIngestor(ForecastErr(kind="http_status", detail="status 500")),
        _FakeHolidays(None),
    )

    async def scenario() -> None:
        await session.mount()
        await session.wait_for_fetches(timeout=1.0)
        session.collect()
        await session.unmount()

    asyncio.run(scenario())
    assert session.screen.weather_text == UNAVAILABLE_WEATHER_TEXT
    assert session.screen.series == default_series()
    assert session.screen.holiday == ""


def test_unexpected_task_exception_degrades() -> None:
    session = _session(_FakeIngestor(None), _FakeHolidays("Independence Day"))

    async def scenario() -> None:
        await session.mount()
        await session.wait_for_fetches(timeout=1.0)
        session.collect()
        await session.unmount()

    asyncio.run(scenario())
    assert session.screen.weather_text == UNAVAILABLE_WEATHER_TEXT
    assert session.screen.holiday == "Independence Day"


def test_unmount_cancels_in_flight_fetches_and_freezes_screen() -> None:
    ingestor = _FakeIngestor(block=True)
    holidays = _FakeHolidays(block=True)
    closed: list[str] = []

    async def close() -> None:
        closed.append("closed")

    session = _session(ingestor, holidays, closers=[close])

    async def scenario() -> None:
        await session.mount()
        await asyncio.sleep(0.01)
        await session.unmount()
        session.collect()

    asyncio.run(scenario())
    assert ingestor.cancelled
    assert holidays.cancelled
    assert closed == ["closed"]
    assert session.mounted is False
    assert session.screen.weather_text == "Fetching weather..."


def test_clock_ticks_update_screen_and_collect() -> None:
    times = iter(JULY_4 + timedelta(seconds=s) for s in range(1000))
    ticks: list[datetime] = []
    session = _session(_FakeIngestor(_ok()), _FakeHolidays(None), tick_seconds=0.01)
    session.clock = lambda: next(times)
    session.on_tick = lambda: ticks.append(session.screen.now)

    async def scenario() -> None:
        await session.mount()
        await asyncio.sleep(0.1)
        await session.unmount()

    asyncio.run(scenario())
    assert len(ticks) >= 2
    assert ticks[-1] > JULY_4
    assert session.screen.weather_text == "Partly Cloudy"


def test_points_lookup_500_through_real_stack_shows_failure_and_keeps_series() -> None:
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        if request.url.path.startswith("/points/"):
            return httpx.Response(500, text="upstream exploded")
        return httpx.Response(200, json=[])

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    settings = SimpleNamespace(
        nws_base_url="https://api.weather.gov",
        weather_timeout_seconds=5.0,
        nws_user_agent="mirror-screen-tests",
        holiday_api_base_url="https://date.nager.at/api/v3",
        holiday_timeout_seconds=5.0,
    )
    provider = NWSWeatherProvider(settings=settings, logger=LOGGER, client=client)  # type: ignore[arg-type]
    ingestor = ForecastIngestor(
        provider=provider,
        location_service=ConfiguredLocationService(None, None),
        fallback=Coordinates(latitude=40.7128, longitude=-74.0060, source="fallback"),
        logger=LOGGER,
    )
    holidays = HolidayLookup(settings=settings, logger=LOGGER, client=client)  # type: ignore[arg-type]
    session = ScreenSession(
        screen=MirrorScreen(),
        ingestor=ingestor,
        holidays=holidays,
        country_code=lambda: "US",
        logger=LOGGER,
        clock=lambda: JULY_4,
        tick_seconds=60.0,
        closers=[client.aclose],
    )

    async def scenario() -> None:
        await session.mount()
        await session.wait_for_fetches(timeout=5.0)
        session.collect()
        await session.unmount()

    asyncio.run(scenario())
    assert "/points/40.7128,-74.0060" in paths
    assert not any(path.startswith("/gridpoints/") for path in paths)
    assert session.screen.weather_text == UNAVAILABLE_WEATHER_TEXT
    assert session.screen.series == default_series()
    assert session.screen.holiday == ""


def test_failing_tick_callback_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    calls: list[int] = []

    def on_tick() -> None:
        calls.append(1)
        raise RuntimeError("live display gone")

    session = _session(
        _FakeIngestor(_ok()), _FakeHolidays(None), tick_seconds=0.01, on_tick=on_tick
    )

    async def scenario() -> None:
        await session.mount()
        await asyncio.sleep(0.1)
        await session.unmount()

    with caplog.at_level(logging.ERROR, logger=LOGGER.name):
        asyncio.run(scenario())

    assert calls == [1]
    failures = [r for r in caplog.records if r.getMessage() == "Screen refresh failed"]
    assert len(failures) == 1
    assert failures[0].exc_info is not None
    assert isinstance(failures[0].exc_info[1], RuntimeError)
