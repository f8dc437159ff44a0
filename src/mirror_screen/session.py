"""Screen lifecycle: clock tick plus two independent fetch channels."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import date, datetime

from .holidays import HolidayLookup
from .ui.screen import MirrorScreen
from .weather.ingest import ForecastIngestor
from .weather.models import ForecastErr, ForecastOutcome

Clock = Callable[[], datetime]


def local_now() -> datetime:
    return datetime.now().astimezone()


class ScreenSession:
    """Runs one mount of the screen.

    Each fetch runs in its own task and its result is applied to the screen
    only in `collect()`. `unmount()` cancels the clock and both fetches
    together; after that the screen is never touched again.
    """

    def __init__(
        self,
        *,
        screen: MirrorScreen,
        ingestor: ForecastIngestor,
        holidays: HolidayLookup,
        country_code: Callable[[], str],
        logger: logging.Logger,
        clock: Clock = local_now,
        tick_seconds: float = 1.0,
        on_tick: Callable[[], None] | None = None,
        closers: list[Callable[[], Awaitable[None]]] | None = None,
    ) -> None:
        self.screen = screen
        self.ingestor = ingestor
        self.holidays = holidays
        self.country_code = country_code
        self.logger = logger
        self.clock = clock
        self.tick_seconds = tick_seconds
        self.on_tick = on_tick
        self._closers = closers or []
        self._clock_task: asyncio.Task[None] | None = None
        self._forecast_task: asyncio.Task[ForecastOutcome] | None = None
        self._holiday_task: asyncio.Task[str | None] | None = None
        self._forecast_applied = False
        self._holiday_applied = False
        self.mounted = False

    async def mount(self) -> None:
        if self.mounted:
            return
        self.mounted = True
        now = self.clock()
        self.screen.tick(now)
        today: date = now.date()
        country = self.country_code()
        self.logger.info("Screen mounted: date=%s country=%s", today.isoformat(), country)

        self._clock_task = asyncio.create_task(self._run_clock(), name="clock")
        self._forecast_task = asyncio.create_task(self.ingestor.ingest(), name="forecast")
        self._holiday_task = asyncio.create_task(
            self.holidays.lookup(today, country), name="holiday"
        )

    async def unmount(self) -> None:
        if not self.mounted:
            return
        self.mounted = False
        tasks = [
            task
            for task in (self._clock_task, self._forecast_task, self._holiday_task)
            if task is not None
        ]
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        # Finished tasks are gathered too so unread exceptions get retrieved.
        await asyncio.gather(*tasks, return_exceptions=True)
        for close in self._closers:
            await close()
        self.logger.info("Screen unmounted; cancelled %d pending task(s)", len(pending))

    async def wait_for_fetches(self, timeout: float | None = None) -> None:
        pending = [
            task for task in (self._forecast_task, self._holiday_task) if task is not None
        ]
        if pending:
            await asyncio.wait(pending, timeout=timeout)

    def collect(self) -> None:
        """Apply each finished fetch result to the screen exactly once."""
        if not self.mounted:
            return
        task = self._forecast_task
        if not self._forecast_applied and task is not None and task.done():
            self._forecast_applied = True
            self.screen.apply_forecast(self._forecast_result(task))
        task = self._holiday_task
        if not self._holiday_applied and task is not None and task.done():
            self._holiday_applied = True
            self.screen.apply_holiday(self._holiday_result(task))

    def _forecast_result(self, task: asyncio.Task[ForecastOutcome]) -> ForecastOutcome:
        if task.cancelled():
            return ForecastErr(kind="network", detail="Forecast fetch was cancelled.")
        exc = task.exception()
        if exc is not None:
            self.logger.error("Unexpected forecast failure", exc_info=exc)
            return ForecastErr(kind="network", detail=f"{type(exc).__name__}: {exc}")
        return task.result()

    def _holiday_result(self, task: asyncio.Task[str | None]) -> str | None:
        if task.cancelled():
            return None
        exc = task.exception()
        if exc is not None:
            self.logger.error("Unexpected holiday lookup failure", exc_info=exc)
            return None
        return task.result()

    async def _run_clock(self) -> None:
        while True:
            await asyncio.sleep(self.tick_seconds)
            if not self.mounted:
                return
            self.screen.tick(self.clock())
            self.collect()
            if self.on_tick is None:
                continue
            try:
                self.on_tick()
            except Exception:
                self.logger.exception("Screen refresh failed")
                raise
