"""Rich-rendered mirror home screen."""

from __future__ import annotations

import logging
from collections import deque
from datetime import UTC, datetime

from rich.console import Group, RenderableType
from rich.text import Text

from ..greeting import format_date, format_time, greeting_for
from ..weather.models import ChartSeries, ForecastErrorKind, ForecastOutcome
from .charts import render_line_chart
from .models import ScreenState, Severity, StatusLine

FETCHING_WEATHER_TEXT = "Fetching weather..."
UNAVAILABLE_WEATHER_TEXT = "Unable to fetch weather."

STATUS_STYLES: dict[Severity, str] = {
    "INFO": "dim",
    "WARN": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold red",
}

# Every failure class currently degrades to the same message.
DEGRADED_WEATHER_TEXT: dict[ForecastErrorKind, str] = {
    "location": UNAVAILABLE_WEATHER_TEXT,
    "network": UNAVAILABLE_WEATHER_TEXT,
    "http_status": UNAVAILABLE_WEATHER_TEXT,
    "malformed_payload": UNAVAILABLE_WEATHER_TEXT,
}


def default_series() -> ChartSeries:
    """Placeholder chart data shown until the first forecast arrives."""
    return ChartSeries(
        temperatures=[float(t) for t in range(65, 77)],
        precipitation=[float(p) for p in range(0, 101, 10)] + [0.0],
        time_labels=["12:00"] + [f"{hour}:00" for hour in range(1, 12)],
    )


def _severity_from_level(level_no: int) -> Severity:
    if level_no >= logging.CRITICAL:
        return "CRITICAL"
    if level_no >= logging.ERROR:
        return "ERROR"
    if level_no >= logging.WARNING:
        return "WARN"
    return "INFO"


class _ScreenLogHandler(logging.Handler):
    """Route logger output into the status feed instead of over the live screen."""

    def __init__(self, screen: MirrorScreen) -> None:
        super().__init__()
        self.screen = screen

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.screen.record_status(
                severity=_severity_from_level(record.levelno),
                message=record.getMessage(),
            )
        except Exception:
            self.handleError(record)


class MirrorScreen:
    """Holds display state and renders it; knows nothing about fetching."""

    def __init__(
        self,
        *,
        now: datetime | None = None,
        max_status_lines: int = 4,
        forecast_hours: int = 12,
    ) -> None:
        self.now = now or datetime.now().astimezone()
        self.forecast_hours = forecast_hours
        self.weather_text = FETCHING_WEATHER_TEXT
        self.weather_is_summary = False
        self.series = default_series()
        self.holiday = ""
        self.location_note: str | None = None
        self.status: deque[StatusLine] = deque(maxlen=max_status_lines)
        self._logger: logging.Logger | None = None
        self._original_handlers: list[logging.Handler] = []

    def tick(self, now: datetime) -> None:
        self.now = now

    def apply_forecast(self, outcome: ForecastOutcome) -> None:
        """Show a fetched forecast, or degrade the weather text and keep prior series."""
        if not outcome.ok:
            self.weather_text = DEGRADED_WEATHER_TEXT.get(outcome.kind, UNAVAILABLE_WEATHER_TEXT)
            self.weather_is_summary = False
            return
        self.series = outcome.series
        self.weather_text = outcome.summary or "unknown"
        self.weather_is_summary = True
        coords = outcome.coordinates
        if coords.source == "fallback":
            self.location_note = (
                f"Location unavailable; showing forecast for "
                f"({coords.latitude:.4f}, {coords.longitude:.4f})."
            )
        else:
            self.location_note = None

    def apply_holiday(self, name: str | None) -> None:
        self.holiday = name or ""

    def attach_logger(self, logger: logging.Logger) -> None:
        """Replace console handlers with the status-feed handler."""
        self._logger = logger
        self._original_handlers = list(logger.handlers)
        logger.handlers = [_ScreenLogHandler(self)]

    def detach_logger(self) -> None:
        """Restore original logger handlers."""
        if self._logger is None:
            return
        self._logger.handlers = self._original_handlers
        self._logger = None
        self._original_handlers = []

    def record_status(self, *, severity: Severity, message: str) -> None:
        """Append a status line, folding an immediate repeat into a count."""
        if self.status and self.status[-1].message == message:
            self.status[-1].count += 1
            return
        self.status.append(StatusLine(ts=datetime.now(UTC), severity=severity, message=message))

    def state(self) -> ScreenState:
        return ScreenState(
            greeting=greeting_for(self.now),
            time_text=format_time(self.now),
            date_text=format_date(self.now),
            weather_text=self.weather_text,
            series=self.series,
            holiday=self.holiday,
            location_note=self.location_note,
            status=list(self.status),
        )

    def render(self) -> RenderableType:
        state = self.state()
        lines: list[RenderableType] = [
            Text(state.greeting, style="bold white"),
            Text(f"The time is {state.time_text}.", style="white"),
            Text(f"The date is {state.date_text}.", style="white"),
        ]
        if state.holiday:
            lines.append(Text(f"Happy {state.holiday}!", style="bold white"))
        if self.weather_is_summary:
            lines.append(Text(f"The weather is {state.weather_text}.", style="white"))
        else:
            lines.append(Text(state.weather_text, style="white"))

        hours = self.forecast_hours
        lines.append(
            render_line_chart(
                title=f"Temperature (Next {hours} Hours)",
                values=state.series.temperatures,
                labels=state.series.time_labels,
                suffix="°F",
            )
        )
        lines.append(
            render_line_chart(
                title=f"Precipitation (Next {hours} Hours)",
                values=state.series.precipitation,
                labels=state.series.time_labels,
                suffix="%",
            )
        )
        if state.location_note:
            lines.append(Text(state.location_note, style="dim"))
        for line in state.status:
            suffix = f" (x{line.count})" if line.count > 1 else ""
            lines.append(
                Text(
                    f"{line.ts:%H:%M:%S} {line.message}{suffix}",
                    style=STATUS_STYLES[line.severity],
                )
            )
        return Group(*lines)
