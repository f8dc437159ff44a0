"""Typed state models for the mirror screen presentation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Literal

from ..weather.models import ChartSeries

Severity = Literal["INFO", "WARN", "ERROR", "CRITICAL"]


@dataclass(slots=True)
class StatusLine:
    """One log line shown in the screen's status feed."""

    ts: datetime
    severity: Severity
    message: str
    count: int = 1

    def __post_init__(self) -> None:
        if self.ts.tzinfo is None:
            self.ts = self.ts.replace(tzinfo=UTC)


@dataclass(slots=True)
class ScreenState:
    """Render-boundary snapshot of everything the screen shows."""

    greeting: str
    time_text: str
    date_text: str
    weather_text: str
    series: ChartSeries
    holiday: str = ""
    location_note: str | None = None
    status: list[StatusLine] = field(default_factory=list)
