"""Typed models for normalized forecasts and display-ready chart series."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from ..models import Coordinates

ForecastErrorKind = Literal["location", "network", "http_status", "malformed_payload"]


class ForecastPeriod(BaseModel):
    """Normalized hourly forecast period."""

    start_time: datetime | None = None
    temperature: float | None = None
    temperature_unit: str | None = None
    short_forecast: str | None = None
    probability_of_precipitation: float | None = None


class ChartSeries(BaseModel):
    """Index-aligned series consumed by the chart renderer."""

    temperatures: list[float] = Field(default_factory=list)
    precipitation: list[float] = Field(default_factory=list)
    time_labels: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_aligned(self) -> ChartSeries:
        lengths = {len(self.temperatures), len(self.precipitation), len(self.time_labels)}
        if len(lengths) != 1:
            raise ValueError(
                "Chart series must share one length: "
                f"temperatures={len(self.temperatures)} "
                f"precipitation={len(self.precipitation)} "
                f"time_labels={len(self.time_labels)}"
            )
        return self

    def __len__(self) -> int:
        return len(self.temperatures)


class HourlyForecast(BaseModel):
    """Result of one points + hourly-forecast fetch."""

    points_url: str
    forecast_url: str
    periods: list[ForecastPeriod]


@dataclass(frozen=True, slots=True)
class ForecastOk:
    """Successful ingestion: chart data plus the first period's short forecast."""

    series: ChartSeries
    summary: str
    coordinates: Coordinates
    ok: Literal[True] = True


@dataclass(frozen=True, slots=True)
class ForecastErr:
    """Failed ingestion, tagged with the failure class."""

    kind: ForecastErrorKind
    detail: str
    ok: Literal[False] = False


ForecastOutcome = ForecastOk | ForecastErr
