"""Map normalized forecast periods onto display-ready chart series."""

from __future__ import annotations

import math
from collections.abc import Sequence
from datetime import tzinfo

from .models import ChartSeries, ForecastPeriod

DEFAULT_CHART_POINTS = 12
DEFAULT_LABEL_EVERY = 4


def finite_or_zero(value: float | None) -> float:
    """Return the value when it is a finite number, else 0."""
    if value is None or isinstance(value, bool):
        return 0
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        return 0
    return value


def hour_label(period: ForecastPeriod, display_tz: tzinfo | None = None) -> str:
    """Start hour on the local clock, or in `display_tz` when one is given."""
    if period.start_time is None:
        return ""
    start = period.start_time.astimezone(display_tz)
    return f"{start.hour}:00"


def build_chart_series(
    periods: Sequence[ForecastPeriod],
    *,
    limit: int = DEFAULT_CHART_POINTS,
    label_every: int = DEFAULT_LABEL_EVERY,
    display_tz: tzinfo | None = None,
) -> ChartSeries:
    """Build the temperature/precipitation/label series for the first `limit` periods.

    Fewer periods than `limit` yield shorter series; nothing is padded. Only
    every `label_every`-th index carries a label so the x axis stays sparse.
    """
    selected = list(periods[:limit])
    return ChartSeries(
        temperatures=[finite_or_zero(p.temperature) for p in selected],
        precipitation=[finite_or_zero(p.probability_of_precipitation) for p in selected],
        time_labels=[
            hour_label(p, display_tz) if index % label_every == 0 else ""
            for index, p in enumerate(selected)
        ],
    )
