"""NWS hourly forecast ingestion and chart preparation."""

from .base import WeatherProvider
from .chart import build_chart_series
from .ingest import ForecastIngestor
from .models import ChartSeries, ForecastErr, ForecastOk, ForecastOutcome, ForecastPeriod
from .nws import NWSWeatherProvider

__all__ = [
    "ChartSeries",
    "ForecastErr",
    "ForecastIngestor",
    "ForecastOk",
    "ForecastOutcome",
    "ForecastPeriod",
    "NWSWeatherProvider",
    "WeatherProvider",
    "build_chart_series",
]
