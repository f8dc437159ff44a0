"""Forecast ingestion: location -> NWS hourly forecast -> chart series."""

from __future__ import annotations

import logging
from datetime import tzinfo

from ..exceptions import LocationError, WeatherProviderError
from ..location import LocationService, resolve_coordinates
from ..models import Coordinates
from .base import WeatherProvider
from .chart import DEFAULT_CHART_POINTS, DEFAULT_LABEL_EVERY, build_chart_series
from .models import ForecastErr, ForecastOk, ForecastOutcome


class ForecastIngestor:
    """Produces a tagged forecast outcome for the screen to display."""

    def __init__(
        self,
        *,
        provider: WeatherProvider,
        location_service: LocationService,
        fallback: Coordinates,
        logger: logging.Logger,
        chart_points: int = DEFAULT_CHART_POINTS,
        label_every: int = DEFAULT_LABEL_EVERY,
        display_tz: tzinfo | None = None,
    ) -> None:
        self.provider = provider
        self.location_service = location_service
        self.fallback = fallback
        self.logger = logger
        self.chart_points = chart_points
        self.label_every = label_every
        self.display_tz = display_tz

    async def ingest(self) -> ForecastOutcome:
        """Resolve location, fetch the hourly forecast, and shape it for charts."""
        try:
            coordinates = await resolve_coordinates(
                self.location_service, self.fallback, logger=self.logger
            )
        except LocationError as exc:
            self.logger.warning("Location read failed: %s", exc)
            return ForecastErr(kind="location", detail=str(exc))

        try:
            forecast = await self.provider.fetch_hourly(coordinates, limit=self.chart_points)
        except WeatherProviderError as exc:
            self.logger.warning("Weather ingestion failure (%s): %s", exc.category, exc)
            return ForecastErr(kind=exc.category, detail=str(exc))  # type: ignore[arg-type]

        series = build_chart_series(
            forecast.periods,
            limit=self.chart_points,
            label_every=self.label_every,
            display_tz=self.display_tz,
        )
        summary = forecast.periods[0].short_forecast or ""
        self.logger.info(
            "Forecast ingested: %d chart points for (%.4f, %.4f) source=%s",
            len(series),
            coordinates.latitude,
            coordinates.longitude,
            coordinates.source,
        )
        return ForecastOk(series=series, summary=summary, coordinates=coordinates)
