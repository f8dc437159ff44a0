"""NWS (api.weather.gov) hourly forecast provider."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import httpx

from ..config import Settings
from ..exceptions import WeatherProviderError
from ..models import Coordinates
from .base import WeatherProvider
from .models import ForecastPeriod, HourlyForecast


class NWSWeatherProvider(WeatherProvider):
    """Fetches and normalizes hourly forecast periods from api.weather.gov."""

    provider_name = "nws"

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._base_url = str(settings.nws_base_url).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=settings.weather_timeout_seconds,
            headers={
                "Accept": "application/geo+json",
                "User-Agent": settings.nws_user_agent,
            },
        )

    async def __aenter__(self) -> NWSWeatherProvider:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def points_url(self, coordinates: Coordinates) -> str:
        return f"{self._base_url}/points/{coordinates.latitude:.4f},{coordinates.longitude:.4f}"

    async def fetch_hourly(
        self, coordinates: Coordinates, limit: int | None = None
    ) -> HourlyForecast:
        """Resolve the grid via points lookup, then fetch its hourly forecast.

        Only the first `limit` upstream periods are normalized; later entries
        are never inspected.
        """
        points_url = self.points_url(coordinates)
        points_payload = await self._request_json(points_url, context="points lookup")
        forecast_url = self._extract_forecast_url(points_payload)

        forecast_payload = await self._request_json(forecast_url, context="hourly forecast fetch")
        periods = self._normalize_periods(forecast_payload, limit=limit)
        self.logger.debug(
            "NWS hourly forecast fetched: %d periods from %s", len(periods), forecast_url
        )
        return HourlyForecast(points_url=points_url, forecast_url=forecast_url, periods=periods)

    async def _request_json(self, url: str, context: str) -> dict[str, Any]:
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise WeatherProviderError(
                f"NWS {context} failed with status {status} at {url}: {exc.response.text[:300]}",
                category="http_status",
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            raise WeatherProviderError(
                f"NWS {context} request failed at {url}: {type(exc).__name__}: {exc}",
                category="network",
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise WeatherProviderError(
                f"NWS {context} returned non-JSON response at {url}."
            ) from exc

        if not isinstance(payload, dict):
            raise WeatherProviderError(
                f"NWS {context} returned unexpected payload type "
                f"{type(payload).__name__} at {url}."
            )
        return payload

    @staticmethod
    def _extract_forecast_url(points_payload: dict[str, Any]) -> str:
        properties = points_payload.get("properties")
        if not isinstance(properties, dict):
            raise WeatherProviderError("NWS points payload missing 'properties' object.")

        forecast_url = properties.get("forecastHourly")
        if not isinstance(forecast_url, str) or not forecast_url.strip():
            raise WeatherProviderError(
                "NWS points payload missing expected 'forecastHourly' forecast URL."
            )
        return forecast_url.strip()

    def _normalize_periods(
        self, forecast_payload: dict[str, Any], limit: int | None = None
    ) -> list[ForecastPeriod]:
        properties = forecast_payload.get("properties")
        if not isinstance(properties, dict):
            raise WeatherProviderError("NWS forecast payload missing 'properties' object.")

        raw_periods = properties.get("periods")
        if not isinstance(raw_periods, list):
            raise WeatherProviderError("NWS forecast payload missing 'properties.periods' list.")
        if not raw_periods:
            raise WeatherProviderError("NWS forecast payload contained no forecast periods.")

        selected = raw_periods[:limit]
        if not any(isinstance(item, dict) for item in selected):
            raise WeatherProviderError(
                "NWS forecast payload periods were present but not parseable."
            )
        # Non-object entries keep their slot as blank periods.
        return [
            self._normalize_period(item if isinstance(item, dict) else {}) for item in selected
        ]

    def _normalize_period(self, period: dict[str, Any]) -> ForecastPeriod:
        precip: float | None = None
        precip_value = period.get("probabilityOfPrecipitation")
        if isinstance(precip_value, dict):
            precip = self._as_float(precip_value.get("value"))

        return ForecastPeriod(
            start_time=self._parse_datetime(period.get("startTime")),
            temperature=self._as_float(period.get("temperature")),
            temperature_unit=self._as_str(period.get("temperatureUnit")),
            short_forecast=self._as_str(period.get("shortForecast")),
            probability_of_precipitation=precip,
        )

    @staticmethod
    def _as_str(value: Any) -> str | None:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    @staticmethod
    def _as_float(value: Any) -> float | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return float(value)
        return None

    @staticmethod
    def _parse_datetime(value: Any) -> datetime | None:
        """Parse an ISO timestamp, keeping the upstream UTC offset."""
        if not isinstance(value, str):
            return None
        candidate = value.strip()
        if not candidate:
            return None
        if candidate.endswith("Z"):
            candidate = candidate[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(candidate)
        except ValueError:
            return None
