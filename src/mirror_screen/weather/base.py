"""Provider-agnostic weather interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models import Coordinates
from .models import HourlyForecast


class WeatherProvider(ABC):
    """Base contract for hourly forecast providers used by the ingestor."""

    @abstractmethod
    async def fetch_hourly(
        self, coordinates: Coordinates, limit: int | None = None
    ) -> HourlyForecast:
        """Fetch and normalize the first `limit` hourly periods for a location."""

    @abstractmethod
    async def aclose(self) -> None:
        """Release provider resources."""
