"""Location and locale lookups for the mirror screen."""

from __future__ import annotations

import locale
import logging
from abc import ABC, abstractmethod
from typing import Literal

from pydantic import ValidationError

from .config import Settings
from .exceptions import LocationError
from .models import Coordinates

PermissionStatus = Literal["granted", "denied"]

DEFAULT_COUNTRY_CODE = "US"


class LocationService(ABC):
    """Permission-gated, one-shot position reads."""

    @abstractmethod
    async def request_permission(self) -> PermissionStatus:
        """Ask for foreground location access."""

    @abstractmethod
    async def current_position(self) -> Coordinates:
        """Read the current position. Only valid after permission is granted."""


class ConfiguredLocationService(LocationService):
    """Location service backed by a configured latitude/longitude.

    Access is granted only when both values are present.
    """

    def __init__(self, latitude: float | None, longitude: float | None) -> None:
        self.latitude = latitude
        self.longitude = longitude

    @classmethod
    def from_settings(cls, settings: Settings) -> ConfiguredLocationService:
        return cls(settings.mirror_latitude, settings.mirror_longitude)

    async def request_permission(self) -> PermissionStatus:
        if self.latitude is None or self.longitude is None:
            return "denied"
        return "granted"

    async def current_position(self) -> Coordinates:
        if self.latitude is None or self.longitude is None:
            raise LocationError("No device location configured.")
        try:
            return Coordinates(latitude=self.latitude, longitude=self.longitude, source="device")
        except ValidationError as exc:
            raise LocationError(
                f"Configured location ({self.latitude}, {self.longitude}) is out of range."
            ) from exc


async def resolve_coordinates(
    service: LocationService,
    fallback: Coordinates,
    logger: logging.Logger | None = None,
) -> Coordinates:
    """Return the device position, or the fallback when permission is denied."""
    status = await service.request_permission()
    if status != "granted":
        if logger is not None:
            logger.info(
                "Location permission denied; using fallback coordinates (%.4f, %.4f)",
                fallback.latitude,
                fallback.longitude,
            )
        return fallback.model_copy(update={"source": "fallback"})
    return await service.current_position()


def fallback_coordinates(settings: Settings) -> Coordinates:
    return Coordinates(
        latitude=settings.fallback_latitude,
        longitude=settings.fallback_longitude,
        source="fallback",
    )


def device_country_code(settings: Settings) -> str:
    """Return the configured country code, else the locale territory, else US."""
    if settings.mirror_country_code:
        return settings.mirror_country_code
    language_code, _encoding = locale.getlocale()
    if language_code and "_" in language_code:
        territory = language_code.split("_", 1)[1].split("@")[0].split(".")[0]
        if len(territory) == 2 and territory.isalpha():
            return territory.upper()
    return DEFAULT_COUNTRY_CODE
