"""Application exception classes."""

from __future__ import annotations


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class WeatherProviderError(Exception):
    """Raised when weather provider requests or normalization fail."""

    def __init__(
        self,
        message: str,
        *,
        category: str = "malformed_payload",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.status_code = status_code


class LocationError(Exception):
    """Raised when a granted location cannot be read."""


class HolidayLookupError(Exception):
    """Raised when the public-holiday list cannot be fetched or parsed."""
