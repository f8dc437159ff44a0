"""Typed settings loader for the mirror screen."""

from __future__ import annotations

from typing import Any, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AnyUrl, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    nws_base_url: AnyUrl = Field(default="https://api.weather.gov", alias="NWS_BASE_URL")
    nws_user_agent: str = Field(
        default="mirror-screen/0.1 (contact: mirror@example.com)",
        alias="NWS_USER_AGENT",
    )
    holiday_api_base_url: AnyUrl = Field(
        default="https://date.nager.at/api/v3",
        alias="HOLIDAY_API_BASE_URL",
    )
    weather_timeout_seconds: float = Field(default=15.0, alias="WEATHER_TIMEOUT_SECONDS")
    holiday_timeout_seconds: float = Field(default=10.0, alias="HOLIDAY_TIMEOUT_SECONDS")

    mirror_latitude: float | None = Field(default=None, alias="MIRROR_LATITUDE")
    mirror_longitude: float | None = Field(default=None, alias="MIRROR_LONGITUDE")
    fallback_latitude: float = Field(default=40.7128, alias="FALLBACK_LATITUDE")
    fallback_longitude: float = Field(default=-74.0060, alias="FALLBACK_LONGITUDE")
    mirror_country_code: str | None = Field(default=None, alias="MIRROR_COUNTRY_CODE")
    display_timezone: str | None = Field(default=None, alias="DISPLAY_TIMEZONE")

    forecast_hours: int = Field(default=12, alias="FORECAST_HOURS")
    label_every: int = Field(default=4, alias="LABEL_EVERY")
    clock_tick_seconds: float = Field(default=1.0, alias="CLOCK_TICK_SECONDS")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    @field_validator(
        "mirror_latitude",
        "mirror_longitude",
        "mirror_country_code",
        "display_timezone",
        mode="before",
    )
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("mirror_country_code")
    @classmethod
    def normalize_country_code(cls, value: str | None) -> str | None:
        if value is None:
            return None
        code = value.strip().upper()
        if len(code) != 2 or not code.isalpha():
            raise ValueError("MIRROR_COUNTRY_CODE must be a two-letter ISO 3166-1 code.")
        return code

    @model_validator(mode="after")
    def validate_values(self) -> Settings:
        if not self.nws_user_agent.strip():
            raise ValueError("NWS_USER_AGENT must not be empty.")
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if self.holiday_timeout_seconds <= 0:
            raise ValueError("HOLIDAY_TIMEOUT_SECONDS must be > 0.")
        if self.forecast_hours <= 0:
            raise ValueError("FORECAST_HOURS must be > 0.")
        if self.label_every <= 0:
            raise ValueError("LABEL_EVERY must be > 0.")
        if self.clock_tick_seconds <= 0:
            raise ValueError("CLOCK_TICK_SECONDS must be > 0.")

        has_lat = self.mirror_latitude is not None
        has_lon = self.mirror_longitude is not None
        if has_lat != has_lon:
            raise ValueError("MIRROR_LATITUDE and MIRROR_LONGITUDE must be set together.")
        for name, lat in (
            ("MIRROR_LATITUDE", self.mirror_latitude),
            ("FALLBACK_LATITUDE", self.fallback_latitude),
        ):
            if lat is not None and not (-90 <= lat <= 90):
                raise ValueError(f"{name} must be between -90 and 90.")
        for name, lon in (
            ("MIRROR_LONGITUDE", self.mirror_longitude),
            ("FALLBACK_LONGITUDE", self.fallback_longitude),
        ):
            if lon is not None and not (-180 <= lon <= 180):
                raise ValueError(f"{name} must be between -180 and 180.")

        if self.display_timezone is not None:
            try:
                ZoneInfo(self.display_timezone)
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise ValueError(
                    f"DISPLAY_TIMEZONE {self.display_timezone!r} is not a known IANA zone."
                ) from exc
        return self

    @property
    def display_tz(self) -> ZoneInfo | None:
        if self.display_timezone is None:
            return None
        return ZoneInfo(self.display_timezone)

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary suitable for a startup log line."""
        return {
            "nws_base_url": str(self.nws_base_url),
            "holiday_api_base_url": str(self.holiday_api_base_url),
            "weather_timeout_seconds": self.weather_timeout_seconds,
            "holiday_timeout_seconds": self.holiday_timeout_seconds,
            "device_location_configured": self.mirror_latitude is not None,
            "country_code": self.mirror_country_code,
            "display_timezone": self.display_timezone,
            "forecast_hours": self.forecast_hours,
        }


def load_settings(**overrides: Any) -> Settings:
    """Load and validate settings, raising ConfigError on failure.

    Keyword overrides use the environment aliases and win over env/.env values.
    """
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
