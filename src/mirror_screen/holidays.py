"""Public-holiday lookup against the Nager.Date API."""

from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Iterable
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from .config import Settings
from .exceptions import HolidayLookupError


class PublicHoliday(BaseModel):
    """One entry of the public-holiday list."""

    date: dt.date
    name: str
    local_name: str | None = None


def find_holiday(day: dt.date, holidays: Iterable[PublicHoliday]) -> str | None:
    """Return the name of the first holiday falling on `day`, if any."""
    for holiday in holidays:
        if holiday.date == day:
            return holiday.name
    return None


class HolidayLookup:
    """Fetches a year's public holidays and reports whether `day` is one."""

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._base_url = str(settings.holiday_api_base_url).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=settings.holiday_timeout_seconds)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def holidays_url(self, year: int, country_code: str) -> str:
        return f"{self._base_url}/publicholidays/{year}/{country_code.upper()}"

    async def lookup(self, day: dt.date, country_code: str) -> str | None:
        """Return today's holiday name, or None on no match or any failure."""
        try:
            holidays = await self.fetch_holidays(day.year, country_code)
        except HolidayLookupError as exc:
            self.logger.warning("Holiday lookup failed: %s", exc)
            return None
        name = find_holiday(day, holidays)
        if name is not None:
            self.logger.info("Holiday today (%s): %s", country_code, name)
        return name

    async def fetch_holidays(self, year: int, country_code: str) -> list[PublicHoliday]:
        url = self.holidays_url(year, country_code)
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise HolidayLookupError(
                f"Holiday fetch failed with status {exc.response.status_code} at {url}."
            ) from exc
        except httpx.HTTPError as exc:
            raise HolidayLookupError(
                f"Holiday fetch request failed at {url}: {type(exc).__name__}: {exc}"
            ) from exc

        # Unsupported countries come back as 204 with no body.
        if response.status_code == 204 or not response.content:
            raise HolidayLookupError(f"No holiday data for country {country_code!r}.")

        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise HolidayLookupError(f"Holiday fetch returned non-JSON response at {url}.") from exc
        if not isinstance(payload, list):
            raise HolidayLookupError(
                f"Holiday fetch returned unexpected payload type {type(payload).__name__}."
            )

        holidays: list[PublicHoliday] = []
        for item in payload:
            if not isinstance(item, dict):
                continue
            try:
                holidays.append(
                    PublicHoliday(
                        date=item.get("date"),
                        name=item.get("name"),
                        local_name=item.get("localName"),
                    )
                )
            except ValidationError:
                self.logger.debug("Skipping unparseable holiday entry: %r", item)
        return holidays
