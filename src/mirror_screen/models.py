"""Shared typed models for location handling."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

LocationSource = Literal["device", "fallback"]


class Coordinates(BaseModel):
    """A latitude/longitude pair plus where it came from."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    source: LocationSource = "device"
