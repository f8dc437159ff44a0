"""Greeting and clock text for the screen header."""

from __future__ import annotations

from datetime import datetime

MORNING = "Good Morning!"
AFTERNOON = "Good Afternoon!"
EVENING = "Good Evening!"


def greeting_for_hour(hour: int) -> str:
    if not 0 <= hour < 24:
        raise ValueError(f"Hour must be in [0, 24), got {hour}.")
    if hour < 12:
        return MORNING
    if hour < 18:
        return AFTERNOON
    return EVENING


def greeting_for(now: datetime) -> str:
    return greeting_for_hour(now.hour)


def format_time(now: datetime) -> str:
    """12-hour clock with seconds, e.g. ``3:04:05 PM``."""
    hour = now.hour % 12 or 12
    return f"{hour}:{now:%M:%S %p}"


def format_date(now: datetime) -> str:
    """Long date, e.g. ``Monday, October 19, 2026``."""
    return f"{now:%A}, {now:%B} {now.day}, {now.year}"
