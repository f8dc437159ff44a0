"""Logging setup for the mirror screen process."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import UTC, datetime
from typing import Any

DEFAULT_LOGGER_NAME = "mirror_screen"


def _current_task_name() -> str | None:
    try:
        task = asyncio.current_task()
    except RuntimeError:
        return None
    return task.get_name() if task is not None else None


class JsonConsoleFormatter(logging.Formatter):
    """JSON lines tagged with the screen task (clock/forecast/holiday) that logged them."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        task_name = _current_task_name()
        if task_name is not None:
            event["task"] = task_name
        if record.exc_info:
            event["exception"] = self.formatException(record.exc_info)
        return json.dumps(event, default=str)


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: int | str = logging.INFO,
) -> logging.Logger:
    """Create the screen logger, or re-apply `level` (e.g. LOG_LEVEL) to it.

    Calling again after settings load only changes the level; the console
    handler is installed once.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False
    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(JsonConsoleFormatter())
    logger.addHandler(handler)
    return logger
