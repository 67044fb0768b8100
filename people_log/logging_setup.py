"""Logging setup using Loguru."""

from __future__ import annotations

import os
import sys
from typing import Optional

from loguru import logger

from .schemas import PeopleLogError


LOG_LEVEL_ENV = "PEOPLE_LOG_LEVEL"
DEFAULT_LEVEL = "WARNING"
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"


def setup_logging(level: Optional[str] = None) -> str:
    """Route all log output to stderr at `level`.

    The level falls back to ``$PEOPLE_LOG_LEVEL`` and then to WARNING, so
    normal runs only show problems. Returns the level in use.
    """
    level = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LEVEL).upper()
    try:
        logger.level(level)
    except ValueError as exc:
        raise PeopleLogError(f"unknown log level {level!r}, expected one of {', '.join(LOG_LEVELS)}") from exc
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, colorize=False, diagnose=False)
    return level
