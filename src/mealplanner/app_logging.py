"""Logging configuration helpers."""

from __future__ import annotations

import logging
from typing import Optional

from rich.logging import RichHandler

from mealplanner.config.settings import get_settings

LOGGER_NAME = "mealplanner"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a single rich handler to the package logger.

    Args:
        level: Level name such as "DEBUG". Defaults to the configured level.

    Returns:
        The package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel((level or get_settings().logging.level).upper())
    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return logger
    handler = RichHandler(show_path=False, rich_tracebacks=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
