"""Logging configuration helpers for the StudySync toolkit."""

from __future__ import annotations

import logging
from logging import Logger

from rich.logging import RichHandler


def configure_logging(level: str | int = logging.WARNING) -> Logger:
    """Configure logging with a rich handler and return the package logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(name)s | %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
    logger = logging.getLogger("studysync")
    logger.setLevel(level)
    return logger
