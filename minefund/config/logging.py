"""
Logging configuration.

Configures the loguru logger: stderr sink plus an optional rotated file.
"""

import sys

from loguru import logger

from minefund.config.settings import settings


def setup_logging() -> None:
    """Configure logger with file rotation."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)

    if settings.log_file:
        logger.add(
            settings.log_file,
            rotation=settings.log_rotation,
            retention=settings.log_retention,
            level=settings.log_level,
            encoding="utf-8",
        )

    logger.info(
        "Logging configured",
        extra={"level": settings.log_level, "file": settings.log_file},
    )
