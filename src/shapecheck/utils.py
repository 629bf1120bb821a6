"""Utility functions for shapecheck."""

import sys

from loguru import logger


def setup_logging(log_level: str = "WARNING") -> None:
    """Replace loguru's default sink with a stderr sink at ``log_level``."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{function} - {message}",
        colorize=True,
    )
