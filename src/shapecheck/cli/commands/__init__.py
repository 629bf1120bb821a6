"""CLI commands for shapecheck."""

from . import validate

__all__ = ["validate"]
