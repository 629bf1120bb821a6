"""
Custom exceptions for shapecheck.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from shapecheck.schema.issues import Issue


class ShapecheckError(Exception):
    """Base exception for all shapecheck errors."""

    pass


class SchemaDefinitionError(ShapecheckError):
    """Raised when a schema is built incorrectly (bad composition, bad document)."""

    pass


class ValidationError(ShapecheckError):
    """Raised by ``parse`` when input does not satisfy a schema.

    Carries the full issue list, never just the first issue.
    """

    def __init__(self, issues: Iterable["Issue"]):
        self.issues: tuple["Issue", ...] = tuple(issues)
        super().__init__(self._summary())

    def _summary(self) -> str:
        from shapecheck.formatting import format_issues

        return format_issues(self.issues)

    def flatten(self) -> dict[str, Any]:
        """Group messages into form-level and per-field lists."""
        from shapecheck.formatting import flatten

        return flatten(self.issues)

    def format(self) -> dict[str, Any]:
        """Nest messages in a tree mirroring the input shape."""
        from shapecheck.formatting import format_tree

        return format_tree(self.issues)
