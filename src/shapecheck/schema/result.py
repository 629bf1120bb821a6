"""Parse results returned by ``safe_parse``."""

from dataclasses import dataclass
from typing import Any, TypeAlias

from shapecheck.errors import ValidationError
from shapecheck.schema.issues import Issue


@dataclass(frozen=True)
class Success:
    """Validation succeeded; ``value`` is the narrowed output."""

    value: Any

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Validation failed; ``issues`` lists every problem in traversal order."""

    issues: tuple[Issue, ...]

    @property
    def success(self) -> bool:
        return False

    @property
    def error(self) -> ValidationError:
        """The issues wrapped as the exception ``parse`` would raise."""
        return ValidationError(self.issues)


ParseResult: TypeAlias = Success | Failure
