"""Issue model for shapecheck validation.

An issue is one validation failure, located by a path into the input and
carrying a human-readable message. Issues are the stable, documented output of
the engine: formatters and callers consume them without reaching into schema
internals.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeAlias


class IssueCode(str, Enum):
    """Machine-readable category of a validation issue."""

    REQUIRED_FIELD_MISSING = "required_field_missing"
    UNEXPECTED_NULL = "unexpected_null"
    TYPE_MISMATCH = "type_mismatch"
    TOO_SMALL = "too_small"
    TOO_LARGE = "too_large"
    INVALID_LENGTH = "invalid_length"
    UNRECOGNIZED_KEY = "unrecognized_key"
    UNRECOGNIZED_DISCRIMINATOR = "unrecognized_discriminator"
    NO_UNION_BRANCH_MATCHED = "no_union_branch_matched"
    CUSTOM_REFINEMENT_FAILED = "custom_refinement_failed"
    # Constraint-specific codes
    INVALID_STRING = "invalid_string"
    NOT_MULTIPLE_OF = "not_multiple_of"
    NOT_FINITE = "not_finite"


PathSegment: TypeAlias = str | int
Path: TypeAlias = tuple[PathSegment, ...]


@dataclass(frozen=True)
class Issue:
    """A single validation failure.

    Attributes:
        code: The issue category.
        path: Location of the failing value, as a sequence of object keys and
            sequence indices. The empty tuple is the root value.
        message: Display message.
        params: Code-specific details (e.g. ``expected``/``received`` for type
            mismatches, ``minimum``/``maximum`` for bounds, ``union_issues`` for
            failed unions).
    """

    code: IssueCode
    path: Path
    message: str
    params: dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict[str, Any]:
        """Render as a plain dict suitable for JSON output."""
        data: dict[str, Any] = {
            "code": self.code.value,
            "path": list(self.path),
            "message": self.message,
        }
        for key, value in self.params.items():
            if key == "union_issues":
                data[key] = [[issue.to_dict() for issue in branch] for branch in value]
            else:
                data[key] = value
        return data


def type_name(value: Any) -> str:
    """Describe the runtime kind of a value for type mismatch messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "nan" if value != value else "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, tuple):
        return "tuple"
    if isinstance(value, (set, frozenset)):
        return "set"
    return type(value).__name__
