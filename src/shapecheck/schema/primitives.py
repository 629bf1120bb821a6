"""Scalar schemas: strings, numbers, booleans, dates, literals and enums."""

import math
import re
from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from fractions import Fraction
from typing import Any, ClassVar, Self
from urllib.parse import urlparse

from shapecheck.errors import SchemaDefinitionError
from shapecheck.schema.base import INVALID, ParseContext, Schema
from shapecheck.schema.issues import IssueCode, Path


# Deliberately loose; matches the common "local@domain.tld" shape
EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+'-]+@[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,}$")
UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def _is_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


# --- String ---


@dataclass(frozen=True, kw_only=True, eq=False)
class StringSchema(Schema):
    kind: ClassVar[str] = "string"

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        if not isinstance(value, str):
            return self._type_mismatch(value, path, ctx)
        return value

    def min_length(self, length: int, message: str | None = None) -> Self:
        return self._with_constraint(
            IssueCode.TOO_SMALL,
            lambda v: len(v) >= length,
            message or f"String must contain at least {length} character(s)",
            minimum=length,
            type="string",
        )

    def max_length(self, length: int, message: str | None = None) -> Self:
        return self._with_constraint(
            IssueCode.TOO_LARGE,
            lambda v: len(v) <= length,
            message or f"String must contain at most {length} character(s)",
            maximum=length,
            type="string",
        )

    def length(self, length: int, message: str | None = None) -> Self:
        message = message or f"String must contain exactly {length} character(s)"
        return self.min_length(length, message).max_length(length, message)

    def nonempty(self, message: str | None = None) -> Self:
        return self.min_length(1, message or "String must not be empty")

    def regex(self, pattern: str | re.Pattern[str], message: str | None = None) -> Self:
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
        return self._with_constraint(
            IssueCode.INVALID_STRING,
            lambda v: compiled.search(v) is not None,
            message or "Invalid",
            validation="regex",
            pattern=compiled.pattern,
        )

    def email(self, message: str | None = None) -> Self:
        return self._with_constraint(
            IssueCode.INVALID_STRING,
            lambda v: EMAIL_PATTERN.match(v) is not None,
            message or "Invalid email",
            validation="email",
        )

    def url(self, message: str | None = None) -> Self:
        return self._with_constraint(
            IssueCode.INVALID_STRING, _is_url, message or "Invalid url", validation="url"
        )

    def uuid(self, message: str | None = None) -> Self:
        return self._with_constraint(
            IssueCode.INVALID_STRING,
            lambda v: UUID_PATTERN.match(v) is not None,
            message or "Invalid uuid",
            validation="uuid",
        )

    def startswith(self, prefix: str, message: str | None = None) -> Self:
        return self._with_constraint(
            IssueCode.INVALID_STRING,
            lambda v: v.startswith(prefix),
            message or f"Invalid input: must start with {prefix!r}",
            validation="startswith",
        )

    def endswith(self, suffix: str, message: str | None = None) -> Self:
        return self._with_constraint(
            IssueCode.INVALID_STRING,
            lambda v: v.endswith(suffix),
            message or f"Invalid input: must end with {suffix!r}",
            validation="endswith",
        )

    def includes(self, substring: str, message: str | None = None) -> Self:
        return self._with_constraint(
            IssueCode.INVALID_STRING,
            lambda v: substring in v,
            message or f"Invalid input: must include {substring!r}",
            validation="includes",
        )


# --- Numbers ---


def _is_multiple(value: int | float, step: int | float) -> bool:
    if isinstance(value, int) and isinstance(step, int):
        return value % step == 0
    if isinstance(value, float) and not math.isfinite(value):
        return False
    try:
        quotient = value / step
    except OverflowError:
        # Ints beyond float range; decide exactly
        return (Fraction(value) / Fraction(step)).denominator == 1
    if not math.isfinite(quotient):
        return False
    return math.isclose(quotient, round(quotient), rel_tol=1e-9, abs_tol=1e-9)


class _OrderedBoundsMixin:
    """Comparison constraints shared by number and bigint schemas."""

    def gt(self, bound: Any, message: str | None = None) -> Self:
        return self._with_constraint(
            IssueCode.TOO_SMALL,
            lambda v: v > bound,
            message or f"Number must be greater than {bound}",
            minimum=bound,
            inclusive=False,
        )

    def gte(self, bound: Any, message: str | None = None) -> Self:
        return self._with_constraint(
            IssueCode.TOO_SMALL,
            lambda v: v >= bound,
            message or f"Number must be greater than or equal to {bound}",
            minimum=bound,
            inclusive=True,
        )

    def lt(self, bound: Any, message: str | None = None) -> Self:
        return self._with_constraint(
            IssueCode.TOO_LARGE,
            lambda v: v < bound,
            message or f"Number must be less than {bound}",
            maximum=bound,
            inclusive=False,
        )

    def lte(self, bound: Any, message: str | None = None) -> Self:
        return self._with_constraint(
            IssueCode.TOO_LARGE,
            lambda v: v <= bound,
            message or f"Number must be less than or equal to {bound}",
            maximum=bound,
            inclusive=True,
        )

    def min(self, bound: Any, message: str | None = None) -> Self:
        return self.gte(bound, message)

    def max(self, bound: Any, message: str | None = None) -> Self:
        return self.lte(bound, message)

    def positive(self, message: str | None = None) -> Self:
        return self.gt(0, message)

    def nonnegative(self, message: str | None = None) -> Self:
        return self.gte(0, message)

    def negative(self, message: str | None = None) -> Self:
        return self.lt(0, message)

    def nonpositive(self, message: str | None = None) -> Self:
        return self.lte(0, message)

    def multiple_of(self, step: int | float, message: str | None = None) -> Self:
        if step == 0:
            raise SchemaDefinitionError("multiple_of step must be non-zero")
        return self._with_constraint(
            IssueCode.NOT_MULTIPLE_OF,
            lambda v: _is_multiple(v, step),
            message or f"Number must be a multiple of {step}",
            multiple_of=step,
        )


@dataclass(frozen=True, kw_only=True, eq=False)
class NumberSchema(_OrderedBoundsMixin, Schema):
    """Accepts int and float values. Booleans and NaN are rejected."""

    kind: ClassVar[str] = "number"

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return self._type_mismatch(value, path, ctx)
        if isinstance(value, float) and math.isnan(value):
            return self._type_mismatch(value, path, ctx)
        return value

    def int(self, message: str | None = None) -> Self:
        return self._with_constraint(
            IssueCode.TYPE_MISMATCH,
            lambda v: isinstance(v, int) or v.is_integer(),
            message or "Expected integer, received float",
            expected="integer",
            received="float",
        )

    def finite(self, message: str | None = None) -> Self:
        return self._with_constraint(
            IssueCode.NOT_FINITE,
            lambda v: isinstance(v, int) or math.isfinite(v),
            message or "Number must be finite",
        )


@dataclass(frozen=True, kw_only=True, eq=False)
class BigIntSchema(_OrderedBoundsMixin, Schema):
    """Accepts arbitrary-precision integers only."""

    kind: ClassVar[str] = "bigint"

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        if isinstance(value, bool) or not isinstance(value, int):
            return self._type_mismatch(value, path, ctx)
        return value


@dataclass(frozen=True, kw_only=True, eq=False)
class BooleanSchema(Schema):
    kind: ClassVar[str] = "boolean"

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        if not isinstance(value, bool):
            return self._type_mismatch(value, path, ctx)
        return value


# --- Dates ---


def _comparable(value: date, bound: date) -> tuple[date, date]:
    # datetime and date don't compare directly
    if isinstance(value, datetime) and not isinstance(bound, datetime):
        return value.date(), bound
    if isinstance(bound, datetime) and not isinstance(value, datetime):
        return value, bound.date()
    return value, bound


@dataclass(frozen=True, kw_only=True, eq=False)
class DateSchema(Schema):
    kind: ClassVar[str] = "date"

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        if not isinstance(value, date):
            return self._type_mismatch(value, path, ctx)
        return value

    def min(self, bound: date, message: str | None = None) -> Self:
        def check(v: date) -> bool:
            left, right = _comparable(v, bound)
            return left >= right

        return self._with_constraint(
            IssueCode.TOO_SMALL,
            check,
            message or f"Date must be greater than or equal to {bound.isoformat()}",
            minimum=bound.isoformat(),
            type="date",
        )

    def max(self, bound: date, message: str | None = None) -> Self:
        def check(v: date) -> bool:
            left, right = _comparable(v, bound)
            return left <= right

        return self._with_constraint(
            IssueCode.TOO_LARGE,
            check,
            message or f"Date must be smaller than or equal to {bound.isoformat()}",
            maximum=bound.isoformat(),
            type="date",
        )


# --- Literals and enums ---


@dataclass(frozen=True, kw_only=True, eq=False)
class LiteralSchema(Schema):
    """Matches exactly one value; the type must match too (``1`` is not ``True``)."""

    kind: ClassVar[str] = "literal"

    value: Any

    @property
    def accepts_null(self) -> bool:
        return self.value is None

    @property
    def expected(self) -> str:
        return repr(self.value)

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        if type(value) is not type(self.value) or value != self.value:
            message = self.invalid_type_error or f"Invalid literal value, expected {self.value!r}"
            ctx.add_issue(
                IssueCode.TYPE_MISMATCH, path, message, expected=self.value, received=value
            )
            return INVALID
        return value


@dataclass(frozen=True, kw_only=True, eq=False)
class EnumSchema(Schema):
    """Matches one of a fixed set of strings."""

    kind: ClassVar[str] = "enum"

    values: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.values:
            raise SchemaDefinitionError("Enum schema requires at least one value")
        for v in self.values:
            if not isinstance(v, str):
                raise SchemaDefinitionError(f"Enum values must be strings, got {v!r}")

    @property
    def options(self) -> tuple[str, ...]:
        return self.values

    @property
    def expected(self) -> str:
        return " | ".join(repr(v) for v in self.values)

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        if not isinstance(value, str) or value not in self.values:
            message = (
                self.invalid_type_error
                or f"Invalid enum value. Expected {self.expected}, received {value!r}"
            )
            ctx.add_issue(
                IssueCode.TYPE_MISMATCH, path, message, expected=list(self.values), received=value
            )
            return INVALID
        return value

    def extract(self, values: Iterable[str]) -> Self:
        """Enum restricted to ``values``."""
        selected = tuple(values)
        self._check_members(selected)
        return replace(self, values=selected)

    def exclude(self, values: Iterable[str]) -> Self:
        """Enum without ``values``."""
        excluded = tuple(values)
        self._check_members(excluded)
        return replace(self, values=tuple(v for v in self.values if v not in excluded))

    def _check_members(self, values: tuple[str, ...]) -> None:
        unknown = [v for v in values if v not in self.values]
        if unknown:
            raise SchemaDefinitionError(f"Values not in enum: {', '.join(map(repr, unknown))}")


@dataclass(frozen=True, kw_only=True, eq=False)
class NativeEnumSchema(Schema):
    """Matches members of a Python ``Enum`` class, or their raw values.

    The output is always the enum member.
    """

    kind: ClassVar[str] = "native_enum"

    enum: type[Enum]

    @property
    def expected(self) -> str:
        return " | ".join(repr(member.value) for member in self.enum)

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        if isinstance(value, self.enum):
            return value
        for member in self.enum:
            if type(member.value) is type(value) and member.value == value:
                return member
        message = (
            self.invalid_type_error
            or f"Invalid enum value. Expected {self.expected}, received {value!r}"
        )
        ctx.add_issue(
            IssueCode.TYPE_MISMATCH,
            path,
            message,
            expected=[member.value for member in self.enum],
            received=value,
        )
        return INVALID


# --- Open types ---


@dataclass(frozen=True, kw_only=True, eq=False)
class InstanceOfSchema(Schema):
    kind: ClassVar[str] = "instance_of"

    cls: type

    @property
    def expected(self) -> str:
        return self.cls.__name__

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        if not isinstance(value, self.cls):
            message = self.invalid_type_error or f"Input not instance of {self.cls.__name__}"
            ctx.add_issue(
                IssueCode.TYPE_MISMATCH,
                path,
                message,
                expected=self.cls.__name__,
                received=type(value).__name__,
            )
            return INVALID
        return value


@dataclass(frozen=True, kw_only=True, eq=False)
class AnySchema(Schema):
    """Accepts any present value, including None."""

    kind: ClassVar[str] = "any"
    accepts_null: ClassVar[bool] = True

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        return value
