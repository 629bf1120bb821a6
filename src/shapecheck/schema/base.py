"""Schema base class and the recursive validation driver.

Every schema node is a frozen dataclass. Builder methods return a new node via
``dataclasses.replace`` and never mutate the receiver, so a schema can be
defined once and shared by any number of concurrent validation calls. All
per-call state lives in a ``ParseContext``.

Validation of a single node runs in a fixed order:

  1. presence   -> absent input takes the default, or is optional, or is required
  2. null       -> None is accepted only by nullable schemas
  3. kind       -> subclass ``_check`` verifies the runtime type and recurses
  4. constraints-> first failing constraint reports one issue
  5. refinements-> run only when everything above passed
"""

import copy
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Self

from loguru import logger

from shapecheck.schema.issues import Issue, IssueCode, Path, type_name
from shapecheck.schema.result import Failure, ParseResult, Success


# --- Sentinels ---


class _Missing:
    """Marker for an absent value (no key in the input object)."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Missing":
        return self

    def __deepcopy__(self, memo: dict) -> "_Missing":
        return self


MISSING: Any = _Missing()


class _Invalid:
    def __repr__(self) -> str:
        return "INVALID"


# Returned by _run/_check when the node failed; never escapes the engine.
INVALID: Any = _Invalid()


# --- Rules ---


@dataclass(frozen=True)
class Constraint:
    """A predicate checked after a node's kind check succeeds."""

    code: IssueCode
    check: Callable[[Any], bool]
    message: str
    params: dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Refinement:
    """A custom predicate checked after all structural and constraint checks pass."""

    check: Callable[[Any], bool]
    message: str
    path: Path = ()


# --- Per-call state ---


class ParseContext:
    """Collects issues for one validation call."""

    __slots__ = ("issues",)

    def __init__(self) -> None:
        self.issues: list[Issue] = []

    def add_issue(self, code: IssueCode, path: Path, message: str, **params: Any) -> None:
        self.issues.append(Issue(code=code, path=path, message=message, params=params))


# --- Base schema ---


@dataclass(frozen=True, kw_only=True, eq=False)
class Schema:
    """Base class for all schema nodes."""

    kind: ClassVar[str] = "schema"
    accepts_null: ClassVar[bool] = False

    is_optional: bool = False
    is_nullable: bool = False
    default_value: Any = MISSING
    default_factory: Callable[[], Any] | None = None
    constraints: tuple[Constraint, ...] = ()
    refinements: tuple[Refinement, ...] = ()
    description: str | None = None
    required_error: str | None = None
    invalid_type_error: str | None = None

    # --- Public API ---

    def parse(self, value: Any = MISSING) -> Any:
        """Validate ``value`` and return the narrowed output.

        Raises:
            ValidationError: carrying every issue found.
        """
        result = self.safe_parse(value)
        if isinstance(result, Failure):
            raise result.error
        return result.value

    def safe_parse(self, value: Any = MISSING) -> ParseResult:
        """Validate ``value`` without raising; failures are returned as data."""
        ctx = ParseContext()
        output = self._run(value, (), ctx)
        if ctx.issues:
            logger.debug(f"Validation against {self.kind} schema failed with {len(ctx.issues)} issue(s)")
            return Failure(tuple(ctx.issues))
        return Success(output)

    @property
    def has_default(self) -> bool:
        return self.default_factory is not None or self.default_value is not MISSING

    @property
    def expected(self) -> str:
        """Label used for the expected side of type mismatch messages."""
        return self.kind

    def children(self) -> Iterator[tuple[str, "Schema"]]:
        """Yield (label, child schema) pairs for nested schemas."""
        return iter(())

    # --- Modifiers ---

    def optional(self) -> Self:
        return replace(self, is_optional=True)

    def nullable(self) -> Self:
        return replace(self, is_nullable=True)

    def nullish(self) -> Self:
        """Accept both absent input and None."""
        return replace(self, is_optional=True, is_nullable=True)

    def default(self, value: Any) -> Self:
        """Substitute ``value`` for absent input.

        A callable is treated as a factory and invoked once per validation call.
        """
        if callable(value):
            return replace(self, default_value=MISSING, default_factory=value)
        return replace(self, default_value=value, default_factory=None)

    def describe(self, description: str) -> Self:
        return replace(self, description=description)

    def refine(
        self,
        check: Callable[[Any], bool],
        message: str = "Invalid input",
        path: Path = (),
    ) -> Self:
        """Add a custom predicate run after all other checks on this node pass.

        Args:
            check: Receives the node's output value, returns True when valid.
            message: Issue message when ``check`` returns False.
            path: Extra path segments appended to the node path for the issue,
                e.g. ``("confirm",)`` to report an object-level rule on a field.
        """
        refinement = Refinement(check=check, message=message, path=tuple(path))
        return replace(self, refinements=self.refinements + (refinement,))

    # --- Internals ---

    def _with_constraint(
        self, code: IssueCode, check: Callable[[Any], bool], message: str, **params: Any
    ) -> Self:
        constraint = Constraint(code=code, check=check, message=message, params=params)
        return replace(self, constraints=self.constraints + (constraint,))

    def _default(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        # Literal defaults are copied so outputs never alias schema state
        return copy.deepcopy(self.default_value)

    def _type_mismatch(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        received = type_name(value)
        message = self.invalid_type_error or f"Expected {self.expected}, received {received}"
        ctx.add_issue(
            IssueCode.TYPE_MISMATCH, path, message, expected=self.expected, received=received
        )
        return INVALID

    def _run(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        """Validate one node; returns the output, MISSING, or INVALID."""
        defaulted = False

        # --- Presence ---
        if value is MISSING:
            if self.has_default:
                value = self._default()
                defaulted = True
            elif self.is_optional:
                return MISSING
            else:
                ctx.add_issue(
                    IssueCode.REQUIRED_FIELD_MISSING, path, self.required_error or "Required"
                )
                return INVALID

        # --- Nullability ---
        if value is None and not self.accepts_null:
            if not self.is_nullable:
                message = self.invalid_type_error or f"Expected {self.expected}, received null"
                ctx.add_issue(
                    IssueCode.UNEXPECTED_NULL, path, message, expected=self.expected, received="null"
                )
                return INVALID
            if defaulted or not self.has_default:
                return None
            value = self._default()
            if value is None:
                return None

        # --- Kind and structure ---
        mark = len(ctx.issues)
        output = self._check(value, path, ctx)
        if output is INVALID or len(ctx.issues) > mark:
            return INVALID

        # --- Constraints ---
        for constraint in self.constraints:
            if not constraint.check(output):
                ctx.add_issue(constraint.code, path, constraint.message, **constraint.params)
                return INVALID

        # --- Refinements ---
        refined = True
        for refinement in self.refinements:
            if not refinement.check(output):
                ctx.add_issue(
                    IssueCode.CUSTOM_REFINEMENT_FAILED, path + refinement.path, refinement.message
                )
                refined = False

        return output if refined else INVALID

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        """Verify the runtime kind of a non-null value and recurse into children."""
        raise NotImplementedError


# --- Module-level entry points ---


def parse(schema: Schema, value: Any = MISSING) -> Any:
    """Validate ``value`` against ``schema``; raise ValidationError on failure."""
    return schema.parse(value)


def safe_parse(schema: Schema, value: Any = MISSING) -> ParseResult:
    """Validate ``value`` against ``schema``; return Success or Failure."""
    return schema.safe_parse(value)
