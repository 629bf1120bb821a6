"""Collection schemas: arrays, tuples, records, maps and sets.

Size bounds on arrays and sets are part of the structural check: they are
reported alongside element issues rather than after them.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Self

from shapecheck.schema.base import INVALID, Constraint, ParseContext, Schema
from shapecheck.schema.issues import IssueCode, Path
from shapecheck.schema.primitives import StringSchema


@dataclass(frozen=True, kw_only=True, eq=False)
class _SizedSchema(Schema):
    """Shared size-bound handling. Bounds are checked against ``len(value)``."""

    unit: ClassVar[str] = "element(s)"
    label: ClassVar[str] = "Collection"

    size_constraints: tuple[Constraint, ...] = field(default=())

    def _with_size(self, code: IssueCode, check: Any, message: str, **params: Any) -> Self:
        constraint = Constraint(code=code, check=check, message=message, params=params)
        return replace(self, size_constraints=self.size_constraints + (constraint,))

    def _min(self, size: int, message: str | None) -> Self:
        return self._with_size(
            IssueCode.TOO_SMALL,
            lambda n: n >= size,
            message or f"{self.label} must contain at least {size} {self.unit}",
            minimum=size,
            type=self.kind,
        )

    def _max(self, size: int, message: str | None) -> Self:
        return self._with_size(
            IssueCode.TOO_LARGE,
            lambda n: n <= size,
            message or f"{self.label} must contain at most {size} {self.unit}",
            maximum=size,
            type=self.kind,
        )

    def nonempty(self, message: str | None = None) -> Self:
        return self._min(1, message or f"{self.label} must contain at least 1 {self.unit}")

    def _check_size(self, size: int, path: Path, ctx: ParseContext) -> None:
        for constraint in self.size_constraints:
            if not constraint.check(size):
                ctx.add_issue(constraint.code, path, constraint.message, **constraint.params)
                return


# --- Array ---


@dataclass(frozen=True, kw_only=True, eq=False)
class ArraySchema(_SizedSchema):
    """A list (or tuple) whose elements all match ``element``."""

    kind: ClassVar[str] = "array"
    label: ClassVar[str] = "Array"

    element: Schema

    def children(self) -> Iterator[tuple[str, Schema]]:
        return iter([("[]", self.element)])

    def min_length(self, length: int, message: str | None = None) -> Self:
        return self._min(length, message)

    def max_length(self, length: int, message: str | None = None) -> Self:
        return self._max(length, message)

    def length(self, length: int, message: str | None = None) -> Self:
        message = message or f"Array must contain exactly {length} {self.unit}"
        return self._min(length, message)._max(length, message)

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        if not isinstance(value, (list, tuple)):
            return self._type_mismatch(value, path, ctx)

        self._check_size(len(value), path, ctx)
        items = [self.element._run(item, path + (index,), ctx) for index, item in enumerate(value)]
        if any(item is INVALID for item in items):
            return INVALID
        return tuple(items) if isinstance(value, tuple) else items


# --- Tuple ---


@dataclass(frozen=True, kw_only=True, eq=False)
class TupleSchema(Schema):
    """Fixed positional items, optionally followed by any number of ``rest`` items."""

    kind: ClassVar[str] = "tuple"

    items: tuple[Schema, ...]
    rest_schema: Schema | None = None

    def children(self) -> Iterator[tuple[str, Schema]]:
        labelled = [(f"[{index}]", schema) for index, schema in enumerate(self.items)]
        if self.rest_schema is not None:
            labelled.append(("[...]", self.rest_schema))
        return iter(labelled)

    def rest(self, schema: Schema) -> Self:
        return replace(self, rest_schema=schema)

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        if not isinstance(value, (list, tuple)):
            return self._type_mismatch(value, path, ctx)

        arity = len(self.items)
        too_few = len(value) < arity
        too_many = self.rest_schema is None and len(value) > arity
        if too_few or too_many:
            qualifier = "at least " if self.rest_schema is not None else ""
            ctx.add_issue(
                IssueCode.INVALID_LENGTH,
                path,
                f"Tuple must contain {qualifier}{arity} item(s), received {len(value)}",
                expected=arity,
                received=len(value),
            )
            return INVALID

        outputs = []
        for index, item in enumerate(value):
            schema = self.items[index] if index < arity else self.rest_schema
            outputs.append(schema._run(item, path + (index,), ctx))
        if any(item is INVALID for item in outputs):
            return INVALID
        return tuple(outputs) if isinstance(value, tuple) else outputs


# --- Records and maps ---


@dataclass(frozen=True, kw_only=True, eq=False)
class RecordSchema(Schema):
    """A mapping with arbitrary keys; every key and value is validated."""

    kind: ClassVar[str] = "record"

    key_schema: Schema = field(default_factory=StringSchema)
    value_schema: Schema

    def children(self) -> Iterator[tuple[str, Schema]]:
        return iter([("<key>", self.key_schema), ("<value>", self.value_schema)])

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        if not isinstance(value, Mapping):
            return self._type_mismatch(value, path, ctx)

        output: dict[Any, Any] = {}
        valid = True
        for key, item in value.items():
            key_out = self.key_schema._run(key, path + (key,), ctx)
            item_out = self.value_schema._run(item, path + (key,), ctx)
            if key_out is INVALID or item_out is INVALID:
                valid = False
                continue
            output[key_out] = item_out
        return output if valid else INVALID


@dataclass(frozen=True, kw_only=True, eq=False)
class MapSchema(RecordSchema):
    """Like a record, but with a mandatory key schema of any kind."""

    kind: ClassVar[str] = "map"

    key_schema: Schema


# --- Set ---


@dataclass(frozen=True, kw_only=True, eq=False)
class SetSchema(_SizedSchema):
    """A set or frozenset whose elements all match ``element``.

    Element issues are located by iteration index.
    """

    kind: ClassVar[str] = "set"
    label: ClassVar[str] = "Set"
    unit: ClassVar[str] = "item(s)"

    element: Schema

    def children(self) -> Iterator[tuple[str, Schema]]:
        return iter([("{}", self.element)])

    def min_size(self, size: int, message: str | None = None) -> Self:
        return self._min(size, message)

    def max_size(self, size: int, message: str | None = None) -> Self:
        return self._max(size, message)

    def size(self, size: int, message: str | None = None) -> Self:
        message = message or f"Set must contain exactly {size} {self.unit}"
        return self._min(size, message)._max(size, message)

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        if not isinstance(value, (set, frozenset)):
            return self._type_mismatch(value, path, ctx)

        self._check_size(len(value), path, ctx)
        items = [self.element._run(item, path + (index,), ctx) for index, item in enumerate(value)]
        if any(item is INVALID for item in items):
            return INVALID
        return frozenset(items) if isinstance(value, frozenset) else set(items)
