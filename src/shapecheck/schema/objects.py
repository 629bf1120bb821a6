"""Object schemas and their composition operators.

Composition never mutates: pick/omit/extend/merge/partial/required each return
a new ObjectSchema. Operators that change the field set drop object-level
refinements, since those predicates were written against the old shape.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, ClassVar, Literal, Self, TypeAlias

from shapecheck.errors import SchemaDefinitionError
from shapecheck.schema.base import INVALID, MISSING, ParseContext, Schema
from shapecheck.schema.issues import IssueCode, Path
from shapecheck.schema.primitives import EnumSchema

UnknownKeys: TypeAlias = Literal["strip", "passthrough", "strict"]

UNKNOWN_KEY_POLICIES: frozenset[str] = frozenset({"strip", "passthrough", "strict"})


@dataclass(frozen=True, kw_only=True, eq=False)
class ObjectSchema(Schema):
    """A mapping with declared fields.

    Unknown input keys are handled per ``unknown_keys``:
      strip       -> dropped from the output (default)
      passthrough -> copied to the output verbatim
      strict      -> one unrecognized_key issue per extra key
    """

    kind: ClassVar[str] = "object"

    fields: Mapping[str, Schema]
    unknown_keys: UnknownKeys = "strip"

    def __post_init__(self) -> None:
        if self.unknown_keys not in UNKNOWN_KEY_POLICIES:
            raise SchemaDefinitionError(f"Unknown key policy must be one of {sorted(UNKNOWN_KEY_POLICIES)}")
        for name, schema in self.fields.items():
            if not isinstance(schema, Schema):
                raise SchemaDefinitionError(f"Field {name!r} is not a schema: {schema!r}")
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @property
    def shape(self) -> Mapping[str, Schema]:
        return self.fields

    def children(self) -> Iterator[tuple[str, Schema]]:
        return iter(self.fields.items())

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        if not isinstance(value, Mapping):
            return self._type_mismatch(value, path, ctx)

        output: dict[str, Any] = {}
        valid = True

        for key, schema in self.fields.items():
            result = schema._run(value.get(key, MISSING), path + (key,), ctx)
            if result is INVALID:
                valid = False
            elif result is not MISSING:
                output[key] = result

        # --- Unknown keys ---
        # Trigger: input has keys the schema does not declare
        # Why: policy decides whether extras are dropped, kept, or reported
        # Outcome: strict reports every extra key, not just the first
        if self.unknown_keys != "strip":
            for key in value:
                if key in self.fields:
                    continue
                if self.unknown_keys == "passthrough":
                    output[key] = value[key]
                else:
                    ctx.add_issue(
                        IssueCode.UNRECOGNIZED_KEY,
                        path + (key,),
                        f"Unrecognized key: {key!r}",
                        key=key,
                    )
                    valid = False

        return output if valid else INVALID

    # --- Unknown key policy ---

    def passthrough(self) -> Self:
        return replace(self, unknown_keys="passthrough")

    def strict(self) -> Self:
        return replace(self, unknown_keys="strict")

    def strip(self) -> Self:
        return replace(self, unknown_keys="strip")

    # --- Composition ---

    def pick(self, *keys: str) -> Self:
        """Object restricted to ``keys``."""
        self._check_declared(keys)
        return self._reshape({k: s for k, s in self.fields.items() if k in keys})

    def omit(self, *keys: str) -> Self:
        """Object without ``keys``."""
        self._check_declared(keys)
        return self._reshape({k: s for k, s in self.fields.items() if k not in keys})

    def extend(self, fields: Mapping[str, Schema]) -> Self:
        """Object with ``fields`` added; same-named fields are replaced."""
        return self._reshape({**self.fields, **fields})

    def merge(self, other: "ObjectSchema") -> Self:
        """Object with ``other``'s fields and unknown key policy layered on top."""
        if not isinstance(other, ObjectSchema):
            raise SchemaDefinitionError(f"Can only merge object schemas, got {other.kind}")
        return replace(
            self._reshape({**self.fields, **other.fields}), unknown_keys=other.unknown_keys
        )

    def partial(self, *keys: str) -> Self:
        """Make the named fields (or every field when none are named) optional."""
        self._check_declared(keys)
        selected = keys or tuple(self.fields)
        return self._reshape(
            {k: s.optional() if k in selected else s for k, s in self.fields.items()}
        )

    def required(self, *keys: str) -> Self:
        """Make the named fields (or every field when none are named) required."""
        self._check_declared(keys)
        selected = keys or tuple(self.fields)
        return self._reshape(
            {
                k: replace(s, is_optional=False) if k in selected else s
                for k, s in self.fields.items()
            }
        )

    def deep_partial(self) -> Self:
        """Make every field optional, recursing into nested object fields."""
        fields: dict[str, Schema] = {}
        for key, schema in self.fields.items():
            if isinstance(schema, ObjectSchema):
                schema = schema.deep_partial()
            fields[key] = schema.optional()
        return self._reshape(fields)

    def keyof(self) -> EnumSchema:
        """Enum schema of this object's field names."""
        return EnumSchema(values=tuple(self.fields))

    def _reshape(self, fields: Mapping[str, Schema]) -> Self:
        return replace(self, fields=fields, refinements=())

    def _check_declared(self, keys: Iterable[str]) -> None:
        unknown = [k for k in keys if k not in self.fields]
        if unknown:
            raise SchemaDefinitionError(f"Keys not declared on object schema: {', '.join(unknown)}")
