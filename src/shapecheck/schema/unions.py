"""Union and discriminated union schemas."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar

from shapecheck.errors import SchemaDefinitionError
from shapecheck.schema.base import INVALID, MISSING, ParseContext, Schema
from shapecheck.schema.issues import IssueCode, Path
from shapecheck.schema.objects import ObjectSchema
from shapecheck.schema.primitives import EnumSchema, LiteralSchema


@dataclass(frozen=True, kw_only=True, eq=False)
class UnionSchema(Schema):
    """Matches the first option, in declared order, that validates."""

    kind: ClassVar[str] = "union"

    options: tuple[Schema, ...]

    def __post_init__(self) -> None:
        if len(self.options) < 2:
            raise SchemaDefinitionError("Union schema requires at least two options")

    @property
    def accepts_null(self) -> bool:
        return any(option.accepts_null or option.is_nullable for option in self.options)

    @property
    def expected(self) -> str:
        return " | ".join(option.expected for option in self.options)

    def children(self) -> Iterator[tuple[str, Schema]]:
        return iter((f"<option {index}>", option) for index, option in enumerate(self.options))

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        branch_issues = []
        for option in self.options:
            # Each attempt gets its own buffer so failed branches don't leak issues
            attempt = ParseContext()
            output = option._run(value, path, attempt)
            if not attempt.issues:
                return output
            branch_issues.append(tuple(attempt.issues))

        ctx.add_issue(
            IssueCode.NO_UNION_BRANCH_MATCHED,
            path,
            self.invalid_type_error or "Invalid input: no union option matched",
            union_issues=branch_issues,
        )
        return INVALID


def _discriminator_values(schema: Schema) -> tuple[Any, ...]:
    if isinstance(schema, LiteralSchema):
        return (schema.value,)
    if isinstance(schema, EnumSchema):
        return schema.values
    raise SchemaDefinitionError(
        f"Discriminator field must be a literal or enum schema, got {schema.kind}"
    )


@dataclass(frozen=True, kw_only=True, eq=False)
class DiscriminatedUnionSchema(Schema):
    """A union of object schemas selected by the value of a shared literal field.

    The branch lookup table is built once, so validation touches exactly one
    branch regardless of how many options are declared.
    """

    kind: ClassVar[str] = "discriminated_union"

    discriminator: str
    options: tuple[ObjectSchema, ...]
    # Keyed by (type, value) so 1 and True select different branches
    branches: Mapping[tuple[type, Any], ObjectSchema] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        branches: dict[tuple[type, Any], ObjectSchema] = {}
        for option in self.options:
            if not isinstance(option, ObjectSchema):
                raise SchemaDefinitionError(
                    f"Discriminated union options must be object schemas, got {option.kind}"
                )
            disc_schema = option.fields.get(self.discriminator)
            if disc_schema is None:
                raise SchemaDefinitionError(
                    f"Option is missing discriminator field {self.discriminator!r}"
                )
            for disc_value in _discriminator_values(disc_schema):
                key = (type(disc_value), disc_value)
                if key in branches:
                    raise SchemaDefinitionError(
                        f"Duplicate discriminator value {disc_value!r} for {self.discriminator!r}"
                    )
                branches[key] = option
        object.__setattr__(self, "branches", MappingProxyType(branches))

    @property
    def expected(self) -> str:
        return "object"

    def children(self) -> Iterator[tuple[str, Schema]]:
        return iter((f"{self.discriminator}={value!r}", branch) for (_, value), branch in self.branches.items())

    def _select(self, disc_value: Any) -> ObjectSchema | None:
        if disc_value is MISSING:
            return None
        try:
            return self.branches.get((type(disc_value), disc_value))
        except TypeError:
            # Unhashable values, including tuples that hold a list
            return None

    def _check(self, value: Any, path: Path, ctx: ParseContext) -> Any:
        if not isinstance(value, Mapping):
            return self._type_mismatch(value, path, ctx)

        disc_value = value.get(self.discriminator, MISSING)
        branch = self._select(disc_value)
        if branch is None:
            options = [value for _, value in self.branches]
            expected = " | ".join(repr(v) for v in options)
            ctx.add_issue(
                IssueCode.UNRECOGNIZED_DISCRIMINATOR,
                path + (self.discriminator,),
                f"Invalid discriminator value. Expected {expected}",
                options=options,
                received=None if disc_value is MISSING else disc_value,
            )
            return INVALID

        return branch._run(value, path, ctx)
