"""Schema engine for shapecheck.

Composable, immutable schema nodes plus the recursive validator that checks
untyped input against them.
"""

from shapecheck.schema.base import (
    MISSING,
    Constraint,
    Refinement,
    Schema,
    parse,
    safe_parse,
)
from shapecheck.schema.containers import (
    ArraySchema,
    MapSchema,
    RecordSchema,
    SetSchema,
    TupleSchema,
)
from shapecheck.schema.issues import Issue, IssueCode
from shapecheck.schema.objects import ObjectSchema
from shapecheck.schema.parser import (
    SchemaDocument,
    parse_picoschema,
    parse_schema_document,
)
from shapecheck.schema.primitives import (
    AnySchema,
    BigIntSchema,
    BooleanSchema,
    DateSchema,
    EnumSchema,
    InstanceOfSchema,
    LiteralSchema,
    NativeEnumSchema,
    NumberSchema,
    StringSchema,
)
from shapecheck.schema.result import Failure, ParseResult, Success
from shapecheck.schema.unions import DiscriminatedUnionSchema, UnionSchema

__all__ = [
    # Engine
    "MISSING",
    "Constraint",
    "Refinement",
    "Schema",
    "parse",
    "safe_parse",
    # Issues and results
    "Issue",
    "IssueCode",
    "Success",
    "Failure",
    "ParseResult",
    # Scalars
    "AnySchema",
    "BigIntSchema",
    "BooleanSchema",
    "DateSchema",
    "EnumSchema",
    "InstanceOfSchema",
    "LiteralSchema",
    "NativeEnumSchema",
    "NumberSchema",
    "StringSchema",
    # Structures
    "ObjectSchema",
    "ArraySchema",
    "TupleSchema",
    "RecordSchema",
    "MapSchema",
    "SetSchema",
    "UnionSchema",
    "DiscriminatedUnionSchema",
    # Parser
    "SchemaDocument",
    "parse_picoschema",
    "parse_schema_document",
]
