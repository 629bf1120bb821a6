"""shapecheck - composable schema validation for untyped data.

Usage:
    import shapecheck as sc

    User = sc.object({
        "username": sc.string(),
        "age": sc.number().gt(0).lt(100),
    })

    User.parse({"username": "ada", "age": 36})
    result = User.safe_parse({"username": "ada", "age": 150})
    if not result.success:
        print(sc.format_issues(result.issues))
"""

__version__ = "0.1.0"

from shapecheck.errors import SchemaDefinitionError, ShapecheckError, ValidationError
from shapecheck.formatting import flatten, format_issues, format_tree
from shapecheck.schema import (
    MISSING,
    Failure,
    Issue,
    IssueCode,
    ParseResult,
    Schema,
    Success,
    parse,
    safe_parse,
)
from shapecheck.schema.factories import (
    any,
    array,
    bigint,
    boolean,
    date,
    discriminated_union,
    enum,
    instance_of,
    literal,
    map,
    native_enum,
    number,
    object,
    record,
    set,
    string,
    tuple,
    union,
)

__all__ = [
    "__version__",
    # Entry points
    "parse",
    "safe_parse",
    "MISSING",
    "Schema",
    # Results and issues
    "Success",
    "Failure",
    "ParseResult",
    "Issue",
    "IssueCode",
    # Errors
    "ShapecheckError",
    "SchemaDefinitionError",
    "ValidationError",
    # Formatting
    "format_issues",
    "flatten",
    "format_tree",
    # Factories
    "any",
    "array",
    "bigint",
    "boolean",
    "date",
    "discriminated_union",
    "enum",
    "instance_of",
    "literal",
    "map",
    "native_enum",
    "number",
    "object",
    "record",
    "set",
    "string",
    "tuple",
    "union",
]
