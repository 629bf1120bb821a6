"""Picoschema parser for shapecheck.

Builds engine schemas from Picoschema dicts, so object schemas can be declared
in YAML or JSON documents instead of code. Picoschema is a compact schema
notation from Google's Dotprompt.

Syntax reference:
  field: type, description          # required field
  field?: type, description         # optional field
  field(array): type                # array of values
  field?(enum): [val1, val2]        # enumeration
  field?(object):                   # nested object
    sub_field: type
  field: Address                    # reference to a named definition (capitalized)

A schema document wraps the field dict with metadata:

  name: user
  version: 1
  schema:
    username: string
    age?: integer, age in years
  definitions:
    Address:
      street: string
  settings:
    unknown_keys: strict            # strip | passthrough | strict
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from loguru import logger

from shapecheck.errors import SchemaDefinitionError
from shapecheck.schema.base import Schema
from shapecheck.schema.containers import ArraySchema
from shapecheck.schema.objects import UNKNOWN_KEY_POLICIES, ObjectSchema
from shapecheck.schema.primitives import (
    AnySchema,
    BooleanSchema,
    DateSchema,
    EnumSchema,
    NumberSchema,
    StringSchema,
)


# --- Data Model ---


@dataclass(frozen=True)
class SchemaDocument:
    """A complete schema document parsed into an engine schema."""

    name: str
    version: int
    schema: ObjectSchema
    description: str | None = None


# --- Built-in scalar types ---
# Anything not in this table and starting with an uppercase letter is a
# reference to a named definition.

SCALAR_TYPES = frozenset({"string", "integer", "number", "boolean", "date", "any"})


def _scalar_schema(type_str: str) -> Schema:
    match type_str:
        case "string":
            return StringSchema()
        case "integer":
            return NumberSchema().int()
        case "number":
            return NumberSchema()
        case "boolean":
            return BooleanSchema()
        case "date":
            return DateSchema()
        case _:
            return AnySchema()


# --- Field Name Parsing ---


def _parse_field_key(key: str) -> tuple[str, bool, bool, bool, bool]:
    """Parse a Picoschema field key into its components.

    Returns (name, required, is_array, is_enum, is_object).
    The key format is: name[?][(array|enum|object)]

    Examples:
        "name"              -> ("name", True, False, False, False)
        "role?"             -> ("role", False, False, False, False)
        "tags?(array)"      -> ("tags", False, True, False, False)
        "status?(enum)"     -> ("status", False, False, True, False)
        "metadata?(object)" -> ("metadata", False, False, False, True)
    """
    required = True
    is_array = False
    is_enum = False
    is_object = False

    if key.endswith("(array)"):
        is_array = True
        key = key[: -len("(array)")]
    elif key.endswith("(enum)"):
        is_enum = True
        key = key[: -len("(enum)")]
    elif key.endswith("(object)"):
        is_object = True
        key = key[: -len("(object)")]

    if key.endswith("?"):
        required = False
        key = key[:-1]

    if not key:
        raise SchemaDefinitionError("Field key must have a name")

    return key, required, is_array, is_enum, is_object


def _parse_type_and_description(value: str) -> tuple[str, str | None]:
    """Parse a type string that may include a comma-separated description.

    Examples:
        "string"             -> ("string", None)
        "string, full name"  -> ("string", "full name")
        "Address, home"      -> ("Address", "home")
    """
    if "," in value:
        type_str, desc = value.split(",", 1)
        return type_str.strip(), desc.strip()
    return value.strip(), None


def _is_reference_type(type_str: str) -> bool:
    """Capitalized type names that are not scalar types refer to definitions."""
    if type_str in SCALAR_TYPES:
        return False
    return len(type_str) > 0 and type_str[0].isupper()


# --- Definition resolution ---


class _Definitions:
    """Resolves named definitions lazily, detecting reference cycles."""

    def __init__(self, raw: Mapping[str, Any] | None):
        self._raw = dict(raw or {})
        self._resolved: dict[str, ObjectSchema] = {}
        self._resolving: set[str] = set()

    def resolve(self, name: str) -> ObjectSchema:
        if name in self._resolved:
            return self._resolved[name]
        if name not in self._raw:
            raise SchemaDefinitionError(f"Unknown type: {name}")
        if name in self._resolving:
            raise SchemaDefinitionError(f"Circular reference to definition: {name}")
        body = self._raw[name]
        if not isinstance(body, dict):
            raise SchemaDefinitionError(f"Definition {name!r} must be a dict of fields")

        self._resolving.add(name)
        try:
            schema = _parse_fields(body, self)
        finally:
            self._resolving.discard(name)
        self._resolved[name] = schema
        return schema


# --- Main Parser ---


def _parse_fields(yaml_dict: Mapping[str, Any], definitions: _Definitions) -> ObjectSchema:
    fields: dict[str, Schema] = {}

    for key, value in yaml_dict.items():
        name, required, is_array, is_enum, is_object = _parse_field_key(str(key))
        schema: Schema

        # --- Enum fields ---
        # Trigger: (enum) suffix, value is a list (e.g., [active, inactive])
        # Why: enums declare allowed values directly as a YAML list
        # Outcome: EnumSchema over the stringified values
        if is_enum:
            enum_values = value if isinstance(value, list) else [value]
            schema = EnumSchema(values=tuple(str(v) for v in enum_values))

        # --- Object fields ---
        # Trigger: (object) suffix or a dict value
        # Why: objects contain child fields parsed recursively
        # Outcome: nested ObjectSchema (wrapped in an array for (array) keys)
        elif is_object or isinstance(value, dict):
            if not isinstance(value, dict):
                raise SchemaDefinitionError(f"Object field {name!r} must declare sub-fields")
            schema = _parse_fields(value, definitions)
            if is_array:
                schema = ArraySchema(element=schema)

        # --- Scalar and reference fields ---
        else:
            type_str, description = _parse_type_and_description(str(value))
            if _is_reference_type(type_str):
                schema = definitions.resolve(type_str)
            elif type_str in SCALAR_TYPES:
                schema = _scalar_schema(type_str)
            else:
                raise SchemaDefinitionError(f"Unknown type {type_str!r} for field {name!r}")
            if is_array:
                schema = ArraySchema(element=schema)
            if description:
                schema = schema.describe(description)

        fields[name] = schema if required else schema.optional()

    return ObjectSchema(fields=fields)


def parse_picoschema(
    yaml_dict: Mapping[str, Any], definitions: Mapping[str, Any] | None = None
) -> ObjectSchema:
    """Parse a Picoschema dict into an object schema.

    Args:
        yaml_dict: Field declarations (e.g., "name", "role?", "tags?(array)")
            mapped to type declarations (e.g., "string", "string, description").
        definitions: Named Picoschema dicts that capitalized type names refer to.

    Returns:
        An ObjectSchema with the default (strip) unknown key policy.

    Raises:
        SchemaDefinitionError: On unknown types, bad keys or circular references.
    """
    return _parse_fields(yaml_dict, _Definitions(definitions))


def parse_schema_document(document: Mapping[str, Any]) -> SchemaDocument:
    """Parse a full schema document into a SchemaDocument.

    Raises:
        SchemaDefinitionError: If required keys (name, schema) are missing or
            a setting is invalid.
    """
    name = document.get("name")
    if not name:
        raise SchemaDefinitionError("Schema document missing required 'name' key")

    schema_dict = document.get("schema")
    if not schema_dict or not isinstance(schema_dict, dict):
        raise SchemaDefinitionError("Schema document missing required 'schema' dict")

    definitions = document.get("definitions")
    if definitions is not None and not isinstance(definitions, dict):
        raise SchemaDefinitionError("'definitions' must be a dict of named schemas")

    settings = document.get("settings") or {}
    unknown_keys = settings.get("unknown_keys", "strip") if isinstance(settings, dict) else "strip"
    if unknown_keys not in UNKNOWN_KEY_POLICIES:
        raise SchemaDefinitionError(
            f"settings.unknown_keys must be one of {sorted(UNKNOWN_KEY_POLICIES)}, got {unknown_keys!r}"
        )

    schema = parse_picoschema(schema_dict, definitions)
    if unknown_keys != "strip":
        schema = schema.strict() if unknown_keys == "strict" else schema.passthrough()

    description = document.get("description")
    if description:
        schema = schema.describe(description)

    logger.debug(f"Built schema document {name!r} with {len(schema.fields)} field(s)")

    return SchemaDocument(
        name=str(name),
        version=document.get("version", 1),
        schema=schema,
        description=description,
    )
