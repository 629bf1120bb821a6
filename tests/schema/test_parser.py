"""Tests for shapecheck.schema.parser -- Picoschema parsing into engine schemas."""

import pytest

from shapecheck import IssueCode, SchemaDefinitionError
from shapecheck.schema.containers import ArraySchema
from shapecheck.schema.objects import ObjectSchema
from shapecheck.schema.parser import (
    SCALAR_TYPES,
    SchemaDocument,
    _is_reference_type,
    _parse_field_key,
    _parse_type_and_description,
    parse_picoschema,
    parse_schema_document,
)
from shapecheck.schema.primitives import EnumSchema, NumberSchema, StringSchema


# --- _parse_field_key ---


class TestParseFieldKey:
    def test_simple_required(self):
        name, required, is_array, is_enum, is_object = _parse_field_key("name")
        assert name == "name"
        assert required is True
        assert is_array is False
        assert is_enum is False
        assert is_object is False

    def test_optional(self):
        name, required, is_array, is_enum, is_object = _parse_field_key("role?")
        assert name == "role"
        assert required is False

    def test_optional_array(self):
        name, required, is_array, is_enum, is_object = _parse_field_key("tags?(array)")
        assert name == "tags"
        assert required is False
        assert is_array is True

    def test_enum(self):
        name, required, is_array, is_enum, is_object = _parse_field_key("status?(enum)")
        assert name == "status"
        assert is_enum is True

    def test_object(self):
        name, required, is_array, is_enum, is_object = _parse_field_key("metadata?(object)")
        assert name == "metadata"
        assert required is False
        assert is_object is True

    def test_empty_name_raises(self):
        with pytest.raises(SchemaDefinitionError):
            _parse_field_key("?")


# --- _parse_type_and_description ---


class TestParseTypeAndDescription:
    def test_type_only(self):
        assert _parse_type_and_description("string") == ("string", None)

    def test_with_description(self):
        assert _parse_type_and_description("string, full name") == ("string", "full name")

    def test_description_with_commas(self):
        assert _parse_type_and_description("string, last, first") == ("string", "last, first")


# --- _is_reference_type ---


class TestIsReferenceType:
    def test_scalars_are_not_references(self):
        for type_str in SCALAR_TYPES:
            assert _is_reference_type(type_str) is False

    def test_capitalized_is_reference(self):
        assert _is_reference_type("Address") is True

    def test_lowercase_unknown_is_not_reference(self):
        assert _is_reference_type("widget") is False


# --- parse_picoschema ---


class TestParsePicoschema:
    def test_scalar_fields(self):
        schema = parse_picoschema({"name": "string", "age?": "integer, age in years"})

        assert isinstance(schema, ObjectSchema)
        assert isinstance(schema.fields["name"], StringSchema)
        age = schema.fields["age"]
        assert isinstance(age, NumberSchema)
        assert age.is_optional is True
        assert age.description == "age in years"

    def test_integer_rejects_fraction(self):
        schema = parse_picoschema({"count": "integer"})
        result = schema.safe_parse({"count": 1.5})
        assert result.issues[0].code == IssueCode.TYPE_MISMATCH

    def test_array_field(self):
        schema = parse_picoschema({"tags?(array)": "string"})
        assert isinstance(schema.fields["tags"], ArraySchema)
        assert schema.parse({"tags": ["a", "b"]}) == {"tags": ["a", "b"]}

    def test_enum_field(self):
        schema = parse_picoschema({"status(enum)": ["active", "inactive"]})
        status = schema.fields["status"]
        assert isinstance(status, EnumSchema)
        assert status.options == ("active", "inactive")

    def test_nested_object(self):
        schema = parse_picoschema({"address?(object)": {"street": "string", "zip?": "string"}})
        assert schema.parse({"address": {"street": "Main"}}) == {"address": {"street": "Main"}}
        result = schema.safe_parse({"address": {}})
        assert result.issues[0].path == ("address", "street")

    def test_array_of_objects(self):
        schema = parse_picoschema({"items(array)": {"sku": "string"}})
        result = schema.safe_parse({"items": [{"sku": "a"}, {}]})
        assert result.issues[0].path == ("items", 1, "sku")

    def test_definition_reference(self):
        schema = parse_picoschema(
            {"home": "Address", "work?": "Address"},
            definitions={"Address": {"street": "string"}},
        )
        assert schema.parse({"home": {"street": "Main"}}) == {"home": {"street": "Main"}}
        assert schema.fields["work"].is_optional is True

    def test_unknown_reference_raises(self):
        with pytest.raises(SchemaDefinitionError, match="Unknown type: Address"):
            parse_picoschema({"home": "Address"})

    def test_circular_reference_raises(self):
        with pytest.raises(SchemaDefinitionError, match="Circular"):
            parse_picoschema({"a": "A"}, definitions={"A": {"b": "B"}, "B": {"a": "A"}})

    def test_unknown_scalar_raises(self):
        with pytest.raises(SchemaDefinitionError):
            parse_picoschema({"name": "str"})


# --- parse_schema_document ---


class TestParseSchemaDocument:
    def test_full_document(self):
        document = parse_schema_document(
            {
                "name": "user",
                "version": 2,
                "description": "A user record",
                "schema": {"username": "string"},
                "settings": {"unknown_keys": "strict"},
            }
        )

        assert isinstance(document, SchemaDocument)
        assert document.name == "user"
        assert document.version == 2
        assert document.schema.unknown_keys == "strict"
        assert document.schema.description == "A user record"

    def test_default_version_and_policy(self):
        document = parse_schema_document({"name": "user", "schema": {"username": "string"}})
        assert document.version == 1
        assert document.schema.unknown_keys == "strip"

    def test_passthrough_setting(self):
        document = parse_schema_document(
            {"name": "u", "schema": {"a": "string"}, "settings": {"unknown_keys": "passthrough"}}
        )
        assert document.schema.parse({"a": "x", "b": 1}) == {"a": "x", "b": 1}

    def test_missing_name_raises(self):
        with pytest.raises(SchemaDefinitionError, match="name"):
            parse_schema_document({"schema": {"a": "string"}})

    def test_missing_schema_raises(self):
        with pytest.raises(SchemaDefinitionError, match="schema"):
            parse_schema_document({"name": "user"})

    def test_invalid_policy_raises(self):
        with pytest.raises(SchemaDefinitionError):
            parse_schema_document(
                {"name": "u", "schema": {"a": "string"}, "settings": {"unknown_keys": "loose"}}
            )

    def test_definitions_must_be_dict(self):
        with pytest.raises(SchemaDefinitionError):
            parse_schema_document({"name": "u", "schema": {"a": "string"}, "definitions": []})
