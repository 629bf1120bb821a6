"""Tests for shapecheck.schema.base -- the validation driver and modifiers."""

import pytest

import shapecheck as sc
from shapecheck import MISSING, Failure, IssueCode, Success, ValidationError


def _user_schema():
    return sc.object(
        {
            "username": sc.string(),
            "age": sc.number().gt(0).lt(100),
        }
    )


# --- parse / safe_parse ---


class TestEntryPoints:
    def test_parse_returns_output(self):
        assert _user_schema().parse({"username": "a", "age": 36}) == {"username": "a", "age": 36}

    def test_out_of_range_age_reports_one_too_large_issue(self):
        result = _user_schema().safe_parse({"username": "a", "age": 150})

        assert isinstance(result, Failure)
        assert result.success is False
        assert len(result.issues) == 1
        assert result.issues[0].path == ("age",)
        assert result.issues[0].code == IssueCode.TOO_LARGE

    def test_parse_raises_with_every_issue(self):
        with pytest.raises(ValidationError) as exc_info:
            _user_schema().parse({"username": 1, "age": -5})

        issues = exc_info.value.issues
        assert [i.path for i in issues] == [("username",), ("age",)]
        assert [i.code for i in issues] == [IssueCode.TYPE_MISMATCH, IssueCode.TOO_SMALL]

    def test_safe_parse_and_parse_agree(self):
        schema = _user_schema()
        for value in [
            {"username": "a", "age": 1},
            {"username": "a", "age": 0},
            {"age": 5},
            "not an object",
            None,
            [],
        ]:
            result = schema.safe_parse(value)
            if result.success:
                assert schema.parse(value) == result.value
            else:
                with pytest.raises(ValidationError):
                    schema.parse(value)

    def test_module_level_functions(self):
        schema = sc.string()
        assert sc.parse(schema, "x") == "x"
        assert isinstance(sc.safe_parse(schema, 1), Failure)
        assert sc.safe_parse(schema, "x") == Success("x")

    def test_safe_parse_never_raises_on_malformed_input(self):
        schema = _user_schema()
        for value in [object(), 3.5, {"username": {"nested": []}}, {1: 2}]:
            assert schema.safe_parse(value).success is False

    def test_idempotent(self):
        schema = sc.object(
            {
                "name": sc.string(),
                "tags": sc.array(sc.string()).default(list),
                "extra": sc.number().optional(),
            }
        )
        once = schema.parse({"name": "a", "unknown": 1})
        assert schema.parse(once) == once

    def test_failure_error_wraps_issues(self):
        result = sc.string().safe_parse(5)
        assert isinstance(result.error, ValidationError)
        assert result.error.issues == result.issues


# --- Presence ---


class TestPresence:
    def test_required_field_missing(self):
        result = sc.object({"name": sc.string()}).safe_parse({})

        assert result.issues[0].code == IssueCode.REQUIRED_FIELD_MISSING
        assert result.issues[0].path == ("name",)
        assert result.issues[0].message == "Required"

    def test_custom_required_error(self):
        schema = sc.object({"name": sc.string(required_error="Name is required")})
        result = schema.safe_parse({})
        assert result.issues[0].message == "Name is required"

    def test_optional_absent_field_is_omitted(self):
        schema = sc.object({"name": sc.string(), "nick": sc.string().optional()})
        assert schema.parse({"name": "a"}) == {"name": "a"}

    def test_optional_present_field_still_validated(self):
        schema = sc.object({"nick": sc.string().optional()})
        result = schema.safe_parse({"nick": 1})
        assert result.issues[0].code == IssueCode.TYPE_MISMATCH

    def test_top_level_absent_optional_returns_missing(self):
        assert sc.string().optional().parse() is MISSING

    def test_top_level_absent_required_fails(self):
        result = sc.string().safe_parse()
        assert result.issues[0].code == IssueCode.REQUIRED_FIELD_MISSING
        assert result.issues[0].path == ()


# --- Defaults ---


class TestDefaults:
    def test_literal_default_applied_when_absent(self):
        schema = sc.object({"role": sc.string().default("member")})
        assert schema.parse({}) == {"role": "member"}

    def test_default_is_validated(self):
        schema = sc.object({"role": sc.string().min_length(10).default("member")})
        result = schema.safe_parse({})
        assert result.issues[0].code == IssueCode.TOO_SMALL

    def test_factory_invoked_per_call(self):
        calls = []

        def next_id():
            calls.append(1)
            return len(calls)

        schema = sc.object({"id": sc.number().default(next_id)})
        assert schema.parse({}) == {"id": 1}
        assert schema.parse({}) == {"id": 2}
        assert schema.parse({"id": 99}) == {"id": 99}
        assert len(calls) == 2

    def test_mutable_default_not_shared_between_calls(self):
        schema = sc.object({"tags": sc.array(sc.string()).default([])})
        first = schema.parse({})
        first["tags"].append("mutated")
        assert schema.parse({}) == {"tags": []}

    def test_null_on_nullable_with_default_uses_default(self):
        assert sc.number().nullable().default(5).parse(None) == 5

    def test_null_on_default_without_nullable_fails(self):
        result = sc.number().default(5).safe_parse(None)
        assert result.issues[0].code == IssueCode.UNEXPECTED_NULL


# --- Nullability ---


class TestNullability:
    def test_null_rejected_by_default(self):
        result = sc.string().safe_parse(None)
        assert result.issues[0].code == IssueCode.UNEXPECTED_NULL
        assert result.issues[0].params["expected"] == "string"

    def test_nullable_accepts_null(self):
        assert sc.string().nullable().parse(None) is None

    def test_nullable_does_not_accept_absence(self):
        result = sc.object({"a": sc.string().nullable()}).safe_parse({})
        assert result.issues[0].code == IssueCode.REQUIRED_FIELD_MISSING

    def test_nullish_accepts_null_and_absence(self):
        schema = sc.object({"a": sc.string().nullish()})
        assert schema.parse({}) == {}
        assert schema.parse({"a": None}) == {"a": None}


# --- Constraints and refinements ---


class TestConstraintsAndRefinements:
    def test_type_mismatch_skips_constraints(self):
        result = sc.number().gt(0).lt(10).safe_parse("x")
        assert len(result.issues) == 1
        assert result.issues[0].code == IssueCode.TYPE_MISMATCH

    def test_first_failing_constraint_only(self):
        result = sc.string().min_length(5).email().safe_parse("ab")
        assert len(result.issues) == 1
        assert result.issues[0].code == IssueCode.TOO_SMALL

    def test_refinement_runs_after_checks_pass(self):
        schema = sc.number().refine(lambda v: v % 2 == 0, "Must be even")
        assert schema.parse(4) == 4
        result = schema.safe_parse(3)
        assert result.issues[0].code == IssueCode.CUSTOM_REFINEMENT_FAILED
        assert result.issues[0].message == "Must be even"

    def test_refinement_skipped_when_constraint_fails(self):
        seen = []
        schema = sc.number().gt(0).refine(lambda v: seen.append(v) or True)
        schema.safe_parse(-1)
        assert seen == []

    def test_refinement_skipped_when_child_fails(self):
        seen = []
        schema = sc.object({"a": sc.string()}).refine(lambda v: seen.append(v) or True)
        schema.safe_parse({"a": 1})
        assert seen == []

    def test_every_failing_refinement_reported(self):
        schema = (
            sc.string()
            .refine(lambda v: v.islower(), "Must be lowercase")
            .refine(lambda v: v.isalpha(), "Must be letters")
        )
        result = schema.safe_parse("AB1")
        assert [i.message for i in result.issues] == ["Must be lowercase", "Must be letters"]

    def test_refinement_path(self):
        schema = sc.object({"password": sc.string(), "confirm": sc.string()}).refine(
            lambda v: v["password"] == v["confirm"],
            "Passwords don't match",
            path=("confirm",),
        )
        result = schema.safe_parse({"password": "a", "confirm": "b"})
        assert result.issues[0].path == ("confirm",)

    def test_errors_accumulate_across_siblings(self):
        schema = sc.object(
            {
                "a": sc.string().min_length(3),
                "b": sc.number().positive(),
                "c": sc.object({"d": sc.boolean()}),
            }
        )
        result = schema.safe_parse({"a": "x", "b": -1, "c": {"d": "no"}})
        assert [i.path for i in result.issues] == [("a",), ("b",), ("c", "d")]


# --- Immutability ---


class TestImmutability:
    def test_builders_return_new_schemas(self):
        base = sc.string()
        bounded = base.min_length(3)

        assert bounded is not base
        assert base.constraints == ()
        assert len(bounded.constraints) == 1
        assert base.parse("a") == "a"

    def test_modifiers_do_not_leak(self):
        base = sc.number()
        base.optional()
        base.nullable()
        base.default(3)
        assert base.is_optional is False
        assert base.is_nullable is False
        assert base.has_default is False

    def test_schema_is_frozen(self):
        with pytest.raises(AttributeError):
            sc.string().is_optional = True

    def test_describe(self):
        schema = sc.string().describe("user name")
        assert schema.description == "user name"
