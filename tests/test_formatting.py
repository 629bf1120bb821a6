"""Tests for shapecheck.formatting -- rendering issue lists."""

import pytest

import shapecheck as sc
from shapecheck import Issue, IssueCode, ValidationError
from shapecheck.config import get_config
from shapecheck.formatting import flatten, format_issues, format_path, format_tree


def _issues():
    schema = sc.object(
        {
            "name": sc.string(),
            "address": sc.object({"zip": sc.string().length(5)}),
            "tags": sc.array(sc.string()),
        }
    ).refine(lambda v: False, "Always invalid")
    return schema.safe_parse({"name": 1, "address": {"zip": "1"}, "tags": ["a", 2]}).issues


class TestFormatPath:
    def test_default_separator(self):
        assert format_path(("users", 0, "name")) == "users.0.name"

    def test_custom_separator(self):
        assert format_path(("a", "b"), separator="/") == "a/b"

    def test_configured_separator(self, monkeypatch):
        monkeypatch.setenv("SHAPECHECK_PATH_SEPARATOR", "/")
        get_config.cache_clear()
        assert format_path(("a", "b")) == "a/b"


class TestFormatIssues:
    def test_one_line_per_issue(self):
        text = format_issues(_issues())
        assert text.splitlines() == [
            "name: Expected string, received integer",
            "address.zip: String must contain exactly 5 character(s)",
            "tags.1: Expected string, received integer",
        ]

    def test_root_issue_shows_message_only(self):
        issue = Issue(code=IssueCode.TYPE_MISMATCH, path=(), message="Expected object")
        assert format_issues([issue]) == "Expected object"

    def test_empty(self):
        assert format_issues([]) == ""


class TestFlatten:
    def test_groups_by_first_segment(self):
        root = Issue(code=IssueCode.CUSTOM_REFINEMENT_FAILED, path=(), message="Bad form")
        flat = flatten(list(_issues()) + [root])

        assert flat["form_errors"] == ["Bad form"]
        assert set(flat["field_errors"]) == {"name", "address", "tags"}
        assert flat["field_errors"]["tags"] == ["Expected string, received integer"]


class TestFormatTree:
    def test_nests_by_path(self):
        tree = format_tree(_issues())

        assert tree["_errors"] == []
        assert tree["name"]["_errors"] == ["Expected string, received integer"]
        assert tree["address"]["zip"]["_errors"] == [
            "String must contain exactly 5 character(s)"
        ]
        assert tree["tags"][1]["_errors"] == ["Expected string, received integer"]


class TestValidationError:
    def test_str_is_formatted_summary(self):
        with pytest.raises(ValidationError) as exc_info:
            sc.object({"age": sc.number().lt(100)}).parse({"age": 150})
        assert str(exc_info.value) == "age: Number must be less than 100"

    def test_flatten_and_format(self):
        error = ValidationError(_issues())
        assert error.flatten()["field_errors"]["name"] == ["Expected string, received integer"]
        assert "address" in error.format()

    def test_issue_to_dict(self):
        result = sc.union([sc.string(), sc.number()]).safe_parse(None)
        data = result.issues[0].to_dict()
        assert data["code"] == "unexpected_null"

        union_result = sc.union([sc.string(), sc.number()]).safe_parse(True)
        union_data = union_result.issues[0].to_dict()
        assert union_data["code"] == "no_union_branch_matched"
        assert union_data["union_issues"][0][0]["code"] == "type_mismatch"
