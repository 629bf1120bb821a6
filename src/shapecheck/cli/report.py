"""JSON report models for CLI output."""

from typing import Any

from pydantic import BaseModel, Field

from shapecheck.schema.issues import Issue
from shapecheck.schema.result import ParseResult


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return str(value)


class IssueReport(BaseModel):
    """One issue as rendered in a JSON report."""

    code: str
    path: list[str | int]
    message: str
    details: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_issue(cls, issue: Issue) -> "IssueReport":
        data = issue.to_dict()
        details = {
            k: _jsonable(v) for k, v in data.items() if k not in ("code", "path", "message")
        }
        return cls(
            code=data["code"],
            path=[segment if isinstance(segment, int) else str(segment) for segment in issue.path],
            message=issue.message,
            details=details,
        )


class ValidationReport(BaseModel):
    """Outcome of validating one data file against one schema document."""

    schema_name: str
    data_file: str
    valid: bool
    issues: list[IssueReport] = Field(default_factory=list)

    @classmethod
    def from_result(cls, schema_name: str, data_file: str, result: ParseResult) -> "ValidationReport":
        issues = [] if result.success else [IssueReport.from_issue(i) for i in result.issues]
        return cls(
            schema_name=schema_name,
            data_file=data_file,
            valid=result.success,
            issues=issues,
        )
