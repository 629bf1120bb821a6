"""Issue formatting.

Renders the flat issue list produced by validation into display forms. This is
presentation only; every function here consumes the public ``Issue`` shape.
"""

from collections.abc import Iterable
from typing import Any

from shapecheck.config import get_config
from shapecheck.schema.issues import Issue, Path


def format_path(path: Path, separator: str | None = None) -> str:
    """Join a path for display: ``("users", 0, "name")`` -> ``users.0.name``."""
    sep = separator if separator is not None else get_config().path_separator
    return sep.join(str(segment) for segment in path)


def format_issues(issues: Iterable[Issue], separator: str | None = None) -> str:
    """Render issues as one string, one ``path: message`` line per issue.

    Root-level issues show the message only.
    """
    lines = []
    for issue in issues:
        if issue.path:
            lines.append(f"{format_path(issue.path, separator)}: {issue.message}")
        else:
            lines.append(issue.message)
    return "\n".join(lines)


def flatten(issues: Iterable[Issue]) -> dict[str, Any]:
    """Group messages by the first path segment.

    Returns:
        ``{"form_errors": [...], "field_errors": {field: [...]}}`` where form
        errors are issues at the root.
    """
    form_errors: list[str] = []
    field_errors: dict[Any, list[str]] = {}
    for issue in issues:
        if issue.path:
            field_errors.setdefault(issue.path[0], []).append(issue.message)
        else:
            form_errors.append(issue.message)
    return {"form_errors": form_errors, "field_errors": field_errors}


def format_tree(issues: Iterable[Issue]) -> dict[str, Any]:
    """Nest messages in a tree keyed by path segment.

    Every node carries an ``_errors`` list; e.g. an issue at ``("age",)``
    yields ``{"_errors": [], "age": {"_errors": ["..."]}}``.
    """
    tree: dict[Any, Any] = {"_errors": []}
    for issue in issues:
        node = tree
        for segment in issue.path:
            node = node.setdefault(segment, {"_errors": []})
        node["_errors"].append(issue.message)
    return tree
