"""Validation CLI commands for shapecheck.

Provides `shapecheck validate SCHEMA DATA` and `shapecheck show SCHEMA`.
Schema files are Picoschema documents in YAML; data files may be JSON or YAML.
"""

import json
from pathlib import Path
from typing import Annotated, Any

import typer
import yaml
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from shapecheck.cli.app import app
from shapecheck.cli.report import ValidationReport
from shapecheck.errors import SchemaDefinitionError
from shapecheck.formatting import format_path
from shapecheck.schema.base import Schema
from shapecheck.schema.parser import SchemaDocument, parse_schema_document

console = Console()


# --- Loading ---


def load_schema_document(path: Path) -> SchemaDocument:
    """Read a YAML schema document from disk and build its schema."""
    document = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(document, dict):
        raise SchemaDefinitionError(f"{path} does not contain a schema document")
    return parse_schema_document(document)


def load_data(path: Path) -> Any:
    """Read a data file; .json files are decoded as JSON, everything else as YAML."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


# --- Validate ---


@app.command()
def validate(
    schema_file: Annotated[Path, typer.Argument(help="Schema document (YAML)")],
    data_file: Annotated[Path, typer.Argument(help="Data file to validate (JSON or YAML)")],
    json_output: bool = typer.Option(False, "--json", help="Print a JSON report"),
    strict: bool = typer.Option(
        False, "--strict/--no-strict", help="Reject top-level keys the schema does not declare"
    ),
):
    """Validate DATA_FILE against the schema in SCHEMA_FILE.

    Exits with code 1 if the data is invalid.
    """
    try:
        document = load_schema_document(schema_file)
        data = load_data(data_file)
    except (
        OSError,
        UnicodeDecodeError,
        SchemaDefinitionError,
        yaml.YAMLError,
        json.JSONDecodeError,
    ) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    schema = document.schema.strict() if strict else document.schema
    result = schema.safe_parse(data)

    if json_output:
        report = ValidationReport.from_result(document.name, str(data_file), result)
        typer.echo(report.model_dump_json(indent=2))
    elif result.success:
        console.print(f"[green]{data_file} is valid against {document.name}[/green]")
    else:
        table = Table(title=f"Validation: {data_file} against {document.name}")
        table.add_column("Path", style="cyan")
        table.add_column("Code")
        table.add_column("Message")
        for issue in result.issues:
            table.add_row(
                escape(format_path(issue.path)) or "<root>", issue.code.value, escape(issue.message)
            )
        console.print(table)
        console.print(f"\n[red]{len(result.issues)} issue(s) found[/red]")

    if not result.success:
        logger.debug(f"{data_file} failed validation with {len(result.issues)} issue(s)")
        raise typer.Exit(1)


# --- Show ---


def _node_label(name: str, schema: Schema) -> str:
    flags = []
    if schema.is_optional:
        flags.append("optional")
    if schema.is_nullable:
        flags.append("nullable")
    if schema.has_default:
        flags.append("default")
    if getattr(schema, "unknown_keys", "strip") != "strip":
        flags.append(schema.unknown_keys)

    label = f"[cyan]{escape(name)}[/cyan]: {schema.kind}"
    if flags:
        label += f" [yellow]({', '.join(flags)})[/yellow]"
    if schema.description:
        label += f" [dim]- {escape(schema.description)}[/dim]"
    return label


def _add_children(tree: Tree, schema: Schema) -> None:
    for name, child in schema.children():
        _add_children(tree.add(_node_label(name, child)), child)


def build_schema_tree(document: SchemaDocument) -> Tree:
    """Render a schema document as a rich tree."""
    tree = Tree(_node_label(document.name, document.schema))
    _add_children(tree, document.schema)
    return tree


@app.command()
def show(
    schema_file: Annotated[Path, typer.Argument(help="Schema document (YAML)")],
):
    """Print the structure of the schema in SCHEMA_FILE."""
    try:
        document = load_schema_document(schema_file)
    except (OSError, UnicodeDecodeError, SchemaDefinitionError, yaml.YAMLError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    console.print(build_schema_tree(document))
