from typing import Optional

import typer

from shapecheck.config import get_config
from shapecheck.utils import setup_logging


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:  # pragma: no cover
        import shapecheck

        typer.echo(f"shapecheck version: {shapecheck.__version__}")
        raise typer.Exit()


app = typer.Typer(name="shapecheck")


@app.callback()
def app_callback(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Log debug output to stderr.",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """shapecheck - validate data files against declarative schemas."""
    setup_logging("DEBUG" if verbose else get_config().log_level)
