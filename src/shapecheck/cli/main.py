"""Main CLI entry point for shapecheck."""  # pragma: no cover

from shapecheck.cli.app import app  # pragma: no cover

# Register commands
from shapecheck.cli.commands import validate  # noqa: F401  # pragma: no cover

if __name__ == "__main__":  # pragma: no cover
    app()
