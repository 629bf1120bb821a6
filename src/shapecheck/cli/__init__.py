"""Command line interface for shapecheck."""
