"""Command-line interface for methfast."""

from methfast.cli.main import cli, main

__all__ = ["cli", "main"]
