"""Command-line interface for componentlint."""

from componentlint.cli.main import main

__all__ = ["main"]
