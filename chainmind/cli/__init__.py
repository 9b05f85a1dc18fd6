"""CLI application setup using Typer."""

from chainmind.cli.main import app

__all__ = ["app"]
