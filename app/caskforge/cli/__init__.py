"""CLI package for caskforge.

This package contains the Typer application and all subcommands.
"""

from caskforge.cli.main import app

__all__ = ["app"]
