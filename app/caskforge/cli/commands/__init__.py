"""CLI commands for caskforge.

This package contains all subcommand implementations.
"""

from caskforge.cli.commands import info, install, installed, uninstall

__all__ = ["info", "install", "installed", "uninstall"]
