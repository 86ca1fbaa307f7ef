"""Main CLI application entry point.

Defines the Typer application, global options and logging setup.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from caskforge import __version__
from caskforge.cli.commands import info, install, installed, uninstall
from caskforge.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="caskforge",
    help="Build macOS applications from source and install them.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"caskforge version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route log records to stderr through Rich.

    Args:
        verbose: If True, log at DEBUG, otherwise only warnings and errors.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output, including build tool diagnostics.",
        ),
    ] = False,
) -> None:
    """caskforge - Build macOS applications from source and install them."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(verbose)


# Register commands
app.command(name="info")(info.info)
app.command(name="install")(install.install)
app.command(name="uninstall")(uninstall.uninstall)
app.command(name="zap")(uninstall.zap)
app.command(name="list")(installed.list_installed)


if __name__ == "__main__":
    app()
