"""Install command.

Builds an application from source and installs it.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from caskforge.core.errors import ProcedureError
from caskforge.core.installer import InstallError, Installer
from caskforge.core.recipe import DEFAULT_TOKEN, RecipeError, load_recipe
from caskforge.core.source import SourceFetchError
from caskforge.utils.formatting import (
    print_error,
    print_step,
    print_success,
    print_warning,
)

logger = logging.getLogger(__name__)


def install(
    token: Annotated[
        str,
        typer.Argument(help="Recipe token."),
    ] = DEFAULT_TOKEN,
    recipe_path: Annotated[
        Path | None,
        typer.Option(
            "--recipe",
            "-r",
            help="Load the recipe from a TOML file instead of by token.",
        ),
    ] = None,
    appdir: Annotated[
        Path | None,
        typer.Option(
            "--appdir",
            help="Directory to install the application into.",
        ),
    ] = None,
    bindir: Annotated[
        Path | None,
        typer.Option(
            "--bindir",
            help="Directory to link the application binary into.",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Replace an existing installation.",
        ),
    ] = False,
    keep_staging: Annotated[
        bool,
        typer.Option(
            "--keep-staging",
            help="Keep the staging directory after the install or a failure.",
        ),
    ] = False,
) -> None:
    """Build an application from source and install it.

    Examples:
        caskforge install
        caskforge install trackweight --appdir ~/Applications
        caskforge -v install --keep-staging
    """
    try:
        recipe = load_recipe(token, path=recipe_path)
    except RecipeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    package = recipe.package
    print_step(f"Installing {package.name} {package.version} from source")

    installer = Installer(
        recipe,
        appdir=appdir,
        bindir=bindir,
        force=force,
        keep_staging=keep_staging,
    )

    try:
        outcome = installer.install()
    except (ProcedureError, SourceFetchError, InstallError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except (RuntimeError, OSError) as e:
        logger.debug("Install of %s aborted", package.token, exc_info=True)
        print_error(f"Install failed: {e}")
        raise typer.Exit(code=1) from e

    if not outcome.registered:
        print_warning("Launch Services could not be refreshed; the icon may appear later.")

    receipt = outcome.receipt
    print_step(f"Moved {recipe.artifact.app} to {receipt.app_path}")
    if receipt.binary_path:
        print_step(f"Linked binary to {receipt.binary_path}")
    print_success(f"{package.name} {package.version} was successfully installed!")
