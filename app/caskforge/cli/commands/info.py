"""Info command for inspecting a recipe.

Shows what would be fetched, built, installed and zapped without
touching the system.
"""

import shlex
from pathlib import Path
from typing import Annotated

import typer

from caskforge.core.paths import get_appdir, get_bindir
from caskforge.core.recipe import (
    DEFAULT_TOKEN,
    RecipeError,
    load_recipe,
    recipe_to_toml,
)
from caskforge.core.state import ReceiptStore
from caskforge.utils.formatting import console, create_key_value_table, print_error


def info(
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
    as_toml: Annotated[
        bool,
        typer.Option(
            "--toml",
            help="Print the resolved recipe as TOML.",
        ),
    ] = False,
) -> None:
    """Show details about a recipe.

    Examples:
        caskforge info
        caskforge info trackweight --toml
        caskforge info --recipe ./myapp.toml
    """
    try:
        recipe = load_recipe(token, path=recipe_path)
    except RecipeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if as_toml:
        typer.echo(recipe_to_toml(recipe), nl=False)
        return

    package = recipe.package
    table = create_key_value_table(f"{package.name} {package.version}")
    table.add_row("Token", package.token)
    table.add_row("Description", package.desc or "-")
    table.add_row("Homepage", package.homepage or "-")
    table.add_row("Source", f"{package.url} ({package.branch})")
    table.add_row("Checksum", package.sha256 if package.checksum_verified else "not verified")
    table.add_row("Requires macOS", f">= {recipe.requires.macos}" if recipe.requires.macos else "any")
    table.add_row("Requires arch", recipe.requires.arch or "any")

    entitlements_path = Path(recipe.entitlements.filename)
    table.add_row("Build", shlex.join(recipe.build.arguments(entitlements_path)))
    table.add_row("Built app", str(recipe.artifact.built_path(recipe.build)))
    table.add_row("App", str(get_appdir() / recipe.artifact.app))
    if recipe.artifact.binary is not None:
        table.add_row("Binary", str(get_bindir() / recipe.artifact.binary.target))
    table.add_row("Zap", "\n".join(recipe.zap.trash) or "-")

    receipt = ReceiptStore().load(package.token)
    table.add_row(
        "Installed",
        f"{receipt.version} ({receipt.installed_at})" if receipt else "no",
    )

    console.print(table)
