"""Uninstall and zap commands."""

from pathlib import Path
from typing import Annotated

import typer

from caskforge.core.installer import InstallError, uninstall as uninstall_app, zap as zap_paths
from caskforge.core.recipe import DEFAULT_TOKEN, RecipeError, load_recipe
from caskforge.filesystem.operator import FilesystemActionResult
from caskforge.utils.formatting import (
    console,
    print_error,
    print_info,
    print_step,
    print_success,
)


def uninstall(
    token: Annotated[
        str,
        typer.Argument(help="Recipe token."),
    ],
    zap: Annotated[
        bool,
        typer.Option(
            "--zap",
            help="Also delete preferences, saved state and support files.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted."),
    ] = False,
) -> None:
    """Uninstall an application.

    Examples:
        caskforge uninstall trackweight
        caskforge uninstall trackweight --zap --dry-run
    """
    print_step(f"Uninstalling {token}")
    try:
        results = uninstall_app(token, dry_run=dry_run)
    except InstallError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except OSError as e:
        print_error(f"Could not update receipt: {e}")
        raise typer.Exit(code=1) from e

    _print_results(results)
    failed = any(not r.success for r in results)

    if zap:
        zap_results = _run_zap(token, None, dry_run)
        failed = failed or any(not r.success for r in zap_results)

    if failed:
        raise typer.Exit(code=1)
    if not dry_run:
        print_success(f"{token} was successfully uninstalled!")


def zap(
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
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Delete the user data an application leaves behind.

    Examples:
        caskforge zap --dry-run
        caskforge zap trackweight -y
    """
    if not dry_run and not yes:
        confirmed = typer.confirm(f"Delete all user data for {token}?", default=False)
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    results = _run_zap(token, recipe_path, dry_run)
    if any(not r.success for r in results):
        raise typer.Exit(code=1)


def _run_zap(
    token: str,
    recipe_path: Path | None,
    dry_run: bool,
) -> list[FilesystemActionResult]:
    try:
        recipe = load_recipe(token, path=recipe_path)
    except RecipeError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not recipe.zap.trash:
        print_info(f"{recipe.package.name} declares no user data to remove.")
        return []

    print_step(f"Zapping {recipe.package.name} user data")
    results = zap_paths(recipe, dry_run=dry_run)
    _print_results(results)
    return results


def _print_results(results: list[FilesystemActionResult]) -> None:
    for result in results:
        if result.skipped:
            console.print(f"  [muted]-[/] {result.path} [muted](not present)[/]", soft_wrap=True)
        elif result.dry_run:
            console.print(f"  [warning]~[/] {result.path} [muted](would delete)[/]", soft_wrap=True)
        elif result.success:
            console.print(f"  [success]✓[/] {result.path}", soft_wrap=True)
        else:
            console.print(f"  [error]✗[/] {result.path}: {result.error}", soft_wrap=True)
