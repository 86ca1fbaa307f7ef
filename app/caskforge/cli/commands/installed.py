"""List command for installed applications."""

import json
from typing import Annotated

import typer
from rich.table import Table

from caskforge.core.recipe import bundled_tokens
from caskforge.core.state import ReceiptStore
from caskforge.utils.formatting import console, print_info


def list_installed(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
    available: Annotated[
        bool,
        typer.Option("--available", help="List bundled recipes instead."),
    ] = False,
) -> None:
    """List installed applications."""
    if available:
        for token in bundled_tokens():
            typer.echo(token)
        return

    receipts = ReceiptStore().list_installed()

    if json_output:
        typer.echo(json.dumps([r.to_dict() for r in receipts], indent=2))
        return

    if not receipts:
        print_info("No applications installed.")
        return

    table = Table(title="Installed Applications", header_style="header", border_style="border")
    table.add_column("Token", style="bold")
    table.add_column("Version", style="muted")
    table.add_column("Location")
    table.add_column("Installed", style="muted")
    for receipt in receipts:
        table.add_row(
            receipt.token,
            receipt.version,
            receipt.app_path,
            receipt.installed_at[:19].replace("T", " "),
        )
    console.print(table)
