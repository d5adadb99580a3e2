"""Print the dependency-consistent creation order."""

import json

import click
from rich.table import Table

from vehicleauth.schema import CATALOG
from vehicleauth.ui import console, print_header
from vehicleauth.utils.error_handler import handle_exceptions


@click.command("order")
@click.option("--json", "as_json", is_flag=True, help="Print the order as a JSON list")
@handle_exceptions
def order(as_json):
    """Show the order entities are created in and what each references."""
    names = CATALOG.creation_order()

    if as_json:
        click.echo(json.dumps(names))
        return

    parents: dict[str, list[str]] = {}
    for key in CATALOG.list_foreign_keys():
        if key.enforced and key.parent_entity not in parents.setdefault(key.child_entity, []):
            parents[key.child_entity].append(key.parent_entity)

    print_header("CREATION ORDER")
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Entity", style="cmd")
    table.add_column("References")
    for position, name in enumerate(names, 1):
        table.add_row(str(position), name, ", ".join(parents.get(name, [])) or "-")
    console.print(table)
