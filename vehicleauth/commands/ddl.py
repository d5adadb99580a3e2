"""Render the schema creation script for a database dialect."""

from pathlib import Path

import click

from vehicleauth.schema import CATALOG
from vehicleauth.schema.ddl import DIALECTS, get_dialect, render_script
from vehicleauth.ui import print_success
from vehicleauth.utils.error_handler import handle_exceptions


@click.command("ddl")
@click.option(
    "--dialect",
    type=click.Choice(sorted(DIALECTS)),
    default="sqlite",
    show_default=True,
    help="Target SQL dialect",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the script to a file")
@handle_exceptions
def ddl(dialect, output):
    """Print CREATE TABLE / INDEX / relationship statements in dependency order.

    The sqlite dialect declares relationships inside CREATE TABLE; the
    access dialect adds them with ALTER TABLE after all tables exist.
    """
    script = render_script(CATALOG, get_dialect(dialect))

    if output:
        Path(output).write_text(script, encoding="utf-8")
        print_success(f"Wrote {dialect} script to {output}")
    else:
        click.echo(script, nl=False)
