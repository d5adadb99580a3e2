"""Verify the live schema against the catalog."""

import json
import sys
from functools import partial

import click

from vehicleauth.api import resolve_database_path
from vehicleauth.config import load_runtime_config
from vehicleauth.engine.sqlite import connect
from vehicleauth.schema import CATALOG
from vehicleauth.ui import print_verification_report
from vehicleauth.utils.error_handler import handle_exceptions
from vehicleauth.utils.exit_codes import ExitCodes
from vehicleauth.verifier import SchemaVerifier


@click.command("verify")
@click.option("--database", "-d", type=click.Path(dir_okay=False), help="Database file (default from config)")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@handle_exceptions
def verify(database, as_json):
    """Compare tables, indexes and relationships with the catalog.

    Opens the database read-only; a missing file is reported, never created.
    Exits 2 when anything is missing or the relationship count differs.
    """
    cfg = load_runtime_config()
    db_path = resolve_database_path(database)

    verifier = SchemaVerifier(CATALOG, partial(connect, busy_timeout=cfg["timeouts"]["busy"]))
    report = verifier.verify(db_path)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        print_verification_report(report)

    sys.exit(ExitCodes.SUCCESS if report.success else ExitCodes.VERIFICATION_FAILED)
