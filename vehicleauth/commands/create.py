"""Drop and recreate the vehicle authorization schema."""

import json
import sys
from functools import partial

import click

from vehicleauth.api import resolve_database_path
from vehicleauth.backup import BackupService
from vehicleauth.config import load_runtime_config
from vehicleauth.engine.sqlite import connect
from vehicleauth.exceptions import DatabaseConnectionError, SchemaCycleError
from vehicleauth.executor import SchemaExecutor
from vehicleauth.schema import CATALOG
from vehicleauth.ui import console, print_error, print_execution_report, print_warning
from vehicleauth.utils.error_handler import handle_exceptions
from vehicleauth.utils.exit_codes import ExitCodes


@click.command("create")
@click.option("--database", "-d", type=click.Path(dir_okay=False), help="Database file (default from config)")
@click.option("--backup", "take_backup", is_flag=True, help="Back up the existing file first")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@handle_exceptions
def create(database, take_backup, as_json):
    """Drop and recreate all tables, indexes and relationships.

    Existing relationships are removed first, then every entity is dropped
    and recreated in dependency order. A failed entity is reported and the
    run continues with the next one.

    \b
    EXIT CODES:
      0  every entity created
      1  one or more entities failed
      3  database could not be opened (locked or unreadable)
      4  catalog has a foreign-key cycle
    """
    cfg = load_runtime_config()
    db_path = resolve_database_path(database)

    if take_backup and db_path.exists():
        service = BackupService(cfg["paths"]["backup_dir"], cfg["backup"]["prefix"], cfg["timeouts"]["busy"])
        result = service.create_backup(db_path)
        if not result.success:
            print_warning(f"Backup skipped: {result.message}")

    executor = SchemaExecutor(CATALOG, partial(connect, busy_timeout=cfg["timeouts"]["busy"]))
    try:
        report = executor.execute(db_path)
    except SchemaCycleError as e:
        print_error(str(e))
        sys.exit(ExitCodes.CATALOG_DEFECT)
    except DatabaseConnectionError as e:
        print_error(str(e))
        sys.exit(ExitCodes.CONNECTION_FAILED)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        print_execution_report(report)
        if report.success:
            console.print(f"Main table: [path]{CATALOG.central_entity}[/path]", highlight=False)

    sys.exit(ExitCodes.SUCCESS if report.success else ExitCodes.ENTITY_ERRORS)
