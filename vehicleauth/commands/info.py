"""Show configured paths, database and backup status."""

from pathlib import Path

import click
from rich.table import Table

from vehicleauth import __version__
from vehicleauth.backup import BackupService, format_file_size
from vehicleauth.config import load_runtime_config
from vehicleauth.schema import CATALOG
from vehicleauth.ui import console, print_header
from vehicleauth.utils.error_handler import handle_exceptions


@click.command("info")
@handle_exceptions
def info():
    """Show service information: paths, timeout, database and backup status."""
    cfg = load_runtime_config()
    db_path = Path(cfg["paths"]["database"])
    backups = BackupService(cfg["paths"]["backup_dir"], cfg["backup"]["prefix"]).backup_info()

    if db_path.is_file():
        db_status = f"present ({format_file_size(db_path.stat().st_size)})"
    else:
        db_status = "not found"

    if backups.available:
        backup_status = f"{backups.backup_count} backups, {format_file_size(backups.total_size)}"
    else:
        backup_status = backups.message

    print_header("VEHICLE AUTHORIZATION DATABASE MANAGER")
    table = Table(show_header=False, box=None, padding=(0, 2, 0, 0))
    table.add_column("Key", style="bold")
    table.add_column("Value")
    table.add_row("Version", __version__)
    table.add_row("Database", f"{db_path} - {db_status}")
    table.add_row("Backup directory", f"{cfg['paths']['backup_dir']} - {backup_status}")
    table.add_row("Script timeout", f"{cfg['timeouts']['script']}s")
    table.add_row(
        "Catalog",
        f"{len(CATALOG)} entities, {len(CATALOG.list_indexes())} indexes, "
        f"{len(CATALOG.enforced_foreign_keys())} relationships",
    )
    console.print(table)
