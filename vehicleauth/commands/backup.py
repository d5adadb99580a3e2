"""Back up the database file, inspect or prune the backup directory."""

import click

from vehicleauth.api import resolve_database_path
from vehicleauth.backup import BackupService, format_file_size
from vehicleauth.config import load_runtime_config
from vehicleauth.ui import console, print_success, print_warning
from vehicleauth.utils.error_handler import handle_exceptions


@click.command("backup")
@click.option("--database", "-d", type=click.Path(dir_okay=False), help="Database file (default from config)")
@click.option("--info", "show_info", is_flag=True, help="Show backup directory statistics only")
@click.option("--cleanup", type=int, default=None, metavar="N", help="Keep only the newest N backups")
@handle_exceptions
def backup(database, show_info, cleanup):
    """Copy the database to a timestamped file in the backup directory.

    Files are named <prefix>-<YYYYMMDD>-<HHMMSS>.<ext> and never
    overwritten. A database held exclusively by another process is not
    copied.
    """
    cfg = load_runtime_config()
    service = BackupService(cfg["paths"]["backup_dir"], cfg["backup"]["prefix"], cfg["timeouts"]["busy"])

    if show_info:
        info = service.backup_info()
        console.print(f"Backup directory: [path]{service.backup_dir}[/path]", highlight=False)
        if info.available:
            console.print(f"Backups: {info.backup_count}")
            console.print(f"Total size: {format_file_size(info.total_size)}")
        else:
            print_warning(info.message)
        return

    if cleanup is not None:
        deleted = service.cleanup_old_backups(cleanup)
        print_success(f"Removed {deleted} old backups")
        return

    result = service.create_backup(resolve_database_path(database))
    if not result.success:
        raise click.ClickException(result.message)
    print_success(f"{result.message}: {result.produced_path}")
