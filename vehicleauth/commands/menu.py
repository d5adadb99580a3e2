"""Interactive menu: backs up the database once, then dispatches schema runs."""

from pathlib import Path

import click

from vehicleauth.api import resolve_database_path
from vehicleauth.backup import BackupService, format_file_size
from vehicleauth.config import load_runtime_config
from vehicleauth.runner import ScriptResult, run_isolated
from vehicleauth.ui import console, print_error, print_header, print_success, print_warning
from vehicleauth.utils.constants import LOG_DIR
from vehicleauth.utils.error_handler import handle_exceptions
from vehicleauth.utils.exit_codes import ExitCodes
from vehicleauth.utils.logging import configure_file_logging, logger

MENU_OPTIONS = {
    "1": "Create New Database",
    "2": "Verify Database Structure",
    "3": "Backup Status",
    "0": "Exit",
}


def _print_menu() -> None:
    print_header("MAIN MENU")
    for key, label in MENU_OPTIONS.items():
        console.print(f"  [cmd]{key}[/cmd]. {label}")


def _report(action: str, result: ScriptResult) -> None:
    if result.output.strip():
        click.echo(result.output.rstrip())

    if result.timed_out:
        print_error(f"{action} timed out and was terminated ({ExitCodes.get_description(ExitCodes.TIMEOUT)})")
    elif result.success:
        print_success(f"{action} completed successfully")
    else:
        print_error(f"{action} failed: {ExitCodes.get_description(result.exit_code)}")


def _create(db_path: Path, timeout: float) -> None:
    print_header("CREATE NEW DATABASE")
    console.print("This drops and recreates every table, index and relationship.")
    if not click.confirm("Do you want to proceed?", default=False):
        print_warning("Database creation cancelled.")
        return
    _report("Database creation", run_isolated("create", db_path, timeout))


def _verify(db_path: Path, timeout: float) -> None:
    _report("Verification", run_isolated("verify", db_path, timeout))


def _backup_status(service: BackupService) -> None:
    info = service.backup_info()
    if info.available:
        console.print(
            f"{info.backup_count} backups in [path]{service.backup_dir}[/path] "
            f"({format_file_size(info.total_size)})",
            highlight=False,
        )
    else:
        print_warning(info.message)


@click.command("menu")
@click.option("--database", "-d", type=click.Path(dir_okay=False), help="Database file (default from config)")
@handle_exceptions
def menu(database):
    """Interactive menu for creating and verifying the database.

    Takes one timestamped backup at startup, before any schema run. Create
    and verify run in a child process that is killed after the configured
    script timeout.
    """
    log_handler = configure_file_logging(LOG_DIR, level="INFO")
    try:
        _run_menu(database)
    finally:
        logger.remove(log_handler)


def _run_menu(database) -> None:
    cfg = load_runtime_config()
    db_path = resolve_database_path(database)
    timeout = cfg["timeouts"]["script"]

    service = BackupService(cfg["paths"]["backup_dir"], cfg["backup"]["prefix"], cfg["timeouts"]["busy"])
    startup = service.create_startup_backup(db_path, keep=cfg["backup"]["keep"])
    if startup.success:
        print_success(f"Database backup created: {startup.produced_path.name}")
    else:
        print_warning(f"Backup skipped: {startup.message}")

    print_header("VEHICLE AUTHORIZATION DATABASE MANAGER")
    console.print(f"Database: [path]{db_path}[/path]", highlight=False)

    while True:
        _print_menu()
        try:
            choice = click.prompt("Please select an option (0-3)", default="", show_default=False).strip()
        except click.Abort:
            logger.debug("Input closed, leaving menu")
            break

        if choice == "0":
            break
        elif choice == "1":
            _create(db_path, timeout)
        elif choice == "2":
            _verify(db_path, timeout)
        elif choice == "3":
            _backup_status(service)
        else:
            print_error("Invalid option. Please select a number between 0-3.")

    console.print("Thank you for using Vehicle Authorization Database Manager!")
