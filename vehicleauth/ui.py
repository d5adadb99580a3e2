"""Central UI handler for vehicleauth.

Single source of truth for Rich console styling. Import this instead of
instantiating Console() in every command file.

Usage:
    from vehicleauth.ui import console, print_header, print_error

    console.print("[success]Schema created[/success]")
    print_header("SCHEMA VERIFICATION")
    print_error("Database not found")
"""

import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from .executor import ExecutionReport
from .verifier import VerificationReport

VEHICLEAUTH_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "success": "bold green",
    "cmd": "bold magenta",
    "path": "bold cyan",
    "dim": "dim white",
})

# Single console instance - import this, don't create your own
console = Console(
    theme=VEHICLEAUTH_THEME,
    force_terminal=sys.stdout.isatty()
)


def print_header(title: str) -> None:
    """Print a styled section header with horizontal rules."""
    console.rule(f"[bold]{title}[/bold]")


def print_error(msg: str) -> None:
    """Print an error message in red."""
    console.print(f"[error]ERROR:[/error] {msg}")


def print_warning(msg: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[warning]WARNING:[/warning] {msg}")


def print_success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[success]OK:[/success] {msg}")


def print_status_panel(status: str, message: str, level: str = "info") -> None:
    """Print a status panel with colored border.

    Args:
        status: Status label (e.g., "PASSED", "FAILED")
        message: Main message line
        level: One of "error", "warning", "success", "info"
    """
    style_map = {
        "error": ("bold red", "red"),
        "warning": ("bold yellow", "yellow"),
        "success": ("bold green", "green"),
        "info": ("bold cyan", "cyan"),
    }
    text_style, border_style = style_map.get(level, ("white", "white"))

    panel = Panel(
        Text.assemble(
            (f"STATUS: [{status}]\n", text_style),
            (message, border_style),
        ),
        border_style=border_style,
        expand=False
    )
    console.print(panel)


def print_execution_report(report: ExecutionReport) -> None:
    print_header("SCHEMA CREATION")
    console.print(f"Database: [path]{report.db_path}[/path]", highlight=False)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Phase")
    table.add_column("Created", justify="right")
    table.add_column("Warnings", justify="right")
    table.add_column("Errors", justify="right")
    table.add_row(
        "Relationships dropped",
        str(report.relationships_dropped),
        str(len(report.relationship_drop_warnings)),
        "0",
    )
    table.add_row("Entities", str(len(report.entities_created)), "0", str(len(report.entity_errors)))
    table.add_row(
        "Indexes",
        str(report.indexes_created),
        str(len(report.index_warnings)),
        str(len(report.index_errors)),
    )
    table.add_row(
        "Foreign keys",
        str(report.foreign_keys_created),
        str(len(report.foreign_key_warnings)),
        str(len(report.foreign_key_errors)),
    )
    console.print(table)

    for err in report.entity_errors:
        print_error(f"Entity {err.entity}: {err.reason}")
    for msg in report.index_errors + report.foreign_key_errors:
        print_error(msg)
    for warning in report.index_warnings + report.foreign_key_warnings:
        print_warning(f"{warning.object_name}: {warning}")

    if report.success:
        print_status_panel("PASSED", report.summary(), level="success")
    else:
        print_status_panel("FAILED", report.summary(), level="error")
    console.print(f"[dim]Completed in {report.duration_seconds:.2f}s[/dim]")


def print_verification_report(report: VerificationReport) -> None:
    print_header("SCHEMA VERIFICATION")
    console.print(f"Database: [path]{report.db_path}[/path]", highlight=False)

    if report.error:
        print_error(report.error)
        print_status_panel("FAILED", "Could not read database metadata", level="error")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Check")
    table.add_column("Found", justify="right")
    table.add_column("Expected", justify="right")
    table.add_row("Tables", str(report.table_count), str(report.table_count - len(report.unexpected_tables) + len(report.missing_tables)))
    table.add_row("Relationships", str(report.relationship_count), str(report.expected_relationship_count))
    table.add_row("Indexes", str(report.index_count), "-")
    if report.central_entity:
        found = str(report.central_field_count) if report.central_entity_present else "missing"
        table.add_row(f"{report.central_entity} fields", found, "-")
    console.print(table)

    for name in report.missing_tables:
        print_error(f"Missing table: {name}")
    for name in report.missing_indexes:
        print_error(f"Missing index: {name}")
    for name in report.unexpected_tables:
        print_warning(f"Unexpected table: {name}")

    if report.success:
        print_status_panel("PASSED", f"{report.table_count} tables verified", level="success")
    else:
        print_status_panel("FAILED", "Live schema does not match the catalog", level="error")
