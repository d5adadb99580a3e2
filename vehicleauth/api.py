"""Library entry points.

    from vehicleauth.api import create_schema, verify_schema

    report = create_schema("Database.db")
    print(report.summary())

Passing None uses the database path from vehicleauth.toml / environment.
"""

from pathlib import Path

from .config import load_runtime_config
from .engine.sqlite import connect
from .executor import ExecutionReport, SchemaExecutor
from .schema import CATALOG
from .verifier import SchemaVerifier, VerificationReport


def resolve_database_path(database_path: str | Path | None = None) -> Path:
    if database_path is not None:
        return Path(database_path)
    return Path(load_runtime_config()["paths"]["database"])


def create_schema(database_path: str | Path | None = None) -> ExecutionReport:
    """Drop and recreate the full vehicle authorization schema.

    Raises:
        DatabaseConnectionError: If the database cannot be opened exclusively
    """
    return SchemaExecutor(CATALOG, connect).execute(resolve_database_path(database_path))


def verify_schema(database_path: str | Path | None = None) -> VerificationReport:
    """Compare the live database with the catalog. Never raises."""
    return SchemaVerifier(CATALOG, connect).verify(resolve_database_path(database_path))
