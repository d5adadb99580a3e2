"""Schema verifier - reconciles live database metadata with the catalog.

Read-only. Never raises: any failure to read metadata produces a report with
success=False and the error message set.
"""

import sqlite3
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .engine.base import SchemaConnection
from .engine.sqlite import connect as sqlite_connect
from .exceptions import DatabaseConnectionError, SchemaObjectError, VerificationError
from .schema.catalog import SchemaCatalog
from .utils.logging import logger


@dataclass
class VerificationReport:
    db_path: str
    success: bool = False
    tables: list[str] = field(default_factory=list)
    indexes: dict[str, list[str]] = field(default_factory=dict)
    relationship_count: int = 0
    expected_relationship_count: int = 0
    missing_tables: list[str] = field(default_factory=list)
    unexpected_tables: list[str] = field(default_factory=list)
    missing_indexes: list[str] = field(default_factory=list)
    central_entity: str | None = None
    central_entity_present: bool = False
    central_field_count: int = 0
    error: str | None = None

    @property
    def table_count(self) -> int:
        return len(self.tables)

    @property
    def index_count(self) -> int:
        return sum(len(names) for names in self.indexes.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "db_path": self.db_path,
            "success": self.success,
            "table_count": self.table_count,
            "tables": self.tables,
            "index_count": self.index_count,
            "indexes": self.indexes,
            "relationship_count": self.relationship_count,
            "expected_relationship_count": self.expected_relationship_count,
            "missing_tables": self.missing_tables,
            "unexpected_tables": self.unexpected_tables,
            "missing_indexes": self.missing_indexes,
            "central_entity": self.central_entity,
            "central_entity_present": self.central_entity_present,
            "central_field_count": self.central_field_count,
            "error": self.error,
        }


class SchemaVerifier:
    """Compare a live database against a SchemaCatalog."""

    def __init__(
        self,
        catalog: SchemaCatalog,
        connect: Callable[..., SchemaConnection] = sqlite_connect,
    ):
        self.catalog = catalog
        self.connect = connect

    def verify(self, db_path: str | Path) -> VerificationReport:
        report = VerificationReport(
            db_path=str(db_path),
            expected_relationship_count=len(self.catalog.enforced_foreign_keys()),
            central_entity=self.catalog.central_entity,
        )

        try:
            conn = self.connect(db_path, read_only=True)
        except DatabaseConnectionError as e:
            logger.error("Verification could not open database: {err}", err=e)
            report.error = str(e)
            return report

        try:
            self._collect(conn, report)
        except VerificationError as e:
            logger.error("Verification failed reading metadata: {err}", err=e)
            report.error = str(e)
            return report
        finally:
            conn.close()

        self._compare(report)
        logger.info(
            "Verified {path}: {tables} tables, {rels}/{expected} relationships, success={ok}",
            path=db_path,
            tables=report.table_count,
            rels=report.relationship_count,
            expected=report.expected_relationship_count,
            ok=report.success,
        )
        return report

    def _collect(self, conn: SchemaConnection, report: VerificationReport) -> None:
        """Read live metadata into report.

        Raises:
            VerificationError: The engine could not produce some metadata
        """
        try:
            report.tables = sorted(conn.list_tables())
            report.indexes = conn.list_indexes()
            report.relationship_count = len(conn.list_relationships())

            central = report.central_entity
            if central and central in report.tables:
                report.central_entity_present = True
                report.central_field_count = len(conn.list_fields(central))
        except (SchemaObjectError, sqlite3.Error) as e:
            raise VerificationError(f"Could not read metadata: {e}") from e

    def _compare(self, report: VerificationReport) -> None:
        expected = set(self.catalog.entity_names())
        live = set(report.tables)
        report.missing_tables = [n for n in self.catalog.entity_names() if n not in live]
        report.unexpected_tables = sorted(live - expected)

        live_indexes = {name for names in report.indexes.values() for name in names}
        report.missing_indexes = [
            index.name for index in self.catalog.list_indexes() if index.name not in live_indexes
        ]

        for name in report.missing_tables:
            logger.warning("Missing table: {name}", name=name)
        for name in report.missing_indexes:
            logger.warning("Missing index: {name}", name=name)

        central_ok = report.central_entity is None or report.central_entity_present
        report.success = (
            report.error is None
            and central_ok
            and not report.missing_tables
            and not report.missing_indexes
            and report.relationship_count == report.expected_relationship_count
        )
