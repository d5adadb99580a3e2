"""Schema executor - applies the catalog to a live database.

Each run is destructive-then-reconstructive:

    order -> connect -> drop relationships -> drop/create entities
          -> create indexes -> create relationships -> disconnect

Only a foreign-key cycle (before connecting) or a connection failure aborts a
run. Every other failure is recorded on the ExecutionReport and the run
continues with the next object.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .engine.base import SchemaConnection
from .engine.sqlite import connect as sqlite_connect
from .exceptions import (
    EntityCreationError,
    ErrorKind,
    ForeignKeyWarning,
    IndexWarning,
    SchemaObjectError,
)
from .schema.catalog import SchemaCatalog
from .utils.logging import logger

ConnectionFactory = Callable[..., SchemaConnection]


@dataclass
class ExecutionReport:
    """Outcome of one executor run. Partial success is explicit."""

    db_path: str
    creation_order: list[str] = field(default_factory=list)
    entities_created: list[str] = field(default_factory=list)
    entity_errors: list[EntityCreationError] = field(default_factory=list)
    relationships_dropped: int = 0
    relationship_drop_warnings: list[str] = field(default_factory=list)
    indexes_created: int = 0
    index_warnings: list[IndexWarning] = field(default_factory=list)
    index_errors: list[str] = field(default_factory=list)
    foreign_keys_created: int = 0
    foreign_key_warnings: list[ForeignKeyWarning] = field(default_factory=list)
    foreign_key_errors: list[str] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def entity_count(self) -> int:
        return len(self.creation_order)

    @property
    def failed_entities(self) -> list[str]:
        return [e.entity for e in self.entity_errors]

    @property
    def success(self) -> bool:
        """True when every entity was created; index/relationship errors are reported separately."""
        return not self.entity_errors

    def summary(self) -> str:
        text = f"{len(self.entities_created)} of {self.entity_count} entities created"
        if self.entity_errors:
            text += f", {len(self.entity_errors)} failed"
        return text

    def to_dict(self) -> dict[str, Any]:
        return {
            "db_path": self.db_path,
            "success": self.success,
            "summary": self.summary(),
            "creation_order": self.creation_order,
            "entities_created": self.entities_created,
            "entity_errors": {e.entity: e.reason for e in self.entity_errors},
            "relationships_dropped": self.relationships_dropped,
            "relationship_drop_warnings": self.relationship_drop_warnings,
            "indexes_created": self.indexes_created,
            "index_warnings": [str(w) for w in self.index_warnings],
            "index_errors": self.index_errors,
            "foreign_keys_created": self.foreign_keys_created,
            "foreign_key_warnings": [str(w) for w in self.foreign_key_warnings],
            "foreign_key_errors": self.foreign_key_errors,
            "duration_seconds": round(self.duration_seconds, 3),
        }


class SchemaExecutor:
    """Apply a SchemaCatalog through a schema-capable connection."""

    def __init__(self, catalog: SchemaCatalog, connect: ConnectionFactory = sqlite_connect):
        self.catalog = catalog
        self.connect = connect

    def execute(self, db_path: str | Path) -> ExecutionReport:
        """Run the full drop-and-recreate sequence against db_path.

        Raises:
            SchemaCycleError: Catalog has a foreign-key cycle (nothing was touched)
            DatabaseConnectionError: Database could not be opened exclusively
        """
        start = time.monotonic()
        report = ExecutionReport(db_path=str(db_path))

        report.creation_order = self.catalog.creation_order()
        logger.info(
            "Applying {count} entities to {path}", count=len(report.creation_order), path=db_path
        )

        conn = self.connect(db_path, read_only=False)
        try:
            self._drop_relationships(conn, report)
            self._drop_and_create_entities(conn, report)
            self._create_indexes(conn, report)
            self._create_foreign_keys(conn, report)
        finally:
            conn.close()
            report.duration_seconds = time.monotonic() - start

        logger.info("Schema run finished: {summary}", summary=report.summary())
        return report

    def _drop_relationships(self, conn: SchemaConnection, report: ExecutionReport) -> None:
        try:
            relationships = conn.list_relationships()
        except SchemaObjectError as e:
            logger.warning("Could not list existing relationships: {err}", err=e)
            report.relationship_drop_warnings.append(f"list relationships: {e}")
            return

        logger.info("Dropping {count} existing relationships", count=len(relationships))

        for relationship in relationships:
            try:
                conn.drop_relationship(relationship)
                report.relationships_dropped += 1
            except SchemaObjectError as e:
                logger.warning("Could not drop relationship {name}: {err}", name=relationship.name, err=e)
                report.relationship_drop_warnings.append(f"{relationship.name}: {e}")

    def _drop_and_create_entities(self, conn: SchemaConnection, report: ExecutionReport) -> None:
        for name in report.creation_order:
            entity = self.catalog.get_entity(name)

            try:
                conn.drop_table(name)
                logger.debug("Dropped existing table {name}", name=name)
            except SchemaObjectError as e:
                if e.kind is not ErrorKind.NOT_FOUND:
                    logger.warning("Could not drop table {name}: {err}", name=name, err=e)

            try:
                conn.create_table(entity)
            except SchemaObjectError as e:
                logger.error("Failed to create table {name}: {err}", name=name, err=e)
                report.entity_errors.append(EntityCreationError(name, str(e)))
                continue

            report.entities_created.append(name)
            logger.info("Created table {name}", name=name)

    def _create_indexes(self, conn: SchemaConnection, report: ExecutionReport) -> None:
        for index in self.catalog.list_indexes():
            try:
                conn.create_index(index)
                report.indexes_created += 1
            except SchemaObjectError as e:
                if e.is_benign:
                    logger.warning("Index {name}: {err}", name=index.name, err=e)
                    report.index_warnings.append(IndexWarning(index.name, str(e)))
                else:
                    logger.error("Failed to create index {name}: {err}", name=index.name, err=e)
                    report.index_errors.append(f"{index.name}: {e}")

        logger.info(
            "Indexes: {created} created, {warned} warnings, {failed} errors",
            created=report.indexes_created,
            warned=len(report.index_warnings),
            failed=len(report.index_errors),
        )

    def _create_foreign_keys(self, conn: SchemaConnection, report: ExecutionReport) -> None:
        for key in self.catalog.enforced_foreign_keys():
            try:
                conn.create_relationship(key)
                report.foreign_keys_created += 1
            except SchemaObjectError as e:
                if e.is_benign:
                    logger.warning("Relationship {name}: {err}", name=key.name, err=e)
                    report.foreign_key_warnings.append(ForeignKeyWarning(key.name, str(e)))
                else:
                    logger.error("Failed to create relationship {name}: {err}", name=key.name, err=e)
                    report.foreign_key_errors.append(f"{key.name}: {e}")

        logger.info(
            "Relationships: {created} created, {warned} warnings, {failed} errors",
            created=report.foreign_keys_created,
            warned=len(report.foreign_key_warnings),
            failed=len(report.foreign_key_errors),
        )
