"""Exceptions for schema lifecycle failures.

Only DatabaseConnectionError and SchemaCycleError abort a run. Everything else
is recorded on the run's report and returned normally.
"""

from enum import Enum


class VehicleAuthError(Exception):
    """Base class for all vehicleauth errors."""


class CatalogError(VehicleAuthError):
    """Raised when the schema catalog is malformed.

    This is a programming error in the catalog definition and surfaces at
    import time, never during a run.
    """


class SchemaCycleError(CatalogError):
    """Raised when the foreign-key graph admits no topological order.

    Attributes:
        entities: Entity names forming the cycle, first name repeated at the end
    """

    def __init__(self, entities: list[str]):
        self.entities = list(entities)
        super().__init__(f"Foreign-key cycle between entities: {' -> '.join(self.entities)}")


class DatabaseConnectionError(VehicleAuthError, ConnectionError):
    """Raised when the target database cannot be opened or is locked."""

    def __init__(self, db_path: str, reason: str):
        self.db_path = db_path
        self.reason = reason
        super().__init__(f"Cannot open database {db_path}: {reason}")


class ErrorKind(Enum):
    """Structured classification of engine failures."""

    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    FAILED = "failed"


class SchemaObjectError(VehicleAuthError):
    """Raised by a schema connection when a DDL operation fails.

    Attributes:
        kind: Structured failure classification
        object_name: Table, index or relationship the operation targeted
    """

    def __init__(self, kind: ErrorKind, object_name: str, message: str):
        self.kind = kind
        self.object_name = object_name
        super().__init__(message)

    @property
    def is_benign(self) -> bool:
        return self.kind is ErrorKind.ALREADY_EXISTS


class EntityCreationError(VehicleAuthError):
    """Recorded when one entity could not be created. Never raised out of a run."""

    def __init__(self, entity: str, reason: str):
        self.entity = entity
        self.reason = reason
        super().__init__(f"{entity}: {reason}")


class VerificationError(VehicleAuthError):
    """Raised internally when live metadata cannot be read."""


class BackupError(VehicleAuthError):
    """Raised internally by the backup operator; always captured into a result."""


class SchemaWarning(UserWarning):
    """Benign condition recorded during a run, counted apart from errors."""

    def __init__(self, object_name: str, message: str):
        self.object_name = object_name
        super().__init__(message)


class IndexWarning(SchemaWarning):
    """An index already existed or was otherwise skipped harmlessly."""


class ForeignKeyWarning(SchemaWarning):
    """A relationship already existed or was otherwise skipped harmlessly."""
