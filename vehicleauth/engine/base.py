"""Schema-capable connection interface.

The executor and verifier depend only on this capability set, so any backing
engine that can create and drop tables, indexes and relationships and report
its own metadata can host the catalog.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..schema.utils import EntityDefinition, ForeignKeyDefinition, IndexDefinition


@dataclass(frozen=True)
class RelationshipInfo:
    """A live relationship as reported by the engine."""

    name: str
    child_entity: str
    child_fields: tuple[str, ...]
    parent_entity: str
    parent_fields: tuple[str, ...]


class SchemaConnection(ABC):
    """Abstract schema connection.

    Every DDL method raises SchemaObjectError with a structured kind:
    ALREADY_EXISTS when the object is present, NOT_FOUND when a target or
    referenced object is missing, FAILED for anything else.
    """

    db_path: str

    @abstractmethod
    def table_exists(self, name: str) -> bool:
        """Check whether a user table exists."""

    @abstractmethod
    def create_table(self, entity: EntityDefinition) -> None:
        """Create a table from its definition."""

    @abstractmethod
    def drop_table(self, name: str) -> None:
        """Drop a table."""

    @abstractmethod
    def create_index(self, index: IndexDefinition) -> None:
        """Create a secondary index."""

    @abstractmethod
    def create_relationship(self, key: ForeignKeyDefinition) -> None:
        """Create a foreign-key relationship between two existing tables."""

    @abstractmethod
    def drop_relationship(self, relationship: RelationshipInfo) -> None:
        """Remove a live relationship, leaving both tables in place."""

    @abstractmethod
    def list_tables(self) -> list[str]:
        """User tables, excluding engine-internal objects."""

    @abstractmethod
    def list_indexes(self) -> dict[str, list[str]]:
        """User index names grouped by table."""

    @abstractmethod
    def list_relationships(self) -> list[RelationshipInfo]:
        """All live relationships."""

    @abstractmethod
    def list_fields(self, table: str) -> list[str]:
        """Column names of a table in definition order."""

    @abstractmethod
    def close(self) -> None:
        """Release the connection and any locks it holds."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False
