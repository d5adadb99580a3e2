"""Database engines that can host the schema catalog."""

from .base import RelationshipInfo, SchemaConnection
from .sqlite import SQLiteSchemaConnection, connect

__all__ = [
    "RelationshipInfo",
    "SchemaConnection",
    "SQLiteSchemaConnection",
    "connect",
]
