"""
Schema module: vehicle authorization catalog and the types it is built from.

The catalog is constructed once at import and validated immediately, so a
malformed definition fails at process start rather than mid-run.
"""

from .catalog import SchemaCatalog
from .ordering import dependency_order, find_cycle
from .utils import (
    EntityDefinition,
    FieldDefinition,
    FieldType,
    ForeignKeyDefinition,
    IndexDefinition,
)
from .vehicle_auth_schema import (
    CENTRAL_ENTITY,
    CREATION_PRIORITY,
    VEHICLE_AUTH_ENTITIES,
    VEHICLE_AUTH_FOREIGN_KEYS,
    VEHICLE_AUTH_INDEXES,
)

CATALOG = SchemaCatalog(
    entities=VEHICLE_AUTH_ENTITIES,
    foreign_keys=VEHICLE_AUTH_FOREIGN_KEYS,
    indexes=VEHICLE_AUTH_INDEXES,
    priority=CREATION_PRIORITY,
    central_entity=CENTRAL_ENTITY,
)


assert len(CATALOG) == 19, f"Schema contract violation: Expected 19 entities, got {len(CATALOG)}"

# Computed at import so a foreign-key cycle fails at process start
CREATION_ORDER: list[str] = CATALOG.creation_order()


__all__ = [
    "CATALOG",
    "CREATION_ORDER",
    "SchemaCatalog",
    "EntityDefinition",
    "FieldDefinition",
    "FieldType",
    "ForeignKeyDefinition",
    "IndexDefinition",
    "dependency_order",
    "find_cycle",
]
