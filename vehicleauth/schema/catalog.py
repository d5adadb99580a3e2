"""Immutable schema catalog: entities, indexes and foreign keys."""

from collections.abc import Iterable

from ..exceptions import CatalogError
from .ordering import dependency_order
from .utils import EntityDefinition, ForeignKeyDefinition, IndexDefinition


class SchemaCatalog:
    """Complete, validated set of definitions the executor applies.

    Construction validates every definition and fails fast with CatalogError.
    Accessors return tuples; the catalog is never mutated after construction.
    """

    def __init__(
        self,
        entities: Iterable[EntityDefinition],
        foreign_keys: Iterable[ForeignKeyDefinition] = (),
        indexes: Iterable[IndexDefinition] = (),
        priority: Iterable[str] = (),
        central_entity: str | None = None,
    ):
        self._entities = tuple(entities)
        self._foreign_keys = tuple(foreign_keys)
        self._indexes = tuple(indexes)
        self._priority = tuple(priority)
        self._central_entity = central_entity
        self._by_name = {e.name: e for e in self._entities}

        errors = self.validate()
        if errors:
            raise CatalogError("Malformed schema catalog:\n  - " + "\n  - ".join(errors))

    def validate(self) -> list[str]:
        """Collect every consistency problem in the catalog."""
        errors = []

        names = [e.name for e in self._entities]
        for name in sorted({n for n in names if names.count(n) > 1}):
            errors.append(f"Entity '{name}' is defined more than once")

        for entity in self._entities:
            errors.extend(entity.validate())

        for key in self._foreign_keys:
            errors.extend(key.validate(self._by_name))

        key_names = [k.name for k in self._foreign_keys]
        for name in sorted({n for n in key_names if key_names.count(n) > 1}):
            errors.append(f"Foreign key name '{name}' is used more than once")

        index_names = [i.name for i in self._indexes]
        for name in sorted({n for n in index_names if index_names.count(n) > 1}):
            errors.append(f"Index name '{name}' is used more than once")

        for index in self._indexes:
            entity = self._by_name.get(index.entity)
            if entity is None:
                errors.append(f"Index '{index.name}' targets unknown entity '{index.entity}'")
                continue
            for col in index.fields:
                if col not in entity.field_names():
                    errors.append(f"Index '{index.name}': field '{col}' not found in '{index.entity}'")

        if self._central_entity and self._central_entity not in self._by_name:
            errors.append(f"Central entity '{self._central_entity}' is not in the catalog")

        return errors

    def list_entities(self) -> tuple[EntityDefinition, ...]:
        return self._entities

    def list_indexes(self) -> tuple[IndexDefinition, ...]:
        return self._indexes

    def list_foreign_keys(self) -> tuple[ForeignKeyDefinition, ...]:
        return self._foreign_keys

    def enforced_foreign_keys(self) -> tuple[ForeignKeyDefinition, ...]:
        """Foreign keys the executor creates as database relationships."""
        return tuple(k for k in self._foreign_keys if k.enforced)

    def get_entity(self, name: str) -> EntityDefinition:
        if name not in self._by_name:
            raise KeyError(f"Unknown entity: {name}")
        return self._by_name[name]

    def entity_names(self) -> list[str]:
        return [e.name for e in self._entities]

    @property
    def central_entity(self) -> str | None:
        return self._central_entity

    @property
    def priority(self) -> tuple[str, ...]:
        return self._priority

    def creation_order(self) -> list[str]:
        """Dependency-consistent creation order.

        Raises:
            SchemaCycleError: If the foreign-key graph is cyclic
        """
        return dependency_order(self._entities, self._foreign_keys, self._priority)

    def __len__(self) -> int:
        return len(self._entities)

    def __repr__(self) -> str:
        return (
            f"SchemaCatalog(entities={len(self._entities)}, "
            f"indexes={len(self._indexes)}, foreign_keys={len(self._foreign_keys)})"
        )
