"""Schema utility classes - Foundation for all entity definitions."""

from dataclasses import dataclass, field
from enum import Enum


class FieldType(Enum):
    """Semantic column types, mapped to engine types by a dialect."""

    SHORT_TEXT = "short_text"
    LONG_TEXT = "long_text"
    DATETIME = "datetime"
    BOOLEAN = "boolean"
    AUTO_INCREMENT = "auto_increment"


DEFAULT_TEXT_LENGTH = 255


@dataclass(frozen=True)
class FieldDefinition:
    """Represents a table column with semantic type and nullability."""

    name: str
    type: FieldType
    length: int | None = None
    nullable: bool = True

    def __post_init__(self):
        if self.type is FieldType.SHORT_TEXT and self.length is None:
            object.__setattr__(self, "length", DEFAULT_TEXT_LENGTH)
        if self.type is FieldType.AUTO_INCREMENT:
            object.__setattr__(self, "nullable", False)


def text(name: str, length: int = DEFAULT_TEXT_LENGTH, nullable: bool = True) -> FieldDefinition:
    """Short text column of at most `length` characters."""
    return FieldDefinition(name, FieldType.SHORT_TEXT, length=length, nullable=nullable)


def memo(name: str, nullable: bool = True) -> FieldDefinition:
    """Unbounded text column."""
    return FieldDefinition(name, FieldType.LONG_TEXT, nullable=nullable)


def timestamp(name: str, nullable: bool = True) -> FieldDefinition:
    return FieldDefinition(name, FieldType.DATETIME, nullable=nullable)


def flag(name: str, nullable: bool = True) -> FieldDefinition:
    return FieldDefinition(name, FieldType.BOOLEAN, nullable=nullable)


def counter(name: str) -> FieldDefinition:
    """Auto-incrementing integer key column."""
    return FieldDefinition(name, FieldType.AUTO_INCREMENT)


@dataclass(frozen=True)
class EntityDefinition:
    """Represents one table: its fields, primary key and documentation."""

    name: str
    fields: tuple[FieldDefinition, ...]
    primary_key: tuple[str, ...]
    description: str = ""

    def field_names(self) -> list[str]:
        """Get list of field names in definition order."""
        return [f.name for f in self.fields]

    def validate(self) -> list[str]:
        """Check internal consistency of the definition."""
        errors = []
        names = self.field_names()

        if not self.fields:
            errors.append(f"Entity '{self.name}' has no fields")

        duplicates = sorted({n for n in names if names.count(n) > 1})
        for name in duplicates:
            errors.append(f"Entity '{self.name}' declares field '{name}' more than once")

        if not self.primary_key:
            errors.append(f"Entity '{self.name}' has no primary key")

        for col in self.primary_key:
            if col not in names:
                errors.append(f"Primary key field '{col}' not found in entity '{self.name}'")

        counters = [f.name for f in self.fields if f.type is FieldType.AUTO_INCREMENT]
        if counters and tuple(counters) != self.primary_key:
            errors.append(
                f"Entity '{self.name}': auto-increment field must be the sole primary key"
            )

        return errors


@dataclass(frozen=True)
class IndexDefinition:
    """Secondary index on one entity. Performance aid only."""

    entity: str
    fields: tuple[str, ...]
    name: str
    unique: bool = False


@dataclass(frozen=True)
class ForeignKeyDefinition:
    """Directed dependency: child_fields of child_entity reference parent_entity.

    Non-enforced keys document a logical reference but are never created as a
    relationship in the database.
    """

    child_entity: str
    child_fields: tuple[str, ...]
    parent_entity: str
    parent_fields: tuple[str, ...]
    name: str = ""
    enforced: bool = True

    def __post_init__(self):
        if not self.name:
            object.__setattr__(
                self, "name", f"fk_{self.child_entity}_{'_'.join(self.child_fields)}"
            )

    def validate(self, entities: dict[str, EntityDefinition]) -> list[str]:
        """Validate the key against the catalog's entity definitions."""
        errors = []

        if self.child_entity not in entities:
            errors.append(f"Foreign key '{self.name}': child entity '{self.child_entity}' does not exist")
            return errors

        if self.parent_entity not in entities:
            errors.append(f"Foreign key '{self.name}': parent entity '{self.parent_entity}' does not exist")
            return errors

        child = entities[self.child_entity]
        parent = entities[self.parent_entity]

        child_names = set(child.field_names())
        for col in self.child_fields:
            if col not in child_names:
                errors.append(f"Local field '{col}' not found in entity '{self.child_entity}'")

        parent_names = set(parent.field_names())
        for col in self.parent_fields:
            if col not in parent_names:
                errors.append(f"Referenced field '{col}' not found in entity '{self.parent_entity}'")

        if len(self.child_fields) != len(self.parent_fields):
            errors.append(
                f"Foreign key '{self.name}': field count mismatch: "
                f"{len(self.child_fields)} local vs {len(self.parent_fields)} referenced"
            )

        return errors


def fk(
    child: str,
    child_fields: str | tuple[str, ...],
    parent: str,
    parent_fields: str | tuple[str, ...] | None = None,
    enforced: bool = True,
) -> ForeignKeyDefinition:
    """Shorthand for a foreign key; parent fields default to the child field names."""
    if isinstance(child_fields, str):
        child_fields = (child_fields,)
    if parent_fields is None:
        parent_fields = child_fields
    elif isinstance(parent_fields, str):
        parent_fields = (parent_fields,)
    return ForeignKeyDefinition(child, child_fields, parent, parent_fields, enforced=enforced)


def idx(entity: str, *fields: str, unique: bool = False) -> IndexDefinition:
    """Shorthand for an index named idx_<entity>_<fields>."""
    return IndexDefinition(entity, fields, f"idx_{entity}_{'_'.join(fields)}", unique=unique)
