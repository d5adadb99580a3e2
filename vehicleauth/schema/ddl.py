"""DDL rendering for catalog definitions.

Each dialect maps semantic field types to engine column types and renders
CREATE TABLE / CREATE INDEX / relationship statements. The SQLite dialect is
what the SQLite engine executes; the Access dialect renders a script for the
desktop engine the schema was first designed for.
"""

from collections.abc import Iterable, Mapping

from .catalog import SchemaCatalog
from .utils import (
    EntityDefinition,
    FieldDefinition,
    FieldType,
    ForeignKeyDefinition,
    IndexDefinition,
)


class Dialect:
    """Base DDL renderer."""

    name = "generic"
    type_map: Mapping[FieldType, str]
    # True when relationships can only be declared inside CREATE TABLE
    inline_foreign_keys = False

    def column_type(self, column: FieldDefinition) -> str:
        base = self.type_map[column.type]
        if column.type is FieldType.SHORT_TEXT:
            return f"{base}({column.length})"
        return base

    def column_sql(self, column: FieldDefinition, entity: EntityDefinition) -> str:
        parts = [column.name, self.column_type(column)]
        if not column.nullable:
            parts.append("NOT NULL")
        return " ".join(parts)

    def primary_key_sql(self, entity: EntityDefinition) -> str | None:
        cols = ", ".join(entity.primary_key)
        return f"CONSTRAINT pk_{entity.name} PRIMARY KEY ({cols})"

    def foreign_key_clause(self, key: ForeignKeyDefinition) -> str:
        local = ", ".join(key.child_fields)
        remote = ", ".join(key.parent_fields)
        return f"CONSTRAINT {key.name} FOREIGN KEY ({local}) REFERENCES {key.parent_entity} ({remote})"

    def create_table_sql(
        self,
        entity: EntityDefinition,
        foreign_keys: Iterable[ForeignKeyDefinition] = (),
    ) -> str:
        """Generate CREATE TABLE statement, one definition per line."""
        col_defs = [self.column_sql(col, entity) for col in entity.fields]

        pk = self.primary_key_sql(entity)
        if pk:
            col_defs.append(pk)

        for key in foreign_keys:
            col_defs.append(self.foreign_key_clause(key))

        return f"CREATE TABLE {entity.name} (\n    " + ",\n    ".join(col_defs) + "\n)"

    def create_index_sql(self, index: IndexDefinition) -> str:
        unique = "UNIQUE " if index.unique else ""
        cols = ", ".join(index.fields)
        return f"CREATE {unique}INDEX {index.name} ON {index.entity} ({cols})"

    def add_foreign_key_sql(self, key: ForeignKeyDefinition) -> str:
        return f"ALTER TABLE {key.child_entity} ADD {self.foreign_key_clause(key)}"

    def drop_table_sql(self, name: str) -> str:
        return f"DROP TABLE {name}"


class SQLiteDialect(Dialect):
    name = "sqlite"
    type_map = {
        FieldType.SHORT_TEXT: "VARCHAR",
        FieldType.LONG_TEXT: "TEXT",
        FieldType.DATETIME: "DATETIME",
        FieldType.BOOLEAN: "BOOLEAN",
        FieldType.AUTO_INCREMENT: "INTEGER",
    }
    inline_foreign_keys = True

    def column_sql(self, column: FieldDefinition, entity: EntityDefinition) -> str:
        if column.type is FieldType.AUTO_INCREMENT:
            # AUTOINCREMENT is only legal on an inline INTEGER PRIMARY KEY
            return f"{column.name} INTEGER PRIMARY KEY AUTOINCREMENT NOT NULL"
        return super().column_sql(column, entity)

    def primary_key_sql(self, entity: EntityDefinition) -> str | None:
        if any(f.type is FieldType.AUTO_INCREMENT for f in entity.fields):
            return None
        return super().primary_key_sql(entity)


class AccessDialect(Dialect):
    name = "access"
    type_map = {
        FieldType.SHORT_TEXT: "TEXT",
        FieldType.LONG_TEXT: "LONGTEXT",
        FieldType.DATETIME: "DATETIME",
        FieldType.BOOLEAN: "YESNO",
        FieldType.AUTO_INCREMENT: "COUNTER",
    }


DIALECTS: dict[str, Dialect] = {
    "sqlite": SQLiteDialect(),
    "access": AccessDialect(),
}


def get_dialect(name: str) -> Dialect:
    if name not in DIALECTS:
        raise ValueError(f"Unknown dialect: {name}. Must be one of {sorted(DIALECTS)}")
    return DIALECTS[name]


def render_script(catalog: SchemaCatalog, dialect: Dialect) -> str:
    """Render the full creation script in dependency order.

    Inline-relationship dialects declare enforced foreign keys inside each
    CREATE TABLE; the others add them with ALTER TABLE after all tables exist.
    """
    order = catalog.creation_order()
    enforced = catalog.enforced_foreign_keys()
    statements = []

    for name in order:
        entity = catalog.get_entity(name)
        inline = [k for k in enforced if k.child_entity == name] if dialect.inline_foreign_keys else []
        statements.append(dialect.create_table_sql(entity, inline))

    for index in catalog.list_indexes():
        statements.append(dialect.create_index_sql(index))

    if not dialect.inline_foreign_keys:
        for key in enforced:
            statements.append(dialect.add_foreign_key_sql(key))

    return ";\n\n".join(statements) + ";\n"
