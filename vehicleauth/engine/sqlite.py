"""SQLite implementation of the schema connection.

SQLite cannot add or drop a foreign key on an existing table, so relationship
changes use the documented rebuild procedure: create a copy of the table with
the revised definition, copy rows, drop the old table, rename the copy and
restore its indexes, all inside one transaction with enforcement paused.
"""

import re
import sqlite3
from pathlib import Path

from ..exceptions import DatabaseConnectionError, ErrorKind, SchemaObjectError
from ..schema.ddl import SQLiteDialect
from ..schema.utils import EntityDefinition, ForeignKeyDefinition, IndexDefinition
from ..utils.constants import BUSY_TIMEOUT_SECONDS, SQLITE_INTERNAL_PREFIX
from ..utils.logging import logger
from .base import RelationshipInfo, SchemaConnection

IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

CREATE_TABLE_HEAD = re.compile(r'^\s*CREATE\s+TABLE\s+"?(\w+)"?', re.IGNORECASE)

NAMED_FOREIGN_KEY = re.compile(
    r',\s*CONSTRAINT\s+"?(\w+)"?\s+FOREIGN\s+KEY\s*\(([^)]*)\)\s*'
    r'REFERENCES\s+"?(\w+)"?\s*\(([^)]*)\)',
    re.IGNORECASE,
)

REBUILD_SUFFIX = "__rebuild"


def validate_identifier(name: str) -> str:
    """Reject anything that is not a plain identifier before it reaches SQL."""
    if not IDENTIFIER.match(name):
        raise SchemaObjectError(ErrorKind.FAILED, name, f"Invalid identifier: {name!r}")
    return name


def quote_identifier(name: str) -> str:
    """Double-quote a name read back from the database."""
    return '"' + name.replace('"', '""') + '"'


def _split_columns(text: str) -> tuple[str, ...]:
    return tuple(part.strip().strip('"') for part in text.split(",") if part.strip())


class SQLiteSchemaConnection(SchemaConnection):
    """Schema connection over a single SQLite database file.

    Writable connections take an exclusive lock for their whole lifetime so no
    other process can touch the file mid-run. Read-only connections never
    create the file and take only shared locks.
    """

    dialect = SQLiteDialect()

    def __init__(
        self,
        db_path: str | Path,
        read_only: bool = False,
        busy_timeout: float = BUSY_TIMEOUT_SECONDS,
    ):
        self.db_path = str(db_path)
        self.read_only = read_only
        self.conn: sqlite3.Connection | None = None

        path = Path(db_path)
        if read_only and not path.exists():
            raise DatabaseConnectionError(self.db_path, "file not found")

        try:
            if read_only:
                self.conn = sqlite3.connect(
                    f"{path.resolve().as_uri()}?mode=ro",
                    uri=True,
                    timeout=busy_timeout,
                    isolation_level=None,
                )
                self.conn.execute("SELECT count(*) FROM sqlite_master").fetchone()
            else:
                self.conn = sqlite3.connect(
                    self.db_path, timeout=busy_timeout, isolation_level=None
                )
                self.conn.execute("PRAGMA locking_mode = EXCLUSIVE")
                self.conn.execute("BEGIN EXCLUSIVE")
                self.conn.execute("COMMIT")
                self.conn.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as e:
            self.close()
            raise DatabaseConnectionError(self.db_path, str(e)) from e

        logger.debug(
            "Opened {path} ({mode})", path=self.db_path, mode="read-only" if read_only else "exclusive"
        )

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def _table_sql(self, name: str) -> str | None:
        row = self.conn.execute(
            "SELECT sql FROM sqlite_master WHERE type='table' AND name=?", (name,)
        ).fetchone()
        return row[0] if row else None

    def table_exists(self, name: str) -> bool:
        return self._table_sql(name) is not None

    def _index_exists(self, name: str) -> bool:
        row = self.conn.execute(
            "SELECT 1 FROM sqlite_master WHERE type='index' AND name=?", (name,)
        ).fetchone()
        return row is not None

    def list_tables(self) -> list[str]:
        rows = self.conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
        ).fetchall()
        return [name for (name,) in rows if not name.startswith(SQLITE_INTERNAL_PREFIX)]

    def list_indexes(self) -> dict[str, list[str]]:
        # Automatic indexes for PRIMARY KEY/UNIQUE have NULL sql
        rows = self.conn.execute(
            "SELECT tbl_name, name FROM sqlite_master "
            "WHERE type='index' AND sql IS NOT NULL ORDER BY tbl_name, name"
        ).fetchall()
        indexes: dict[str, list[str]] = {}
        for table, name in rows:
            indexes.setdefault(table, []).append(name)
        return indexes

    def list_fields(self, table: str) -> list[str]:
        rows = self.conn.execute(
            "SELECT name FROM pragma_table_info(?) ORDER BY cid", (table,)
        ).fetchall()
        return [name for (name,) in rows]

    def _named_constraints(self, table: str) -> dict[tuple[str, tuple[str, ...]], str]:
        """Map (parent, child_fields) to constraint name from the stored DDL."""
        sql = self._table_sql(table) or ""
        names = {}
        for match in NAMED_FOREIGN_KEY.finditer(sql):
            name, local, parent, _remote = match.groups()
            names[(parent, _split_columns(local))] = name
        return names

    def _relationships_of(self, table: str) -> list[RelationshipInfo]:
        rows = self.conn.execute(
            'SELECT id, seq, "table", "from", "to" FROM pragma_foreign_key_list(?)', (table,)
        ).fetchall()

        grouped: dict[int, list[tuple]] = {}
        for row in rows:
            grouped.setdefault(row[0], []).append(row)

        names = self._named_constraints(table)
        relationships = []
        for fk_id, parts in sorted(grouped.items()):
            parts.sort(key=lambda r: r[1])
            parent = parts[0][2]
            local = tuple(r[3] for r in parts)
            remote = tuple(r[4] for r in parts)
            name = names.get((parent, local), f"{table}_fk{fk_id}")
            relationships.append(RelationshipInfo(name, table, local, parent, remote))
        return relationships

    def list_relationships(self) -> list[RelationshipInfo]:
        relationships = []
        for table in self.list_tables():
            try:
                relationships.extend(self._relationships_of(table))
            except sqlite3.Error as e:
                raise SchemaObjectError(ErrorKind.FAILED, table, str(e)) from e
        return relationships

    # ------------------------------------------------------------------
    # DDL
    # ------------------------------------------------------------------

    def _execute_ddl(self, sql: str, object_name: str) -> None:
        try:
            self.conn.execute(sql)
        except sqlite3.Error as e:
            raise SchemaObjectError(ErrorKind.FAILED, object_name, str(e)) from e

    def create_table(self, entity: EntityDefinition) -> None:
        validate_identifier(entity.name)
        if self.table_exists(entity.name):
            raise SchemaObjectError(
                ErrorKind.ALREADY_EXISTS, entity.name, f"Table {entity.name} already exists"
            )
        self._execute_ddl(self.dialect.create_table_sql(entity), entity.name)

    def drop_table(self, name: str) -> None:
        validate_identifier(name)
        if not self.table_exists(name):
            raise SchemaObjectError(ErrorKind.NOT_FOUND, name, f"Table {name} does not exist")
        self._execute_ddl(self.dialect.drop_table_sql(name), name)

    def create_index(self, index: IndexDefinition) -> None:
        validate_identifier(index.name)
        if self._index_exists(index.name):
            raise SchemaObjectError(
                ErrorKind.ALREADY_EXISTS, index.name, f"Index {index.name} already exists"
            )
        if not self.table_exists(index.entity):
            raise SchemaObjectError(
                ErrorKind.NOT_FOUND, index.name, f"Table {index.entity} does not exist"
            )
        self._execute_ddl(self.dialect.create_index_sql(index), index.name)

    def create_relationship(self, key: ForeignKeyDefinition) -> None:
        validate_identifier(key.name)
        for table in (key.child_entity, key.parent_entity):
            if not self.table_exists(table):
                raise SchemaObjectError(
                    ErrorKind.NOT_FOUND, key.name, f"Table {table} does not exist"
                )

        for existing in self._relationships_of(key.child_entity):
            if existing.name == key.name or (
                existing.parent_entity == key.parent_entity
                and existing.child_fields == key.child_fields
            ):
                raise SchemaObjectError(
                    ErrorKind.ALREADY_EXISTS, key.name, f"Relationship {key.name} already exists"
                )

        sql = self._table_sql(key.child_entity).rstrip()
        if not sql.endswith(")"):
            raise SchemaObjectError(
                ErrorKind.FAILED, key.name, f"Unrecognized definition for table {key.child_entity}"
            )
        clause = self.dialect.foreign_key_clause(key)
        new_sql = sql[:-1].rstrip() + f",\n    {clause}\n)"
        self._rebuild_table(key.child_entity, new_sql, key.name)

    def drop_relationship(self, relationship: RelationshipInfo) -> None:
        table = relationship.child_entity
        sql = self._table_sql(table)
        if sql is None:
            raise SchemaObjectError(
                ErrorKind.NOT_FOUND, relationship.name, f"Table {table} does not exist"
            )

        target = None
        for match in NAMED_FOREIGN_KEY.finditer(sql):
            if match.group(1) == relationship.name:
                target = match
                break
        if target is None:
            raise SchemaObjectError(
                ErrorKind.NOT_FOUND,
                relationship.name,
                f"Relationship {relationship.name} is not a named constraint of {table}",
            )

        new_sql = sql[: target.start()] + sql[target.end() :]
        self._rebuild_table(table, new_sql, relationship.name)

    def _rebuild_table(self, table: str, new_sql: str, object_name: str) -> None:
        """Replace a table's definition while keeping its rows and indexes."""
        validate_identifier(table)
        temp = table + REBUILD_SUFFIX
        temp_sql, count = CREATE_TABLE_HEAD.subn(f"CREATE TABLE {temp}", new_sql, count=1)
        if count != 1:
            raise SchemaObjectError(
                ErrorKind.FAILED, object_name, f"Unrecognized definition for table {table}"
            )

        index_sql = [
            sql
            for (sql,) in self.conn.execute(
                "SELECT sql FROM sqlite_master WHERE type='index' AND tbl_name=? AND sql IS NOT NULL",
                (table,),
            ).fetchall()
        ]
        columns = ", ".join(quote_identifier(c) for c in self.list_fields(table))

        self.conn.execute("PRAGMA foreign_keys = OFF")
        try:
            self.conn.execute("BEGIN")
            try:
                self.conn.execute(temp_sql)
                self.conn.execute(f"INSERT INTO {temp} ({columns}) SELECT {columns} FROM {table}")
                self.conn.execute(f"DROP TABLE {table}")
                self.conn.execute(f"ALTER TABLE {temp} RENAME TO {table}")
                for sql in index_sql:
                    self.conn.execute(sql)
                violations = self.conn.execute(f"PRAGMA foreign_key_check({table})").fetchall()
                if violations:
                    raise sqlite3.IntegrityError(
                        f"{len(violations)} existing rows violate the revised definition"
                    )
                self.conn.execute("COMMIT")
            except sqlite3.Error:
                self.conn.execute("ROLLBACK")
                raise
        except sqlite3.Error as e:
            raise SchemaObjectError(ErrorKind.FAILED, object_name, str(e)) from e
        finally:
            self.conn.execute("PRAGMA foreign_keys = ON")

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None


def connect(db_path: str | Path, read_only: bool = False, **kwargs) -> SQLiteSchemaConnection:
    """Default connection factory used by the executor and verifier."""
    return SQLiteSchemaConnection(db_path, read_only=read_only, **kwargs)
