"""Tests for the SQLite schema connection."""

from functools import partial

import pytest

from vehicleauth.engine.sqlite import SQLiteSchemaConnection, connect, validate_identifier
from vehicleauth.exceptions import DatabaseConnectionError, ErrorKind, SchemaObjectError
from vehicleauth.schema.utils import fk, idx


@pytest.fixture
def conn(db_path):
    connection = connect(db_path)
    yield connection
    connection.close()


@pytest.fixture
def populated(conn, small_catalog):
    for name in small_catalog.creation_order():
        conn.create_table(small_catalog.get_entity(name))
    return conn


def test_writable_connect_creates_file(db_path):
    with connect(db_path):
        pass
    assert db_path.exists()


def test_read_only_missing_file_is_not_created(db_path):
    with pytest.raises(DatabaseConnectionError, match="file not found") as excinfo:
        connect(db_path, read_only=True)

    assert isinstance(excinfo.value, ConnectionError)
    assert not db_path.exists()


def test_locked_database_raises_connection_error(db_path, exclusive_holder):
    with pytest.raises(DatabaseConnectionError, match="locked"):
        SQLiteSchemaConnection(db_path, busy_timeout=0.1)


def test_create_table_and_list(populated):
    assert populated.list_tables() == ["Address", "Contact"]
    assert populated.list_fields("Contact") == ["ContactID", "Name", "AddressID"]
    assert populated.table_exists("Address")


def test_create_existing_table_is_already_exists(populated, small_catalog):
    with pytest.raises(SchemaObjectError) as excinfo:
        populated.create_table(small_catalog.get_entity("Address"))

    assert excinfo.value.kind is ErrorKind.ALREADY_EXISTS
    assert excinfo.value.is_benign


def test_drop_missing_table_is_not_found(conn):
    with pytest.raises(SchemaObjectError) as excinfo:
        conn.drop_table("Ghost")
    assert excinfo.value.kind is ErrorKind.NOT_FOUND
    assert not excinfo.value.is_benign


def test_create_index(populated):
    populated.create_index(idx("Contact", "AddressID"))
    assert populated.list_indexes() == {"Contact": ["idx_Contact_AddressID"]}

    with pytest.raises(SchemaObjectError) as excinfo:
        populated.create_index(idx("Contact", "AddressID"))
    assert excinfo.value.kind is ErrorKind.ALREADY_EXISTS


def test_create_index_on_missing_table(conn):
    with pytest.raises(SchemaObjectError) as excinfo:
        conn.create_index(idx("Ghost", "X"))
    assert excinfo.value.kind is ErrorKind.NOT_FOUND


def test_create_relationship(populated):
    key = fk("Contact", "AddressID", "Address")
    populated.create_relationship(key)

    relationships = populated.list_relationships()
    assert len(relationships) == 1
    rel = relationships[0]
    assert rel.name == "fk_Contact_AddressID"
    assert rel.child_entity == "Contact"
    assert rel.parent_entity == "Address"
    assert rel.child_fields == ("AddressID",)


def test_duplicate_relationship_is_already_exists(populated):
    key = fk("Contact", "AddressID", "Address")
    populated.create_relationship(key)

    with pytest.raises(SchemaObjectError) as excinfo:
        populated.create_relationship(key)
    assert excinfo.value.kind is ErrorKind.ALREADY_EXISTS


def test_relationship_to_missing_table(conn, small_catalog):
    conn.create_table(small_catalog.get_entity("Contact"))
    with pytest.raises(SchemaObjectError) as excinfo:
        conn.create_relationship(fk("Contact", "AddressID", "Address"))
    assert excinfo.value.kind is ErrorKind.NOT_FOUND


def test_relationship_rebuild_keeps_rows_and_indexes(populated):
    populated.create_index(idx("Contact", "AddressID"))
    populated.conn.execute("INSERT INTO Address VALUES ('A1', 'Lille')")
    populated.conn.execute("INSERT INTO Contact VALUES ('C1', 'Ada', 'A1')")

    populated.create_relationship(fk("Contact", "AddressID", "Address"))

    rows = populated.conn.execute("SELECT ContactID, Name, AddressID FROM Contact").fetchall()
    assert rows == [("C1", "Ada", "A1")]
    assert populated.list_indexes() == {"Contact": ["idx_Contact_AddressID"]}
    assert populated.list_tables() == ["Address", "Contact"]


def test_relationship_rejected_when_rows_violate_it(populated):
    populated.conn.execute("INSERT INTO Contact VALUES ('C1', 'Ada', 'NOPE')")

    with pytest.raises(SchemaObjectError) as excinfo:
        populated.create_relationship(fk("Contact", "AddressID", "Address"))

    assert excinfo.value.kind is ErrorKind.FAILED
    assert populated.list_relationships() == []
    assert populated.conn.execute("SELECT count(*) FROM Contact").fetchone() == (1,)


def test_drop_relationship(populated):
    populated.create_relationship(fk("Contact", "AddressID", "Address"))
    (rel,) = populated.list_relationships()

    populated.drop_relationship(rel)

    assert populated.list_relationships() == []
    assert populated.list_fields("Contact") == ["ContactID", "Name", "AddressID"]


def test_enforcement_is_on(populated):
    import sqlite3

    populated.create_relationship(fk("Contact", "AddressID", "Address"))
    with pytest.raises(sqlite3.IntegrityError):
        populated.conn.execute("INSERT INTO Contact VALUES ('C1', 'Ada', 'NOPE')")


def test_read_only_connection_lists_metadata(db_path, small_catalog):
    with connect(db_path) as writer:
        writer.create_table(small_catalog.get_entity("Address"))

    with connect(db_path, read_only=True) as reader:
        assert reader.list_tables() == ["Address"]


def test_validate_identifier_rejects_sql():
    assert validate_identifier("Applications") == "Applications"
    with pytest.raises(SchemaObjectError) as excinfo:
        validate_identifier("x; DROP TABLE y")
    assert excinfo.value.kind is ErrorKind.FAILED


def test_busy_timeout_passes_through_factory(db_path):
    factory = partial(connect, busy_timeout=0.5)
    with factory(db_path) as conn:
        assert conn.db_path == str(db_path)
