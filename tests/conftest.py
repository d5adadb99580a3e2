"""Pytest configuration and fixtures."""

import sqlite3
from pathlib import Path

import pytest

from vehicleauth.schema.catalog import SchemaCatalog
from vehicleauth.schema.utils import EntityDefinition, fk, idx, text


@pytest.fixture
def db_path(tmp_path) -> Path:
    """Path to a database file that does not exist yet."""
    return tmp_path / "Database.db"


@pytest.fixture
def small_catalog() -> SchemaCatalog:
    """Two-entity catalog: Contact references Address."""
    address = EntityDefinition(
        name="Address",
        fields=(text("AddressID", 50, nullable=False), text("City", 100)),
        primary_key=("AddressID",),
    )
    contact = EntityDefinition(
        name="Contact",
        fields=(
            text("ContactID", 50, nullable=False),
            text("Name"),
            text("AddressID", 50),
        ),
        primary_key=("ContactID",),
    )
    return SchemaCatalog(
        entities=[contact, address],
        foreign_keys=[fk("Contact", "AddressID", "Address")],
        indexes=[idx("Contact", "AddressID")],
    )


@pytest.fixture
def read_conn(db_path):
    """Read-only sqlite3 connection for asserting on results.

    Opened lazily so tests can create the database first.
    """
    conns = []

    def _open():
        conn = sqlite3.connect(f"file:{db_path}?mode=ro", uri=True)
        conns.append(conn)
        return conn

    yield _open

    for conn in conns:
        conn.close()


@pytest.fixture
def exclusive_holder(db_path):
    """Another process-like connection holding an exclusive lock on db_path."""
    conn = sqlite3.connect(db_path, isolation_level=None)
    conn.execute("CREATE TABLE IF NOT EXISTS held (x INTEGER)")
    conn.execute("BEGIN EXCLUSIVE")
    yield conn
    conn.execute("ROLLBACK")
    conn.close()
