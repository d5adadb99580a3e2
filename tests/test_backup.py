"""Tests for the backup operator."""

import os
import re
import sqlite3
import time
from datetime import datetime

import pytest

from vehicleauth.backup import BackupService, format_file_size, is_sqlite_file


@pytest.fixture
def backup_dir(tmp_path):
    return tmp_path / "Backup Database"


@pytest.fixture
def service(backup_dir):
    return BackupService(backup_dir, "Database-Backup", busy_timeout=0.1)


@pytest.fixture
def sqlite_db(db_path):
    conn = sqlite3.connect(db_path)
    conn.execute("CREATE TABLE Addresses (AddressID TEXT PRIMARY KEY, City TEXT)")
    conn.execute("INSERT INTO Addresses VALUES ('A1', 'Lille')")
    conn.commit()
    conn.close()
    return db_path


def test_backup_creates_directory_and_named_copy(service, sqlite_db, backup_dir):
    result = service.create_backup(sqlite_db)

    assert result.success, result.message
    assert backup_dir.is_dir()
    assert result.produced_path.parent == backup_dir
    assert re.fullmatch(r"Database-Backup-\d{8}-\d{6}\.db", result.produced_path.name)
    assert "Backup created successfully" in result.message


def test_backup_is_a_readable_database(service, sqlite_db):
    result = service.create_backup(sqlite_db)

    conn = sqlite3.connect(result.produced_path)
    try:
        assert conn.execute("SELECT City FROM Addresses").fetchall() == [("Lille",)]
    finally:
        conn.close()


def test_backup_name_uses_sortable_timestamp(service, tmp_path):
    when = datetime(2024, 3, 5, 7, 8, 9)
    assert service.backup_name(tmp_path / "Database.accdb", when) == "Database-Backup-20240305-070809.accdb"


def test_missing_source(service, db_path):
    result = service.create_backup(db_path)

    assert not result.success
    assert "not found" in result.message
    assert result.produced_path is None


def test_locked_source_reports_failure(service, db_path, exclusive_holder, backup_dir):
    result = service.create_backup(db_path)

    assert not result.success
    assert "locked" in result.message
    assert list(backup_dir.iterdir()) == []


def test_locked_source_gives_up_after_busy_timeout(service, db_path, exclusive_holder):
    start = time.monotonic()
    result = service.create_startup_backup(db_path)

    assert not result.success
    assert time.monotonic() - start < 5


def test_never_overwrites(service, sqlite_db, backup_dir, monkeypatch):
    monkeypatch.setattr(service, "backup_name", lambda source, when=None: "Database-Backup-fixed.db")

    first = service.create_backup(sqlite_db)
    second = service.create_backup(sqlite_db)

    assert first.success
    assert not second.success
    assert "already exists" in second.message


def test_non_sqlite_file_is_copied(service, tmp_path):
    source = tmp_path / "Database.accdb"
    source.write_bytes(b"\x00\x01Standard Jet DB")

    result = service.create_backup(source)

    assert result.success
    assert result.produced_path.suffix == ".accdb"
    assert result.produced_path.read_bytes() == source.read_bytes()
    assert not is_sqlite_file(source)


def test_backup_info(service, sqlite_db, backup_dir):
    assert not service.backup_info().available

    service.create_backup(sqlite_db)
    (backup_dir / "unrelated.txt").write_text("x")

    info = service.backup_info()
    assert info.available
    assert info.backup_count == 1
    assert info.total_size == sqlite_db.stat().st_size


def _make_backups(backup_dir, count):
    backup_dir.mkdir()
    paths = []
    for i in range(count):
        path = backup_dir / f"Database-Backup-2024010{i}-000000.db"
        path.write_bytes(b"x")
        os.utime(path, (1_700_000_000 + i, 1_700_000_000 + i))
        paths.append(path)
    return paths


def test_cleanup_keeps_newest(service, backup_dir):
    paths = _make_backups(backup_dir, 5)

    assert service.cleanup_old_backups(2) == 3

    assert sorted(p.name for p in backup_dir.iterdir()) == sorted(p.name for p in paths[3:])


@pytest.mark.parametrize("keep", [0, -1])
def test_cleanup_non_positive_keeps_all(service, backup_dir, keep):
    _make_backups(backup_dir, 3)
    assert service.cleanup_old_backups(keep) == 0
    assert len(list(backup_dir.iterdir())) == 3


def test_cleanup_without_directory(service):
    assert service.cleanup_old_backups(1) == 0


def test_startup_backup_never_raises(service, db_path):
    result = service.create_startup_backup(db_path)
    assert not result.success


@pytest.mark.parametrize(
    "size, expected",
    [(512, "512 B"), (1536, "1.5 KB"), (5 * 1024 * 1024, "5.0 MB"), (3 * 1024**3, "3.0 GB")],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected
