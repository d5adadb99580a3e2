"""Tests for the vehicleauth command line."""

import json

import pytest
from click.testing import CliRunner

from vehicleauth.cli import cli
from vehicleauth.commands import menu as menu_module
from vehicleauth.runner import ScriptResult
from vehicleauth.utils.exit_codes import ExitCodes


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run commands from an empty directory so config and logs stay local."""
    monkeypatch.chdir(tmp_path)
    for var in ("VEHICLEAUTH_PATHS_DATABASE", "VEHICLEAUTH_PATHS_BACKUP_DIR"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


def test_help_is_ascii(runner):
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    result.output.encode("ascii")


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "vehicleauth" in result.output


def test_create_then_verify(runner, workdir):
    db = workdir / "VA.db"

    created = runner.invoke(cli, ["create", "--database", str(db)])
    assert created.exit_code == ExitCodes.SUCCESS, created.output
    assert "19 of 19 entities created" in created.output

    verified = runner.invoke(cli, ["verify", "--database", str(db)])
    assert verified.exit_code == ExitCodes.SUCCESS, verified.output
    assert "PASSED" in verified.output


def test_create_json(runner, workdir):
    result = runner.invoke(cli, ["create", "--database", "VA.db", "--json"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["success"] is True
    assert data["foreign_keys_created"] == 25


def test_create_uses_configured_database(runner, workdir):
    (workdir / "vehicleauth.toml").write_text('[paths]\ndatabase = "Configured.db"\n')

    result = runner.invoke(cli, ["create", "--json"])

    assert result.exit_code == 0
    assert (workdir / "Configured.db").exists()


def test_verify_missing_database(runner, workdir):
    result = runner.invoke(cli, ["verify", "--database", "Nope.db", "--json"])

    assert result.exit_code == ExitCodes.VERIFICATION_FAILED
    data = json.loads(result.stdout)
    assert data["success"] is False
    assert "file not found" in data["error"]
    assert not (workdir / "Nope.db").exists()


def test_create_locked_database(runner, workdir, monkeypatch):
    import sqlite3

    monkeypatch.setenv("VEHICLEAUTH_TIMEOUTS_BUSY", "0.1")
    holder = sqlite3.connect(workdir / "VA.db", isolation_level=None)
    holder.execute("CREATE TABLE held (x INTEGER)")
    holder.execute("BEGIN EXCLUSIVE")
    try:
        result = runner.invoke(cli, ["create", "--database", "VA.db"])
    finally:
        holder.execute("ROLLBACK")
        holder.close()

    assert result.exit_code == ExitCodes.CONNECTION_FAILED


def test_backup_command(runner, workdir):
    runner.invoke(cli, ["create", "--database", "VA.db", "--json"])

    result = runner.invoke(cli, ["backup", "--database", "VA.db"])
    assert result.exit_code == 0, result.output
    backups = list((workdir / "Backup Database").iterdir())
    assert len(backups) == 1
    assert backups[0].name.startswith("Database-Backup-")

    info = runner.invoke(cli, ["backup", "--info"])
    assert info.exit_code == 0
    assert "Backups: 1" in info.output


def test_backup_missing_source_fails(runner, workdir):
    result = runner.invoke(cli, ["backup", "--database", "Nope.db"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_order_json(runner):
    result = runner.invoke(cli, ["order", "--json"])
    assert result.exit_code == 0
    names = json.loads(result.stdout)
    assert names[0] == "Addresses"
    assert len(names) == 19


def test_ddl_access(runner):
    result = runner.invoke(cli, ["ddl", "--dialect", "access"])
    assert result.exit_code == 0
    assert "COUNTER" in result.output
    assert "ALTER TABLE" in result.output


def test_ddl_to_file(runner, workdir):
    result = runner.invoke(cli, ["ddl", "-o", "schema.sql"])
    assert result.exit_code == 0
    assert (workdir / "schema.sql").read_text().startswith("CREATE TABLE Addresses")


def test_info(runner, workdir):
    result = runner.invoke(cli, ["info"])
    assert result.exit_code == 0
    assert "not found" in result.output
    assert "19 entities" in result.output


class TestMenu:
    @pytest.fixture
    def calls(self, monkeypatch):
        recorded = []

        def fake_run_isolated(command, db_path, timeout):
            recorded.append((command, str(db_path), timeout))
            return ScriptResult(True, 0, f"{command} ok")

        monkeypatch.setattr(menu_module, "run_isolated", fake_run_isolated)
        return recorded

    def test_exit_immediately(self, runner, workdir, calls):
        result = runner.invoke(cli, ["menu"], input="0\n")
        assert result.exit_code == 0
        assert "Backup skipped" in result.output
        assert calls == []

    def test_create_requires_confirmation(self, runner, workdir, calls):
        result = runner.invoke(cli, ["menu"], input="1\nn\n0\n")
        assert result.exit_code == 0
        assert "cancelled" in result.output
        assert calls == []

    def test_create_and_verify(self, runner, workdir, calls):
        result = runner.invoke(cli, ["menu", "--database", "VA.db"], input="1\ny\n2\n0\n")

        assert result.exit_code == 0, result.output
        assert [c[0] for c in calls] == ["create", "verify"]
        assert calls[0][1] == "VA.db"
        assert calls[0][2] == 600

    def test_startup_backup_taken_once(self, runner, workdir, calls):
        runner.invoke(cli, ["create", "--database", "VA.db", "--json"])

        result = runner.invoke(cli, ["menu", "--database", "VA.db"], input="2\n3\n0\n")

        assert result.exit_code == 0, result.output
        assert "Database backup created" in result.output
        assert len(list((workdir / "Backup Database").iterdir())) == 1

    def test_invalid_choice(self, runner, workdir, calls):
        result = runner.invoke(cli, ["menu"], input="9\n0\n")
        assert result.exit_code == 0
        assert "Invalid option" in result.output

    def test_timeout_reported(self, runner, workdir, monkeypatch):
        monkeypatch.setattr(
            menu_module,
            "run_isolated",
            lambda command, db_path, timeout: ScriptResult(False, -1, "", timed_out=True),
        )
        result = runner.invoke(cli, ["menu"], input="2\n0\n")
        assert "timed out" in result.output
