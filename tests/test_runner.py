"""Tests for out-of-process schema command execution."""

import subprocess
import sys

from vehicleauth import runner
from vehicleauth.api import create_schema
from vehicleauth.runner import build_command, run_isolated


def test_build_command(tmp_path):
    cmd = build_command("verify", tmp_path / "Database.db", "--json")
    assert cmd[:3] == [sys.executable, "-m", "vehicleauth"]
    assert cmd[3:] == ["verify", "--database", str(tmp_path / "Database.db"), "--json"]


def test_success(monkeypatch, tmp_path):
    captured = {}

    def fake_run(cmd, **kwargs):
        captured.update(kwargs)
        return subprocess.CompletedProcess(cmd, 0, stdout=b"19 of 19 entities created\n")

    monkeypatch.setattr(runner.subprocess, "run", fake_run)

    result = run_isolated("create", tmp_path / "Database.db", timeout=30)

    assert result.success
    assert result.exit_code == 0
    assert "19 of 19" in result.output
    assert not result.timed_out
    assert captured["timeout"] == 30
    assert "VEHICLEAUTH_RUN_ID" in captured["env"]


def test_failure_exit_code(monkeypatch, tmp_path):
    monkeypatch.setattr(
        runner.subprocess,
        "run",
        lambda cmd, **kw: subprocess.CompletedProcess(cmd, 2, stdout=b"Missing table: Issues\n"),
    )

    result = run_isolated("verify", tmp_path / "Database.db")

    assert not result.success
    assert result.exit_code == 2


def test_timeout_is_reported(monkeypatch, tmp_path):
    def fake_run(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"], output=b"partial")

    monkeypatch.setattr(runner.subprocess, "run", fake_run)

    result = run_isolated("create", tmp_path / "Database.db", timeout=1)

    assert not result.success
    assert result.timed_out
    assert result.exit_code == -1
    assert result.output.startswith("partial")
    assert "timed out after 1s" in result.output


def test_missing_interpreter(monkeypatch, tmp_path):
    def fake_run(cmd, **kwargs):
        raise FileNotFoundError("no such interpreter")

    monkeypatch.setattr(runner.subprocess, "run", fake_run)

    result = run_isolated("create", tmp_path / "Database.db")

    assert not result.success
    assert not result.timed_out


def test_child_process_verifies_created_database(tmp_path):
    db_path = tmp_path / "Database.db"
    create_schema(db_path)

    result = run_isolated("verify", db_path, timeout=120)

    assert result.exit_code == 0, result.output
    assert result.success
    assert not result.timed_out
    assert "PASSED" in result.output


def test_child_process_is_killed_on_timeout(tmp_path):
    result = run_isolated("verify", tmp_path / "Database.db", timeout=0.01)

    assert result.timed_out
    assert result.exit_code == -1
    assert not result.success
    assert "timed out after 0.01s" in result.output
