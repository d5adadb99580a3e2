"""Tests for runtime configuration loading."""

from pathlib import Path

import pytest

from vehicleauth.config import DEFAULTS, load_runtime_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for section, keys in DEFAULTS.items():
        for key in keys:
            monkeypatch.delenv(f"VEHICLEAUTH_{section.upper()}_{key.upper()}", raising=False)


def test_defaults(tmp_path):
    cfg = load_runtime_config(tmp_path)

    assert cfg["paths"]["database"] == str(tmp_path / "Database.db")
    assert cfg["paths"]["backup_dir"] == str(tmp_path / "Backup Database")
    assert cfg["backup"]["prefix"] == "Database-Backup"
    assert cfg["backup"]["keep"] == 0
    assert cfg["timeouts"]["script"] == 600


def test_defaults_are_not_mutated(tmp_path, monkeypatch):
    monkeypatch.setenv("VEHICLEAUTH_BACKUP_KEEP", "9")
    load_runtime_config(tmp_path)
    assert DEFAULTS["backup"]["keep"] == 0


def test_toml_file(tmp_path):
    (tmp_path / "vehicleauth.toml").write_text(
        '[paths]\ndatabase = "data/VA.db"\n\n[timeouts]\nscript = 120\nbusy = 2\n'
    )

    cfg = load_runtime_config(tmp_path)

    assert cfg["paths"]["database"] == str(tmp_path / "data" / "VA.db")
    assert cfg["timeouts"]["script"] == 120
    assert cfg["timeouts"]["busy"] == 2


def test_wrong_type_in_toml_keeps_default(tmp_path):
    (tmp_path / "vehicleauth.toml").write_text('[backup]\nkeep = "lots"\n')
    assert load_runtime_config(tmp_path)["backup"]["keep"] == 0


def test_malformed_toml_keeps_defaults(tmp_path):
    (tmp_path / "vehicleauth.toml").write_text("[paths\n")
    assert load_runtime_config(tmp_path)["timeouts"]["script"] == 600


def test_environment_overrides_file(tmp_path, monkeypatch):
    (tmp_path / "vehicleauth.toml").write_text("[timeouts]\nscript = 120\n")
    monkeypatch.setenv("VEHICLEAUTH_TIMEOUTS_SCRIPT", "30")
    monkeypatch.setenv("VEHICLEAUTH_TIMEOUTS_BUSY", "0.5")

    cfg = load_runtime_config(tmp_path)

    assert cfg["timeouts"]["script"] == 30
    assert cfg["timeouts"]["busy"] == 0.5


def test_invalid_environment_value_keeps_previous(tmp_path, monkeypatch):
    monkeypatch.setenv("VEHICLEAUTH_BACKUP_KEEP", "many")
    assert load_runtime_config(tmp_path)["backup"]["keep"] == 0


def test_absolute_database_path_is_kept(tmp_path, monkeypatch):
    target = tmp_path / "elsewhere" / "VA.db"
    monkeypatch.setenv("VEHICLEAUTH_PATHS_DATABASE", str(target))
    assert Path(load_runtime_config(tmp_path)["paths"]["database"]) == target
