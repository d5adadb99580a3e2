"""Tests for logging, error handling and exit codes."""

import click
import pytest

from vehicleauth.utils import error_handler
from vehicleauth.utils.error_handler import handle_exceptions
from vehicleauth.utils.exit_codes import ExitCodes
from vehicleauth.utils.logging import configure_file_logging, get_subprocess_env, logger


def test_exit_codes_are_distinct():
    codes = [
        ExitCodes.SUCCESS,
        ExitCodes.ENTITY_ERRORS,
        ExitCodes.VERIFICATION_FAILED,
        ExitCodes.CONNECTION_FAILED,
        ExitCodes.CATALOG_DEFECT,
        ExitCodes.TIMEOUT,
    ]
    assert len(set(codes)) == len(codes)


def test_unknown_code_description():
    assert "Unknown" in ExitCodes.get_description(99)


def test_handle_exceptions_wraps_unexpected_errors(tmp_path, monkeypatch):
    log_dir = tmp_path / "logs"
    monkeypatch.setattr(error_handler, "LOG_DIR", log_dir)
    monkeypatch.setattr(error_handler, "ERROR_LOG_FILE", log_dir / "error.log")

    @handle_exceptions
    def broken():
        raise RuntimeError("boom")

    with pytest.raises(click.ClickException, match="RuntimeError: boom"):
        broken()

    assert "RuntimeError: boom" in (log_dir / "error.log").read_text()


def test_handle_exceptions_passes_click_errors_through():
    @handle_exceptions
    def usage():
        raise click.UsageError("bad flag")

    with pytest.raises(click.UsageError):
        usage()


def test_subprocess_env_carries_run_id():
    env = get_subprocess_env()
    assert env["VEHICLEAUTH_RUN_ID"]


def test_file_logging(tmp_path):
    handler = configure_file_logging(tmp_path / "logs", level="INFO")
    try:
        logger.info("schema run started")
    finally:
        logger.remove(handler)

    assert "schema run started" in (tmp_path / "logs" / "vehicleauth.log").read_text()
