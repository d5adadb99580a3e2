"""Centralized logging configuration using Loguru.

Every module logs through the same configured logger so schema runs, backups
and CLI commands share one output format.

Usage:
    from vehicleauth.utils.logging import logger
    logger.info("Message")
    logger.debug("Debug message")  # Only shows if VEHICLEAUTH_LOG_LEVEL=DEBUG

Environment Variables:
    VEHICLEAUTH_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: INFO)
    VEHICLEAUTH_LOG_JSON: 0|1 (default: 0, human-readable)
    VEHICLEAUTH_LOG_FILE: path to NDJSON log file (optional)
"""

import json
import os
import sys
import uuid
from pathlib import Path

from loguru import logger

logger.remove()

_log_level = os.environ.get("VEHICLEAUTH_LOG_LEVEL", "INFO").upper()
_json_mode = os.environ.get("VEHICLEAUTH_LOG_JSON", "0") == "1"
_log_file = os.environ.get("VEHICLEAUTH_LOG_FILE")
_run_id = os.environ.get("VEHICLEAUTH_RUN_ID") or str(uuid.uuid4())


def _to_ndjson(record) -> str:
    """Render a loguru record as a single JSON line."""
    payload = {
        "level": record["level"].name,
        "time": record["time"].isoformat(),
        "msg": record["message"],
        "pid": record["process"].id,
        "run_id": record["extra"].get("run_id", _run_id),
    }

    for key, value in record["extra"].items():
        if key != "run_id":
            payload[key] = value

    if record["exception"]:
        payload["err"] = {
            "type": record["exception"].type.__name__ if record["exception"].type else "Error",
            "message": str(record["exception"].value) if record["exception"].value else "",
        }

    return json.dumps(payload, default=str)


def ndjson_sink(message):
    """Write log records as NDJSON to stdout."""
    # Never call logger.* inside a sink - causes infinite recursion
    sys.stdout.write(_to_ndjson(message.record) + "\n")
    sys.stdout.flush()


# No emojis - Windows CP1252 consoles
_human_format = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}:{function}:{line}</cyan> - "
    "<level>{message}</level>"
)

logger.level("DEBUG", color="<blue>")
logger.level("INFO", color="<white>")
logger.level("WARNING", color="<yellow>")
logger.level("ERROR", color="<red>")
logger.level("CRITICAL", color="<red><bold>")


def _add_console_sink(level: str) -> int:
    if _json_mode:
        return logger.add(ndjson_sink, level=level, colorize=False)
    return logger.add(
        sys.stderr,
        level=level,
        format=_human_format,
        colorize=None,  # Auto-detect: colors if TTY, plain if piped
    )


_console_handler_id = _add_console_sink(_log_level)


def set_console_level(level: str) -> None:
    """Replace the console sink at a new level (used by --verbose/--quiet)."""
    global _console_handler_id
    logger.remove(_console_handler_id)
    _console_handler_id = _add_console_sink(level.upper())


if _log_file:

    def _file_sink(message):
        """Append NDJSON records to the configured log file."""
        with open(_log_file, "a", encoding="utf-8") as f:
            f.write(_to_ndjson(message.record) + "\n")

    logger.add(_file_sink, level="DEBUG")


def configure_file_logging(log_dir: Path, level: str = "DEBUG") -> int:
    """Add a rotating human-readable log file under log_dir.

    Args:
        log_dir: Directory for log files
        level: Minimum log level for file output

    Returns:
        Handler ID, for logger.remove() when the session ends
    """
    log_dir.mkdir(parents=True, exist_ok=True)

    return logger.add(
        log_dir / "vehicleauth.log",
        rotation="10 MB",
        retention="7 days",
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
    )


def get_subprocess_env() -> dict:
    """Get environment dict carrying the run ID for subprocess calls."""
    env = os.environ.copy()
    env["VEHICLEAUTH_RUN_ID"] = _run_id
    return env


__all__ = [
    "logger",
    "configure_file_logging",
    "get_subprocess_env",
    "set_console_level",
]
