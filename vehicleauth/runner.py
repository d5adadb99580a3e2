"""Run schema commands in a child interpreter under a timeout.

The menu uses this so a hung schema run can be killed without taking the
console down with it. The child gets the parent's run ID so both processes
log under one correlation ID.
"""

import subprocess
import sys
import time
from dataclasses import dataclass
from pathlib import Path

from .utils.constants import SCRIPT_TIMEOUT_SECONDS
from .utils.logging import get_subprocess_env, logger


@dataclass(frozen=True)
class ScriptResult:
    success: bool
    exit_code: int
    output: str
    timed_out: bool = False
    elapsed: float = 0.0


def build_command(command: str, db_path: str | Path, *args: str) -> list[str]:
    return [sys.executable, "-m", "vehicleauth", command, "--database", str(db_path), *args]


def _decode(data) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


def run_isolated(
    command: str,
    db_path: str | Path,
    timeout: float = SCRIPT_TIMEOUT_SECONDS,
) -> ScriptResult:
    """Run `vehicleauth <command> --database <db_path>` in a child process.

    Args:
        command: CLI command name (create, verify)
        db_path: Database file the child operates on
        timeout: Seconds before the child is killed

    Returns:
        ScriptResult with combined stdout/stderr. A timeout yields
        success=False, exit_code=-1 and timed_out=True.
    """
    cmd = build_command(command, db_path)
    logger.debug("Running isolated: {cmd}", cmd=" ".join(cmd))
    start = time.monotonic()

    try:
        proc = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            env=get_subprocess_env(),
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        # subprocess.run has already killed the child
        logger.error("{command} timed out after {timeout}s", command=command, timeout=timeout)
        return ScriptResult(
            success=False,
            exit_code=-1,
            output=_decode(e.output) + f"\nCommand timed out after {timeout}s",
            timed_out=True,
            elapsed=time.monotonic() - start,
        )
    except OSError as e:
        logger.error("Could not start {command}: {err}", command=command, err=e)
        return ScriptResult(False, -1, str(e), elapsed=time.monotonic() - start)

    elapsed = time.monotonic() - start
    logger.info(
        "{command} exited with {code} after {elapsed:.1f}s",
        command=command,
        code=proc.returncode,
        elapsed=elapsed,
    )
    return ScriptResult(
        success=proc.returncode == 0,
        exit_code=proc.returncode,
        output=_decode(proc.stdout),
        elapsed=elapsed,
    )
