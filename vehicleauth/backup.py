"""Timestamped backups of the database file.

Backups are taken before the executor opens its exclusive connection. SQLite
sources are copied through the online backup API over a read-only connection,
which needs only a shared lock: a file another process holds exclusively is
reported as a failed backup rather than copied mid-mutation.

Nothing in this module raises to its caller. Every failure is captured in the
returned BackupResult.
"""

import shutil
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .exceptions import BackupError
from .utils.constants import (
    BACKUP_PREFIX,
    BACKUP_TIMESTAMP_FORMAT,
    BUSY_TIMEOUT_SECONDS,
    DEFAULT_BACKUP_DIR,
    SQLITE_HEADER,
)
from .utils.logging import logger


@dataclass(frozen=True)
class BackupResult:
    success: bool
    message: str
    produced_path: Path | None = None


@dataclass(frozen=True)
class BackupInfo:
    available: bool
    backup_count: int
    total_size: int
    message: str


def format_file_size(size: int) -> str:
    """Human-readable size, e.g. 1536 -> '1.5 KB'."""
    if size < 1024:
        return f"{size} B"
    for unit in ("KB", "MB"):
        size /= 1024
        if size < 1024:
            return f"{size:.1f} {unit}"
    return f"{size / 1024:.1f} GB"


def is_sqlite_file(path: Path) -> bool:
    try:
        with open(path, "rb") as f:
            return f.read(len(SQLITE_HEADER)) == SQLITE_HEADER
    except OSError:
        return False


class BackupService:
    """Create, inspect and prune backups in one directory."""

    def __init__(
        self,
        backup_dir: str | Path = DEFAULT_BACKUP_DIR,
        prefix: str = BACKUP_PREFIX,
        busy_timeout: float = BUSY_TIMEOUT_SECONDS,
    ):
        self.backup_dir = Path(backup_dir)
        self.prefix = prefix
        self.busy_timeout = busy_timeout

    def backup_name(self, source: Path, when: datetime | None = None) -> str:
        stamp = (when or datetime.now()).strftime(BACKUP_TIMESTAMP_FORMAT)
        return f"{self.prefix}-{stamp}{source.suffix}"

    def create_backup(self, source: str | Path) -> BackupResult:
        source = Path(source)
        try:
            produced = self._copy(source)
        except BackupError as e:
            logger.warning("Backup of {src} failed: {err}", src=source, err=e)
            return BackupResult(False, str(e))
        except OSError as e:
            logger.warning("Backup of {src} failed: {err}", src=source, err=e)
            return BackupResult(False, f"Backup failed: {e}")

        size = format_file_size(produced.stat().st_size)
        logger.info("Backup created: {path} ({size})", path=produced, size=size)
        return BackupResult(True, f"Backup created successfully ({size})", produced)

    def _copy(self, source: Path) -> Path:
        if not source.is_file():
            raise BackupError(f"Source database file not found: {source}")

        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BackupError(f"Failed to create backup directory: {e}") from e

        target = self.backup_dir / self.backup_name(source)
        if target.exists():
            raise BackupError(f"Backup already exists: {target.name}")

        if is_sqlite_file(source):
            self._copy_sqlite(source, target)
        else:
            shutil.copy2(source, target)
        return target

    def _copy_sqlite(self, source: Path, target: Path) -> None:
        src = dst = None
        try:
            src = sqlite3.connect(
                f"{source.resolve().as_uri()}?mode=ro",
                uri=True,
                timeout=self.busy_timeout,
                isolation_level=None,
            )
            # Connection.backup retries SQLITE_BUSY forever; take the shared
            # lock here so the busy timeout applies, and hold it for the copy
            src.execute("BEGIN")
            src.execute("SELECT count(*) FROM sqlite_master").fetchone()
            dst = sqlite3.connect(target)
            src.backup(dst)
            src.execute("COMMIT")
        except sqlite3.Error as e:
            if dst is not None:
                dst.close()
                dst = None
            target.unlink(missing_ok=True)
            raise BackupError(f"Backup failed: {e}") from e
        finally:
            if dst is not None:
                dst.close()
            if src is not None:
                src.close()

    def _backup_files(self) -> list[Path]:
        return [
            p
            for p in self.backup_dir.iterdir()
            if p.is_file() and p.name.startswith(f"{self.prefix}-")
        ]

    def backup_info(self) -> BackupInfo:
        if not self.backup_dir.is_dir():
            return BackupInfo(False, 0, 0, "Backup directory does not exist")

        try:
            files = self._backup_files()
            total = sum(p.stat().st_size for p in files)
        except OSError as e:
            return BackupInfo(False, 0, 0, f"Error reading backup directory: {e}")

        return BackupInfo(True, len(files), total, f"{len(files)} backups ({format_file_size(total)})")

    def cleanup_old_backups(self, keep: int) -> int:
        """Delete all but the newest `keep` backups. keep <= 0 keeps everything.

        Returns:
            Number of backups deleted
        """
        if keep <= 0 or not self.backup_dir.is_dir():
            return 0

        try:
            files = sorted(self._backup_files(), key=lambda p: p.stat().st_mtime, reverse=True)
        except OSError as e:
            logger.warning("Could not list backups in {dir}: {err}", dir=self.backup_dir, err=e)
            return 0

        deleted = 0
        for path in files[keep:]:
            try:
                path.unlink()
                deleted += 1
            except OSError as e:
                logger.warning("Could not delete old backup {path}: {err}", path=path, err=e)

        if deleted:
            logger.info("Removed {count} old backups", count=deleted)
        return deleted

    def create_startup_backup(self, source: str | Path, keep: int = 0) -> BackupResult:
        """Back up source once at startup. Logs the outcome and never raises."""
        result = self.create_backup(source)
        if result.success:
            logger.info("Startup backup: {name}", name=result.produced_path.name)
            self.cleanup_old_backups(keep)
        else:
            logger.warning("Startup backup skipped: {msg}", msg=result.message)
        return result
