"""Centralized constants for vehicleauth.

Single source of truth for default file names and limits. Runtime overrides
live in vehicleauth.config.
"""

from pathlib import Path

# ============================================================================
# FILES AND DIRECTORIES
# ============================================================================

DEFAULT_DATABASE_FILE = Path("Database.db")

DEFAULT_BACKUP_DIR = Path("Backup Database")
BACKUP_PREFIX = "Database-Backup"
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"

LOG_DIR = Path("logs")
ERROR_LOG_FILE = LOG_DIR / "error.log"

CONFIG_FILE_NAME = "vehicleauth.toml"

# ============================================================================
# TIMEOUTS
# ============================================================================

# Out-of-process schema commands are killed after this many seconds
SCRIPT_TIMEOUT_SECONDS = 600

# How long SQLite waits on a locked file before giving up
BUSY_TIMEOUT_SECONDS = 5.0

# ============================================================================
# SQLITE
# ============================================================================

SQLITE_HEADER = b"SQLite format 3\x00"
SQLITE_INTERNAL_PREFIX = "sqlite_"
