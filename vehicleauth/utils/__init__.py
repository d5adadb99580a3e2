"""vehicleauth utilities package."""

from .constants import (
    BACKUP_PREFIX,
    DEFAULT_BACKUP_DIR,
    DEFAULT_DATABASE_FILE,
    ERROR_LOG_FILE,
    LOG_DIR,
)
from .error_handler import handle_exceptions
from .exit_codes import ExitCodes
from .logging import logger

__all__ = [
    "BACKUP_PREFIX",
    "DEFAULT_BACKUP_DIR",
    "DEFAULT_DATABASE_FILE",
    "ERROR_LOG_FILE",
    "LOG_DIR",
    "ExitCodes",
    "handle_exceptions",
    "logger",
]
