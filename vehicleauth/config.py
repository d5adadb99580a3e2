"""Runtime configuration for vehicleauth - centralized configuration management."""

import copy
import os
import tomllib
from pathlib import Path
from typing import Any

from .utils.constants import (
    BACKUP_PREFIX,
    BUSY_TIMEOUT_SECONDS,
    CONFIG_FILE_NAME,
    DEFAULT_BACKUP_DIR,
    DEFAULT_DATABASE_FILE,
    SCRIPT_TIMEOUT_SECONDS,
)
from .utils.logging import logger

DEFAULTS = {
    "paths": {
        "database": str(DEFAULT_DATABASE_FILE),
        "backup_dir": str(DEFAULT_BACKUP_DIR),
    },
    "backup": {
        "prefix": BACKUP_PREFIX,
        "keep": 0,
    },
    "timeouts": {
        "script": SCRIPT_TIMEOUT_SECONDS,
        "busy": BUSY_TIMEOUT_SECONDS,
    },
}


def _accepts(default: Any, value: Any) -> bool:
    # bool is an int subclass; never let True stand in for a timeout
    if isinstance(value, bool) != isinstance(default, bool):
        return False
    if isinstance(default, float):
        return isinstance(value, (int, float))
    return isinstance(value, type(default))


def load_runtime_config(root: str | Path = ".") -> dict[str, Any]:
    """
    Load runtime configuration from vehicleauth.toml and environment variables.

    Config priority (highest to lowest):
    1. Environment variables (VEHICLEAUTH_<SECTION>_<KEY>)
    2. vehicleauth.toml in root
    3. Built-in defaults

    Relative paths are resolved against root.

    Args:
        root: Directory to look for the config file in

    Returns:
        Configuration dictionary with merged values
    """
    cfg = copy.deepcopy(DEFAULTS)

    path = Path(root) / CONFIG_FILE_NAME
    try:
        if path.exists():
            with open(path, "rb") as f:
                user = tomllib.load(f)

            for section in cfg:
                if section in user and isinstance(user[section], dict):
                    for key, value in user[section].items():
                        if key not in cfg[section]:
                            logger.warning("Unknown config key {section}.{key} in {path}", section=section, key=key, path=path)
                        elif _accepts(cfg[section][key], value):
                            cfg[section][key] = value
                        else:
                            logger.warning(
                                "Invalid value for {section}.{key} in {path}: {value!r}",
                                section=section,
                                key=key,
                                path=path,
                                value=value,
                            )
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Could not load config file from {path}: {err}", path=path, err=e)
        logger.info("Continuing with default configuration")

    for section in cfg:
        for key in cfg[section]:
            env_var = f"VEHICLEAUTH_{section.upper()}_{key.upper()}"
            if env_var in os.environ:
                value = os.environ[env_var]
                try:
                    default_value = cfg[section][key]
                    if isinstance(default_value, int):
                        cfg[section][key] = int(value)
                    elif isinstance(default_value, float):
                        cfg[section][key] = float(value)
                    else:
                        cfg[section][key] = value
                except ValueError as e:
                    logger.warning(
                        "Invalid value for environment variable {var}: '{value}' - {err}",
                        var=env_var,
                        value=value,
                        err=e,
                    )
                    logger.info("Using default value: {value}", value=cfg[section][key])

    for key in ("database", "backup_dir"):
        p = Path(cfg["paths"][key])
        if not p.is_absolute():
            cfg["paths"][key] = str(Path(root) / p)

    return cfg
