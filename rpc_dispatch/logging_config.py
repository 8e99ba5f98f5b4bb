"""Logging configuration setup."""

import copy
import logging
import logging.config
import os
import sys
from typing import Any, Dict, Optional, Tuple

from rpc_dispatch.constants import DEFAULT_LOG_LEVEL, LOG_DATEFMT, LOG_FORMAT

_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_APP_LOGGERS = (
    "rpc_dispatch",
    "rpc_dispatch.server",
    "rpc_dispatch.middleware",
    "rpc_dispatch.config",
    "rpc_dispatch.access",
)

BASE_LOG_CFG: Dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": LOG_FORMAT,
            "datefmt": LOG_DATEFMT,
        },
    },
    "handlers": {
        "default": {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "formatter": "simple",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {},
    "root": {
        "handlers": ["default"],
        "level": "WARNING",
    },
}


def setup_logging(log_lvl_str: str = DEFAULT_LOG_LEVEL, log_file: Optional[str] = None) -> Tuple[str, str]:
    """
    Set up the logging system for the rpc_dispatch loggers.

    Args:
        log_lvl_str: The desired log level string (e.g., 'debug', 'info').
            Unknown values fall back to INFO with a warning on stderr.
        log_file: Write records to this file instead of stderr.

    Returns:
        A tuple of (destination, validated_log_level) where destination is
        the log file path or ``"stderr"``.
    """
    log_lvl_valid = log_lvl_str.upper()
    if log_lvl_valid not in _VALID_LEVELS:
        print(f"Warning: invalid log level '{log_lvl_str}'. Using 'INFO'.", file=sys.stderr)
        log_lvl_valid = "INFO"

    log_cfg: Dict[str, Any] = copy.deepcopy(BASE_LOG_CFG)
    destination = "stderr"
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        log_cfg["handlers"]["default"] = {
            "class": "logging.FileHandler",
            "level": "DEBUG",
            "formatter": "simple",
            "filename": log_file,
            "encoding": "utf-8",
        }
        destination = log_file

    for name in _APP_LOGGERS:
        log_cfg["loggers"][name] = {
            "handlers": ["default"],
            "propagate": False,
            "level": log_lvl_valid,
        }
    log_cfg["root"]["level"] = log_lvl_valid if log_lvl_valid == "DEBUG" else "WARNING"

    logging.config.dictConfig(log_cfg)
    logging.getLogger(__name__).debug(
        "Logging initialized. Level: %s, destination: %s", log_lvl_valid, destination
    )
    return destination, log_lvl_valid
