"""
Logging Configuration

Configures standard-library logging once at startup: console output
always, plus rotating ``combined.log`` and ``error.log`` files when a
log directory is given.
"""

import logging
import logging.config
import os
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 5


def build_logging_config(level: str = "info", log_dir: Optional[str] = None) -> Dict[str, Any]:
    """
    Build a dictConfig mapping.

    Args:
        level: Level name, case-insensitive
        log_dir: Directory for rotating log files; console only when None

    Returns:
        Mapping suitable for ``logging.config.dictConfig``
    """
    level = level.upper()
    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "level": level,
        },
    }

    if log_dir:
        handlers["combined_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "default",
            "level": level,
            "filename": os.path.join(log_dir, "combined.log"),
            "maxBytes": MAX_LOG_BYTES,
            "backupCount": LOG_BACKUP_COUNT,
            "encoding": "utf-8",
        }
        handlers["error_file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "default",
            "level": "ERROR",
            "filename": os.path.join(log_dir, "error.log"),
            "maxBytes": MAX_LOG_BYTES,
            "backupCount": LOG_BACKUP_COUNT,
            "encoding": "utf-8",
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": {"format": LOG_FORMAT}},
        "handlers": handlers,
        "root": {"level": level, "handlers": list(handlers)},
    }


def configure_logging(level: str = "info", log_dir: Optional[str] = None) -> None:
    """Apply logging configuration, creating ``log_dir`` if needed."""
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    logging.config.dictConfig(build_logging_config(level, log_dir))
