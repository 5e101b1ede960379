"""Centralized logging setup with optional rotating file persistence."""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s:%(name)s:%(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_LOG_BACKUP_COUNT = 5


def _env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().strip('"').strip("'") or default


def configure_logging(service_name: str) -> None:
    """Configure the root logger for console and, when LOG_DIR is set, a rotating file."""
    level_name = _env("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    log_dir = os.getenv("LOG_DIR")
    if log_dir:
        try:
            Path(log_dir).mkdir(parents=True, exist_ok=True)
            handlers.append(
                RotatingFileHandler(
                    Path(log_dir) / f"{service_name}.log",
                    maxBytes=int(_env("LOG_MAX_BYTES", str(DEFAULT_LOG_MAX_BYTES))),
                    backupCount=int(_env("LOG_BACKUP_COUNT", str(DEFAULT_LOG_BACKUP_COUNT))),
                    encoding="utf-8",
                )
            )
        except (OSError, ValueError) as error:
            logging.getLogger(__name__).warning("File logging disabled for %s: %s", log_dir, error)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
