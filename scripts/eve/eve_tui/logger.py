"""File logging for the dashboard; the terminal belongs to the UI."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_FILE = "eve-tui.log"


def setup_logging(log_dir: Path, level: str = "INFO") -> logging.Logger:
    log_dir.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger("eve_tui")
    logger.setLevel(level.upper())

    if logger.handlers:
        return logger

    file_handler = RotatingFileHandler(
        log_dir / LOG_FILE,
        maxBytes=5 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))

    # no console handler: any write to stderr would tear the live screen
    logger.addHandler(file_handler)
    logger.propagate = False
    return logger
