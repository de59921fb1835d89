"""Logging setup for hookcut.

Library modules log through ``logging.getLogger(__name__)``; entry
points call ``setup_logging()`` once to attach handlers to the
``hookcut`` logger.
"""

import logging
import os
import sys
from pathlib import Path

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def get_log_level() -> int:
    """Get log level from the LOG_LEVEL environment variable."""
    level_str = os.environ.get("LOG_LEVEL", "INFO").upper()
    return LOG_LEVEL_MAP.get(level_str, logging.INFO)


class ConsoleFormatter(logging.Formatter):
    """Bare messages for INFO, timestamp and level for everything else."""

    FORMATS = {
        logging.DEBUG: "%(asctime)s [DEBUG] %(name)s: %(message)s",
        logging.INFO: "%(message)s",
        logging.WARNING: "%(asctime)s [WARN] %(message)s",
        logging.ERROR: "%(asctime)s [ERROR] %(message)s",
        logging.CRITICAL: "%(asctime)s [CRITICAL] %(message)s",
    }

    def format(self, record: logging.LogRecord) -> str:
        fmt = self.FORMATS.get(record.levelno, self.FORMATS[logging.INFO])
        return logging.Formatter(fmt, datefmt="%H:%M:%S").format(record)


def setup_logging(level: int | None = None, log_file: Path | None = None) -> logging.Logger:
    """Configure the ``hookcut`` logger. Safe to call more than once."""
    logger = logging.getLogger("hookcut")
    log_level = level or get_log_level()
    logger.setLevel(log_level)

    if not logger.handlers:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(ConsoleFormatter())
        logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(file_handler)

    return logger
