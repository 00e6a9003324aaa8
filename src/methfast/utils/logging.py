"""Centralized logging utilities for methfast.

Provides a single place to configure logging and fetch namespaced loggers.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


LOGGER_NAME = "methfast"
CONSOLE_FORMAT = "%(levelname)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(process)d] %(message)s"

# Run logs rotate at 10 MB, keeping 3 backups
LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 3

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def setup_logging(level: int = logging.WARNING, log_file: Optional[Path] = None) -> None:
    """Configure the 'methfast' logger.

    Console output goes to stderr at ``level`` so result rows on stdout stay
    clean. When ``log_file`` is given, a rotating file handler records
    everything at DEBUG. Calling this again replaces the previous handlers.
    """
    logging.getLogger().setLevel(logging.WARNING)

    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.setLevel(logging.DEBUG if log_file else level)
    app_logger.propagate = False
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    app_logger.addHandler(console)

    if log_file is None:
        return
    log_file = Path(log_file)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
        )
    except OSError as exc:
        app_logger.warning(f"Cannot write log file {log_file}: {exc}")
        return
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    app_logger.addHandler(file_handler)


def level_from_name(name: Optional[str], default: int = logging.WARNING) -> int:
    """Map a level name such as 'info' to its logging constant."""
    if not name:
        return default
    return LEVELS.get(name.upper(), default)


def level_from_verbosity(verbose: int) -> int:
    """Map a -v count to a logging level (-v INFO, -vv DEBUG)."""
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


def get_logger(name: str) -> logging.Logger:
    """Return a namespaced logger under 'methfast' root."""
    base = logging.getLogger(LOGGER_NAME)
    return base.getChild(name)


class LogTemplates:
    """Standard log message templates for consistent logging across modules.

    Example usage:
        logger.info(LogTemplates.FILE_LOADED.format(count=12, path="meth.bed"))
    """

    # File operations
    FILE_LOADED = "Loaded {count:,} records from {path}"
    FILE_WRITTEN = "Wrote {count:,} rows to {path}"

    # Processing statistics
    PROCESSING_STATS = "Processed {input_count:,} targets → {output_count:,} results"
    BATCH_START = "Aggregating {count:,} targets with {workers} worker(s) in {chunks:,} chunk(s)"
    TARGETS_COVERED = "{covered:,} of {total:,} targets overlap methylation records"
