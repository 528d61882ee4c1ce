"""
Logging configuration for the encounter browser.

One "encounter_browser" logger with a rotating file and a console handler.
The file always records DEBUG, which covers every fetch issue, stale
discard and applied response; the console level is chosen by the user
(--log-level or the app/log_level setting). Fetches run on worker threads,
so file records carry the thread name.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "encounter_browser"
LOG_FILE_NAME = "encounter_browser.log"
DEFAULT_LOG_DIR = Path.home() / ".encounter_browser" / "logs"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def parse_log_level(level: Union[int, str]) -> int:
    """
    Convert a level name ("debug", "INFO", ...) or number to a logging level.

    Raises:
        ValueError: Unknown level name
    """
    if isinstance(level, int):
        return level
    name = str(level).strip().upper()
    if name not in LOG_LEVELS:
        raise ValueError(
            f"Unknown log level {level!r}, expected one of {', '.join(LOG_LEVELS)}"
        )
    return getattr(logging, name)


def setup_logging(
    console_level: Union[int, str] = logging.INFO,
    log_dir: Optional[Path] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure the application logger.

    Args:
        console_level: Level (or level name) for console output
        log_dir: Directory for encounter_browser.log, defaults to
            ~/.encounter_browser/logs
        max_bytes: Size at which the log file rotates
        backup_count: Rotated files to keep

    Returns:
        The "encounter_browser" logger
    """
    console_level = parse_log_level(console_level)
    log_dir = log_dir or DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    log_file = log_dir / LOG_FILE_NAME
    file_handler = RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(threadName)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)-8s | %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(console_handler)

    logger.info(
        f"Logging to {log_file} (console level {logging.getLevelName(console_level)})"
    )
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger, e.g. get_logger("controller")."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
