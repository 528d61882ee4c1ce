"""
Persistent application settings.

Backed by QSettings so preferences survive restarts without a config file
of our own.
"""

from pathlib import Path
from typing import Optional

from PySide6.QtCore import QSettings

from ..utils.logging_config import get_logger, parse_log_level

logger = get_logger("settings")

ORGANIZATION = "Encounter Tools"
APPLICATION = "Encounter Browser"

DEFAULT_MIN_DURATION_MS = 30_000
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_DATABASE_PATH = Path.home() / ".encounter_browser" / "encounters.db"


class AppSettings:
    """
    Read/write access to user preferences.

    Keys:
    - logs/min_duration: minimum encounter duration (ms) used when the
      filter does not set one
    - logs/database_path: location of the encounter database
    - app/log_level: console log level name
    """

    def __init__(self, settings: Optional[QSettings] = None):
        self._settings = settings or QSettings(ORGANIZATION, APPLICATION)

    @property
    def default_min_duration(self) -> int:
        value = self._settings.value("logs/min_duration", DEFAULT_MIN_DURATION_MS)
        try:
            return max(0, int(value))
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid logs/min_duration: {value!r}")
            return DEFAULT_MIN_DURATION_MS

    def set_default_min_duration(self, milliseconds: int) -> None:
        self._settings.setValue("logs/min_duration", int(milliseconds))

    @property
    def log_level(self) -> str:
        """Console log level name; the log file always records DEBUG."""
        value = str(self._settings.value("app/log_level", DEFAULT_LOG_LEVEL))
        try:
            parse_log_level(value)
        except ValueError:
            logger.warning(f"Ignoring invalid app/log_level: {value!r}")
            return DEFAULT_LOG_LEVEL
        return value.upper()

    def set_log_level(self, level: str) -> None:
        parse_log_level(level)
        self._settings.setValue("app/log_level", level.upper())

    @property
    def database_path(self) -> Path:
        value = self._settings.value("logs/database_path", "")
        return Path(value) if value else DEFAULT_DATABASE_PATH

    def set_database_path(self, path: Path) -> None:
        self._settings.setValue("logs/database_path", str(path))
