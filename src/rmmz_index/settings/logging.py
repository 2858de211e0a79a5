"""
Logging settings for rmmz-index.
"""

import logging
from pathlib import Path

from .base import SettingsGroup

logger = logging.getLogger(__name__)

DEFAULT_CONSOLE_LEVEL = "WARNING"
DEFAULT_LOG_FILE_PATH = "logs/rmmz_index.csv"
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingSettings(SettingsGroup):
    """Keys under ``logging/``: console output and the CSV log file."""

    group = "logging"

    # Console

    @property
    def console_logging(self) -> bool:
        return self._get_bool("console_enabled", True)

    @console_logging.setter
    def console_logging(self, enabled: bool) -> None:
        self._set("console_enabled", enabled)

    @property
    def console_log_level(self) -> str:
        """Level name for the console handler; stdout is never logged to."""
        level = self._get_str("console_level", DEFAULT_CONSOLE_LEVEL).upper()
        return level if level in VALID_LEVELS else DEFAULT_CONSOLE_LEVEL

    @console_log_level.setter
    def console_log_level(self, level: str) -> None:
        name = level.upper()
        if name not in VALID_LEVELS:
            logger.warning(f"Ignoring unknown log level '{level}', expected one of {VALID_LEVELS}")
            return
        self._set("console_level", name)

    @property
    def console_use_colors(self) -> bool:
        return self._get_bool("console_use_colors", True)

    @console_use_colors.setter
    def console_use_colors(self, enabled: bool) -> None:
        self._set("console_use_colors", enabled)

    # File

    @property
    def file_logging(self) -> bool:
        return self._get_bool("file_enabled", False)

    @file_logging.setter
    def file_logging(self, enabled: bool) -> None:
        self._set("file_enabled", enabled)

    @property
    def log_file_path(self) -> str:
        """Log file location, relative paths resolve against the working directory."""
        return self._get_str("file_path", DEFAULT_LOG_FILE_PATH) or DEFAULT_LOG_FILE_PATH

    @log_file_path.setter
    def log_file_path(self, path: str) -> None:
        self._set("file_path", path)

    @property
    def log_file_absolute_path(self) -> Path:
        return Path(self.log_file_path).resolve()
