"""
QSettings-backed configuration for rmmz-index.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from PySide6.QtCore import QSettings

from .logging import LoggingSettings
from .migration import FIRST_RUN_KEY, VERSION_KEY, SettingsMigrator
from .paths import PathSettings
from .scan import ScanSettings
from .types import ConfigError, ConfigVersion, ValidationResult
from .validation import SettingsValidator

logger = logging.getLogger(__name__)

ORGANIZATION = "rmmz-index"
APPLICATION = "rmmz_index"


class AppSettings:
    """
    Application configuration stored as an INI file.

    Without ``settings_file`` the per-user location Qt picks for
    ORGANIZATION/APPLICATION is used. All keys live under a group named
    after the profile, so several profiles can share one file.

    Subsystems:
        paths: last project and recent projects
        logging: console and file logging
        scan: worker count and image header reading
    """

    def __init__(
        self, profile: str = "default", settings_file: Optional[Union[str, Path]] = None
    ):
        if settings_file:
            self.settings = QSettings(str(settings_file), QSettings.Format.IniFormat)
        else:
            self.settings = QSettings(
                QSettings.Format.IniFormat, QSettings.Scope.UserScope, ORGANIZATION, APPLICATION
            )
        self._check_status()
        self.profile = profile
        self.settings.beginGroup(profile)

        self.paths = PathSettings(self.settings)
        self.logging = LoggingSettings(self.settings)
        self.scan = ScanSettings(self.settings)
        self._validator = SettingsValidator(self)

        SettingsMigrator(self.settings).ensure_version()
        logger.debug(f"Settings profile '{profile}' loaded from {self.settings.fileName()}")

    @property
    def is_first_run(self) -> bool:
        value = self.settings.value(FIRST_RUN_KEY, True)
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value)

    def set_first_run_complete(self) -> None:
        self.settings.setValue(FIRST_RUN_KEY, False)
        self.settings.sync()

    @property
    def version(self) -> str:
        """Configuration format version of the stored settings."""
        return str(self.settings.value(VERSION_KEY, ConfigVersion.CURRENT.value))

    # Shortcuts used by the services and the command line

    @property
    def project_path(self) -> Optional[Path]:
        return self.paths.project_path

    @project_path.setter
    def project_path(self, value: Optional[Union[str, Path]]) -> None:
        self.paths.project_path = value

    @property
    def recent_projects(self) -> List[str]:
        return self.paths.recent_projects

    def add_recent_project(self, project_path: Union[str, Path]) -> None:
        self.paths.add_recent_project(project_path)

    @property
    def max_workers(self) -> int:
        return self.scan.max_workers

    @property
    def read_image_dimensions(self) -> bool:
        return self.scan.read_image_dimensions

    def validate(self) -> ValidationResult:
        """Check the stored project and prune stale recent projects."""
        return self._validator.validate()

    def get_settings_file_path(self) -> str:
        return self.settings.fileName()

    def sync(self) -> None:
        self.settings.sync()
        self._check_status()

    def _check_status(self) -> None:
        status = self.settings.status()
        if status == QSettings.Status.AccessError:
            raise ConfigError(f"Cannot access settings file: {self.settings.fileName()}")
        if status == QSettings.Status.FormatError:
            raise ConfigError(f"Settings file is not a valid INI file: {self.settings.fileName()}")
