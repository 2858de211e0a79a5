"""
Settings migration for rmmz-index.

Each step upgrades the stored keys from one ConfigVersion to the next;
steps are chained until the current version is reached.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Dict, Tuple

from ..project import DATA_DIR
from .types import ConfigVersion

if TYPE_CHECKING:
    from PySide6.QtCore import QSettings

logger = logging.getLogger(__name__)

VERSION_KEY = "app/version"
FIRST_RUN_KEY = "app/first_run"
MIGRATED_FROM_KEY = "app/migrated_from"


class SettingsMigrator:
    """Stamps new configurations and upgrades old ones."""

    def __init__(self, settings: "QSettings"):
        self.settings = settings
        self.steps: Dict[str, Tuple[str, Callable[[], None]]] = {
            ConfigVersion.V1_0.value: (ConfigVersion.V1_1.value, self._store_project_root),
        }

    def ensure_version(self) -> None:
        """Initialize an empty configuration or migrate an outdated one."""
        stored = str(self.settings.value(VERSION_KEY, "") or "")
        if not stored:
            self.settings.setValue(VERSION_KEY, ConfigVersion.CURRENT.value)
            self.settings.setValue(FIRST_RUN_KEY, True)
            self.settings.sync()
            logger.info("No stored configuration, starting with defaults")
            return

        if stored != ConfigVersion.CURRENT.value:
            self.migrate(stored)

    def migrate(self, from_version: str) -> None:
        version = from_version
        while version != ConfigVersion.CURRENT.value:
            step = self.steps.get(version)
            if step is None:
                logger.warning(
                    f"No migration from settings version {version}, stored values are kept as is"
                )
                break
            target, upgrade = step
            logger.info(f"Upgrading settings {version} -> {target}")
            upgrade()
            version = target

        self.settings.setValue(VERSION_KEY, ConfigVersion.CURRENT.value)
        self.settings.setValue(MIGRATED_FROM_KEY, from_version)
        self.settings.sync()

    def _store_project_root(self) -> None:
        """1.0 stored the data directory and a recent file list.

        1.1 stores the project root (the data directory's parent) and a
        recent project list.
        """
        data_dir = str(self.settings.value("paths/data", "") or "")
        if data_dir:
            path = Path(data_dir)
            root = path.parent if path.name == DATA_DIR else path
            self.settings.setValue("paths/project", str(root))
            self.settings.remove("paths/data")
            logger.debug(f"Project root taken from data directory: {path} -> {root}")

        recent = self.settings.value("paths/recent_files", None)
        if recent:
            self.settings.setValue("paths/recent_projects", recent)
            self.settings.remove("paths/recent_files")
