"""
Project path settings: the last used project and the recent list.
"""

from pathlib import Path
from typing import List, Optional, Union

from .base import SettingsGroup

MAX_RECENT_PROJECTS = 10


class PathSettings(SettingsGroup):
    """Keys under ``paths/``."""

    group = "paths"

    @property
    def project_path(self) -> Optional[Path]:
        """Last used project root, None when never set."""
        stored = self._get_str("project")
        return Path(stored) if stored else None

    @project_path.setter
    def project_path(self, value: Optional[Union[str, Path]]) -> None:
        self._set("project", str(value) if value else "")

    @property
    def recent_projects(self) -> List[str]:
        """Most recently used first."""
        return self._get_list("recent_projects")

    def set_recent_projects(self, projects: List[str]) -> None:
        self._set("recent_projects", list(projects[:MAX_RECENT_PROJECTS]))

    def add_recent_project(self, project_path: Union[str, Path]) -> None:
        """Move a project to the front of the recent list."""
        entry = str(project_path)
        self.set_recent_projects([entry] + [p for p in self.recent_projects if p != entry])
