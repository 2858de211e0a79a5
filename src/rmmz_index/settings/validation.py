"""
Settings validation for rmmz-index.
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING, List

from ..errors import ProjectValidationError
from ..project import validate_project_path
from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Checks stored paths against the file system.

    A stored project that is no longer a valid project root is an error;
    recent projects that disappeared are dropped from the list and
    reported as warnings.
    """

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        result = ValidationResult()

        project = self.settings.project_path
        if project is None:
            result.warnings.append("Project path not set")
        else:
            try:
                validate_project_path(project)
            except ProjectValidationError as e:
                result.errors.append(str(e))

        recent = self.settings.recent_projects
        existing: List[str] = [p for p in recent if Path(p).exists()]
        result.warnings += [
            f"Recent project no longer exists: {p}" for p in recent if p not in existing
        ]
        if len(existing) != len(recent):
            self.settings.paths.set_recent_projects(existing)

        if result.messages:
            logger.debug(
                f"Settings validation: {len(result.errors)} errors, "
                f"{len(result.warnings)} warnings"
            )
        return result
