"""
Settings value types shared by the settings subsystems.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ..errors import RmmzIndexError


class ConfigVersion(str, Enum):
    """Stored settings format, oldest first; CURRENT aliases the newest."""

    V1_0 = "1.0"
    V1_1 = "1.1"
    CURRENT = "1.1"


class ConfigError(RmmzIndexError):
    """The settings file cannot be read or is not valid INI."""


@dataclass
class ValidationResult:
    """Problems found in the stored settings.

    Only errors make the result invalid; warnings are informational.
    """

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> List[str]:
        """Errors followed by warnings."""
        return self.errors + self.warnings
