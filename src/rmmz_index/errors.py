"""
Exception types for rmmz-index.
"""

from pathlib import Path
from typing import Optional


class RmmzIndexError(Exception):
    """Base class for all rmmz-index errors."""
    pass


class ProjectValidationError(RmmzIndexError):
    """Raised when the project root is missing or is not an RPG Maker MZ project."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class SourceNotFoundError(RmmzIndexError):
    """Raised when a source the caller requires does not exist."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class MalformedSourceError(RmmzIndexError):
    """Raised when a source file exists but cannot be parsed as expected."""

    def __init__(self, collection: str, path: Path, reason: str):
        super().__init__(f"Malformed source for '{collection}' ({path}): {reason}")
        self.collection = collection
        self.path = path
        self.reason = reason


class UnsupportedTypeError(RmmzIndexError):
    """Raised when a caller asks for a collection type that does not exist."""

    def __init__(self, type_name: str):
        super().__init__(f"Unknown database type: {type_name}")
        self.type_name = type_name
