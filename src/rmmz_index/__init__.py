"""
rmmz-index: database index and asset analyzer for RPG Maker MZ projects

Reads the JSON database of a project into a queryable index and audits its
image and audio assets for usage, size and duplicates.
"""

__version__ = "0.1.0"
__author__ = "rmmz-index Contributors"

# Core service imports
from .game_data import GameDataService, EntityIndex, SearchOptions
from .assets import AssetService
from .utils.logging_config import setup_logging

# Errors
from .errors import (
    RmmzIndexError,
    ProjectValidationError,
    SourceNotFoundError,
    MalformedSourceError,
    UnsupportedTypeError,
)

# Main data models
from .game_data.models import SearchResult
from .assets.models import AssetCategory, AssetRecord, AssetReport, ConsumerKind

__all__ = [
    # Services
    'GameDataService',
    'AssetService',

    # Logging
    'setup_logging',

    # Errors
    'RmmzIndexError',
    'ProjectValidationError',
    'SourceNotFoundError',
    'MalformedSourceError',
    'UnsupportedTypeError',

    # Data models
    'EntityIndex',
    'SearchOptions',
    'SearchResult',
    'AssetCategory',
    'AssetRecord',
    'AssetReport',
    'ConsumerKind',
]
