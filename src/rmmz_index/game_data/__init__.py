"""
Module for working with RPG Maker MZ database data.

Provides services for reading, indexing and querying the typed JSON
collections stored under a project's ``data/`` directory.
"""

from .service import GameDataService
from .models import (
    Record,
    RecordMap,
    NameRef,
    NameIndex,
    CollectionSpec,
    SearchResult,
    COLLECTIONS,
    COLLECTION_TYPES,
)
from .managers import EntityIndex
from .loaders import CollectionLoader
from .query import QueryEngine, SearchOptions
from .context import render_database_context

# Public exports
__all__ = [
    # Main service
    "GameDataService",
    # Type aliases
    "Record",
    "RecordMap",
    "NameRef",
    "NameIndex",
    # Models
    "CollectionSpec",
    "SearchResult",
    # Constants
    "COLLECTIONS",
    "COLLECTION_TYPES",
    # Component classes (for advanced usage)
    "EntityIndex",
    "CollectionLoader",
    "QueryEngine",
    "SearchOptions",
    "render_database_context",
]
