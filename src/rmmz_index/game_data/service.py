"""
Main service for working with RPG Maker MZ database data.

Provides high-level API for building the entity index and querying it.
Every public call builds a fresh index from the files on disk, so results
always reflect the current project state.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional

from ..errors import MalformedSourceError
from ..project import validate_project_path
from .context import render_database_context
from .loaders import CollectionLoader
from .managers import EntityIndex
from .models import COLLECTIONS, Record, RecordMap, SearchResult
from .query import QueryEngine, SearchOptions

if TYPE_CHECKING:
    from ..settings import AppSettings

DEFAULT_MAX_WORKERS = 8


class GameDataService:
    """Service for working with the database of one project.

    Responsible for reading the JSON collections, building the entity
    index and answering lookups, searches and statistics requests.
    Collections are read in parallel and merged sequentially in the fixed
    collection order, so a rebuild from the same files yields the same index.
    """

    def __init__(
        self,
        project_path: str | Path,
        settings: Optional["AppSettings"] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the service.

        Args:
            project_path: Path to the project root (contains ``data/``)
            settings: App settings used for the worker count
            logger: Logger to report progress and warnings to
        """
        self.logger = logger or logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.project_path = Path(project_path)
        self.settings = settings
        self.loader = CollectionLoader(self.project_path, logger=self.logger)

    @property
    def max_workers(self) -> int:
        """Thread pool size used for file reads."""
        if self.settings:
            return self.settings.max_workers
        return DEFAULT_MAX_WORKERS

    def build_index(self) -> EntityIndex:
        """Load every collection and build a fresh EntityIndex.

        A collection whose file is malformed contributes nothing and is
        listed in ``index.warnings``; sibling collections still load.

        Raises:
            ProjectValidationError: If the project root is not usable
        """
        validate_project_path(self.project_path)
        self.logger.info(f"Building database index for {self.project_path}")

        loaded: Dict[str, RecordMap] = {}
        failures: Dict[str, str] = {}

        # Phase 1: read files in parallel
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_type = {
                executor.submit(self.loader.load, spec.type_name): spec.type_name
                for spec in COLLECTIONS
            }
            for future in as_completed(future_to_type):
                type_name = future_to_type[future]
                try:
                    loaded[type_name] = future.result()
                except MalformedSourceError as e:
                    failures[type_name] = str(e)

        # Phase 2: merge sequentially in fixed collection order
        index = EntityIndex(self.project_path)
        for spec in COLLECTIONS:
            if spec.type_name in failures:
                message = f"Failed to load {spec.file_name}: {failures[spec.type_name]}"
                self.logger.warning(message)
                index.add_warning(message)
                continue
            index.add_collection(spec.type_name, loaded.get(spec.type_name, {}))

        self.logger.info(
            f"Database index built: {index.total} entries, "
            f"{index.unique_names} unique names"
        )
        return index

    # Public API - each call uses one freshly built snapshot

    def search(self, options: SearchOptions) -> List[SearchResult]:
        """Run a predicate query over a fresh index."""
        self.logger.info(f"Searching database: {options}")
        results = QueryEngine(self.build_index()).run(options)
        self.logger.info(f"Database search complete: {len(results)} results")
        return results

    def get_entry(self, type_name: str, record_id: int) -> Optional[Record]:
        """Return one record by type and id, or None if absent.

        Raises:
            UnsupportedTypeError: If the type is not a known collection
        """
        return self.build_index().get_by_id(type_name, record_id)

    def find_by_name(self, name: str) -> List[SearchResult]:
        """Return records whose name contains ``name`` (case-insensitive)."""
        return self.build_index().find_by_name_substring(name)

    def get_statistics(self) -> Dict[str, int]:
        """Return per-collection record counts and the grand total."""
        return self.build_index().statistics()

    def generate_context(self) -> str:
        """Return a Markdown overview of the database."""
        self.logger.info(f"Generating database context for {self.project_path}")
        return render_database_context(self.build_index())
