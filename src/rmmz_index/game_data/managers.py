"""
Entity index for database records.

Provides EntityIndex class that handles storage, indexing by type/name,
and efficient lookup operations for database records.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from ..errors import UnsupportedTypeError
from .models import (
    COLLECTION_TYPES,
    COLLECTIONS,
    NameIndex,
    Record,
    RecordMap,
    SearchResult,
    record_name,
)


class EntityIndex:
    """In-memory index of every database collection of one project.

    Maintains two indices:
    - records_by_type: type -> (id -> record)
    - name_index: lowercase name -> list of (type, id), in collection
      processing order

    Records are added one collection at a time with `add_collection`;
    once built the index is treated as read-only.
    """

    def __init__(self, project_path: str | Path = ""):
        self.project_path = Path(project_path) if project_path else None
        self.last_updated = datetime.now(timezone.utc).isoformat()

        # Primary index: type_name -> id -> record
        self.records_by_type: Dict[str, RecordMap] = {t: {} for t in COLLECTION_TYPES}

        # Derived index: lowercase name -> [(type, id), ...]
        self.name_index: NameIndex = {}

        # Collections that could not be loaded (best-effort build)
        self.warnings: List[str] = []
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def add_collection(self, type_name: str, records: RecordMap) -> None:
        """Register all records of one collection type.

        Records are indexed in ascending id order so the name index bucket
        order does not depend on the source file layout.

        Args:
            type_name: Collection type the records belong to
            records: Mapping of id to record
        """
        if type_name not in self.records_by_type:
            raise UnsupportedTypeError(type_name)

        target = self.records_by_type[type_name]
        for record_id in sorted(records):
            record = records[record_id]
            target[record_id] = record

            name = record_name(record)
            if name:
                self.name_index.setdefault(name.lower(), []).append((type_name, record_id))

    def add_warning(self, message: str) -> None:
        """Record a non-fatal problem found while building."""
        self.warnings.append(message)

    # Lookup API

    def get_by_id(self, type_name: str, record_id: int) -> Optional[Record]:
        """Return the record with the given id.

        Args:
            type_name: Collection type
            record_id: Record id within that collection

        Returns:
            The record, or None if the id is not present

        Raises:
            UnsupportedTypeError: If the type is not a known collection
        """
        records = self.records_by_type.get(type_name)
        if records is None:
            raise UnsupportedTypeError(type_name)
        return records.get(record_id)

    def find_by_name_substring(self, query: str) -> List[SearchResult]:
        """Return records whose lowercase name contains the query.

        The match runs against name index keys, so records without a name
        never match. Results keep name index insertion order.
        """
        needle = query.lower()
        results: List[SearchResult] = []
        for indexed_name, refs in self.name_index.items():
            if needle not in indexed_name:
                continue
            for type_name, record_id in refs:
                record = self.records_by_type[type_name].get(record_id)
                if record is not None:
                    results.append(
                        SearchResult(type_name, record_id, record_name(record), record)
                    )
        return results

    def iter_records(
        self, types: Optional[List[str]] = None
    ) -> Iterator[Tuple[str, int, Record]]:
        """Yield (type, id, record) in processing order, ids ascending.

        An empty or missing type list selects every type; unknown types
        are ignored.
        """
        if types:
            wanted = set(types)
            selected = [t for t in COLLECTION_TYPES if t in wanted]
        else:
            selected = list(COLLECTION_TYPES)
        for type_name in selected:
            records = self.records_by_type[type_name]
            for record_id in sorted(records):
                yield type_name, record_id, records[record_id]

    # Statistics

    def count(self, type_name: str) -> int:
        """Return the number of records of a type (0 for unknown types)."""
        return len(self.records_by_type.get(type_name, {}))

    @property
    def total(self) -> int:
        """Total number of records across all collections."""
        return sum(len(records) for records in self.records_by_type.values())

    @property
    def unique_names(self) -> int:
        """Number of distinct lowercase names in the name index."""
        return len(self.name_index)

    def statistics(self) -> Dict[str, int]:
        """Return per-collection counts keyed by attribute name plus total."""
        stats = {spec.attribute: self.count(spec.type_name) for spec in COLLECTIONS}
        stats["total"] = self.total
        return stats

