"""
File loaders for RPG Maker MZ database files.

Reads the JSON collections under ``<project>/data`` with orjson and turns
them into id-keyed mappings. A missing file is an empty collection; a file
that exists but does not parse is reported as MalformedSourceError.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional

import orjson

from ..errors import MalformedSourceError, UnsupportedTypeError
from ..project import DATA_DIR
from .models import (
    COLLECTIONS_BY_TYPE,
    MAP_INFOS_FILE,
    Record,
    RecordMap,
    map_file_name,
)

# Returned by _read_json for a file that does not exist; a file holding
# JSON ``null`` parses to None and is malformed
ABSENT = object()


class CollectionLoader:
    """Loads database collections of a single project."""

    def __init__(self, project_path: str | Path, logger: Optional[logging.Logger] = None):
        self.project_path = Path(project_path)
        self.data_path = self.project_path / DATA_DIR
        self.logger = logger or logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @staticmethod
    def _read_json(path: Path, collection: str) -> Any:
        """Parse a JSON file, returning ABSENT when it does not exist."""
        try:
            with path.open("rb") as f:  # orjson works with bytes
                raw = f.read()
        except FileNotFoundError:
            return ABSENT
        except OSError as e:
            raise MalformedSourceError(collection, path, str(e)) from e

        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError as e:
            raise MalformedSourceError(collection, path, f"invalid JSON: {e}") from e

    def read_array(self, file_name: str, collection: Optional[str] = None) -> Optional[List[Any]]:
        """Read a JSON array from the data directory.

        Args:
            file_name: File name relative to ``data/``
            collection: Collection label used in error messages

        Returns:
            The parsed list, or None if the file does not exist

        Raises:
            MalformedSourceError: If the file is not valid JSON or not an array
        """
        label = collection or file_name
        path = self.data_path / file_name
        data = self._read_json(path, label)
        if data is ABSENT:
            return None
        if not isinstance(data, list):
            raise MalformedSourceError(
                label, path, f"expected a JSON array, got {type(data).__name__}"
            )
        return data

    @staticmethod
    def to_record_map(entries: List[Any]) -> RecordMap:
        """Turn a sparse JSON array into an id -> record mapping.

        Null slots, non-object entries and objects without an integer id
        are skipped.
        """
        records: RecordMap = {}
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            record_id = entry.get("id")
            if isinstance(record_id, bool) or not isinstance(record_id, int):
                continue
            records[record_id] = entry
        return records

    def load(self, type_name: str) -> RecordMap:
        """Load one collection type.

        Args:
            type_name: Collection type such as ``"actor"`` or ``"enemy"``

        Returns:
            Mapping of id to record; empty if the backing file is absent

        Raises:
            UnsupportedTypeError: If the type is not a known collection
            MalformedSourceError: If the backing file cannot be parsed
        """
        spec = COLLECTIONS_BY_TYPE.get(type_name)
        if spec is None:
            raise UnsupportedTypeError(type_name)

        entries = self.read_array(spec.file_name, spec.type_name)
        if entries is None:
            self.logger.debug(f"{spec.file_name} not found, '{type_name}' is empty")
            return {}

        records = self.to_record_map(entries)
        self.logger.debug(f"Loaded {len(records)} '{type_name}' records from {spec.file_name}")
        return records

    def load_map_infos(self) -> Optional[List[Any]]:
        """Read MapInfos.json (sparse list of map descriptors)."""
        return self.read_array(MAP_INFOS_FILE, "mapInfo")

    def load_map(self, map_id: int) -> Optional[Record]:
        """Read a single ``MapNNN.json`` file.

        Returns:
            The map object, or None if the file does not exist

        Raises:
            MalformedSourceError: If the file is not a JSON object
        """
        file_name = map_file_name(map_id)
        path = self.data_path / file_name
        data = self._read_json(path, file_name)
        if data is ABSENT:
            return None
        if not isinstance(data, dict):
            raise MalformedSourceError(
                file_name, path, f"expected a JSON object, got {type(data).__name__}"
            )
        return data
