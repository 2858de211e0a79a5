"""
Data models for RPG Maker MZ database collections.

Contains type definitions and simple data structures used throughout
the game_data package. Keeps dict-based approach for flexibility while
providing clear type hints.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, NamedTuple, Tuple, TypeAlias

# Type aliases for clarity
Record: TypeAlias = Dict[str, Any]
"""A single database record (actor, enemy, skill, ...) as a dict."""

RecordMap: TypeAlias = Dict[int, Record]
"""Maps record id to the record for one collection type."""

NameRef: TypeAlias = Tuple[str, int]
"""A (type, id) reference stored in the name index."""

NameIndex: TypeAlias = Dict[str, List[NameRef]]
"""Maps lowercase record name to the references carrying that name."""


@dataclass(frozen=True)
class CollectionSpec:
    """Describes one database collection on disk."""

    type_name: str
    file_name: str
    attribute: str


# Processing order is fixed: it decides the order of entries inside each
# name index bucket and the default order of query results.
COLLECTIONS: Tuple[CollectionSpec, ...] = (
    CollectionSpec("actor", "Actors.json", "actors"),
    CollectionSpec("class", "Classes.json", "classes"),
    CollectionSpec("skill", "Skills.json", "skills"),
    CollectionSpec("item", "Items.json", "items"),
    CollectionSpec("weapon", "Weapons.json", "weapons"),
    CollectionSpec("armor", "Armors.json", "armors"),
    CollectionSpec("enemy", "Enemies.json", "enemies"),
    CollectionSpec("troop", "Troops.json", "troops"),
    CollectionSpec("state", "States.json", "states"),
    CollectionSpec("animation", "Animations.json", "animations"),
    CollectionSpec("tileset", "Tilesets.json", "tilesets"),
    CollectionSpec("commonEvent", "CommonEvents.json", "common_events"),
)

COLLECTIONS_BY_TYPE: Dict[str, CollectionSpec] = {
    spec.type_name: spec for spec in COLLECTIONS
}

COLLECTION_TYPES: Tuple[str, ...] = tuple(spec.type_name for spec in COLLECTIONS)

# Auxiliary sources read by the asset cross-referencer
MAP_INFOS_FILE = "MapInfos.json"
MAP_FILE_TEMPLATE = "Map{map_id:03d}.json"


class SearchResult(NamedTuple):
    """One row produced by a search or query."""

    type: str
    id: int
    name: str
    data: Record


def record_name(record: Record) -> str:
    """Return the display name of a record, or an empty string."""
    name = record.get("name")
    return name if isinstance(name, str) else ""


def map_file_name(map_id: int) -> str:
    """Return the data file name for a map id (e.g. ``Map007.json``)."""
    return MAP_FILE_TEMPLATE.format(map_id=map_id)
