"""
Usage cross-referencer.

Matches asset records against the reference fields of the raw database
collections and records which records use which asset. The fields that
are inspected are listed explicitly in REFERENCE_FIELDS; there is no
key-name guessing.

Audio references are matched by filename prefix because map BGM names omit
the extension. Every audio file starting with the name counts as used, so
``Battle1`` also marks ``Battle1.m4a`` and ``Battle10.ogg``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..errors import MalformedSourceError
from ..game_data.loaders import CollectionLoader
from ..game_data.models import Record, RecordMap
from .models import AssetCategory, AssetRecord, ConsumerKind

IMAGE_REFERENCE_EXTENSION = ".png"


@dataclass(frozen=True)
class ReferenceField:
    """A record field holding an image name (without extension)."""

    source: str
    field_name: str
    kind: ConsumerKind
    category: AssetCategory


REFERENCE_FIELDS: Tuple[ReferenceField, ...] = (
    ReferenceField("actors", "characterName", ConsumerKind.ACTOR, AssetCategory.CHARACTER),
    ReferenceField("actors", "faceName", ConsumerKind.ACTOR, AssetCategory.FACE),
    ReferenceField("enemies", "battlerName", ConsumerKind.ENEMY, AssetCategory.ENEMY),
)

MapReader = Callable[[int], Optional[Record]]


@dataclass
class UsageSources:
    """Raw collections consumed by the cross-reference.

    A None collection means the source was missing or malformed and
    contributes no matches. read_map returns a map object by id or None.
    """

    actors: Optional[RecordMap] = None
    enemies: Optional[RecordMap] = None
    tilesets: Optional[RecordMap] = None
    map_infos: Optional[List[Any]] = None
    read_map: Optional[MapReader] = None
    warnings: List[str] = field(default_factory=lambda: [])


class AssetLookup:
    """Index of asset records by (category, filename)."""

    def __init__(self, assets: List[AssetRecord]):
        self.by_name: Dict[Tuple[AssetCategory, str], AssetRecord] = {}
        self.by_category: Dict[AssetCategory, List[AssetRecord]] = {}
        for asset in assets:
            # First file wins when two directories share a category
            self.by_name.setdefault((asset.category, asset.filename), asset)
            self.by_category.setdefault(asset.category, []).append(asset)

    def exact(self, category: AssetCategory, filename: str) -> Optional[AssetRecord]:
        return self.by_name.get((category, filename))

    def prefixed(self, category: AssetCategory, prefix: str) -> List[AssetRecord]:
        return [a for a in self.by_category.get(category, []) if a.filename.startswith(prefix)]


class UsageCrossReferencer:
    """Annotates asset records with the database records that use them."""

    def __init__(self, loader: CollectionLoader, logger: Optional[logging.Logger] = None):
        self.loader = loader
        self.logger = logger or logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _load_records(self, type_name: str, sources: UsageSources) -> Optional[RecordMap]:
        try:
            return self.loader.load(type_name)
        except MalformedSourceError as e:
            message = f"Skipping '{type_name}' asset references: {e}"
            self.logger.warning(message)
            sources.warnings.append(message)
            return None

    def load_sources(self) -> UsageSources:
        """Read the master collections from disk.

        A malformed collection is replaced by None and reported in
        ``sources.warnings``.
        """
        sources = UsageSources(read_map=self.loader.load_map)
        sources.actors = self._load_records("actor", sources)
        sources.enemies = self._load_records("enemy", sources)
        sources.tilesets = self._load_records("tileset", sources)
        try:
            sources.map_infos = self.loader.load_map_infos()
        except MalformedSourceError as e:
            message = f"Skipping map asset references: {e}"
            self.logger.warning(message)
            sources.warnings.append(message)
        return sources

    def _apply_record_fields(self, lookup: AssetLookup, sources: UsageSources) -> int:
        matched = 0
        for ref in REFERENCE_FIELDS:
            records: Optional[RecordMap] = getattr(sources, ref.source)
            if not records:
                continue
            for record_id, record in records.items():
                name = record.get(ref.field_name)
                if not isinstance(name, str) or not name:
                    continue
                asset = lookup.exact(ref.category, name + IMAGE_REFERENCE_EXTENSION)
                if asset and asset.add_usage(ref.kind, record_id):
                    matched += 1
        return matched

    def _apply_map(
        self, map_id: int, map_data: Record, lookup: AssetLookup, sources: UsageSources
    ) -> int:
        matched = 0

        tileset_id = map_data.get("tilesetId")
        if isinstance(tileset_id, int) and tileset_id and sources.tilesets is not None:
            tileset = sources.tilesets.get(tileset_id)
            if tileset is None:
                self.logger.debug(f"Map {map_id}: tileset {tileset_id} not found")
            else:
                names = tileset.get("tilesetNames")
                for tileset_name in names if isinstance(names, list) else []:
                    if not isinstance(tileset_name, str) or not tileset_name:
                        continue
                    asset = lookup.exact(
                        AssetCategory.TILESET, tileset_name + IMAGE_REFERENCE_EXTENSION
                    )
                    if asset and asset.add_usage(ConsumerKind.MAP, map_id):
                        matched += 1

        bgm = map_data.get("bgm")
        bgm_name = bgm.get("name") if isinstance(bgm, dict) else None
        if isinstance(bgm_name, str) and bgm_name:
            for asset in lookup.prefixed(AssetCategory.AUDIO, bgm_name):
                if asset.add_usage(ConsumerKind.MAP, map_id):
                    matched += 1

        return matched

    def _apply_maps(self, lookup: AssetLookup, sources: UsageSources) -> int:
        if not sources.map_infos or sources.read_map is None:
            return 0

        matched = 0
        for map_id, info in enumerate(sources.map_infos):
            if not info:
                continue
            try:
                map_data = sources.read_map(map_id)
            except MalformedSourceError as e:
                message = f"Skipping map {map_id}: {e}"
                self.logger.warning(message)
                sources.warnings.append(message)
                continue
            if map_data is None:
                self.logger.debug(f"Map {map_id} listed in MapInfos but file is missing")
                continue
            matched += self._apply_map(map_id, map_data, lookup, sources)
        return matched

    def apply(self, assets: List[AssetRecord], sources: UsageSources) -> int:
        """Record usages from the given sources onto the assets.

        Usages already present are not recorded again, so applying the
        same sources twice leaves the breakdowns unchanged.

        Returns:
            Number of newly recorded (asset, consumer) pairs
        """
        lookup = AssetLookup(assets)
        matched = self._apply_record_fields(lookup, sources)
        matched += self._apply_maps(lookup, sources)
        self.logger.debug(f"Cross-reference recorded {matched} new usages")
        return matched

    def cross_reference(self, assets: List[AssetRecord]) -> List[str]:
        """Load sources from disk and annotate the assets.

        Returns:
            Warnings for sources that could not be used
        """
        sources = self.load_sources()
        self.apply(assets, sources)
        return sources.warnings
