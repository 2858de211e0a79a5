"""
Data models for project media assets.

Contains the asset categories, the per-file AssetRecord with its usage
breakdown, and the aggregate AssetReport. Models carry no file-system logic.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


class AssetCategory(str, Enum):
    """Category of a media file, derived from the directory it lives in."""

    CHARACTER = "character"
    FACE = "face"
    ENEMY = "enemy"
    TILESET = "tileset"
    BATTLEBACK = "battleback"
    SV_ACTOR = "sv_actor"
    PICTURE = "picture"
    AUDIO = "audio"
    UNKNOWN = "unknown"


class ConsumerKind(str, Enum):
    """Kind of database record that references an asset."""

    MAP = "map"
    ACTOR = "actor"
    ENEMY = "enemy"
    TROOP = "troop"
    ITEM = "item"
    SKILL = "skill"


BYTE_UNITS = ("Bytes", "KB", "MB", "GB")


def format_bytes(size: int) -> str:
    """Format a byte count for humans (``1536 -> "1.5 KB"``)."""
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(BYTE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {BYTE_UNITS[unit]}"


@dataclass
class AssetRecord:
    """One media file and the records that use it.

    used_by maps a consumer kind to the ids of the consuming records.
    usage_count and is_unused are derived from it and never stored.
    """

    filename: str
    path: Path
    category: AssetCategory
    size: int
    used_by: Dict[ConsumerKind, List[int]] = field(default_factory=lambda: {})
    # Pixel dimensions, image assets only
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def usage_count(self) -> int:
        """Total number of consumer references."""
        return sum(len(ids) for ids in self.used_by.values())

    @property
    def is_unused(self) -> bool:
        """True when no record references this asset."""
        return self.usage_count == 0

    @property
    def size_formatted(self) -> str:
        return format_bytes(self.size)

    def add_usage(self, kind: ConsumerKind, consumer_id: int) -> bool:
        """Record that a consumer uses this asset.

        A (kind, id) pair is recorded at most once.

        Returns:
            True if the usage was new, False if it was already recorded
        """
        ids = self.used_by.setdefault(kind, [])
        if consumer_id in ids:
            return False
        ids.append(consumer_id)
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Serializable representation."""
        data: Dict[str, Any] = {
            "filename": self.filename,
            "path": str(self.path),
            "type": self.category.value,
            "size": self.size,
            "sizeFormatted": self.size_formatted,
            "usedBy": {kind.value: list(ids) for kind, ids in self.used_by.items() if ids},
            "usageCount": self.usage_count,
            "isUnused": self.is_unused,
        }
        if self.width is not None and self.height is not None:
            data["width"] = self.width
            data["height"] = self.height
        return data


@dataclass
class AssetReport:
    """Statistics and recommendations for a project's assets."""

    project_path: Path
    total_assets: int
    total_size: int
    assets_by_type: Dict[str, int]
    used: int
    unused: int
    assets: List[AssetRecord]
    recommendations: List[str]
    warnings: List[str] = field(default_factory=lambda: [])

    @property
    def total_size_formatted(self) -> str:
        return format_bytes(self.total_size)

    def to_dict(self, include_assets: bool = True) -> Dict[str, Any]:
        """Serializable representation."""
        data: Dict[str, Any] = {
            "projectPath": str(self.project_path),
            "totalAssets": self.total_assets,
            "totalSize": self.total_size,
            "totalSizeFormatted": self.total_size_formatted,
            "assetsByType": dict(self.assets_by_type),
            "assetsByUsage": {"used": self.used, "unused": self.unused},
            "recommendations": list(self.recommendations),
            "warnings": list(self.warnings),
        }
        if include_assets:
            data["assets"] = [asset.to_dict() for asset in self.assets]
        return data
