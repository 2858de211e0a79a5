"""
Asset inventory scanner.

Enumerates media files under the known category directories of a project
and produces one AssetRecord per file. Directories that do not exist
contribute nothing.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Tuple

from PIL import Image

from .models import AssetCategory, AssetRecord

IMAGE_EXTENSIONS: FrozenSet[str] = frozenset({".png", ".jpg", ".jpeg"})
AUDIO_EXTENSIONS: FrozenSet[str] = frozenset({".ogg", ".m4a", ".mp3"})


@dataclass(frozen=True)
class CategoryDir:
    """A scanned directory, the category of its files and allowed extensions."""

    relative_path: str
    category: AssetCategory
    extensions: FrozenSet[str]


CATEGORY_DIRS: Tuple[CategoryDir, ...] = (
    CategoryDir("img/characters", AssetCategory.CHARACTER, IMAGE_EXTENSIONS),
    CategoryDir("img/faces", AssetCategory.FACE, IMAGE_EXTENSIONS),
    CategoryDir("img/enemies", AssetCategory.ENEMY, IMAGE_EXTENSIONS),
    CategoryDir("img/tilesets", AssetCategory.TILESET, IMAGE_EXTENSIONS),
    CategoryDir("img/battlebacks1", AssetCategory.BATTLEBACK, IMAGE_EXTENSIONS),
    CategoryDir("img/battlebacks2", AssetCategory.BATTLEBACK, IMAGE_EXTENSIONS),
    CategoryDir("img/sv_actors", AssetCategory.SV_ACTOR, IMAGE_EXTENSIONS),
    CategoryDir("img/pictures", AssetCategory.PICTURE, IMAGE_EXTENSIONS),
    CategoryDir("audio/bgm", AssetCategory.AUDIO, AUDIO_EXTENSIONS),
    CategoryDir("audio/bgs", AssetCategory.AUDIO, AUDIO_EXTENSIONS),
    CategoryDir("audio/me", AssetCategory.AUDIO, AUDIO_EXTENSIONS),
    CategoryDir("audio/se", AssetCategory.AUDIO, AUDIO_EXTENSIONS),
)


class AssetScanner:
    """Builds the asset inventory of one project.

    Each category directory is listed in a worker thread; the per-directory
    lists are concatenated in CATEGORY_DIRS order afterwards.
    """

    def __init__(
        self,
        project_path: str | Path,
        max_workers: int = 4,
        read_dimensions: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        self.project_path = Path(project_path)
        self.max_workers = max_workers
        self.read_dimensions = read_dimensions
        self.logger = logger or logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _image_size(self, path: Path) -> Optional[Tuple[int, int]]:
        """Read pixel dimensions from the image header, None if unreadable."""
        try:
            with Image.open(path) as img:
                return img.size
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            self.logger.debug(f"Could not read image header of {path.name}: {e}")
            return None

    def scan_directory(self, category_dir: CategoryDir) -> List[AssetRecord]:
        """List matching files directly inside one category directory."""
        dir_path = self.project_path / category_dir.relative_path
        if not dir_path.is_dir():
            return []

        assets: List[AssetRecord] = []
        for entry in sorted(dir_path.iterdir()):
            if entry.suffix.lower() not in category_dir.extensions:
                continue
            try:
                if not entry.is_file():
                    continue
                size = entry.stat().st_size
            except OSError as e:
                self.logger.warning(f"Failed to stat {entry}: {e}")
                continue

            asset = AssetRecord(
                filename=entry.name,
                path=entry.resolve(),
                category=category_dir.category,
                size=size,
            )
            if self.read_dimensions and category_dir.extensions is IMAGE_EXTENSIONS:
                dimensions = self._image_size(entry)
                if dimensions:
                    asset.width, asset.height = dimensions
            assets.append(asset)

        return assets

    def scan(self) -> List[AssetRecord]:
        """Scan every category directory.

        Returns:
            Asset records; ordering is for display only
        """
        per_dir: Dict[int, List[AssetRecord]] = {}
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index = {
                executor.submit(self.scan_directory, category_dir): idx
                for idx, category_dir in enumerate(CATEGORY_DIRS)
            }
            for future in as_completed(future_to_index):
                idx = future_to_index[future]
                try:
                    per_dir[idx] = future.result()
                except OSError as e:
                    self.logger.warning(
                        f"Failed to scan {CATEGORY_DIRS[idx].relative_path}: {e}"
                    )
                    per_dir[idx] = []

        assets: List[AssetRecord] = []
        for idx in sorted(per_dir):
            assets.extend(per_dir[idx])

        self.logger.info(f"Found {len(assets)} assets under {self.project_path}")
        return assets
