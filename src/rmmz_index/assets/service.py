"""
High-level service for project asset analysis.

Orchestrates the inventory scan, the usage cross-reference and the report
generation. Every call works on a freshly scanned asset universe.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional

from ..game_data.loaders import CollectionLoader
from ..project import validate_project_path
from .models import AssetRecord, AssetReport, format_bytes
from .report import build_report, generate_asset_mapping, render_asset_context
from .scanner import AssetScanner
from .usage import UsageCrossReferencer

if TYPE_CHECKING:
    from ..settings import AppSettings

PROJECT_SIZE_DIRS = ("img", "audio", "data", "js", "movies")


@dataclass
class RemovalResult:
    """Outcome of an unused-asset removal."""

    dry_run: bool
    removed: List[str] = field(default_factory=lambda: [])
    saved_space: int = 0
    failed: List[str] = field(default_factory=lambda: [])


class AssetService:
    """Facade for asset analysis of one project."""

    def __init__(
        self,
        project_path: str | Path,
        settings: Optional["AppSettings"] = None,
        read_dimensions: Optional[bool] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.project_path = Path(project_path)
        self.settings = settings
        max_workers = settings.max_workers if settings else 4
        if read_dimensions is None:
            read_dimensions = settings.read_image_dimensions if settings else True
        self.scanner = AssetScanner(
            self.project_path,
            max_workers=max_workers,
            read_dimensions=read_dimensions,
            logger=self.logger,
        )
        self.cross_referencer = UsageCrossReferencer(
            CollectionLoader(self.project_path, logger=self.logger), logger=self.logger
        )

    def collect_assets(self) -> tuple[List[AssetRecord], List[str]]:
        """Scan the project and annotate each asset with its usages.

        Returns:
            The annotated assets and the cross-reference warnings
        """
        assets = self.scanner.scan()
        warnings = self.cross_referencer.cross_reference(assets)
        return assets, warnings

    def analyze(self) -> AssetReport:
        """Build the full asset report.

        Raises:
            ProjectValidationError: If the project root is not usable
        """
        validate_project_path(self.project_path)
        self.logger.info(f"Analyzing project assets in {self.project_path}")

        assets, warnings = self.collect_assets()
        report = build_report(self.project_path, assets, warnings)

        self.logger.info(
            f"Asset analysis complete: {report.total_assets} assets, "
            f"{report.used} used, {report.unused} unused"
        )
        return report

    def generate_context(self) -> str:
        """Return the Markdown asset report."""
        return render_asset_context(self.analyze())

    def generate_mapping(self) -> Dict[str, List[str]]:
        """Return filename -> list of consumers (``"Actor 1"``, ...)."""
        return generate_asset_mapping(self.analyze())

    def remove_unused(self, dry_run: bool = True) -> RemovalResult:
        """Delete assets no record references.

        Args:
            dry_run: Only report what would be removed

        Returns:
            RemovalResult listing removed (or removable) filenames
        """
        report = self.analyze()
        result = RemovalResult(dry_run=dry_run)

        for asset in report.assets:
            if not asset.is_unused:
                continue
            if not dry_run:
                try:
                    asset.path.unlink()
                except OSError as e:
                    self.logger.error(f"Failed to remove {asset.path}: {e}")
                    result.failed.append(asset.filename)
                    continue
            result.removed.append(asset.filename)
            result.saved_space += asset.size

        verb = "Would remove" if dry_run else "Removed"
        self.logger.info(
            f"{verb} {len(result.removed)} files ({format_bytes(result.saved_space)})"
        )
        return result

    def _directory_size(self, path: Path) -> int:
        size = 0
        for dirpath, _, filenames in os.walk(path):
            for filename in filenames:
                try:
                    size += (Path(dirpath) / filename).stat().st_size
                except OSError as e:
                    self.logger.warning(f"Failed to stat {filename}: {e}")
        return size

    def project_size(self) -> Dict[str, int]:
        """Return byte totals for the main project directories plus ``total``."""
        breakdown = {name: self._directory_size(self.project_path / name) for name in PROJECT_SIZE_DIRS}
        breakdown["total"] = sum(breakdown.values())
        return breakdown
