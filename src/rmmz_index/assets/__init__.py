"""
Assets package for RPG Maker MZ projects.

Provides the media inventory scanner, the usage cross-referencer that links
files to database records, and the report/recommendation generator.
"""

from .service import AssetService, RemovalResult
from .models import (
    AssetCategory,
    AssetRecord,
    AssetReport,
    ConsumerKind,
    format_bytes,
)
from .scanner import AssetScanner, CategoryDir, CATEGORY_DIRS
from .usage import UsageCrossReferencer, UsageSources, REFERENCE_FIELDS
from .report import (
    LARGE_FILE_THRESHOLD,
    build_report,
    format_usage,
    generate_asset_mapping,
    generate_recommendations,
    render_asset_context,
)

__all__ = [
    # Main service
    "AssetService",
    "RemovalResult",

    # Data models
    "AssetCategory",
    "AssetRecord",
    "AssetReport",
    "ConsumerKind",
    "format_bytes",

    # Components
    "AssetScanner",
    "CategoryDir",
    "CATEGORY_DIRS",
    "UsageCrossReferencer",
    "UsageSources",
    "REFERENCE_FIELDS",

    # Reporting
    "LARGE_FILE_THRESHOLD",
    "build_report",
    "format_usage",
    "generate_asset_mapping",
    "generate_recommendations",
    "render_asset_context",
]
