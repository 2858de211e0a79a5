"""
Asset statistics, recommendations and Markdown reports.

Everything here is a pure function of an annotated asset list.
"""

from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from .models import AssetCategory, AssetRecord, AssetReport, ConsumerKind, format_bytes

LARGE_FILE_THRESHOLD = 1024 * 1024
CONTEXT_LARGE_FILE_THRESHOLD = 500 * 1024
CONTEXT_TABLE_ROWS = 20
CONTEXT_LARGEST_FILES = 10

# Label and display order used by usage summaries and mappings
_USAGE_LABELS = (
    (ConsumerKind.ACTOR, "Actor"),
    (ConsumerKind.ENEMY, "Enemy"),
    (ConsumerKind.MAP, "Map"),
    (ConsumerKind.TROOP, "Troop"),
    (ConsumerKind.ITEM, "Item"),
    (ConsumerKind.SKILL, "Skill"),
)


def duplicate_name_count(assets: List[AssetRecord]) -> int:
    """Number of assets whose lowercase filename was already seen."""
    names = Counter(asset.filename.lower() for asset in assets)
    return sum(count - 1 for count in names.values())


def generate_recommendations(assets: List[AssetRecord]) -> List[str]:
    """Evaluate the fixed recommendation rules in order."""
    recommendations: List[str] = []

    unused = [a for a in assets if a.is_unused]
    if unused:
        unused_size = sum(a.size for a in unused)
        recommendations.append(
            f"Delete {len(unused)} unused asset(s) to save {format_bytes(unused_size)}"
        )

    large = [a for a in assets if a.size > LARGE_FILE_THRESHOLD]
    if large:
        recommendations.append(f"Optimize {len(large)} large file(s) over 1 MB")

    duplicates = duplicate_name_count(assets)
    if duplicates > 0:
        recommendations.append(
            f"{duplicates} asset(s) share a filename with another asset (possible duplicates)"
        )

    used = len(assets) - len(unused)
    if used > 0:
        recommendations.append(f"{used} asset(s) are in active use")

    characters = sum(1 for a in assets if a.category is AssetCategory.CHARACTER)
    enemies = sum(1 for a in assets if a.category is AssetCategory.ENEMY)
    if characters == 0 and enemies > 0:
        recommendations.append("Consider adding character sprites")

    if not recommendations:
        recommendations.append("Asset configuration looks healthy")

    return recommendations


def build_report(
    project_path: Path, assets: List[AssetRecord], warnings: Optional[List[str]] = None
) -> AssetReport:
    """Aggregate an annotated asset list into an AssetReport."""
    by_type: Dict[str, int] = {}
    for asset in assets:
        by_type[asset.category.value] = by_type.get(asset.category.value, 0) + 1

    unused = sum(1 for a in assets if a.is_unused)
    return AssetReport(
        project_path=project_path,
        total_assets=len(assets),
        total_size=sum(a.size for a in assets),
        assets_by_type=by_type,
        used=len(assets) - unused,
        unused=unused,
        assets=assets,
        recommendations=generate_recommendations(assets),
        warnings=list(warnings or []),
    )


def format_usage(used_by: Dict[ConsumerKind, List[int]]) -> str:
    """Summarize a usage breakdown, e.g. ``"Actor:2, Map:1"``."""
    parts = [
        f"{label}:{len(used_by[kind])}"
        for kind, label in _USAGE_LABELS
        if used_by.get(kind)
    ]
    return ", ".join(parts) if parts else "None"


def generate_asset_mapping(report: AssetReport) -> Dict[str, List[str]]:
    """Map each filename to the records using it (``"Actor 1"``, ``"Map 3"``)."""
    mapping: Dict[str, List[str]] = {}
    for asset in report.assets:
        usage: List[str] = []
        for kind, label in _USAGE_LABELS:
            usage.extend(f"{label} {consumer_id}" for consumer_id in asset.used_by.get(kind, []))
        mapping.setdefault(asset.filename, []).extend(usage)
    return mapping


def _more_line(total: int) -> List[str]:
    if total > CONTEXT_TABLE_ROWS:
        return ["", f"*...and {total - CONTEXT_TABLE_ROWS} more*"]
    return []


def render_asset_context(report: AssetReport) -> str:
    """Render an AssetReport as a Markdown document."""
    lines: List[str] = [
        "# Asset Context Report",
        "",
        f"**Project**: {report.project_path}",
        f"**Generated**: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "",
        "---",
        "",
        "## Summary",
        "",
        f"- **Total assets**: {report.total_assets}",
        f"- **Total size**: {report.total_size_formatted}",
        f"- **In use**: {report.used}",
        f"- **Unused**: {report.unused}",
        "",
        "## By Type",
        "",
        "| Type | Count |",
        "|------|-------|",
    ]
    lines += [f"| {t} | {count} |" for t, count in report.assets_by_type.items()]
    lines += ["", "## Usage Details", ""]

    used = [a for a in report.assets if not a.is_unused]
    if used:
        lines += [
            f"### Assets in use ({len(used)})",
            "",
            "| File | Type | Size | Used by |",
            "|------|------|------|---------|",
        ]
        for asset in used[:CONTEXT_TABLE_ROWS]:
            lines.append(
                f"| {asset.filename} | {asset.category.value} | "
                f"{asset.size_formatted} | {format_usage(asset.used_by)} |"
            )
        lines += _more_line(len(used))
        lines.append("")

    unused = [a for a in report.assets if a.is_unused]
    if unused:
        lines += [
            f"### Unused assets ({len(unused)})",
            "",
            "| File | Type | Size |",
            "|------|------|------|",
        ]
        for asset in unused[:CONTEXT_TABLE_ROWS]:
            lines.append(f"| {asset.filename} | {asset.category.value} | {asset.size_formatted} |")
        lines += _more_line(len(unused))
        unused_size = sum(a.size for a in unused)
        lines += ["", f"**Deleting unused assets would save {format_bytes(unused_size)}**", ""]

    lines += ["## Recommendations", ""]
    lines += [f"- {rec}" for rec in report.recommendations]
    lines.append("")

    if report.warnings:
        lines += ["## Warnings", ""]
        lines += [f"- {warning}" for warning in report.warnings]
        lines.append("")

    largest = sorted(
        (a for a in report.assets if a.size > CONTEXT_LARGE_FILE_THRESHOLD),
        key=lambda a: a.size,
        reverse=True,
    )[:CONTEXT_LARGEST_FILES]
    if largest:
        lines += [
            f"## Largest Files (Top {CONTEXT_LARGEST_FILES})",
            "",
            "| File | Type | Size | Status |",
            "|------|------|------|--------|",
        ]
        for asset in largest:
            status = "unused" if asset.is_unused else "in use"
            lines.append(
                f"| {asset.filename} | {asset.category.value} | {asset.size_formatted} | {status} |"
            )
        lines.append("")

    return "\n".join(lines)
