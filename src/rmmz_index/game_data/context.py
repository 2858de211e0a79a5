"""
Markdown overview of a project database.
"""

from datetime import datetime
from typing import Any, List

from .managers import EntityIndex
from .models import COLLECTIONS

_TYPE_LABELS = {
    "actor": "Actors",
    "class": "Classes",
    "skill": "Skills",
    "item": "Items",
    "weapon": "Weapons",
    "armor": "Armors",
    "enemy": "Enemies",
    "troop": "Troops",
    "state": "States",
    "animation": "Animations",
    "tileset": "Tilesets",
    "commonEvent": "Common Events",
}

DESCRIPTION_PREVIEW_LENGTH = 50


def _cell(value: Any) -> str:
    """Format a value for a Markdown table cell."""
    if value is None:
        return ""
    return str(value).replace("|", "\\|").replace("\n", " ")


def _table(header: List[str], rows: List[List[Any]]) -> List[str]:
    lines = [
        "| " + " | ".join(header) + " |",
        "|" + "|".join("-" * (len(h) + 2) for h in header) + "|",
    ]
    for row in rows:
        lines.append("| " + " | ".join(_cell(v) for v in row) + " |")
    lines.append("")
    return lines


def render_database_context(index: EntityIndex) -> str:
    """Render statistics and per-type tables for the main collections.

    Args:
        index: A built entity index

    Returns:
        Markdown document
    """
    lines: List[str] = ["# Database Context Report", ""]
    if index.project_path:
        lines.append(f"**Project**: {index.project_path}")
    lines.append(f"**Generated**: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    lines += ["", "---", "", "## Statistics", ""]

    lines += _table(
        ["Type", "Count"],
        [[_TYPE_LABELS[spec.type_name], index.count(spec.type_name)] for spec in COLLECTIONS],
    )

    if index.warnings:
        lines += ["## Warnings", ""]
        lines += [f"- {warning}" for warning in index.warnings]
        lines.append("")

    actors = index.records_by_type["actor"]
    if actors:
        lines += [f"## Actors ({len(actors)})", ""]
        lines += _table(
            ["ID", "Name", "Class", "Level"],
            [[i, a.get("name"), a.get("classId"), a.get("initialLevel")] for i, a in sorted(actors.items())],
        )

    enemies = index.records_by_type["enemy"]
    if enemies:
        rows = []
        for i, enemy in sorted(enemies.items()):
            params = enemy.get("params")
            hp = params[0] if isinstance(params, list) and params else 0
            rows.append([i, enemy.get("name"), hp, enemy.get("exp"), enemy.get("gold")])
        lines += [f"## Enemies ({len(enemies)})", ""]
        lines += _table(["ID", "Name", "HP", "EXP", "Gold"], rows)

    skills = index.records_by_type["skill"]
    if skills:
        lines += [f"## Skills ({len(skills)})", ""]
        lines += _table(
            ["ID", "Name", "MP Cost", "Type"],
            [[i, s.get("name"), s.get("mpCost") or 0, s.get("stypeId") or 0] for i, s in sorted(skills.items())],
        )

    items = index.records_by_type["item"]
    if items:
        rows = []
        for i, item in sorted(items.items()):
            description = str(item.get("description") or "")[:DESCRIPTION_PREVIEW_LENGTH]
            rows.append([i, item.get("name"), item.get("itypeId") or 0, description])
        lines += [f"## Items ({len(items)})", ""]
        lines += _table(["ID", "Name", "Type", "Description"], rows)

    troops = index.records_by_type["troop"]
    if troops:
        rows = []
        for i, troop in sorted(troops.items()):
            members = troop.get("members")
            rows.append([i, troop.get("name"), len(members) if isinstance(members, list) else 0])
        lines += [f"## Troops ({len(troops)})", ""]
        lines += _table(["ID", "Name", "Members"], rows)

    return "\n".join(lines)
