"""Shared fixtures: a small synthetic RPG Maker MZ project on disk."""

import logging
from pathlib import Path
from typing import Any, Callable, Iterator

import orjson
import pytest
from PIL import Image


def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(data))


def write_png(path: Path, width: int = 48, height: int = 48) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGBA", (width, height)).save(path, format="PNG")


def write_bytes(path: Path, size: int) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\0" * size)


ACTORS = [
    None,
    {
        "id": 1,
        "name": "Hero",
        "classId": 1,
        "initialLevel": 1,
        "characterName": "Hero1",
        "faceName": "",
    },
    {
        "id": 2,
        "name": "Mage",
        "classId": 2,
        "initialLevel": 3,
        "characterName": "",
        "faceName": "Mage",
    },
]

ENEMIES = [
    None,
    {"id": 1, "name": "Slime", "battlerName": "Slime", "params": [250, 0, 10], "exp": 10, "gold": 5},
    {"id": 6, "name": "Bat", "battlerName": "Bat", "params": [120, 0, 12], "exp": 20, "gold": 8},
    {"id": 12, "name": "Dragon", "battlerName": "Dragon", "params": [9000, 300, 90], "exp": 500, "gold": 900},
]

SKILLS = [
    None,
    {"id": 1, "name": "Attack", "mpCost": 0, "stypeId": 0},
    {"id": 2, "name": "Fire", "mpCost": 5, "stypeId": 1},
]

ITEMS = [
    None,
    {"id": 1, "name": "Potion", "itypeId": 1, "price": 50, "description": "Restores 500 HP."},
    {"id": 2, "name": "Hi-Potion", "itypeId": 1, "price": 150, "description": "Restores 2500 HP."},
]

CLASSES = [None, {"id": 1, "name": "Warrior"}, {"id": 2, "name": "Wizard"}]

TROOPS = [
    None,
    {"id": 1, "name": "Slime*2", "members": [{"enemyId": 1}, {"enemyId": 1}]},
]

TILESETS = [
    None,
    {"id": 1, "name": "Field", "tilesetNames": ["World_A1", "World_A2", "", "", "", "", "", "", ""]},
]

MAP_INFOS = [None, {"id": 1, "name": "MAP001", "parentId": 0}]

MAP001 = {"tilesetId": 1, "bgm": {"name": "Field1", "pan": 0, "pitch": 100, "volume": 90}}


def build_project(root: Path) -> Path:
    """Create a project tree under ``root``.

    Used assets: Hero1.png (actor 1), Mage.png (actor 2), Slime.png
    (enemy 1), World_A1.png and Field1.ogg (map 1).
    Unused assets: Orphan.png, Cursor.ogg.
    """
    (root / "Game.rpgproject").parent.mkdir(parents=True, exist_ok=True)
    (root / "Game.rpgproject").write_text("RPGMZ 1.8.0")

    data = root / "data"
    write_json(data / "Actors.json", ACTORS)
    write_json(data / "Classes.json", CLASSES)
    write_json(data / "Skills.json", SKILLS)
    write_json(data / "Items.json", ITEMS)
    write_json(data / "Enemies.json", ENEMIES)
    write_json(data / "Troops.json", TROOPS)
    write_json(data / "Tilesets.json", TILESETS)
    write_json(data / "MapInfos.json", MAP_INFOS)
    write_json(data / "Map001.json", MAP001)

    write_png(root / "img" / "characters" / "Hero1.png", 144, 192)
    write_png(root / "img" / "faces" / "Mage.png", 576, 288)
    write_png(root / "img" / "enemies" / "Slime.png")
    write_png(root / "img" / "enemies" / "Orphan.png")
    write_png(root / "img" / "tilesets" / "World_A1.png")
    write_bytes(root / "audio" / "bgm" / "Field1.ogg", 2048)
    write_bytes(root / "audio" / "se" / "Cursor.ogg", 512)

    return root


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Path to a freshly built synthetic project."""
    return build_project(tmp_path / "MyGame")


@pytest.fixture
def empty_project(tmp_path: Path) -> Path:
    """A valid project with no data files and no media."""
    root = tmp_path / "Empty"
    (root / "data").mkdir(parents=True)
    (root / "Game.rpgproject").write_text("RPGMZ 1.8.0")
    return root


@pytest.fixture
def json_writer() -> Callable[[Path, Any], None]:
    return write_json


@pytest.fixture
def png_writer() -> Callable[..., None]:
    return write_png


@pytest.fixture
def file_writer() -> Callable[[Path, int], None]:
    return write_bytes


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    """Location of a throwaway settings INI file."""
    return tmp_path / "rmmz_index.ini"


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Undo handler changes made by setup_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
