"""
Project root layout and validation.
"""

from pathlib import Path

from .errors import ProjectValidationError

# Directory and marker file of an RPG Maker MZ project
DATA_DIR = "data"
PROJECT_MARKER = "Game.rpgproject"


def validate_project_path(project_path: str | Path) -> Path:
    """Check that a path is an accessible RPG Maker MZ project root.

    Args:
        project_path: Candidate project root

    Returns:
        The path as a Path object

    Raises:
        ProjectValidationError: If the path, the project marker file or the
            data directory is missing
    """
    if not str(project_path).strip():
        raise ProjectValidationError("Project path must be a non-empty string")

    path = Path(project_path)
    if not path.is_dir():
        raise ProjectValidationError(f"Project path does not exist: {path}", path)

    if not (path / PROJECT_MARKER).is_file():
        raise ProjectValidationError(
            f"Not a valid RPG Maker MZ project ({PROJECT_MARKER} not found): {path}", path
        )

    data_dir = path / DATA_DIR
    if not data_dir.is_dir():
        raise ProjectValidationError(f"Project data directory not found: {data_dir}", path)

    return path
