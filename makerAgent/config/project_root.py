"""Project root path detection - works regardless of working directory."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path


@lru_cache(maxsize=1)
def get_project_root() -> Path:
    """Get absolute path to the directory containing the 'makerAgent' package.

    Returns:
        Path: Absolute path to project root

    Example:
        >>> root = get_project_root()
        >>> roles_file = root / "makerAgent" / "config" / "roles.yaml"
    """
    # project_root.py -> config/ -> makerAgent/ -> project_root/
    project_root = Path(__file__).resolve().parent.parent.parent

    if not (project_root / "makerAgent").exists():
        raise RuntimeError(
            f"Could not locate project root. Expected 'makerAgent' directory at {project_root}"
        )

    return project_root


def resolve_project_path(relative_path: str | Path) -> Path:
    """Resolve a path relative to project root; absolute paths pass through.

    Example:
        >>> resolve_project_path("makerAgent/config/roles.yaml")
    """
    path = Path(relative_path).expanduser()
    if path.is_absolute():
        return path
    return get_project_root() / path


__all__ = ["get_project_root", "resolve_project_path"]
