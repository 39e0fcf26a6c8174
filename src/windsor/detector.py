"""Classification of target directories as new or existing projects."""

from __future__ import annotations

from pathlib import Path

EXISTING_PROJECT_MARKERS = (
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "src",
    "app",
    "lib",
    "components",
    ".git",
)


def is_existing_project(root: Path) -> bool:
    """Return True if any project marker exists directly under ``root``."""
    root = Path(root)
    return any((root / marker).exists() for marker in EXISTING_PROJECT_MARKERS)


def is_empty_directory(root: Path) -> bool:
    """Return True if ``root`` is missing or has no entries."""
    root = Path(root)
    if not root.exists():
        return True
    return next(root.iterdir(), None) is None
