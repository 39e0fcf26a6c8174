"""Directory skeletons for new and existing projects."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

EXISTING_PROJECT_DIRECTORIES = (
    ".cursor/rules",
    "docs/IDEA",
    "docs/BLUEPRINT",
    "docs/OPERATIONS",
    "docs/TEAM",
    "docs/METRICS",
)

NEW_PROJECT_DIRECTORIES = (
    *EXISTING_PROJECT_DIRECTORIES,
    "src/api",
    "src/services",
    "src/models",
    "src/utils",
    "src/middleware",
    "src/components",
    "tests/unit",
    "tests/integration",
    "tests/e2e",
)

REORGANIZED_DIRECTORIES = (
    "src/components",
    "src/utils",
    "src/services",
    "src/models",
    "src/api",
)


def ensure_directories(root: Path, specs: Iterable[str]) -> list[str]:
    """Create each relative directory under ``root`` if it is missing.

    Args:
        root: Project root
        specs: Relative directory paths, created in order

    Returns:
        The specs that did not exist before the call

    Raises:
        PermissionError: If the filesystem refuses to create a directory
    """
    root = Path(root)
    created: list[str] = []
    for spec in specs:
        target = root / spec
        if target.is_dir():
            continue
        target.mkdir(parents=True, exist_ok=True)
        created.append(spec)
    return created
