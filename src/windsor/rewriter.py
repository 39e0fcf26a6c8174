"""Best-effort rewriting of relative import paths after a reorganization.

Matching is plain substring search. Occurrences inside comments, string
literals or unrelated identifiers are rewritten too.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

LEGACY_LAYOUT = (
    ("components", "src/components"),
    ("utils", "src/utils"),
    ("lib", "src/lib"),
    ("helpers", "src/utils/helpers"),
)

SOURCE_SUFFIXES = frozenset({".js", ".jsx", ".ts", ".tsx"})
EXCLUDED_DIRS = frozenset({"node_modules", "dist", "build"})


def build_rewrite_map(root: Path) -> dict[str, str]:
    """Map old relative references to their reorganized location.

    Each legacy directory present at ``root`` contributes a same-directory
    and a parent-directory spelling.
    """
    root = Path(root)
    path_map: dict[str, str] = {}
    for old, new in LEGACY_LAYOUT:
        if (root / old).exists():
            path_map[f"./{old}"] = f"./{new}"
            path_map[f"../{old}"] = f"./{new}"
    return path_map


def iter_source_files(root: Path) -> list[Path]:
    """Source files under ``root``, skipping dependency and build output.

    Dot-prefixed directories (``.git``, ``.windsor-backup``, ``.next``) are
    never entered.
    """
    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(
            d for d in dirnames if not d.startswith(".") and d not in EXCLUDED_DIRS
        )
        for name in sorted(filenames):
            if os.path.splitext(name)[1] in SOURCE_SUFFIXES:
                files.append(Path(dirpath) / name)
    return files


def rewrite_text(content: str, path_map: dict[str, str]) -> str:
    """Apply every map entry whose old string occurs, in map order."""
    for old, new in path_map.items():
        if old in content:
            content = re.sub(re.escape(old), new, content)
    return content


def apply_rewrite(root: Path, path_map: dict[str, str]) -> list[Path]:
    """Rewrite matching references in source files under ``root``.

    Files without a match are never written.

    Returns:
        Files whose content changed
    """
    if not path_map:
        return []

    changed: list[Path] = []
    for path in iter_source_files(Path(root)):
        raw = path.read_bytes()
        content = raw.decode("utf-8", errors="surrogateescape")
        updated = rewrite_text(content, path_map)
        if updated == content:
            continue
        path.write_bytes(updated.encode("utf-8", errors="surrogateescape"))
        changed.append(path)
    return changed
