"""Copy template content into a project under an overwrite policy."""

from __future__ import annotations

import shutil
from pathlib import Path

from .exceptions import MergeError
from .models import MergePolicy, TemplateBundle
from .reporter import Reporter

TOP_LEVEL_SUFFIXES = (".md", ".mdc")
LEGACY_RULES_FILE = ".cursorrules"

# Copied recursively, in this order
MERGED_SUBTREES = (
    ".cursor/rules",
    ".cursor/guides",
    ".cursor/README.md",
    "docs",
)


class TemplateMerger:
    """Merges a template bundle into a project root."""

    def __init__(self, reporter: Reporter | None = None) -> None:
        self.reporter = reporter or Reporter()

    def merge(
        self,
        bundle: TemplateBundle,
        project_root: Path,
        policy: MergePolicy = MergePolicy.SKIP_EXISTING,
    ) -> int:
        """Copy top-level guides and the named subtrees into ``project_root``.

        Files copied before a failure stay in place.

        Args:
            bundle: Materialized template
            project_root: Destination project
            policy: What to do when a destination file already exists

        Returns:
            Number of files written

        Raises:
            MergeError: If any copy fails
        """
        source_root = Path(bundle.path)
        project_root = Path(project_root)
        if not source_root.is_dir():
            msg = f"Template directory not found: {source_root}"
            raise MergeError(msg, details={"template": str(source_root)})

        copied = 0
        try:
            for entry in sorted(source_root.iterdir()):
                if entry.is_file() and _is_top_level_document(entry.name):
                    if self._copy_file(entry, project_root / entry.name, policy):
                        self.reporter.success(f"Added {entry.name}")
                        copied += 1
                    else:
                        self.reporter.info(f"Skipped {entry.name} (already exists)")

            for relative in MERGED_SUBTREES:
                source = source_root / relative
                if not source.exists():
                    continue
                count = self._copy_tree(source, project_root / relative, policy)
                self.reporter.success(f"Merged {relative} ({count} new files)")
                copied += count
        except OSError as e:
            msg = f"Failed to merge template into {project_root}: {e}"
            raise MergeError(
                msg,
                details={"copied": copied, "path": getattr(e, "filename", None)},
            ) from e

        return copied

    def _copy_tree(self, source: Path, dest: Path, policy: MergePolicy) -> int:
        if source.is_file():
            return int(self._copy_file(source, dest, policy))

        copied = 0
        for path in sorted(source.rglob("*")):
            if path.is_dir():
                continue
            if self._copy_file(path, dest / path.relative_to(source), policy):
                copied += 1
        return copied

    def _copy_file(self, source: Path, dest: Path, policy: MergePolicy) -> bool:
        if dest.exists() and policy is MergePolicy.SKIP_EXISTING:
            return False
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, dest)
        return True


def _is_top_level_document(name: str) -> bool:
    return name.endswith(TOP_LEVEL_SUFFIXES) or name == LEGACY_RULES_FILE
