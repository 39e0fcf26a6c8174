"""Timestamped project snapshots with a generated rollback script."""

from __future__ import annotations

import json
import shlex
import shutil
from datetime import UTC, datetime
from pathlib import Path

from .exceptions import RollbackError
from .models import BACKUP_DIR_NAME, BackupManifest, iso_timestamp, snapshot_dirname
from .reporter import Reporter

BACKUP_CANDIDATES = (
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "src",
    "app",
    "lib",
    "components",
    "utils",
    "config",
    ".git",
    "tsconfig.json",
    "jsconfig.json",
    "webpack.config.js",
    "vite.config.js",
    "next.config.js",
    "tailwind.config.js",
)

ROLLBACK_SCRIPT_NAME = "rollback.sh"
MANIFEST_NAME = "rollback-info.json"
SNAPSHOT_METADATA = frozenset({ROLLBACK_SCRIPT_NAME, MANIFEST_NAME})

ROLLBACK_TEMPLATE = """\
#!/usr/bin/env bash
# Rollback script - restores project from backup
# Generated: {generated}

BACKUP_DIR={backup_dir}
PROJECT_ROOT={project_root}

echo "Rolling back to backup: $BACKUP_DIR"

if [ ! -d "$BACKUP_DIR" ]; then
  echo "Backup directory not found: $BACKUP_DIR" >&2
  exit 1
fi

for item in "$BACKUP_DIR"/* "$BACKUP_DIR"/.[!.]* "$BACKUP_DIR"/..?*; do
  [ -e "$item" ] || continue
  case "$(basename "$item")" in
    {script_name}|{manifest_name}) continue ;;
  esac
  cp -R "$item" "$PROJECT_ROOT"/ || {{ echo "Rollback failed" >&2; exit 1; }}
done

echo "Rollback complete!"
"""


def render_rollback_script(backup_path: Path, project_root: Path, generated: str) -> str:
    """Render the standalone rollback script with both paths as literals."""
    return ROLLBACK_TEMPLATE.format(
        generated=generated,
        backup_dir=shlex.quote(str(backup_path)),
        project_root=shlex.quote(str(project_root)),
        script_name=ROLLBACK_SCRIPT_NAME,
        manifest_name=MANIFEST_NAME,
    )


def _fresh_snapshot_dir(backup_root: Path, name: str) -> Path:
    """Create a new snapshot directory, suffixing ``-N`` if ``name`` is taken."""
    backup_root.mkdir(parents=True, exist_ok=True)
    candidate = backup_root / name
    suffix = 0
    while True:
        try:
            candidate.mkdir()
        except FileExistsError:
            suffix += 1
            candidate = backup_root / f"{name}-{suffix}"
        else:
            return candidate


class BackupManager:
    """Creates snapshots under ``<root>/.windsor-backup``."""

    def __init__(self, command: str, reporter: Reporter | None = None) -> None:
        """Initialize the manager.

        Args:
            command: Name of the command recorded in each manifest
            reporter: Output sink
        """
        self.command = command
        self.reporter = reporter or Reporter()

    def snapshot(self, root: Path, now: datetime | None = None) -> BackupManifest:
        """Copy existing candidate paths into a new snapshot directory.

        Args:
            root: Project root
            now: Snapshot instant, defaults to the current time

        Returns:
            Manifest of the snapshot, also written next to the rollback script
        """
        root = Path(root).resolve()
        now = now or datetime.now(tz=UTC)
        backup_path = _fresh_snapshot_dir(root / BACKUP_DIR_NAME, snapshot_dirname(now))

        backed_up = 0
        for item in BACKUP_CANDIDATES:
            source = root / item
            if not source.exists():
                continue
            dest = backup_path / item
            if source.is_dir():
                shutil.copytree(source, dest, symlinks=True, dirs_exist_ok=True)
            else:
                shutil.copy2(source, dest)
            backed_up += 1

        timestamp = iso_timestamp(now)
        script_path = backup_path / ROLLBACK_SCRIPT_NAME
        script_path.write_text(
            render_rollback_script(backup_path, root, timestamp),
            encoding="utf-8",
        )
        script_path.chmod(0o755)

        manifest = BackupManifest(
            timestamp=timestamp,
            backup_path=backup_path,
            project_root=root,
            command=self.command,
            items_backed_up=backed_up,
        )
        (backup_path / MANIFEST_NAME).write_text(
            json.dumps(manifest.model_dump(mode="json", by_alias=True), indent=2),
            encoding="utf-8",
        )

        self.reporter.success(f"Backup created: {backup_path}")
        self.reporter.info(f"Backed up {backed_up} items")
        self.reporter.info(f"Rollback script: {script_path}")
        return manifest


def restore(backup_path: Path, project_root: Path) -> int:
    """Copy every snapshot entry back over the project root.

    Mirrors the generated ``rollback.sh``.

    Returns:
        Number of top-level entries restored

    Raises:
        RollbackError: If the snapshot is missing or a copy fails
    """
    backup_path = Path(backup_path)
    project_root = Path(project_root)
    if not backup_path.is_dir():
        msg = f"Backup directory not found: {backup_path}"
        raise RollbackError(msg, details={"backup_path": str(backup_path)})

    restored = 0
    try:
        for entry in sorted(backup_path.iterdir()):
            if entry.name in SNAPSHOT_METADATA:
                continue
            dest = project_root / entry.name
            if entry.is_dir() and not entry.is_symlink():
                shutil.copytree(entry, dest, symlinks=True, dirs_exist_ok=True)
            else:
                shutil.copy2(entry, dest, follow_symlinks=False)
            restored += 1
    except OSError as e:
        msg = f"Rollback failed: {e}"
        raise RollbackError(msg, details={"backup_path": str(backup_path)}) from e
    return restored


def list_snapshots(root: Path) -> list[Path]:
    """Snapshot directories under ``root``, oldest first."""
    backup_root = Path(root) / BACKUP_DIR_NAME
    if not backup_root.is_dir():
        return []
    return sorted(p for p in backup_root.iterdir() if p.is_dir())


def load_manifest(backup_path: Path) -> BackupManifest:
    """Read the manifest stored in a snapshot.

    Raises:
        RollbackError: If the manifest is missing or malformed
    """
    manifest_path = Path(backup_path) / MANIFEST_NAME
    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
        return BackupManifest.model_validate(data)
    except (OSError, ValueError) as e:
        msg = f"Failed to read snapshot manifest {manifest_path}: {e}"
        raise RollbackError(msg) from e
