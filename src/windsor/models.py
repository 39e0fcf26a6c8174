"""Core data models for the Windsor scaffolding tool."""

from __future__ import annotations

import os
import re
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_REPOSITORY = "https://github.com/Just-Jay-dot/IDE-Project-Initiation.git"
DEFAULT_VERSION = "1.0.0"
STATE_FILE_NAME = ".windsor-config.json"
BACKUP_DIR_NAME = ".windsor-backup"


def iso_timestamp(moment: datetime | None = None) -> str:
    """Format an instant as ISO-8601 UTC with millisecond precision.

    Produces the same shape as ``2026-10-17T08:15:30.123Z``.
    """
    moment = moment or datetime.now(tz=UTC)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    stamp = moment.astimezone(UTC).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def snapshot_dirname(moment: datetime | None = None) -> str:
    """Filesystem-safe snapshot directory name for an instant."""
    return re.sub(r"[:.]", "-", iso_timestamp(moment))


class MergePolicy(str, Enum):
    """Conflict behavior when template files already exist in the project."""

    OVERWRITE = "overwrite"
    SKIP_EXISTING = "skip_existing"


class ProjectType(str, Enum):
    """Classification of the target directory."""

    NEW = "new"
    EXISTING = "existing"


class CacheLocation(BaseModel):
    """On-disk layout of the template cache."""

    root: Path = Field(..., description="Cache root directory")

    @property
    def repo_dir(self) -> Path:
        """Checkout of the template repository."""
        return self.root / "repo"

    @property
    def template_dir(self) -> Path:
        """Materialized template bundle."""
        return self.root / "template"


class TemplateBundle(BaseModel):
    """Handle to a fully materialized template directory."""

    path: Path = Field(..., description="Root of the template tree")
    stale: bool = Field(
        default=False,
        description="True when the remote update failed and the cache was reused",
    )


class Settings(BaseModel):
    """Tool-wide configuration."""

    repository_url: str = Field(default=DEFAULT_REPOSITORY)
    version: str = Field(default=DEFAULT_VERSION)
    cache_dir: Path = Field(default_factory=lambda: Path.home() / ".windsor-cache")

    @field_validator("version")
    @classmethod
    def validate_semver(cls, v: str) -> str:
        """Validate version follows semantic versioning."""
        semver_pattern = r"^\d+\.\d+\.\d+(?:-[a-zA-Z0-9\-]+)?(?:\+[a-zA-Z0-9\-]+)?$"
        if not re.match(semver_pattern, v):
            msg = "Version must follow semantic versioning (e.g., 1.0.0)"
            raise ValueError(msg)
        return v

    @property
    def cache_location(self) -> CacheLocation:
        """Cache layout derived from ``cache_dir``."""
        return CacheLocation(root=self.cache_dir)

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from environment variables.

        Recognised variables (all optional): WINDSOR_REPO, WINDSOR_CACHE_DIR.
        """
        kwargs: dict[str, object] = {}
        if os.environ.get("WINDSOR_REPO"):
            kwargs["repository_url"] = os.environ["WINDSOR_REPO"]
        if os.environ.get("WINDSOR_CACHE_DIR"):
            kwargs["cache_dir"] = Path(os.environ["WINDSOR_CACHE_DIR"]).expanduser()
        return cls(**kwargs)


class BackupManifest(BaseModel):
    """Record of one snapshot, stored as ``rollback-info.json``."""

    model_config = ConfigDict(populate_by_name=True)

    timestamp: str = Field(..., description="ISO-8601 creation time")
    backup_path: Path = Field(..., alias="backupPath")
    project_root: Path = Field(..., alias="projectRoot")
    command: str = Field(..., description="Command that created the snapshot")
    items_backed_up: int = Field(..., alias="itemsBackedUp", ge=0)


class StructureFlags(BaseModel):
    """Which parts of the constitution layout the project carries."""

    model_config = ConfigDict(populate_by_name=True)

    docs: bool = True
    cursor_rules: bool = Field(default=True, alias="cursorRules")
    tests: bool = True


class InstallConfig(BaseModel):
    """Persisted ``.windsor-config.json`` record."""

    model_config = ConfigDict(populate_by_name=True)

    version: str = Field(default=DEFAULT_VERSION)
    installed: str = Field(default_factory=iso_timestamp)
    project_type: ProjectType = Field(..., alias="projectType")
    command: str = Field(..., description="Entry point that produced the record")
    backup_path: Path | None = Field(default=None, alias="backupPath")
    structure: StructureFlags = Field(default_factory=StructureFlags)
    repository: str | None = Field(default=None)

    def to_json_dict(self) -> dict[str, object]:
        """Serialize with the camelCase keys used on disk."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
