"""Reading and writing the ``.windsor-config.json`` install record."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
from pydantic import ValidationError

from .exceptions import ConfigWriteError, StateFileError
from .models import STATE_FILE_NAME, InstallConfig

STATE_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Windsor install record",
    "type": "object",
    "required": ["version", "installed", "projectType", "command", "structure"],
    "properties": {
        "version": {"type": "string"},
        "installed": {"type": "string"},
        "projectType": {"enum": ["new", "existing"]},
        "command": {"type": "string"},
        "backupPath": {"type": "string"},
        "repository": {"type": "string"},
        "structure": {
            "type": "object",
            "properties": {
                "docs": {"type": "boolean"},
                "cursorRules": {"type": "boolean"},
                "tests": {"type": "boolean"},
            },
        },
    },
}


def state_path(root: Path) -> Path:
    return Path(root) / STATE_FILE_NAME


def write_state(root: Path, record: InstallConfig) -> Path:
    """Replace the install record under ``root``.

    Raises:
        ConfigWriteError: If the file cannot be written
    """
    path = state_path(root)
    try:
        path.write_text(json.dumps(record.to_json_dict(), indent=2), encoding="utf-8")
    except OSError as e:
        msg = f"Failed to write {path}: {e}"
        raise ConfigWriteError(msg, details={"path": str(path)}) from e
    return path


def read_state(root: Path) -> InstallConfig:
    """Load and validate the install record under ``root``.

    Raises:
        StateFileError: If the file is missing, unparsable or invalid
    """
    path = state_path(root)
    if not path.exists():
        msg = f"No install record found at {path}"
        raise StateFileError(msg)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        msg = f"Failed to parse {path}: {e}"
        raise StateFileError(msg) from e
    except OSError as e:
        msg = f"Failed to read {path}: {e}"
        raise StateFileError(msg) from e

    try:
        jsonschema.validate(data, STATE_SCHEMA)
    except jsonschema.ValidationError as e:
        msg = f"Schema validation failed: {e.message}"
        raise StateFileError(msg, details={"path": list(e.absolute_path)}) from e

    try:
        return InstallConfig.model_validate(data)
    except ValidationError as e:
        msg = f"Install record validation failed: {e}"
        raise StateFileError(msg) from e
