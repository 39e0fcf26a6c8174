"""Custom exceptions for Windsor."""

from typing import Any


class WindsorError(Exception):
    """Base exception for all Windsor errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}


class FetchError(WindsorError):
    """Raised when the template bundle cannot be fetched and no cache exists."""


class MergeError(WindsorError):
    """Raised when copying template content into a project fails."""


class RollbackError(WindsorError):
    """Raised when a snapshot cannot be restored."""


class ConfigWriteError(WindsorError):
    """Raised when the install record cannot be written."""


class StateFileError(WindsorError):
    """Raised when the install record cannot be read or is invalid."""


class ProjectPathError(WindsorError):
    """Raised when the target project directory is unusable."""


class OperationCancelled(WindsorError):
    """Raised when the operator declines a confirmation prompt."""
