"""Windsor: project constitution scaffolding for documentation and AI rule files."""

__version__ = "1.0.0"
__author__ = "Windsor Contributors"
__description__ = "Project constitution scaffolding for documentation and AI rule files"

from .backup import BackupManager
from .cache import TemplateCache
from .merger import TemplateMerger
from .models import InstallConfig, MergePolicy, Settings
from .workflows import Workflow

__all__ = [
    "BackupManager",
    "InstallConfig",
    "MergePolicy",
    "Settings",
    "TemplateCache",
    "TemplateMerger",
    "Workflow",
]
