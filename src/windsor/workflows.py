"""The init, organize and install pipelines."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from .backup import ROLLBACK_SCRIPT_NAME, BackupManager
from .cache import TemplateCache, TemplateFetcher, local_bundle
from .detector import is_empty_directory, is_existing_project
from .documents import write_custom_instructions, write_initial_docs
from .exceptions import OperationCancelled, ProjectPathError, WindsorError
from .merger import TemplateMerger
from .models import (
    InstallConfig,
    MergePolicy,
    ProjectType,
    Settings,
    TemplateBundle,
)
from .reporter import Reporter
from .rewriter import apply_rewrite, build_rewrite_map
from .scaffold import (
    EXISTING_PROJECT_DIRECTORIES,
    NEW_PROJECT_DIRECTORIES,
    REORGANIZED_DIRECTORIES,
    ensure_directories,
)
from .state import write_state

INIT_COMMAND = "projinit"
ORGANIZE_COMMAND = "projorg"
INSTALL_COMMAND = "windsor-install"

ConfirmFn = Callable[[str, bool], bool]


class Workflow:
    """Runs one pipeline against a project root.

    Invocations against the same project root must not overlap: snapshots
    and merges read then write without locking.
    """

    def __init__(
        self,
        settings: Settings,
        confirm: ConfirmFn,
        reporter: Reporter | None = None,
        fetcher: TemplateFetcher | None = None,
        template_dir: Path | None = None,
    ) -> None:
        """Initialize the workflow.

        Args:
            settings: Repository, version and cache configuration
            confirm: Asks the operator a yes/no question with a default answer
            reporter: Output sink
            fetcher: Repository fetcher for the template cache
            template_dir: Use this template directory instead of the cache
        """
        self.settings = settings
        self.confirm = confirm
        self.reporter = reporter or Reporter()
        self.fetcher = fetcher
        self.template_dir = template_dir
        self.merger = TemplateMerger(self.reporter)

    def template_bundle(self) -> TemplateBundle:
        """Resolve the template, refreshing the cache unless a local one is set."""
        if self.template_dir is not None:
            return local_bundle(self.template_dir)
        cache = TemplateCache(
            self.settings.cache_location,
            self.settings.repository_url,
            fetcher=self.fetcher,
            reporter=self.reporter,
        )
        return cache.refresh()

    def _ask(self, question: str, default: bool, cancel_message: str) -> None:
        if not self.confirm(question, default):
            raise OperationCancelled(cancel_message)

    def _scaffold(self, root: Path, specs: tuple[str, ...]) -> None:
        created = set(ensure_directories(root, specs))
        for spec in specs:
            if spec in created:
                self.reporter.success(f"Created {spec}")
            else:
                self.reporter.info(f"{spec} already exists")

    def _finish(self, root: Path, record: InstallConfig) -> InstallConfig:
        path = write_state(root, record)
        self.reporter.success(f"Created {path.name}")
        return record

    def init_project(self, root: Path) -> InstallConfig:
        """Set up a new project.

        Raises:
            OperationCancelled: If the operator declines to use a non-empty directory
        """
        root = Path(root).resolve()
        self.reporter.banner("Windsor Project Constitution - projinit")
        self.reporter.info(f"Project path: {root}")

        if root.exists():
            if not is_empty_directory(root):
                self.reporter.warn("Directory is not empty!")
                self._ask(
                    "Continue anyway? (Files will be added, not replaced)",
                    True,
                    "Cancelled.",
                )
        else:
            root.mkdir(parents=True)
            self.reporter.success("Created project directory")

        self.reporter.step("Step 1: Fetching Windsor Constitution...")
        bundle = self.template_bundle()

        self.reporter.step("Step 2: Creating project structure...")
        self._scaffold(root, NEW_PROJECT_DIRECTORIES)

        self.reporter.step("Step 3: Copying Windsor Constitution files...")
        copied = self.merger.merge(bundle, root, MergePolicy.SKIP_EXISTING)
        self.reporter.success(f"Added {copied} Windsor Constitution files")

        self.reporter.step("Step 4: Creating initial documentation...")
        for name in write_initial_docs(root):
            self.reporter.success(f"Created {name}")

        self.reporter.step("Step 5: Setting up Cursor configuration...")
        write_custom_instructions(root, self.settings.version, INIT_COMMAND)
        self.reporter.success("Created .cursor/custom-instructions.md")

        self.reporter.step("Step 6: Creating configuration...")
        return self._finish(
            root,
            InstallConfig(
                version=self.settings.version,
                project_type=ProjectType.NEW,
                command=INIT_COMMAND,
            ),
        )

    def organize_project(self, root: Path) -> InstallConfig:
        """Add the constitution to an existing project, backing it up first.

        Raises:
            ProjectPathError: If ``root`` does not exist
            OperationCancelled: If the operator declines to continue
        """
        root = Path(root).resolve()
        self.reporter.banner("Windsor Project Constitution - projorg")
        if not root.is_dir():
            msg = f"Project directory does not exist: {root}"
            raise ProjectPathError(msg, details={"path": str(root)})
        self.reporter.info(f"Project path: {root}")

        if not is_existing_project(root):
            self.reporter.warn("This does not appear to be an existing project.")
            self._ask(
                "Continue anyway?",
                False,
                'Cancelled. Use "projinit" for new projects.',
            )

        self.reporter.step("Step 1: Creating backup and rollback point...")
        manifest = BackupManager(ORGANIZE_COMMAND, self.reporter).snapshot(root)

        try:
            self.reporter.step("Step 2: Fetching Windsor Constitution...")
            bundle = self.template_bundle()

            self.reporter.step("Step 3: Adding Windsor Constitution files...")
            self._scaffold(root, EXISTING_PROJECT_DIRECTORIES)
            copied = self.merger.merge(bundle, root, MergePolicy.SKIP_EXISTING)
            self.reporter.success(f"Added {copied} Windsor Constitution files")

            self.reporter.step("Step 4: Project organization options...")
            if self.confirm(
                "Reorganize project structure? (moves files, updates imports)",
                False,
            ):
                self.reorganize(root)

            self.reporter.step("Step 5: Setting up Cursor configuration...")
            write_custom_instructions(root, self.settings.version, ORGANIZE_COMMAND)
            self.reporter.success("Created .cursor/custom-instructions.md")

            self.reporter.step("Step 6: Creating configuration...")
            record = self._finish(
                root,
                InstallConfig(
                    version=self.settings.version,
                    project_type=ProjectType.EXISTING,
                    command=ORGANIZE_COMMAND,
                    backup_path=manifest.backup_path,
                ),
            )
        except (WindsorError, OSError):
            self.reporter.warn(
                "You can restore from backup with "
                f"{manifest.backup_path / ROLLBACK_SCRIPT_NAME}",
            )
            raise

        self.reporter.info(f"Backup location: {manifest.backup_path}")
        return record

    def reorganize(self, root: Path) -> list[Path]:
        """Create the ``src/`` layout and rewrite references to legacy directories.

        Files are not moved.

        Returns:
            Source files whose references were rewritten
        """
        self.reporter.warn("Reorganization will move files and update imports.")
        self.reporter.warn("A backup has been created, but please test thoroughly.")
        if not self.confirm("Proceed with reorganization?", False):
            self.reporter.info("Reorganization skipped.")
            return []

        self.reporter.info("Analyzing project structure...")
        path_map = build_rewrite_map(root)

        self.reporter.info("Creating new structure...")
        ensure_directories(root, REORGANIZED_DIRECTORIES)

        self.reporter.info("Moving files...")
        self.reporter.warn("File moving is not automated. Move legacy directories manually.")

        self.reporter.info("Updating import paths...")
        if not path_map:
            self.reporter.info("No import paths to update")
            return []
        changed = apply_rewrite(root, path_map)
        self.reporter.success(f"Updated imports in {len(changed)} files")
        self.reporter.warn("Please test your application thoroughly.")
        return changed

    def install(self, root: Path, force: bool = False) -> InstallConfig:
        """Standalone installer that picks the new or existing path itself.

        Args:
            root: Project root
            force: Overwrite template files that already exist

        Raises:
            OperationCancelled: If the operator declines on an existing project
        """
        root = Path(root).resolve()
        self.reporter.banner("Windsor Project Constitution Installer")
        self.reporter.info(f"Project root: {root}")
        root.mkdir(parents=True, exist_ok=True)

        bundle = self.template_bundle()
        policy = MergePolicy.OVERWRITE if force else MergePolicy.SKIP_EXISTING
        existing = is_existing_project(root)
        backup_path = None

        if existing:
            self.reporter.warn("Detected existing project")
            self.reporter.warn("Windsor Constitution files will be added to your project.")
            self.reporter.warn("Your existing files will NOT be moved or modified.")
            self._ask("Continue?", False, "Installation cancelled.")

            self.reporter.step("1. Creating backup...")
            manifest = BackupManager(INSTALL_COMMAND, self.reporter).snapshot(root)
            backup_path = manifest.backup_path
        else:
            self.reporter.success("Setting up new project")

        try:
            if existing:
                self.reporter.step("2. Creating directory structure (if needed)...")
                self._scaffold(root, EXISTING_PROJECT_DIRECTORIES)

                self.reporter.step("3. Copying template files...")
                self.merger.merge(bundle, root, policy)
            else:
                self.reporter.step("1. Creating directory structure...")
                self._scaffold(root, NEW_PROJECT_DIRECTORIES)

                self.reporter.step("2. Copying template files...")
                self.merger.merge(bundle, root, policy)

                self.reporter.step("3. Creating initial documentation...")
                for name in write_initial_docs(root):
                    self.reporter.success(f"Created {name}")

            self.reporter.step("4. Setting up Cursor custom instructions...")
            write_custom_instructions(root, self.settings.version, INSTALL_COMMAND)
            self.reporter.success("Created .cursor/custom-instructions.md")

            return self._finish(
                root,
                InstallConfig(
                    version=self.settings.version,
                    project_type=ProjectType.EXISTING if existing else ProjectType.NEW,
                    command=INSTALL_COMMAND,
                    backup_path=backup_path,
                    repository=self.settings.repository_url,
                ),
            )
        except (WindsorError, OSError):
            if backup_path is not None:
                self.reporter.warn(
                    "You can restore from backup with "
                    f"{backup_path / ROLLBACK_SCRIPT_NAME}",
                )
            raise
