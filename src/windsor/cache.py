"""Local cache of the template bundle, refreshed from a git repository."""

from __future__ import annotations

import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Protocol

from .exceptions import FetchError
from .models import CacheLocation, TemplateBundle
from .reporter import Reporter

TEMPLATE_SUBDIR = "template"
FALLBACK_IGNORES = (".git", "node_modules", ".gitignore")


class TemplateFetcher(Protocol):
    """Fetches or updates a checkout of the template repository."""

    def clone(self, url: str, dest: Path) -> None: ...

    def update(self, repo_dir: Path) -> None: ...


def _run_git(*args: str, cwd: Path | None = None) -> str:
    """Run a git command and return stdout.

    Raises:
        FetchError: If git is missing or exits non-zero
    """
    cmd = ["git", *args]
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            check=True,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        msg = "git executable not found"
        raise FetchError(msg, details={"command": cmd}) from e
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        msg = f"git {args[0]} failed: {stderr or e}"
        raise FetchError(msg, details={"command": cmd, "returncode": e.returncode}) from e
    return result.stdout


class GitFetcher:
    """Fetcher backed by the ``git`` command line."""

    def clone(self, url: str, dest: Path) -> None:
        _run_git("clone", "--depth", "1", url, str(dest))

    def update(self, repo_dir: Path) -> None:
        _run_git("pull", "--ff-only", cwd=repo_dir)


class TemplateCache:
    """Keeps the latest template bundle materialized on disk."""

    def __init__(
        self,
        location: CacheLocation,
        repository_url: str,
        fetcher: TemplateFetcher | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            location: Where the checkout and template live
            repository_url: Remote repository holding the template
            fetcher: Clone/update implementation, defaults to ``GitFetcher``
            reporter: Output sink
        """
        self.location = location
        self.repository_url = repository_url
        self.fetcher = fetcher or GitFetcher()
        self.reporter = reporter or Reporter()

    def refresh(self) -> TemplateBundle:
        """Update or fetch the repository and materialize the template.

        Returns:
            Handle to the materialized template directory

        Raises:
            FetchError: If there is no cached checkout and the fetch fails
        """
        self.location.root.mkdir(parents=True, exist_ok=True)
        repo_dir = self.location.repo_dir
        stale = False

        if repo_dir.exists():
            self.reporter.info("Updating cached repository...")
            try:
                self.fetcher.update(repo_dir)
            except FetchError as e:
                self.reporter.warn(f"Pull failed, using cached version ({e})")
                stale = True
            else:
                self.reporter.success("Repository updated")
        else:
            self.reporter.info("Cloning repository (first time, this may take a moment)...")
            try:
                self.fetcher.clone(self.repository_url, repo_dir)
            except FetchError as e:
                self.reporter.error(f"Failed to clone repository: {e}")
                self.reporter.info("Make sure the repository URL is correct and accessible")
                # A failed clone can leave a partial checkout behind
                shutil.rmtree(repo_dir, ignore_errors=True)
                raise

        self._materialize(repo_dir)
        return TemplateBundle(path=self.location.template_dir, stale=stale)

    def _materialize(self, repo_dir: Path) -> None:
        """Replace the template directory with a fresh copy from the checkout."""
        source = repo_dir / TEMPLATE_SUBDIR
        ignore = None
        if not source.is_dir():
            self.reporter.warn("Template directory not found, using repo root")
            source = repo_dir
            ignore = shutil.ignore_patterns(*FALLBACK_IGNORES)

        target = self.location.template_dir
        staging = Path(tempfile.mkdtemp(prefix=".template-", dir=self.location.root))
        staged = staging / TEMPLATE_SUBDIR
        retired = staging / "retired"
        try:
            shutil.copytree(source, staged, ignore=ignore)
            if target.exists():
                target.rename(retired)
            try:
                staged.rename(target)
            except OSError:
                if retired.exists():
                    retired.rename(target)
                raise
        except OSError as e:
            msg = f"Failed to materialize template from {source}: {e}"
            raise FetchError(msg, details={"source": str(source)}) from e
        finally:
            shutil.rmtree(staging, ignore_errors=True)

        self.reporter.success("Template files ready")


def local_bundle(path: Path) -> TemplateBundle:
    """Wrap an existing template directory without touching any cache.

    Raises:
        FetchError: If ``path`` is not a directory
    """
    path = Path(path)
    if not path.is_dir():
        msg = f"Template directory not found: {path}"
        raise FetchError(msg, details={"path": str(path)})
    return TemplateBundle(path=path.resolve())
