"""Shared fixtures for the Windsor test suite."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from rich.console import Console

from windsor.reporter import Reporter


def build_template(root: Path) -> Path:
    """Create a small template bundle under ``root`` and return it."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "IDEA_GUIDE.md").write_text("# Idea guide\n", encoding="utf-8")
    (root / "CURSOR.md").write_text("# Cursor standards\n", encoding="utf-8")
    (root / "api-standards.mdc").write_text("rule: api\n", encoding="utf-8")
    (root / ".cursorrules").write_text("legacy rules\n", encoding="utf-8")
    (root / "package.json").write_text("{}\n", encoding="utf-8")
    (root / "notes.txt").write_text("not a guide\n", encoding="utf-8")

    rules = root / ".cursor" / "rules"
    rules.mkdir(parents=True)
    (rules / "project-guidelines.mdc").write_text("guidelines\n", encoding="utf-8")
    (rules / "security-checklist.mdc").write_text("security\n", encoding="utf-8")
    guides = root / ".cursor" / "guides"
    guides.mkdir()
    (guides / "onboarding.md").write_text("onboarding\n", encoding="utf-8")
    (root / ".cursor" / "README.md").write_text("cursor readme\n", encoding="utf-8")

    ideas = root / "docs" / "IDEA"
    ideas.mkdir(parents=True)
    (ideas / "problem.md").write_text("problem\n", encoding="utf-8")
    return root


class FakeFetcher:
    """In-memory stand-in for ``GitFetcher``."""

    def __init__(
        self,
        clone_error: Exception | None = None,
        update_error: Exception | None = None,
    ) -> None:
        self.clone_error = clone_error
        self.update_error = update_error
        self.calls: list[tuple[str, str]] = []

    def clone(self, url: str, dest: Path) -> None:
        self.calls.append(("clone", url))
        if self.clone_error is not None:
            raise self.clone_error
        build_template(dest / "template")

    def update(self, repo_dir: Path) -> None:
        self.calls.append(("update", str(repo_dir)))
        if self.update_error is not None:
            raise self.update_error


@pytest.fixture
def output() -> io.StringIO:
    """Buffer that captures reporter output."""
    return io.StringIO()


@pytest.fixture
def reporter(output: io.StringIO) -> Reporter:
    """Reporter writing plain text into ``output``."""
    return Reporter(Console(file=output, width=200, no_color=True, highlight=False))


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A ready-made template bundle directory."""
    return build_template(tmp_path / "template")


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Empty project directory."""
    root = tmp_path / "project"
    root.mkdir()
    return root
