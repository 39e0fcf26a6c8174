"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from conftest import build_template
from windsor.cli import app, install_app, projinit_app, projorg_app


class TestCLI:
    """Test CLI commands."""

    @pytest.fixture
    def runner(self) -> CliRunner:
        """Create CLI test runner."""
        return CliRunner()

    @pytest.fixture(autouse=True)
    def offline_cache(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
        """Point the cache at a temp dir and replace git with local copies."""
        cache_dir = tmp_path / "cache"
        monkeypatch.setenv("WINDSOR_CACHE_DIR", str(cache_dir))

        def fake_clone(self, url: str, dest: Path) -> None:
            build_template(dest / "template")

        def fake_update(self, repo_dir: Path) -> None:
            return None

        monkeypatch.setattr("windsor.cache.GitFetcher.clone", fake_clone)
        monkeypatch.setattr("windsor.cache.GitFetcher.update", fake_update)
        return cache_dir

    @pytest.fixture
    def legacy_project(self, tmp_path: Path) -> Path:
        root = tmp_path / "legacy"
        root.mkdir()
        (root / "package.json").write_text('{"name": "legacy"}')
        (root / "utils").mkdir()
        (root / "main.js").write_text("const u = require('./utils/format')\n")
        return root

    def test_projinit_creates_project(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test projinit sets up a new project directory."""
        root = tmp_path / "app"
        result = runner.invoke(projinit_app, [str(root)])

        assert result.exit_code == 0, result.output
        assert "Project initialized successfully" in result.stdout
        assert (root / "IDEA_GUIDE.md").exists()
        assert (root / "docs" / "TEAM").is_dir()
        data = json.loads((root / ".windsor-config.json").read_text())
        assert data["command"] == "projinit"

    def test_init_cancel_exits_zero(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test declining the non-empty prompt exits cleanly."""
        root = tmp_path / "busy"
        root.mkdir()
        (root / "notes.txt").write_text("mine")

        result = runner.invoke(app, ["init", str(root)], input="n\n")

        assert result.exit_code == 0
        assert "Cancelled" in result.stdout
        assert not (root / ".windsor-config.json").exists()

    def test_projorg_without_reorganization(
        self, runner: CliRunner, legacy_project: Path,
    ) -> None:
        """Test projorg backs up and adds files when reorganization is declined."""
        result = runner.invoke(projorg_app, [str(legacy_project)], input="n\n")

        assert result.exit_code == 0, result.output
        assert "Project organized successfully" in result.stdout
        assert (legacy_project / ".windsor-backup").is_dir()
        assert "./utils/format" in (legacy_project / "main.js").read_text()

    def test_organize_with_reorganization(
        self, runner: CliRunner, legacy_project: Path,
    ) -> None:
        """Test accepting both prompts rewrites legacy imports."""
        result = runner.invoke(app, ["organize", str(legacy_project)], input="y\ny\n")

        assert result.exit_code == 0, result.output
        assert (legacy_project / "main.js").read_text() == (
            "const u = require('./src/utils/format')\n"
        )

    def test_organize_missing_directory_exits_one(
        self, runner: CliRunner, tmp_path: Path,
    ) -> None:
        result = runner.invoke(app, ["organize", str(tmp_path / "missing")])

        assert result.exit_code == 1
        assert "does not exist" in result.stdout

    def test_install_with_local_template(
        self, runner: CliRunner, tmp_path: Path, offline_cache: Path,
    ) -> None:
        """Test windsor-install reads a local template and skips the cache."""
        template = build_template(tmp_path / "tpl")
        root = tmp_path / "fresh"

        result = runner.invoke(install_app, [str(root), "--template", str(template)])

        assert result.exit_code == 0, result.output
        assert "Installation complete" in result.stdout
        assert (root / ".cursorrules").exists()
        assert not offline_cache.exists()

    def test_install_fetch_failure_exits_one(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test an unreachable repository with no cache is fatal."""
        from windsor.exceptions import FetchError

        def offline_clone(self, url: str, dest: Path) -> None:
            raise FetchError("could not resolve host")

        monkeypatch.setattr("windsor.cache.GitFetcher.clone", offline_clone)
        result = runner.invoke(app, ["install", str(tmp_path / "fresh")])

        assert result.exit_code == 1
        assert "could not resolve host" in result.stdout

    def test_rollback_restores_latest_snapshot(
        self, runner: CliRunner, legacy_project: Path,
    ) -> None:
        """Test rollback copies the snapshot back over the project."""
        runner.invoke(app, ["organize", str(legacy_project)], input="n\n")
        (legacy_project / "package.json").write_text("broken")

        result = runner.invoke(app, ["rollback", str(legacy_project), "--yes"])

        assert result.exit_code == 0, result.output
        assert "Rollback complete" in result.stdout
        assert (legacy_project / "package.json").read_text() == '{"name": "legacy"}'

    def test_rollback_without_backup(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["rollback", str(tmp_path), "--yes"])
        assert result.exit_code == 1
        assert "No backup found" in result.stdout

    def test_rollback_declined(self, runner: CliRunner, legacy_project: Path) -> None:
        runner.invoke(app, ["organize", str(legacy_project)], input="n\n")
        (legacy_project / "package.json").write_text("edited")

        result = runner.invoke(app, ["rollback", str(legacy_project)], input="n\n")

        assert result.exit_code == 0
        assert (legacy_project / "package.json").read_text() == "edited"

    def test_status_shows_record(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test status prints the install record."""
        root = tmp_path / "app"
        runner.invoke(projinit_app, [str(root)])

        result = runner.invoke(app, ["status", str(root)])

        assert result.exit_code == 0, result.output
        assert "projinit" in result.stdout
        assert "new" in result.stdout

    def test_status_without_record(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["status", str(tmp_path)])
        assert result.exit_code == 1
        assert "No install record" in result.stdout

    def test_version_command(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "Windsor version" in result.stdout

    def test_version_flag(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "Windsor version" in result.stdout
