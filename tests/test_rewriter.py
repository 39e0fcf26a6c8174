"""Tests for import path rewriting."""

import os
from pathlib import Path

from windsor.rewriter import (
    apply_rewrite,
    build_rewrite_map,
    iter_source_files,
    rewrite_text,
)


class TestBuildRewriteMap:
    """Test rewrite map construction."""

    def test_components_only(self, project_root: Path) -> None:
        """Test a lone components/ directory yields exactly two entries."""
        (project_root / "components").mkdir()

        assert build_rewrite_map(project_root) == {
            "./components": "./src/components",
            "../components": "./src/components",
        }

    def test_empty_root(self, project_root: Path) -> None:
        assert build_rewrite_map(project_root) == {}

    def test_all_legacy_directories(self, project_root: Path) -> None:
        """Test every legacy directory contributes two entries in table order."""
        for name in ("helpers", "lib", "utils", "components"):
            (project_root / name).mkdir()

        path_map = build_rewrite_map(project_root)

        assert list(path_map) == [
            "./components", "../components",
            "./utils", "../utils",
            "./lib", "../lib",
            "./helpers", "../helpers",
        ]
        assert path_map["../helpers"] == "./src/utils/helpers"


class TestApplyRewrite:
    """Test rewriting source files."""

    def test_rewrites_matching_import(self, project_root: Path) -> None:
        """Test a matching import is redirected into src/."""
        (project_root / "components").mkdir()
        page = project_root / "pages" / "index.jsx"
        page.parent.mkdir()
        page.write_text("import Button from './components/Button'\n")

        changed = apply_rewrite(project_root, build_rewrite_map(project_root))

        assert changed == [page]
        assert page.read_text() == "import Button from './src/components/Button'\n"

    def test_untouched_file_keeps_bytes_and_mtime(self, project_root: Path) -> None:
        """Test a file without legacy references is never written."""
        (project_root / "components").mkdir()
        other = project_root / "other.ts"
        other.write_bytes(b"export const x = 1;\r\n")
        os.utime(other, (1_000_000_000, 1_000_000_000))

        changed = apply_rewrite(project_root, build_rewrite_map(project_root))

        assert changed == []
        assert other.read_bytes() == b"export const x = 1;\r\n"
        assert other.stat().st_mtime == 1_000_000_000

    def test_only_source_extensions(self, project_root: Path) -> None:
        """Test non-source files are left alone."""
        (project_root / "components").mkdir()
        notes = project_root / "NOTES.md"
        notes.write_text("see ./components")

        assert apply_rewrite(project_root, build_rewrite_map(project_root)) == []
        assert notes.read_text() == "see ./components"

    def test_excluded_directories_skipped(self, project_root: Path) -> None:
        """Test dependency, build and backup directories are not scanned."""
        for name in ("node_modules", ".git", "dist", "build", ".windsor-backup"):
            target = project_root / name / "file.js"
            target.parent.mkdir()
            target.write_text("require('./utils')")
        kept = project_root / "main.js"
        kept.write_text("require('./utils')")

        files = iter_source_files(project_root)

        assert files == [kept]

    def test_dot_directories_skipped(self, project_root: Path) -> None:
        """Test generated output under dot directories is never rewritten."""
        (project_root / "utils").mkdir()
        bundle = project_root / ".next" / "server" / "page.js"
        bundle.parent.mkdir(parents=True)
        bundle.write_text("require('./utils')")
        cached = project_root / ".cache" / "mod.ts"
        cached.parent.mkdir()
        cached.write_text("import './utils'")

        changed = apply_rewrite(project_root, build_rewrite_map(project_root))

        assert changed == []
        assert bundle.read_text() == "require('./utils')"
        assert cached.read_text() == "import './utils'"

    def test_matches_are_textual(self, project_root: Path) -> None:
        """Test entries apply in order as plain text, in comments and strings too.

        The same-directory entry matches inside the parent spelling first.
        """
        (project_root / "utils").mkdir()
        source = project_root / "a.ts"
        source.write_text("// see ./utils for helpers\nconst p = '../utils/x';\n")

        apply_rewrite(project_root, build_rewrite_map(project_root))

        assert source.read_text() == (
            "// see ./src/utils for helpers\nconst p = '../src/utils/x';\n"
        )

    def test_case_sensitive(self, project_root: Path) -> None:
        (project_root / "lib").mkdir()
        source = project_root / "a.js"
        source.write_text("import x from './Lib/x'")

        assert apply_rewrite(project_root, build_rewrite_map(project_root)) == []

    def test_empty_map_is_a_no_op(self, project_root: Path) -> None:
        (project_root / "a.js").write_text("import './components/x'")
        assert apply_rewrite(project_root, {}) == []

    def test_non_utf8_bytes_survive(self, project_root: Path) -> None:
        """Test undecodable bytes are written back unchanged."""
        (project_root / "lib").mkdir()
        source = project_root / "a.js"
        source.write_bytes(b"// \xff\xfe\nimport x from './lib/x'\n")

        apply_rewrite(project_root, build_rewrite_map(project_root))

        assert source.read_bytes() == b"// \xff\xfe\nimport x from './src/lib/x'\n"


class TestRewriteText:
    """Test substitution order."""

    def test_entries_apply_in_map_order(self) -> None:
        """Test the same-directory spelling also rewrites parent-relative paths."""
        path_map = {
            "./components": "./src/components",
            "../components": "./src/components",
        }
        assert rewrite_text("from '../components/A'", path_map) == "from '../src/components/A'"

    def test_metacharacters_matched_literally(self) -> None:
        assert rewrite_text("a.b a_b", {"a.b": "c"}) == "c a_b"
