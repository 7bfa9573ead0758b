"""Tests for SourceTreeScanner."""

import os
import sys

import pytest

from sourcescope.config import AnalysisConfig
from sourcescope.scanning import SourceTreeScanner


def _names(result, root):
    return [p.relative_to(root).as_posix() for p in result.files]


class TestSourceTreeScanner:
    """Discovery, filtering and skip reporting."""

    def test_finds_script_and_component_files(self, make_project):
        root = make_project(
            {
                "src/a.js": "const a = 1;\n",
                "src/b.ts": "const b = 2;\n",
                "src/c.vue": "<template><div/></template>\n",
                "src/d.mjs": "export default 1;\n",
                "README.md": "# readme\n",
                "styles.css": "body {}\n",
            }
        )
        result = SourceTreeScanner().scan(root)
        assert _names(result, root) == ["src/a.js", "src/b.ts", "src/c.vue", "src/d.mjs"]
        assert result.discovered == 4
        assert result.warnings == []

    def test_excluded_directories_are_not_entered(self, make_project):
        root = make_project(
            {
                "index.js": "",
                "node_modules/lib/index.js": "",
                "dist/bundle.js": "",
                "build/out.js": "",
                ".git/hooks/pre-commit.js": "",
                ".next/server.js": "",
            }
        )
        result = SourceTreeScanner().scan(root)
        assert _names(result, root) == ["index.js"]
        assert result.discovered == 1

    def test_extension_match_is_case_insensitive(self, make_project):
        root = make_project({"Legacy.JS": "var x;\n"})
        result = SourceTreeScanner().scan(root)
        assert _names(result, root) == ["Legacy.JS"]

    def test_scan_order_is_deterministic(self, make_project):
        root = make_project(
            {
                "z.js": "",
                "a/b.js": "",
                "a/a.js": "",
                "m.ts": "",
            }
        )
        scanner = SourceTreeScanner()
        first = _names(scanner.scan(root), root)
        second = _names(scanner.scan(root), root)
        assert first == second
        assert first == ["a/a.js", "a/b.js", "m.ts", "z.js"]

    def test_oversized_file_skipped_with_warning(self, make_project):
        root = make_project({"small.js": "x;\n", "big.js": "x;\n" * 200})
        config = AnalysisConfig(max_file_size_mb=0.0001)
        result = SourceTreeScanner(config).scan(root)
        assert _names(result, root) == ["small.js"]
        assert result.discovered == 2
        assert result.skipped == 1
        assert any("big.js" in w and "size limit" in w for w in result.warnings)

    def test_max_files_limit(self, make_project):
        root = make_project({"a.js": "", "b.js": "", "c.js": ""})
        result = SourceTreeScanner(AnalysisConfig(max_files=2)).scan(root)
        assert _names(result, root) == ["a.js", "b.js"]
        assert result.discovered == 3
        assert len(result.warnings) == 1
        assert "max files limit" in result.warnings[0]

    def test_custom_extensions(self, make_project):
        root = make_project({"a.js": "", "b.ts": ""})
        config = AnalysisConfig(source_extensions=(".ts",))
        result = SourceTreeScanner(config).scan(root)
        assert _names(result, root) == ["b.ts"]

    def test_empty_directory(self, make_project):
        root = make_project({})
        result = SourceTreeScanner().scan(root)
        assert result.files == []
        assert result.discovered == 0

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
    def test_dangling_symlink_skipped_with_warning(self, make_project):
        root = make_project({"real.js": "x;\n"})
        os.symlink(root / "missing.js", root / "ghost.js")
        result = SourceTreeScanner().scan(root)
        assert _names(result, root) == ["real.js"]
        assert any("Dangling symlink" in w for w in result.warnings)

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX permissions only")
    @pytest.mark.skipif(hasattr(os, "geteuid") and os.geteuid() == 0, reason="root ignores permissions")
    def test_unreadable_directory_skipped_with_warning(self, make_project):
        root = make_project({"ok.js": "", "locked/inner.js": ""})
        locked = root / "locked"
        locked.chmod(0)
        try:
            result = SourceTreeScanner().scan(root)
        finally:
            locked.chmod(0o755)
        assert _names(result, root) == ["ok.js"]
        assert any("locked" in w for w in result.warnings)
