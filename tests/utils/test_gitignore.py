"""Tests for picocode/utils/gitignore.py and the ignore-aware walk."""

from pathlib import Path

import pytest

from picocode.utils.gitignore import IgnorePattern, IgnoreRules, read_patterns
from picocode.utils.paths import walk_files

BASE = Path("/work")


class TestIgnorePattern:
    """Tests for single pattern matching."""

    def test_name_pattern_matches_at_any_depth(self):
        pattern = IgnorePattern("*.log", BASE)
        assert pattern.matches(BASE / "debug.log", is_dir=False)
        assert pattern.matches(BASE / "a" / "b" / "trace.log", is_dir=False)
        assert not pattern.matches(BASE / "log.txt", is_dir=False)

    def test_directory_only(self):
        pattern = IgnorePattern("build/", BASE)
        assert pattern.matches(BASE / "build", is_dir=True)
        assert not pattern.matches(BASE / "build", is_dir=False)

    def test_anchored(self):
        """Test that a pattern containing '/' is relative to its file's directory."""
        pattern = IgnorePattern("/docs/*.md", BASE)
        assert pattern.matches(BASE / "docs" / "a.md", is_dir=False)
        assert not pattern.matches(BASE / "src" / "docs" / "a.md", is_dir=False)

    def test_leading_double_star(self):
        pattern = IgnorePattern("**/gen/out.py", BASE)
        assert pattern.matches(BASE / "gen" / "out.py", is_dir=False)
        assert pattern.matches(BASE / "pkg" / "gen" / "out.py", is_dir=False)

    def test_outside_base_never_matches(self):
        assert not IgnorePattern("*.log", BASE / "sub").matches(BASE / "x.log", is_dir=False)

    def test_negation_flag(self):
        pattern = IgnorePattern("!keep.log", BASE)
        assert pattern.negated
        assert pattern.matches(BASE / "keep.log", is_dir=False)


class TestIgnoreRules:
    """Tests for reading and stacking .gitignore files."""

    def test_comments_and_blanks_skipped(self, tmp_path: Path):
        (tmp_path / ".gitignore").write_text("# build output\n\n  dist/  \n")
        patterns = read_patterns(tmp_path)
        assert [p.pattern for p in patterns] == ["dist"]

    def test_missing_file(self, tmp_path: Path):
        assert read_patterns(tmp_path) == []

    def test_last_match_wins(self, tmp_path: Path):
        (tmp_path / ".gitignore").write_text("*.log\n!keep.log\n")
        rules = IgnoreRules.for_directory(tmp_path)
        assert rules.is_ignored(tmp_path / "debug.log", is_dir=False)
        assert not rules.is_ignored(tmp_path / "keep.log", is_dir=False)

    def test_nested_file_overrides_parent(self, tmp_path: Path):
        (tmp_path / ".gitignore").write_text("*.log\n")
        sub = tmp_path / "sub"
        sub.mkdir()
        (sub / ".gitignore").write_text("!audit.log\n")

        rules = IgnoreRules.for_directory(sub, root=tmp_path)

        assert not rules.is_ignored(sub / "audit.log", is_dir=False)
        assert rules.is_ignored(sub / "other.log", is_dir=False)

    def test_root_outside_directory_ignored(self, tmp_path: Path):
        (tmp_path / ".gitignore").write_text("*.log\n")
        sub = tmp_path / "sub"
        sub.mkdir()
        rules = IgnoreRules.for_directory(sub, root=tmp_path / "elsewhere")
        assert not rules.is_ignored(sub / "a.log", is_dir=False)


class TestWalkFiles:
    """Tests for walk_files."""

    @pytest.fixture
    def tree(self, tmp_path: Path) -> Path:
        for relative in [
            "main.py",
            "debug.log",
            "build/out.py",
            "src/app.py",
            "src/tmp/scratch.py",
            "node_modules/x.js",
        ]:
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("")
        (tmp_path / ".gitignore").write_text("build/\n*.log\n")
        (tmp_path / "src" / ".gitignore").write_text("tmp/\n")
        return tmp_path

    def test_ignored_entries_skipped(self, tree: Path):
        found = [p.relative_to(tree).as_posix() for p in walk_files(tree, tree)]
        assert found == [".gitignore", "main.py", "src/.gitignore", "src/app.py"]

    def test_explicit_file_always_yielded(self, tree: Path):
        assert list(walk_files(tree / "debug.log", tree)) == [tree / "debug.log"]
