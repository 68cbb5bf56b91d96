"""Tests for glob expansion in the file resolver."""

import os
import sys

import pytest

from txgen.errors import PatternExpansionError
from txgen.scan import FileResolver, expand_braces, resolve_files, translate_glob


def _touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")
    return path


class TestExpandBraces:
    """Test brace alternation."""

    def test_simple_alternation(self):
        """Test a single brace group."""
        assert expand_braces("src/*.{html,jsx}") == ["src/*.html", "src/*.jsx"]

    def test_nested_and_multiple_groups(self):
        """Test nested groups and more than one group per pattern."""
        assert expand_braces("{a,b{1,2}}/x.{c,d}") == ["a/x.c", "a/x.d", "b1/x.c", "b1/x.d", "b2/x.c", "b2/x.d"]

    def test_literal_braces(self):
        """Test that braces without a comma or without a close stay literal."""
        assert expand_braces("src/{only}/*.html") == ["src/{only}/*.html"]
        assert expand_braces("src/{a,b") == ["src/{a,b"]

    def test_duplicates_removed(self):
        """Test that repeated alternatives collapse."""
        assert expand_braces("{a,a}.html") == ["a.html"]


class TestTranslateGlob:
    """Test glob to regex translation."""

    def test_star_stays_in_segment(self):
        """Test that * does not cross directory separators."""
        regex = translate_glob("*.html")
        assert regex.match("index.html")
        assert not regex.match("pages/index.html")

    def test_globstar_matches_zero_or_more_directories(self):
        """Test that **/ matches any depth including none."""
        regex = translate_glob("**/*.jsx")
        assert regex.match("App.jsx")
        assert regex.match("a/b/c/App.jsx")
        assert not regex.match("a/App.tsx")

    def test_character_class_and_question_mark(self):
        """Test [..], [!..] and ?."""
        assert translate_glob("file[0-9].?s").match("file3.js")
        assert not translate_glob("file[!0-9].js").match("file3.js")


class TestFileResolver:
    """Test resolving patterns against a directory tree."""

    def test_resolve_union_without_duplicates(self, tmp_path):
        """Test that overlapping patterns produce each file once."""
        index = _touch(tmp_path / "index.html")
        app = _touch(tmp_path / "src" / "App.jsx")
        _touch(tmp_path / "src" / "notes.txt")

        files = FileResolver(["*.html", "src/**/*.{jsx,html}", "**/App.jsx"], root=tmp_path).resolve()

        assert files == sorted([index.resolve(), app.resolve()])

    def test_results_are_absolute_and_sorted(self, tmp_path):
        """Test that results are absolute canonical paths in sorted order."""
        for name in ("c.html", "a.html", "b.html"):
            _touch(tmp_path / "pages" / name)

        files = resolve_files(["pages/*.html"], root=tmp_path)

        assert [f.name for f in files] == ["a.html", "b.html", "c.html"]
        assert all(f.is_absolute() for f in files)

    def test_no_match_is_not_an_error(self, tmp_path):
        """Test that a pattern matching nothing yields an empty list."""
        assert FileResolver(["missing/**/*.html"], root=tmp_path).resolve() == []

    def test_literal_path(self, tmp_path):
        """Test a pattern without wildcards."""
        index = _touch(tmp_path / "index.html")

        assert FileResolver(["index.html"], root=tmp_path).resolve() == [index.resolve()]

    def test_single_star_does_not_descend(self, tmp_path):
        """Test that src/*.jsx does not match nested files."""
        top = _touch(tmp_path / "src" / "App.jsx")
        _touch(tmp_path / "src" / "nested" / "Deep.jsx")

        assert FileResolver(["src/*.jsx"], root=tmp_path).resolve() == [top.resolve()]

    def test_hidden_directories_skipped(self, tmp_path):
        """Test that wildcards do not enter hidden directories."""
        visible = _touch(tmp_path / "src" / "App.jsx")
        _touch(tmp_path / "src" / ".cache" / "Cached.jsx")

        assert FileResolver(["src/**/*.jsx"], root=tmp_path).resolve() == [visible.resolve()]

    def test_absolute_pattern(self, tmp_path):
        """Test that absolute patterns ignore root."""
        index = _touch(tmp_path / "site" / "index.html")

        files = FileResolver([str(tmp_path / "site" / "*.html")], root=tmp_path / "elsewhere").resolve()

        assert files == [index.resolve()]

    def test_empty_pattern_rejected(self, tmp_path):
        """Test that an empty pattern raises PatternExpansionError."""
        with pytest.raises(PatternExpansionError):
            FileResolver(["  "], root=tmp_path)

    @pytest.mark.skipif(sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0), reason="requires POSIX permissions as non-root")
    def test_unreadable_directory_raises(self, tmp_path):
        """Test that an unreadable directory surfaces as PatternExpansionError."""
        locked = tmp_path / "src" / "locked"
        _touch(locked / "App.jsx")
        locked.chmod(0)
        try:
            with pytest.raises(PatternExpansionError):
                FileResolver(["src/**/*.jsx"], root=tmp_path).resolve()
        finally:
            locked.chmod(0o755)


class TestMatchesAndWatchRoots:
    """Test single-path matching and watch root computation."""

    def test_matches(self, tmp_path):
        """Test matching individual paths, existing or not."""
        resolver = FileResolver(["src/**/*.{html,jsx}"], root=tmp_path)

        assert resolver.matches(tmp_path / "src" / "new" / "Page.jsx")
        assert resolver.matches("src/index.html")
        assert not resolver.matches(tmp_path / "src" / "style.css")
        assert not resolver.matches(tmp_path / "other" / "index.html")
        assert not resolver.matches(tmp_path / "src" / ".git" / "index.html")

    def test_watch_roots_collapse_nested(self, tmp_path):
        """Test that nested bases collapse into their common existing parent."""
        (tmp_path / "src" / "components").mkdir(parents=True)
        resolver = FileResolver(["src/**/*.jsx", "src/components/*.tsx"], root=tmp_path)

        assert resolver.watch_roots() == [(tmp_path / "src").resolve()]

    def test_watch_roots_use_existing_ancestor(self, tmp_path):
        """Test that a missing base is replaced by its nearest existing parent."""
        resolver = FileResolver(["not-yet/**/*.html"], root=tmp_path)

        assert resolver.watch_roots() == [tmp_path.resolve()]
