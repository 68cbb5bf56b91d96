"""File Resolver - expands input glob patterns into a canonical file list.

Supported pattern syntax:
    *       any run of characters inside one path segment
    **      zero or more directories (as a whole segment)
    ?       one character
    [abc]   character class ([!abc] negates)
    {a,b}   brace alternation, nestable

Wildcards never match hidden path components (".git", ".cache") unless the
pattern spells a leading dot itself, mirroring shell glob behavior.

Unreadable directories encountered while walking raise PatternExpansionError
rather than being skipped, so a build never silently runs on a partial file set.
"""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional, Sequence

from ..errors import PatternExpansionError

logger = logging.getLogger(__name__)

_MAGIC_CHARS = re.compile(r"[*?\[]")


def expand_braces(pattern: str) -> list[str]:
    """Expand brace alternation in a glob pattern.

    "src/**/*.{html,jsx}" becomes ["src/**/*.html", "src/**/*.jsx"]. Braces
    without a top-level comma or without a closing brace are kept literally.

    Args:
        pattern: Glob pattern possibly containing {a,b} groups

    Returns:
        Expanded patterns in alternation order, duplicates removed
    """
    start = 0
    while True:
        open_idx = pattern.find("{", start)
        if open_idx == -1:
            return [pattern]

        depth = 0
        commas: list[int] = []
        close_idx = -1
        for i in range(open_idx, len(pattern)):
            ch = pattern[i]
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    close_idx = i
                    break
            elif ch == "," and depth == 1:
                commas.append(i)

        if close_idx == -1 or not commas:
            start = open_idx + 1
            continue

        bounds = [open_idx, *commas, close_idx]
        prefix, suffix = pattern[:open_idx], pattern[close_idx + 1 :]
        expanded: list[str] = []
        for left, right in zip(bounds, bounds[1:]):
            for item in expand_braces(prefix + pattern[left + 1 : right] + suffix):
                if item not in expanded:
                    expanded.append(item)
        return expanded


def translate_glob(pattern: str) -> "re.Pattern[str]":
    """Translate a brace-free, '/'-separated glob into a compiled regex.

    Args:
        pattern: Relative glob pattern

    Returns:
        Regex matching whole relative POSIX paths
    """
    parts: list[str] = []
    i, n = 0, len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == "*":
            segment_start = i == 0 or pattern[i - 1] == "/"
            if segment_start and pattern.startswith("**/", i):
                parts.append(r"(?:[^/]+/)*")
                i += 3
                continue
            if segment_start and pattern.startswith("**", i) and i + 2 == n:
                parts.append(r".*")
                i += 2
                continue
            parts.append(r"[^/]*")
        elif ch == "?":
            parts.append(r"[^/]")
        elif ch == "[":
            end = pattern.find("]", i + 2)
            if end == -1:
                parts.append(re.escape(ch))
            else:
                body = pattern[i + 1 : end].replace("\\", "\\\\")
                if body.startswith("!"):
                    body = "^" + body[1:]
                parts.append(f"[{body}]")
                i = end + 1
                continue
        else:
            parts.append(re.escape(ch))
        i += 1
    return re.compile("".join(parts) + r"\Z")


@dataclass(frozen=True)
class _CompiledPattern:
    """One brace-expanded pattern split into its static base and wildcard remainder."""

    source: str
    base: Path
    remainder: str
    regex: Optional["re.Pattern[str]"]
    max_depth: Optional[int]
    allow_hidden: bool

    def matches_relative(self, relative: str) -> bool:
        if self.regex is None or not self.regex.match(relative):
            return False
        if self.allow_hidden:
            return True
        return not any(part.startswith(".") for part in relative.split("/"))


class FileResolver:
    """Expands a fixed set of input patterns against the filesystem.

    Usage:
        resolver = FileResolver(["index.html", "src/**/*.{jsx,tsx}"], root=project_dir)
        files = resolver.resolve()
        resolver.matches(project_dir / "src" / "App.jsx")  # True
    """

    def __init__(self, patterns: Sequence[str], root: Optional[Path] = None):
        """
        Initialize the resolver.

        Args:
            patterns: Glob patterns, relative to root unless absolute
            root: Base directory for relative patterns (defaults to cwd)

        Raises:
            PatternExpansionError: If a pattern is empty
        """
        self.patterns = list(patterns)
        self.root = Path(root) if root is not None else Path.cwd()
        self._compiled: list[_CompiledPattern] = []
        for pattern in self.patterns:
            if not pattern or not pattern.strip():
                raise PatternExpansionError(pattern, "pattern is empty")
            for expanded in expand_braces(pattern.strip()):
                self._compiled.append(self._compile(pattern, expanded))

    def _compile(self, source: str, pattern: str) -> _CompiledPattern:
        path = Path(pattern)
        if not path.is_absolute():
            path = self.root / path
        try:
            absolute = PurePosixPath(Path(os.path.abspath(path)).as_posix())
        except ValueError as e:
            raise PatternExpansionError(source, str(e))

        static: list[str] = []
        remainder_parts: list[str] = []
        for part in absolute.parts:
            if remainder_parts or _MAGIC_CHARS.search(part):
                remainder_parts.append(part)
            else:
                static.append(part)

        base = Path(*static) if static else Path(absolute.anchor or "/")
        if not remainder_parts:
            return _CompiledPattern(source, base, "", None, None, True)

        remainder = "/".join(remainder_parts)
        max_depth = None if "**" in remainder else len(remainder_parts) - 1
        allow_hidden = any(part.startswith(".") for part in remainder_parts)
        return _CompiledPattern(source, base, remainder, translate_glob(remainder), max_depth, allow_hidden)

    def resolve(self) -> list[Path]:
        """Expand every pattern and return the union of matching files.

        Returns:
            Absolute, resolved file paths, sorted and without duplicates

        Raises:
            PatternExpansionError: If a directory cannot be read during expansion
        """
        found: set[Path] = set()
        for compiled in self._compiled:
            matches = self._expand(compiled)
            logger.debug(f"Pattern {compiled.source!r} ({compiled.base / compiled.remainder}) matched {len(matches)} files")
            found.update(matches)
        return sorted(found)

    def _expand(self, compiled: _CompiledPattern) -> list[Path]:
        if compiled.regex is None:
            return [compiled.base.resolve()] if compiled.base.is_file() else []
        if not compiled.base.is_dir():
            return []

        def onerror(error: OSError) -> None:
            raise PatternExpansionError(compiled.source, f"{error.filename}: {error.strerror}")

        matches: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(compiled.base, onerror=onerror):
            current = Path(dirpath)
            relative_dir = current.relative_to(compiled.base).as_posix()
            depth = 0 if relative_dir == "." else relative_dir.count("/") + 1

            if compiled.max_depth is not None and depth >= compiled.max_depth:
                dirnames[:] = []
            elif not compiled.allow_hidden:
                dirnames[:] = [d for d in dirnames if not d.startswith(".")]
            dirnames.sort()

            for filename in sorted(filenames):
                relative = filename if relative_dir == "." else f"{relative_dir}/{filename}"
                if compiled.matches_relative(relative):
                    matches.append((current / filename).resolve())
        return matches

    def matches(self, path: Path) -> bool:
        """Check whether a single path is selected by any of the patterns.

        Args:
            path: File path (absolute, or relative to root)

        Returns:
            True if the path matches at least one pattern
        """
        path = Path(path)
        if not path.is_absolute():
            path = self.root / path
        candidates = {Path(os.path.abspath(path))}
        try:
            candidates.add(path.resolve())
        except OSError:
            pass

        for candidate in candidates:
            for compiled in self._compiled:
                if compiled.regex is None:
                    if candidate == compiled.base or candidate == compiled.base.resolve():
                        return True
                    continue
                for base in (compiled.base, compiled.base.resolve()):
                    try:
                        relative = candidate.relative_to(base).as_posix()
                    except ValueError:
                        continue
                    if compiled.matches_relative(relative):
                        return True
        return False

    def watch_roots(self) -> list[Path]:
        """Return the directories that must be observed to see every matching file.

        Static bases that do not exist yet are replaced by their nearest existing
        ancestor; nested roots are collapsed into their parent.

        Returns:
            Sorted list of existing directories
        """
        roots: set[Path] = set()
        for compiled in self._compiled:
            directory = compiled.base if compiled.regex is not None else compiled.base.parent
            while not directory.is_dir() and directory != directory.parent:
                directory = directory.parent
            roots.add(directory.resolve())

        collapsed: list[Path] = []
        for root in sorted(roots, key=lambda p: len(p.parts)):
            if not any(root == kept or kept in root.parents for kept in collapsed):
                collapsed.append(root)
        return sorted(collapsed)


def resolve_files(patterns: Sequence[str], root: Optional[Path] = None) -> list[Path]:
    """Expand glob patterns into a deduplicated list of absolute file paths.

    Args:
        patterns: Glob patterns (relative to root unless absolute)
        root: Base directory for relative patterns (defaults to cwd)

    Returns:
        Sorted absolute file paths

    Raises:
        PatternExpansionError: If a pattern is invalid or a directory is unreadable
    """
    return FileResolver(patterns, root=root).resolve()
