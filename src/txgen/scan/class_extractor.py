"""Class Extractor - collects candidate utility class names from source files.

Two extraction strategies exist:
- HTML documents are parsed with BeautifulSoup and every `class` attribute is
  split on whitespace.
- JSX-like sources (JSX, TSX, Vue and Svelte templates, plain JS/TS) are
  scanned with three regex passes over the raw text:
    1. class="..." / className='...' / class=`...`
    2. className={`...`}
    3. className={cond ? "a b" : "c"} and className={{ "a": on }}
       (every quoted literal inside the expression is a candidate)

Extraction is deliberately approximate. Extra candidates are harmless because
the style resolver drops anything it does not recognize; class names that are
only computed at runtime cannot be found.
"""

import bisect
import logging
import re
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


class FileKind(Enum):
    """Extraction strategy for an input file."""

    HTML = "html"
    JSX_LIKE = "jsx"


_SUFFIX_KINDS: dict[str, FileKind] = {
    ".html": FileKind.HTML,
    ".htm": FileKind.HTML,
    ".jsx": FileKind.JSX_LIKE,
    ".tsx": FileKind.JSX_LIKE,
    ".js": FileKind.JSX_LIKE,
    ".ts": FileKind.JSX_LIKE,
    ".vue": FileKind.JSX_LIKE,
    ".svelte": FileKind.JSX_LIKE,
}

_ATTRIBUTE_RE = re.compile(r"""class(?:Name)?=["'`]([^"'`]+)["'`]""")
_TEMPLATE_LITERAL_RE = re.compile(r"class(?:Name)?=\{\s*`([^`]+)`\s*\}")
_CONDITIONAL_RE = re.compile(r"class(?:Name)?=\{\s*(?:[^}]+?\?[^:]+?:[^}]+?|\{[^}]+\})\s*\}")
_QUOTED_RE = re.compile(r"""['"`]([^'"`]+)['"`]""")
_ATTRIBUTE_SPAN_RE = re.compile(r"""class(?:Name)?=\s*(?:"[^"]*"|'[^']*'|`[^`]*`|\{[^}]*\}?)""")


def file_kind_for(path: Path) -> Optional[FileKind]:
    """Pick the extraction strategy for a file from its suffix.

    Args:
        path: Input file path

    Returns:
        FileKind, or None if the file type is not scanned
    """
    return _SUFFIX_KINDS.get(Path(path).suffix.lower())


def extract_classes(file_text: str, file_kind: FileKind) -> set[str]:
    """Extract every candidate class token from one file's text.

    Args:
        file_text: Full file contents
        file_kind: Extraction strategy

    Returns:
        Set of non-empty, whitespace-free class tokens
    """
    if file_kind is FileKind.HTML:
        return _extract_html(file_text)
    return _extract_jsx_like(file_text)


def _extract_html(file_text: str) -> set[str]:
    classes: set[str] = set()
    soup = BeautifulSoup(file_text, "html.parser")
    for element in soup.find_all(class_=True):
        value = element.get("class")
        # html.parser returns multi-valued attributes as lists
        if isinstance(value, str):
            value = value.split()
        for class_name in value or []:
            classes.update(class_name.split())
    return classes


def _extract_jsx_like(file_text: str) -> set[str]:
    classes: set[str] = set()

    for match in _ATTRIBUTE_RE.finditer(file_text):
        classes.update(match.group(1).split())

    for match in _TEMPLATE_LITERAL_RE.finditer(file_text):
        classes.update(match.group(1).split())

    for match in _CONDITIONAL_RE.finditer(file_text):
        for literal in _QUOTED_RE.finditer(match.group(0)):
            classes.update(literal.group(1).split())

    return classes


def locate_tokens(file_text: str, tokens: Iterable[str]) -> dict[str, tuple[int, int]]:
    """Find the first occurrence of each token in a file.

    A token only counts where it stands alone, bounded by whitespace, quotes,
    braces or the ends of the text, so "p-4" is not found inside "p-40".
    Occurrences inside class attributes win over occurrences in other text.

    Args:
        file_text: Full file contents
        tokens: Class tokens previously extracted from the same text

    Returns:
        Mapping token -> (line, column), line 1-based and column 0-based.
        Tokens that cannot be located are omitted.
    """
    line_starts = [0]
    for match in re.finditer("\n", file_text):
        line_starts.append(match.end())
    spans = [match.span() for match in _ATTRIBUTE_SPAN_RE.finditer(file_text)]

    locations: dict[str, tuple[int, int]] = {}
    for token in tokens:
        pattern = re.compile(r"""(?<![^\s"'`{])""" + re.escape(token) + r"""(?![^\s"'`}])""")
        offset = None
        for start, end in spans:
            match = pattern.search(file_text, start, end)
            if match is not None:
                offset = match.start()
                break
        if offset is None:
            match = pattern.search(file_text)
            if match is None:
                continue
            offset = match.start()
        line = bisect.bisect_right(line_starts, offset) - 1
        locations[token] = (line + 1, offset - line_starts[line])
    return locations

