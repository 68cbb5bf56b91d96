"""Post-processors applied to the assembled stylesheet.

Both transforms are textual: they never parse CSS.
"""

import re
import string
from typing import Iterator

# Class selectors, plus url(...) and quoted strings which are matched only to be skipped.
# A dot after a digit (0.5rem) or followed by a digit (.5em) is not a selector.
_SELECTOR_SCAN_RE = re.compile(
    r"""url\([^)]*\)"""
    r"""|"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'"""
    r"""|(?<![0-9\\])\.((?:-?[A-Za-z_]|\\(?:[0-9a-fA-F]{1,6} ?|.))(?:[\w-]|\\(?:[0-9a-fA-F]{1,6} ?|.))*)"""
)

_COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/")
_LINE_WHITESPACE_RE = re.compile(r"[\r\n\t\f]+")
_SPACE_RUN_RE = re.compile(r" {2,}")
_AROUND_PUNCTUATION_RE = re.compile(r" ?([{:}]) ?")
_AROUND_SEPARATOR_RE = re.compile(r" ?([;,]) ?")
_CSS_ESCAPE_RE = re.compile(r"\\([0-9a-fA-F]{1,6} ?|.)")


def apply_prefix(css: str, prefix: str) -> str:
    """Insert a prefix after the dot of every class selector.

    Args:
        css: Stylesheet text
        prefix: Prefix to insert (e.g. "tx-")

    Returns:
        Stylesheet with ".foo" rewritten to ".tx-foo"
    """
    if not prefix:
        return css
    return _SELECTOR_SCAN_RE.sub(lambda m: m.group(0) if m.group(1) is None else f".{prefix}{m.group(1)}", css)


def iter_class_selectors(css: str) -> Iterator[tuple[int, str]]:
    """Yield (offset, escaped name) for every class selector in css.

    The offset points at the leading dot.
    """
    for match in _SELECTOR_SCAN_RE.finditer(css):
        if match.group(1) is not None:
            yield match.start(), match.group(1)


def minify(css: str) -> str:
    """Minify a stylesheet.

    Removes comments and line breaks, collapses runs of spaces and drops
    spaces around braces, colons, semicolons and commas.
    minify(minify(css)) == minify(css).

    Args:
        css: Stylesheet text

    Returns:
        Minified stylesheet
    """
    # Removing "/*x*/" from "//*x*/*" leaves a new "/*" opener
    while True:
        stripped = _COMMENT_RE.sub("", css)
        if stripped == css:
            break
        css = stripped
    css = _LINE_WHITESPACE_RE.sub(" ", css)
    css = _SPACE_RUN_RE.sub(" ", css)
    css = _AROUND_PUNCTUATION_RE.sub(r"\1", css)
    css = _AROUND_SEPARATOR_RE.sub(r"\1", css)
    return css.strip()


def unescape_class(selector_name: str) -> str:
    """Undo CSS escaping of a class name taken from a selector.

    Args:
        selector_name: Escaped name (e.g. "hover\\:bg-red", "\\32 xl")

    Returns:
        Raw class name (e.g. "hover:bg-red", "2xl")
    """

    def replace(match: "re.Match[str]") -> str:
        escaped = match.group(1)
        digits = escaped.rstrip(" ")
        if digits and all(c in string.hexdigits for c in digits):
            return chr(int(digits, 16))
        return escaped

    return _CSS_ESCAPE_RE.sub(replace, selector_name)
