"""Tests for prefixing and minification."""

import pytest

from txgen.styles import apply_prefix, iter_class_selectors, minify, unescape_class

SAMPLE_CSS = """/* generated */
@layer base, utilities;
@layer utilities {
  .a , .b:hover {
    color: red;
    margin: 0 auto;
  }
  @media (min-width: 768px) {
    .md\\:p-4 {
      padding: 1rem;
    }
  }
}
"""


class TestApplyPrefix:
    """Test class selector prefixing."""

    def test_simple_selector(self):
        """Test the basic rewrite."""
        assert apply_prefix(".foo{color:red}", "tx-") == ".tx-foo{color:red}"

    def test_compound_and_escaped_selectors(self):
        """Test compound selectors and escaped characters."""
        assert apply_prefix(".a.b, .hover\\:bg-red:hover{}", "tx-") == ".tx-a.tx-b, .tx-hover\\:bg-red:hover{}"

    def test_escaped_dot_is_part_of_the_name(self):
        """Test that an escaped dot does not start a new selector."""
        assert apply_prefix(".p-0\\.5{}", "tx-") == ".tx-p-0\\.5{}"

    @pytest.mark.parametrize(
        "css",
        [
            ".a{margin:0.5rem;}",
            ".a{width:.5em;}",
            ".a{background:url(img/logo.png);}",
            ".a{content:'x.y';}",
            ".a{--brand-color:red;color:var(--brand-color);}",
        ],
    )
    def test_non_selectors_untouched(self, css):
        """Test that numbers, urls, strings and properties are not rewritten."""
        prefixed = apply_prefix(css, "tx-")

        assert prefixed.startswith(".tx-a{")
        assert prefixed[len(".tx-a{") :] == css[len(".a{") :]

    def test_empty_prefix(self):
        """Test that an empty prefix is a no-op."""
        assert apply_prefix(".foo{}", "") == ".foo{}"


class TestMinify:
    """Test minification."""

    def test_minify(self):
        """Test comment, newline and punctuation whitespace removal."""
        css = ".a {\n  color: red;\n}\n/* c */\n.b , .c {\n  margin: 0 auto;\n}"

        assert minify(css) == ".a{color:red;}.b,.c{margin:0 auto;}"

    def test_idempotent(self):
        """Test that minifying twice equals minifying once."""
        once = minify(SAMPLE_CSS)

        assert minify(once) == once
        assert "\n" not in once
        assert "/*" not in once

    def test_idempotent_with_joined_comment_opener(self):
        """Test that a comment exposed by removing another is stripped in the same pass."""
        css = ".a{color:red}//*x*/* note */.b{color:blue}"
        once = minify(css)

        assert once == ".a{color:red}.b{color:blue}"
        assert minify(once) == once

    def test_layer_statement(self):
        """Test a layered stylesheet."""
        assert minify(SAMPLE_CSS).startswith("@layer base,utilities;@layer utilities{.a,.b:hover{color:red;")


class TestSelectorHelpers:
    """Test selector scanning and unescaping."""

    def test_iter_class_selectors(self):
        """Test offsets point at the leading dot."""
        assert list(iter_class_selectors(".a:hover, .b-c{margin:0.5rem}")) == [(0, "a"), (10, "b-c")]

    @pytest.mark.parametrize(
        "escaped, raw",
        [
            ("hover\\:bg-red", "hover:bg-red"),
            ("\\32 xl", "2xl"),
            ("bg-\\[\\#fff\\]", "bg-[#fff]"),
            ("plain", "plain"),
        ],
    )
    def test_unescape_class(self, escaped, raw):
        """Test CSS escape removal."""
        assert unescape_class(escaped) == raw
