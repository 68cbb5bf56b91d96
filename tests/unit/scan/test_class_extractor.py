"""Tests for class name extraction."""

from pathlib import Path

from txgen.scan import FileKind, extract_classes, file_kind_for, locate_tokens


class TestFileKind:
    """Test suffix based file kind detection."""

    def test_known_suffixes(self):
        """Test HTML and JSX-like suffixes."""
        assert file_kind_for(Path("index.html")) is FileKind.HTML
        assert file_kind_for(Path("page.HTM")) is FileKind.HTML
        for name in ("App.jsx", "App.tsx", "main.js", "main.ts", "App.vue", "App.svelte"):
            assert file_kind_for(Path(name)) is FileKind.JSX_LIKE

    def test_unknown_suffix(self):
        """Test that other files are not scanned."""
        assert file_kind_for(Path("styles.css")) is None
        assert file_kind_for(Path("README")) is None


class TestHtmlExtraction:
    """Test the HTML parser path."""

    def test_class_attribute_split(self):
        """Test that class attributes are split on whitespace."""
        assert extract_classes('<div class="a b">', FileKind.HTML) == {"a", "b"}

    def test_nested_elements_union(self):
        """Test that classes from every element are collected."""
        html = '<main class="flex  gap-4"><p class="text-red\tflex">x</p><span id="no-class"></span></main>'

        assert extract_classes(html, FileKind.HTML) == {"flex", "gap-4", "text-red"}

    def test_no_classes(self):
        """Test a document without class attributes."""
        assert extract_classes("<p>plain</p>", FileKind.HTML) == set()


class TestJsxExtraction:
    """Test the three regex passes for JSX-like files."""

    def test_direct_attribute_values(self):
        """Test class= and className= with each quote style."""
        source = """<div className="a b"/><span class='c'/><i className=`d e`/>"""

        assert extract_classes(source, FileKind.JSX_LIKE) == {"a", "b", "c", "d", "e"}

    def test_template_literal(self):
        """Test className={`...`}."""
        assert extract_classes("<div className={` p-4  m-2 `}/>", FileKind.JSX_LIKE) >= {"p-4", "m-2"}

    def test_conditional_expression(self):
        """Test that every quoted literal in a ternary is a candidate."""
        found = extract_classes('<div className={cond ? "a b" : "c"}/>', FileKind.JSX_LIKE)

        assert found >= {"a", "b", "c"}

    def test_object_literal(self):
        """Test that object-literal class expressions yield their quoted keys."""
        found = extract_classes("""<div className={{ "bg-red": isError, 'text-white': true }}/>""", FileKind.JSX_LIKE)

        assert found >= {"bg-red", "text-white"}

    def test_vue_template(self):
        """Test a Vue single file component."""
        source = '<template>\n  <button class="btn p-4" :class="extra">Go</button>\n</template>\n'

        assert extract_classes(source, FileKind.JSX_LIKE) >= {"btn", "p-4"}

    def test_tokens_never_contain_whitespace(self):
        """Test that every token is non-empty and whitespace free."""
        source = '<div className={open ? "  a   b " : "c\\td"}/><p class="  "/>'

        for token in extract_classes(source, FileKind.JSX_LIKE):
            assert token
            assert not any(ch.isspace() for ch in token)


class TestLocateTokens:
    """Test locating class tokens for source maps."""

    def test_line_and_column(self):
        """Test 1-based lines and 0-based columns."""
        text = '<div>\n  <p class="flex p-4">x</p>\n</div>\n'

        locations = locate_tokens(text, {"flex", "p-4"})

        assert locations == {"flex": (2, 12), "p-4": (2, 17)}

    def test_prefers_class_attribute(self):
        """Test that occurrences in class attributes beat earlier plain text."""
        text = 'const flex = 1;\n<div className="flex"/>\n'

        assert locate_tokens(text, {"flex"}) == {"flex": (2, 16)}

    def test_whole_token_only(self):
        """Test that a token is not found inside a longer token."""
        text = '<div class="p-40 p-4"/>'

        assert locate_tokens(text, {"p-4"}) == {"p-4": (1, 17)}

    def test_missing_tokens_omitted(self):
        """Test that tokens not present are left out."""
        assert locate_tokens('<div class="a"/>', {"a", "zzz"}) == {"a": (1, 12)}
