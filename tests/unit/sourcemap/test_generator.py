"""Tests for source map synthesis."""

import json

import pytest

from txgen.sourcemap import Position, SourceMapDocument, SourceMapGenerator, decode_mappings, map_lines_identity


class TestPosition:
    """Test position validation and ordering."""

    def test_ordering(self):
        """Test that positions sort by line, then column."""
        assert sorted([Position(2, 0), Position(1, 5), Position(1, 2)]) == [Position(1, 2), Position(1, 5), Position(2, 0)]

    @pytest.mark.parametrize("line, column", [(0, 0), (1, -1)])
    def test_invalid(self, line, column):
        """Test that lines are 1-based and columns non-negative."""
        with pytest.raises(ValueError):
            Position(line, column)


class TestSourceMapGenerator:
    """Test mapping accumulation and encoding."""

    def test_single_mapping(self):
        """Test the simplest possible map."""
        generator = SourceMapGenerator(file="styles.css")
        generator.add_mapping(Position(1, 0), Position(1, 0), "index.html")

        document = generator.encode()

        assert document.mappings == "AAAA"
        assert document.sources == ["index.html"]
        assert document.file == "styles.css"

    def test_unsorted_input_is_sorted(self):
        """Test that mappings are sorted by generated position before encoding."""
        generator = SourceMapGenerator()
        generator.add_mapping(Position(4, 2), Position(3, 5), "a.jsx")
        generator.add_mapping(Position(1, 0), Position(1, 0), "a.jsx")

        assert generator.generate_mappings() == "AAAA;;;EAEK"

    def test_multiple_segments_on_one_line(self):
        """Test comma separated segments with a name."""
        generator = SourceMapGenerator()
        generator.add_mapping(Position(1, 0), Position(1, 0), "a.jsx")
        generator.add_mapping(Position(1, 10), Position(2, 4), "a.jsx", name="p-4")

        assert generator.generate_mappings() == "AAAA,UACIA"
        assert generator.names == ["p-4"]

    def test_running_counters_across_sources_and_names(self):
        """Test that all five counters carry over between segments."""
        generator = SourceMapGenerator()
        generator.add_mapping(Position(2, 0), Position(1, 0), "a", name="x")
        generator.add_mapping(Position(1, 4), Position(2, 3), "b", name="y")
        generator.add_mapping(Position(1, 0), Position(1, 0), "a", name="x")

        document = generator.encode()

        assert document.sources == ["a", "b"]
        assert document.names == ["x", "y"]
        assert document.mappings == "AAAAA,ICCGC;ADDHD"

    def test_mapping_without_source(self):
        """Test generated-column-only segments."""
        generator = SourceMapGenerator()
        generator.add_mapping(Position(1, 5))

        assert generator.generate_mappings() == "K"
        assert generator.encode().sources == []

    def test_source_requires_original(self):
        """Test that a source without an original position is rejected."""
        with pytest.raises(ValueError):
            SourceMapGenerator().add_mapping(Position(1, 0), source="a.jsx")

    def test_sources_content(self):
        """Test that sourcesContent lines up with sources."""
        generator = SourceMapGenerator()
        generator.add_mapping(Position(1, 0), Position(1, 0), "a.jsx", source_content="A")
        generator.add_mapping(Position(2, 0), Position(1, 0), "b.jsx")

        assert generator.encode().sources_content == ["A", None]

    def test_stable_indices(self):
        """Test that repeated sources and names reuse their first index."""
        generator = SourceMapGenerator()

        assert generator.add_source("a") == 0
        assert generator.add_source("b") == 1
        assert generator.add_source("a") == 0
        assert generator.add_name("n") == 0
        assert generator.add_name("n") == 0


class TestSourceMapDocument:
    """Test serialization."""

    def test_to_dict_uses_v3_keys(self):
        """Test the JSON field names."""
        document = SourceMapDocument(file="styles.css", sources=["a"], sources_content=["x"], names=[], mappings="AAAA")

        assert json.loads(document.to_json()) == {
            "version": 3,
            "file": "styles.css",
            "sourceRoot": "",
            "sources": ["a"],
            "sourcesContent": ["x"],
            "names": [],
            "mappings": "AAAA",
        }

    def test_from_dict(self):
        """Test parsing a serialized document back."""
        document = SourceMapDocument(file="f.css", sources=["a"], sources_content=[None], names=["n"], mappings="AAAAA")

        assert SourceMapDocument.from_dict(document.to_dict()) == document


class TestMapLinesIdentity:
    """Test the line-for-line round trip."""

    @pytest.mark.parametrize("line_count", [1, 3, 50])
    def test_round_trip(self, line_count):
        """Test that N lines decode to N mappings with original line == generated line."""
        text = "\n".join(f".c{i} {{}}" for i in range(line_count))

        document = map_lines_identity(text, "input.css", file="output.css")
        decoded = decode_mappings(document.mappings)

        assert len(decoded) == line_count
        for generated_line, generated_column, source, original_line, original_column in decoded:
            assert source == 0
            assert original_line + 1 == generated_line
            assert generated_column == 0
            assert original_column == 0
        assert document.sources_content == [text]

    def test_three_lines_encoding(self):
        """Test the exact encoding for three lines."""
        assert map_lines_identity("a\nb\nc", "in.css").mappings == "AAAA;AACA;AACA"
