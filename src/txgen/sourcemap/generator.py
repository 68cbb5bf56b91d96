"""Source Map Synthesizer - builds source map v3 documents.

Mappings may be added in any order; encode() sorts them by generated
position. Five running counters are carried from segment to segment:
generated column (reset at every new generated line), source index,
original line, original column and name index (never reset).

Usage:
    generator = SourceMapGenerator(file="styles.css")
    generator.add_mapping(Position(1, 0), Position(3, 12), "src/App.jsx", name="p-4")
    document = generator.encode()
    Path("styles.css.map").write_text(document.to_json(), encoding="utf-8")
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from .vlq import encode_vlq

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class Position:
    """A position in a text file: 1-based line, 0-based column."""

    line: int
    column: int

    def __post_init__(self) -> None:
        if self.line < 1 or self.column < 0:
            raise ValueError(f"Invalid position: line={self.line}, column={self.column}")


@dataclass(frozen=True)
class Mapping:
    """One mapping entry.

    Attributes:
        generated: Position in the generated file
        original: Position in the source file (None if the segment has no source)
        source_index: Index into sources (None if no source)
        name_index: Index into names (None if no name)
    """

    generated: Position
    original: Optional[Position]
    source_index: Optional[int]
    name_index: Optional[int]


@dataclass
class SourceMapDocument:
    """A source map v3 document."""

    file: str
    sources: list[str]
    sources_content: list[Optional[str]]
    names: list[str]
    mappings: str
    source_root: str = ""
    version: int = 3

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the source map v3 field names."""
        return {
            "version": self.version,
            "file": self.file,
            "sourceRoot": self.source_root,
            "sources": list(self.sources),
            "sourcesContent": list(self.sources_content),
            "names": list(self.names),
            "mappings": self.mappings,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SourceMapDocument":
        """Deserialize from a parsed source map."""
        return cls(
            file=data.get("file", ""),
            sources=list(data.get("sources", [])),
            sources_content=list(data.get("sourcesContent", [])),
            names=list(data.get("names", [])),
            mappings=data.get("mappings", ""),
            source_root=data.get("sourceRoot", ""),
            version=data.get("version", 3),
        )


@dataclass
class SourceMapGenerator:
    """Accumulates mappings and encodes them into a SourceMapDocument.

    Sources and names receive stable indices in first-seen order.
    """

    file: str = ""
    sources: list[str] = field(default_factory=list)
    names: list[str] = field(default_factory=list)
    mappings: list[Mapping] = field(default_factory=list)
    _sources_content: dict[str, str] = field(default_factory=dict)

    def add_source(self, source: str, content: Optional[str] = None) -> int:
        """Register a source file, returning its index.

        Args:
            source: Source path as it should appear in the map
            content: Full text of the source, embedded as sourcesContent
        """
        if content is not None:
            self._sources_content[source] = content
        try:
            return self.sources.index(source)
        except ValueError:
            self.sources.append(source)
            return len(self.sources) - 1

    def add_name(self, name: str) -> int:
        """Register a symbolic name, returning its index."""
        try:
            return self.names.index(name)
        except ValueError:
            self.names.append(name)
            return len(self.names) - 1

    def add_mapping(
        self,
        generated: Position,
        original: Optional[Position] = None,
        source: Optional[str] = None,
        name: Optional[str] = None,
        source_content: Optional[str] = None,
    ) -> None:
        """Record one mapping.

        Args:
            generated: Position in the generated file
            original: Position in the source (required when source is given)
            source: Source path
            name: Optional symbolic name (only kept for mappings with a source)
            source_content: Optional full text of the source

        Raises:
            ValueError: If a source is given without an original position
        """
        if source is not None and original is None:
            raise ValueError("A mapping with a source needs an original position")
        source_index = self.add_source(source, source_content) if source is not None else None
        name_index = self.add_name(name) if name is not None and source_index is not None else None
        self.mappings.append(
            Mapping(
                generated=generated,
                original=original if source_index is not None else None,
                source_index=source_index,
                name_index=name_index,
            )
        )

    def generate_mappings(self) -> str:
        """Encode all mappings as a base64 VLQ mappings string."""
        ordered = sorted(self.mappings, key=lambda m: (m.generated.line, m.generated.column))

        previous_line = 1
        previous_column = 0
        previous_source = 0
        previous_original_line = 0
        previous_original_column = 0
        previous_name = 0
        encoded: list[str] = []
        first_in_line = True

        for mapping in ordered:
            if mapping.generated.line != previous_line:
                previous_column = 0
                encoded.append(";" * (mapping.generated.line - previous_line))
                previous_line = mapping.generated.line
                first_in_line = True
            elif not first_in_line:
                encoded.append(",")

            encoded.append(encode_vlq(mapping.generated.column - previous_column))
            previous_column = mapping.generated.column

            if mapping.source_index is not None and mapping.original is not None:
                encoded.append(encode_vlq(mapping.source_index - previous_source))
                previous_source = mapping.source_index

                original_line = mapping.original.line - 1
                encoded.append(encode_vlq(original_line - previous_original_line))
                previous_original_line = original_line

                encoded.append(encode_vlq(mapping.original.column - previous_original_column))
                previous_original_column = mapping.original.column

                if mapping.name_index is not None:
                    encoded.append(encode_vlq(mapping.name_index - previous_name))
                    previous_name = mapping.name_index

            first_in_line = False

        return "".join(encoded)

    def encode(self) -> SourceMapDocument:
        """Build the source map document for everything added so far."""
        mappings = self.generate_mappings()
        logger.debug(f"Encoded {len(self.mappings)} mappings over {len(self.sources)} sources")
        return SourceMapDocument(
            file=self.file,
            sources=list(self.sources),
            sources_content=[self._sources_content.get(source) for source in self.sources],
            names=list(self.names),
            mappings=mappings,
        )


def map_lines_identity(text: str, source: str, file: str = "") -> SourceMapDocument:
    """Map every line of text to the same line of source, column 0.

    Args:
        text: Generated text (also embedded as the source content)
        source: Source path
        file: Generated file name

    Returns:
        Encoded document with one mapping per line
    """
    generator = SourceMapGenerator(file=file)
    for line_number in range(1, len(text.split("\n")) + 1):
        generator.add_mapping(Position(line_number, 0), Position(line_number, 0), source, source_content=text)
    return generator.encode()
