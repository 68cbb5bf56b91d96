"""Source map v3 generation."""

from .generator import Mapping, Position, SourceMapDocument, SourceMapGenerator, map_lines_identity
from .vlq import VLQDecodeError, decode_mappings, decode_vlq, encode_vlq

__all__ = [
    "Mapping",
    "Position",
    "SourceMapDocument",
    "SourceMapGenerator",
    "VLQDecodeError",
    "decode_mappings",
    "decode_vlq",
    "encode_vlq",
    "map_lines_identity",
]
