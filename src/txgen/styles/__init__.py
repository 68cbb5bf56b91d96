"""Stylesheet construction: style resolution, layers, assembly and post-processing."""

from .assembler import StylesheetAssembler, indent_lines
from .layers import DEFAULT_LAYERS, PROTECTED_LAYERS, UTILITIES_LAYER, LayerRegistry
from .postprocess import apply_prefix, iter_class_selectors, minify, unescape_class
from .resolver import StyleResolver, UtilityResolver, configure, escape_class

__all__ = [
    "DEFAULT_LAYERS",
    "PROTECTED_LAYERS",
    "UTILITIES_LAYER",
    "LayerRegistry",
    "StyleResolver",
    "StylesheetAssembler",
    "UtilityResolver",
    "apply_prefix",
    "configure",
    "escape_class",
    "indent_lines",
    "iter_class_selectors",
    "minify",
    "unescape_class",
]
