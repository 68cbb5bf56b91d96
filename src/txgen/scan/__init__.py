"""Input discovery: glob expansion and class-name extraction."""

from .class_extractor import FileKind, extract_classes, file_kind_for, locate_tokens
from .file_resolver import FileResolver, expand_braces, resolve_files, translate_glob

__all__ = [
    "FileKind",
    "FileResolver",
    "expand_braces",
    "extract_classes",
    "file_kind_for",
    "locate_tokens",
    "resolve_files",
    "translate_glob",
]
