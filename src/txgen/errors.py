"""Exception types raised by the txgen build pipeline.

Errors local to one input file (FileReadError) are isolated by the
orchestrator and recorded; every other kind aborts the current build cycle.
WatcherError is the only kind that ends a watch session.
"""

from pathlib import Path
from typing import Optional


class GeneratorError(Exception):
    """Base class for all txgen errors."""

    pass


class ConfigError(GeneratorError):
    """Raised when the generator configuration or config file is invalid."""

    pass


class PatternExpansionError(GeneratorError):
    """Raised when an input pattern is invalid or a directory cannot be read during expansion."""

    def __init__(self, pattern: str, message: str):
        self.pattern = pattern
        super().__init__(f"Cannot expand pattern '{pattern}': {message}")


class FileReadError(GeneratorError):
    """Raised when an input file cannot be read as UTF-8 text."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(f"Cannot read {path}: {message}")


class ResolverConfigError(GeneratorError):
    """Raised when the style resolver rejects its configuration."""

    pass


class WriteError(GeneratorError):
    """Raised when an output artifact cannot be written."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(f"Cannot write {path}: {message}")


class WatcherError(GeneratorError):
    """Raised when the filesystem watcher cannot observe the input set."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)
