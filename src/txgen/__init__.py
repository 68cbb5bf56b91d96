"""txgen - utility-first CSS generator with cascade layers, watch mode and source maps."""

__version__ = "0.4.0"

from txgen.build import BuildOrchestrator, BuildPhase, BuildResult, WatchLoop  # noqa: E402
from txgen.config import GeneratorConfig, deep_merge, load_config_file  # noqa: E402
from txgen.errors import (  # noqa: E402
    ConfigError,
    FileReadError,
    GeneratorError,
    PatternExpansionError,
    ResolverConfigError,
    WatcherError,
    WriteError,
)

__all__ = [
    "BuildOrchestrator",
    "BuildPhase",
    "BuildResult",
    "ConfigError",
    "FileReadError",
    "GeneratorConfig",
    "GeneratorError",
    "PatternExpansionError",
    "ResolverConfigError",
    "WatchLoop",
    "WatcherError",
    "WriteError",
    "__version__",
    "deep_merge",
    "load_config_file",
]
