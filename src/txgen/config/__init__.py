"""Configuration loading and merging for txgen."""

from .generator_config import (
    DEFAULT_DEBOUNCE,
    DEFAULT_INPUT,
    DEFAULT_OUTPUT,
    GeneratorConfig,
    deep_merge,
    load_config_file,
)

__all__ = [
    "DEFAULT_DEBOUNCE",
    "DEFAULT_INPUT",
    "DEFAULT_OUTPUT",
    "GeneratorConfig",
    "deep_merge",
    "load_config_file",
]
