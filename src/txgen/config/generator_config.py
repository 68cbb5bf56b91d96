"""Generator Configuration - immutable build settings.

This module defines:
- deep_merge: Pure recursive dictionary merge (override wins per key)
- GeneratorConfig: Frozen dataclass holding every option of one txgen invocation
- load_config_file: JSON config file loader

Design:
    Configuration sources are layered as defaults < config file < command line.
    Each layer is a plain mapping merged on top of the previous one with
    deep_merge, then validated once by GeneratorConfig.from_dict. The resulting
    GeneratorConfig never changes for the lifetime of an orchestrator.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from ..errors import ConfigError

DEFAULT_INPUT = ("src/**/*.{html,jsx,tsx,vue}",)
DEFAULT_OUTPUT = "dist/styles.css"
DEFAULT_DEBOUNCE = 0.5


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge two mappings without mutating either.

    Keys in override win. When both sides hold a mapping for the same key the
    two are merged recursively; any other value type is replaced wholesale.

    Args:
        base: Lower-precedence mapping
        override: Higher-precedence mapping

    Returns:
        New merged dictionary
    """
    merged: dict[str, Any] = {key: _copy_value(value) for key, value in base.items()}
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = _copy_value(value)
    return merged


def _copy_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return deep_merge({}, value)
    if isinstance(value, list):
        return list(value)
    return value


@dataclass(frozen=True)
class GeneratorConfig:
    """Complete configuration for one txgen invocation.

    Attributes:
        input: Glob patterns selecting the files to scan
        output: Path of the generated CSS file
        watch: Keep running and rebuild on input changes
        layer: Wrap output in CSS cascade layers (@layer)
        tab_size: Indent width used inside @layer blocks
        minify: Minify the final CSS
        source_map: Emit <output>.map next to the CSS file
        prefix: String inserted after the dot of every class selector
        styles: Style resolver configuration for extracted utilities
        layers: Manual style declarations keyed by layer name
        layer_order: Explicit layer order (missing layers keep their default position after it)
        debounce: Seconds to wait after the last change before rebuilding
        root: Directory relative patterns and paths resolve against
        verbose: Enable verbose output
    """

    input: tuple[str, ...] = DEFAULT_INPUT
    output: Path = Path(DEFAULT_OUTPUT)
    watch: bool = False
    layer: bool = False
    tab_size: int = 2
    minify: bool = False
    source_map: bool = False
    prefix: str = ""
    styles: dict[str, Any] = field(default_factory=dict)
    layers: dict[str, dict[str, Any]] = field(default_factory=dict)
    layer_order: Optional[tuple[str, ...]] = None
    debounce: float = DEFAULT_DEBOUNCE
    root: Path = field(default_factory=Path.cwd)
    verbose: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GeneratorConfig":
        """Create a validated GeneratorConfig from a plain mapping.

        Args:
            data: Option mapping (config file contents merged with CLI options)

        Returns:
            Validated configuration

        Raises:
            ConfigError: If a key is unknown or a value has the wrong type
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        kwargs: dict[str, Any] = {}
        if "input" in data:
            kwargs["input"] = _as_patterns(data["input"])
        if "output" in data:
            kwargs["output"] = Path(_expect(data, "output", str, Path))
        for flag in ("watch", "layer", "minify", "source_map", "verbose"):
            if flag in data:
                kwargs[flag] = _expect(data, flag, bool)
        if "tab_size" in data:
            tab_size = data["tab_size"]
            if isinstance(tab_size, str) and tab_size.isdigit():
                tab_size = int(tab_size)
            if isinstance(tab_size, bool) or not isinstance(tab_size, int) or tab_size < 0:
                raise ConfigError(f"'tab_size' must be a non-negative integer, got {data['tab_size']!r}")
            kwargs["tab_size"] = tab_size
        if "prefix" in data:
            kwargs["prefix"] = _expect(data, "prefix", str)
        if "styles" in data:
            kwargs["styles"] = deep_merge({}, _expect(data, "styles", Mapping))
        if "layers" in data:
            layers = _expect(data, "layers", Mapping)
            for name, declaration in layers.items():
                if not isinstance(declaration, Mapping):
                    raise ConfigError(f"Layer '{name}' style declaration must be an object")
            kwargs["layers"] = deep_merge({}, layers)
        if data.get("layer_order") is not None:
            order = _expect(data, "layer_order", list, tuple)
            if not all(isinstance(name, str) and name for name in order):
                raise ConfigError("'layer_order' must be a list of layer names")
            kwargs["layer_order"] = tuple(order)
        if "debounce" in data:
            debounce = data["debounce"]
            if isinstance(debounce, bool) or not isinstance(debounce, (int, float)) or debounce < 0:
                raise ConfigError(f"'debounce' must be a non-negative number, got {debounce!r}")
            kwargs["debounce"] = float(debounce)
        if "root" in data:
            kwargs["root"] = Path(_expect(data, "root", str, Path))

        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain mapping accepted by from_dict."""
        return {
            "input": list(self.input),
            "output": str(self.output),
            "watch": self.watch,
            "layer": self.layer,
            "tab_size": self.tab_size,
            "minify": self.minify,
            "source_map": self.source_map,
            "prefix": self.prefix,
            "styles": deep_merge({}, self.styles),
            "layers": deep_merge({}, self.layers),
            "layer_order": list(self.layer_order) if self.layer_order is not None else None,
            "debounce": self.debounce,
            "root": str(self.root),
            "verbose": self.verbose,
        }

    def merged(self, override: Mapping[str, Any]) -> "GeneratorConfig":
        """Return a new configuration with override applied on top of this one."""
        return GeneratorConfig.from_dict(deep_merge(self.to_dict(), override))

    @property
    def output_path(self) -> Path:
        """Absolute path of the CSS output file."""
        return (self.root / self.output).resolve()

    @property
    def map_path(self) -> Path:
        """Absolute path of the source map written next to the CSS output."""
        output_path = self.output_path
        return output_path.with_name(f"{output_path.name}.map")


def _expect(data: Mapping[str, Any], key: str, *types: type) -> Any:
    value = data[key]
    if isinstance(value, bool) and bool not in types:
        raise ConfigError(f"'{key}' has invalid type bool")
    if not isinstance(value, types):
        expected = " or ".join(t.__name__ for t in types)
        raise ConfigError(f"'{key}' must be {expected}, got {type(value).__name__}")
    return value


def _as_patterns(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        patterns = [part.strip() for part in value.split(",")]
    elif isinstance(value, (list, tuple)):
        patterns = list(value)
    else:
        raise ConfigError(f"'input' must be a string or list of strings, got {type(value).__name__}")
    if not patterns or not all(isinstance(p, str) and p.strip() for p in patterns):
        raise ConfigError("'input' must contain at least one non-empty pattern")
    return tuple(p.strip() for p in patterns)


def load_config_file(path: Path) -> dict[str, Any]:
    """Load a JSON configuration file.

    Args:
        path: Path to the config file

    Returns:
        Parsed configuration mapping

    Raises:
        ConfigError: If the file is missing, unreadable or not a JSON object
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object")
    return data
