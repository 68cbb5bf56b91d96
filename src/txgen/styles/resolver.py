"""Style Resolver - turns utility class names into CSS rules.

The build pipeline treats the resolver as a collaborator behind the
StyleResolver protocol; anything with resolve() and generate_stylesheet()
can be plugged into BuildOrchestrator through its resolver_factory.

The built-in UtilityResolver understands a small configuration:

    {
        "property": {"bg": "background", "p": "padding", "mx": ["margin-left", "margin-right"]},
        "values": {"primary": "#ccf654", "4": "1rem"},
        "classes": {"flex": {"display": "flex"}},
        "apply": {":root": "bg-primary p-4"},
        "breakpoints": {"md": "768px"}
    }

Utility syntax is [variant:]alias-value. A value is looked up in "values",
written literally, or given as [arbitrary_value] where "_" stands for a space.
Variants are pseudo-classes (hover:, focus:, ...) or breakpoints (md:).
Unknown class names produce no output.
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Protocol, runtime_checkable

from ..errors import ResolverConfigError

logger = logging.getLogger(__name__)

PSEUDO_VARIANTS: dict[str, str] = {
    "hover": ":hover",
    "focus": ":focus",
    "active": ":active",
    "disabled": ":disabled",
    "focus-within": ":focus-within",
    "first": ":first-child",
    "last": ":last-child",
}

DEFAULT_BREAKPOINTS: dict[str, str] = {
    "sm": "640px",
    "md": "768px",
    "lg": "1024px",
    "xl": "1280px",
}

_CONFIG_KEYS = ("property", "values", "classes", "apply", "breakpoints")
_PLAIN_SELECTOR_CHAR = re.compile(r"[A-Za-z0-9_-]")


@runtime_checkable
class StyleResolver(Protocol):
    """Protocol for the style resolver used by the build pipeline."""

    def resolve(self, class_names: Iterable[str]) -> str:
        """Return CSS rules for every recognized class name."""
        ...

    def generate_stylesheet(self) -> str:
        """Return explicitly declared rules plus rules for classes resolved so far."""
        ...


def escape_class(name: str) -> str:
    """Escape a class name for use in a CSS selector.

    Args:
        name: Raw class name (e.g. "hover:bg-[#fff]")

    Returns:
        Selector-safe class name (e.g. "hover\\:bg-\\[\\#fff\\]")
    """
    escaped = "".join(ch if _PLAIN_SELECTOR_CHAR.match(ch) else f"\\{ch}" for ch in name)
    if escaped[:1].isdigit():
        escaped = f"\\3{escaped[0]} {escaped[1:]}"
    return escaped


@dataclass(frozen=True)
class _Rule:
    """One resolved utility: selector plus declarations, optionally inside a media query."""

    selector: str
    declarations: tuple[tuple[str, str], ...]
    media: Optional[str] = None

    def render(self) -> str:
        body = "\n".join(f"  {prop}: {value};" for prop, value in self.declarations)
        rule = f"{self.selector} {{\n{body}\n}}"
        if self.media is None:
            return rule
        indented = "\n".join(f"  {line}" for line in rule.split("\n"))
        return f"@media (min-width: {self.media}) {{\n{indented}\n}}"


class UtilityResolver:
    """Config-driven utility class resolver.

    Create instances with configure(); the constructor assumes a validated config.
    """

    def __init__(self, config: Mapping[str, Any]):
        self._properties: dict[str, tuple[str, ...]] = {
            alias: (target,) if isinstance(target, str) else tuple(target)
            for alias, target in config.get("property", {}).items()
        }
        self._values: dict[str, str] = {str(k): str(v) for k, v in config.get("values", {}).items()}
        self._classes: dict[str, dict[str, str]] = {
            name: {str(p): str(v) for p, v in declarations.items()}
            for name, declarations in config.get("classes", {}).items()
        }
        self._apply: dict[str, str] = dict(config.get("apply", {}))
        self._breakpoints: dict[str, str] = {**DEFAULT_BREAKPOINTS, **config.get("breakpoints", {})}
        self._registered: set[str] = set()

    def resolve(self, class_names: Iterable[str]) -> str:
        """Resolve class names into CSS text.

        Args:
            class_names: Candidate class names (unrecognized ones are dropped)

        Returns:
            CSS rules sorted by class name, separated by newlines
        """
        names = set(class_names)
        self._registered.update(names)
        rules = [rule for name in sorted(names) for rule in self._rules_for_class(name)]
        if rules:
            logger.debug(f"Resolved {len(rules)} rules from {len(names)} candidate classes")
        return _join_rules(rules)

    def generate_stylesheet(self) -> str:
        """Render apply rules followed by every class resolved so far."""
        rules: list[_Rule] = []
        for selector, utilities in self._apply.items():
            declarations: list[tuple[str, str]] = []
            for utility in utilities.split():
                declarations.extend(self._declarations_for(utility))
            if declarations:
                rules.append(_Rule(selector, tuple(declarations)))
            else:
                logger.debug(f"Apply rule for {selector!r} produced no declarations")
        for name in sorted(self._registered):
            rules.extend(self._rules_for_class(name))
        return _join_rules(rules)

    def _rules_for_class(self, name: str) -> list[_Rule]:
        variant, _, utility = name.rpartition(":")
        pseudo = ""
        media = None
        if variant:
            if variant in PSEUDO_VARIANTS:
                pseudo = PSEUDO_VARIANTS[variant]
            elif variant in self._breakpoints:
                media = self._breakpoints[variant]
            else:
                return []
        declarations = self._declarations_for(utility)
        if not declarations:
            return []
        return [_Rule(f".{escape_class(name)}{pseudo}", tuple(declarations), media)]

    def _declarations_for(self, utility: str) -> list[tuple[str, str]]:
        if utility in self._classes:
            return list(self._classes[utility].items())

        # Longest alias wins so "mx-4" is not read as "m" + "x-4"
        for index in range(len(utility) - 1, 0, -1):
            if utility[index] != "-":
                continue
            alias, raw_value = utility[:index], utility[index + 1 :]
            properties = self._properties.get(alias)
            if properties is None or not raw_value:
                continue
            value = self._resolve_value(raw_value)
            if value is None:
                return []
            return [(prop, value) for prop in properties]
        return []

    def _resolve_value(self, raw_value: str) -> Optional[str]:
        if raw_value.startswith("[") and raw_value.endswith("]"):
            inner = raw_value[1:-1].replace("_", " ").strip()
            return inner or None
        return self._values.get(raw_value, raw_value)


def _join_rules(rules: list[_Rule]) -> str:
    if not rules:
        return ""
    return "\n".join(rule.render() for rule in rules) + "\n"


def configure(config: Optional[Mapping[str, Any]] = None) -> UtilityResolver:
    """Validate a style configuration and create a resolver for it.

    Args:
        config: Style configuration mapping (see module docstring)

    Returns:
        Configured UtilityResolver

    Raises:
        ResolverConfigError: If the configuration is malformed
    """
    config = config or {}
    if not isinstance(config, Mapping):
        raise ResolverConfigError(f"Style configuration must be an object, got {type(config).__name__}")

    unknown = sorted(set(config) - set(_CONFIG_KEYS))
    if unknown:
        raise ResolverConfigError(f"Unknown style configuration keys: {', '.join(unknown)}")

    for key in _CONFIG_KEYS:
        if key in config and not isinstance(config[key], Mapping):
            raise ResolverConfigError(f"Style configuration '{key}' must be an object")

    for alias, target in config.get("property", {}).items():
        if isinstance(target, str):
            continue
        if not isinstance(target, (list, tuple)) or not target or not all(isinstance(t, str) for t in target):
            raise ResolverConfigError(f"Property alias '{alias}' must map to a CSS property name or a list of names")

    for name, declarations in config.get("classes", {}).items():
        if not isinstance(declarations, Mapping):
            raise ResolverConfigError(f"Class '{name}' must map to an object of declarations")

    for selector, utilities in config.get("apply", {}).items():
        if not isinstance(utilities, str):
            raise ResolverConfigError(f"Apply rule for '{selector}' must be a string of utilities")

    return UtilityResolver(config)
