"""Layer Registry - named, ordered partitions of the generated stylesheet.

Invariants:
- Every layer appears exactly once in the order, and every ordered name exists.
- "base" and "theme" can never be removed.
- Layer structure (names + order) outlives a build cycle; contents do not.
  The orchestrator calls clear_contents() at the start of every build.

All mutators return the registry so calls can be chained:

    registry = LayerRegistry().add_layer("overrides").set_order(["base", "overrides"])
"""

import logging
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

DEFAULT_LAYERS = ("base", "theme", "components", "utilities")
PROTECTED_LAYERS = frozenset({"base", "theme"})
UTILITIES_LAYER = "utilities"


class LayerRegistry:
    """Ordered mapping from layer name to accumulated CSS text."""

    def __init__(self, layers: Optional[Iterable[str]] = None):
        """
        Initialize the registry.

        Args:
            layers: Initial layer names in order (defaults to base, theme, components, utilities)
        """
        self._contents: dict[str, str] = {}
        self._order: list[str] = []
        for name in DEFAULT_LAYERS if layers is None else layers:
            self.add_layer(name)

    def add_layer(self, name: str) -> "LayerRegistry":
        """Create an empty layer at the end of the order. No-op if it already exists."""
        if not name:
            raise ValueError("Layer name must be a non-empty string")
        if name not in self._contents:
            self._contents[name] = ""
            if name not in self._order:
                self._order.append(name)
        return self

    def remove_layer(self, name: str) -> "LayerRegistry":
        """Delete a layer and its content. Protected and unknown layers are ignored."""
        if name in PROTECTED_LAYERS:
            logger.debug(f"Ignoring removal of protected layer '{name}'")
            return self
        self._contents.pop(name, None)
        self._order = [layer for layer in self._order if layer != name]
        return self

    def set_order(self, names: Iterable[str]) -> "LayerRegistry":
        """Replace the order.

        Existing layers not mentioned in names are appended afterwards in their
        previous relative order. Names that do not exist are kept in the order
        but skipped by ordered_layers().
        """
        explicit: list[str] = []
        for name in names:
            if name not in explicit:
                explicit.append(name)
        missing = [layer for layer in self._order if layer not in explicit]
        self._order = explicit + missing
        return self

    def append_content(self, name: str, css: str) -> "LayerRegistry":
        """Append CSS text to a layer, creating the layer if needed."""
        if name not in self._contents:
            self.add_layer(name)
        self._contents[name] += css
        return self

    def clear_contents(self) -> "LayerRegistry":
        """Empty every layer while keeping names and order."""
        for name in self._contents:
            self._contents[name] = ""
        return self

    def has_layer(self, name: str) -> bool:
        return name in self._contents

    def content(self, name: str) -> str:
        """Return a layer's accumulated CSS text.

        Raises:
            KeyError: If the layer does not exist
        """
        return self._contents[name]

    @property
    def order(self) -> list[str]:
        """The raw layer order (may name layers that no longer exist)."""
        return list(self._order)

    def ordered_layers(self) -> list[str]:
        """Layer names in order, restricted to layers that currently exist."""
        return [name for name in self._order if name in self._contents]

    def __contains__(self, name: object) -> bool:
        return name in self._contents

    def __len__(self) -> int:
        return len(self._contents)
