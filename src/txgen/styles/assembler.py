"""Stylesheet Assembler - renders the layer registry into final CSS text.

With layering enabled the output looks like:

    @layer base, theme, components, utilities;
    @layer base {
      .a { ... }
    }
    @layer utilities {
      .b { ... }
    }

Layers are always emitted in registry order, no matter in which order their
contents were filled. Layers without content produce no block, but are still
named in the leading @layer statement so the cascade order stays declared.
"""

import logging

from .layers import UTILITIES_LAYER, LayerRegistry

logger = logging.getLogger(__name__)


def indent_lines(text: str, size: int = 2) -> str:
    """Indent every non-blank line of text, dropping blank lines.

    Args:
        text: Text to indent
        size: Number of spaces to prepend

    Returns:
        Indented text joined with newlines
    """
    return "\n".join(f"{' ' * size}{line}" for line in text.split("\n") if line.strip())


class StylesheetAssembler:
    """Renders a LayerRegistry plus resolved utilities into a stylesheet."""

    def __init__(self, registry: LayerRegistry, layer: bool = False, tab_size: int = 2):
        """
        Initialize the assembler.

        Args:
            registry: Layer registry to render
            layer: Wrap each layer in an @layer block
            tab_size: Indent width inside @layer blocks
        """
        self.registry = registry
        self.layer = layer
        self.tab_size = tab_size
        self.emitted_layers: list[str] = []

    def assemble(self, final_utilities_css: str = "") -> str:
        """Render the stylesheet.

        Args:
            final_utilities_css: Resolver output for extracted classes, placed
                in the utilities layer

        Returns:
            Complete CSS text
        """
        ordered_layers = self.registry.ordered_layers()
        parts: list[str] = []
        emitted: list[str] = []

        if self.layer and ordered_layers:
            parts.append(f"@layer {', '.join(ordered_layers)};\n")

        for name in ordered_layers:
            content = self.registry.content(name)
            if name == UTILITIES_LAYER:
                content += final_utilities_css
            if not content.strip():
                continue
            emitted.append(name)
            if self.layer:
                parts.append(f"@layer {name} {{\n{indent_lines(content, self.tab_size)}\n}}\n")
            else:
                parts.append(content.rstrip("\n") + "\n")

        # Utilities layer was removed: keep the resolved utilities after every layer
        if UTILITIES_LAYER not in self.registry and final_utilities_css.strip():
            logger.debug("No utilities layer registered, appending utilities unlayered")
            parts.append(final_utilities_css.rstrip("\n") + "\n")

        self.emitted_layers = emitted
        return "".join(parts)
