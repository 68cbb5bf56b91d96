"""Rich-based summary of a finished build.

Renders one table after a build cycle:

    Output      dist/styles.css
    Source map  dist/styles.css.map
    Files       12
    Classes     148
    Layers      base, utilities
    Size        4.1 KB (62.3% smaller)
    Time        0.08s

followed by any issues collected during the cycle.
"""

from typing import Optional

from rich.console import Console, Group
from rich.table import Table
from rich.text import Text

from .error_collector import ErrorSeverity
from .models import BuildResult

_ISSUE_STYLES = {
    ErrorSeverity.WARNING: "yellow",
    ErrorSeverity.ERROR: "red",
    ErrorSeverity.FATAL: "bold red",
}


def format_size(num_bytes: int) -> str:
    """Format a byte count as B or KB.

    Args:
        num_bytes: Size in bytes.

    Returns:
        Human-readable size such as "812 B" or "4.1 KB".
    """
    if num_bytes < 1024:
        return f"{num_bytes} B"
    return f"{num_bytes / 1024:.1f} KB"


class BuildSummaryDisplay:
    """Renders BuildResult objects to a Rich console.

    Args:
        console: Rich Console instance for rendering. If None, creates a new one.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console if console is not None else Console()

    def render(self, result: BuildResult) -> Group:
        """Build the renderable for a result.

        Args:
            result: Finished build.

        Returns:
            A Rich Group with the status line, details table and issue list.
        """
        if result.success:
            header = Text("Build succeeded", style="bold green")
        else:
            phase = result.failed_phase.value if result.failed_phase else "unknown"
            header = Text(f"Build failed during {phase}", style="bold red")

        parts = [header, self._render_table(result)]
        for issue in result.issues:
            parts.append(Text(issue.format(), style=_ISSUE_STYLES[issue.severity]))
        return Group(*parts)

    def _render_table(self, result: BuildResult) -> Table:
        table = Table(show_header=False, show_edge=False, box=None, padding=(0, 1), expand=False)
        table.add_column("Field", style="bold", no_wrap=True, min_width=12)
        table.add_column("Value")

        if result.output_path is not None:
            table.add_row("Output", str(result.output_path))
        if result.map_path is not None:
            table.add_row("Source map", str(result.map_path))
        table.add_row("Files", str(result.file_count))
        table.add_row("Classes", str(result.class_count))
        if result.success:
            table.add_row("Layers", ", ".join(result.layer_names) or "-")
            size = format_size(result.css_bytes)
            if result.savings_percent > 0:
                size += f" ({result.savings_percent:.1f}% smaller)"
            table.add_row("Size", size)
        else:
            table.add_row("Reason", Text(result.message, style="red"))
        table.add_row("Time", f"{result.build_time:.2f}s")
        return table

    def show(self, result: BuildResult) -> None:
        self._console.print(self.render(result))
