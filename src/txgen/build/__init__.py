"""Build pipeline: orchestration, watch mode and result reporting."""

from .error_collector import BuildIssue, ErrorCollector, ErrorSeverity
from .models import BuildPhase, BuildResult
from .orchestrator import BuildOrchestrator, TokenLocation
from .summary_display import BuildSummaryDisplay, format_size
from .watcher import Debouncer, InputChangeHandler, WatchLoop

__all__ = [
    "BuildIssue",
    "BuildOrchestrator",
    "BuildPhase",
    "BuildResult",
    "BuildSummaryDisplay",
    "Debouncer",
    "ErrorCollector",
    "ErrorSeverity",
    "InputChangeHandler",
    "TokenLocation",
    "WatchLoop",
    "format_size",
]
