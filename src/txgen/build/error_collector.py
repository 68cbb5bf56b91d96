"""
Error Collector - structured issue tracking for one build cycle.

Per-file problems (unreadable inputs) are recorded and the build continues;
a stage failure is recorded as FATAL and ends the cycle. The collected issues
are attached to the BuildResult so the CLI and the watch loop can report them.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from .models import BuildPhase

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity level of a build issue."""

    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


@dataclass
class BuildIssue:
    """Single problem encountered during a build."""

    severity: ErrorSeverity
    phase: BuildPhase
    message: str
    file_path: Optional[Path] = None
    timestamp: float = field(default_factory=time.time)

    def format(self) -> str:
        """Format issue as human-readable string.

        Returns:
            Formatted issue message
        """
        line = f"[{self.severity.value.upper()}] {self.phase.value}: {self.message}"
        if self.file_path:
            line += f"\n  File: {self.file_path}"
        return line


class ErrorCollector:
    """Collects issues for one build cycle. Thread-safe."""

    def __init__(self, max_issues: int = 100):
        """Initialize error collector.

        Args:
            max_issues: Maximum number of issues to keep (oldest dropped first)
        """
        self.issues: list[BuildIssue] = []
        self.lock = threading.Lock()
        self.max_issues = max_issues

    def add(
        self,
        severity: ErrorSeverity,
        phase: BuildPhase,
        message: str,
        file_path: Optional[Path] = None,
    ) -> BuildIssue:
        """Record an issue.

        Args:
            severity: Issue severity
            phase: Phase the issue occurred in
            message: Description
            file_path: Input file concerned, if any

        Returns:
            The recorded issue
        """
        issue = BuildIssue(severity=severity, phase=phase, message=message, file_path=file_path)
        with self.lock:
            if len(self.issues) >= self.max_issues:
                logger.warning(f"ErrorCollector full ({self.max_issues} issues), dropping oldest")
                self.issues.pop(0)
            self.issues.append(issue)

        logger.debug(f"Added {severity.value} issue in phase {phase.value}: {message}")
        return issue

    def get_issues(self, severity: Optional[ErrorSeverity] = None) -> list[BuildIssue]:
        """Get all issues, optionally filtered by severity."""
        with self.lock:
            if severity:
                return [i for i in self.issues if i.severity == severity]
            return self.issues.copy()

    def get_counts(self) -> dict[str, int]:
        """Get count of issues by severity.

        Returns:
            Dictionary with counts by severity
        """
        with self.lock:
            return {
                "warnings": sum(1 for i in self.issues if i.severity == ErrorSeverity.WARNING),
                "errors": sum(1 for i in self.issues if i.severity == ErrorSeverity.ERROR),
                "fatal": sum(1 for i in self.issues if i.severity == ErrorSeverity.FATAL),
                "total": len(self.issues),
            }

    def format_summary(self) -> str:
        """Format a brief summary such as "1 fatal, 2 errors"."""
        counts = self.get_counts()
        if counts["total"] == 0:
            return "No errors"

        parts = []
        if counts["fatal"] > 0:
            parts.append(f"{counts['fatal']} fatal")
        if counts["errors"] > 0:
            parts.append(f"{counts['errors']} errors")
        if counts["warnings"] > 0:
            parts.append(f"{counts['warnings']} warnings")
        return ", ".join(parts)
