"""Data models for the build pipeline.

- BuildPhase: Enum tracking which stage a build cycle is in
- BuildResult: Outcome of one build cycle
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .error_collector import BuildIssue


class BuildPhase(Enum):
    """Stage of a build cycle. Every cycle starts and ends in IDLE."""

    IDLE = "idle"
    RESOLVING = "resolving"
    EXTRACTING = "extracting"
    RESOLVING_STYLES = "resolving_styles"
    ASSEMBLING = "assembling"
    POST_PROCESSING = "post_processing"
    MAPPING = "mapping"
    WRITING = "writing"


@dataclass
class BuildResult:
    """Result of one build cycle.

    Attributes:
        success: True if the stylesheet was written
        message: Human-readable outcome
        failed_phase: Phase that aborted the cycle (None on success)
        output_path: Written CSS file
        map_path: Written source map (None if disabled)
        file_count: Number of input files resolved
        class_count: Number of unique class tokens extracted
        layer_names: Layers emitted, in order
        css_bytes: Size of the generated stylesheet in bytes, excluding the sourceMappingURL comment
        unminified_bytes: Size of the same stylesheet before minification in bytes
        build_time: Wall-clock duration in seconds
        issues: Warnings and errors collected during the cycle
    """

    success: bool
    message: str
    failed_phase: Optional[BuildPhase] = None
    output_path: Optional[Path] = None
    map_path: Optional[Path] = None
    file_count: int = 0
    class_count: int = 0
    layer_names: list[str] = field(default_factory=list)
    css_bytes: int = 0
    unminified_bytes: int = 0
    build_time: float = 0.0
    issues: list["BuildIssue"] = field(default_factory=list)

    @property
    def savings_percent(self) -> float:
        """Percentage saved by minification (0.0 when nothing was saved)."""
        if self.unminified_bytes <= 0 or self.css_bytes >= self.unminified_bytes:
            return 0.0
        return (1 - self.css_bytes / self.unminified_bytes) * 100

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "success": self.success,
            "message": self.message,
            "failed_phase": self.failed_phase.value if self.failed_phase else None,
            "output_path": str(self.output_path) if self.output_path else None,
            "map_path": str(self.map_path) if self.map_path else None,
            "file_count": self.file_count,
            "class_count": self.class_count,
            "layer_names": list(self.layer_names),
            "css_bytes": self.css_bytes,
            "unminified_bytes": self.unminified_bytes,
            "build_time": self.build_time,
            "issues": [issue.format() for issue in self.issues],
        }
