"""
Centralized user-facing output for txgen.

Every line is prefixed with the elapsed time since program launch in
MM:SS.cc format (minutes:seconds.centiseconds), which makes it easy to see
where a build spends its time, and how long a watch session has been running.

Example output:
    00:00.01 txgen CSS Generator v0.4.0
    00:00.02 [1/6] Resolving input files...
    00:00.05       [html] index.html
    00:00.11 [3/6] Resolving styles...
    00:00.14 Generated CSS file at dist/styles.css

Usage:
    from txgen.output import log, log_phase, log_detail, init_timer

    init_timer()
    log_phase(1, 6, "Resolving input files...")
    log_detail("3 files matched")
"""

import sys
import time
from typing import Optional, TextIO

# Global state for the timer
_start_time: Optional[float] = None
_output_stream: TextIO = sys.stdout
_verbose: bool = False


def init_timer(output_stream: Optional[TextIO] = None) -> None:
    """
    Initialize the program timer.

    Call this at program startup to set the reference time for all timestamps.
    If not called explicitly, it will be called automatically on first log.

    Args:
        output_stream: Optional output stream (defaults to sys.stdout)
    """
    global _start_time, _output_stream
    _start_time = time.time()
    if output_stream is not None:
        _output_stream = output_stream


def set_verbose(verbose: bool) -> None:
    """
    Set verbose mode for logging.

    Args:
        verbose: If True, all messages are printed. If False, verbose_only messages are dropped.
    """
    global _verbose
    _verbose = verbose


def is_verbose() -> bool:
    """Return True when verbose output is enabled."""
    return _verbose


def get_elapsed() -> float:
    """
    Get elapsed time since timer initialization.

    Returns:
        Elapsed time in seconds
    """
    if _start_time is None:
        init_timer()
    return time.time() - _start_time  # type: ignore


def format_timestamp() -> str:
    """
    Format the current elapsed time as MM:SS.cc.

    Returns:
        Formatted timestamp string
    """
    elapsed = get_elapsed()
    minutes = int(elapsed // 60)
    seconds = elapsed % 60
    return f"{minutes:02d}:{seconds:05.2f}"


def _print(message: str, end: str = "\n") -> None:
    timestamp = format_timestamp()
    line = f"{timestamp} {message}{end}"
    _output_stream.write(line)
    _output_stream.flush()


def log(message: str, verbose_only: bool = False) -> None:
    """
    Log a message with timestamp.

    Args:
        message: Message to log
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(message)


def log_phase(phase: int, total: int, message: str, verbose_only: bool = False) -> None:
    """
    Log a build phase message.

    Format: [N/M] message

    Args:
        phase: Current phase number
        total: Total number of phases
        message: Phase description
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(f"[{phase}/{total}] {message}")


def log_detail(message: str, indent: int = 6, verbose_only: bool = False) -> None:
    """
    Log a detail message (indented).

    Args:
        message: Detail message
        indent: Number of spaces to indent (default 6)
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(f"{' ' * indent}{message}")


def log_file(file_kind: str, filename: str, verbose_only: bool = True) -> None:
    """
    Log a scanned input file.

    Format: [file_kind] filename

    Args:
        file_kind: Kind of input (e.g., 'html', 'jsx')
        filename: Display name of the file
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(f"      [{file_kind}] {filename}")


def log_header(title: str, version: str) -> None:
    """Log a header message (e.g., program startup)."""
    _print(f"{title} v{version}")
    _print("")


def log_build_complete(build_time: float, verbose_only: bool = False) -> None:
    """
    Log build completion message.

    Args:
        build_time: Total build time in seconds
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(f"Build time: {build_time:.2f}s")


def log_error(message: str) -> None:
    """Log an error message."""
    _print(f"ERROR: {message}")


def log_warning(message: str) -> None:
    """Log a warning message."""
    _print(f"WARNING: {message}")


def log_success(message: str) -> None:
    """Log a success message."""
    _print(message)
