"""
Watch mode - rebuild the stylesheet when input files change.

Filesystem events from watchdog are filtered against the input patterns,
then coalesced by a Debouncer: a burst of events within the debounce window
triggers exactly one rebuild, scheduled `delay` seconds after the last event.
Rebuild failures are reported and the loop keeps watching.
"""

import logging
import os
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from ..errors import WatcherError
from ..output import log, log_detail, log_error, log_success, log_warning
from ..scan import FileResolver

if TYPE_CHECKING:
    from .orchestrator import BuildOrchestrator

logger = logging.getLogger(__name__)

_RELEVANT_EVENTS = frozenset({EVENT_TYPE_CREATED, EVENT_TYPE_MODIFIED, EVENT_TYPE_MOVED, EVENT_TYPE_DELETED})


class Debouncer:
    """Batches rapid change events into a single callback.

    Collects paths for `delay` seconds after the last event, then calls
    callback(paths) once on the timer thread.
    """

    def __init__(self, delay: float, callback: Callable[[list[Path]], None]):
        self.delay = delay
        self.callback = callback
        self.fire_count = 0
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._pending_paths: list[Path] = []

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def trigger(self, path: Path) -> None:
        """Register a change event. Resets the debounce timer."""
        with self._lock:
            if path not in self._pending_paths:
                self._pending_paths.append(path)

            if self._timer is not None:
                self._timer.cancel()

            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self) -> None:
        with self._lock:
            # A timer replaced by trigger() may still run if it expired first
            if self._timer is not threading.current_thread():
                return
            paths = list(self._pending_paths)
            self._pending_paths.clear()
            self._timer = None
            self.fire_count += 1

        try:
            self.callback(paths)
        except Exception as e:
            logger.exception("Change callback failed")
            log_error(f"Rebuild failed: {e}")

    def cancel(self) -> None:
        """Cancel any pending debounce timer."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending_paths.clear()


class InputChangeHandler(FileSystemEventHandler):
    """Forwards events for files matching the input patterns."""

    def __init__(self, file_resolver: FileResolver, on_change: Callable[[Path], None], ignored: tuple[Path, ...] = ()):
        super().__init__()
        self.file_resolver = file_resolver
        self.on_change = on_change
        self.ignored = frozenset(path.resolve() for path in ignored)

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in _RELEVANT_EVENTS:
            return

        candidates = [event.src_path]
        if event.event_type == EVENT_TYPE_MOVED:
            candidates.append(event.dest_path)

        for raw_path in candidates:
            path = Path(os.fsdecode(raw_path)).resolve()
            if path in self.ignored:
                continue
            if self.file_resolver.matches(path):
                logger.debug(f"{event.event_type}: {path}")
                self.on_change(path)
                return


class WatchLoop:
    """Observes the input roots and rebuilds through an orchestrator."""

    def __init__(
        self,
        orchestrator: "BuildOrchestrator",
        debounce: Optional[float] = None,
        observer_factory: Callable[[], Observer] = Observer,
    ):
        """
        Initialize the watch loop.

        Args:
            orchestrator: Orchestrator whose build() runs on every change batch
            debounce: Debounce window in seconds (defaults to the config value)
            observer_factory: Creates the watchdog observer
        """
        self.orchestrator = orchestrator
        delay = orchestrator.config.debounce if debounce is None else debounce
        self.debouncer = Debouncer(delay, self._rebuild)
        self.rebuild_count = 0
        self._observer_factory = observer_factory
        self._observer: Optional[Observer] = None
        self._stop_event = threading.Event()

    def _rebuild(self, paths: list[Path]) -> None:
        self.rebuild_count += 1
        log(f"Rebuilding ({len(paths)} changed file{'s' if len(paths) != 1 else ''})...")
        for path in paths[:5]:
            log_detail(path.name, verbose_only=True)

        result = self.orchestrator.build()
        if result.success:
            log_success(f"Rebuilt in {result.build_time:.2f}s")
        else:
            log_warning("Build failed, waiting for changes...")

    def _on_change(self, path: Path) -> None:
        log(f"File changed: {path.name}", verbose_only=True)
        self.debouncer.trigger(path)

    def start(self) -> None:
        """Schedule the watches and start the observer.

        Raises:
            WatcherError: If a root cannot be observed
        """
        self._stop_event.clear()
        resolver = self.orchestrator.file_resolver
        handler = InputChangeHandler(
            resolver,
            self._on_change,
            ignored=self.orchestrator.written_paths,
        )
        observer = self._observer_factory()

        for root in resolver.watch_roots():
            try:
                observer.schedule(handler, str(root), recursive=True)
            except OSError as e:
                raise WatcherError(f"Cannot watch {root}: {e}", root)
            log_detail(f"Watching: {root}", verbose_only=True)

        try:
            observer.start()
        except OSError as e:
            raise WatcherError(f"Cannot start file observer: {e}")
        self._observer = observer

    def run(self, poll_interval: float = 0.5) -> None:
        """Watch until stop() is called or the process is interrupted.

        Raises:
            WatcherError: If watching cannot start or the observer dies
        """
        self.start()
        try:
            while not self._stop_event.wait(poll_interval):
                if self._observer is not None and not self._observer.is_alive():
                    raise WatcherError("File observer stopped unexpectedly")
        finally:
            self.stop()
            log(f"Watch mode stopped after {self.rebuild_count} rebuilds")

    def stop(self) -> None:
        self._stop_event.set()
        self.debouncer.cancel()
        observer, self._observer = self._observer, None
        if observer is not None:
            observer.stop()
            observer.join(timeout=5)
