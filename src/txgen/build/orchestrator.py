"""
Build orchestration for txgen.

One build cycle walks through these phases, always starting from scratch:

    RESOLVING -> EXTRACTING -> RESOLVING_STYLES -> ASSEMBLING
        -> POST_PROCESSING -> (MAPPING) -> WRITING -> IDLE

Unreadable input files are recorded and skipped; a failure in any shared
phase aborts the cycle. Either way build() returns a BuildResult and the
orchestrator is back in IDLE, ready for the next trigger.
"""

import logging
import os
import threading
import time
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

from tqdm import tqdm

from ..config import GeneratorConfig, deep_merge
from ..errors import FileReadError, GeneratorError, WriteError
from ..output import is_verbose, log, log_detail, log_error, log_file, log_phase, log_success, log_warning
from ..scan import FileResolver, extract_classes, file_kind_for, locate_tokens
from ..sourcemap import Position, SourceMapDocument, SourceMapGenerator
from ..styles import (
    LayerRegistry,
    StyleResolver,
    StylesheetAssembler,
    apply_prefix,
    configure,
    iter_class_selectors,
    minify,
    unescape_class,
)
from .error_collector import ErrorCollector, ErrorSeverity
from .models import BuildPhase, BuildResult

logger = logging.getLogger(__name__)

ResolverFactory = Callable[[Mapping[str, Any]], StyleResolver]

# Style config keys a manual layer inherits from the global styles
_INHERITED_STYLE_KEYS = ("property", "values", "classes", "breakpoints")


@dataclass(frozen=True)
class TokenLocation:
    """First occurrence of a class token in the input files."""

    path: Path
    line: int
    column: int


@dataclass
class _Extraction:
    files: list[Path]
    classes: set[str]
    texts: dict[Path, str]
    locations: dict[str, TokenLocation]


class BuildOrchestrator:
    """
    Drives complete build cycles for one configuration.

    The layer structure (names and order) is fixed when the orchestrator is
    created and adjusted only through the fluent layer methods; layer contents
    are recomputed on every build.
    """

    def __init__(self, config: GeneratorConfig, resolver_factory: ResolverFactory = configure):
        """
        Initialize the orchestrator.

        Args:
            config: Generator configuration
            resolver_factory: Creates a style resolver from a style configuration
        """
        self.config = config
        self.resolver_factory = resolver_factory
        self.phase = BuildPhase.IDLE
        self.build_count = 0

        self.registry = LayerRegistry()
        self._layer_styles: list[tuple[str, dict[str, Any]]] = []
        for name, style_config in config.layers.items():
            self.add_style(name, style_config)
        if config.layer_order is not None:
            self.registry.set_order(config.layer_order)

        self.file_resolver = FileResolver(config.input, root=config.root)
        self.assembler = StylesheetAssembler(self.registry, layer=config.layer, tab_size=config.tab_size)
        self._build_lock = threading.Lock()

    # Layer management

    def add_layer(self, name: str) -> "BuildOrchestrator":
        self.registry.add_layer(name)
        return self

    def remove_layer(self, name: str) -> "BuildOrchestrator":
        self.registry.remove_layer(name)
        self._layer_styles = [(layer, cfg) for layer, cfg in self._layer_styles if layer in self.registry]
        return self

    def set_layer_order(self, names: list[str]) -> "BuildOrchestrator":
        self.registry.set_order(names)
        return self

    def add_style(self, layer: str = "base", style_config: Optional[Mapping[str, Any]] = None) -> "BuildOrchestrator":
        """Declare manual styles for a layer, rendered on every build.

        Args:
            layer: Target layer (created if missing)
            style_config: Style configuration whose explicit rules ("apply",
                plus any classes it lists) are rendered into the layer

        Returns:
            self, for chaining
        """
        self.registry.add_layer(layer)
        self._layer_styles.append((layer, dict(style_config or {})))
        return self

    # Build cycle

    @property
    def output_path(self) -> Path:
        return self.config.output_path

    @property
    def map_path(self) -> Path:
        return self.config.map_path

    @property
    def written_paths(self) -> tuple[Path, ...]:
        """Every path a build writes, including the temporary files of atomic writes."""
        paths = (self.output_path, self.map_path)
        return paths + tuple(_temp_path(path) for path in paths)

    def build(self) -> BuildResult:
        """Run one complete build cycle.

        Returns:
            BuildResult describing the outcome (never raises for stage failures)
        """
        with self._build_lock:
            return self._run_cycle()

    def _run_cycle(self) -> BuildResult:
        start_time = time.time()
        self.build_count += 1
        collector = ErrorCollector()
        result = BuildResult(success=False, message="", output_path=self.output_path)
        total = 7 if self.config.source_map else 6

        try:
            self._enter(BuildPhase.RESOLVING, 1, total, "Resolving input files...")
            files = self.file_resolver.resolve()
            result.file_count = len(files)
            log_detail(f"{len(files)} files matched")

            self._enter(BuildPhase.EXTRACTING, 2, total, "Extracting class names...")
            extraction = self._extract(files, collector)
            result.class_count = len(extraction.classes)
            log_detail(f"Found {len(extraction.classes)} unique classes")

            self._enter(BuildPhase.RESOLVING_STYLES, 3, total, "Resolving styles...")
            utilities_css = self._resolve_styles(extraction.classes)

            self._enter(BuildPhase.ASSEMBLING, 4, total, "Assembling stylesheet...")
            css = self.assembler.assemble(utilities_css)
            result.layer_names = list(self.assembler.emitted_layers)

            self._enter(BuildPhase.POST_PROCESSING, 5, total, "Post-processing...")
            if self.config.prefix:
                css = apply_prefix(css, self.config.prefix)
            result.unminified_bytes = len(css.encode("utf-8"))
            if self.config.minify:
                css = minify(css)

            source_map: Optional[SourceMapDocument] = None
            if self.config.source_map:
                self._enter(BuildPhase.MAPPING, 6, total, "Generating source map...")
                source_map = self._build_source_map(css, extraction)

            self._enter(BuildPhase.WRITING, total, total, "Writing output...")
            result.css_bytes = len(css.encode("utf-8"))
            self._write(css, source_map)
            result.map_path = self.map_path if source_map is not None else None

        except KeyboardInterrupt:
            self.phase = BuildPhase.IDLE
            raise
        except GeneratorError as e:
            return self._fail(result, collector, str(e), start_time)
        except Exception as e:
            logger.exception(f"Unexpected error during {self.phase.value}")
            return self._fail(result, collector, f"Unexpected error: {e}", start_time)

        self.phase = BuildPhase.IDLE
        result.success = True
        result.build_time = time.time() - start_time
        result.issues = collector.get_issues()
        result.message = f"Generated CSS file at {self._display(self.output_path)}"
        log_success(result.message)
        if result.issues:
            log_warning(f"Completed with {collector.format_summary()}")
        if self.config.minify:
            log_detail(f"Minified size: {result.css_bytes} bytes ({result.savings_percent:.1f}% savings)")
        return result

    def _enter(self, phase: BuildPhase, number: int, total: int, message: str) -> None:
        self.phase = phase
        log_phase(number, total, message)

    def _fail(self, result: BuildResult, collector: ErrorCollector, message: str, start_time: float) -> BuildResult:
        failed_phase = self.phase
        collector.add(ErrorSeverity.FATAL, failed_phase, message)
        log_error(f"Build failed during {failed_phase.value}: {message}")
        self.phase = BuildPhase.IDLE
        result.success = False
        result.message = message
        result.failed_phase = failed_phase
        result.build_time = time.time() - start_time
        result.issues = collector.get_issues()
        return result

    def _extract(self, files: list[Path], collector: ErrorCollector) -> _Extraction:
        extraction = _Extraction(files=files, classes=set(), texts={}, locations={})

        if is_verbose():
            iterator = files
        else:
            iterator = tqdm(files, desc="Scanning files", unit="file", ncols=80, leave=False, disable=None)

        for path in iterator:
            kind = file_kind_for(path)
            if kind is None:
                logger.debug(f"Skipping unsupported file type: {path}")
                continue

            try:
                text = self._read_input(path)
            except FileReadError as e:
                collector.add(ErrorSeverity.ERROR, BuildPhase.EXTRACTING, str(e), file_path=path)
                log_warning(str(e))
                continue

            log_file(kind.value, self._display(path))
            found = extract_classes(text, kind)
            extraction.classes.update(found)

            if self.config.source_map:
                extraction.texts[path] = text
                unlocated = found - extraction.locations.keys()
                for token, (line, column) in locate_tokens(text, unlocated).items():
                    extraction.locations[token] = TokenLocation(path, line, column)

        return extraction

    @staticmethod
    def _read_input(path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FileReadError(path, str(e))

    def _resolve_styles(self, classes: set[str]) -> str:
        self.registry.clear_contents()
        styles = self.config.styles

        global_resolver = self.resolver_factory(styles)
        # Nothing registered yet: only the explicitly declared rules
        self.registry.append_content("base", global_resolver.generate_stylesheet())

        inherited = {key: styles[key] for key in _INHERITED_STYLE_KEYS if key in styles}
        for layer, style_config in self._layer_styles:
            resolver = self.resolver_factory(deep_merge(inherited, style_config))
            self.registry.append_content(layer, resolver.generate_stylesheet())

        return global_resolver.resolve(classes)

    def _build_source_map(self, css: str, extraction: _Extraction) -> SourceMapDocument:
        generator = SourceMapGenerator(file=self.output_path.name)
        map_dir = self.map_path.parent
        prefix = self.config.prefix

        for line_number, line in enumerate(css.split("\n"), start=1):
            for column, escaped in iter_class_selectors(line):
                name = unescape_class(escaped).rstrip()
                if prefix and name.startswith(prefix):
                    name = name[len(prefix) :]
                location = extraction.locations.get(name)
                if location is None:
                    continue
                generator.add_mapping(
                    Position(line_number, column),
                    Position(location.line, location.column),
                    _source_path(location.path, map_dir),
                    name=name,
                    source_content=extraction.texts[location.path],
                )

        document = generator.encode()
        log_detail(f"{len(generator.mappings)} mappings from {len(document.sources)} sources", verbose_only=True)
        return document

    def _write(self, css: str, source_map: Optional[SourceMapDocument]) -> None:
        output_path = self.output_path
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise WriteError(output_path.parent, str(e))

        if source_map is not None:
            css = f"{css}\n/*# sourceMappingURL={self.map_path.name} */"
            _atomic_write(self.map_path, source_map.to_json())

        _atomic_write(output_path, css)

    def _display(self, path: Path) -> str:
        try:
            return Path(os.path.relpath(path, self.config.root)).as_posix()
        except ValueError:
            return str(path)

    # Entry point

    def generate(self, on_result: Optional[Callable[[BuildResult], None]] = None) -> BuildResult:
        """Build once, then keep rebuilding on changes if watch mode is enabled.

        Args:
            on_result: Called with the result of the initial build

        Returns:
            Result of the initial build

        Raises:
            WatcherError: If the filesystem cannot be observed
        """
        log("Scanning input files...")
        result = self.build()
        if on_result is not None:
            on_result(result)

        if self.config.watch:
            from .watcher import WatchLoop

            log("Watching for changes...")
            WatchLoop(self).run()
        return result


def _source_path(path: Path, map_dir: Path) -> str:
    try:
        return Path(os.path.relpath(path, map_dir)).as_posix()
    except ValueError:
        # Different drive on Windows
        return path.as_posix()


def _temp_path(path: Path) -> Path:
    return path.with_name(f"{path.name}.tmp")


def _atomic_write(path: Path, text: str) -> None:
    """Write text to path via a temporary file and rename."""
    temp_path = _temp_path(path)
    try:
        with open(temp_path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        temp_path.replace(path)
    except OSError as e:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            logger.debug(f"Could not remove temporary file {temp_path}")
        raise WriteError(path, str(e))
