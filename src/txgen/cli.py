"""
Command-line interface for txgen.

This module provides the `txgen` CLI tool for generating utility CSS.
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from rich.console import Console

from txgen import __version__
from txgen.build import BuildOrchestrator, BuildSummaryDisplay
from txgen.config import GeneratorConfig, deep_merge, load_config_file
from txgen.errors import ConfigError, GeneratorError, WatcherError
from txgen.output import init_timer, log_build_complete, log_header, set_verbose


@dataclass
class GenerateArgs:
    """Arguments for a generate run. None means "not given on the command line"."""

    input: Optional[str] = None
    output: Optional[Path] = None
    tabs: Optional[int] = None
    layer: bool = False
    watch: bool = False
    minify: bool = False
    source_map: bool = False
    prefix: Optional[str] = None
    config: Optional[Path] = None
    verbose: bool = False

    def overrides(self) -> dict[str, Any]:
        """Options explicitly set on the command line, as config keys."""
        options: dict[str, Any] = {}
        if self.input is not None:
            options["input"] = self.input
        if self.output is not None:
            options["output"] = str(self.output)
        if self.tabs is not None:
            options["tab_size"] = self.tabs
        if self.prefix is not None:
            options["prefix"] = self.prefix
        for flag in ("layer", "watch", "minify", "source_map", "verbose"):
            if getattr(self, flag):
                options[flag] = True
        return options


def build_config(args: GenerateArgs) -> GeneratorConfig:
    """Combine defaults, the config file and command-line options.

    Raises:
        ConfigError: If the config file or any option is invalid
    """
    data: dict[str, Any] = {}
    if args.config is not None:
        data = load_config_file(args.config)
    return GeneratorConfig.from_dict(deep_merge(data, args.overrides()))


def generate_command(args: GenerateArgs) -> None:
    """Generate the stylesheet, then keep watching if requested.

    Examples:
        txgen                                   # Scan src/ and write dist/styles.css
        txgen -i "index.html,src/**/*.jsx"     # Custom inputs
        txgen -o public/app.css -m -s          # Minified, with source map
        txgen -l -t 4                          # Cascade layers, 4-space indent
        txgen -w                               # Rebuild on change
        txgen -c txgen.config.json             # Options from a JSON file
    """
    try:
        config = build_config(args)
    except ConfigError as e:
        print(f"\033[1;31m✗ Configuration error\033[0m\n\n{e}")
        sys.exit(1)

    set_verbose(config.verbose)
    logging.basicConfig(level=logging.DEBUG if config.verbose else logging.WARNING)
    init_timer()
    log_header("txgen CSS Generator", __version__)

    display = BuildSummaryDisplay(Console())
    try:
        orchestrator = BuildOrchestrator(config)
        result = orchestrator.generate(on_result=display.show)
    except KeyboardInterrupt:
        print()
        print("\033[1;33m✗ Interrupted\033[0m")
        sys.exit(130)
    except WatcherError as e:
        print()
        print("\033[1;31m✗ Watch mode failed\033[0m")
        print()
        print(str(e))
        sys.exit(1)
    except GeneratorError as e:
        print()
        print(f"\033[1;31m✗ {e}\033[0m")
        sys.exit(1)

    if result.success:
        log_build_complete(result.build_time, verbose_only=True)
        sys.exit(0)
    sys.exit(1)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="txgen",
        description="txgen - Utility-first CSS generator",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"txgen {__version__}",
    )
    parser.add_argument(
        "-i",
        "--input",
        help="Comma-separated input glob patterns (default: src/**/*.{html,jsx,tsx,vue})",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output CSS file (default: dist/styles.css)",
    )
    parser.add_argument(
        "-t",
        "--tabs",
        type=int,
        help="Indent width inside @layer blocks (default: 2)",
    )
    parser.add_argument(
        "-l",
        "--layer",
        action="store_true",
        help="Wrap output in CSS cascade layers",
    )
    parser.add_argument(
        "-w",
        "--watch",
        action="store_true",
        help="Rebuild when input files change",
    )
    parser.add_argument(
        "-m",
        "--minify",
        action="store_true",
        help="Minify the generated CSS",
    )
    parser.add_argument(
        "-s",
        "--source-map",
        dest="source_map",
        action="store_true",
        help="Write a source map next to the CSS file",
    )
    parser.add_argument(
        "-p",
        "--prefix",
        help="Prefix inserted into every class selector",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="JSON configuration file",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """txgen - Utility-first CSS generator."""
    parsed_args = create_parser().parse_args(argv)
    args = GenerateArgs(
        input=parsed_args.input,
        output=parsed_args.output,
        tabs=parsed_args.tabs,
        layer=parsed_args.layer,
        watch=parsed_args.watch,
        minify=parsed_args.minify,
        source_map=parsed_args.source_map,
        prefix=parsed_args.prefix,
        config=parsed_args.config,
        verbose=parsed_args.verbose,
    )
    generate_command(args)


if __name__ == "__main__":
    main()
