"""
Command-line interface for station_symbology package.

Provides argparse-based CLI with subcommands for rendering a single station
symbol, rendering every station of a GeoJSON layer, and writing a default
configuration file.

Usage:
    station-symbology symbol --synop "AAXX 01004 88889 12782 61506 10094" --lat 45 --lon 19 --output station.svg
    station-symbology layer --input stations.geojson --field synop --output-dir symbols/ --parallel
    station-symbology options --output config.yaml
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .api import create_symbol, get_default_compiler, reset_defaults
from .batch import BatchSymbolGenerator
from .config import Config, RenderOptions, parse_slot_list
from .constants import SLOT_COUNT
from .exceptions import StationSymbologyError
from .logging_config import setup_logging


def setup_logging_from_args(args: argparse.Namespace) -> None:
    """
    Configure logging based on command-line arguments.

    Args:
        args: Parsed command-line arguments with verbose, quiet, log_file
    """
    if hasattr(args, 'silent') and args.silent:
        verbosity = -2  # ERROR
    elif hasattr(args, 'quiet') and args.quiet:
        verbosity = -1  # WARNING
    elif hasattr(args, 'verbose') and args.verbose:
        verbosity = 1  # DEBUG
    else:
        verbosity = 0  # INFO

    log_file = getattr(args, 'log_file', None)
    setup_logging(verbosity=verbosity, log_file=log_file)


def slot_index(value: str) -> int:
    """
    Parse a slot index argument.

    Raises:
        argparse.ArgumentTypeError: If value is not a slot index
    """
    try:
        idx = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid slot index '{value}'")
    if not 0 <= idx < SLOT_COUNT:
        raise argparse.ArgumentTypeError(f"Slot index must be 0-{SLOT_COUNT - 1}, got {idx}")
    return idx


def load_config(config_path: Optional[str]) -> Optional[Config]:
    """
    Load configuration from file.

    Args:
        config_path: Path to config file (YAML or JSON)

    Returns:
        Config object or None if no path provided
    """
    if config_path is None:
        return None

    try:
        return Config.load_from_file(config_path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error loading config from {config_path}: {e}", file=sys.stderr)
        sys.exit(1)


def load_options_file(path: str) -> Dict[str, Any]:
    """Read a mapping of render options from a YAML or JSON file."""
    options_path = Path(path)
    with open(options_path, "r") as f:
        if options_path.suffix in [".yaml", ".yml"]:
            data = yaml.safe_load(f)
        elif options_path.suffix == ".json":
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported file format: {options_path.suffix}. Use .yaml, .yml, or .json")
    return data or {}


def build_render_options(args: argparse.Namespace, config: Config) -> RenderOptions:
    """Start from the config defaults, then the options file, then flags."""
    options = config.render_options
    if getattr(args, "options", None):
        merged = options.to_dict()
        merged.update(load_options_file(args.options))
        options = RenderOptions.from_dict(merged)

    overrides: Dict[str, Any] = {}
    if getattr(args, "omit", None):
        overrides["elements_to_omit"] = parse_slot_list(args.omit)
    if getattr(args, "debug", False):
        overrides["debug"] = True
    if getattr(args, "rounded", False):
        overrides["temperature"] = "rounded"
        overrides["dew_point"] = "rounded"
    if getattr(args, "monochrome", False):
        overrides["poly_chromatic"] = False
        overrides["high_clouds_in_red"] = False

    return options.with_overrides(**overrides) if overrides else options


def _cli_print(args: argparse.Namespace, *values: object, **kwargs) -> None:
    """Print unless --silent was provided."""
    if getattr(args, "silent", False):
        return
    print(*values, **kwargs)


def cmd_symbol(args: argparse.Namespace) -> int:
    """Handle 'symbol' subcommand."""
    _cli_print(args, f"Creating symbol at ({args.lat}, {args.lon})")

    try:
        config = load_config(args.config) or Config()
        if args.icons:
            config.icon_source = args.icons
        options = build_render_options(args, config)

        output_path = create_symbol(
            raw_text=args.synop,
            latitude=args.lat,
            longitude=args.lon,
            options=options,
            output_path=args.output,
            config=config,
        )

        if getattr(args, "silent", False):
            print(str(output_path))
        else:
            print(f"Success! Symbol saved to: {output_path}")
        return 0

    except StationSymbologyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        reset_defaults()


def cmd_layer(args: argparse.Namespace) -> int:
    """Handle 'layer' subcommand."""
    _cli_print(args, f"Rendering stations from: {args.input}")

    try:
        config = load_config(args.config) or Config()
        if args.icons:
            config.icon_source = args.icons
        options = build_render_options(args, config)

        batch = BatchSymbolGenerator.from_file(
            args.input,
            field=args.field,
            options=options,
            config=config,
            output_dir=Path(args.output_dir),
            compiler=get_default_compiler(config),
        )

        result = batch.generate(
            parallel=args.parallel,
            max_workers=args.workers,
            show_progress=not (getattr(args, "quiet", False) or getattr(args, "silent", False)),
        )

        successful = len(result['successful'])
        total = successful + len(result['failed'])
        success_rate = successful / total * 100 if total > 0 else 0

        if getattr(args, "silent", False):
            print(str(args.output_dir))
        else:
            print(f"\nLayer rendering complete!")
            print(f"  Successful: {successful}/{total} ({success_rate:.1f}%)")
            print(f"  Skipped features: {len(result['skipped'])}")
            print(f"  Total time: {result['total_time']:.1f}s")
            print(f"  Output directory: {args.output_dir}")

        if result['failed'] and not getattr(args, "silent", False):
            _cli_print(args, f"  Failed features: {result['failed']}")

        return 0 if successful > 0 else 1

    except StationSymbologyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        reset_defaults()


def cmd_options(args: argparse.Namespace) -> int:
    """Handle 'options' subcommand."""
    try:
        config = load_config(args.config) or Config()
        config.validate()
        config.save_to_file(Path(args.output))
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if getattr(args, "silent", False):
        print(str(args.output))
    else:
        print(f"Configuration written to: {args.output}")
    return 0


def main() -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        prog="station-symbology",
        description="Render WMO station model symbols from SYNOP reports",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    def _add_common_globalish_args(p: argparse.ArgumentParser) -> None:
        """Add args that users reasonably expect to work after subcommands too.

        Argparse only treats options as "global" when they appear before the
        subcommand token, so these are added to subparsers as well.
        """
        p.add_argument(
            "-v", "--verbose",
            action="store_true",
            help="Enable DEBUG logging"
        )
        p.add_argument(
            "-q", "--quiet",
            action="store_true",
            help="Suppress INFO logging (WARNING+ only)"
        )
        p.add_argument(
            "--silent",
            action="store_true",
            help="Suppress most console output (prints only final output path(s))"
        )
        p.add_argument(
            "--log-file",
            type=str,
            help="Write logs to file"
        )

    def _add_render_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--config",
            type=str,
            help="Config file path (YAML/JSON)"
        )
        p.add_argument(
            "--options",
            type=str,
            help="Render options file (YAML/JSON, camelCase or snake_case keys)"
        )
        p.add_argument(
            "--icons",
            type=str,
            help="Icon directory or http(s) base URL (overrides config)"
        )
        p.add_argument(
            "--omit",
            type=slot_index,
            nargs="+",
            metavar="SLOT",
            help="Slot indices to leave empty (slot 12 is always drawn)"
        )
        p.add_argument(
            "--debug",
            action="store_true",
            help="Draw slot outlines and placeholders"
        )
        p.add_argument(
            "--rounded",
            action="store_true",
            help="Plot temperature and dew point rounded to whole degrees"
        )
        p.add_argument(
            "--monochrome",
            action="store_true",
            help="Disable polychromatic plotting and red high clouds"
        )

    # Global arguments (still supported before subcommands)
    _add_common_globalish_args(parser)

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ========================================================================
    # symbol subcommand
    # ========================================================================
    parser_symbol = subparsers.add_parser(
        "symbol",
        help="Render a single station symbol"
    )
    _add_common_globalish_args(parser_symbol)
    _add_render_args(parser_symbol)
    parser_symbol.add_argument(
        "--synop",
        type=str,
        required=True,
        help="Raw SYNOP report text"
    )
    parser_symbol.add_argument(
        "--lat",
        type=float,
        required=True,
        help="Station latitude"
    )
    parser_symbol.add_argument(
        "--lon",
        type=float,
        required=True,
        help="Station longitude"
    )
    parser_symbol.add_argument(
        "--output",
        type=str,
        required=True,
        help="Output SVG file path"
    )
    parser_symbol.set_defaults(func=cmd_symbol)

    # ========================================================================
    # layer subcommand
    # ========================================================================
    parser_layer = subparsers.add_parser(
        "layer",
        help="Render symbols for every station of a GeoJSON file"
    )
    _add_common_globalish_args(parser_layer)
    _add_render_args(parser_layer)
    parser_layer.add_argument(
        "--input",
        type=str,
        required=True,
        help="GeoJSON feature collection with point features"
    )
    parser_layer.add_argument(
        "--field",
        type=str,
        default="synop",
        help="Feature property holding the raw report (default: synop)"
    )
    parser_layer.add_argument(
        "--output-dir",
        type=str,
        default="symbols",
        help="Output directory for symbols (default: symbols/)"
    )
    parser_layer.add_argument(
        "--parallel",
        action="store_true",
        help="Compile symbols on a thread pool"
    )
    parser_layer.add_argument(
        "--workers",
        type=int,
        help="Number of parallel workers"
    )
    parser_layer.set_defaults(func=cmd_layer)

    # ========================================================================
    # options subcommand
    # ========================================================================
    parser_options = subparsers.add_parser(
        "options",
        help="Write a configuration file with default settings"
    )
    _add_common_globalish_args(parser_options)
    parser_options.add_argument(
        "--output",
        type=str,
        required=True,
        help="Output file path (.yaml, .yml or .json)"
    )
    parser_options.add_argument(
        "--config",
        type=str,
        help="Start from an existing config file instead of the defaults"
    )
    parser_options.set_defaults(func=cmd_options)

    # Parse arguments
    args = parser.parse_args()

    # Check if subcommand was provided
    if not hasattr(args, 'func'):
        parser.print_help()
        return 1

    # Setup logging
    setup_logging_from_args(args)

    # Execute subcommand
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
