"""
station_symbology - WMO station model symbols from raw SYNOP reports.

This package decodes surface synoptic reports and composes the classic
station plotting model: a 5x5 grid of slots around the station circle,
filled with WMO glyphs and coded text, plus wind barbs drawn for the
station's hemisphere. Symbols are serialized as SVG so they can be used as
map markers or written to disk.

Quick Start:
    >>> from station_symbology import create_symbol
    >>>
    >>> # Create a single symbol
    >>> create_symbol(
    ...     "AAXX 01004 88889 12782 61506 10094 20047 30111 40197 53007",
    ...     latitude=45.0,
    ...     longitude=19.0,
    ...     output_path="station.svg"
    ... )

    >>> # Symbols for a whole GeoJSON layer
    >>> from station_symbology import BatchSymbolGenerator
    >>>
    >>> batch = BatchSymbolGenerator.from_file("stations.geojson", field="synop")
    >>> result = batch.generate(parallel=True)

Advanced Usage:
    >>> # Direct access to components
    >>> from station_symbology import Config, RenderOptions
    >>> from station_symbology import DecodingOrchestrator, StationSymbolCompiler
    >>>
    >>> config = Config(icon_source="https://example.org/wmo-symbols", highlight_color="crimson")
    >>> orchestrator = DecodingOrchestrator()
    >>> orchestrator.initialize()
    >>> compiler = StationSymbolCompiler(orchestrator, config=config)
    >>> diagram = compiler.compile(report, (45.0, 19.0), {"polyChromatic": False})
    >>> svg_text = diagram.to_svg()
"""

__version__ = "0.1.0"

# Initialize logging with default settings
from .logging_config import setup_logging
setup_logging()

# Core constants and configuration
from .constants import SLOT_COUNT, CENTER_SLOT, EXTERIOR_SLOT, SLOT_NAMES, ICON_PATHS
from .config import Config, RenderOptions, Scaling

# Decoding
from .data import DecodedObservation, DecodingOrchestrator, SynopDecoder

# Rendering components
from .rendering import IconLibrary, StationSymbolCompiler, SymbolDiagram

# Calculations
from . import calculations

# User-facing API
from .api import (
    create_symbol,
    create_symbol_from_observation,
    get_default_compiler,
    get_default_orchestrator,
    reset_defaults,
)

# Map layers and batch processing
from .layer import StationMarker, StationModelLayer
from .batch import BatchSymbolGenerator

# Exceptions
from .exceptions import (
    StationSymbologyError,
    BackendInitError,
    DecodeTimeoutError,
    RenderError,
    InvalidParameterError
)

__all__ = [
    # Version info
    "__version__",

    # Constants and config
    "SLOT_COUNT",
    "CENTER_SLOT",
    "EXTERIOR_SLOT",
    "SLOT_NAMES",
    "ICON_PATHS",
    "Config",
    "RenderOptions",
    "Scaling",

    # Core components
    "DecodedObservation",
    "DecodingOrchestrator",
    "SynopDecoder",
    "IconLibrary",
    "StationSymbolCompiler",
    "SymbolDiagram",
    "calculations",

    # User-facing API
    "create_symbol",
    "create_symbol_from_observation",
    "get_default_compiler",
    "get_default_orchestrator",
    "reset_defaults",

    # Layers and batch
    "StationMarker",
    "StationModelLayer",
    "BatchSymbolGenerator",

    # Exceptions
    "StationSymbologyError",
    "BackendInitError",
    "DecodeTimeoutError",
    "RenderError",
    "InvalidParameterError",
]
