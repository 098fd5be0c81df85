"""
Main API module for station_symbology.

This module provides simplified user-facing functions that hide the set-up
of the decoding orchestrator, icon library and compiler. The primary function
`create_symbol()` handles the complete workflow from raw report text to a
composed (and optionally saved) station symbol in a single call.

All calls share one process-wide decoding orchestrator, so the decode backend
is started once and reused.

Example:
    >>> from station_symbology import create_symbol
    >>>
    >>> # Save a symbol
    >>> create_symbol(
    ...     "AAXX 01004 88889 12782 61506 10094 20047 30111 40197",
    ...     latitude=45.0,
    ...     longitude=19.0,
    ...     output_path="station.svg"
    ... )

    >>> # Interactive use (returns the diagram)
    >>> diagram = create_symbol("AAXX 01004 88889 12782 61506 10094", 45.0, 19.0)
    >>> diagram.slot(6).texts()
    ['9.4']
"""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Hashable, Mapping, Optional, Union

from .config import Config, RenderOptions
from .data import DecodedObservation, DecodingOrchestrator
from .exceptions import InvalidParameterError
from .rendering import IconLibrary, StationSymbolCompiler, SymbolDiagram

logger = logging.getLogger("station_symbology.api")

_lock = threading.Lock()
_default_orchestrator: Optional[DecodingOrchestrator] = None
_default_compiler: Optional[StationSymbolCompiler] = None


def get_default_orchestrator() -> DecodingOrchestrator:
    """
    Get the process-wide decoding orchestrator, creating it on first use.

    Returns:
        The shared DecodingOrchestrator (backend start-up already requested)
    """
    global _default_orchestrator
    with _lock:
        if _default_orchestrator is None:
            logger.debug("Creating default decoding orchestrator")
            _default_orchestrator = DecodingOrchestrator()
            _default_orchestrator.initialize()
        return _default_orchestrator


def get_default_compiler(config: Optional[Config] = None) -> StationSymbolCompiler:
    """
    Get a compiler bound to the shared orchestrator.

    Args:
        config: Optional Config; without one the cached default compiler is
            returned, with one a new compiler using that config is built

    Returns:
        StationSymbolCompiler
    """
    global _default_compiler
    orchestrator = get_default_orchestrator()

    if config is not None:
        config.validate()
        return StationSymbolCompiler(orchestrator, IconLibrary.from_config(config), config)

    with _lock:
        if _default_compiler is None:
            logger.debug("Creating default station symbol compiler")
            _default_compiler = StationSymbolCompiler(orchestrator)
        return _default_compiler


def reset_defaults() -> None:
    """Shut down the shared orchestrator and forget the cached compiler."""
    global _default_orchestrator, _default_compiler
    with _lock:
        orchestrator = _default_orchestrator
        _default_orchestrator = None
        _default_compiler = None
    if orchestrator is not None:
        orchestrator.shutdown(wait=False)


def _finish(diagram: SymbolDiagram, output_path: Optional[Union[str, Path]]) -> Union[str, SymbolDiagram]:
    if output_path is None:
        return diagram

    output_path = Path(output_path)
    logger.info(f"Saving symbol to {output_path}")
    saved_path = diagram.save(output_path)
    logger.info(f"Symbol saved successfully to {saved_path}")
    return saved_path


def create_symbol(
    raw_text: Optional[str],
    latitude: float,
    longitude: float,
    options: Union[None, RenderOptions, Mapping[str, Any]] = None,
    output_path: Optional[Union[str, Path]] = None,
    config: Optional[Config] = None,
    correlation_id: Optional[Hashable] = None
) -> Union[str, SymbolDiagram]:
    """
    Create a station symbol from a raw SYNOP report.

    This is the primary API function that handles the complete workflow:
    1. Hand the report to the shared decoding orchestrator
    2. Lay out the 26 plotting model slots
    3. Fill each slot from the decoded observation
    4. Save to file or return the diagram for interactive use

    Args:
        raw_text: Raw report text; empty text yields an empty symbol
        latitude: Station latitude (selects the wind barb hemisphere)
        longitude: Station longitude
        options: RenderOptions or a mapping such as
                 {"polyChromatic": False, "elementsToOmit": [2, 18]}
        output_path: Output SVG path; if None, returns the SymbolDiagram
        config: Optional Config object; if None, uses default configuration
        correlation_id: Optional id for the decode request

    Returns:
        If output_path provided: path to saved SVG file
        If output_path is None: the SymbolDiagram

    Raises:
        InvalidParameterError: If coordinates or options are invalid
        BackendInitError: If the decode backend could not be started
        RenderError: If the symbol cannot be saved

    Example:
        >>> path = create_symbol(report, 45.0, 19.0, output_path="out/station.svg")
        >>> print(f"Symbol saved to {path}")
    """
    logger.info(f"Creating symbol at ({latitude:.2f}, {longitude:.2f})")

    try:
        compiler = get_default_compiler(config)
    except ValueError as e:
        raise InvalidParameterError(f"Invalid configuration: {e}") from e

    diagram = compiler.compile(raw_text, (latitude, longitude), options=options, correlation_id=correlation_id)
    return _finish(diagram, output_path)


def create_symbol_from_observation(
    decoded: Union[DecodedObservation, Dict[str, Any]],
    latitude: float,
    longitude: float,
    options: Union[None, RenderOptions, Mapping[str, Any]] = None,
    output_path: Optional[Union[str, Path]] = None,
    config: Optional[Config] = None
) -> Union[str, SymbolDiagram]:
    """
    Create a station symbol from an already decoded observation.

    Useful when reports were decoded elsewhere and only the plotting is
    needed; the decode backend is never started.

    Args:
        decoded: DecodedObservation or decoder output dictionary
        latitude: Station latitude
        longitude: Station longitude
        options: RenderOptions or a mapping of option names
        output_path: Output SVG path; if None, returns the SymbolDiagram
        config: Optional Config object

    Returns:
        Saved path or SymbolDiagram, as for create_symbol()

    Raises:
        InvalidParameterError: If the observation or options are invalid
        RenderError: If the symbol cannot be saved
    """
    if isinstance(decoded, Mapping):
        decoded = DecodedObservation.from_dict(decoded)
    elif not isinstance(decoded, DecodedObservation):
        raise InvalidParameterError(
            f"decoded must be a DecodedObservation or a mapping, got {type(decoded).__name__}"
        )

    if config is None:
        config = Config()
    # The orchestrator is never used here, so no backend is started
    compiler = StationSymbolCompiler(
        orchestrator=DecodingOrchestrator(default_timeout=config.decode_timeout),
        icons=IconLibrary.from_config(config),
        config=config,
    )

    try:
        diagram = compiler.compile_observation(decoded, (latitude, longitude), options)
    except ValueError as e:
        raise InvalidParameterError(f"Invalid render options: {e}") from e

    return _finish(diagram, output_path)


__all__ = [
    "create_symbol",
    "create_symbol_from_observation",
    "get_default_orchestrator",
    "get_default_compiler",
    "reset_defaults",
]
