"""
Station symbol compiler.

Turns one raw report plus station coordinates into a ``SymbolDiagram``:

1. Decode the report through the decoding orchestrator (the only wait).
2. Build the 26 positioned slot containers.
3. Run the per-slot rules when the report was decoded.
4. Resolve the icons the rules requested and drop the missing ones.
"""

import logging
import time
import uuid
from typing import Any, Hashable, List, Mapping, Optional, Tuple, Union

from ..config import Config, RenderOptions, coerce_options
from ..data.observation import DecodedObservation
from ..data.orchestrator import DecodingOrchestrator
from ..exceptions import DecodeTimeoutError, InvalidParameterError
from .assets import IconLibrary, resolve_icon
from .diagram import IconPrimitive, SlotGroup, SymbolDiagram
from .layout import build_slots
from .rules import apply_rules

logger = logging.getLogger("station_symbology.rendering.compiler")

Coordinates = Tuple[float, float]
OptionsLike = Union[None, RenderOptions, Mapping[str, Any]]


def resolve_icons(slots: List[SlotGroup], overlays: List[IconPrimitive]) -> int:
    """
    Wait for every requested icon and remove the ones that are missing.

    A slot recolour only applies to drawn content, so it is cleared from a
    slot left without content.

    Returns:
        Number of icons dropped
    """
    dropped = 0
    for slot in slots:
        kept = []
        for primitive in slot.primitives:
            if isinstance(primitive, IconPrimitive) and not resolve_icon(primitive):
                dropped += 1
                continue
            kept.append(primitive)
        slot.primitives = kept
        if slot.color is not None and slot.is_empty:
            slot.color = None

    resolved = [o for o in overlays if resolve_icon(o)]
    dropped += len(overlays) - len(resolved)
    overlays[:] = resolved
    return dropped


def validate_coordinates(latitude: float, longitude: Optional[float] = None) -> None:
    """Raise InvalidParameterError for out-of-range coordinates."""
    if not -90.0 <= latitude <= 90.0:
        raise InvalidParameterError(f"Latitude must be between -90 and 90, got {latitude}")
    if longitude is not None and not -180.0 <= longitude <= 180.0:
        raise InvalidParameterError(f"Longitude must be between -180 and 180, got {longitude}")


class StationSymbolCompiler:
    """
    Compiles raw observation reports into station symbol diagrams.

    Compilation shares no mutable state between calls apart from the icon
    cache, so one compiler can serve several threads at once; they only
    contend for the single decode backend.

    Attributes:
        orchestrator: Decoding orchestrator used for every report
        icons: Icon library for the WMO glyphs
        config: Package configuration (timeouts, highlight colour, defaults)

    Example:
        >>> compiler = StationSymbolCompiler()
        >>> diagram = compiler.compile(
        ...     "AAXX 01004 88889 12782 61506 10094 20047 30111 40197",
        ...     (45.0, 19.0),
        ...     options={"temperature": "rounded"},
        ... )
        >>> diagram.save("station.svg")
    """

    def __init__(
        self,
        orchestrator: Optional[DecodingOrchestrator] = None,
        icons: Optional[IconLibrary] = None,
        config: Optional[Config] = None
    ):
        self.config = config if config is not None else Config()
        self.orchestrator = orchestrator if orchestrator is not None else DecodingOrchestrator(
            default_timeout=self.config.decode_timeout
        )
        self.icons = icons if icons is not None else IconLibrary.from_config(self.config)
        self._highlight = self.config.highlight_hex

        logger.debug(f"Initialized StationSymbolCompiler: icons={self.icons!r}")

    def decode(self, raw_text: Optional[str], correlation_id: Hashable) -> Optional[DecodedObservation]:
        """
        Decode a report, absorbing timeouts.

        Returns:
            DecodedObservation, or None when the report is empty, could not be
            decoded, or timed out

        Raises:
            BackendInitError: If the decode backend could not be started
        """
        try:
            result = self.orchestrator.decode(raw_text, correlation_id, timeout=self.config.decode_timeout)
        except DecodeTimeoutError as e:
            logger.warning(f"Decoding timed out, rendering empty symbol: {e}")
            return None

        if result.decoded is None:
            if raw_text:
                logger.warning(f"Report could not be decoded: {raw_text!r}")
            return None
        return DecodedObservation.from_dict(result.decoded, raw_text=raw_text)

    def compile(
        self,
        raw_text: Optional[str],
        coordinates: Coordinates,
        options: OptionsLike = None,
        correlation_id: Optional[Hashable] = None
    ) -> SymbolDiagram:
        """
        Compile one station symbol.

        Args:
            raw_text: Raw report text (empty or None gives an empty symbol)
            coordinates: Station position as (latitude, longitude)
            options: RenderOptions, a mapping of option names, or None for
                the configured defaults
            correlation_id: Id for the decode request (generated if None)

        Returns:
            Composed SymbolDiagram; slots stay empty if nothing was decoded

        Raises:
            InvalidParameterError: If coordinates or options are invalid
            BackendInitError: If the decode backend could not be started
        """
        latitude, longitude = coordinates
        validate_coordinates(latitude, longitude)

        try:
            options = coerce_options(options, default=self.config.render_options)
        except ValueError as e:
            raise InvalidParameterError(f"Invalid render options: {e}") from e

        if correlation_id is None:
            correlation_id = uuid.uuid4().hex

        observation = self.decode(raw_text, correlation_id)
        return self.compile_observation(observation, coordinates, options, correlation_id, raw_text)

    def compile_observation(
        self,
        observation: Optional[DecodedObservation],
        coordinates: Coordinates,
        options: OptionsLike = None,
        correlation_id: Optional[Hashable] = None,
        raw_text: Optional[str] = None
    ) -> SymbolDiagram:
        """Compose a symbol from an already decoded observation (None = empty symbol)."""
        latitude = coordinates[0]
        options = coerce_options(options, default=self.config.render_options)
        start = time.perf_counter()

        slots = build_slots(options)
        overlays: List[IconPrimitive] = []

        if observation is not None:
            logger.debug(f"Decoded groups for {correlation_id!r}: {observation.reported_groups()}")
            overlays = apply_rules(slots, observation, options, self.icons, latitude, self._highlight)
            dropped = resolve_icons(slots, overlays)
            if dropped:
                logger.debug(f"{dropped} icon(s) missing for {correlation_id!r}")

        diagram = SymbolDiagram(
            slots=slots,
            overlays=overlays,
            station_model_scale=options.scaling.station_model,
            font_scale=options.scaling.font,
            correlation_id=correlation_id,
            decoded=observation is not None,
            raw_text=raw_text if raw_text is not None else getattr(observation, "raw_text", None),
        )

        logger.debug(f"Symbol assembly took {(time.perf_counter() - start) * 1000:.0f} ms")
        return diagram
