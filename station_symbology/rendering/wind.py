"""
Wind glyph selection and placement.

Barbs and pennants lie left of the shaft in the northern hemisphere and right
of it in the southern hemisphere, so each hemisphere has its own glyph set
with its own built-in heading. All wind glyphs are canvas-level overlays
placed relative to the canvas centre.
"""

import logging
from typing import List, Optional

from ..calculations.codes import round_half_up
from ..constants import (
    AUTOMATIC_ICON_SIZE,
    CALM_ICON_SCALE,
    CALM_ICON_SIZE,
    CALM_SYMBOL_INDICES,
    CANVAS_CENTER,
    WIND_ICON_SIZE,
    WIND_PIVOT_MISSING,
    WIND_PIVOT_NORTH,
    WIND_PIVOT_SOUTH,
    WIND_ROTATION_OFFSET_NORTH,
    WIND_ROTATION_OFFSET_SOUTH,
    WIND_SPEED_STEP,
)
from ..data.observation import DecodedObservation
from .assets import icon_path, request_icon
from .diagram import IconPrimitive, Transform

logger = logging.getLogger("station_symbology.rendering.wind")

NORTH = 1
SOUTH = -1


def wind_speed_symbol_match(speed: float, unit: Optional[str]) -> Optional[str]:
    """
    Two-digit index of the wind glyph for a speed.

    The smallest barb is 2.5 m/s or 5 kt, so the index is the speed in those
    steps, rounded half up.

    Args:
        speed: Reported wind speed
        unit: "m/s" or "KT"

    Returns:
        Zero-padded index such as "05", or None for an unknown unit

    Example:
        >>> wind_speed_symbol_match(12, "m/s"), wind_speed_symbol_match(16, "KT")
        ('05', '03')
    """
    step = WIND_SPEED_STEP.get(unit)
    if step is None:
        logger.error(f"Unknown wind speed unit {unit!r}, wind not plotted")
        return None
    return f"{round_half_up(speed / step):02d}"


def hemisphere_sign(latitude: float) -> int:
    """+1 for the northern hemisphere, -1 otherwise (the equator counts as south)."""
    return NORTH if latitude > 0 else SOUTH


def _overlay_transform(pivot, rotate=None, scale=None, origin=None) -> Transform:
    cx, cy = CANVAS_CENTER
    return Transform(
        translate=(cx - pivot[0], cy - pivot[1]),
        rotate=rotate,
        scale=scale,
        origin=origin if origin is not None else pivot,
    )


def automatic_station_overlay(icons) -> IconPrimitive:
    """Triangle drawn around the station circle for automatic stations."""
    half = AUTOMATIC_ICON_SIZE / 2
    # The glyph sits 2 units above centre
    transform = _overlay_transform((half, half + 2), origin=(half, half))
    return request_icon(
        icons, icon_path("automatic_station"),
        width=AUTOMATIC_ICON_SIZE, height=AUTOMATIC_ICON_SIZE, transform=transform,
    )


def build_wind_overlays(observation: DecodedObservation, latitude: float, icons) -> List[IconPrimitive]:
    """
    Wind glyph overlays for an observation.

    Args:
        observation: Decoded observation
        latitude: Station latitude, selects the hemisphere glyph set
        icons: Icon library

    Returns:
        Zero or one overlay primitive
    """
    wind = observation.surface_wind
    direction = wind.get("direction", "value")
    if not direction.is_present:
        logger.debug("Wind direction is not defined, not plotting wind")
        return []
    direction = float(direction.value)

    speed = wind.get("speed")
    speed_value = speed.get("value")

    if not speed_value.is_present:
        # Shaft with a cross at its end
        overlay = request_icon(
            icons, icon_path("wind_missing_speed"),
            width=WIND_ICON_SIZE, height=WIND_ICON_SIZE,
            transform=_overlay_transform(WIND_PIVOT_MISSING, rotate=direction + WIND_ROTATION_OFFSET_NORTH),
        )
        return [overlay]

    index = wind_speed_symbol_match(speed_value.value, speed.get("unit").value_or())
    if index is None:
        return []

    if index in CALM_SYMBOL_INDICES:
        # No glyph below the smallest barb, plotted as calm
        half = CALM_ICON_SIZE / 2
        overlay = request_icon(
            icons, icon_path("wind_calm"),
            width=CALM_ICON_SIZE, height=CALM_ICON_SIZE,
            transform=_overlay_transform((half, half), scale=CALM_ICON_SCALE),
        )
    elif hemisphere_sign(latitude) == NORTH:
        overlay = request_icon(
            icons, icon_path("wind_north", index),
            width=WIND_ICON_SIZE, height=WIND_ICON_SIZE,
            transform=_overlay_transform(WIND_PIVOT_NORTH, rotate=direction + WIND_ROTATION_OFFSET_NORTH),
        )
    else:
        overlay = request_icon(
            icons, icon_path("wind_south", index),
            width=WIND_ICON_SIZE, height=WIND_ICON_SIZE,
            transform=_overlay_transform(WIND_PIVOT_SOUTH, rotate=direction + WIND_ROTATION_OFFSET_SOUTH),
        )

    return [overlay]
