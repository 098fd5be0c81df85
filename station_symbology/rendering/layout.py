"""
Plotting model slot grid.

Slots 0-24 form a 5x5 grid on the 100x100 canvas, row-major from the top
left. Slot 12 sits at the canvas centre and anchors the whole symbol. Slot 25
lies below the grid in the centre column.
"""

import logging
from typing import List, Tuple

from ..config import RenderOptions
from ..constants import (
    CANVAS_CENTER,
    CENTER_SLOT,
    EXTERIOR_OFFSET,
    EXTERIOR_SLOT,
    GRID_OFFSETS,
    SLOT_COUNT,
)
from .diagram import OutlinePrimitive, SlotGroup

logger = logging.getLogger("station_symbology.rendering.layout")


def slot_position(index: int) -> Tuple[float, float]:
    """
    Canvas position of a slot.

    Args:
        index: Slot index 0-25

    Returns:
        (x, y) of the slot's top-left corner, or the canvas centre for slot 12

    Raises:
        ValueError: If ``index`` is out of range

    Example:
        >>> slot_position(0), slot_position(12)
        ((16.66, 16.66), (50.0, 50.0))
    """
    if not 0 <= index < SLOT_COUNT:
        raise ValueError(f"Slot index must be 0-{SLOT_COUNT - 1}, got {index}")
    if index == CENTER_SLOT:
        return CANVAS_CENTER
    if index == EXTERIOR_SLOT:
        return EXTERIOR_OFFSET
    x, y = GRID_OFFSETS[index]
    return (round(float(x), 4), round(float(y), 4))


def build_slots(options: RenderOptions) -> List[SlotGroup]:
    """Create all 26 positioned slot containers.

    Suppressed slots are still created and positioned, only flagged. Debug
    mode adds a dashed outline to every cell except the anchor.
    """
    if CENTER_SLOT in options.elements_to_omit:
        logger.warning(
            f"Slot {CENTER_SLOT} cannot be omitted, it is the spatial reference "
            f"of the symbol. Rendering it anyway."
        )

    slots = []
    for index in range(SLOT_COUNT):
        x, y = slot_position(index)
        slot = SlotGroup(index=index, x=x, y=y, anchor=index == CENTER_SLOT)

        if options.omits(index):
            logger.warning(f"Omitting content of slot {index} as requested")
            slot.suppressed = True

        if options.debug and not slot.anchor:
            slot.add(OutlinePrimitive())

        slots.append(slot)
    return slots
