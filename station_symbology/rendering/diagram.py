"""
Vector diagram model of a station symbol.

A ``SymbolDiagram`` is a 100x100 canvas holding 26 slot groups and a list of
canvas-level overlays (wind glyphs, automatic-station triangle). Primitives
only describe what to draw and where; ``svg.py`` turns them into SVG markup.
"""

import logging
import xml.etree.ElementTree as ET
from concurrent.futures import Future
from dataclasses import dataclass, field
from pathlib import Path
from typing import Hashable, List, Optional, Tuple, Union

from ..constants import (
    CANVAS_SIZE,
    CELL_SIZE,
    DEBUG_OUTLINE_DASH,
    DEBUG_OUTLINE_STROKE,
    FONT_SCALE_OFFSET,
    STATION_MODEL_SCALE_OFFSET,
)

logger = logging.getLogger("station_symbology.rendering.diagram")

Point = Tuple[float, float]


@dataclass(frozen=True)
class Transform:
    """Local placement of a primitive.

    Applied as ``translate`` then ``rotate`` then ``scale``, all around
    ``origin`` (SVG ``transform-origin``) when one is given.
    """

    translate: Point = (0.0, 0.0)
    rotate: Optional[float] = None
    scale: Optional[float] = None
    origin: Optional[Point] = None

    def to_svg(self) -> str:
        parts = []
        if self.translate != (0.0, 0.0):
            parts.append(f"translate({fmt(self.translate[0])} {fmt(self.translate[1])})")
        if self.rotate is not None:
            parts.append(f"rotate({fmt(self.rotate)})")
        if self.scale is not None:
            parts.append(f"scale({fmt(self.scale)})")
        return " ".join(parts)

    def origin_to_svg(self) -> Optional[str]:
        if self.origin is None:
            return None
        return f"{fmt(self.origin[0])} {fmt(self.origin[1])}"


def fmt(value: float) -> str:
    """Compact number text for SVG attributes."""
    text = f"{float(value):.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def centered_transform(dx: float = 0.0, dy: float = 0.0, size: float = CELL_SIZE) -> Transform:
    """Shift from the slot position with the pivot at the cell centre."""
    return Transform(translate=(float(dx), float(dy)), origin=(size / 2, size / 2))


@dataclass
class IconPrimitive:
    """A WMO glyph from the icon library.

    ``pending`` holds the load in progress until the glyph is resolved into
    ``fragment``.
    """

    path: str
    width: float = CELL_SIZE
    height: float = CELL_SIZE
    transform: Transform = field(default_factory=centered_transform)
    color: Optional[str] = None
    fragment: Optional[ET.Element] = field(default=None, compare=False, repr=False)
    pending: Optional[Future] = field(default=None, compare=False, repr=False)

    kind = "icon"


@dataclass
class TextPrimitive:
    """A value or code printed centred in its cell."""

    text: str
    width: float = CELL_SIZE
    height: float = CELL_SIZE
    transform: Transform = field(default_factory=centered_transform)
    color: Optional[str] = None

    kind = "text"


@dataclass
class OutlinePrimitive:
    """Dashed cell outline drawn in debug mode."""

    width: float = CELL_SIZE
    height: float = CELL_SIZE
    stroke: str = DEBUG_OUTLINE_STROKE
    dash: str = DEBUG_OUTLINE_DASH

    kind = "outline"


Primitive = Union[IconPrimitive, TextPrimitive, OutlinePrimitive]


@dataclass
class SlotGroup:
    """One plotting model slot.

    Attributes:
        index: Slot index 0-25.
        x, y: Slot position on the canvas (top-left corner, or centre for the anchor).
        anchor: True for slot 12, the spatial reference of the symbol.
        suppressed: Content omitted at the user's request.
        color: Recolour applied to everything in the slot.
        primitives: Primitives in drawing order.
    """

    index: int
    x: float
    y: float
    anchor: bool = False
    suppressed: bool = False
    color: Optional[str] = None
    primitives: List[Primitive] = field(default_factory=list)

    def add(self, primitive: Primitive) -> Primitive:
        self.primitives.append(primitive)
        return primitive

    @property
    def content(self) -> List[Primitive]:
        """Primitives other than debug outlines."""
        return [p for p in self.primitives if p.kind != "outline"]

    @property
    def is_empty(self) -> bool:
        return not self.content

    def texts(self) -> List[str]:
        return [p.text for p in self.primitives if p.kind == "text"]

    def icon_paths(self) -> List[str]:
        return [p.path for p in self.primitives if p.kind == "icon"]


@dataclass
class SymbolDiagram:
    """A composed station symbol.

    Example:
        >>> diagram = compiler.compile(report, (45.0, 19.0))
        >>> diagram.slot(6).texts()
        ['9.4']
        >>> diagram.save("station.svg")
    """

    slots: List[SlotGroup]
    overlays: List[IconPrimitive] = field(default_factory=list)
    width: float = CANVAS_SIZE
    height: float = CANVAS_SIZE
    station_model_scale: float = 1.0
    font_scale: float = 1.0
    correlation_id: Optional[Hashable] = field(default=None, compare=False)
    decoded: bool = False
    raw_text: Optional[str] = None

    @property
    def scale(self) -> float:
        """Root scale factor (user factor + 0.7)."""
        return self.station_model_scale + STATION_MODEL_SCALE_OFFSET

    @property
    def font_size_em(self) -> float:
        """Root font size in em (user factor - 0.35)."""
        return self.font_scale + FONT_SCALE_OFFSET

    @property
    def icon_size(self) -> Tuple[float, float]:
        return (self.width, self.height)

    def slot(self, index: int) -> SlotGroup:
        return self.slots[index]

    def overlay_paths(self) -> List[str]:
        return [o.path for o in self.overlays]

    def to_element(self) -> ET.Element:
        from .svg import diagram_to_element
        return diagram_to_element(self)

    def to_svg(self) -> str:
        from .svg import diagram_to_string
        return diagram_to_string(self)

    def save(self, output_path: Union[str, Path]) -> str:
        from .svg import save_diagram
        return save_diagram(self, output_path)
