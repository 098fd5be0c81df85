"""
SVG serialization of symbol diagrams.

Slot and primitive recolouring is done with one SVG filter per colour (a
flood of the colour masked by the source alpha), declared once in ``<defs>``.
"""

import copy
import logging
import time
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from ..constants import SVG_NAMESPACE
from ..exceptions import RenderError
from .diagram import (
    IconPrimitive,
    OutlinePrimitive,
    Primitive,
    SlotGroup,
    SymbolDiagram,
    TextPrimitive,
    Transform,
    fmt,
)

logger = logging.getLogger("station_symbology.rendering.svg")

ET.register_namespace("", SVG_NAMESPACE)


def _tag(name: str) -> str:
    return f"{{{SVG_NAMESPACE}}}{name}"


def filter_id(color: str) -> str:
    """Filter id for a recolour, e.g. ``#ff0000`` -> ``recolor-ff0000``."""
    return "recolor-" + "".join(c for c in color.lower() if c.isalnum())


def _apply_transform(element: ET.Element, transform: Transform) -> None:
    value = transform.to_svg()
    if value:
        element.set("transform", value)
    origin = transform.origin_to_svg()
    if origin is not None:
        element.set("transform-origin", origin)


def _apply_color(element: ET.Element, color: Optional[str]) -> None:
    if color:
        element.set("filter", f"url(#{filter_id(color)})")


def _recolor_filter(color: str) -> ET.Element:
    flt = ET.Element(_tag("filter"), {
        "id": filter_id(color),
        "color-interpolation-filters": "sRGB",
    })
    ET.SubElement(flt, _tag("feFlood"), {"flood-color": color, "result": "flood"})
    ET.SubElement(flt, _tag("feComposite"), {"in": "flood", "in2": "SourceAlpha", "operator": "in"})
    return flt


def _used_colors(diagram: SymbolDiagram) -> Iterable[str]:
    seen: Dict[str, None] = {}
    for slot in diagram.slots:
        if slot.color:
            seen.setdefault(slot.color)
        for primitive in slot.primitives:
            color = getattr(primitive, "color", None)
            if color:
                seen.setdefault(color)
    for overlay in diagram.overlays:
        if overlay.color:
            seen.setdefault(overlay.color)
    return seen.keys()


# ============================================================================
# Primitives
# ============================================================================

def icon_to_element(icon: IconPrimitive) -> Optional[ET.Element]:
    """Embed an icon fragment as a nested ``<svg>`` element."""
    if icon.fragment is None:
        logger.debug(f"No fragment loaded for {icon.path}, skipping")
        return None

    element = copy.deepcopy(icon.fragment)
    # The nested svg keeps its own viewBox; our box replaces its size
    element.set("width", fmt(icon.width))
    element.set("height", fmt(icon.height))
    element.set("overflow", "visible")
    _apply_transform(element, icon.transform)
    _apply_color(element, icon.color)
    return element


def text_to_element(text: TextPrimitive) -> ET.Element:
    element = ET.Element(_tag("text"), {
        "x": fmt(text.width / 2),
        "y": fmt(text.height / 2),
        "dominant-baseline": "middle",
        "text-anchor": "middle",
    })
    element.text = text.text
    _apply_transform(element, text.transform)
    _apply_color(element, text.color)
    return element


def outline_to_element(outline: OutlinePrimitive) -> ET.Element:
    return ET.Element(_tag("rect"), {
        "width": fmt(outline.width),
        "height": fmt(outline.height),
        "fill": "none",
        "stroke": outline.stroke,
        "stroke-dasharray": outline.dash,
    })


def primitive_to_element(primitive: Primitive) -> Optional[ET.Element]:
    if isinstance(primitive, IconPrimitive):
        return icon_to_element(primitive)
    if isinstance(primitive, TextPrimitive):
        return text_to_element(primitive)
    if isinstance(primitive, OutlinePrimitive):
        return outline_to_element(primitive)
    raise RenderError(f"Unknown primitive type: {type(primitive).__name__}")


def slot_to_element(slot: SlotGroup) -> ET.Element:
    group = ET.Element(_tag("g"), {
        "class": f"slot slot-{slot.index}",
        "transform": f"translate({fmt(slot.x)} {fmt(slot.y)})",
    })
    if slot.anchor:
        group.set("class", group.get("class") + " anchor")
    if slot.suppressed:
        group.set("class", group.get("class") + " suppressed")
    _apply_color(group, slot.color)

    for primitive in slot.primitives:
        element = primitive_to_element(primitive)
        if element is not None:
            group.append(element)
    return group


# ============================================================================
# Diagram
# ============================================================================

def diagram_to_element(diagram: SymbolDiagram) -> ET.Element:
    """Build the root ``<svg>`` element of a diagram.

    Args:
        diagram: Composed symbol

    Returns:
        Root element; slots first (index order), then overlays.
    """
    root = ET.Element(_tag("svg"), {
        "width": fmt(diagram.width),
        "height": fmt(diagram.height),
        "viewBox": f"0 0 {fmt(diagram.width)} {fmt(diagram.height)}",
        "transform": f"scale({fmt(diagram.scale)})",
        "font-size": f"{fmt(diagram.font_size_em)}em",
        "style": "display: block",
    })

    colors = list(_used_colors(diagram))
    if colors:
        defs = ET.SubElement(root, _tag("defs"))
        for color in colors:
            defs.append(_recolor_filter(color))

    for slot in diagram.slots:
        root.append(slot_to_element(slot))

    for overlay in diagram.overlays:
        element = icon_to_element(overlay)
        if element is not None:
            root.append(element)

    return root


def diagram_to_string(diagram: SymbolDiagram) -> str:
    """Serialize a diagram to SVG markup."""
    try:
        return ET.tostring(diagram_to_element(diagram), encoding="unicode")
    except (TypeError, ValueError) as e:
        raise RenderError(f"Failed to serialize symbol: {e}") from e


def save_diagram(diagram: SymbolDiagram, output_path: Union[str, Path]) -> str:
    """
    Write a diagram to an SVG file.

    Args:
        diagram: Composed symbol
        output_path: Destination file; parent directories are created

    Returns:
        Path of the written file as a string

    Raises:
        RenderError: If the file cannot be written
    """
    start = time.perf_counter()
    output_path = Path(output_path)
    markup = diagram_to_string(diagram)

    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(markup, encoding="utf-8")
    except OSError as e:
        raise RenderError(f"Failed to save symbol to {output_path}: {e}") from e

    logger.debug(f"Saved symbol to {output_path} in {(time.perf_counter() - start) * 1000:.1f} ms")
    return str(output_path)
