import xml.etree.ElementTree as ET

import pytest

from station_symbology.config import RenderOptions
from station_symbology.exceptions import RenderError
from station_symbology.rendering.diagram import (
    IconPrimitive,
    SlotGroup,
    SymbolDiagram,
    TextPrimitive,
    Transform,
    centered_transform,
    fmt,
)
from station_symbology.rendering.layout import build_slots
from station_symbology.rendering.svg import diagram_to_element, filter_id, save_diagram

NS = "{http://www.w3.org/2000/svg}"


def fragment():
    return ET.fromstring('<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10"><path d="M0 0"/></svg>')


def test_fmt():
    assert fmt(50.0) == "50"
    assert fmt(14.334000001) == "14.334"
    assert fmt(-0.00001) == "0"


def test_transform_to_svg():
    transform = Transform(translate=(14.334, 31.334), rotate=360.0, origin=(35.666, 18.666))
    assert transform.to_svg() == "translate(14.334 31.334) rotate(360)"
    assert transform.origin_to_svg() == "35.666 18.666"
    assert Transform().to_svg() == ""
    assert centered_transform().origin == (6.665, 6.665)


def test_filter_id():
    assert filter_id("#FF0000") == "recolor-ff0000"


def test_root_element_attributes():
    diagram = SymbolDiagram(slots=build_slots(RenderOptions()), station_model_scale=1.0, font_scale=1.0)
    root = diagram_to_element(diagram)

    assert root.tag == NS + "svg"
    assert root.get("viewBox") == "0 0 100 100"
    assert root.get("transform") == "scale(1.7)"
    assert root.get("font-size") == "0.65em"
    groups = root.findall(NS + "g")
    assert len(groups) == 26
    assert groups[12].get("class") == "slot slot-12 anchor"
    assert groups[0].get("transform") == "translate(16.66 16.66)"


def test_recoloured_slot_gets_filter():
    slot = SlotGroup(index=2, x=10, y=10, color="#ff0000")
    slot.add(TextPrimitive("x"))
    root = diagram_to_element(SymbolDiagram(slots=[slot]))

    flt = root.find(f"{NS}defs/{NS}filter")
    assert flt.get("id") == "recolor-ff0000"
    assert flt.find(NS + "feFlood").get("flood-color") == "#ff0000"
    assert root.find(NS + "g").get("filter") == "url(#recolor-ff0000)"


def test_no_defs_without_colour():
    root = diagram_to_element(SymbolDiagram(slots=build_slots(RenderOptions())))
    assert root.find(NS + "defs") is None


def test_text_and_icon_elements():
    slot = SlotGroup(index=6, x=0, y=0)
    slot.add(TextPrimitive("9.4"))
    slot.add(IconPrimitive("a.svg", fragment=fragment(), transform=centered_transform(-1.333, 0)))
    slot.add(IconPrimitive("missing.svg"))
    group = diagram_to_element(SymbolDiagram(slots=[slot])).find(NS + "g")

    text, icon = list(group)
    assert text.text == "9.4"
    assert text.get("text-anchor") == "middle"
    assert icon.get("width") == "13.33"
    assert icon.get("transform") == "translate(-1.333 0)"
    assert icon.get("transform-origin") == "6.665 6.665"
    assert icon.find(NS + "path") is not None


def test_overlays_follow_slots():
    overlay = IconPrimitive("wind.svg", width=30, height=30, fragment=fragment())
    root = diagram_to_element(SymbolDiagram(slots=build_slots(RenderOptions()), overlays=[overlay]))

    children = [c for c in root if c.tag != NS + "defs"]
    assert len(children) == 27
    assert children[-1].tag == NS + "svg"
    assert children[-1].get("width") == "30"


def test_icon_fragment_is_not_modified():
    original = fragment()
    slot = SlotGroup(index=0, x=0, y=0)
    slot.add(IconPrimitive("a.svg", fragment=original))
    diagram_to_element(SymbolDiagram(slots=[slot]))

    assert original.get("width") is None


def test_to_svg_parses(tmp_path):
    diagram = SymbolDiagram(slots=build_slots(RenderOptions(debug=True)))
    markup = diagram.to_svg()
    assert ET.fromstring(markup).tag == NS + "svg"

    path = diagram.save(tmp_path / "nested" / "station.svg")
    assert path.endswith("station.svg")
    assert ET.parse(path).getroot().get("viewBox") == "0 0 100 100"


def test_save_failure_raises_render_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("")
    with pytest.raises(RenderError):
        save_diagram(SymbolDiagram(slots=[]), blocker / "station.svg")
