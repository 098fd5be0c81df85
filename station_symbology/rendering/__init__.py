"""
Rendering subsystem for station_symbology.

This module composes station symbols from decoded observations and serializes
them as SVG. Layout, per-slot rules and wind geometry are kept separate so
each can be tested on its own against synthetic observations.

Main Classes:
    StationSymbolCompiler: Decodes a report and composes its symbol
    SymbolDiagram: Composed symbol (26 slots plus canvas overlays)
    IconLibrary: WMO glyph lookup from a directory or HTTP base URL

Key Features:
    - 5x5 plotting model grid anchored on the station circle (slot 12)
    - Table of independent per-slot rules
    - Hemisphere-aware wind barbs and calm/missing-speed glyphs
    - Concurrent icon loading with an optional in-memory cache
    - Slot recolouring through SVG filters

Example:
    >>> from station_symbology.rendering import StationSymbolCompiler
    >>>
    >>> compiler = StationSymbolCompiler()
    >>> diagram = compiler.compile("AAXX 01004 88889 12782 61506 10094", (45.0, 19.0))
    >>> svg_text = diagram.to_svg()
"""

from .assets import DirectoryIconSource, HttpIconSource, IconLibrary, icon_path
from .diagram import (
    IconPrimitive,
    OutlinePrimitive,
    SlotGroup,
    SymbolDiagram,
    TextPrimitive,
    Transform,
)
from .layout import build_slots, slot_position
from .rules import SLOT_RULES, RuleContext, apply_rules
from .wind import build_wind_overlays, hemisphere_sign, wind_speed_symbol_match
from .compiler import StationSymbolCompiler

__all__ = [
    "DirectoryIconSource",
    "HttpIconSource",
    "IconLibrary",
    "icon_path",
    "IconPrimitive",
    "OutlinePrimitive",
    "SlotGroup",
    "SymbolDiagram",
    "TextPrimitive",
    "Transform",
    "build_slots",
    "slot_position",
    "SLOT_RULES",
    "RuleContext",
    "apply_rules",
    "build_wind_overlays",
    "hemisphere_sign",
    "wind_speed_symbol_match",
    "StationSymbolCompiler",
]
