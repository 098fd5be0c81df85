"""
Basic Station Symbol Example

This example demonstrates how to create a single station model symbol using
the station_symbology package. It shows the simplest workflow: pass a raw
SYNOP report and the station coordinates, then save the composed symbol.

Output: An SVG file with the station circle, wind barb, temperature, dew
point, pressure, cloud and weather glyphs arranged on the WMO plotting model.

Icons are read from ./symbols (the WMO weather symbol SVG set laid out in
its usual sub-directories); point ``icon_source`` at an http(s) base URL to
fetch them from a web server instead.
"""

from pathlib import Path

from station_symbology import (
    BackendInitError,
    Config,
    RenderError,
    create_symbol,
    reset_defaults,
)

# ============================================================================
# Basic Symbol Generation
# ============================================================================

report = "AAXX 01004 88889 11582 62712 10094 20047 40197 52011 60051 76162 85302"
latitude = 45.25  # Northern hemisphere: barbs drawn left of the shaft
longitude = 19.85

print(f"Creating station symbol:")
print(f"  Report: {report}")
print(f"  Station: ({latitude}, {longitude})")
print()

config = Config(icon_source="./symbols", highlight_color="red")

try:
    output_path = create_symbol(
        report,
        latitude=latitude,
        longitude=longitude,
        options={
            "polyChromatic": True,
            "temperature": "rounded",
            "dewPoint": "rounded",
        },
        output_path=Path("output/basic_symbol.svg"),
        config=config,
    )
    print(f"Success! Symbol saved to: {output_path}")
    print()
    print("The symbol displays:")
    print("  - Total cloud cover in the station circle")
    print("  - Wind barb for 270 deg, 12 m/s")
    print("  - Temperature and dew point (rounded)")
    print("  - Sea-level pressure code and pressure change")
    print("  - Present and past weather glyphs")

except BackendInitError as e:
    print(f"Error creating symbol (decoder unavailable): {e}")
    print()
    print("Common issues:")
    print("  - Verify 'pymetdecoder' is installed")

except RenderError as e:
    print(f"Error creating symbol (save failed): {e}")

# ============================================================================
# Debug Layout
# ============================================================================

# Debug mode outlines every slot and marks slots without a rule with an "x",
# which helps when checking glyph placement.
try:
    diagram = create_symbol(report, latitude, longitude, options={"debug": True}, config=config)
    print(f"\nDebug symbol: {sum(not s.is_empty for s in diagram.slots)} slots with content")
    diagram.save("output/basic_symbol_debug.svg")
except (BackendInitError, RenderError) as e:
    print(f"Error: {e}")
finally:
    reset_defaults()
