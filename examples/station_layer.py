"""
Station Layer Example

Builds station symbols for every point of a GeoJSON feature collection and
writes them to a directory together with a ``markers.json`` index that a web
map can read to place each symbol (size and anchor in pixels).

Prerequisites:
    - pymetdecoder installed
    - WMO symbol SVGs in ./symbols (or an http(s) base URL in icon_source)

Output:
    - SVG symbols in output/stations/
    - output/stations/markers.json
"""

import logging
from pathlib import Path

from station_symbology import BatchSymbolGenerator, Config, StationModelLayer, reset_defaults

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

geojson = {
    "type": "FeatureCollection",
    "features": [
        {
            "type": "Feature",
            "id": "13274",
            "geometry": {"type": "Point", "coordinates": [20.47, 44.80]},
            "properties": {"name": "Beograd", "synop": "AAXX 01004 13274 11582 62712 10094 20047 40197 52011"},
        },
        {
            "type": "Feature",
            "id": "94767",
            "geometry": {"type": "Point", "coordinates": [151.17, -33.95]},
            "properties": {"name": "Sydney", "synop": "AAXX 01004 94767 46/// /1510 10211 20150"},
        },
        {
            # No report: logged and skipped, never sent to the decoder
            "type": "Feature",
            "id": "00000",
            "geometry": {"type": "Point", "coordinates": [0.0, 0.0]},
            "properties": {"name": "Null Island"},
        },
    ],
}

config = Config(icon_source="./symbols", output_dir=Path("output/stations"), max_workers=4)

# ============================================================================
# Markers in memory
# ============================================================================

layer = StationModelLayer(geojson, field="synop", options={"highCloudsInRed": False})
for marker in layer.build_markers(parallel=True):
    print(f"{marker.feature_id}: size={marker.icon_size} anchor={marker.icon_anchor}")
print(f"Skipped features: {layer.skipped}")

# ============================================================================
# Symbols on disk
# ============================================================================

batch = BatchSymbolGenerator(geojson, field="synop", config=config)
result = batch.generate(parallel=True)

print(f"\nWrote {len(result['successful'])} symbols in {result['total_time']:.1f}s")
print(f"Failed: {result['failed']}  Skipped: {result['skipped']}")

reset_defaults()
