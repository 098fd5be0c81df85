"""
Constants and fixed parameters for the station_symbology package.

This module defines the plotting model geometry, slot assignments, icon asset
paths, styling constants and decode backend defaults used throughout the
package.
"""

import numpy as np

# ============================================================================
# Canvas and Grid Geometry
# ============================================================================

CANVAS_SIZE = 100.0  # whole symbol is drawn on a 100x100 canvas
GRID_ORIGIN = (16.66, 16.66)  # top-left corner of the 5x5 grid
CELL_SIZE = 13.33  # width and height of one slot
GRID_COLUMNS = 5

SLOT_COUNT = 26  # 5x5 grid plus the exterior slot below it
CENTER_SLOT = 12
EXTERIOR_SLOT = 25
CANVAS_CENTER = (CANVAS_SIZE / 2, CANVAS_SIZE / 2)

# Top-left corner of every grid cell, row-major. Index 12 is overridden by
# the canvas center since it is the spatial anchor of the whole symbol.
_rows, _cols = np.divmod(np.arange(GRID_COLUMNS * GRID_COLUMNS), GRID_COLUMNS)
GRID_OFFSETS = np.column_stack((
    GRID_ORIGIN[0] + _cols * CELL_SIZE,
    GRID_ORIGIN[1] + _rows * CELL_SIZE,
))
# Centre column, one row below the grid
EXTERIOR_OFFSET = (GRID_ORIGIN[0] + 2 * CELL_SIZE, GRID_ORIGIN[1] + 5 * CELL_SIZE)

# Root scaling applied on top of the user factors (default 1 => 1.7 / 0.65em)
STATION_MODEL_SCALE_OFFSET = 0.7
FONT_SCALE_OFFSET = -0.35

# ============================================================================
# Slot Assignments
# ============================================================================

# Defined as empty by the WMO plotting model
EMPTY_SLOTS = frozenset({4, 5, 9, 15, 20, 24})

SLOT_NAMES = {
    0: "TgTg",
    1: "TxTxTx/TnTnTn",
    2: "CH",
    3: "E/E'sss",
    6: "TTT",
    7: "CM",
    8: "PPPP",
    10: "VV",
    11: "ww/wawa",
    12: "N ddff",
    13: "ppp",
    14: "a",
    16: "TdTdTd",
    17: "CL Nh h",
    18: "W1W2/Wa1Wa2",
    19: "GG",
    21: "TwTwTw",
    22: "PwaPwaHwaHwa",
    23: "RRR/tR",
    25: "dw1dw1Pw1Pw1Hw1Hw1",
}

# ============================================================================
# Icon Assets
# ============================================================================

ICON_PATHS = {
    "high_cloud": "CH_CloudHigh/WeatherSymbol_WMO_CloudHigh_CH_{code}.svg",
    "middle_cloud": "CM_CloudMedium/WeatherSymbol_WMO_CloudMedium_CM_{code}.svg",
    "low_cloud": "CL_CloudLow/WeatherSymbol_WMO_CloudLow_CL_{code}.svg",
    "present_weather_manned": "ww_PresentWeather/WeatherSymbol_WMO_PresentWeather_ww_{code}.svg",
    "present_weather_automatic": (
        "wawa_PresentWeatherAutomaticStation/"
        "WeatherSymbol_WMO_PresentWeatherAutomaticStation_wawa_{code}.svg"
    ),
    "past_weather_manned": "W1W2_PastWeather/WeatherSymbol_WMO_PastWeather_W1W2_{code}.svg",
    "past_weather_automatic": (
        "Wa1Wa2_PastWeatherAutomaticStation/"
        "WeatherSymbol_WMO_PastWeatherAutomaticStation_Wa1Wa1_{code}.svg"
    ),
    "cloud_cover": "N_TotalCloudCover/WeatherSymbol_WMO_TotalCloudCover_N_{code}.svg",
    "automatic_station": "N_TotalCloudCover/WeatherSymbol_WMO_TotalCloudCover_Automatic.svg",
    "pressure_tendency": (
        "a_PressureTendencyCharacteristic/"
        "WeatherSymbol_WMO_PressureTendencyCharacteristic_a_{code}.svg"
    ),
    "wind_calm": "ddff_WindArrows/WeatherSymbol_WMO_WindArrowCalm_00.svg",
    "wind_north": "ddff_WindArrows/WeatherSymbol_WMO_WindArrowNH_{code}.svg",
    "wind_south": "ddff_WindArrows/WeatherSymbol_WMO_WindArrowSH_{code}.svg",
    "wind_missing_speed": "ddff_WindArrows/WeatherSymbol_WMO_WindArrowMissing_99.svg",
}

CLOUD_COVER_SLASH_CODE = "Slash"

# Manned past weather code 3 has two glyphs (sandstorm / snowstorm)
PAST_WEATHER_MANNED_VARIANTS = {3: "3a"}
PAST_WEATHER_MANNED_SUPPRESSED = frozenset({0, 1, 2})

# ============================================================================
# Wind Glyph Geometry
# ============================================================================

WIND_SPEED_STEP = {
    "m/s": 2.5,  # smallest barb is 2.5 m/s
    "KT": 5.0,   # smallest barb is 5 kt
}
CALM_SYMBOL_INDICES = frozenset({"00", "01"})

WIND_ICON_SIZE = 30.0
CALM_ICON_SIZE = 25.0
CALM_ICON_SCALE = 0.8
AUTOMATIC_ICON_SIZE = 24.0

# Pivot of each glyph relative to its own top-left corner
WIND_PIVOT_NORTH = (35.666, 18.666)
WIND_PIVOT_SOUTH = (-6.666, 18.666)
WIND_PIVOT_MISSING = (36.66, 15.66)

# Built-in heading of the glyphs differs from north, corrected per hemisphere
WIND_ROTATION_OFFSET_NORTH = 90.0
WIND_ROTATION_OFFSET_SOUTH = -90.0

# ============================================================================
# Styling Constants
# ============================================================================

DEFAULT_HIGHLIGHT_COLOR = "red"
DEBUG_OUTLINE_STROKE = "#00000052"
DEBUG_OUTLINE_DASH = "2"
DEBUG_PLACEHOLDER_TEXT = "x"
MISSING_TEXT = "//"
PRECIP_NOT_OBSERVED_TEXT = "///"

SVG_NAMESPACE = "http://www.w3.org/2000/svg"

# ============================================================================
# Decode Backend
# ============================================================================

DECODE_TIMEOUT_S = 10.0
ICON_HTTP_TIMEOUT_S = 10.0
ICON_PREFETCH_WORKERS = 4
