"""
Value conversions for station_symbology.

This module provides the numeric rules that turn decoded observation values
into the text printed on a station model:
- Sea-level pressure three-figure codes
- Pressure tendency two/three-figure text and sign handling
- Temperature raw/rounded text
- Precipitation amount text

Example:
    >>> from station_symbology.calculations import sea_level_pressure_code
    >>> sea_level_pressure_code(1013.4)
    '134'
"""

from .codes import (
    round_half_up,
    format_number,
    temperature_text,
    sea_level_pressure_code,
    pressure_tendency_text,
    precipitation_amount_text,
    zero_padded_code,
)

__all__ = [
    "round_half_up",
    "format_number",
    "temperature_text",
    "sea_level_pressure_code",
    "pressure_tendency_text",
    "precipitation_amount_text",
    "zero_padded_code",
]
