"""
Plot-code conversions for station model values.

WMO plotting rules print several values in abbreviated form: sea-level
pressure as its last three figures in tenths of a hPa, the 3-hour pressure
change in two or three figures, precipitation amounts without a leading
zero. These helpers turn decoded values into the exact text plotted.
"""

import logging
from typing import Optional, Tuple, Union

import numpy as np

logger = logging.getLogger("station_symbology.calculations.codes")

Number = Union[int, float]


def round_half_up(value: Number) -> int:
    """Round to the nearest integer, halves rounded towards +infinity.

    Python's ``round`` rounds halves to even, which would plot 2.5 as 2.

    Example:
        >>> round_half_up(2.5), round_half_up(-2.5), round_half_up(4.8)
        (3, -2, 5)
    """
    return int(np.floor(float(value) + 0.5))


def format_number(value: Number) -> str:
    """Plain text of a decoded number; whole floats lose their ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def temperature_text(value: Number, mode: str = "raw") -> str:
    """
    Text for an air or dew-point temperature.

    Args:
        value: Temperature in degrees Celsius (e.g. 10.7)
        mode: "raw" plots the reported value, "rounded" the nearest degree

    Returns:
        Plotted text ("10.7" or "11")
    """
    if mode == "rounded":
        return str(round_half_up(value))
    return format_number(value)


def sea_level_pressure_code(value: Number) -> str:
    """
    Three-figure plot code for sea-level pressure.

    Whole hPa values keep their last two figures followed by "0"; values with
    tenths keep the last three figures of the value in tenths.

    Args:
        value: Pressure in hPa

    Returns:
        Three-character code

    Example:
        >>> sea_level_pressure_code(1013.4), sea_level_pressure_code(1005), sea_level_pressure_code(992.5)
        ('134', '050', '925')
    """
    if float(value).is_integer():
        return f"{int(value) % 100:02d}0"
    return f"{round_half_up(float(value) * 10) % 1000:03d}"


def pressure_tendency_text(change: Number, poly_chromatic: bool = True) -> Tuple[str, bool]:
    """
    Plot text for the 3-hour pressure change.

    Changes up to 9.9 hPa are plotted as two figures of tenths, larger ones as
    three figures. A falling pressure is shown with a leading "-", except in
    polychromatic mode where colour carries the sign instead.

    Args:
        change: Pressure change in hPa (negative when falling)
        poly_chromatic: Whether colour conveys the sign

    Returns:
        Tuple of (text, highlight) where highlight is True when the value
        must be drawn in the highlight colour.

    Example:
        >>> pressure_tendency_text(4.7)
        ('47', False)
        >>> pressure_tendency_text(-9.9, poly_chromatic=False)
        ('-99', False)
        >>> pressure_tendency_text(-9.9)
        ('99', True)
    """
    tenths = round_half_up(abs(float(change)) * 10)
    falling = change < 0
    highlight = poly_chromatic and falling

    if abs(change) <= 9.9:
        text = f"{tenths:02d}"
        if falling and not highlight:
            text = "-" + text
    else:
        text = f"{tenths:03d}"

    return text, highlight


def precipitation_amount_text(amount: Number) -> str:
    """Precipitation amount text; amounts between 0 and 1 drop the leading zero."""
    text = format_number(amount)
    if 0 < amount < 1 and text.startswith("0"):
        return text[1:]
    return text


def zero_padded_code(code: Optional[Number], width: int = 2) -> Optional[str]:
    """Zero-pad an integer code for use in an icon file name."""
    if code is None:
        return None
    return str(int(code)).zfill(width)
