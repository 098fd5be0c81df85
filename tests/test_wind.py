import logging

import pytest

from station_symbology.data import DecodedObservation
from station_symbology.rendering.wind import (
    automatic_station_overlay,
    build_wind_overlays,
    hemisphere_sign,
    wind_speed_symbol_match,
)


def wind_obs(direction=270, speed=12, unit="m/s"):
    wind = {"direction": None if direction is None else {"value": direction}}
    if speed is not None:
        wind["speed"] = {"value": speed, "unit": unit}
    return DecodedObservation.from_dict({"surface_wind": wind})


@pytest.mark.parametrize("speed, unit, expected", [
    (12, "m/s", "05"),
    (3.75, "m/s", "02"),
    (16, "KT", "03"),
    (2, "KT", "00"),
    (50, "KT", "10"),
    (37.5, "m/s", "15"),
    (124, "KT", "25"),
])
def test_wind_speed_symbol_match(speed, unit, expected):
    assert wind_speed_symbol_match(speed, unit) == expected


def test_unknown_unit_logs_error(caplog):
    caplog.set_level(logging.ERROR, logger="station_symbology")
    assert wind_speed_symbol_match(10, "km/h") is None
    assert "Unknown wind speed unit" in caplog.text


def test_hemisphere_sign():
    assert hemisphere_sign(45.0) == 1
    assert hemisphere_sign(0.0) == -1
    assert hemisphere_sign(-30.0) == -1


def test_northern_hemisphere_barb(icons):
    [overlay] = build_wind_overlays(wind_obs(), 45.0, icons)

    assert overlay.path == "ddff_WindArrows/WeatherSymbol_WMO_WindArrowNH_05.svg"
    assert overlay.transform.rotate == 360.0
    assert overlay.transform.translate == pytest.approx((14.334, 31.334))
    assert overlay.transform.origin == (35.666, 18.666)
    assert (overlay.width, overlay.height) == (30.0, 30.0)


def test_southern_hemisphere_barb(icons):
    [overlay] = build_wind_overlays(wind_obs(), -45.0, icons)

    assert overlay.path == "ddff_WindArrows/WeatherSymbol_WMO_WindArrowSH_05.svg"
    assert overlay.transform.rotate == 180.0
    assert overlay.transform.origin == (-6.666, 18.666)


def test_calm_is_centred_and_scaled(icons):
    [overlay] = build_wind_overlays(wind_obs(speed=2, unit="KT"), 45.0, icons)

    assert overlay.path.endswith("WindArrowCalm_00.svg")
    assert overlay.transform.scale == 0.8
    assert overlay.transform.rotate is None
    assert overlay.transform.translate == (37.5, 37.5)
    assert overlay.width == 25.0


def test_missing_speed_draws_shaft(icons):
    [overlay] = build_wind_overlays(wind_obs(direction=90, speed=None), -10.0, icons)

    assert overlay.path.endswith("WindArrowMissing_99.svg")
    assert overlay.transform.rotate == 180.0
    assert overlay.transform.origin == (36.66, 15.66)


def test_no_direction_no_wind(icons):
    assert build_wind_overlays(wind_obs(direction=None), 45.0, icons) == []
    assert build_wind_overlays(DecodedObservation.from_dict({}), 45.0, icons) == []


def test_unknown_unit_draws_nothing(icons):
    assert build_wind_overlays(wind_obs(unit="km/h"), 45.0, icons) == []


def test_automatic_station_triangle(icons):
    overlay = automatic_station_overlay(icons)

    assert overlay.path.endswith("TotalCloudCover_Automatic.svg")
    assert overlay.transform.translate == (38.0, 36.0)
    assert overlay.transform.origin == (12.0, 12.0)
    assert overlay.width == 24.0
