import pytest

from station_symbology.calculations import (
    format_number,
    precipitation_amount_text,
    pressure_tendency_text,
    round_half_up,
    sea_level_pressure_code,
    temperature_text,
    zero_padded_code,
)


@pytest.mark.parametrize("value, expected", [(2.5, 3), (-2.5, -2), (4.8, 5), (4.4, 4), (0.5, 1)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_format_number_drops_trailing_zero():
    assert format_number(3.0) == "3"
    assert format_number(9.4) == "9.4"
    assert format_number(-1) == "-1"


def test_temperature_text_modes():
    assert temperature_text(10.7) == "10.7"
    assert temperature_text(10.7, "rounded") == "11"
    assert temperature_text(-0.5, "rounded") == "0"
    assert temperature_text(3.0) == "3"


@pytest.mark.parametrize("value, expected", [
    (1013.4, "134"),
    (1005, "050"),
    (992.5, "925"),
    (1000, "000"),
    (1019.7, "197"),
])
def test_sea_level_pressure_code(value, expected):
    assert sea_level_pressure_code(value) == expected


def test_pressure_tendency_two_figures():
    assert pressure_tendency_text(4.7) == ("47", False)
    assert pressure_tendency_text(0.1) == ("01", False)
    assert pressure_tendency_text(9.9) == ("99", False)


def test_pressure_tendency_falling_sign_or_colour():
    assert pressure_tendency_text(-9.9, poly_chromatic=False) == ("-99", False)
    assert pressure_tendency_text(-9.9) == ("99", True)


def test_pressure_tendency_large_changes_are_unsigned():
    assert pressure_tendency_text(12.2) == ("122", False)
    assert pressure_tendency_text(12.3) == ("123", False)
    assert pressure_tendency_text(-12.3, poly_chromatic=False) == ("123", False)
    assert pressure_tendency_text(-12.3) == ("123", True)


def test_precipitation_amount_text():
    assert precipitation_amount_text(0.5) == ".5"
    assert precipitation_amount_text(5) == "5"
    assert precipitation_amount_text(5.0) == "5"
    assert precipitation_amount_text(12.5) == "12.5"


def test_zero_padded_code():
    assert zero_padded_code(2) == "02"
    assert zero_padded_code(61) == "61"
    assert zero_padded_code(None) is None
