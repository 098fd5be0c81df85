import copy
import logging
import threading

import pytest

from station_symbology.data import DecodingOrchestrator
from station_symbology.rendering.assets import IconLibrary

SVG_NS = "http://www.w3.org/2000/svg"


def icon_markup(path):
    """Minimal glyph whose only content identifies where it came from."""
    return (
        f'<svg xmlns="{SVG_NS}" viewBox="0 0 10 10">'
        f'<title>{path}</title><circle cx="5" cy="5" r="4"/></svg>'
    ).encode("utf-8")


class MemoryIconSource:
    """Icon source serving every path except the ones listed as missing."""

    def __init__(self, missing=()):
        self.missing = set(missing)
        self.requests = []
        self._lock = threading.Lock()

    def fetch(self, path):
        with self._lock:
            self.requests.append(path)
        if path in self.missing:
            return None
        return icon_markup(path)


class FakeBackend:
    """Stand-in for the SYNOP decoder.

    ``load_gate`` delays start-up until set, ``decode_gate`` delays every
    decode until set and ``load_error`` makes start-up fail.
    """

    def __init__(self, results=None, load_gate=None, decode_gate=None, load_error=None):
        self.results = results or {}
        self.load_gate = load_gate
        self.decode_gate = decode_gate
        self.load_error = load_error
        self.calls = []
        self.load_calls = 0

    def load(self):
        self.load_calls += 1
        if self.load_gate is not None:
            self.load_gate.wait(5)
        if self.load_error is not None:
            raise self.load_error

    def decode(self, raw_text):
        if self.decode_gate is not None:
            self.decode_gate.wait(5)
        self.calls.append(raw_text)
        result = self.results.get(raw_text)
        return copy.deepcopy(result) if result is not None else None


# A manned report with every group the plotting rules read
MANNED_REPORT = "AAXX 01004 88889 11582 62712 10094 20047 40197 52011 60051 76162 85302"
MANNED_DECODED = {
    "weather_indicator": {"value": 1, "automatic": False},
    "precipitation_indicator": {"value": 1, "in_group_1": True, "in_group_3": False},
    "lowest_cloud_base": {"_code": 5, "min": 600, "max": 1000},
    "visibility": {"_code": 82, "value": 30000, "unit": "m"},
    "cloud_cover": {"_code": 6, "value": 6, "unit": "okta"},
    "surface_wind": {
        "direction": {"value": 270, "unit": "deg"},
        "speed": {"value": 12, "unit": "m/s"},
    },
    "air_temperature": {"value": 9.4, "unit": "Cel"},
    "dewpoint_temperature": {"value": 4.7, "unit": "Cel"},
    "sea_level_pressure": {"value": 1019.7, "unit": "hPa"},
    "pressure_tendency": {"tendency": {"value": 2}, "change": {"value": 1.1, "unit": "hPa"}},
    "precipitation_s1": {"amount": {"value": 5, "unit": "mm"}, "time_before_obs": {"_code": 1, "value": 6}},
    "present_weather": {"value": 61},
    "past_weather": [{"value": 6}, {"value": 2}],
    "cloud_types": {
        "low_cloud_amount": {"value": 3},
        "low_cloud_type": {"value": 5},
        "middle_cloud_type": {"value": 3},
        "high_cloud_type": {"value": 2},
    },
}

AUTOMATIC_REPORT = "AAXX 01004 88890 46/// /0000 10021"
AUTOMATIC_DECODED = {
    "weather_indicator": {"value": 7, "automatic": True},
    "cloud_cover": None,
    "surface_wind": {
        "direction": {"value": 180, "unit": "deg"},
        "speed": {"value": 2, "unit": "KT"},
    },
    "air_temperature": {"value": 2.1, "unit": "Cel"},
    "past_weather": [{"value": 3}, {"value": 4}],
}


@pytest.fixture(autouse=True)
def package_logger():
    """Let caplog see package records and undo any setup_logging() call."""
    logger = logging.getLogger("station_symbology")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    logger.propagate = True
    yield logger
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def manned_decoded():
    return copy.deepcopy(MANNED_DECODED)


@pytest.fixture
def automatic_decoded():
    return copy.deepcopy(AUTOMATIC_DECODED)


@pytest.fixture
def icon_source():
    return MemoryIconSource()


@pytest.fixture
def icons(icon_source):
    library = IconLibrary(icon_source)
    yield library
    library.close()


@pytest.fixture
def backend():
    return FakeBackend({MANNED_REPORT: MANNED_DECODED, AUTOMATIC_REPORT: AUTOMATIC_DECODED})


@pytest.fixture
def orchestrator(backend):
    orch = DecodingOrchestrator(backend_factory=lambda: backend, default_timeout=2.0)
    yield orch
    orch.shutdown()
