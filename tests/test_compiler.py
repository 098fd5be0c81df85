import logging
import threading

import pytest

from station_symbology.config import Config
from station_symbology.data import DecodingOrchestrator
from station_symbology.exceptions import BackendInitError, InvalidParameterError
from station_symbology.rendering import StationSymbolCompiler

from .conftest import AUTOMATIC_REPORT, MANNED_REPORT, FakeBackend


@pytest.fixture
def compiler(orchestrator, icons):
    return StationSymbolCompiler(orchestrator, icons, Config(decode_timeout=2.0))


def test_compile_manned_report(compiler):
    diagram = compiler.compile(MANNED_REPORT, (45.0, 19.0))

    assert diagram.decoded
    assert diagram.raw_text == MANNED_REPORT
    assert len(diagram.slots) == 26
    assert diagram.slot(6).texts() == ["9.4"]
    [wind] = diagram.overlays
    assert wind.path.endswith("WindArrowNH_05.svg")
    assert wind.transform.rotate == 360.0
    assert wind.fragment is not None and wind.pending is None
    assert all(p.fragment is not None for s in diagram.slots for p in s.primitives if p.kind == "icon")


def test_compile_automatic_report(compiler):
    diagram = compiler.compile(AUTOMATIC_REPORT, (-33.0, 151.0))

    assert [p.rsplit("_", 1)[-1] for p in diagram.overlay_paths()] == ["Automatic.svg", "00.svg"]


def test_empty_report_gives_empty_symbol(compiler, backend):
    for text in ("", None):
        diagram = compiler.compile(text, (45.0, 19.0))
        assert not diagram.decoded
        assert all(s.is_empty for s in diagram.slots)
        assert diagram.overlays == []
    assert backend.calls == []


def test_undecodable_report_gives_empty_symbol(compiler, caplog):
    caplog.set_level(logging.WARNING, logger="station_symbology")
    diagram = compiler.compile("NOT A SYNOP", (45.0, 19.0))

    assert not diagram.decoded
    assert all(s.is_empty for s in diagram.slots)
    assert "could not be decoded" in caplog.text


def test_timeout_gives_empty_symbol(icons, caplog):
    caplog.set_level(logging.WARNING, logger="station_symbology")
    gate = threading.Event()
    backend = FakeBackend({MANNED_REPORT: {"air_temperature": {"value": 1}}}, decode_gate=gate)
    orch = DecodingOrchestrator(backend_factory=lambda: backend)
    compiler = StationSymbolCompiler(orch, icons, Config(decode_timeout=0.05))
    try:
        diagram = compiler.compile(MANNED_REPORT, (45.0, 19.0), correlation_id="slow")
    finally:
        gate.set()
        orch.shutdown()

    assert not diagram.decoded
    assert diagram.correlation_id == "slow"
    assert all(s.is_empty for s in diagram.slots)
    assert "timed out" in caplog.text


def test_backend_failure_propagates(icons):
    backend = FakeBackend(load_error=ImportError("pymetdecoder missing"))
    orch = DecodingOrchestrator(backend_factory=lambda: backend)
    orch.initialize()
    compiler = StationSymbolCompiler(orch, icons, Config(decode_timeout=2.0))
    try:
        with pytest.raises(BackendInitError):
            compiler.compile(MANNED_REPORT, (45.0, 19.0))
    finally:
        orch.shutdown()


@pytest.mark.parametrize("coordinates", [(91.0, 0.0), (-91.0, 0.0), (0.0, 181.0)])
def test_invalid_coordinates(compiler, coordinates):
    with pytest.raises(InvalidParameterError):
        compiler.compile(MANNED_REPORT, coordinates)


def test_invalid_options(compiler):
    with pytest.raises(InvalidParameterError):
        compiler.compile(MANNED_REPORT, (45.0, 19.0), {"temperature": "kelvin"})


def test_options_mapping_and_scaling(compiler):
    options = {"elementsToOmit": [6], "scaling": {"stationModel": 2, "font": 1.5}}
    diagram = compiler.compile(MANNED_REPORT, (45.0, 19.0), options)

    assert diagram.slot(6).suppressed and diagram.slot(6).is_empty
    assert diagram.scale == pytest.approx(2.7)
    assert diagram.font_size_em == pytest.approx(1.15)


def test_compile_is_idempotent(compiler):
    first = compiler.compile(MANNED_REPORT, (45.0, 19.0))
    second = compiler.compile(MANNED_REPORT, (45.0, 19.0))

    assert first.correlation_id != second.correlation_id
    assert first == second
    assert first.to_svg() == second.to_svg()


def test_highlight_colour_from_config(orchestrator, icons):
    compiler = StationSymbolCompiler(orchestrator, icons, Config(highlight_color="crimson"))
    diagram = compiler.compile(MANNED_REPORT, (45.0, 19.0))

    assert diagram.slot(2).color == "#dc143c"


def test_compile_observation_without_decoding(compiler, manned_decoded, backend):
    from station_symbology.data import DecodedObservation

    diagram = compiler.compile_observation(DecodedObservation.from_dict(manned_decoded), (45.0, 19.0))

    assert diagram.decoded
    assert diagram.slot(8).texts() == ["197"]
    assert backend.calls == []


def test_manned_present_weather_glyph(icons, manned_decoded):
    report = "AAXX 01004 13274 11582 62712 10094 70500"
    manned_decoded["present_weather"] = {"value": 5}
    backend = FakeBackend({report: manned_decoded})
    orch = DecodingOrchestrator(backend_factory=lambda: backend)
    compiler = StationSymbolCompiler(orch, icons, Config(decode_timeout=2.0))
    try:
        diagram = compiler.compile(report, (44.8, 20.5))
    finally:
        orch.shutdown()

    [icon] = diagram.slot(11).primitives
    assert icon.path.endswith("WeatherSymbol_WMO_PresentWeather_ww_05.svg")
    assert icon.fragment is not None
