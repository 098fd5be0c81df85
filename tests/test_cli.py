import json
import sys
import xml.etree.ElementTree as ET

import pytest
import yaml

from station_symbology import api, cli

from .conftest import AUTOMATIC_REPORT, MANNED_REPORT

NS = "{http://www.w3.org/2000/svg}"


@pytest.fixture
def defaults(monkeypatch, orchestrator):
    monkeypatch.setattr(api, "_default_orchestrator", orchestrator)
    monkeypatch.setattr(api, "_default_compiler", None)
    return orchestrator


def run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["station-symbology", *argv])
    return cli.main()


def test_no_command_prints_help(monkeypatch, capsys):
    assert run(monkeypatch) == 1
    assert "usage" in capsys.readouterr().out


def test_options_writes_default_config(monkeypatch, tmp_path, capsys):
    output = tmp_path / "config.yaml"

    assert run(monkeypatch, "options", "--output", str(output), "--silent") == 0
    assert capsys.readouterr().out.strip() == str(output)
    data = yaml.safe_load(output.read_text())
    assert data["decode_timeout"] == 10.0
    assert data["render_options"]["poly_chromatic"] is True


def test_symbol_command(monkeypatch, tmp_path, capsys, defaults):
    output = tmp_path / "station.svg"

    code = run(
        monkeypatch, "symbol",
        "--synop", MANNED_REPORT, "--lat", "45", "--lon", "19",
        "--output", str(output), "--icons", str(tmp_path / "symbols"),
        "--omit", "16", "--rounded", "--silent",
    )

    assert code == 0
    assert capsys.readouterr().out.strip() == str(output)
    root = ET.parse(output).getroot()
    texts = {g.get("class"): [t.text for t in g.iter(NS + "text")] for g in root.iter(NS + "g")}
    assert texts["slot slot-6"] == ["9"]
    assert texts["slot slot-16 suppressed"] == []


def test_symbol_options_file(monkeypatch, tmp_path, defaults):
    options = tmp_path / "options.json"
    options.write_text(json.dumps({"debug": True, "scaling": {"stationModel": 2}}))
    output = tmp_path / "station.svg"

    code = run(
        monkeypatch, "symbol", "--synop", MANNED_REPORT, "--lat", "45", "--lon", "19",
        "--output", str(output), "--icons", str(tmp_path), "--options", str(options), "-q",
    )

    assert code == 0
    root = ET.parse(output).getroot()
    assert root.get("transform") == "scale(2.7)"
    assert root.find(NS + "g/" + NS + "rect") is not None


def test_symbol_invalid_coordinates(monkeypatch, tmp_path, capsys, defaults):
    code = run(
        monkeypatch, "symbol", "--synop", MANNED_REPORT, "--lat", "95", "--lon", "19",
        "--output", str(tmp_path / "x.svg"), "--silent",
    )

    assert code == 1
    assert "Error:" in capsys.readouterr().err


def test_invalid_slot_argument(monkeypatch, tmp_path):
    with pytest.raises(SystemExit):
        run(monkeypatch, "symbol", "--synop", "x", "--lat", "0", "--lon", "0",
            "--output", str(tmp_path / "x.svg"), "--omit", "30")


def test_missing_config_file_exits(monkeypatch, tmp_path):
    with pytest.raises(SystemExit):
        run(monkeypatch, "options", "--output", str(tmp_path / "c.yaml"), "--config", str(tmp_path / "none.yaml"))


def test_layer_command(monkeypatch, tmp_path, defaults):
    stations = tmp_path / "stations.geojson"
    stations.write_text(json.dumps({
        "type": "FeatureCollection",
        "features": [
            {"id": 1, "geometry": {"type": "Point", "coordinates": [19.0, 45.0]}, "properties": {"synop": MANNED_REPORT}},
            {"id": 2, "geometry": {"type": "Point", "coordinates": [151.0, -33.0]}, "properties": {"synop": AUTOMATIC_REPORT}},
            {"id": 3, "geometry": {"type": "Point", "coordinates": [0.0, 0.0]}, "properties": {}},
        ],
    }))
    out = tmp_path / "symbols_out"

    code = run(
        monkeypatch, "layer", "--input", str(stations), "--output-dir", str(out),
        "--icons", str(tmp_path / "symbols"), "--parallel", "--workers", "2", "--quiet",
    )

    assert code == 0
    assert (out / "station_1.svg").exists() and (out / "station_2.svg").exists()
    index = json.loads((out / "markers.json").read_text())
    assert [m["feature_id"] for m in index["markers"]] == [1, 2]
