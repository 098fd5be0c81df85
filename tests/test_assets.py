import pytest
import requests

from station_symbology.config import Config
from station_symbology.rendering.assets import (
    DirectoryIconSource,
    HttpIconSource,
    IconLibrary,
    icon_path,
    parse_icon,
    request_icon,
    resolve_icon,
    source_for,
)

from .conftest import MemoryIconSource, icon_markup


class FakeResponse:
    def __init__(self, status_code, content=b""):
        self.status_code = status_code
        self.content = content


def test_icon_path():
    assert icon_path("high_cloud", 3) == "CH_CloudHigh/WeatherSymbol_WMO_CloudHigh_CH_3.svg"
    assert icon_path("wind_calm") == "ddff_WindArrows/WeatherSymbol_WMO_WindArrowCalm_00.svg"


def test_parse_icon_rejects_broken_markup():
    assert parse_icon(icon_markup("a")) is not None
    assert parse_icon(b"<svg><g></svg>", "broken.svg") is None


def test_directory_source(tmp_path):
    (tmp_path / "CH_CloudHigh").mkdir()
    (tmp_path / "CH_CloudHigh" / "a.svg").write_bytes(icon_markup("a"))
    source = DirectoryIconSource(tmp_path)

    assert source.fetch("CH_CloudHigh/a.svg") == icon_markup("a")
    assert source.fetch("CH_CloudHigh/missing.svg") is None


def test_http_source(monkeypatch):
    calls = []

    def fake_get(url, timeout):
        calls.append((url, timeout))
        if url.endswith("ok.svg"):
            return FakeResponse(200, icon_markup("ok"))
        return FakeResponse(404)

    monkeypatch.setattr(requests, "get", fake_get)
    source = HttpIconSource("https://example.org/symbols/", timeout=3)

    assert source.fetch("dir/ok.svg") == icon_markup("ok")
    assert source.fetch("dir/gone.svg") is None
    assert calls[0] == ("https://example.org/symbols/dir/ok.svg", 3)


def test_http_source_transport_error(monkeypatch):
    def fake_get(url, timeout):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(requests, "get", fake_get)
    assert HttpIconSource("https://example.org").fetch("a.svg") is None


def test_http_source_uses_session():
    class Session:
        def get(self, url, timeout):
            return FakeResponse(200, icon_markup(url))

    source = HttpIconSource("https://example.org", session=Session())
    assert source.fetch("a.svg") == icon_markup("https://example.org/a.svg")


def test_source_for():
    assert isinstance(source_for("https://example.org/symbols"), HttpIconSource)
    assert isinstance(source_for("./symbols"), DirectoryIconSource)


def test_library_caches_hits_and_misses():
    source = MemoryIconSource(missing={"missing.svg"})
    icons = IconLibrary(source)

    first = icons.load("a.svg")
    second = icons.load("a.svg")
    assert first is not second
    assert icons.load("missing.svg") is None
    assert icons.load("missing.svg") is None
    assert source.requests == ["a.svg", "missing.svg"]

    icons.clear_cache()
    assert not icons.is_cached("a.svg")


def test_library_without_cache():
    source = MemoryIconSource()
    icons = IconLibrary(source, cache=False)

    icons.load("a.svg")
    icons.load("a.svg")
    assert source.requests == ["a.svg", "a.svg"]
    assert not icons.is_cached("a.svg")


def test_prefetch_loads_concurrently_once_per_path():
    source = MemoryIconSource()
    icons = IconLibrary(source)
    try:
        futures = icons.prefetch(["a.svg", "b.svg", "a.svg"])
        assert len(futures) == 2
        assert all(f.result(timeout=2) is not None for f in futures)
    finally:
        icons.close()
    assert icons.is_cached("a.svg") and icons.is_cached("b.svg")


def test_request_and_resolve(icons):
    primitive = request_icon(icons, "a.svg")
    assert primitive.pending is not None

    assert resolve_icon(primitive)
    assert primitive.fragment is not None
    assert primitive.pending is None


def test_resolve_missing_icon():
    icons = IconLibrary(MemoryIconSource(missing={"gone.svg"}))
    try:
        assert not resolve_icon(request_icon(icons, "gone.svg"))
    finally:
        icons.close()


def test_from_config(tmp_path):
    icons = IconLibrary.from_config(Config(icon_source=str(tmp_path), cache_icons=False))
    assert isinstance(icons.source, DirectoryIconSource)
    assert not icons.cache_enabled
