import logging

import pytest

from station_symbology.logging_config import LOG_LEVEL_ENV, get_logger, level_for_verbosity, setup_logging


@pytest.mark.parametrize("verbosity, level", [
    (1, logging.DEBUG),
    (0, logging.INFO),
    (-1, logging.WARNING),
    (-2, logging.ERROR),
])
def test_verbosity_levels(monkeypatch, package_logger, verbosity, level):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    setup_logging(verbosity=verbosity)

    assert package_logger.level == level
    assert not package_logger.propagate
    assert len(package_logger.handlers) == 1


def test_environment_override(monkeypatch, package_logger):
    monkeypatch.setenv(LOG_LEVEL_ENV, "error")
    setup_logging(verbosity=1)

    assert package_logger.level == logging.ERROR


def test_log_file(tmp_path, monkeypatch, package_logger):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    log_file = tmp_path / "symbols.log"
    setup_logging(verbosity=0, log_file=str(log_file))

    get_logger("tests").info("hello from the tests")
    for handler in package_logger.handlers:
        handler.flush()

    assert len(package_logger.handlers) == 2
    assert "hello from the tests" in log_file.read_text()


def test_get_logger_names():
    assert get_logger("rendering").name == "station_symbology.rendering"
    assert get_logger("station_symbology.api").name == "station_symbology.api"
    assert get_logger("station_symbology").name == "station_symbology"


def test_verbosity_is_clamped():
    assert level_for_verbosity(3) == logging.DEBUG
    assert level_for_verbosity(-5) == logging.ERROR


def test_console_goes_to_stderr(monkeypatch, package_logger, capsys):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    setup_logging(verbosity=-1)

    get_logger("tests").warning("careful")
    get_logger("tests").info("not shown")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "WARNING: careful\n"


def test_log_file_keeps_debug_records(tmp_path, monkeypatch, package_logger):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    log_file = tmp_path / "symbols.log"
    setup_logging(verbosity=-1, log_file=str(log_file))

    get_logger("tests").debug("detail for the file")
    for handler in package_logger.handlers:
        handler.flush()

    assert package_logger.level == logging.DEBUG
    assert package_logger.handlers[0].level == logging.WARNING
    assert "detail for the file" in log_file.read_text()
