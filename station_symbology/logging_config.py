"""
Logging setup for station_symbology.

Every module logs to a child of the ``station_symbology`` logger
(``station_symbology.data.orchestrator``, ``station_symbology.rendering.svg``
and so on). Records go to stderr so that stdout stays free for the symbol
markup or output paths printed by the command line tool.
"""

import logging
import os
import sys
from typing import Optional


DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
# Used by --quiet and --silent, where only problems are reported
SIMPLE_FORMAT = "%(levelname)s: %(message)s"

LOGGER_NAME = "station_symbology"
LOG_LEVEL_ENV = "STATION_SYMBOLOGY_LOG_LEVEL"

VERBOSITY_LEVELS = {
    1: logging.DEBUG,
    0: logging.INFO,
    -1: logging.WARNING,
    -2: logging.ERROR,
}

# Libraries whose chatter is only wanted when something goes wrong
NOISY_LIBRARIES = ("urllib3", "requests", "pymetdecoder", "matplotlib")


def level_for_verbosity(verbosity: int) -> int:
    """Map a -v/-q style verbosity to a logging level, clamped to DEBUG..ERROR."""
    return VERBOSITY_LEVELS[max(-2, min(1, verbosity))]


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None
) -> None:
    """
    Configure the station_symbology logger.

    Calling it again replaces the previous handlers, so the command line tool
    can reconfigure the logging that package import set up.

    Args:
        verbosity: 1 or more for DEBUG, 0 for INFO, -1 for WARNING, -2 or
            less for ERROR
        log_file: Optional file that receives every record at DEBUG level
        format_string: Console format (defaults depend on verbosity)

    Environment Variables:
        STATION_SYMBOLOGY_LOG_LEVEL: Overrides the console level
            (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Example:
        >>> setup_logging(verbosity=1, log_file="symbols.log")
    """
    level = level_for_verbosity(verbosity)

    env_level = os.environ.get(LOG_LEVEL_ENV, "").upper()
    if env_level in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        level = getattr(logging, env_level)

    if format_string is None:
        format_string = DEFAULT_FORMAT if verbosity >= 0 else SIMPLE_FORMAT

    for name in NOISY_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(console_handler)

    # The logger itself stays open at DEBUG when a file wants everything
    logger.setLevel(logging.DEBUG if log_file else level)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as e:
            logger.warning(f"Cannot write log file {log_file}: {e}")
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
            logger.addHandler(file_handler)
            logger.info(f"Logging to file: {log_file}")

    logger.debug(f"Console logging at {logging.getLevelName(level)}")


def get_logger(name: str) -> logging.Logger:
    """
    Logger under the station_symbology hierarchy.

    Args:
        name: Area such as ``"rendering"`` or a full dotted module name

    Returns:
        ``station_symbology.<name>`` unless ``name`` already lives there
    """
    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
