"""
Custom exceptions for the station_symbology package.

This module defines exception classes for better error handling and messaging
across the package, particularly around the decode backend, option parsing and
SVG output.
"""


class StationSymbologyError(Exception):
    """Base exception class for all station_symbology errors."""
    pass


class BackendInitError(StationSymbologyError):
    """
    Raised when the decode backend cannot be initialized.

    This is fatal for the orchestrator that owns the backend: it is surfaced
    to the caller of initialization and to every request waiting on it. No
    retry is attempted.
    """
    pass


class DecodeTimeoutError(StationSymbologyError):
    """
    Raised when a decode result does not arrive in time.

    The timeout only affects the request that timed out; the backend keeps
    serving other requests.
    """
    pass


class RenderError(StationSymbologyError):
    """
    Raised when a symbol diagram cannot be serialized or saved.
    """
    pass


class InvalidParameterError(StationSymbologyError):
    """
    Raised for invalid user inputs.

    This exception is used for parameter validation failures such as
    malformed render options, unknown temperature modes, or a correlation id
    that is already in flight.
    """
    pass
