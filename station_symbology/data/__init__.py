"""
Observation decoding for station_symbology.

This module turns raw SYNOP report text into decoded observations. Decoding
runs on a single long-lived backend thread shared by every symbol request.

Main Classes:
    DecodingOrchestrator: Owns the backend and correlates requests/results
    SynopDecoder: pymetdecoder-based backend
    DecodedObservation: Decoded record with explicit field presence states

Example:
    >>> from station_symbology.data import DecodingOrchestrator, DecodedObservation
    >>>
    >>> orchestrator = DecodingOrchestrator()
    >>> result = orchestrator.decode("AAXX 01004 88889 12782 61506 10094", "st-1")
    >>> observation = DecodedObservation.from_dict(result.decoded)
"""

from .decoder import SynopDecoder
from .observation import DecodedObservation, Field, FieldState, OBSERVATION_FIELDS
from .orchestrator import DecodeRequest, DecodeResult, DecodingOrchestrator

__all__ = [
    "SynopDecoder",
    "DecodedObservation",
    "Field",
    "FieldState",
    "OBSERVATION_FIELDS",
    "DecodeRequest",
    "DecodeResult",
    "DecodingOrchestrator",
]
