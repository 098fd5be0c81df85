"""
SYNOP decode backend built on pymetdecoder.

The backend is created once per orchestrator and only ever used from the
orchestrator's worker thread.
"""

import importlib
import logging
import time
from typing import Any, Dict, Optional

from ..exceptions import BackendInitError

logger = logging.getLogger("station_symbology.data.decoder")


class SynopDecoder:
    """
    Decode raw SYNOP reports into nested dictionaries.

    ``load()`` imports pymetdecoder and builds the decoder; it must succeed
    before ``decode()`` is called. A report that cannot be decoded yields
    ``None`` rather than an exception.

    Example:
        >>> decoder = SynopDecoder()
        >>> decoder.load()
        >>> decoded = decoder.decode("AAXX 01004 88889 12782 61506 10094 20047 30111 40197")
        >>> decoded["air_temperature"]
        {'value': 9.4, 'unit': 'Cel'}
    """

    module_name = "pymetdecoder.synop"

    def __init__(self):
        self._synop_module = None
        self._decode_error = Exception
        self.load_time: Optional[float] = None

    @property
    def is_loaded(self) -> bool:
        return self._synop_module is not None

    def load(self) -> None:
        """Import the decoder package.

        Raises:
            BackendInitError: If pymetdecoder cannot be imported or initialized.
        """
        start = time.perf_counter()
        try:
            synop_module = importlib.import_module(self.module_name)
            package = importlib.import_module(self.module_name.rsplit(".", 1)[0])
            # Fail early if the decoder class is unusable
            synop_module.SYNOP()
        except Exception as e:
            raise BackendInitError(f"Failed to initialize SYNOP decoder ({self.module_name}): {e}") from e

        self._synop_module = synop_module
        self._decode_error = getattr(package, "DecodeError", Exception)
        self.load_time = time.perf_counter() - start
        logger.info(f"SYNOP decoder ready (import took {self.load_time * 1000:.0f} ms)")

    def decode(self, raw_text: str) -> Optional[Dict[str, Any]]:
        """Decode one report.

        Args:
            raw_text: Raw SYNOP report text.

        Returns:
            Decoded dictionary (with the raw text under ``_raw``), or None if
            the report could not be decoded.
        """
        if not self.is_loaded:
            raise BackendInitError("SYNOP decoder used before load()")

        start = time.perf_counter()
        try:
            decoded = self._synop_module.SYNOP().decode(raw_text)
        except self._decode_error as e:
            logger.warning(f"Could not decode report {raw_text!r}: {e}")
            return None
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            logger.warning(f"Decoder failed on report {raw_text!r}: {e}")
            return None

        if decoded is None:
            return None

        decoded = dict(decoded)
        decoded["_raw"] = raw_text
        logger.debug(f"Decoding took {(time.perf_counter() - start) * 1000:.0f} ms")
        return decoded
