"""
Decoding request orchestrator.

Owns one long-lived decode backend running in its own worker thread and
correlates requests with results through per-request futures.

Lifecycle:
    1. ``initialize()`` starts the worker thread, which loads the backend.
    2. ``submit()`` enqueues requests; anything submitted while the backend
       is still loading waits in the queue in arrival order.
    3. The worker decodes one request at a time, FIFO, and resolves the
       future registered for the request's correlation id.
    4. ``await_result()`` waits on that future. A wait that times out removes
       the entry, so a late result is dropped instead of piling up.

Example:
    >>> orchestrator = DecodingOrchestrator()
    >>> orchestrator.initialize()
    >>> orchestrator.submit("AAXX 01004 88889 12782 61506 10094", "station-1")
    >>> result = orchestrator.await_result("station-1", timeout=10.0)
    >>> result.decoded["air_temperature"]["value"]
    9.4
"""

import logging
import queue
import threading
import time
from concurrent.futures import Future, TimeoutError as FuturesTimeoutError
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional, Set

from ..constants import DECODE_TIMEOUT_S
from ..exceptions import (
    BackendInitError,
    DecodeTimeoutError,
    InvalidParameterError,
    StationSymbologyError,
)
from .decoder import SynopDecoder

logger = logging.getLogger("station_symbology.data.orchestrator")


@dataclass(frozen=True)
class DecodeRequest:
    """A report waiting to be decoded."""

    correlation_id: Hashable
    raw_text: str


@dataclass(frozen=True)
class DecodeResult:
    """Decoder output for one request; ``decoded`` is None if undecodable."""

    correlation_id: Hashable
    decoded: Optional[Dict[str, Any]]


_STOP = object()


class DecodingOrchestrator:
    """
    Bridge between callers and a single-threaded decode backend.

    Attributes:
        backend_factory: Callable returning an object with ``load()`` and
            ``decode(raw_text)``; called once, inside the worker thread.
        default_timeout: Seconds ``await_result`` waits when no timeout is given.
    """

    def __init__(
        self,
        backend_factory: Callable[[], Any] = SynopDecoder,
        default_timeout: float = DECODE_TIMEOUT_S,
        name: str = "synop-decoder"
    ):
        self.backend_factory = backend_factory
        self.default_timeout = default_timeout
        self.name = name

        self._queue: "queue.Queue[Any]" = queue.Queue()
        self._lock = threading.Lock()
        self._pending: Dict[Hashable, Future] = {}
        self._in_flight: Set[Hashable] = set()
        self._ready: Future = Future()
        self._thread: Optional[threading.Thread] = None
        self._init_error: Optional[BackendInitError] = None
        self._closed = False
        self._discarded = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self, block: bool = False, timeout: Optional[float] = None) -> Future:
        """Start backend setup. Only the first call starts anything.

        Args:
            block: Wait until the backend is ready (or failed).
            timeout: Maximum seconds to wait when ``block`` is True.

        Returns:
            Future resolved when the backend is ready.

        Raises:
            BackendInitError: If ``block`` is True and initialization failed.
        """
        with self._lock:
            if self._closed:
                raise StationSymbologyError(f"Orchestrator '{self.name}' has been shut down")
            if self._thread is None:
                logger.info(f"Starting decode backend '{self.name}'")
                self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
                self._thread.start()

        if block:
            self._ready.result(timeout=timeout)
        return self._ready

    @property
    def is_ready(self) -> bool:
        return self._ready.done() and self._ready.exception() is None

    @property
    def pending_count(self) -> int:
        """Number of correlation ids with an unconsumed entry."""
        with self._lock:
            return len(self._pending)

    @property
    def discarded_count(self) -> int:
        """Results dropped because nobody was waiting for them anymore."""
        return self._discarded

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker thread after the queued requests are decoded."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            thread = self._thread
        if thread is not None:
            self._queue.put(_STOP)
            if wait:
                thread.join()
        logger.debug(f"Decode backend '{self.name}' shut down")

    def __enter__(self) -> "DecodingOrchestrator":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def submit(self, raw_text: Optional[str], correlation_id: Hashable) -> Future:
        """Queue a report for decoding.

        Empty input resolves immediately with a null result and never reaches
        the backend.

        Args:
            raw_text: Raw report text.
            correlation_id: Caller-chosen id used to fetch the result.

        Returns:
            Future resolving to a DecodeResult.

        Raises:
            BackendInitError: If the backend failed to initialize.
            InvalidParameterError: If ``correlation_id`` is already in flight.
        """
        if not raw_text:
            logger.debug(f"Empty report for {correlation_id!r}, skipping decoder")
            with self._lock:
                if correlation_id in self._in_flight:
                    raise InvalidParameterError(f"Correlation id {correlation_id!r} is already in flight")
                future = self._future_for(correlation_id, fresh=True)
            if not future.done():
                future.set_result(DecodeResult(correlation_id, None))
            return future

        self.initialize()

        with self._lock:
            if self._init_error is not None:
                raise BackendInitError(str(self._init_error)) from self._init_error
            if correlation_id in self._in_flight:
                raise InvalidParameterError(f"Correlation id {correlation_id!r} is already in flight")
            future = self._future_for(correlation_id, fresh=True)
            self._in_flight.add(correlation_id)
            self._queue.put(DecodeRequest(correlation_id, raw_text))

        if not self._ready.done():
            logger.debug(f"Backend still starting, request {correlation_id!r} buffered")
        return future

    def await_result(self, correlation_id: Hashable, timeout: Optional[float] = None) -> DecodeResult:
        """Wait for the result of a request.

        Args:
            correlation_id: Id passed to ``submit``.
            timeout: Seconds to wait (defaults to ``default_timeout``).

        Returns:
            The DecodeResult for ``correlation_id``.

        Raises:
            DecodeTimeoutError: If no result arrives in time.
            BackendInitError: If the backend failed to initialize.
        """
        if timeout is None:
            timeout = self.default_timeout

        with self._lock:
            if self._init_error is not None and correlation_id not in self._pending:
                raise BackendInitError(str(self._init_error)) from self._init_error
            future = self._future_for(correlation_id)

        try:
            result = future.result(timeout=timeout)
        except FuturesTimeoutError:
            self._forget(correlation_id, future)
            raise DecodeTimeoutError(
                f"No decode result for {correlation_id!r} within {timeout:.1f}s"
            ) from None
        except BackendInitError:
            self._forget(correlation_id, future)
            raise

        self._forget(correlation_id, future)
        return result

    def decode(self, raw_text: Optional[str], correlation_id: Hashable, timeout: Optional[float] = None) -> DecodeResult:
        """Submit a report and wait for its result."""
        self.submit(raw_text, correlation_id)
        return self.await_result(correlation_id, timeout=timeout)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _future_for(self, correlation_id: Hashable, fresh: bool = False) -> Future:
        # Caller holds the lock. With ``fresh``, an unconsumed result left
        # from an earlier request with the same id is replaced.
        future = self._pending.get(correlation_id)
        if future is None or (fresh and future.done()):
            future = Future()
            self._pending[correlation_id] = future
        return future

    def _forget(self, correlation_id: Hashable, future: Future) -> None:
        with self._lock:
            if self._pending.get(correlation_id) is future:
                del self._pending[correlation_id]

    def _resolve(self, result: DecodeResult) -> None:
        with self._lock:
            self._in_flight.discard(result.correlation_id)
            future = self._pending.get(result.correlation_id)
            if future is None:
                self._discarded += 1
        if future is None:
            logger.debug(f"Discarding late result for {result.correlation_id!r}")
            return
        if not future.done():
            future.set_result(result)

    def _fail(self, error: BackendInitError) -> None:
        with self._lock:
            self._init_error = error
            futures = list(self._pending.values())
            self._in_flight.clear()
        for future in futures:
            if not future.done():
                future.set_exception(error)
        self._ready.set_exception(error)

        # Drop whatever was queued; nothing will decode it
        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break

    def _run(self) -> None:
        start = time.perf_counter()
        try:
            backend = self.backend_factory()
            backend.load()
        except BackendInitError as e:
            logger.error(f"Decode backend '{self.name}' failed to start: {e}")
            self._fail(e)
            return
        except Exception as e:
            logger.error(f"Decode backend '{self.name}' failed to start: {e}")
            error = BackendInitError(f"Decode backend failed to start: {e}")
            error.__cause__ = e
            self._fail(error)
            return

        logger.info(
            f"Decode backend '{self.name}' ready after {(time.perf_counter() - start) * 1000:.0f} ms, "
            f"{self._queue.qsize()} request(s) buffered"
        )
        self._ready.set_result(True)

        while True:
            request = self._queue.get()
            if request is _STOP:
                break
            try:
                decoded = backend.decode(request.raw_text)
            except Exception as e:
                logger.error(f"Decoder crashed on {request.correlation_id!r}: {e}", exc_info=True)
                decoded = None
            self._resolve(DecodeResult(request.correlation_id, decoded))
