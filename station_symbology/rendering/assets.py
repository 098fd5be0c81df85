"""
WMO symbol icon retrieval.

Icons are looked up by relative path (for example
``CH_CloudHigh/WeatherSymbol_WMO_CloudHigh_CH_3.svg``) from a local directory
or an HTTP base URL and parsed into ``xml.etree`` elements. A missing or
unparseable icon is reported as ``None``; it is never an error.

Example:
    >>> from station_symbology.rendering.assets import IconLibrary
    >>>
    >>> icons = IconLibrary.from_source("./symbols")
    >>> icons.prefetch(["N_TotalCloudCover/WeatherSymbol_WMO_TotalCloudCover_N_4.svg"])
    >>> fragment = icons.load("N_TotalCloudCover/WeatherSymbol_WMO_TotalCloudCover_N_4.svg")
"""

import copy
import logging
import threading
import xml.etree.ElementTree as ET
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import requests
from requests.exceptions import RequestException

from ..constants import CELL_SIZE, ICON_HTTP_TIMEOUT_S, ICON_PATHS, ICON_PREFETCH_WORKERS
from .diagram import IconPrimitive, Transform, centered_transform

logger = logging.getLogger("station_symbology.rendering.assets")

IconFragment = ET.Element


def parse_icon(data: Union[str, bytes], path: str = "<icon>") -> Optional[IconFragment]:
    """Parse SVG markup, returning None if it is not well-formed."""
    try:
        return ET.fromstring(data)
    except ET.ParseError as e:
        logger.warning(f"Icon {path} is not valid SVG: {e}")
        return None


class DirectoryIconSource:
    """Reads icons from a directory tree."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def fetch(self, path: str) -> Optional[bytes]:
        file_path = self.root / path
        try:
            return file_path.read_bytes()
        except FileNotFoundError:
            logger.debug(f"Icon not found: {file_path}")
            return None
        except OSError as e:
            logger.warning(f"Could not read icon {file_path}: {e}")
            return None

    def __repr__(self) -> str:
        return f"DirectoryIconSource({str(self.root)!r})"


class HttpIconSource:
    """Fetches icons relative to a base URL; anything but HTTP 200 is missing."""

    def __init__(self, base_url: str, timeout: float = ICON_HTTP_TIMEOUT_S, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self.session = session

    def fetch(self, path: str) -> Optional[bytes]:
        url = self.base_url + path.lstrip("/")
        getter = self.session.get if self.session is not None else requests.get
        try:
            resp = getter(url, timeout=self.timeout)
        except RequestException as e:
            logger.warning(f"Icon request failed for {url}: {e}")
            return None

        if resp.status_code != 200:
            logger.debug(f"Icon {url} returned HTTP {resp.status_code}")
            return None
        return resp.content

    def __repr__(self) -> str:
        return f"HttpIconSource({self.base_url!r})"


def source_for(location: Union[str, Path], timeout: float = ICON_HTTP_TIMEOUT_S):
    """Pick the source type from a directory path or an http(s) URL."""
    text = str(location)
    if text.startswith(("http://", "https://")):
        return HttpIconSource(text, timeout=timeout)
    return DirectoryIconSource(text)


class IconLibrary:
    """
    Loads and optionally caches parsed icons.

    The cache is in-memory and keyed by relative path; misses are cached too,
    so a missing icon is only looked up once. Callers always receive their
    own copy of the element.

    Attributes:
        source: Object with ``fetch(path) -> bytes | None``
        cache_enabled: Whether parsed icons are kept in memory
    """

    def __init__(self, source, cache: bool = True, max_workers: int = ICON_PREFETCH_WORKERS):
        self.source = source
        self.cache_enabled = cache
        self.max_workers = max_workers
        self._cache: Dict[str, Optional[IconFragment]] = {}
        self._lock = threading.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None

    @classmethod
    def from_source(cls, location: Union[str, Path], cache: bool = True, timeout: float = ICON_HTTP_TIMEOUT_S) -> "IconLibrary":
        return cls(source_for(location, timeout=timeout), cache=cache)

    @classmethod
    def from_config(cls, config) -> "IconLibrary":
        return cls.from_source(config.icon_source, cache=config.cache_icons, timeout=config.icon_timeout)

    def load(self, path: str) -> Optional[IconFragment]:
        """
        Load an icon by relative path.

        Args:
            path: Path relative to the icon source

        Returns:
            Parsed SVG root element, or None if the icon is missing
        """
        if self.cache_enabled:
            with self._lock:
                if path in self._cache:
                    cached = self._cache[path]
                    return copy.deepcopy(cached) if cached is not None else None

        data = self.source.fetch(path)
        fragment = parse_icon(data, path) if data is not None else None

        if self.cache_enabled:
            with self._lock:
                self._cache.setdefault(path, fragment)

        return copy.deepcopy(fragment) if fragment is not None else None

    def load_async(self, path: str) -> Future:
        """Load an icon on the library's thread pool."""
        return self._get_executor().submit(self.load, path)

    def prefetch(self, paths: Iterable[str]) -> List[Future]:
        """Start loading several icons without waiting for them."""
        return [self.load_async(path) for path in dict.fromkeys(paths)]

    def is_cached(self, path: str) -> bool:
        with self._lock:
            return path in self._cache

    def clear_cache(self) -> None:
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
        logger.debug(f"Cleared {count} cached icon(s)")

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="icon-loader")
            return self._executor

    def __repr__(self) -> str:
        return f"IconLibrary({self.source!r}, cache={self.cache_enabled})"


def icon_path(kind: str, code: Union[None, int, str] = None) -> str:
    """Relative path of a WMO glyph.

    Example:
        >>> icon_path("high_cloud", 3)
        'CH_CloudHigh/WeatherSymbol_WMO_CloudHigh_CH_3.svg'
    """
    return ICON_PATHS[kind].format(code=code)


def request_icon(
    icons: IconLibrary,
    path: str,
    width: float = CELL_SIZE,
    height: float = CELL_SIZE,
    transform: Optional[Transform] = None,
    color: Optional[str] = None
) -> IconPrimitive:
    """Start loading an icon and return its primitive.

    The primitive's fragment is filled in by ``resolve_icon`` once the load
    completes, so all icons of a symbol load concurrently.
    """
    if transform is None:
        transform = centered_transform(size=width)
    return IconPrimitive(
        path=path, width=width, height=height, transform=transform, color=color,
        pending=icons.load_async(path),
    )


def resolve_icon(primitive: IconPrimitive) -> bool:
    """Wait for a requested icon; False when it turned out to be missing."""
    if primitive.pending is not None:
        primitive.fragment = primitive.pending.result()
        primitive.pending = None
    if primitive.fragment is None:
        logger.debug(f"Icon {primitive.path} unavailable, omitting it")
        return False
    return True
