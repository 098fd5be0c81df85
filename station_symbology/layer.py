"""
GeoJSON station layer.

Reads point features carrying raw reports in one of their properties,
compiles a symbol for each and returns markers ready to place on a map: the
diagram plus its pixel size and the anchor at its centre.

Example:
    >>> from station_symbology.layer import StationModelLayer
    >>>
    >>> layer = StationModelLayer.from_file("stations.geojson", field="synop")
    >>> markers = layer.build_markers(parallel=True, max_workers=4)
    >>> for marker in markers:
    ...     print(marker.feature_id, marker.icon_anchor)
"""

import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Hashable, Iterator, List, Mapping, Optional, Tuple, Union

from .config import RenderOptions, coerce_options
from .exceptions import BackendInitError, InvalidParameterError, StationSymbologyError
from .rendering import StationSymbolCompiler, SymbolDiagram

logger = logging.getLogger("station_symbology.layer")

# Optional tqdm import for progress bars
try:
    from tqdm import tqdm
    TQDM_AVAILABLE = True
except ImportError:
    TQDM_AVAILABLE = False
    logger.debug("tqdm not available, progress bars disabled")


def load_geojson(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Read a GeoJSON feature collection.

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidParameterError: If the file is not valid JSON
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"GeoJSON file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidParameterError(f"Invalid GeoJSON in {path}: {e}") from e


@dataclass
class StationMarker:
    """A compiled symbol attached to a feature.

    Attributes:
        feature_id: Feature ``id``, or its index when it has none
        latitude, longitude: Station position
        diagram: Compiled symbol
        icon_size: Marker size in pixels (width, height)
        icon_anchor: Pixel offset of the station position inside the marker
    """

    feature_id: Hashable
    latitude: float
    longitude: float
    diagram: SymbolDiagram
    icon_size: Tuple[float, float]
    icon_anchor: Tuple[float, float]

    @classmethod
    def from_diagram(cls, feature_id: Hashable, latitude: float, longitude: float, diagram: SymbolDiagram) -> "StationMarker":
        width, height = diagram.icon_size
        return cls(feature_id, latitude, longitude, diagram, (width, height), (width / 2, height / 2))

    def to_dict(self) -> Dict[str, Any]:
        """Marker metadata (without the diagram) for JSON indexes."""
        return {
            "feature_id": self.feature_id,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "icon_size": list(self.icon_size),
            "icon_anchor": list(self.icon_anchor),
            "decoded": self.diagram.decoded,
        }


@dataclass(frozen=True)
class StationFeature:
    """A feature with a report to compile."""

    feature_id: Hashable
    latitude: float
    longitude: float
    raw_text: str


class StationModelLayer:
    """
    Builds station symbol markers for a GeoJSON feature collection.

    Features without the report property, or with an empty report, are
    skipped with an error log and never reach the decoder.

    Attributes:
        geojson: Feature collection (mapping)
        field: Name of the property holding the raw report
        options: Render options applied to every feature
        compiler: Compiler used for every symbol
    """

    def __init__(
        self,
        geojson: Mapping[str, Any],
        field: str = "synop",
        options: Union[None, RenderOptions, Mapping[str, Any]] = None,
        compiler: Optional[StationSymbolCompiler] = None
    ):
        if not isinstance(geojson, Mapping) or "features" not in geojson:
            raise InvalidParameterError("geojson must be a feature collection with a 'features' list")

        self.geojson = geojson
        self.field = field
        try:
            self.options = coerce_options(options)
        except ValueError as e:
            raise InvalidParameterError(f"Invalid render options: {e}") from e

        if compiler is None:
            from .api import get_default_compiler
            compiler = get_default_compiler()
        self.compiler = compiler
        self.skipped: List[Hashable] = []
        self.failed: List[Hashable] = []

        logger.info(f"Initialized StationModelLayer: {len(self.geojson['features'])} features, field='{field}'")

    @classmethod
    def from_file(cls, path: Union[str, Path], **kwargs: Any) -> "StationModelLayer":
        """Load a GeoJSON file and build a layer from it."""
        return cls(load_geojson(path), **kwargs)

    def iter_features(self) -> Iterator[StationFeature]:
        """Yield compilable features, logging and recording the skipped ones."""
        self.skipped = []
        for index, feature in enumerate(self.geojson["features"]):
            feature_id = feature.get("id", index)
            properties = feature.get("properties") or {}

            if self.field not in properties:
                logger.error(
                    f"Attribute field '{self.field}' does not exist for feature {feature_id!r} "
                    f"(field names are case-sensitive). Available attribute fields: {sorted(properties)}"
                )
                self.skipped.append(feature_id)
                continue

            raw_text = properties[self.field]
            if raw_text is None or raw_text == "":
                logger.error(f"Attribute field '{self.field}' is empty for feature {feature_id!r}")
                self.skipped.append(feature_id)
                continue

            geometry = feature.get("geometry") or {}
            coordinates = geometry.get("coordinates")
            if geometry.get("type") != "Point" or not coordinates or len(coordinates) < 2:
                logger.error(f"Feature {feature_id!r} is not a point, skipping")
                self.skipped.append(feature_id)
                continue

            longitude, latitude = float(coordinates[0]), float(coordinates[1])
            yield StationFeature(feature_id, latitude, longitude, str(raw_text))

    def build_marker(self, feature: StationFeature) -> StationMarker:
        """Compile the symbol of one feature."""
        diagram = self.compiler.compile(
            feature.raw_text,
            (feature.latitude, feature.longitude),
            options=self.options,
        )
        return StationMarker.from_diagram(feature.feature_id, feature.latitude, feature.longitude, diagram)

    def build_markers(
        self,
        parallel: bool = False,
        max_workers: Optional[int] = None,
        show_progress: bool = False
    ) -> List[StationMarker]:
        """
        Compile markers for all features.

        Args:
            parallel: Compile on a thread pool; decoding stays serialized
                on the single decode backend
            max_workers: Thread pool size (default: executor default)
            show_progress: Show a tqdm progress bar when tqdm is installed

        Returns:
            Markers in feature order; features that failed are left out

        Raises:
            BackendInitError: If the decode backend could not be started
        """
        features = list(self.iter_features())
        logger.info(
            f"Building {len(features)} markers "
            f"({len(self.skipped)} skipped, parallel={parallel}, max_workers={max_workers})"
        )
        start_time = time.time()
        results: Dict[int, StationMarker] = {}

        use_progress = show_progress and TQDM_AVAILABLE

        if parallel and len(features) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                future_to_index = {
                    executor.submit(self.build_marker, feature): i
                    for i, feature in enumerate(features)
                }
                completed = as_completed(future_to_index)
                if use_progress:
                    completed = tqdm(completed, total=len(features), desc="Building markers")
                for future in completed:
                    index = future_to_index[future]
                    try:
                        results[index] = future.result()
                    except BackendInitError:
                        raise
                    except StationSymbologyError as e:
                        logger.error(f"Failed to build marker for {features[index].feature_id!r}: {e}")
        else:
            iterator = enumerate(features)
            if use_progress:
                iterator = tqdm(iterator, total=len(features), desc="Building markers")
            for index, feature in iterator:
                try:
                    results[index] = self.build_marker(feature)
                except BackendInitError:
                    raise
                except StationSymbologyError as e:
                    logger.error(f"Failed to build marker for {feature.feature_id!r}: {e}")

        markers = [results[i] for i in sorted(results)]
        self.failed = [f.feature_id for i, f in enumerate(features) if i not in results]
        logger.info(f"Built {len(markers)}/{len(features)} markers in {time.time() - start_time:.1f}s")
        return markers
