"""
Batch processing module for writing station symbols of a whole layer.

This module provides the BatchSymbolGenerator class, which compiles every
feature of a GeoJSON layer, writes one SVG file per station and a
``markers.json`` index describing where each symbol belongs on the map.

Example:
    >>> from station_symbology import BatchSymbolGenerator
    >>>
    >>> batch = BatchSymbolGenerator.from_file("stations.geojson", output_dir="symbols_out")
    >>> result = batch.generate(parallel=True, max_workers=4)
    >>> print(f"Wrote {len(result['successful'])} symbols")
"""

import json
import logging
import re
import time
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .config import Config, RenderOptions
from .exceptions import RenderError
from .layer import StationMarker, StationModelLayer, load_geojson
from .rendering import StationSymbolCompiler

logger = logging.getLogger("station_symbology.batch")

INDEX_FILENAME = "markers.json"
SYMBOL_PREFIX = "station_"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]+")


def symbol_filename(feature_id: Any) -> str:
    """File name of a station symbol, e.g. ``station_12345.svg``."""
    safe = _UNSAFE_CHARS.sub("_", str(feature_id)).strip("_") or "unnamed"
    return f"{SYMBOL_PREFIX}{safe}.svg"


class BatchSymbolGenerator:
    """
    Generate SVG symbols for every station of a GeoJSON layer.

    Attributes:
        layer: StationModelLayer providing the features
        config: Configuration object
        output_dir: Directory for generated symbols

    Example:
        >>> batch = BatchSymbolGenerator(geojson, field="synop", output_dir="out")
        >>> result = batch.generate()
        >>> batch.cleanup(keep_latest=100)
    """

    def __init__(
        self,
        geojson: Mapping[str, Any],
        field: str = "synop",
        options: Union[None, RenderOptions, Mapping[str, Any]] = None,
        config: Optional[Config] = None,
        output_dir: Optional[Union[str, Path]] = None,
        compiler: Optional[StationSymbolCompiler] = None
    ):
        """
        Initialize batch symbol generator.

        Args:
            geojson: Feature collection with point features
            field: Property holding the raw report (default: "synop")
            options: Render options for every symbol
            config: Optional Config object
            output_dir: Optional output directory (defaults to config.output_dir)
            compiler: Optional compiler (defaults to one built from config)
        """
        self.config = config if config is not None else Config()

        if compiler is None:
            from .api import get_default_compiler
            compiler = get_default_compiler(config)
        if options is None:
            options = self.config.render_options

        self.layer = StationModelLayer(geojson, field=field, options=options, compiler=compiler)
        self.output_dir = Path(output_dir) if output_dir is not None else self.config.output_dir

        logger.info(f"Initialized BatchSymbolGenerator: output_dir={self.output_dir}")

    @classmethod
    def from_file(cls, path: Union[str, Path], **kwargs: Any) -> "BatchSymbolGenerator":
        """Build a generator from a GeoJSON file."""
        return cls(load_geojson(path), **kwargs)

    def generate(
        self,
        parallel: bool = False,
        max_workers: Optional[int] = None,
        show_progress: bool = True
    ) -> Dict[str, Any]:
        """
        Compile and write the symbols of all features.

        Args:
            parallel: Compile on a thread pool (default: False)
            max_workers: Maximum parallel workers (default: config.max_workers)
            show_progress: Show a progress bar when tqdm is installed

        Returns:
            Dictionary with keys:
                - successful: List of paths to written symbols
                - failed: List of feature ids that could not be written
                - skipped: List of feature ids without a usable report
                - total_time: Total generation time in seconds

        Example:
            >>> result = batch.generate(parallel=True)
            >>> print(f"{len(result['failed'])} failures, {len(result['skipped'])} skipped")
        """
        if max_workers is None:
            max_workers = self.config.max_workers

        self.output_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Output directory: {self.output_dir}")

        start_time = time.time()
        markers = self.layer.build_markers(parallel=parallel, max_workers=max_workers, show_progress=show_progress)
        failed = list(self.layer.failed)
        skipped = list(self.layer.skipped)

        successful: List[str] = []
        index: List[Dict[str, Any]] = []
        for marker in markers:
            path = self._write_marker(marker)
            if path is None:
                failed.append(marker.feature_id)
                continue
            successful.append(path)
            entry = marker.to_dict()
            entry["file"] = Path(path).name
            index.append(entry)

        self._write_index(index)

        total_time = time.time() - start_time
        logger.info(
            f"Batch complete: {len(successful)} written, {len(failed)} failed, "
            f"{len(skipped)} skipped in {total_time:.1f}s"
        )
        return {
            "successful": successful,
            "failed": failed,
            "skipped": skipped,
            "total_time": total_time,
        }

    def cleanup(self, keep_latest: Optional[int] = None) -> int:
        """
        Remove generated symbols from the output directory.

        Args:
            keep_latest: If specified, keep the N most recently written symbols

        Returns:
            Number of files deleted
        """
        logger.info(f"Cleaning up symbols from {self.output_dir}")

        if not self.output_dir.exists():
            logger.warning(f"Output directory does not exist: {self.output_dir}")
            return 0

        symbol_files = sorted(self.output_dir.glob(f"{SYMBOL_PREFIX}*.svg"), key=lambda p: p.stat().st_mtime)
        if not symbol_files:
            logger.info("No symbols found to clean up")
            return 0

        if keep_latest is not None and keep_latest > 0:
            files_to_delete = symbol_files[:-keep_latest] if len(symbol_files) > keep_latest else []
            logger.info(f"Keeping {min(keep_latest, len(symbol_files))} most recent symbols")
        else:
            files_to_delete = symbol_files

        deleted_count = 0
        for file_path in files_to_delete:
            try:
                file_path.unlink()
                deleted_count += 1
                logger.debug(f"Deleted: {file_path}")
            except OSError as e:
                logger.error(f"Failed to delete {file_path}: {e}")

        logger.info(f"Deleted {deleted_count} symbols")
        return deleted_count

    def _write_marker(self, marker: StationMarker) -> Optional[str]:
        path = self.output_dir / symbol_filename(marker.feature_id)
        try:
            return marker.diagram.save(path)
        except RenderError as e:
            logger.error(f"Failed to write symbol for {marker.feature_id!r}: {e}")
            return None

    def _write_index(self, entries: List[Dict[str, Any]]) -> None:
        path = self.output_dir / INDEX_FILENAME
        with open(path, "w", encoding="utf-8") as f:
            json.dump({"markers": entries}, f, indent=2, default=str)
        logger.debug(f"Wrote marker index: {path}")
