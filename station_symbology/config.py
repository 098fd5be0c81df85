"""
Configuration management for the station_symbology package.

This module provides the per-call render options of a station symbol and the
package-level configuration (icon source, decode timeout, output directory,
highlight colour), both loadable from YAML or JSON files.
"""

import json
import logging
import yaml
from dataclasses import dataclass, asdict, field, replace
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Union

import matplotlib.colors as mcolors

from .constants import (
    CENTER_SLOT,
    DECODE_TIMEOUT_S,
    DEFAULT_HIGHLIGHT_COLOR,
    ICON_HTTP_TIMEOUT_S,
    SLOT_COUNT,
)

logger = logging.getLogger("station_symbology.config")

VALUE_MODES = ("raw", "rounded")

# Accepted spellings for render option keys; camelCase matches the option
# objects used by web map integrations.
_OPTION_ALIASES = {
    "polyChromatic": "poly_chromatic",
    "poly_chromatic": "poly_chromatic",
    "highCloudsInRed": "high_clouds_in_red",
    "high_clouds_in_red": "high_clouds_in_red",
    "temperature": "temperature",
    "dewPoint": "dew_point",
    "dew_point": "dew_point",
    "elementsToOmit": "elements_to_omit",
    "elements_to_omit": "elements_to_omit",
    "debug": "debug",
    "scaling": "scaling",
}
_SCALING_ALIASES = {
    "stationModel": "station_model",
    "station_model": "station_model",
    "font": "font",
}


@dataclass(frozen=True)
class Scaling:
    """Scaling factors of the whole symbol and of its text.

    Attributes:
        station_model: Symbol scale factor (1 renders at 1.7x canvas scale).
        font: Font scale factor (1 renders at 0.65em).
    """

    station_model: float = 1.0
    font: float = 1.0


@dataclass(frozen=True)
class RenderOptions:
    """Options controlling how a single station symbol is rendered.

    Attributes:
        scaling: Symbol and font scaling factors.
        poly_chromatic: Use colour to convey the sign of pressure tendency and
            to highlight past weather and falling tendency characteristics.
        high_clouds_in_red: Recolour the high cloud glyph.
        temperature: "raw" plots the reported value (10.7), "rounded" the
            nearest whole degree (11).
        dew_point: Same as ``temperature`` for the dew-point value.
        elements_to_omit: Slot indices left empty. Slot 12 cannot be omitted.
        debug: Draw slot outlines and placeholders for unhandled slots.
    """

    scaling: Scaling = field(default_factory=Scaling)
    poly_chromatic: bool = True
    high_clouds_in_red: bool = True
    temperature: str = "raw"
    dew_point: str = "raw"
    elements_to_omit: FrozenSet[int] = frozenset()
    debug: bool = False

    def __post_init__(self):
        """Normalize collection and nested values passed in as plain types."""
        if not isinstance(self.elements_to_omit, frozenset):
            object.__setattr__(self, "elements_to_omit", frozenset(self.elements_to_omit or ()))
        if isinstance(self.scaling, Mapping):
            object.__setattr__(self, "scaling", _scaling_from_dict(self.scaling))

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "RenderOptions":
        """Build options from a mapping, ignoring unknown keys.

        Both camelCase (``polyChromatic``, ``elementsToOmit``) and snake_case
        keys are accepted. Missing keys fall back to the defaults.

        Args:
            data: Mapping of option names to values (None for defaults).

        Returns:
            Validated RenderOptions instance.

        Raises:
            ValueError: If an option value is invalid.
        """
        if not data:
            return cls()

        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _OPTION_ALIASES.get(key)
            if name is None:
                logger.debug(f"Ignoring unknown render option '{key}'")
                continue
            if name == "scaling":
                value = _scaling_from_dict(value or {})
            kwargs[name] = value

        options = cls(**kwargs)
        options.validate()
        return options

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary (snake_case keys, sorted omit list)."""
        data = asdict(self)
        data["elements_to_omit"] = sorted(self.elements_to_omit)
        return data

    def with_overrides(self, **changes: Any) -> "RenderOptions":
        """Return a copy with the given fields replaced."""
        options = replace(self, **changes)
        options.validate()
        return options

    def validate(self) -> bool:
        """Validate option values.

        Returns:
            True if the options are valid.

        Raises:
            ValueError: If any option is invalid.
        """
        if self.scaling.station_model <= 0 or self.scaling.font <= 0:
            raise ValueError("scaling factors must be positive")

        for name in ("poly_chromatic", "high_clouds_in_red", "debug"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(f"{name} must be a boolean")

        if self.temperature not in VALUE_MODES:
            raise ValueError(f"temperature must be one of: {', '.join(VALUE_MODES)}")
        if self.dew_point not in VALUE_MODES:
            raise ValueError(f"dew_point must be one of: {', '.join(VALUE_MODES)}")

        for idx in self.elements_to_omit:
            if isinstance(idx, bool) or not isinstance(idx, int) or not 0 <= idx < SLOT_COUNT:
                raise ValueError(f"elements_to_omit entries must be slot indices 0-{SLOT_COUNT - 1}, got {idx!r}")

        return True

    def omits(self, slot_index: int) -> bool:
        """Whether the content of a slot is suppressed (never true for slot 12)."""
        return slot_index != CENTER_SLOT and slot_index in self.elements_to_omit


def _scaling_from_dict(data: Union[Scaling, Mapping[str, Any]]) -> Scaling:
    if isinstance(data, Scaling):
        return data
    kwargs = {}
    for key, value in data.items():
        name = _SCALING_ALIASES.get(key)
        if name is None:
            logger.debug(f"Ignoring unknown scaling option '{key}'")
            continue
        kwargs[name] = float(value)
    return Scaling(**kwargs)


@dataclass
class Config:
    """Configuration for station symbol generation.

    Attributes:
        icon_source: Directory or http(s) base URL holding the WMO symbol SVGs.
        cache_icons: Keep loaded icons in memory, keyed by path.
        icon_timeout: Timeout in seconds for HTTP icon requests.
        decode_timeout: Seconds to wait for a decode result before giving up.
        highlight_color: Colour used for red/polychromatic elements (any
            Matplotlib colour spec).
        output_dir: Directory for saving generated symbols.
        max_workers: Thread pool size for layer compilation (None = default).
        render_options: Default render options applied when none are passed.
    """

    icon_source: str = "./symbols"
    cache_icons: bool = True
    icon_timeout: float = ICON_HTTP_TIMEOUT_S
    decode_timeout: float = DECODE_TIMEOUT_S
    highlight_color: str = DEFAULT_HIGHLIGHT_COLOR
    output_dir: Path = field(default_factory=lambda: Path("./output"))
    max_workers: Optional[int] = None
    render_options: RenderOptions = field(default_factory=RenderOptions)

    def __post_init__(self):
        """Convert string paths and option mappings if necessary."""
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)
        if isinstance(self.icon_source, Path):
            self.icon_source = str(self.icon_source)
        if isinstance(self.render_options, Mapping):
            self.render_options = RenderOptions.from_dict(self.render_options)

    @property
    def highlight_hex(self) -> str:
        """Highlight colour normalized to a #rrggbb string."""
        return mcolors.to_hex(self.highlight_color)

    @classmethod
    def load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a YAML or JSON file.

        Args:
            path: Path to configuration file (.yaml, .yml, or .json).

        Returns:
            Config instance with loaded settings.

        Raises:
            ValueError: If file format is not supported.
            FileNotFoundError: If file does not exist.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        with open(path, 'r') as f:
            if path.suffix in ['.yaml', '.yml']:
                data = yaml.safe_load(f)
            elif path.suffix == '.json':
                data = json.load(f)
            else:
                raise ValueError(f"Unsupported file format: {path.suffix}. Use .yaml, .yml, or .json")

        data = data or {}
        known = {f for f in cls.__dataclass_fields__}
        for key in [k for k in data if k not in known]:
            logger.debug(f"Ignoring unknown config key '{key}'")
            data.pop(key)

        if 'output_dir' in data:
            data['output_dir'] = Path(data['output_dir'])
        if 'render_options' in data:
            data['render_options'] = RenderOptions.from_dict(data['render_options'])

        return cls(**data)

    def save_to_file(self, path: Path) -> None:
        """Save configuration to a YAML or JSON file.

        Args:
            path: Path where configuration should be saved.

        Raises:
            ValueError: If file format is not supported.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = asdict(self)
        data['output_dir'] = str(data['output_dir'])
        data['render_options'] = self.render_options.to_dict()

        with open(path, 'w') as f:
            if path.suffix in ['.yaml', '.yml']:
                yaml.dump(data, f, default_flow_style=False, sort_keys=False)
            elif path.suffix == '.json':
                json.dump(data, f, indent=2)
            else:
                raise ValueError(f"Unsupported file format: {path.suffix}. Use .yaml, .yml, or .json")

    def validate(self) -> bool:
        """Validate configuration parameters.

        Returns:
            True if configuration is valid.

        Raises:
            ValueError: If any configuration parameter is invalid.
        """
        if not isinstance(self.icon_source, str) or not self.icon_source:
            raise ValueError("icon_source must be a non-empty string")

        if not isinstance(self.cache_icons, bool):
            raise ValueError("cache_icons must be a boolean")

        if self.icon_timeout <= 0:
            raise ValueError("icon_timeout must be positive")

        if self.decode_timeout <= 0:
            raise ValueError("decode_timeout must be positive")

        if not mcolors.is_color_like(self.highlight_color):
            raise ValueError(f"highlight_color is not a valid colour: {self.highlight_color!r}")

        if self.max_workers is not None and (not isinstance(self.max_workers, int) or self.max_workers < 1):
            raise ValueError("max_workers must be an integer >= 1")

        self.render_options.validate()

        return True

    def ensure_directories(self) -> None:
        """Create the output directory if it doesn't exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


def get_default_config() -> Config:
    """Get a Config instance with default settings.

    Returns:
        Config instance initialized with default values.
    """
    return Config()


def coerce_options(options: Union[None, RenderOptions, Mapping[str, Any]], default: Optional[RenderOptions] = None) -> RenderOptions:
    """Accept RenderOptions, a plain mapping, or None (defaults)."""
    if options is None:
        return default if default is not None else RenderOptions()
    if isinstance(options, RenderOptions):
        return options
    return RenderOptions.from_dict(options)


def parse_slot_list(values: Iterable[Any]) -> FrozenSet[int]:
    """Parse slot indices given as strings or ints (CLI and config input)."""
    return frozenset(int(v) for v in values)
