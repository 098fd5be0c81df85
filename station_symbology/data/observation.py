"""
Decoded observation model.

The decoder returns a nested dictionary in which a group can be missing
entirely, be present with a ``None`` value (reported as "not available", e.g.
a slashed cloud cover group) or carry a value. ``Field`` keeps these three
states apart so the slot rules never have to guess from ``None`` alone.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Union

logger = logging.getLogger("station_symbology.data.observation")

PathKey = Union[str, int]


class FieldState(enum.Enum):
    """Presence state of a decoded field."""

    ABSENT = "absent"
    NULL = "null"
    PRESENT = "present"


@dataclass(frozen=True)
class Field:
    """A decoded value together with its presence state.

    Example:
        >>> wind = Field.wrap({"direction": {"value": 270}})
        >>> wind.get("direction", "value").value
        270
        >>> wind.get("speed").is_absent
        True
    """

    state: FieldState
    value: Any = None

    @classmethod
    def absent(cls) -> "Field":
        return _ABSENT

    @classmethod
    def null(cls) -> "Field":
        return _NULL

    @classmethod
    def of(cls, value: Any) -> "Field":
        return cls(FieldState.PRESENT, value)

    @classmethod
    def wrap(cls, value: Any) -> "Field":
        """Wrap a value that is known to exist as a key (None becomes NULL)."""
        return _NULL if value is None else cls.of(value)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]], key: str) -> "Field":
        """Look up a key, distinguishing a missing key from a None value."""
        if data is None or key not in data:
            return _ABSENT
        return cls.wrap(data[key])

    @property
    def is_absent(self) -> bool:
        return self.state is FieldState.ABSENT

    @property
    def is_null(self) -> bool:
        return self.state is FieldState.NULL

    @property
    def is_present(self) -> bool:
        return self.state is FieldState.PRESENT

    def get(self, *path: PathKey) -> "Field":
        """Navigate into nested mappings and sequences.

        Absent stays absent and null stays null. A missing key, an index out
        of range or a non-container value along the path is absent.
        """
        current = self
        for key in path:
            if not current.is_present:
                return current
            container = current.value
            if isinstance(key, int) and isinstance(container, Sequence) and not isinstance(container, str):
                if -len(container) <= key < len(container):
                    current = Field.wrap(container[key])
                else:
                    return _ABSENT
            elif isinstance(container, Mapping):
                current = Field.from_mapping(container, key)
            else:
                return _ABSENT
        return current

    def value_or(self, default: Any = None) -> Any:
        """Return the value when present, otherwise ``default``."""
        return self.value if self.is_present else default

    def __bool__(self) -> bool:
        return self.is_present


_ABSENT = Field(FieldState.ABSENT)
_NULL = Field(FieldState.NULL)


# Decoder keys read by the plotting rules
OBSERVATION_FIELDS = (
    "air_temperature",
    "dewpoint_temperature",
    "sea_level_pressure",
    "pressure_tendency",
    "visibility",
    "cloud_cover",
    "cloud_types",
    "lowest_cloud_base",
    "present_weather",
    "past_weather",
    "precipitation_indicator",
    "precipitation_s1",
    "precipitation_s3",
    "surface_wind",
    "weather_indicator",
)


@dataclass(frozen=True)
class DecodedObservation:
    """One decoded surface observation.

    Each attribute named in ``OBSERVATION_FIELDS`` is a ``Field``. The full
    decoder output is kept in ``raw`` for groups the plotting rules do not
    read yet.
    """

    air_temperature: Field = Field.absent()
    dewpoint_temperature: Field = Field.absent()
    sea_level_pressure: Field = Field.absent()
    pressure_tendency: Field = Field.absent()
    visibility: Field = Field.absent()
    cloud_cover: Field = Field.absent()
    cloud_types: Field = Field.absent()
    lowest_cloud_base: Field = Field.absent()
    present_weather: Field = Field.absent()
    past_weather: Field = Field.absent()
    precipitation_indicator: Field = Field.absent()
    precipitation_s1: Field = Field.absent()
    precipitation_s3: Field = Field.absent()
    surface_wind: Field = Field.absent()
    weather_indicator: Field = Field.absent()
    raw_text: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], raw_text: Optional[str] = None) -> "DecodedObservation":
        """Build an observation from decoder output.

        Args:
            data: Nested dictionary as produced by the SYNOP decoder.
            raw_text: Original report text, kept for debugging.

        Returns:
            DecodedObservation with one Field per known group.
        """
        fields = {name: Field.from_mapping(data, name) for name in OBSERVATION_FIELDS}
        if raw_text is None:
            raw_text = data.get("_raw")
        return cls(raw_text=raw_text, raw=dict(data), **fields)

    @property
    def is_automatic(self) -> bool:
        """Whether the report comes from an automatic station."""
        return bool(self.weather_indicator.get("automatic").value_or(False))

    @property
    def weather_indicator_value(self) -> Optional[int]:
        """Station operation / weather group indicator (ix)."""
        return self.weather_indicator.get("value").value_or()

    def reported_groups(self):
        """Names of groups that carry a value (for debug logging)."""
        return [name for name in OBSERVATION_FIELDS if getattr(self, name).is_present]
