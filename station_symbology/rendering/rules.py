"""
Per-slot plotting rules.

Each slot of the plotting model has its own rule function taking a
``RuleContext``. Rules read only the decoded observation and the render
options; missing data or a missing glyph leaves the slot (partly) empty and
never raises.

Slot summary (WMO plotting model):
    2  CH     high cloud glyph
    6  TTT    air temperature
    7  CM     middle cloud glyph
    8  PPPP   sea-level pressure code
    10 VV     visibility code
    11 ww     present weather glyph
    12 N ddff cloud cover, automatic station triangle and wind
    13 ppp    pressure change
    14 a      pressure tendency characteristic glyph
    16 TdTdTd dew-point temperature
    17 CL Nh h low cloud glyph, cloud amount and cloud base
    18 W1W2   past weather glyphs
    23 RRR tR precipitation amount and period
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from ..calculations.codes import (
    format_number,
    precipitation_amount_text,
    pressure_tendency_text,
    sea_level_pressure_code,
    temperature_text,
    zero_padded_code,
)
from ..config import RenderOptions
from ..constants import (
    CELL_SIZE,
    CLOUD_COVER_SLASH_CODE,
    DEBUG_PLACEHOLDER_TEXT,
    EMPTY_SLOTS,
    EXTERIOR_SLOT,
    MISSING_TEXT,
    PAST_WEATHER_MANNED_SUPPRESSED,
    PAST_WEATHER_MANNED_VARIANTS,
    PRECIP_NOT_OBSERVED_TEXT,
)
from ..data.observation import DecodedObservation
from .assets import icon_path, request_icon
from .diagram import IconPrimitive, SlotGroup, TextPrimitive, centered_transform
from .wind import automatic_station_overlay, build_wind_overlays, hemisphere_sign

logger = logging.getLogger("station_symbology.rendering.rules")

W = CELL_SIZE


@dataclass
class RuleContext:
    """Everything a slot rule may read or write.

    Attributes:
        slot: Slot being filled
        observation: Decoded observation
        options: Render options of the current call
        icons: Icon library
        latitude: Station latitude
        highlight_color: Colour used for red/polychromatic elements
        overlays: Canvas-level primitives collected across rules
    """

    slot: SlotGroup
    observation: DecodedObservation
    options: RenderOptions
    icons: Any
    latitude: float = 0.0
    highlight_color: str = "#ff0000"
    overlays: List[IconPrimitive] = field(default_factory=list)

    @property
    def hemisphere(self) -> int:
        return hemisphere_sign(self.latitude)

    def text(self, value: Any, dx: float = 0.0, dy: float = 0.0) -> TextPrimitive:
        if not isinstance(value, str):
            value = format_number(value)
        return self.slot.add(TextPrimitive(text=value, transform=centered_transform(dx, dy)))

    def icon(self, kind: str, code: Any = None, dx: float = 0.0, dy: float = 0.0) -> IconPrimitive:
        return self.slot.add(request_icon(self.icons, icon_path(kind, code), transform=centered_transform(dx, dy)))

    def highlight(self) -> None:
        self.slot.color = self.highlight_color


Rule = Callable[[RuleContext], None]


# ============================================================================
# Cloud Types
# ============================================================================

def high_clouds(ctx: RuleContext) -> None:
    """Slot 2: CH glyph, optionally in the highlight colour."""
    code = ctx.observation.cloud_types.get("high_cloud_type", "value")
    if not code.is_present or code.value == 0:
        logger.debug("CH high clouds are not defined")
        return
    ctx.icon("high_cloud", code.value)
    if ctx.options.high_clouds_in_red:
        ctx.highlight()


def middle_clouds(ctx: RuleContext) -> None:
    """Slot 7: CM glyph."""
    code = ctx.observation.cloud_types.get("middle_cloud_type", "value")
    if not code.is_present or code.value == 0:
        logger.debug("CM middle clouds are not defined")
        return
    ctx.icon("middle_cloud", code.value)


def low_clouds(ctx: RuleContext) -> None:
    """
    Slot 17: CL glyph with cloud amount Nh to its right and base h below it.

    Layouts:
        CL = 0 with middle cloud amount: Nh top right, h bottom left
        CL, Nh, h: CL top left, Nh top right, h bottom left
        CL, Nh:    CL and Nh side by side, vertically centred
        CL, h:     CL top, h bottom
        CL only:   CL centred
    """
    obs = ctx.observation
    cloud_types = obs.cloud_types
    if not cloud_types.is_present:
        logger.debug("No cloud types group, slot 17 left empty")
        return

    low_type = cloud_types.get("low_cloud_type", "value")
    if not low_type.is_present:
        logger.debug("Low clouds (CL) are not defined")
        return

    base = obs.lowest_cloud_base.get("_code")

    if low_type.value == 0:
        # No low clouds: Nh is the middle cloud amount and no CL glyph is drawn
        middle_amount = cloud_types.get("middle_cloud_amount", "value")
        if middle_amount.is_present:
            ctx.text(middle_amount.value, W / 3.2, -W / 5)
            if base.is_present:
                ctx.text(base.value, -W / 3.2, W / 2.6)
        return

    low_amount = cloud_types.get("low_cloud_amount", "value")
    if low_amount.is_present:
        if base.is_present:
            ctx.icon("low_cloud", low_type.value, -W / 3.2, -W / 3.2)
            ctx.text(low_amount.value, W / 3.2, -W / 5)
            ctx.text(base.value, -W / 3.2, W / 2.6)
        else:
            ctx.icon("low_cloud", low_type.value, -W / 3.2, 0)
            ctx.text(low_amount.value, W / 3.2, 0)
    elif base.is_present:
        ctx.icon("low_cloud", low_type.value, 0, -W / 3.2)
        ctx.text(base.value, 0, W / 3.2)
    else:
        ctx.icon("low_cloud", low_type.value)


# ============================================================================
# Temperature, Pressure, Visibility
# ============================================================================

def air_temperature(ctx: RuleContext) -> None:
    """Slot 6: TTT."""
    value = ctx.observation.air_temperature.get("value")
    if not value.is_present:
        logger.debug("Air temperature is not defined")
        return
    ctx.text(temperature_text(value.value, ctx.options.temperature))


def dewpoint_temperature(ctx: RuleContext) -> None:
    """Slot 16: TdTdTd."""
    value = ctx.observation.dewpoint_temperature.get("value")
    if not value.is_present:
        logger.debug("Dew-point temperature is not defined")
        return
    ctx.text(temperature_text(value.value, ctx.options.dew_point))


def sea_level_pressure(ctx: RuleContext) -> None:
    """Slot 8: PPPP as a three-figure code."""
    value = ctx.observation.sea_level_pressure.get("value")
    if not value.is_present:
        logger.debug("Sea-level pressure (PPPP) is not defined")
        return
    ctx.text(sea_level_pressure_code(value.value))


def visibility(ctx: RuleContext) -> None:
    """Slot 10: VV code, plotted as reported."""
    code = ctx.observation.visibility.get("_code")
    if not code.is_present:
        logger.debug("Visibility (VV) is not defined")
        return
    ctx.text(str(code.value))


def pressure_change(ctx: RuleContext) -> None:
    """Slot 13: ppp; a falling value is highlighted in polychromatic mode."""
    change = ctx.observation.pressure_tendency.get("change", "value")
    if not change.is_present:
        logger.debug("Pressure change (ppp) is not defined")
        return
    text, highlight = pressure_tendency_text(change.value, ctx.options.poly_chromatic)
    ctx.text(text)
    if highlight:
        ctx.highlight()


def pressure_characteristic(ctx: RuleContext) -> None:
    """Slot 14: a glyph; falling characteristics (a >= 5) highlighted in polychromatic mode."""
    code = ctx.observation.pressure_tendency.get("tendency", "value")
    if not code.is_present:
        logger.debug("Pressure tendency characteristic (a) is not defined")
        return
    ctx.icon("pressure_tendency", code.value)
    if ctx.options.poly_chromatic and code.value >= 5:
        ctx.highlight()


# ============================================================================
# Weather
# ============================================================================

def present_weather(ctx: RuleContext) -> None:
    """
    Slot 11: ww (manned) or wawa (automatic) glyph.

    The weather indicator ix decides whether the slot is blank, shows "//"
    (not observed), or shows the reported glyph:

        automatic: ix 5 blank; ix 6, or ix 7 without a weather group, "//"
        manned:    ix 2/5 blank; ix 3/6, or ix 1/4 without a weather group, "//"
    """
    obs = ctx.observation
    ix = obs.weather_indicator_value
    weather = obs.present_weather.get("value")
    has_group = obs.present_weather.is_present

    if obs.is_automatic:
        blank = ix == 5
        missing = ix == 6 or (ix == 7 and not has_group)
        kind = "present_weather_automatic"
    else:
        blank = ix in (2, 5)
        missing = ix in (3, 6) or (ix in (1, 4) and not has_group)
        kind = "present_weather_manned"

    if blank:
        return
    if missing:
        ctx.text(MISSING_TEXT)
        return
    if not weather.is_present:
        logger.debug("Present weather (ww) is not defined")
        return
    ctx.icon(kind, zero_padded_code(weather.value), -W / 10, 0)


def past_weather(ctx: RuleContext) -> None:
    """
    Slot 18: W1 W2 (manned) or Wa1 Wa2 (automatic) glyphs.

    Manned codes 0, 1 and 2 are not plotted. Two remaining codes are drawn
    side by side, a single one is centred. This includes a W2 whose W1 was
    dropped: it moves to the centre instead of keeping its right-hand place
    next to a blank. Manned glyphs are highlighted in polychromatic mode.
    """
    obs = ctx.observation
    if not obs.past_weather.is_present:
        logger.debug("Past weather (W1W2) is not defined")
        return

    automatic = obs.is_automatic
    codes = []
    for position in (0, 1):
        code = obs.past_weather.get(position, "value")
        if not code.is_present:
            continue
        if not automatic and code.value in PAST_WEATHER_MANNED_SUPPRESSED:
            continue
        codes.append(code.value)

    if not codes:
        return

    if automatic:
        kind = "past_weather_automatic"
        offsets = [(-W / 3.2, 0), (W / 3.2, 0)]
    else:
        kind = "past_weather_manned"
        codes = [PAST_WEATHER_MANNED_VARIANTS.get(c, c) for c in codes]
        offsets = [(-W / 3.8, 0), (W / 2.2, 0)]

    if len(codes) == 1:
        offsets = [(0, 0)]

    for code, (dx, dy) in zip(codes, offsets):
        ctx.icon(kind, code, dx, dy)

    if not automatic and ctx.options.poly_chromatic:
        ctx.highlight()


def precipitation(ctx: RuleContext) -> None:
    """
    Slot 23: RRR amount and tR period code.

    iR 3 (no precipitation) leaves the slot blank and iR 4 (not observed)
    plots "///". Otherwise the amount comes from section 1 or 3, whichever
    the indicator flags; section 3 wins when both are flagged.
    """
    obs = ctx.observation
    indicator = obs.precipitation_indicator
    if not indicator.is_present:
        logger.debug("Precipitation indicator (iR) is not defined")
        return

    ir = indicator.get("value").value_or()
    if ir == 3:
        return
    if ir == 4:
        ctx.text(PRECIP_NOT_OBSERVED_TEXT)
        return

    if indicator.get("in_group_3").value_or(False):
        group = obs.precipitation_s3
    elif indicator.get("in_group_1").value_or(False):
        group = obs.precipitation_s1
    else:
        logger.debug("Precipitation indicator flags no group")
        return

    amount = group.get("amount", "value")
    if not amount.is_present:
        logger.debug("Precipitation amount (RRR) is not defined")
        return

    text = precipitation_amount_text(amount.value)
    period = group.get("time_before_obs", "_code")
    if period.is_present:
        ctx.text(text, -W / 4.2, 0)
        ctx.text(period.value, W / 3, 0)
    else:
        ctx.text(text)


# ============================================================================
# Station Circle
# ============================================================================

def station_circle(ctx: RuleContext) -> None:
    """
    Slot 12: total cloud cover N, automatic station triangle and wind.

    A cloud cover group reported as not observed (present but null) is drawn
    as the slashed circle. The triangle and wind glyphs are canvas overlays.
    """
    obs = ctx.observation
    cover = obs.cloud_cover

    if cover.is_null:
        code = CLOUD_COVER_SLASH_CODE
    elif cover.is_present:
        code = cover.get("_code").value_or()
    else:
        code = None
        logger.debug("Total cloud cover (N) is not defined")

    if code is not None:
        ctx.icon("cloud_cover", code, -W / 2, -W / 2)

    if obs.is_automatic:
        ctx.overlays.append(automatic_station_overlay(ctx.icons))

    ctx.overlays.extend(build_wind_overlays(obs, ctx.latitude, ctx.icons))


# ============================================================================
# Empty and Unhandled Slots
# ============================================================================

def empty_slot(ctx: RuleContext) -> None:
    """Slots defined as empty by the plotting model."""


def swell_waves(ctx: RuleContext) -> None:
    """Slot 25: swell wave group below the grid; not plotted yet."""


def placeholder(ctx: RuleContext) -> None:
    """Slots without a rule; marked with an "x" in debug mode."""
    if ctx.options.debug:
        ctx.text(DEBUG_PLACEHOLDER_TEXT)


SLOT_RULES: Dict[int, Rule] = {
    2: high_clouds,
    6: air_temperature,
    7: middle_clouds,
    8: sea_level_pressure,
    10: visibility,
    11: present_weather,
    12: station_circle,
    13: pressure_change,
    14: pressure_characteristic,
    16: dewpoint_temperature,
    17: low_clouds,
    18: past_weather,
    23: precipitation,
    EXTERIOR_SLOT: swell_waves,
}
SLOT_RULES.update({idx: empty_slot for idx in EMPTY_SLOTS})


def rule_for(slot_index: int) -> Rule:
    """Rule of a slot; slots without one get the debug placeholder."""
    return SLOT_RULES.get(slot_index, placeholder)


def apply_rules(
    slots: List[SlotGroup],
    observation: DecodedObservation,
    options: RenderOptions,
    icons,
    latitude: float,
    highlight_color: str
) -> List[IconPrimitive]:
    """
    Fill every non-suppressed slot and collect canvas overlays.

    Args:
        slots: Positioned slot containers (modified in place)
        observation: Decoded observation
        options: Render options
        icons: Icon library
        latitude: Station latitude
        highlight_color: Recolour for highlighted slots

    Returns:
        Overlay primitives (wind, automatic station triangle)
    """
    overlays: List[IconPrimitive] = []
    for slot in slots:
        if slot.suppressed:
            continue
        ctx = RuleContext(
            slot=slot,
            observation=observation,
            options=options,
            icons=icons,
            latitude=latitude,
            highlight_color=highlight_color,
            overlays=overlays,
        )
        rule_for(slot.index)(ctx)
    return overlays
