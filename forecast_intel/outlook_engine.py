"""Synthesize tomorrow's single dominant outlook.

Classifications and pattern flags often co-occur; only one of them becomes the
badge/headline. The branches in ``select_outlook`` are evaluated top to bottom
and the first satisfied one wins:

    snow >= 2 > NW-flow snow > freezing drizzle > rain >= 4 > convective >
    rain 2-3 > wind (>= 40, >= 30) > heat > cold-air damming > cold >
    goldilocks > typical

The summary sentence and action list are computed independently of the
selected branch and ride along on the Outlook.
"""

from __future__ import annotations

from typing import Dict, List, NamedTuple, Sequence, Tuple

from forecast_intel.aggregation import aggregate
from forecast_intel.classification import classify_rain, classify_snow
from forecast_intel.clock import DEFAULT_CLOCK, Clock
from forecast_intel.comfort import comfort_for_month
from forecast_intel.config import settings
from forecast_intel.domain import (
    AggregateSummary,
    Badge,
    Classification,
    GoldilocksVariant,
    HourlySeries,
    Outlook,
    OutlookCategory,
    PatternFlags,
    Window,
)
from forecast_intel.patterns import detect_patterns
from forecast_intel.windowing import tomorrow_window
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="forecast_intel/outlook_engine")

# category -> (badge text, badge color, emoji)
BADGES: Dict[OutlookCategory, Tuple[str, str, str]] = {
    OutlookCategory.SNOW: ("Snowy", "#7bb4ff", "❄️"),
    OutlookCategory.NW_FLOW_SNOW: ("Mountain Flurries", "#9bb0ff", "🌨️"),
    OutlookCategory.FREEZING_DRIZZLE: ("Icy", "#a9c8e8", "🧊"),
    OutlookCategory.RAIN: ("Rainy", "#6fa8ff", "🌧️"),
    OutlookCategory.STORM: ("Stormy", "#ff8b5c", "⛈️"),
    OutlookCategory.SHOWERS: ("Showers", "#8fb8ff", "🌦️"),
    OutlookCategory.STRONG_WIND: ("Windy", "#b0d4ff", "💨"),
    OutlookCategory.GUSTY: ("Breezy", "#c4dcf5", "🌬️"),
    OutlookCategory.HEAT: ("Hot", "#ffb36b", "🔥"),
    OutlookCategory.COLD_AIR_DAMMING: ("Damp & Chilly", "#b8c4d6", "☁️"),
    OutlookCategory.COLD: ("Cold", "#9ed0ff", "🥶"),
    OutlookCategory.GOLDILOCKS: ("Goldilocks", "#ffe28a", "🌤️"),
    OutlookCategory.TYPICAL: ("Typical", "#ddd", "🌡️"),
    OutlookCategory.NO_DATA: ("No data", "#ccc", "❔"),
}

GOLDILOCKS_TEXT: Dict[GoldilocksVariant, str] = {
    GoldilocksVariant.FULL: "Near-perfect day: highs around {high}°F, comfortable humidity and light winds.",
    GoldilocksVariant.AFTERNOON: "A chilly start, but the afternoon turns just right with highs around {high}°F.",
    GoldilocksVariant.VALLEYS: "Just right in the valleys with highs around {high}°F; windy on the ridges.",
    GoldilocksVariant.EARLY_MUGGY_LATE: "Pleasant temperatures near {high}°F, turning muggy later in the day.",
}


class OutlookChoice(NamedTuple):
    """Selected branch with its rendered headline and text."""
    category: OutlookCategory
    headline: str
    text: str


def _deg(value: float | None) -> str:
    """Whole-degree rendering; '--' for a missing reading."""
    return "--" if value is None else f"{value:.0f}"


def _dry(summary: AggregateSummary) -> bool:
    return summary.total_precip < 0.02 and summary.total_snow < 0.02


def _humid_heat(summary: AggregateSummary) -> bool:
    return (
        summary.max_temp is not None
        and summary.max_temp >= 85
        and summary.max_dew is not None
        and summary.max_dew >= 68
    )


def _sunny_dry(summary: AggregateSummary) -> bool:
    return summary.max_uv >= 7 and _dry(summary)


def _is_damming(summary: AggregateSummary, flags: PatternFlags) -> bool:
    if flags.cad_wedge:
        return True
    return (
        flags.cold_air_damming
        and summary.total_precip >= 0.01
        and summary.max_temp is not None
        and summary.max_temp <= 45
    )


def select_outlook(
    summary: AggregateSummary,
    rain: Classification,
    snow: Classification,
    flags: PatternFlags,
) -> OutlookChoice:
    """Walk the priority ladder and render the winning branch."""
    rain_in = summary.total_precip
    snow_in = summary.total_snow
    gust = summary.max_gust

    if snow.severity >= 2:
        text = f'Around {snow_in:.1f}" of snow expected.'
        if snow.severity >= 4:
            text += " Allow extra travel time."
        return OutlookChoice(OutlookCategory.SNOW, f"{snow.label} tomorrow", text)

    if flags.nw_flow_snow:
        return OutlookChoice(
            OutlookCategory.NW_FLOW_SNOW,
            "NW-flow snow showers",
            "Northwest winds may squeeze out snow showers on the higher ridges; "
            "little more than flurries in the valleys.",
        )

    if flags.freezing_drizzle:
        return OutlookChoice(
            OutlookCategory.FREEZING_DRIZZLE,
            "Freezing drizzle possible",
            f"Light drizzle with temperatures near {_deg(summary.min_temp)}°F could glaze "
            "bridges and untreated surfaces.",
        )

    if rain.severity >= 4:
        text = f'About {rain_in:.2f}" of rain expected.'
        if flags.convective:
            text += " Heavier downpours possible."
        return OutlookChoice(OutlookCategory.RAIN, f"{rain.label} tomorrow", text)

    if flags.convective:
        return OutlookChoice(
            OutlookCategory.STORM,
            "Thunderstorms possible",
            f'Bursts of heavy rain, up to {flags.max_spike:.2f}" in an hour; '
            f'about {rain_in:.2f}" in total.',
        )

    if rain.severity >= 2:
        style = "gentle, steady rain at times" if flags.stratiform else "on-and-off showers"
        return OutlookChoice(
            OutlookCategory.SHOWERS,
            rain.label,
            f'Around {rain_in:.2f}" of rain with {style}.',
        )

    if gust >= 40:
        return OutlookChoice(
            OutlookCategory.STRONG_WIND,
            "Strong winds",
            f"Gusts up to {gust:.0f} mph could bring down limbs. Secure loose items.",
        )
    if gust >= 30:
        return OutlookChoice(
            OutlookCategory.GUSTY,
            "Gusty winds",
            f"Gusts up to {gust:.0f} mph, strongest on the ridges.",
        )

    if _humid_heat(summary):
        return OutlookChoice(
            OutlookCategory.HEAT,
            "Hot and humid",
            f"Highs near {_deg(summary.max_temp)}°F with dewpoints around "
            f"{_deg(summary.max_dew)}°F. Stay hydrated.",
        )
    if _sunny_dry(summary):
        return OutlookChoice(
            OutlookCategory.HEAT,
            "Strong sun",
            f"UV index up to {summary.max_uv:.0f} under dry skies. Sunscreen recommended.",
        )

    if _is_damming(summary, flags):
        return OutlookChoice(
            OutlookCategory.COLD_AIR_DAMMING,
            "Cold air wedge",
            f"Cool, damp air stays trapped against the mountains; highs only near "
            f"{_deg(summary.max_temp)}°F.",
        )

    if summary.min_temp is not None and summary.min_temp <= 35:
        return OutlookChoice(
            OutlookCategory.COLD,
            "Cold day",
            f"Lows near {_deg(summary.min_temp)}°F and highs around {_deg(summary.max_temp)}°F. "
            "Dress warmly in layers.",
        )

    if flags.goldilocks is not None:
        return OutlookChoice(
            OutlookCategory.GOLDILOCKS,
            "Goldilocks day",
            GOLDILOCKS_TEXT[flags.goldilocks].format(high=_deg(summary.max_temp)),
        )

    if summary.min_temp is not None and summary.max_temp is not None:
        text = f"Temps from {_deg(summary.min_temp)}°F to {_deg(summary.max_temp)}°F."
    else:
        text = "Nothing notable in the forecast."
    return OutlookChoice(OutlookCategory.TYPICAL, "Mild, uneventful day", text)


def build_summary(summary: AggregateSummary, flags: PatternFlags) -> str:
    """One or two sentences: precip/temps/gusts, then the leading microclimate note."""
    parts: List[str] = []

    precip_part = None
    if summary.total_snow >= 0.1:
        precip_part = f'Light snow (~{summary.total_snow:.1f}")'
    elif summary.total_precip >= 0.10:
        precip_part = f'Around {summary.total_precip:.2f}" of rain'

    temp_part = None
    if summary.min_temp is not None and summary.max_temp is not None:
        temp_part = f"temps from {_deg(summary.min_temp)}°F to {_deg(summary.max_temp)}°F"

    wind_part = f"gusts up to {summary.max_gust:.0f} mph" if summary.max_gust >= 30 else None

    first = ", ".join(p for p in (precip_part, temp_part, wind_part) if p)
    if first:
        parts.append(first[0].upper() + first[1:] + ".")

    notes: List[str] = []
    if flags.swing_phrase:
        notes.append(flags.swing_phrase)
    elif flags.big_temperature_swing:
        notes.append("big temperature swings")
    if flags.ridge_winds:
        notes.append("breezy on ridges")
    if flags.nw_flow_snow:
        notes.append("NW-flow flurries possible")
    if flags.cad_wedge:
        notes.append("CAD may keep temps cooler")

    if notes:
        parts.append(notes[0][0].upper() + notes[0][1:] + ".")

    return " ".join(parts)


def build_action_list(summary: AggregateSummary, flags: PatternFlags) -> List[str]:
    """Every applicable recommendation, in a fixed order, duplicates included."""
    actions: List[str] = []

    if summary.total_precip >= 0.10:
        actions.append("carry an umbrella")
        actions.append("wear waterproof shoes or a rain jacket")

    if summary.total_snow >= 0.1:
        actions.append("allow extra travel time")
        actions.append("use caution on bridges and overpasses")
        actions.append("dress warmly")

    if summary.min_temp is not None and summary.min_temp <= 35:
        actions.append("dress warmly in layers")
        actions.append("wear gloves and a hat")

    if summary.max_temp is not None and summary.max_temp >= 82:
        actions.append("stay hydrated")
        actions.append("wear light clothing")

    if summary.max_dew is not None and summary.max_dew >= 65:
        actions.append("take breaks if outdoors")

    if summary.max_uv >= 6:
        actions.append("apply sunscreen")
        actions.append("wear a hat or sunglasses")

    if summary.max_gust >= 30:
        actions.append("secure loose items")

    if flags.big_temperature_swing:
        actions.append("dress in layers for big temperature swings")

    if flags.nw_flow_snow:
        actions.append("watch for slick spots on the Blue Ridge Parkway")

    if flags.cad_wedge:
        actions.append("be alert for freezing drizzle in sheltered valleys")

    if flags.ridge_winds:
        actions.append("expect stronger winds on ridgelines")

    return actions


def dedupe_actions(actions: Sequence[str]) -> List[str]:
    """Drop repeats and fold every warm-dressing variant into one item."""
    merged = [
        "dress warmly in layers" if ("dress warmly" in a or "dress in layers" in a) else a
        for a in dict.fromkeys(actions)
    ]
    return list(dict.fromkeys(merged))


def priority_actions(actions: Sequence[str]) -> List[str]:
    """Travel, securing and warm-dressing actions, which lead when two or more apply."""
    return [a for a in actions if "travel" in a or "secure" in a or "dress warmly" in a]


def top_action_sentence(actions: Sequence[str]) -> str:
    """'Plan to A and B.' from the two priority actions, else the first action."""
    deduped = dedupe_actions(actions)
    priority = priority_actions(deduped)
    if len(priority) >= 2:
        return "Plan to " + " and ".join(priority[:2]) + "."
    if deduped:
        return f"Plan to {deduped[0]}."
    return ""


def build_human_action_text(headline: str | None, summary: str, actions: Sequence[str]) -> str:
    """Headline line, then the summary and up to two actions."""
    deduped = dedupe_actions(actions)
    priority = priority_actions(deduped)
    final = priority[:2] if len(priority) >= 2 else deduped[:2]
    action_sentence = "Plan to " + " and ".join(final) + "." if final else ""

    text = (headline + "\n" if headline else "") + summary
    if action_sentence:
        text += " " + action_sentence
    return text


def _make_outlook(category: OutlookCategory, headline: str, text: str, **extra) -> Outlook:
    badge_text, color, emoji = BADGES[category]
    return Outlook(
        badge=Badge(text=badge_text, category=category, color=color),
        emoji=emoji,
        headline=headline,
        text=text,
        **extra,
    )


def no_data_outlook() -> Outlook:
    """Neutral result for a window with no hours."""
    return _make_outlook(
        OutlookCategory.NO_DATA,
        "Forecast unavailable",
        "Tomorrow's hourly forecast is not available yet.",
    )


def compute_outlook(
    series: HourlySeries,
    *,
    clock: Clock | None = None,
    window: Window | None = None,
    strict: bool | None = None,
    fallback: bool | None = None,
    normals: Sequence[float] | None = None,
) -> Outlook:
    """Pure function: tomorrow's outlook for an hourly series.

    The clock is read once; the same instant picks tomorrow's date and the
    month used for the comfort phrase. ``window`` overrides the tomorrow
    window entirely.
    """
    now = (clock or DEFAULT_CLOCK).now()
    strict = settings.strict_pattern_detection if strict is None else strict
    fallback = settings.tomorrow_fallback if fallback is None else fallback
    normals = normals or settings.normal_highs_f

    if window is None:
        window = tomorrow_window(series, now, fallback=fallback)
    if window.is_empty:
        logger.info("Empty outlook window; returning no-data outlook", extra={"now": now.isoformat()})
        return no_data_outlook()

    summary = aggregate(series, window)
    flags = detect_patterns(series, window, summary, strict=strict)
    rain = classify_rain(summary.total_precip)
    snow = classify_snow(summary.total_snow)

    choice = select_outlook(summary, rain, snow, flags)
    actions = build_action_list(summary, flags)
    comfort = comfort_for_month(
        summary.max_temp,
        summary.max_dew,
        summary.max_gust,
        now.month,
        precip=summary.total_precip + summary.total_snow,
        normals=normals,
    )

    logger.debug(
        "Selected outlook branch",
        extra={"category": choice.category.value, "rain_severity": rain.severity,
               "snow_severity": snow.severity},
    )
    return _make_outlook(
        choice.category,
        choice.headline,
        choice.text,
        summary=build_summary(summary, flags),
        action=top_action_sentence(actions),
        actions=dedupe_actions(actions),
        comfort=comfort,
        goldilocks=flags.goldilocks,
    )
