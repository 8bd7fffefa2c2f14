"""Near-term alerts for the 12-48 hour horizon.

Unlike the outlook, every satisfied condition yields its own Alert, in a fixed
order. Where the qualifying hours can be located, the detail sentence carries
a timing phrase built from the first and last qualifying hour.
"""

from __future__ import annotations

from typing import Callable, List

from forecast_intel.aggregation import aggregate, amount, safe_num
from forecast_intel.classification import classify_rain, classify_snow
from forecast_intel.config import settings
from forecast_intel.domain import (
    AggregateSummary,
    Alert,
    AlertId,
    HourlySeries,
    PrecipType,
    Window,
)
from forecast_intel.patterns import CONVECTIVE_SPIKE_IN, detect_patterns
from forecast_intel.windowing import describe_timing, find_event_timing, relative_window
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="forecast_intel/alerts")

STRONG_WIND_MPH = 40.0
GUSTY_WIND_MPH = 30.0
BITTER_COLD_F = 15.0
HIGH_UV = 7.0


def _timing_clause(
    series: HourlySeries,
    window: Window,
    predicate: Callable[[int], bool],
    *,
    lead: str = "",
) -> str:
    """' Tuesday early morning through Wednesday evening' or an empty string."""
    first, last = find_event_timing(series, window, predicate)
    phrase = describe_timing(first, last)
    if not phrase:
        return ""
    if lead:
        return f" {lead} {phrase}"
    return f", {phrase}"


def compute_alerts_for_window(
    series: HourlySeries,
    window: Window,
    *,
    strict: bool = False,
) -> List[Alert]:
    """Pure function: every alert whose condition holds in ``window``."""
    if window.is_empty:
        return []

    summary: AggregateSummary = aggregate(series, window)
    flags = detect_patterns(series, window, summary, strict=strict)
    rain = classify_rain(summary.total_precip)
    snow = classify_snow(summary.total_snow)
    dry = summary.total_precip < 0.02 and summary.total_snow < 0.02

    temps = series.values("temperature")
    dews = series.values("dewpoint")
    precip = series.values("precipitation")
    snowfall = series.values("snowfall")
    gusts = series.values("wind_gust")
    directions = series.values("wind_direction")
    uv = series.values("uv_index")

    window_idx = set(window.indices())

    def temp_between(i: int, lo: float, hi: float) -> bool:
        t = safe_num(temps, i)
        return t is not None and lo <= t <= hi

    alerts: List[Alert] = []

    if snow.severity >= 3:
        when = _timing_clause(series, window, lambda i: amount(snowfall, i) > 0, lead="starting")
        alerts.append(Alert(
            id=AlertId.SNOW,
            icon="❄️",
            title=snow.label,
            detail=f'Around {summary.total_snow:.1f}" of snow possible{when}.',
        ))

    if flags.nw_flow_snow and flags.precip_type == PrecipType.SNOW:
        def nw_snow_hour(i: int) -> bool:
            d = safe_num(directions, i)
            return amount(snowfall, i) > 0 and d is not None and 290 <= d <= 330
        when = _timing_clause(series, window, nw_snow_hour)
        alerts.append(Alert(
            id=AlertId.NW_FLOW_SNOW,
            icon="🌨️",
            title="NW-flow snow showers",
            detail=f"Upslope snow showers on northwest-facing slopes and higher ridges{when}.",
        ))

    if flags.freezing_drizzle:
        def drizzle_hour(i: int) -> bool:
            t = safe_num(temps, i)
            d = safe_num(dews, i)
            r = safe_num(precip, i)
            if t is None or d is None or r is None:
                return False
            return 28 <= t <= 32 and 0 < r < 0.05 and t - d <= 4
        when = _timing_clause(series, window, drizzle_hour)
        alerts.append(Alert(
            id=AlertId.FREEZING_DRIZZLE,
            icon="🧊",
            title="Freezing drizzle",
            detail=f"Drizzle near freezing could glaze roads and walkways{when}.",
        ))

    if rain.severity >= 4:
        when = _timing_clause(series, window, lambda i: amount(precip, i) > 0, lead="starting")
        alerts.append(Alert(
            id=AlertId.HEAVY_RAIN,
            icon="🌧️",
            title=rain.label,
            detail=f'About {summary.total_precip:.2f}" of rain expected{when}.',
        ))

    if flags.convective:
        def spike_hour(i: int) -> bool:
            return i - 1 in window_idx and amount(precip, i) - amount(precip, i - 1) >= CONVECTIVE_SPIKE_IN
        when = _timing_clause(series, window, spike_hour)
        alerts.append(Alert(
            id=AlertId.THUNDERSTORMS,
            icon="⛈️",
            title="Thunderstorms possible",
            detail=f'Downpours up to {flags.max_spike:.2f}" in an hour{when}.',
        ))

    if summary.max_gust >= STRONG_WIND_MPH:
        when = _timing_clause(series, window, lambda i: (safe_num(gusts, i) or 0.0) >= STRONG_WIND_MPH)
        alerts.append(Alert(
            id=AlertId.STRONG_WIND,
            icon="💨",
            title="Strong wind",
            detail=f"Gusts up to {summary.max_gust:.0f} mph could down limbs and power lines{when}.",
        ))
    elif summary.max_gust >= GUSTY_WIND_MPH:
        when = _timing_clause(series, window, lambda i: (safe_num(gusts, i) or 0.0) >= GUSTY_WIND_MPH)
        alerts.append(Alert(
            id=AlertId.GUSTY_WIND,
            icon="🌬️",
            title="Gusty wind",
            detail=f"Gusts up to {summary.max_gust:.0f} mph{when}.",
        ))

    if (
        summary.max_temp is not None
        and summary.max_temp >= 85
        and summary.max_dew is not None
        and summary.max_dew >= 68
    ):
        when = _timing_clause(series, window, lambda i: temp_between(i, 85, float("inf")))
        alerts.append(Alert(
            id=AlertId.HOT_HUMID,
            icon="🥵",
            title="Hot and humid",
            detail=f"Highs near {summary.max_temp:.0f}°F with dewpoints around {summary.max_dew:.0f}°F{when}.",
        ))

    if summary.min_temp is not None and summary.min_temp <= BITTER_COLD_F:
        when = _timing_clause(series, window, lambda i: temp_between(i, float("-inf"), BITTER_COLD_F))
        alerts.append(Alert(
            id=AlertId.BITTER_COLD,
            icon="🥶",
            title="Bitter cold",
            detail=f"Temperatures down to {summary.min_temp:.0f}°F{when}. Protect pipes and pets.",
        ))

    if summary.max_uv >= HIGH_UV and dry:
        when = _timing_clause(series, window, lambda i: (safe_num(uv, i) or 0.0) >= HIGH_UV)
        alerts.append(Alert(
            id=AlertId.HIGH_UV,
            icon="☀️",
            title="High UV",
            detail=f"UV index up to {summary.max_uv:.0f} under dry skies{when}. Wear sunscreen.",
        ))

    logger.debug(
        "Computed alerts",
        extra={"start": window.start, "end": window.end, "alert_ids": [a.id.value for a in alerts]},
    )
    return alerts


def compute_alerts(
    series: HourlySeries,
    *,
    start_hours: int | None = None,
    end_hours: int | None = None,
    strict: bool | None = None,
) -> List[Alert]:
    """Alerts for the configured near-term horizon (hours 12-48 by default)."""
    start_hours = settings.alert_start_hours if start_hours is None else start_hours
    end_hours = settings.alert_end_hours if end_hours is None else end_hours
    strict = settings.strict_pattern_detection if strict is None else strict

    window = relative_window(series, start_hours, end_hours)
    return compute_alerts_for_window(series, window, strict=strict)
