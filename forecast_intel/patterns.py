"""Hour-by-hour scans for compound weather signatures.

Each detector reads the windowed series and returns a boolean (plus a
magnitude where one is useful). ``detect_patterns`` runs them all and packs the
result into a PatternFlags value.

NW-flow snow and cold-air damming default to the lenient OR-across-window
form: every sub-condition must hold somewhere in the window, not necessarily
in the same hour. ``strict=True`` requires a single hour (or hour pair) to
satisfy all of them.

Only wet hours (precipitation or snowfall above zero) vote on the window's
precip type, so a dry cold spell reads as "none" rather than "snow".
"""

from __future__ import annotations

from typing import List, Tuple

from forecast_intel.aggregation import aggregate, amount, mean, safe_num
from forecast_intel.domain import (
    AggregateSummary,
    GoldilocksVariant,
    HourlySeries,
    PatternFlags,
    PrecipType,
    Window,
)
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="forecast_intel/patterns")

CONVECTIVE_SPIKE_IN = 0.20
STRATIFORM_MIN_HOURS = 4
LAYERS_DAY_SPREAD_F = 22.0
RIDGE_GUST_MPH = 35.0


def _pairs(window: Window) -> List[Tuple[int, int]]:
    """Adjacent (previous, current) index pairs inside the window."""
    idx = window.indices()
    return list(zip(idx, idx[1:]))


# ---------------------------------------------------------------------------
# Precipitation shape
# ---------------------------------------------------------------------------

def detect_convective(series: HourlySeries, window: Window) -> Tuple[bool, float]:
    """Flag any hour-over-hour precip jump of at least 0.20in; return the largest jump."""
    rain = series.values("precipitation")
    convective = False
    max_spike = 0.0
    for prev_i, i in _pairs(window):
        spike = amount(rain, i) - amount(rain, prev_i)
        if spike >= CONVECTIVE_SPIKE_IN:
            convective = True
            if spike > max_spike:
                max_spike = spike
    return convective, max_spike


def detect_stratiform(series: HourlySeries, window: Window) -> bool:
    """At least four hours of gentle rain, strictly between 0.01 and 0.10in."""
    rain = series.values("precipitation")
    gentle_hours = sum(1 for i in window.indices() if 0.01 < amount(rain, i) < 0.10)
    return gentle_hours >= STRATIFORM_MIN_HOURS


# ---------------------------------------------------------------------------
# Terrain-driven signatures
# ---------------------------------------------------------------------------

def detect_nw_flow_snow(series: HourlySeries, window: Window, *, strict: bool = False) -> bool:
    """Upslope snow: NW wind (290-330 deg), temp <= 36F and snowfall > 0.05in."""
    directions = series.values("wind_direction")
    temps = series.values("temperature")
    snow = series.values("snowfall")

    nw_wind = cold_enough = snowing = False
    for i in window.indices():
        d = safe_num(directions, i)
        t = safe_num(temps, i)
        s = safe_num(snow, i)
        hour_nw = d is not None and 290 <= d <= 330
        hour_cold = t is not None and t <= 36
        hour_snow = s is not None and s > 0.05
        if strict and hour_nw and hour_cold and hour_snow:
            return True
        nw_wind = nw_wind or hour_nw
        cold_enough = cold_enough or hour_cold
        snowing = snowing or hour_snow

    if strict:
        return False
    return nw_wind and cold_enough and snowing


def detect_cold_air_damming(series: HourlySeries, window: Window, *, strict: bool = False) -> bool:
    """Falling temps, rising dewpoint and a 10-25 mph gust across hour pairs."""
    temps = series.values("temperature")
    dews = series.values("dewpoint")
    gusts = series.values("wind_gust")

    falling_temps = rising_dew = cad_wind = False
    for prev_i, i in _pairs(window):
        t_prev, t_curr = safe_num(temps, prev_i), safe_num(temps, i)
        d_prev, d_curr = safe_num(dews, prev_i), safe_num(dews, i)
        g = safe_num(gusts, i)

        pair_falling = t_prev is not None and t_curr is not None and t_curr < t_prev
        pair_rising = d_prev is not None and d_curr is not None and d_curr > d_prev
        pair_wind = g is not None and 10 <= g <= 25
        if strict and pair_falling and pair_rising and pair_wind:
            return True
        falling_temps = falling_temps or pair_falling
        rising_dew = rising_dew or pair_rising
        cad_wind = cad_wind or pair_wind

    if strict:
        return False
    return falling_temps and rising_dew and cad_wind


def detect_cad_wedge(series: HourlySeries, window: Window) -> bool:
    """One hour with NE flow (20-80 deg), temp <= 45F and a saturated (<3F) spread."""
    directions = series.values("wind_direction")
    temps = series.values("temperature")
    dews = series.values("dewpoint")
    for i in window.indices():
        d = safe_num(directions, i)
        t = safe_num(temps, i)
        dew = safe_num(dews, i)
        if d is None or t is None or dew is None:
            continue
        if 20 <= d <= 80 and t <= 45 and abs(t - dew) < 3:
            return True
    return False


def detect_ridge_winds(series: HourlySeries, window: Window) -> bool:
    """Any gust of 35 mph or more."""
    gusts = series.values("wind_gust")
    return any((safe_num(gusts, i) or 0.0) >= RIDGE_GUST_MPH for i in window.indices())


def detect_freezing_drizzle(series: HourlySeries, window: Window) -> bool:
    """Same-hour 28-32F temp, 0-0.05in precip and a dew spread of 4F or less."""
    temps = series.values("temperature")
    dews = series.values("dewpoint")
    rain = series.values("precipitation")
    for i in window.indices():
        t = safe_num(temps, i)
        d = safe_num(dews, i)
        r = safe_num(rain, i)
        if t is None or d is None or r is None:
            continue
        if 28 <= t <= 32 and 0 < r < 0.05 and t - d <= 4:
            return True
    return False


# ---------------------------------------------------------------------------
# Thermal profile
# ---------------------------------------------------------------------------

def compute_wet_bulb(temp_f: float | None, dew_f: float | None) -> float | None:
    """Rough wet-bulb temperature from the dewpoint spread."""
    if temp_f is None or dew_f is None:
        return None
    spread = temp_f - dew_f
    if spread <= 2:
        return temp_f - 0.5
    if spread >= 15:
        return temp_f - 8
    return temp_f - spread * 0.5


def classify_hourly_precip_type(
    temp_f: float | None,
    dew_f: float | None,
    snow_in: float | None,
) -> PrecipType:
    """Phase an hour's precipitation would fall as."""
    if snow_in is not None and snow_in > 0.05:
        return PrecipType.SNOW
    tw = compute_wet_bulb(temp_f, dew_f)
    if tw is None:
        return PrecipType.UNKNOWN
    if tw <= 31.5:
        return PrecipType.SNOW
    if tw <= 33.0:
        return PrecipType.MIX
    return PrecipType.RAIN


def analyze_thermal_profile(
    series: HourlySeries,
    window: Window,
) -> Tuple[PrecipType, float | None, float | None]:
    """Window precip type plus the wet-bulb range.

    Only hours with precipitation or snowfall vote on the window's type.
    """
    temps = series.values("temperature")
    dews = series.values("dewpoint")
    rain = series.values("precipitation")
    snow = series.values("snowfall")

    wet_bulbs: List[float] = []
    counts = {PrecipType.RAIN: 0, PrecipType.SNOW: 0, PrecipType.MIX: 0}

    for i in window.indices():
        t = safe_num(temps, i)
        d = safe_num(dews, i)
        s = safe_num(snow, i)

        tw = compute_wet_bulb(t, d)
        if tw is not None:
            wet_bulbs.append(tw)

        if amount(rain, i) <= 0 and amount(snow, i) <= 0:
            continue
        hour_type = classify_hourly_precip_type(t, d, s)
        if hour_type in counts:
            counts[hour_type] += 1

    rain_hours = counts[PrecipType.RAIN]
    snow_hours = counts[PrecipType.SNOW]
    if counts[PrecipType.MIX] > 0 or (rain_hours > 0 and snow_hours > 0):
        precip_type = PrecipType.MIX
    elif snow_hours > 0:
        precip_type = PrecipType.SNOW
    elif rain_hours > 0:
        precip_type = PrecipType.RAIN
    else:
        precip_type = PrecipType.NONE

    if not wet_bulbs:
        return precip_type, None, None
    return precip_type, min(wet_bulbs), max(wet_bulbs)


def describe_temp_swing(
    series: HourlySeries,
    window: Window,
    min_temp: float | None,
    max_temp: float | None,
) -> str | None:
    """Phrase for the day's temperature shape; first matching rule wins."""
    temp_arr = series.values("temperature")
    temps = [t for t in (safe_num(temp_arr, i) for i in window.indices()) if t is not None]
    if len(temps) < 4:
        return None

    morning_avg = mean(temps[:6])
    afternoon_avg = mean(temps[10:18])
    evening_avg = mean(temps[-6:])

    # short windows have no afternoon block; only the spread rule applies
    if afternoon_avg is not None:
        rise = afternoon_avg - morning_avg
        drop = afternoon_avg - evening_avg

        if morning_avg > afternoon_avg > evening_avg:
            return "temperatures fall steadily through the day"
        if morning_avg > afternoon_avg and rise < -8:
            return "turning colder through the afternoon"
        if drop >= 15 and rise < 5:
            return "warm early, dropping sharply after midday"
        if rise >= 20 and drop < 10:
            return "cold morning, much warmer afternoon"
        if rise >= 15 and drop >= 15:
            return "big temperature swing: cold early, warm later, then colder again"

    if min_temp is not None and max_temp is not None and max_temp - min_temp >= LAYERS_DAY_SPREAD_F:
        return "big temperature swings"
    return None


# ---------------------------------------------------------------------------
# Ideal day
# ---------------------------------------------------------------------------

def detect_goldilocks(summary: AggregateSummary, ridge_winds: bool) -> GoldilocksVariant | None:
    """Pick the ideal-day variant, most ideal first, or None."""
    max_t = summary.max_temp
    min_t = summary.min_temp
    dew = summary.max_dew

    perfect_temp = max_t is not None and 68 <= max_t <= 74
    perfect_dew = dew is not None and 45 <= dew <= 52
    calm_wind = summary.max_gust < 20
    dry = summary.total_precip < 0.05 and summary.total_snow < 0.05
    low_uv = summary.max_uv < 6

    if perfect_temp and perfect_dew and calm_wind and dry and low_uv:
        return GoldilocksVariant.FULL
    if perfect_temp and dry and summary.max_gust < 25 and min_t is not None and min_t < 45:
        return GoldilocksVariant.AFTERNOON
    if perfect_temp and dry and ridge_winds:
        return GoldilocksVariant.VALLEYS
    if perfect_temp and dew is not None and dew > 60:
        return GoldilocksVariant.EARLY_MUGGY_LATE
    return None


def detect_patterns(
    series: HourlySeries,
    window: Window,
    summary: AggregateSummary | None = None,
    *,
    strict: bool = False,
) -> PatternFlags:
    """Pure function: run every detector over one window."""
    summary = summary or aggregate(series, window)

    convective, max_spike = detect_convective(series, window)
    precip_type, wb_min, wb_max = analyze_thermal_profile(series, window)
    ridge_winds = detect_ridge_winds(series, window)
    big_swing = (
        summary.min_temp is not None
        and summary.max_temp is not None
        and summary.max_temp - summary.min_temp >= LAYERS_DAY_SPREAD_F
    )

    flags = PatternFlags(
        convective=convective,
        max_spike=max_spike,
        stratiform=detect_stratiform(series, window),
        nw_flow_snow=detect_nw_flow_snow(series, window, strict=strict),
        cold_air_damming=detect_cold_air_damming(series, window, strict=strict),
        cad_wedge=detect_cad_wedge(series, window),
        freezing_drizzle=detect_freezing_drizzle(series, window),
        ridge_winds=ridge_winds,
        big_temperature_swing=big_swing,
        swing_phrase=describe_temp_swing(series, window, summary.min_temp, summary.max_temp),
        precip_type=precip_type,
        wet_bulb_min=wb_min,
        wet_bulb_max=wb_max,
        goldilocks=detect_goldilocks(summary, ridge_winds),
    )
    logger.debug(
        "Detected patterns",
        extra={"start": window.start, "end": window.end, "strict": strict,
               "flags": flags.model_dump(exclude_defaults=True)},
    )
    return flags
