"""Reduce a window of hourly samples into scalar summaries.

Absence handling is asymmetric: precipitation, snowfall, gusts
and UV treat a missing sample as zero (dry, calm, dark), while temperature and
dewpoint stay None so that "no reading" is never mistaken for a real value.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, NamedTuple, Sequence

from forecast_intel.domain import AggregateSummary, HourlySeries, Window
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="forecast_intel/aggregation")


class TempSummary(NamedTuple):
    """Temperature extrema and mean over the valid samples of a window."""
    min_temp: float | None
    max_temp: float | None
    avg_temp: float | None
    count: int


def safe_num(values: Sequence[Any] | None, i: int) -> float | None:
    """Return values[i] as a float, or None when out of range or not a real number."""
    if not values or i < 0 or i >= len(values):
        return None
    v = values[i]
    # bool is an int subclass; a True/False sample is not a measurement
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    v = float(v)
    if not math.isfinite(v):
        return None
    return v


def mean(values: Iterable[float | None]) -> float | None:
    """Arithmetic mean of the non-None values, or None if there are none."""
    total = 0.0
    count = 0
    for v in values:
        if v is None:
            continue
        total += v
        count += 1
    return total / count if count else None


def amount(values: Sequence[Any] | None, i: int) -> float:
    """Accumulation sample (precip/snow) with absent or negative read as zero."""
    v = safe_num(values, i)
    if v is None or v < 0:
        return 0.0
    return v


def accumulate_precip(series: HourlySeries, window: Window) -> tuple[float, float]:
    """Total rain and snow (inches) over the window."""
    rain = series.values("precipitation")
    snow = series.values("snowfall")
    rain_total = 0.0
    snow_total = 0.0
    for i in window.indices():
        rain_total += amount(rain, i)
        snow_total += amount(snow, i)
    return rain_total, snow_total


def summarize_temps(series: HourlySeries, window: Window) -> TempSummary:
    """Min/max/avg temperature over hours with a valid reading."""
    temp_arr = series.values("temperature")
    temps = [t for t in (safe_num(temp_arr, i) for i in window.indices()) if t is not None]
    if not temps:
        return TempSummary(None, None, None, 0)
    return TempSummary(min(temps), max(temps), mean(temps), len(temps))


def summarize_wind_gusts(series: HourlySeries, window: Window) -> float:
    """Peak gust (mph); 0 when the window has no gust readings."""
    gust_arr = series.values("wind_gust")
    max_gust = 0.0
    for i in window.indices():
        g = safe_num(gust_arr, i)
        if g is not None and g > max_gust:
            max_gust = g
    return max_gust


def summarize_dew_and_uv(series: HourlySeries, window: Window) -> tuple[float | None, float]:
    """Peak dewpoint (None if never observed) and peak UV index (0 default)."""
    dew_arr = series.values("dewpoint")
    uv_arr = series.values("uv_index")
    max_dew: float | None = None
    max_uv = 0.0
    for i in window.indices():
        d = safe_num(dew_arr, i)
        if d is not None and (max_dew is None or d > max_dew):
            max_dew = d
        uv = safe_num(uv_arr, i)
        if uv is not None and uv > max_uv:
            max_uv = uv
    return max_dew, max_uv


def aggregate(series: HourlySeries, window: Window) -> AggregateSummary:
    """Pure function: build the AggregateSummary for one window."""
    rain_total, snow_total = accumulate_precip(series, window)
    temps = summarize_temps(series, window)
    max_dew, max_uv = summarize_dew_and_uv(series, window)
    summary = AggregateSummary(
        hours=len(window.indices()),
        min_temp=temps.min_temp,
        max_temp=temps.max_temp,
        avg_temp=temps.avg_temp,
        total_precip=rain_total,
        total_snow=snow_total,
        max_gust=summarize_wind_gusts(series, window),
        max_dew=max_dew,
        max_uv=max_uv,
    )
    logger.debug(
        "Aggregated window",
        extra={"start": window.start, "end": window.end, "hours": summary.hours,
               "total_precip": rain_total, "total_snow": snow_total},
    )
    return summary
