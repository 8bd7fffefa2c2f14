"""Season-aware comfort descriptions.

A day's temperature is described twice: relative to the monthly normal high
(seasonal feel) and on a fixed absolute scale. The two are blended with a
fixed precedence, then at most one humidity nuance and one wind nuance are
appended.
"""

from __future__ import annotations

from typing import Sequence

from forecast_intel.clock import DEFAULT_CLOCK, Clock
from forecast_intel.domain import ASHEVILLE_NORMAL_HIGHS_F

COMFORT_UNKNOWN = "Comfort unknown"
GOLDILOCKS_COMFORT = "Goldilocks — just right"


def seasonal_normal_high(month: int, normals: Sequence[float] | None = None) -> float:
    """Normal high (F) for a 1-based calendar month."""
    table = normals or ASHEVILLE_NORMAL_HIGHS_F
    return float(table[(month - 1) % 12])


def temp_anomaly(temp: float, month: int, normals: Sequence[float] | None = None) -> float:
    """Degrees above (positive) or below the month's normal high."""
    return temp - seasonal_normal_high(month, normals)


def describe_seasonal_feel(temp: float, month: int, normals: Sequence[float] | None = None) -> str:
    """Describe ``temp`` relative to the seasonal normal."""
    anomaly = temp_anomaly(temp, month, normals)

    if anomaly >= 15:
        return "unseasonably warm"
    if anomaly >= 8:
        return "mild for this time of year"
    if anomaly >= 3:
        return "a bit warmer than normal"

    if anomaly <= -15:
        return "unseasonably cool"
    if anomaly <= -8:
        return "cool for this time of year"
    if anomaly <= -3:
        return "a bit cooler than normal"

    return "seasonable"


def describe_absolute_feel(temp: float) -> str:
    """Describe ``temp`` on a fixed scale, hot down to very cold."""
    if temp >= 90:
        return "hot"
    if temp >= 80:
        return "warm"
    if temp >= 70:
        return "mild"
    if temp >= 60:
        return "cool"
    if temp >= 50:
        return "chilly"
    if temp >= 40:
        return "cold"
    return "very cold"


def is_goldilocks_comfort(
    temp: float | None,
    dew: float | None,
    wind: float | None,
    precip: float | None = 0.0,
) -> bool:
    """Ideal-day shortcut, same bands as the window-level goldilocks detector."""
    if temp is None or dew is None:
        return False
    return (
        68 <= temp <= 74
        and 45 <= dew <= 52
        and (wind or 0.0) < 20
        and (precip or 0.0) < 0.05
    )


def comfort_for_month(
    temp: float | None,
    dew: float | None,
    wind: float | None,
    month: int,
    *,
    precip: float | None = 0.0,
    normals: Sequence[float] | None = None,
) -> str:
    """Comfort phrase for a month the caller already resolved."""
    if temp is None:
        return COMFORT_UNKNOWN

    if is_goldilocks_comfort(temp, dew, wind, precip):
        return GOLDILOCKS_COMFORT

    seasonal = describe_seasonal_feel(temp, month, normals)
    absolute = describe_absolute_feel(temp)

    if "unseasonably" in seasonal:
        blended = seasonal
    elif "mild" in seasonal and absolute == "cool":
        blended = "mild and pleasant"
    elif "cool" in seasonal and absolute == "mild":
        blended = "cool for the season"
    else:
        blended = absolute if seasonal == "seasonable" else seasonal

    # plain reassignment: only the last matching nuance of each kind survives
    humidity: str | None = None
    if dew is not None and dew >= 65 and temp >= 75:
        humidity = "humid"
    if dew is not None and dew <= 30 and temp >= 60:
        humidity = "dry and comfortable"

    breeze: str | None = None
    if wind is not None and wind >= 25:
        breeze = "breezy"
    if wind is not None and wind >= 35:
        breeze = "windy"

    if humidity:
        blended += f", {humidity}"
    if breeze:
        blended += f", {breeze}"
    return blended.strip()


def get_comfort_category(
    temp: float | None,
    dew: float | None,
    wind: float | None,
    *,
    precip: float | None = 0.0,
    clock: Clock | None = None,
    normals: Sequence[float] | None = None,
) -> str:
    """Comfort phrase using the injected clock's current month."""
    month = (clock or DEFAULT_CLOCK).now().month
    return comfort_for_month(temp, dew, wind, month, precip=precip, normals=normals)
