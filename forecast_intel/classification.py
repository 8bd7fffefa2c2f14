"""Asheville-tuned QPF interpreter.

Maps window rain and snow totals (inches) onto seven ordered buckets each.
Breakpoints are inclusive-low / exclusive-high; anything at or above the last
breakpoint falls into the top bucket.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Sequence, Tuple

from forecast_intel.domain import Classification, RainType, SnowType

# (upper bound, type, label); the final entry has no upper bound
RAIN_BUCKETS: Tuple[Tuple[float | None, RainType, str], ...] = (
    (0.01, RainType.NONE, "No rain"),
    (0.05, RainType.TRACE, "Trace moisture"),
    (0.15, RainType.SPOTTY, "Spotty showers"),
    (0.40, RainType.LIGHT, "Light rain"),
    (0.75, RainType.STEADY, "Steady rain"),
    (1.25, RainType.SOAKING, "A soaking rain"),
    (None, RainType.HEAVY, "Heavy rain"),
)

SNOW_BUCKETS: Tuple[Tuple[float | None, SnowType, str], ...] = (
    (0.05, SnowType.NONE, "No snow"),
    (0.10, SnowType.FLURRIES, "Flurries"),
    (0.50, SnowType.DUSTING, "Dusting possible"),
    (1.0, SnowType.LIGHT, "Light accumulation"),
    (3.0, SnowType.ACCUMULATING, "Accumulating snow"),
    (6.0, SnowType.PLOWABLE, "Plowable snow"),
    (None, SnowType.SIGNIFICANT, "Significant snowfall"),
)


def _bucket(
    dimension: str,
    total: float | None,
    buckets: Sequence[Tuple[float | None, Enum, str]],
) -> Classification:
    """Return the first bucket whose upper bound exceeds ``total``."""
    value = total if total is not None and not math.isnan(total) else 0.0
    for severity, (upper, kind, label) in enumerate(buckets[:-1]):
        if value < upper:
            return Classification(dimension=dimension, type=kind.value, label=label, severity=severity)
    _, kind, label = buckets[-1]
    return Classification(dimension=dimension, type=kind.value, label=label, severity=len(buckets) - 1)


def classify_rain(rain_total: float | None) -> Classification:
    """Rain severity 0 (none) through 6 (heavy)."""
    return _bucket("rain", rain_total, RAIN_BUCKETS)


def classify_snow(snow_total: float | None) -> Classification:
    """Snow severity 0 (none) through 6 (significant)."""
    return _bucket("snow", snow_total, SNOW_BUCKETS)
