"""
One-call entry point: tomorrow's outlook plus near-term alerts for a series.
Both halves read the same clock instant.
"""

from __future__ import annotations

from forecast_intel.alerts import compute_alerts
from forecast_intel.clock import DEFAULT_CLOCK, Clock, FixedClock
from forecast_intel.config import Settings, settings as default_settings
from forecast_intel.domain import ForecastBriefing, HourlySeries
from forecast_intel.outlook_engine import compute_outlook
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="forecast_intel/briefing")


def build_forecast_briefing(
    series: HourlySeries,
    *,
    clock: Clock | None = None,
    settings: Settings | None = None,
) -> ForecastBriefing:
    """Compute the outlook and alerts for one hourly series."""
    cfg = settings or default_settings
    now = (clock or DEFAULT_CLOCK).now()
    pinned = FixedClock(now)  # outlook must see the same instant as generated_at

    outlook = compute_outlook(
        series,
        clock=pinned,
        strict=cfg.strict_pattern_detection,
        fallback=cfg.tomorrow_fallback,
        normals=cfg.normal_highs_f,
    )
    alerts = compute_alerts(
        series,
        start_hours=cfg.alert_start_hours,
        end_hours=cfg.alert_end_hours,
        strict=cfg.strict_pattern_detection,
    )
    logger.info(
        "Built forecast briefing",
        extra={"hours": series.length, "category": outlook.badge.category.value, "alerts": len(alerts)},
    )
    return ForecastBriefing(
        generated_at=now,
        locale=cfg.locale_name,
        outlook=outlook,
        alerts=alerts,
    )
