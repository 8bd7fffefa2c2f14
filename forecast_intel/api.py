"""HTTP API for forecast outlooks, alerts and comfort phrases."""

import hmac
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from pydantic import BaseModel

from .alerts import compute_alerts
from .briefing import build_forecast_briefing
from .clock import DEFAULT_CLOCK, Clock, FixedClock
from .comfort import comfort_for_month, get_comfort_category
from .config import settings
from .domain import Alert, ForecastBriefing, HourlySeries, Outlook
from .outlook_engine import compute_outlook
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="forecast_intel/api")


def require_api_key(x_api_key: str | None = Header(default=None)):
    """
    Validate the X-API-Key header against the static api_key setting.
    """
    # If no key is configured, allow requests (dev/default mode).
    if not settings.api_key:
        logger.debug("No API key configured; allowing all requests")
        return

    if not x_api_key:
        logger.debug("No API key provided")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing API key")

    if hmac.compare_digest(str(x_api_key), str(settings.api_key)):
        return

    logger.debug("Invalid API key provided")
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


router = APIRouter(dependencies=[Depends(require_api_key)])


class ForecastRequest(BaseModel):
    """Hourly series plus an optional caller-local 'now' that pins the clock."""
    hourly: HourlySeries
    now: Optional[datetime] = None


class ComfortResponse(BaseModel):
    """Comfort phrase for a single temperature/dew/wind reading."""
    comfort: str


def _clock_for(req: ForecastRequest) -> Clock:
    """Use the caller's 'now' when supplied, the host clock otherwise."""
    if req.now is not None:
        return FixedClock(req.now)
    return DEFAULT_CLOCK


@router.post("/outlook", response_model=Outlook)
def post_outlook(req: ForecastRequest):
    """Tomorrow's dominant outlook."""
    logger.info("Outlook requested", extra={"hours": req.hourly.length})
    return compute_outlook(req.hourly, clock=_clock_for(req))


@router.post("/alerts", response_model=List[Alert])
def post_alerts(req: ForecastRequest):
    """Alerts for the near-term horizon."""
    logger.info("Alerts requested", extra={"hours": req.hourly.length})
    return compute_alerts(req.hourly)


@router.post("/briefing", response_model=ForecastBriefing)
def post_briefing(req: ForecastRequest):
    """Outlook and alerts in one payload."""
    return build_forecast_briefing(req.hourly, clock=_clock_for(req))


@router.get("/comfort", response_model=ComfortResponse)
def get_comfort(
    temp: Optional[float] = None,
    dew: Optional[float] = None,
    wind: Optional[float] = None,
    precip: float = 0.0,
    month: Optional[int] = Query(default=None, ge=1, le=12),
):
    """Season-aware comfort phrase; month defaults to the current month."""
    if month is not None:
        phrase = comfort_for_month(temp, dew, wind, month, precip=precip, normals=settings.normal_highs_f)
    else:
        phrase = get_comfort_category(temp, dew, wind, precip=precip, normals=settings.normal_highs_f)
    return ComfortResponse(comfort=phrase)
