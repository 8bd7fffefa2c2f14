"""Select which hourly indices belong to a forecast period.

Windows are either a half-open offset range (alert horizon) or the explicit
index set of one local calendar day (tomorrow's outlook). Timestamps are
local ISO-8601 strings and are compared as written, with no timezone
conversion.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Callable, List, Tuple

from forecast_intel.domain import MEASURES, HourlySeries, Window
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="forecast_intel/windowing")

_DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def _clamp(value: int, lo: int, hi: int) -> int:
    """Clamp an integer into [lo, hi]."""
    return min(hi, max(lo, value))


def parse_local_time(value: Any) -> datetime | None:
    """Parse one ``time`` entry; unparseable entries return None."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        logger.debug("Unparseable time entry; treating as absent", extra={"time": value})
        return None


def hour_time(series: HourlySeries, i: int) -> datetime | None:
    """Timestamp for hour ``i``, or None."""
    times = series.values("time")
    if i < 0 or i >= len(times):
        return None
    return parse_local_time(times[i])


def day_window(series: HourlySeries, calendar_date: date) -> Window:
    """Indices whose local calendar date equals ``calendar_date``; empty when none match."""
    matches: List[int] = []
    for i, raw in enumerate(series.values("time")):
        moment = parse_local_time(raw)
        if moment is not None and moment.date() == calendar_date:
            matches.append(i)
    return Window.of(matches)


def tomorrow_window(series: HourlySeries, now: datetime, *, fallback: bool = True) -> Window:
    """Window for the calendar day after ``now``.

    When no hour carries tomorrow's date and ``fallback`` is set, the window is
    clamped to offsets 24-48 of whatever the series holds. An empty series
    still yields an empty window.
    """
    target = now.date() + timedelta(days=1)
    window = day_window(series, target)
    if not window.is_empty or not fallback:
        return window

    length = series.length
    start = min(24, max(0, length - 24))
    end = min(48, length)
    logger.info(
        "No hours matched tomorrow's date; using offset fallback",
        extra={"target": target.isoformat(), "start": start, "end": end},
    )
    return Window(start=start, end=max(start, end))


def relative_window(series: HourlySeries, offset_start_hours: int, offset_end_hours: int) -> Window:
    """Offset window clamped into the series, e.g. hours 12-48 for alerts."""
    length = series.length
    start = _clamp(offset_start_hours, 0, length)
    end = _clamp(offset_end_hours, 0, length)
    return Window(start=min(start, end), end=max(start, end))


def slice_to_window(series: HourlySeries, window: Window) -> HourlySeries:
    """Project every parallel array onto the window's indices, preserving order.

    Arrays shorter than an index get None in that slot so the projection stays
    aligned with ``time``; absent arrays stay absent.
    """
    idx = window.indices()
    projected: dict[str, List[Any] | None] = {}
    for name in MEASURES:
        arr = getattr(series, name)
        if arr is None:
            projected[name] = None
            continue
        projected[name] = [arr[i] if 0 <= i < len(arr) else None for i in idx]
    return HourlySeries(**projected)


def find_event_timing(
    series: HourlySeries,
    window: Window,
    predicate: Callable[[int], bool],
) -> Tuple[datetime | None, datetime | None]:
    """First and last timestamps in the window whose hour satisfies ``predicate``."""
    first: int | None = None
    last: int | None = None
    for i in window.indices():
        if predicate(i):
            if first is None:
                first = i
            last = i
    if first is None:
        return None, None
    return hour_time(series, first), hour_time(series, last)


def describe_time_of_day(moment: datetime | None) -> str | None:
    """Bucket an hour into a natural-language part of the day."""
    if moment is None:
        return None
    hour = moment.hour
    if hour < 6:
        return "overnight"
    if hour < 10:
        return "early morning"
    if hour < 12:
        return "late morning"
    if hour < 15:
        return "early afternoon"
    if hour < 18:
        return "late afternoon"
    if hour < 21:
        return "evening"
    return "late evening"


def day_name(moment: datetime | None) -> str:
    """English weekday name, or an empty string."""
    if moment is None:
        return ""
    return _DAY_NAMES[moment.weekday()]


def describe_timing(first: datetime | None, last: datetime | None) -> str | None:
    """Phrase like "Tuesday early morning through Wednesday evening"."""
    if first is None:
        return None
    start = f"{day_name(first)} {describe_time_of_day(first)}"
    if last is None:
        return start
    end = f"{day_name(last)} {describe_time_of_day(last)}"
    if end == start:
        return start
    return f"{start} through {end}"
