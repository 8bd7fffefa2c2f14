"""Clock capability so "today" and the current month can be injected."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the caller's current local time."""

    def now(self) -> datetime:
        """Return the current local time."""
        ...


@dataclass
class SystemClock(Clock):
    """Host clock, naive local time."""

    def now(self) -> datetime:
        """Read the host's local wall clock."""
        return datetime.now()


@dataclass(frozen=True)
class FixedClock(Clock):
    """Clock pinned to one instant (tests, replays, API callers passing `now`)."""

    instant: datetime

    def now(self) -> datetime:
        """Return the pinned instant."""
        return self.instant


DEFAULT_CLOCK: Clock = SystemClock()
