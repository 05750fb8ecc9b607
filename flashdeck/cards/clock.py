"""Wall-clock abstractions used by the scheduler."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Anything able to report the current time as an aware datetime."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Clock backed by the system time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock that always returns the same instant until advanced explicitly."""

    def __init__(self, at: datetime) -> None:
        if at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)
        self._at = at

    def now(self) -> datetime:
        return self._at

    def advance(self, **kwargs: float) -> datetime:
        """Move the clock forward by the given ``timedelta`` arguments."""
        self._at = self._at + timedelta(**kwargs)
        return self._at

