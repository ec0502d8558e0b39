"""Clock capabilities used wherever the service needs the current time."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol

from residence_ballot.db.time import utcnow


class Clock(Protocol):
    """Source of the current instant."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""
        ...


class UTCClock:
    """Wall clock backed by the system time."""

    def now(self) -> datetime:
        return utcnow()


class FixedClock:
    """Clock pinned to a given instant; only moves when told to."""

    def __init__(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, delta: timedelta) -> datetime:
        """Move the clock forward by ``delta`` and return the new instant."""
        self._instant = self._instant + delta
        return self._instant

    def set(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)
        self._instant = instant


_clock: Clock = UTCClock()


def get_clock() -> Clock:
    """Return the process-wide clock (FastAPI dependency)."""
    return _clock
