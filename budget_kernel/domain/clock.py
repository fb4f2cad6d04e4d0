"""
Injectable time source.

Repositories and the audit decorator take a ``Clock`` instead of calling
``datetime.now()``, so audit timestamps and budget ``created_at`` /
``updated_at`` values can be pinned in tests.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """Returns timezone-aware datetimes."""

    @abstractmethod
    def now(self) -> datetime: ...


class SystemClock(Clock):

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Clock that only moves when told to.

    Defaults to 2026-01-01 12:00 UTC.
    """

    def __init__(self, start: datetime | None = None):
        self._current = start or datetime(2026, 1, 1, 12, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._current

    def advance(self, seconds: int = 1) -> datetime:
        self._current += timedelta(seconds=seconds)
        return self._current
