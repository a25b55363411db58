"""
Injectable time source for report runs.

Report metadata carries a generated-at timestamp.  Pure report code never
reads the wall clock: the service (or ``compute_report``) asks a ``Clock``
and passes the ISO string down, so two runs over the same snapshots with a
``DeterministicClock`` are byte-for-byte identical.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone, tzinfo


class Clock(ABC):
    """Source of the current time for report metadata."""

    @abstractmethod
    def now(self) -> datetime:
        ...

    def timestamp(self) -> str:
        """``now()`` as ISO-8601 with second precision (report metadata form)."""
        return self.now().isoformat(timespec="seconds")


class SystemClock(Clock):
    """Wall-clock time in a fixed zone, UTC unless another is given."""

    def __init__(self, tz: tzinfo = timezone.utc):
        self._tz = tz

    def now(self) -> datetime:
        return datetime.now(self._tz)


class DeterministicClock(Clock):
    """Frozen clock for tests and reproducible reruns; moves only when told."""

    def __init__(self, fixed_time: datetime | None = None):
        self._current = fixed_time or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._current

    def set_time(self, time: datetime) -> None:
        self._current = time

    def advance(self, seconds: float = 1) -> None:
        self._current += timedelta(seconds=seconds)
