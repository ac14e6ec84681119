"""
Where "today" comes from.

Services take a ``Clock`` and resolve the report date once per call; the
engines below them only ever see that date as an explicit ``as_of``.
Aging buckets, due-soon windows and the dashboard's trailing windows are
all measured from it, so tests pin it with ``DeterministicClock``.
"""

from abc import ABC, abstractmethod
from datetime import UTC, date, datetime, timedelta


class Clock(ABC):

    @abstractmethod
    def now(self) -> datetime:
        """Timezone-aware current instant."""

    def today(self) -> date:
        """Calendar date of ``now()`` in UTC, the date reports are dated."""
        return self.now().astimezone(UTC).date()


class SystemClock(Clock):

    def now(self) -> datetime:
        return datetime.now(UTC)


class DeterministicClock(Clock):
    """A clock that only moves when told to."""

    def __init__(self, fixed_time: datetime | None = None):
        self._start = fixed_time or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)
        self._offset = timedelta()

    def now(self) -> datetime:
        return self._start + self._offset

    def set_time(self, time: datetime) -> None:
        self._start = time
        self._offset = timedelta()

    def advance(self, days: int = 0, seconds: int = 0) -> None:
        self._offset += timedelta(days=days, seconds=seconds)
