# clock.py
"""
Injectable time source.

Services receive a Clock instead of calling ``datetime.now()`` so deadline
logic can be tested at exact instants. Times are naive UTC, matching the
``DateTime`` columns the models persist.
"""
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone
from typing import Optional


class Clock(ABC):

     @abstractmethod
     def now(self) -> datetime:
          """Current time, naive UTC."""
          ...

     def today(self) -> date:
          return self.now().date()


class SystemClock(Clock):

     def now(self) -> datetime:
          return datetime.now(timezone.utc).replace(tzinfo=None)


class FixedClock(Clock):
     """Test clock that only moves when told to."""

     def __init__(self, fixed_time: Optional[datetime] = None):
          self._now = fixed_time or datetime(2026, 1, 1, 12, 0, 0)

     def now(self) -> datetime:
          return self._now

     def set(self, moment: datetime) -> None:
          self._now = moment

     def advance(self, **delta) -> datetime:
          """Move forward by ``timedelta(**delta)`` and return the new time."""
          self._now = self._now + timedelta(**delta)
          return self._now
