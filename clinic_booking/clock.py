"""Injectable source of the current local time"""

from datetime import date, datetime, timedelta
from typing import Optional


class Clock:
    """Reads the device's local time. Naive datetimes throughout."""

    def now(self) -> datetime:
        return datetime.now()

    def today(self) -> date:
        return self.now().date()


class FixedClock(Clock):
    """Clock pinned to a given instant; only tests move it"""

    def __init__(self, instant: Optional[datetime] = None):
        self.instant = instant or datetime.now().replace(microsecond=0)

    def now(self) -> datetime:
        return self.instant

    def advance(self, **kwargs) -> None:
        self.instant = self.instant + timedelta(**kwargs)
