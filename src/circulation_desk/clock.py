"""Current-date sources.

Loans read "today" from a clock instead of calling ``date.today()`` directly,
so fine calculations can be pinned to a known date.
"""

from datetime import date, timedelta
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current date."""

    def today(self) -> date: ...


class SystemClock:
    """Clock backed by the host's local date."""

    def today(self) -> date:
        return date.today()


class FixedClock:
    """Clock that stays on a given date until moved."""

    def __init__(self, current: date):
        self.current = current

    def today(self) -> date:
        return self.current

    def advance(self, days: int = 1) -> date:
        """Move the clock forward (or back, with a negative count)."""
        self.current = self.current + timedelta(days=days)
        return self.current

    def set(self, current: date) -> None:
        self.current = current
