"""
CourtTime Time — Injected Clocks
=================================
Evaluators never read the wall clock. The rule context carries the
instant it was assembled at, so every evaluator of one request sees
the same "now". Facilities keep their own timezone; calendar questions
("what day is it at the club?") go through facility_date().
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    def now_utc(self) -> datetime:
        ...  # pragma: no cover


class SystemClock:
    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Frozen instant for tests and replays.

        clock = FixedClock(datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc))
        clock.advance(30)   # 09:30
    """

    def __init__(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock needs an aware datetime.")
        self._instant = fixed_dt.astimezone(timezone.utc)

    def now_utc(self) -> datetime:
        return self._instant

    def advance(self, minutes: float) -> None:
        self._instant += timedelta(minutes=minutes)


def facility_date(instant: datetime, timezone_name: str) -> date:
    """Calendar date of an instant as seen at the facility."""
    return instant.astimezone(ZoneInfo(timezone_name)).date()
