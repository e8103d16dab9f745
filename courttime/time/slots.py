"""
CourtTime Time — Booking Slot Helpers
=======================================
Pure functions over booking dates and wall-clock times.
All functions take explicit arguments. No hidden clock access.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from zoneinfo import ZoneInfo


# ══════════════════════════════════════════════════════════════
# SLOT WINDOW: half-open interval [start, end) within one day
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SlotWindow:
    """
    A half-open wall-clock interval on a single booking date.

    Invariant: start < end (enforced at construction).
    Back-to-back slots (10:00-11:00, 11:00-12:00) do not overlap.
    """

    booking_date: date
    start: time
    end: time

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError(
                f"SlotWindow start ({self.start}) must be < end ({self.end})."
            )

    def overlaps(self, other: SlotWindow) -> bool:
        if self.booking_date != other.booking_date:
            return False
        return slots_overlap(self.start, self.end, other.start, other.end)

    @property
    def duration_minutes(self) -> int:
        return minutes_between(
            datetime.combine(self.booking_date, self.start),
            datetime.combine(self.booking_date, self.end),
        )


# ══════════════════════════════════════════════════════════════
# PURE TEMPORAL FUNCTIONS
# ══════════════════════════════════════════════════════════════

def slots_overlap(
    start_a: time, end_a: time, start_b: time, end_b: time
) -> bool:
    """Half-open overlap test for two same-day time ranges."""
    return start_a < end_b and start_b < end_a


def combine_date_and_time(
    booking_date: date, start_time: time, timezone_name: str = "UTC"
) -> datetime:
    """
    Resolve a facility-local date + wall-clock time to an aware instant.
    """
    return datetime.combine(booking_date, start_time).replace(
        tzinfo=ZoneInfo(timezone_name)
    )


def minutes_between(start: datetime, end: datetime) -> int:
    """
    Whole minutes from start to end, floored.

    Negative when end precedes start (e.g. a booking that already began).
    """
    return int((end - start).total_seconds() // 60)


def iso_week_key(value: date) -> tuple[int, int]:
    """(ISO year, ISO week), the window weekly limits are counted in."""
    iso = value.isocalendar()
    return (iso[0], iso[1])
