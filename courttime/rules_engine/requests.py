"""
CourtTime Rules Engine — Request Models
=========================================
Immutable inputs produced by the booking-creation and cancellation
flows. The engine never mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time

from courttime.time.slots import SlotWindow


@dataclass(frozen=True)
class BookingRequest:
    user_id: str
    facility_id: str
    court_id: str
    booking_date: date
    start_time: time
    end_time: time
    booking_type: str = ""

    def __post_init__(self):
        for name in ("user_id", "facility_id", "court_id"):
            value = getattr(self, name)
            if not value or not isinstance(value, str):
                raise ValueError(f"{name} must be a non-empty string.")

        if not isinstance(self.booking_date, date):
            raise ValueError("booking_date must be a date.")

        if not isinstance(self.start_time, time) or not isinstance(
            self.end_time, time
        ):
            raise ValueError("start_time and end_time must be times.")

        # Slots stay within one booking date, so 00:00 cannot mean end of day.
        if self.end_time <= self.start_time:
            raise ValueError(
                "end_time must be after start_time on the same day; "
                "a slot cannot end at midnight (use 23:59)."
            )

    @property
    def slot(self) -> SlotWindow:
        return SlotWindow(self.booking_date, self.start_time, self.end_time)

    @property
    def duration_minutes(self) -> int:
        return self.slot.duration_minutes


@dataclass(frozen=True)
class CancellationRequest:
    booking_id: str
    user_id: str

    def __post_init__(self):
        if not self.booking_id or not isinstance(self.booking_id, str):
            raise ValueError("booking_id must be a non-empty string.")
        if not self.user_id or not isinstance(self.user_id, str):
            raise ValueError("user_id must be a non-empty string.")


@dataclass(frozen=True)
class AdminOverride:
    """
    An administrator's explicit decision to force-allow a booking.

    Ephemeral: drives the override path and its audit write only.
    """

    admin_id: str
    reason: str

    def __post_init__(self):
        if not self.admin_id or not isinstance(self.admin_id, str):
            raise ValueError("admin_id must be a non-empty string.")
        if not self.reason or not isinstance(self.reason, str):
            raise ValueError("reason must be a non-empty string.")
