"""
CourtTime Evaluators — Shared Booking Arithmetic
==================================================
Pure helpers used by account and household evaluators to count
bookings against limits. All time comparisons use the context's
evaluated_at and the facility timezone.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Tuple

from courttime.rules_engine.snapshots import BookingSnapshot, RuleContext
from courttime.time.clock import facility_date
from courttime.time.slots import combine_date_and_time, iso_week_key


def local_today(context: RuleContext) -> date:
    return facility_date(context.evaluated_at, context.facility.timezone)


def upcoming(
    context: RuleContext, bookings: Iterable[BookingSnapshot]
) -> Tuple[BookingSnapshot, ...]:
    """Bookings that have not finished yet."""
    tz = context.facility.timezone
    return tuple(
        b for b in bookings
        if combine_date_and_time(b.booking_date, b.end_time, tz)
        > context.evaluated_at
    )


def in_request_week(
    context: RuleContext, bookings: Iterable[BookingSnapshot]
) -> Tuple[BookingSnapshot, ...]:
    week = iso_week_key(context.request.booking_date)
    return tuple(b for b in bookings if iso_week_key(b.booking_date) == week)


def overlapping_request(
    context: RuleContext, bookings: Iterable[BookingSnapshot]
) -> Tuple[BookingSnapshot, ...]:
    slot = context.request.slot
    return tuple(b for b in bookings if b.slot.overlaps(slot))


def format_time(value) -> str:
    return value.strftime("%H:%M")
