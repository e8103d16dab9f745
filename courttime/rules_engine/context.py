"""
CourtTime Rules Engine — Context Builders
===========================================
Assemble the immutable snapshots evaluators work on.

RuleContextBuilder:         BookingRequest      → RuleContext
CancellationContextBuilder: CancellationRequest → CancellationContext

Failure semantics:
- Unknown user/court/facility/booking → ContextAssemblyError subclass
- Rule storage absent                 → ConfigurationNotProvisioned
                                        (raised by the provider)
- Anything else                       → propagates unchanged
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, time, timedelta
from typing import Iterable, Tuple

from courttime.rules_engine.exceptions import (
    BookingNotFound,
    CourtNotFound,
    FacilityNotFound,
    UserNotFound,
)
from courttime.rules_engine.provider import RuleDataProvider
from courttime.rules_engine.requests import BookingRequest, CancellationRequest
from courttime.rules_engine.settings import RulesEngineSettings
from courttime.rules_engine.snapshots import (
    BookingSnapshot,
    CancellationContext,
    FacilitySnapshot,
    RuleContext,
)
from courttime.time.clock import Clock, SystemClock, facility_date


def is_prime_time(
    facility: FacilitySnapshot, booking_date: date, start: time, end: time
) -> bool:
    """True when the slot overlaps any of the facility's prime-time windows."""
    return any(
        window.covers(booking_date, start, end)
        for window in facility.prime_time_windows
    )


def week_start(value: date) -> date:
    return value - timedelta(days=value.weekday())


class RuleContextBuilder:
    def __init__(
        self,
        provider: RuleDataProvider,
        clock: Clock = None,
        settings: RulesEngineSettings = None,
    ):
        self._provider = provider
        self._clock = clock or SystemClock()
        self._settings = settings or RulesEngineSettings()

    def build(self, request: BookingRequest) -> RuleContext:
        provider = self._provider

        user = provider.get_user(request.user_id)
        if user is None:
            raise UserNotFound(request.user_id)

        court = provider.get_court(request.court_id)
        if court is None:
            raise CourtNotFound(request.court_id)

        facility = provider.get_facility(request.facility_id)
        if facility is None:
            raise FacilityNotFound(request.facility_id)

        if court.facility_id != facility.id:
            raise CourtNotFound(request.court_id)

        user = replace(
            user,
            active_strike_count=provider.count_strikes(user.id, facility.id),
        )

        evaluated_at = self._clock.now_utc()
        today = facility_date(evaluated_at, facility.timezone)
        # Weekly limits look back to the Monday of the earliest week involved.
        since = week_start(min(today, request.booking_date))

        existing = self._tag_prime_time(
            facility, provider.get_bookings((user.id,), facility.id, since)
        )

        household = None
        if user.household_id:
            household = provider.get_household(user.household_id)
            if household is not None:
                member_ids = tuple(household.member_ids) or (user.id,)
                household = replace(
                    household,
                    member_ids=member_ids,
                    bookings=self._tag_prime_time(
                        facility,
                        provider.get_bookings(member_ids, facility.id, since),
                    ),
                )

        return RuleContext(
            request=request,
            user=user,
            court=court,
            facility=facility,
            household=household,
            existing_bookings=existing,
            is_prime_time=is_prime_time(
                facility,
                request.booking_date,
                request.start_time,
                request.end_time,
            ),
            evaluated_at=evaluated_at,
            counted_statuses=self._settings.counted_booking_statuses,
        )

    @staticmethod
    def _tag_prime_time(
        facility: FacilitySnapshot, bookings: Iterable[BookingSnapshot]
    ) -> Tuple[BookingSnapshot, ...]:
        return tuple(
            replace(
                b,
                is_prime_time=is_prime_time(
                    facility, b.booking_date, b.start_time, b.end_time
                ),
            )
            for b in bookings
        )


class CancellationContextBuilder:
    def __init__(self, provider: RuleDataProvider):
        self._provider = provider

    def build(self, request: CancellationRequest) -> CancellationContext:
        booking = self._provider.get_booking(request.booking_id)
        if booking is None or booking.user_id != request.user_id:
            raise BookingNotFound(request.booking_id)

        facility = self._provider.get_facility(booking.facility_id)
        if facility is None:
            raise FacilityNotFound(booking.facility_id)

        return CancellationContext(
            booking=booking,
            user_id=request.user_id,
            strike_count=self._provider.count_strikes(
                request.user_id, facility.id
            ),
            facility=facility,
        )
