"""
CourtTime Rules Engine — Context Builder Tests
================================================
Snapshot assembly from the in-memory provider: lookups, strike
counts, household bookings, prime-time tagging and not-found errors.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone

import pytest

from courttime.rules_engine.context import (
    CancellationContextBuilder,
    RuleContextBuilder,
    is_prime_time,
    week_start,
)
from courttime.rules_engine.exceptions import (
    BookingNotFound,
    ConfigurationNotProvisioned,
    CourtNotFound,
    FacilityNotFound,
)
from courttime.rules_engine.provider import InMemoryRuleDataProvider
from courttime.rules_engine.requests import BookingRequest, CancellationRequest
from courttime.rules_engine.settings import RulesEngineSettings
from courttime.rules_engine.snapshots import (
    BookingSnapshot,
    CourtSnapshot,
    FacilitySnapshot,
    HouseholdSnapshot,
    PrimeTimeWindow,
    UserSnapshot,
)
from courttime.time.clock import FixedClock

FACILITY_ID = "fac-riverside"
NOW = datetime(2026, 3, 4, 12, 0, tzinfo=timezone.utc)  # Wednesday

EVENINGS = PrimeTimeWindow(
    start_time=time(18, 0),
    end_time=time(21, 0),
    days=("monday", "tuesday", "wednesday", "thursday", "friday"),
)


def make_booking(booking_id, user_id, booking_date, start=time(19, 0), end=time(20, 0)):
    return BookingSnapshot(
        id=booking_id,
        user_id=user_id,
        court_id="court-1",
        facility_id=FACILITY_ID,
        booking_date=booking_date,
        start_time=start,
        end_time=end,
    )


def make_provider(**overrides):
    data = dict(
        users=[
            UserSnapshot(id="ana", full_name="Ana", household_id="hh-1"),
            UserSnapshot(id="ben", full_name="Ben", household_id="hh-1"),
            UserSnapshot(id="cy", full_name="Cy"),
        ],
        courts=[
            CourtSnapshot(id="court-1", facility_id=FACILITY_ID),
            CourtSnapshot(id="court-x", facility_id="fac-elsewhere"),
        ],
        facilities=[
            FacilitySnapshot(id=FACILITY_ID, prime_time_windows=(EVENINGS,)),
            FacilitySnapshot(id="fac-elsewhere"),
        ],
        households=[HouseholdSnapshot(id="hh-1", member_ids=("ana", "ben"))],
        bookings=[
            make_booking("ana-last-week", "ana", date(2026, 2, 25)),
            make_booking("ana-mon", "ana", date(2026, 3, 2), start=time(10, 0), end=time(11, 0)),
            make_booking("ana-thu", "ana", date(2026, 3, 5)),
            make_booking("ben-fri", "ben", date(2026, 3, 6)),
            make_booking("cy-thu", "cy", date(2026, 3, 5)),
        ],
        strikes={("ana", FACILITY_ID): 2},
    )
    data.update(overrides)
    return InMemoryRuleDataProvider(**data)


def make_request(user_id="ana", court_id="court-1", booking_date=date(2026, 3, 6)):
    return BookingRequest(
        user_id=user_id,
        facility_id=FACILITY_ID,
        court_id=court_id,
        booking_date=booking_date,
        start_time=time(18, 30),
        end_time=time(19, 30),
    )


class TestRuleContextBuilder:
    def test_user_bookings_since_start_of_week(self):
        context = RuleContextBuilder(make_provider(), clock=FixedClock(NOW)).build(
            make_request()
        )

        assert [b.id for b in context.existing_bookings] == ["ana-mon", "ana-thu"]
        assert context.evaluated_at == NOW

    def test_strike_count_loaded(self):
        context = RuleContextBuilder(make_provider(), clock=FixedClock(NOW)).build(
            make_request()
        )
        assert context.user.active_strike_count == 2

    def test_household_bookings_loaded_for_all_members(self):
        context = RuleContextBuilder(make_provider(), clock=FixedClock(NOW)).build(
            make_request()
        )

        assert context.household is not None
        assert {b.id for b in context.household.bookings} == {
            "ana-mon",
            "ana-thu",
            "ben-fri",
        }

    def test_no_household_for_single_member(self):
        context = RuleContextBuilder(make_provider(), clock=FixedClock(NOW)).build(
            make_request(user_id="cy")
        )
        assert context.household is None

    def test_prime_time_tagging(self):
        context = RuleContextBuilder(make_provider(), clock=FixedClock(NOW)).build(
            make_request()
        )

        assert context.is_prime_time is True
        tags = {b.id: b.is_prime_time for b in context.existing_bookings}
        assert tags == {"ana-mon": False, "ana-thu": True}

    def test_weekend_is_not_prime_time(self):
        context = RuleContextBuilder(make_provider(), clock=FixedClock(NOW)).build(
            make_request(booking_date=date(2026, 3, 7))
        )
        assert context.is_prime_time is False

    def test_counted_statuses_from_settings(self):
        settings = RulesEngineSettings(counted_booking_statuses={"confirmed"})
        context = RuleContextBuilder(
            make_provider(), clock=FixedClock(NOW), settings=settings
        ).build(make_request())

        assert context.counted_statuses == frozenset({"confirmed"})

    def test_court_from_other_facility_rejected(self):
        builder = RuleContextBuilder(make_provider(), clock=FixedClock(NOW))
        with pytest.raises(CourtNotFound):
            builder.build(make_request(court_id="court-x"))

    def test_unknown_facility(self):
        builder = RuleContextBuilder(
            make_provider(facilities=[]), clock=FixedClock(NOW)
        )
        with pytest.raises(FacilityNotFound):
            builder.build(make_request())

    def test_not_provisioned_propagates(self):
        builder = RuleContextBuilder(
            make_provider(provisioned=False), clock=FixedClock(NOW)
        )
        with pytest.raises(ConfigurationNotProvisioned):
            builder.build(make_request())


class TestCancellationContextBuilder:
    def test_builds_context(self):
        context = CancellationContextBuilder(make_provider()).build(
            CancellationRequest(booking_id="ana-thu", user_id="ana")
        )

        assert context.booking.id == "ana-thu"
        assert context.strike_count == 2
        assert context.facility.id == FACILITY_ID

    def test_booking_of_other_user_rejected(self):
        with pytest.raises(BookingNotFound):
            CancellationContextBuilder(make_provider()).build(
                CancellationRequest(booking_id="ana-thu", user_id="cy")
            )


class TestPrimeTimeHelpers:
    def test_is_prime_time_overlap(self):
        facility = FacilitySnapshot(id=FACILITY_ID, prime_time_windows=(EVENINGS,))

        assert is_prime_time(facility, date(2026, 3, 4), time(17, 0), time(18, 30))
        assert not is_prime_time(facility, date(2026, 3, 4), time(17, 0), time(18, 0))
        assert not is_prime_time(facility, date(2026, 3, 8), time(19, 0), time(20, 0))

    def test_window_without_days_covers_every_day(self):
        facility = FacilitySnapshot(
            id=FACILITY_ID,
            prime_time_windows=(PrimeTimeWindow(time(8, 0), time(10, 0)),),
        )
        assert is_prime_time(facility, date(2026, 3, 8), time(9, 0), time(9, 30))

    def test_week_start_is_monday(self):
        assert week_start(date(2026, 3, 8)) == date(2026, 3, 2)
        assert week_start(date(2026, 3, 2)) == date(2026, 3, 2)
