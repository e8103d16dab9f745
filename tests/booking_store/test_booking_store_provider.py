from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

import pytest
from django.db import OperationalError, connection, transaction
from django.test.utils import CaptureQueriesContext

from courttime.booking_store.audit import DbOverrideAuditSink
from courttime.booking_store.models import (
    Booking,
    BookingViolation,
    Court,
    Facility,
    FacilityRule,
    Household,
    Member,
    MembershipTier,
    Strike,
)
from courttime.booking_store.provider import DbRuleDataProvider
from courttime.rules_engine.audit import OverrideAuditRecord
from courttime.rules_engine.bootstrap import build_rules_engine
from courttime.rules_engine.exceptions import ConfigurationNotProvisioned
from courttime.rules_engine.requests import (
    AdminOverride,
    BookingRequest,
    CancellationRequest,
)
from courttime.rules_engine.result import SYSTEM_RULE_CODE, OverrideStatus
from courttime.time.clock import FixedClock

pytestmark = pytest.mark.django_db(transaction=True)

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def seed():
    facility = Facility.objects.create(
        id="fac-db",
        name="Riverside",
        timezone="UTC",
        prime_time_windows=[
            {"days": ["Monday", "wednesday"], "start_time": "18:00", "end_time": "21:00"},
            {"start_time": "not-a-time"},
        ],
    )
    gold = MembershipTier.objects.create(facility=facility, name="Gold")
    household = Household.objects.create(facility=facility, name="Ana & Ben")
    ana = Member.objects.create(
        full_name="Ana", email="ana@example.com", tier=gold, household=household
    )
    ben = Member.objects.create(
        full_name="Ben", email="ben@example.com", household=household
    )
    court = Court.objects.create(facility=facility, name="Court 1", court_number=1)
    Booking.objects.create(
        court=court,
        user=ana,
        facility=facility,
        booking_date=date(2026, 3, 3),
        start_time=time(8, 0),
        end_time=time(9, 0),
    )
    Booking.objects.create(
        court=court,
        user=ben,
        facility=facility,
        booking_date=date(2026, 3, 4),
        start_time=time(19, 0),
        end_time=time(20, 0),
    )
    Booking.objects.create(
        court=court,
        user=ana,
        facility=facility,
        booking_date=date(2026, 2, 20),
        start_time=time(8, 0),
        end_time=time(9, 0),
        status="completed",
    )
    return facility, gold, household, ana, ben, court


def add_rule(facility, code, category, config=None, **kwargs):
    return FacilityRule.objects.create(
        facility=facility,
        rule_code=code,
        rule_category=category,
        rule_name=kwargs.pop("rule_name", f"Rule {code}"),
        rule_config=config or {},
        **kwargs,
    )


def request_for(member, court, booking_date=date(2026, 3, 4)):
    return BookingRequest(
        user_id=str(member.id),
        facility_id="fac-db",
        court_id=str(court.id),
        booking_date=booking_date,
        start_time=time(10, 0),
        end_time=time(11, 0),
    )


# ══════════════════════════════════════════════════════════════
# SNAPSHOT READS
# ══════════════════════════════════════════════════════════════

def test_get_user_maps_tier_and_household() -> None:
    _, gold, household, ana, ben, _ = seed()
    provider = DbRuleDataProvider(clock=FixedClock(NOW))

    user = provider.get_user(str(ana.id))
    assert user.tier_id == str(gold.id)
    assert user.tier.name == "Gold"
    assert user.household_id == str(household.id)

    assert provider.get_user(str(ben.id)).tier is None


def test_unknown_or_malformed_ids_read_as_missing() -> None:
    seed()
    provider = DbRuleDataProvider(clock=FixedClock(NOW))

    assert provider.get_user("not-a-uuid") is None
    assert provider.get_user("00000000-0000-0000-0000-000000000000") is None
    assert provider.get_court("court-1") is None
    assert provider.get_booking("") is None
    assert provider.get_facility("fac-missing") is None


def test_get_facility_returns_active_rules_in_display_order() -> None:
    facility, *_ = seed()
    add_rule(facility, "ACC-002", "account", {"max_per_week": 2}, display_order=2)
    add_rule(facility, "CRT-001", "court", display_order=1)
    add_rule(facility, "ACC-001", "account", display_order=2)
    add_rule(facility, "HH-001", "household", is_active=False)

    snapshot = DbRuleDataProvider().get_facility("fac-db")

    assert [r.rule_code for r in snapshot.rules] == ["CRT-001", "ACC-001", "ACC-002"]
    assert snapshot.find_rule("ACC-002").rule_config == {"max_per_week": 2}
    assert snapshot.find_rule("HH-001") is None


def test_prime_time_windows_parsed_and_malformed_skipped() -> None:
    seed()

    snapshot = DbRuleDataProvider().get_facility("fac-db")

    (window,) = snapshot.prime_time_windows
    assert window.start_time == time(18, 0)
    assert window.end_time == time(21, 0)
    assert window.days == ("monday", "wednesday")


def test_get_household_and_member_bookings() -> None:
    _, _, household, ana, ben, _ = seed()
    provider = DbRuleDataProvider()

    snapshot = provider.get_household(str(household.id))
    assert set(snapshot.member_ids) == {str(ana.id), str(ben.id)}

    bookings = provider.get_bookings(snapshot.member_ids, "fac-db", date(2026, 3, 2))
    assert [b.booking_date for b in bookings] == [date(2026, 3, 3), date(2026, 3, 4)]
    assert all(b.facility_id == "fac-db" for b in bookings)


def test_count_strikes_skips_revoked_and_expired() -> None:
    facility, _, _, ana, _, _ = seed()
    issued = NOW - timedelta(days=10)
    Strike.objects.create(user=ana, facility=facility, issued_at=issued)
    Strike.objects.create(
        user=ana, facility=facility, issued_at=issued, expires_at=NOW + timedelta(days=20)
    )
    Strike.objects.create(
        user=ana, facility=facility, issued_at=issued, expires_at=NOW - timedelta(days=1)
    )
    Strike.objects.create(user=ana, facility=facility, issued_at=issued, revoked=True)

    provider = DbRuleDataProvider(clock=FixedClock(NOW))
    assert provider.count_strikes(str(ana.id), "fac-db") == 2


# ══════════════════════════════════════════════════════════════
# AUDIT SINK
# ══════════════════════════════════════════════════════════════

def test_audit_sink_persists_override_record() -> None:
    _, _, _, ana, _, _ = seed()

    DbOverrideAuditSink().record(
        OverrideAuditRecord(
            user_id=str(ana.id),
            facility_id="fac-db",
            violation_type="admin_override",
            violation_description="Admin override for rules: ACC-002",
            resolved=True,
            resolved_by="admin-1",
            notes="League night",
        )
    )

    violation = BookingViolation.objects.get()
    assert violation.user_id == ana.id
    assert violation.violation_type == "admin_override"
    assert violation.resolved is True
    assert violation.resolved_at is not None
    assert violation.resolved_by == "admin-1"
    assert violation.notes == "League night"


# ══════════════════════════════════════════════════════════════
# ENGINE OVER THE DATABASE
# ══════════════════════════════════════════════════════════════

def test_engine_blocks_and_override_writes_violation() -> None:
    facility, _, _, ana, _, court = seed()
    add_rule(
        facility,
        "ACC-002",
        "account",
        {"max_per_week": 1},
        failure_message_template="Max {limit} bookings per week, you have {count}",
    )
    engine = build_rules_engine(clock=FixedClock(NOW))

    blocked = engine.evaluate(request_for(ana, court))
    assert blocked.allowed is False
    assert blocked.blockers[0].message == "Max 1 bookings per week, you have 1"

    overridden = engine.evaluate_with_override(
        request_for(ana, court),
        AdminOverride(admin_id="admin-1", reason="League night"),
    )
    assert overridden.allowed is True
    assert overridden.override_status == OverrideStatus.APPLIED

    violation = BookingViolation.objects.get()
    assert violation.violation_description == "Admin override for rules: ACC-002"
    assert violation.facility_id == "fac-db"


def test_household_rules_use_member_bookings() -> None:
    facility, _, _, ana, _, court = seed()
    add_rule(facility, "HH-002", "household", {"max_per_week": 2})

    result = build_rules_engine(clock=FixedClock(NOW)).evaluate(request_for(ana, court))

    assert [b.rule_code for b in result.blockers] == ["HH-002"]


def test_cancellation_with_court_cutoff() -> None:
    facility, _, _, ana, _, court = seed()
    add_rule(
        facility,
        "CRT-012",
        "court",
        {"cancel_cutoff_minutes": 1440, "penalty_type": "strike"},
    )
    booking = Booking.objects.get(user=ana, booking_date=date(2026, 3, 3))

    result = build_rules_engine(clock=FixedClock(NOW)).evaluate_cancellation(
        CancellationRequest(booking_id=str(booking.id), user_id=str(ana.id))
    )

    assert result.minutes_before_start == 23 * 60
    assert result.is_late_cancel is True
    assert result.strike_will_be_issued is True


def test_missing_rules_table_degrades(monkeypatch) -> None:
    _, _, _, ana, _, court = seed()

    def missing_table(*args, **kwargs):
        raise OperationalError("no such table: courttime_facility_rules")

    monkeypatch.setattr(FacilityRule.objects, "filter", missing_table)
    provider = DbRuleDataProvider(clock=FixedClock(NOW))

    with pytest.raises(ConfigurationNotProvisioned) as exc_info:
        provider.get_facility("fac-db")
    assert exc_info.value.relation == "courttime_facility_rules"

    result = build_rules_engine(provider=provider, clock=FixedClock(NOW)).evaluate(
        request_for(ana, court)
    )
    assert result.allowed is True
    assert [w.rule_code for w in result.warnings] == [SYSTEM_RULE_CODE]


def test_missing_table_inside_caller_transaction_keeps_it_usable(monkeypatch) -> None:
    facility, _, _, ana, _, court = seed()

    def missing_table(*args, **kwargs):
        raise OperationalError("no such table: courttime_facility_rules")

    monkeypatch.setattr(FacilityRule.objects, "filter", missing_table)
    engine = build_rules_engine(clock=FixedClock(NOW))

    with transaction.atomic():
        with CaptureQueriesContext(connection) as queries:
            result = engine.evaluate(request_for(ana, court))

        assert result.allowed is True
        assert connection.needs_rollback is False
        assert any(
            q["sql"].startswith("ROLLBACK TO SAVEPOINT") for q in queries.captured_queries
        )

        Booking.objects.create(
            court=court,
            user=ana,
            facility=facility,
            booking_date=date(2026, 3, 4),
            start_time=time(10, 0),
            end_time=time(11, 0),
        )

    assert Booking.objects.filter(user=ana, booking_date=date(2026, 3, 4)).exists()


# ══════════════════════════════════════════════════════════════
# MALFORMED RULE ROWS
# ══════════════════════════════════════════════════════════════

def test_malformed_rule_rows_are_skipped(caplog) -> None:
    facility, _, _, ana, _, court = seed()
    add_rule(facility, "GEN-001", "general", {"max_per_week": 1})
    add_rule(facility, "ACC-001", "account", "max_per_week=1")
    add_rule(facility, "ACC-003", "account", [1, 2])
    add_rule(facility, "ACC-002", "account", {"max_per_week": 1})

    with caplog.at_level("WARNING", logger="courttime.booking_store"):
        snapshot = DbRuleDataProvider().get_facility("fac-db")

    assert [r.rule_code for r in snapshot.rules] == ["ACC-002"]
    logged = caplog.text
    assert "GEN-001" in logged
    assert "ACC-001" in logged
    assert "ACC-003" in logged


def test_malformed_rule_row_does_not_abort_evaluation() -> None:
    facility, _, _, ana, _, court = seed()
    add_rule(facility, "GEN-001", "general")
    add_rule(facility, "ACC-001", "account", "max_per_week=1")
    add_rule(facility, "ACC-002", "account", {"max_per_week": 1})

    result = build_rules_engine(clock=FixedClock(NOW)).evaluate(request_for(ana, court))

    assert result.allowed is False
    assert [b.rule_code for b in result.blockers] == ["ACC-002"]


def test_bare_string_court_scope_still_applies() -> None:
    facility, _, _, ana, _, court = seed()
    add_rule(
        facility,
        "ACC-002",
        "account",
        {"max_per_week": 1},
        applies_to_court_ids=str(court.id),
    )

    snapshot = DbRuleDataProvider().get_facility("fac-db")
    assert snapshot.rules[0].applies_to_court_ids == (str(court.id),)

    result = build_rules_engine(clock=FixedClock(NOW)).evaluate(request_for(ana, court))
    assert [b.rule_code for b in result.blockers] == ["ACC-002"]


def test_court_scoped_cancellation_cutoff_ignored_on_other_court() -> None:
    facility, _, _, ana, _, court = seed()
    other = Court.objects.create(facility=facility, name="Court 2", court_number=2)
    add_rule(
        facility,
        "CRT-012",
        "court",
        {"cancel_cutoff_minutes": 1440, "penalty_type": "strike"},
        applies_to_court_ids=[str(other.id)],
    )
    booking = Booking.objects.get(user=ana, booking_date=date(2026, 3, 3))

    result = build_rules_engine(clock=FixedClock(NOW)).evaluate_cancellation(
        CancellationRequest(booking_id=str(booking.id), user_id=str(ana.id))
    )

    assert result.minutes_before_start == 23 * 60
    assert result.cutoff_minutes == 240
    assert result.is_late_cancel is False
