"""
CourtTime Booking Store - DB-backed Rule Data Provider
======================================================
Reads booking-store tables into rules engine snapshots.

Unknown or malformed ids read as "not found" (None). Malformed rule
rows are logged and skipped. Missing tables surface as
ConfigurationNotProvisioned.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, time
from typing import Optional

from django.db.models import Q

from courttime.booking_store.errors import translate_storage_errors
from courttime.booking_store.models import (
    Booking,
    Court,
    Facility,
    FacilityRule,
    Household,
    Member,
    Strike,
)
from courttime.rules_engine.snapshots import (
    BookingSnapshot,
    CourtSnapshot,
    FacilityRuleConfig,
    FacilitySnapshot,
    HouseholdSnapshot,
    PrimeTimeWindow,
    TierSnapshot,
    UserSnapshot,
)
from courttime.time.clock import Clock, SystemClock

logger = logging.getLogger("courttime.booking_store")


def _as_uuid(value) -> Optional[uuid.UUID]:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        return None


def _parse_time(value) -> time:
    if isinstance(value, time):
        return value
    return time.fromisoformat(str(value))


def parse_prime_time_windows(raw) -> tuple[PrimeTimeWindow, ...]:
    """
    Parse the facility prime_time_windows JSON:
        [{"days": ["monday", ...], "start_time": "18:00", "end_time": "21:00"}]

    Malformed entries are logged and left out.
    """
    windows = []
    for entry in raw or ():
        try:
            windows.append(
                PrimeTimeWindow(
                    start_time=_parse_time(entry["start_time"]),
                    end_time=_parse_time(entry["end_time"]),
                    days=tuple(
                        str(d).strip().lower() for d in entry.get("days") or ()
                    ),
                )
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.warning(f"Ignoring malformed prime time window {entry!r}: {exc}")
    return tuple(windows)


def _booking_snapshot(row: Booking) -> BookingSnapshot:
    return BookingSnapshot(
        id=str(row.id),
        user_id=str(row.user_id),
        court_id=str(row.court_id),
        facility_id=str(row.facility_id),
        booking_date=row.booking_date,
        start_time=row.start_time,
        end_time=row.end_time,
        status=row.status,
        booking_type=row.booking_type or "",
    )


def _rule_config(row: FacilityRule) -> FacilityRuleConfig:
    return FacilityRuleConfig(
        rule_code=row.rule_code,
        rule_category=row.rule_category,
        rule_name=row.rule_name,
        rule_config=row.rule_config or {},
        applies_to_court_ids=row.applies_to_court_ids or (),
        applies_to_tier_ids=row.applies_to_tier_ids or (),
        failure_message_template=row.failure_message_template or None,
    )


def parse_rule_rows(rows) -> tuple[FacilityRuleConfig, ...]:
    """
    Map facility rule rows to configs. A row with an unknown category or
    a config that is not a JSON object is logged and left out; the other
    rules still apply.
    """
    configs = []
    for row in rows:
        try:
            configs.append(_rule_config(row))
        except (TypeError, ValueError) as exc:
            logger.warning(
                f"Ignoring malformed facility rule {row.rule_code!r} "
                f"(id={row.id}) at facility {row.facility_id}: {exc}"
            )
    return tuple(configs)


class DbRuleDataProvider:
    def __init__(self, clock: Clock = None):
        self._clock = clock or SystemClock()

    @translate_storage_errors
    def get_user(self, user_id: str) -> Optional[UserSnapshot]:
        pk = _as_uuid(user_id)
        if pk is None:
            return None

        member = Member.objects.select_related("tier").filter(id=pk).first()
        if member is None:
            return None

        tier = None
        if member.tier is not None:
            tier = TierSnapshot(id=str(member.tier.id), name=member.tier.name)

        return UserSnapshot(
            id=str(member.id),
            full_name=member.full_name,
            tier=tier,
            household_id=(
                str(member.household_id) if member.household_id else None
            ),
        )

    @translate_storage_errors
    def get_court(self, court_id: str) -> Optional[CourtSnapshot]:
        pk = _as_uuid(court_id)
        if pk is None:
            return None

        court = Court.objects.filter(id=pk).first()
        if court is None:
            return None

        return CourtSnapshot(
            id=str(court.id),
            facility_id=str(court.facility_id),
            name=court.name,
            status=court.status,
            court_type=court.court_type or "",
        )

    @translate_storage_errors
    def get_facility(self, facility_id: str) -> Optional[FacilitySnapshot]:
        facility = Facility.objects.filter(id=facility_id).first()
        if facility is None:
            return None

        rules = (
            FacilityRule.objects.filter(facility_id=facility.id, is_active=True)
            .order_by("display_order", "rule_code")
        )

        return FacilitySnapshot(
            id=str(facility.id),
            name=facility.name,
            timezone=facility.timezone or "UTC",
            prime_time_windows=parse_prime_time_windows(facility.prime_time_windows),
            rules=parse_rule_rows(rules),
        )

    @translate_storage_errors
    def get_household(self, household_id: str) -> Optional[HouseholdSnapshot]:
        pk = _as_uuid(household_id)
        if pk is None:
            return None

        household = Household.objects.filter(id=pk, is_active=True).first()
        if household is None:
            return None

        member_ids = (
            Member.objects.filter(household_id=household.id)
            .order_by("id")
            .values_list("id", flat=True)
        )
        return HouseholdSnapshot(
            id=str(household.id),
            name=household.name or household.street_address,
            member_ids=tuple(str(m) for m in member_ids),
        )

    @translate_storage_errors
    def get_bookings(
        self,
        user_ids: tuple[str, ...],
        facility_id: str,
        since: date,
    ) -> tuple[BookingSnapshot, ...]:
        pks = [pk for pk in (_as_uuid(u) for u in user_ids) if pk is not None]
        if not pks:
            return ()

        rows = Booking.objects.filter(
            user_id__in=pks,
            facility_id=facility_id,
            booking_date__gte=since,
        ).order_by("booking_date", "start_time", "id")
        return tuple(_booking_snapshot(row) for row in rows)

    @translate_storage_errors
    def get_booking(self, booking_id: str) -> Optional[BookingSnapshot]:
        pk = _as_uuid(booking_id)
        if pk is None:
            return None

        row = Booking.objects.filter(id=pk).first()
        return None if row is None else _booking_snapshot(row)

    @translate_storage_errors
    def count_strikes(self, user_id: str, facility_id: str) -> int:
        """Strikes that are neither revoked nor expired."""
        pk = _as_uuid(user_id)
        if pk is None:
            return 0

        now = self._clock.now_utc()
        return (
            Strike.objects.filter(user_id=pk, facility_id=facility_id, revoked=False)
            .filter(Q(expires_at__isnull=True) | Q(expires_at__gt=now))
            .count()
        )
