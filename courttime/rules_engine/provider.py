"""
CourtTime Rules Engine — Rule Data Provider Protocol and In-Memory Provider
============================================================================
The context builders read persisted state only through this protocol.

Implementations:
- InMemoryRuleDataProvider: deterministic, used in tests/bootstrap.
- courttime.booking_store.provider.DbRuleDataProvider: Django ORM.

Contract for implementations:
- Missing entities return None (the builder decides what is fatal).
- Absent rule-configuration storage raises ConfigurationNotProvisioned.
- Anything else propagates unchanged.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol

from courttime.rules_engine.exceptions import ConfigurationNotProvisioned
from courttime.rules_engine.snapshots import (
    BookingSnapshot,
    CourtSnapshot,
    FacilitySnapshot,
    HouseholdSnapshot,
    UserSnapshot,
)


class RuleDataProvider(Protocol):
    def get_user(self, user_id: str) -> Optional[UserSnapshot]:
        ...

    def get_court(self, court_id: str) -> Optional[CourtSnapshot]:
        ...

    def get_facility(self, facility_id: str) -> Optional[FacilitySnapshot]:
        """Facility with its active rules, in configured order."""
        ...

    def get_household(self, household_id: str) -> Optional[HouseholdSnapshot]:
        """Household with member ids; bookings are attached by the builder."""
        ...

    def get_bookings(
        self,
        user_ids: tuple[str, ...],
        facility_id: str,
        since: date,
    ) -> tuple[BookingSnapshot, ...]:
        """Bookings of the given users at a facility on or after since."""
        ...

    def get_booking(self, booking_id: str) -> Optional[BookingSnapshot]:
        ...

    def count_strikes(self, user_id: str, facility_id: str) -> int:
        ...


class InMemoryRuleDataProvider:
    """
    Deterministic in-memory provider.

    provisioned=False simulates storage where the rule relations have
    not been created: facility and strike reads raise
    ConfigurationNotProvisioned.
    """

    def __init__(
        self,
        users: Iterable[UserSnapshot] = (),
        courts: Iterable[CourtSnapshot] = (),
        facilities: Iterable[FacilitySnapshot] = (),
        households: Iterable[HouseholdSnapshot] = (),
        bookings: Iterable[BookingSnapshot] = (),
        strikes: dict | None = None,
        provisioned: bool = True,
    ):
        self._users = {u.id: u for u in users}
        self._courts = {c.id: c for c in courts}
        self._facilities = {f.id: f for f in facilities}
        self._households = {h.id: h for h in households}
        self._bookings = {b.id: b for b in bookings}
        self._strikes = dict(strikes or {})
        self._provisioned = provisioned

    def _require_provisioned(self) -> None:
        if not self._provisioned:
            raise ConfigurationNotProvisioned("courttime_facility_rules")

    def get_user(self, user_id: str) -> Optional[UserSnapshot]:
        return self._users.get(user_id)

    def get_court(self, court_id: str) -> Optional[CourtSnapshot]:
        return self._courts.get(court_id)

    def get_facility(self, facility_id: str) -> Optional[FacilitySnapshot]:
        self._require_provisioned()
        return self._facilities.get(facility_id)

    def get_household(self, household_id: str) -> Optional[HouseholdSnapshot]:
        return self._households.get(household_id)

    def get_bookings(
        self,
        user_ids: tuple[str, ...],
        facility_id: str,
        since: date,
    ) -> tuple[BookingSnapshot, ...]:
        wanted = set(user_ids)
        rows = [
            b for b in self._bookings.values()
            if b.user_id in wanted
            and b.facility_id == facility_id
            and b.booking_date >= since
        ]
        return tuple(
            sorted(rows, key=lambda b: (b.booking_date, b.start_time, b.id))
        )

    def get_booking(self, booking_id: str) -> Optional[BookingSnapshot]:
        return self._bookings.get(booking_id)

    def count_strikes(self, user_id: str, facility_id: str) -> int:
        self._require_provisioned()
        return int(self._strikes.get((user_id, facility_id), 0))
