"""
CourtTime Rules Engine — Context Snapshots
============================================
Point-in-time, read-only views of persisted state.

RuleContext: everything a booking evaluator may look at.
CancellationContext: everything cancellation evaluation may look at.

Built fresh per evaluation call. Never cached. Never mutated after
construction; all evaluators of one request observe the same snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Mapping, Optional, Tuple

from courttime.rules_engine.requests import BookingRequest
from courttime.time.slots import SlotWindow, slots_overlap


# ══════════════════════════════════════════════════════════════
# RULE CATEGORIES
# ══════════════════════════════════════════════════════════════

class RuleCategory:
    """Rule scope. ORDER is the fixed evaluation order."""
    COURT = "court"
    ACCOUNT = "account"
    HOUSEHOLD = "household"

    ORDER = ("court", "account", "household")
    ALL = frozenset(ORDER)


class BookingStatus:
    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    ALL = frozenset({"confirmed", "pending", "cancelled", "completed"})


# ══════════════════════════════════════════════════════════════
# FACILITY RULE CONFIG
# ══════════════════════════════════════════════════════════════

def _id_tuple(value) -> Tuple[str, ...]:
    """A bare string is one id, not a sequence of characters."""
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


@dataclass(frozen=True)
class FacilityRuleConfig:
    """
    One configured rule instance at a facility.

    rule_config is opaque to the engine; the evaluator registered for
    rule_code interprets it. Empty applies_to_* tuples mean "all".
    """

    rule_code: str
    rule_category: str
    rule_name: str
    rule_config: Mapping[str, Any] = field(default_factory=dict)
    applies_to_court_ids: Tuple[str, ...] = ()
    applies_to_tier_ids: Tuple[str, ...] = ()
    failure_message_template: Optional[str] = None

    def __post_init__(self):
        if not self.rule_code or not isinstance(self.rule_code, str):
            raise ValueError("rule_code must be a non-empty string.")

        if self.rule_category not in RuleCategory.ALL:
            raise ValueError(
                f"rule_category '{self.rule_category}' not valid. "
                f"Must be one of: {sorted(RuleCategory.ALL)}"
            )

        object.__setattr__(self, "rule_config", dict(self.rule_config or {}))
        object.__setattr__(
            self, "applies_to_court_ids", _id_tuple(self.applies_to_court_ids)
        )
        object.__setattr__(
            self, "applies_to_tier_ids", _id_tuple(self.applies_to_tier_ids)
        )

    def applies_to(self, court_id: str, tier_id: Optional[str]) -> bool:
        """
        Court list: empty or contains the court.
        Tier list: empty, or user has no tier, or contains the tier.
        """
        if self.applies_to_court_ids and court_id not in self.applies_to_court_ids:
            return False

        if (
            self.applies_to_tier_ids
            and tier_id is not None
            and tier_id not in self.applies_to_tier_ids
        ):
            return False

        return True


# ══════════════════════════════════════════════════════════════
# ENTITY SNAPSHOTS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class TierSnapshot:
    id: str
    name: str = ""


@dataclass(frozen=True)
class UserSnapshot:
    id: str
    full_name: str = ""
    tier: Optional[TierSnapshot] = None
    household_id: Optional[str] = None
    active_strike_count: int = 0

    @property
    def tier_id(self) -> Optional[str]:
        return None if self.tier is None else self.tier.id


@dataclass(frozen=True)
class CourtSnapshot:
    id: str
    facility_id: str
    name: str = ""
    status: str = "available"
    court_type: str = ""


@dataclass(frozen=True)
class PrimeTimeWindow:
    """
    High-demand window. days are lowercase weekday names;
    an empty tuple means every day.
    """

    start_time: time
    end_time: time
    days: Tuple[str, ...] = ()

    def covers(self, booking_date: date, start: time, end: time) -> bool:
        if self.days and booking_date.strftime("%A").lower() not in self.days:
            return False
        return slots_overlap(start, end, self.start_time, self.end_time)


@dataclass(frozen=True)
class FacilitySnapshot:
    id: str
    name: str = ""
    timezone: str = "UTC"
    prime_time_windows: Tuple[PrimeTimeWindow, ...] = ()
    rules: Tuple[FacilityRuleConfig, ...] = ()

    def find_rule(self, rule_code: str) -> Optional[FacilityRuleConfig]:
        for rule in self.rules:
            if rule.rule_code == rule_code:
                return rule
        return None


@dataclass(frozen=True)
class BookingSnapshot:
    id: str
    user_id: str
    court_id: str
    facility_id: str
    booking_date: date
    start_time: time
    end_time: time
    status: str = BookingStatus.CONFIRMED
    booking_type: str = ""
    is_prime_time: bool = False

    @property
    def slot(self) -> SlotWindow:
        return SlotWindow(self.booking_date, self.start_time, self.end_time)


@dataclass(frozen=True)
class HouseholdSnapshot:
    """Linked accounts sharing household-level limits."""

    id: str
    name: str = ""
    member_ids: Tuple[str, ...] = ()
    bookings: Tuple[BookingSnapshot, ...] = ()


# ══════════════════════════════════════════════════════════════
# RULE CONTEXT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RuleContext:
    """
    Assembled snapshot for one booking evaluation.

    existing_bookings: the user's upcoming bookings at the facility.
    evaluated_at:      clock reading taken once at assembly time.
    """

    request: BookingRequest
    user: UserSnapshot
    court: CourtSnapshot
    facility: FacilitySnapshot
    existing_bookings: Tuple[BookingSnapshot, ...]
    is_prime_time: bool
    evaluated_at: datetime
    household: Optional[HouseholdSnapshot] = None
    counted_statuses: frozenset = frozenset(
        {BookingStatus.CONFIRMED, BookingStatus.PENDING}
    )

    def counted_bookings(self) -> Tuple[BookingSnapshot, ...]:
        """User's bookings that count against limits."""
        return tuple(
            b for b in self.existing_bookings
            if b.status in self.counted_statuses
        )

    def counted_household_bookings(self) -> Tuple[BookingSnapshot, ...]:
        if self.household is None:
            return ()
        return tuple(
            b for b in self.household.bookings
            if b.status in self.counted_statuses
        )


@dataclass(frozen=True)
class CancellationContext:
    booking: BookingSnapshot
    user_id: str
    strike_count: int
    facility: FacilitySnapshot
