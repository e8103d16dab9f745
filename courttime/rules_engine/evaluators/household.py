"""
CourtTime Evaluators — Household Rules (HH-*)
===============================================
Aggregate limits shared by linked accounts. The engine only runs
these when the context carries a household, so evaluators may assume
context.household is set.

Rules:
1. HH-001: Household max upcoming reservations
2. HH-002: Household max bookings per week
3. HH-003: Household max prime-time bookings per week
4. HH-004: Household max concurrent bookings
"""

from __future__ import annotations

from typing import Any, Mapping

from courttime.rules_engine.contracts import BaseEvaluator
from courttime.rules_engine.evaluators.common import (
    in_request_week,
    overlapping_request,
    upcoming,
)
from courttime.rules_engine.result import RuleResult, Severity
from courttime.rules_engine.snapshots import RuleCategory, RuleContext


class HouseholdActiveReservations(BaseEvaluator):
    rule_code = "HH-001"
    rule_name = "Household Active Reservations"
    category = RuleCategory.HOUSEHOLD
    severity = Severity.ERROR

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        limit = self.int_param(rule_config, "max_active_reservations")
        if limit is None:
            return self.pass_rule()

        count = len(upcoming(context, context.counted_household_bookings()))
        details = {
            "limit": limit,
            "count": count,
            "household": context.household.name,
        }
        if count >= limit:
            return self.fail(
                f"Your household already has {count} upcoming reservations "
                f"(limit {limit}).",
                details,
            )
        return self.pass_rule(details)


class HouseholdWeeklyLimit(BaseEvaluator):
    rule_code = "HH-002"
    rule_name = "Household Weekly Limit"
    category = RuleCategory.HOUSEHOLD
    severity = Severity.ERROR

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        limit = self.int_param(rule_config, "max_per_week")
        if limit is None:
            return self.pass_rule()

        count = len(
            in_request_week(context, context.counted_household_bookings())
        )
        details = {
            "limit": limit,
            "count": count,
            "household": context.household.name,
        }
        if count >= limit:
            return self.fail(
                f"Max {limit} household bookings per week, "
                f"your household has {count}.",
                details,
            )
        return self.pass_rule(details)


class HouseholdPrimeTimeLimit(BaseEvaluator):
    rule_code = "HH-003"
    rule_name = "Household Prime Time Limit"
    category = RuleCategory.HOUSEHOLD
    severity = Severity.ERROR

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        limit = self.int_param(rule_config, "max_prime_time_per_week")
        if limit is None or not context.is_prime_time:
            return self.pass_rule()

        count = sum(
            1
            for b in in_request_week(
                context, context.counted_household_bookings()
            )
            if b.is_prime_time
        )
        details = {
            "limit": limit,
            "count": count,
            "household": context.household.name,
        }
        if count >= limit:
            return self.fail(
                f"Max {limit} household prime-time bookings per week, "
                f"your household has {count}.",
                details,
            )
        return self.pass_rule(details)


class HouseholdConcurrentBookings(BaseEvaluator):
    rule_code = "HH-004"
    rule_name = "Household Concurrent Bookings"
    category = RuleCategory.HOUSEHOLD
    severity = Severity.ERROR

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        limit = self.int_param(rule_config, "max_concurrent")
        if limit is None:
            return self.pass_rule()

        count = len(
            overlapping_request(context, context.counted_household_bookings())
        )
        details = {"limit": limit, "count": count}
        if count >= limit:
            return self.fail(
                f"Your household already holds {count} court(s) at this time "
                f"(limit {limit}).",
                details,
            )
        return self.pass_rule(details)


HOUSEHOLD_EVALUATORS = (
    HouseholdActiveReservations(),
    HouseholdWeeklyLimit(),
    HouseholdPrimeTimeLimit(),
    HouseholdConcurrentBookings(),
)
