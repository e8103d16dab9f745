"""
CourtTime Evaluators — Account Rules (ACC-*)
==============================================
Per-user usage limits.

Rules:
1. ACC-001: Max upcoming reservations
2. ACC-002: Max bookings per week
3. ACC-003: Max booking duration
4. ACC-004: Advance booking window / minimum notice
5. ACC-005: Max prime-time bookings per week
6. ACC-006: No overlapping bookings for the same user
7. ACC-007: Strike suspension
8. ACC-008: Late-cancellation policy (consumed by cancellation)

Counts never include the requested booking itself.
"""

from __future__ import annotations

from typing import Any, Mapping

from courttime.rules_engine.contracts import BaseEvaluator
from courttime.rules_engine.evaluators.common import (
    in_request_week,
    local_today,
    overlapping_request,
    upcoming,
)
from courttime.rules_engine.result import RuleResult, Severity
from courttime.rules_engine.snapshots import RuleCategory, RuleContext
from courttime.time.slots import combine_date_and_time, minutes_between


class MaxActiveReservations(BaseEvaluator):
    rule_code = "ACC-001"
    rule_name = "Maximum Active Reservations"
    category = RuleCategory.ACCOUNT
    severity = Severity.ERROR

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        limit = self.int_param(rule_config, "max_active_reservations")
        if limit is None:
            return self.pass_rule()

        count = len(upcoming(context, context.counted_bookings()))
        details = {"limit": limit, "count": count}
        if count >= limit:
            return self.fail(
                f"You already have {count} upcoming reservations "
                f"(limit {limit}).",
                details,
            )
        return self.pass_rule(details)


class MaxBookingsPerWeek(BaseEvaluator):
    rule_code = "ACC-002"
    rule_name = "Weekly Booking Limit"
    category = RuleCategory.ACCOUNT
    severity = Severity.ERROR

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        limit = self.int_param(rule_config, "max_per_week")
        if limit is None:
            return self.pass_rule()

        count = len(in_request_week(context, context.counted_bookings()))
        details = {"limit": limit, "count": count}
        if count >= limit:
            return self.fail(
                f"Max {limit} bookings per week, you have {count}.", details
            )
        return self.pass_rule(details)


class MaxBookingDuration(BaseEvaluator):
    rule_code = "ACC-003"
    rule_name = "Maximum Booking Duration"
    category = RuleCategory.ACCOUNT
    severity = Severity.ERROR

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        max_minutes = self.int_param(rule_config, "max_duration_minutes")
        if max_minutes is None:
            return self.pass_rule()

        requested = context.request.duration_minutes
        details = {"max_minutes": max_minutes, "requested_minutes": requested}
        if requested > max_minutes:
            return self.fail(
                f"Bookings are limited to {max_minutes} minutes "
                f"(requested {requested}).",
                details,
            )
        return self.pass_rule(details)


class AdvanceBookingWindow(BaseEvaluator):
    rule_code = "ACC-004"
    rule_name = "Advance Booking Window"
    category = RuleCategory.ACCOUNT
    severity = Severity.ERROR

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        max_days = self.int_param(rule_config, "max_days_ahead")
        min_notice = self.int_param(rule_config, "min_minutes_notice")

        request = context.request
        days_ahead = (request.booking_date - local_today(context)).days
        minutes_ahead = minutes_between(
            context.evaluated_at,
            combine_date_and_time(
                request.booking_date,
                request.start_time,
                context.facility.timezone,
            ),
        )
        details = {
            "max_days": max_days,
            "days_ahead": days_ahead,
            "min_notice": min_notice,
            "minutes_ahead": minutes_ahead,
        }

        if max_days is not None and days_ahead > max_days:
            return self.fail(
                f"Bookings open {max_days} days in advance "
                f"(requested {days_ahead} days ahead).",
                details,
            )

        if min_notice is not None and minutes_ahead < min_notice:
            return self.fail(
                f"Bookings require {min_notice} minutes notice.", details
            )

        return self.pass_rule(details)


class PrimeTimeWeeklyLimit(BaseEvaluator):
    rule_code = "ACC-005"
    rule_name = "Prime Time Weekly Limit"
    category = RuleCategory.ACCOUNT
    severity = Severity.ERROR

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        limit = self.int_param(rule_config, "max_prime_time_per_week")
        if limit is None or not context.is_prime_time:
            return self.pass_rule()

        prime = [
            b for b in in_request_week(context, context.counted_bookings())
            if b.is_prime_time
        ]
        details = {"limit": limit, "count": len(prime)}
        if len(prime) >= limit:
            return self.fail(
                f"Max {limit} prime-time bookings per week, "
                f"you have {len(prime)}.",
                details,
            )
        return self.pass_rule(details)


class NoOverlappingBookings(BaseEvaluator):
    rule_code = "ACC-006"
    rule_name = "No Overlapping Bookings"
    category = RuleCategory.ACCOUNT
    severity = Severity.ERROR

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        conflicts = overlapping_request(context, context.counted_bookings())
        if conflicts:
            first = conflicts[0]
            return self.fail(
                "You already have a booking at this time.",
                {
                    "conflicting_booking_id": first.id,
                    "conflicting_court_id": first.court_id,
                    "count": len(conflicts),
                },
            )
        return self.pass_rule()


class StrikeSuspension(BaseEvaluator):
    rule_code = "ACC-007"
    rule_name = "Strike Suspension"
    category = RuleCategory.ACCOUNT
    severity = Severity.ERROR

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        max_strikes = self.int_param(rule_config, "max_strikes")
        if max_strikes is None:
            return self.pass_rule()

        strikes = context.user.active_strike_count
        details = {"max_strikes": max_strikes, "strikes": strikes}
        if strikes >= max_strikes:
            return self.fail(
                f"Booking suspended: {strikes} active strikes "
                f"(limit {max_strikes}).",
                details,
            )
        return self.pass_rule(details)


class LateCancellationPolicy(BaseEvaluator):
    """Informational at booking time; applied by cancellation evaluation."""

    rule_code = "ACC-008"
    rule_name = "Late Cancellation Policy"
    category = RuleCategory.ACCOUNT
    severity = Severity.WARNING

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        return self.pass_rule(
            {
                "cutoff_minutes": self.int_param(
                    rule_config, "late_cancel_cutoff_minutes"
                ),
                "penalty_type": rule_config.get("penalty_type"),
            }
        )


ACCOUNT_EVALUATORS = (
    MaxActiveReservations(),
    MaxBookingsPerWeek(),
    MaxBookingDuration(),
    AdvanceBookingWindow(),
    PrimeTimeWeeklyLimit(),
    NoOverlappingBookings(),
    StrikeSuspension(),
    LateCancellationPolicy(),
)
