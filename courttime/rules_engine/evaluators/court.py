"""
CourtTime Evaluators — Court Rules (CRT-*)
============================================
Per-court restrictions, evaluated before account and household rules.

Rules:
1. CRT-001: Court must be available
2. CRT-002: Allowed booking types
3. CRT-003: Duration bounds
4. CRT-004: Operating hours
5. CRT-005: Prime time restricted to tiers
6. CRT-012: Court cancellation cutoff (consumed by cancellation)
"""

from __future__ import annotations

from typing import Any, Mapping

from courttime.rules_engine.contracts import BaseEvaluator
from courttime.rules_engine.evaluators.common import format_time
from courttime.rules_engine.result import RuleResult, Severity
from courttime.rules_engine.snapshots import RuleCategory, RuleContext

COURT_AVAILABLE = "available"


class CourtAvailable(BaseEvaluator):
    rule_code = "CRT-001"
    rule_name = "Court Availability"
    category = RuleCategory.COURT
    severity = Severity.ERROR

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        court = context.court
        details = {"court_name": court.name, "status": court.status}
        if court.status != COURT_AVAILABLE:
            return self.fail(
                f"{court.name or 'This court'} is currently {court.status}.",
                details,
            )
        return self.pass_rule(details)


class AllowedBookingTypes(BaseEvaluator):
    rule_code = "CRT-002"
    rule_name = "Allowed Booking Types"
    category = RuleCategory.COURT
    severity = Severity.ERROR

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        allowed = self.list_param(rule_config, "allowed_booking_types")
        if not allowed:
            return self.pass_rule()

        booking_type = context.request.booking_type
        details = {
            "booking_type": booking_type,
            "allowed_types": ", ".join(allowed),
        }
        if booking_type not in allowed:
            return self.fail(
                f"'{booking_type}' bookings are not allowed on this court.",
                details,
            )
        return self.pass_rule(details)


class CourtDurationBounds(BaseEvaluator):
    rule_code = "CRT-003"
    rule_name = "Court Booking Duration"
    category = RuleCategory.COURT
    severity = Severity.ERROR

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        min_minutes = self.int_param(rule_config, "min_duration_minutes")
        max_minutes = self.int_param(rule_config, "max_duration_minutes")
        requested = context.request.duration_minutes
        details = {
            "min_minutes": min_minutes,
            "max_minutes": max_minutes,
            "requested_minutes": requested,
        }

        if min_minutes is not None and requested < min_minutes:
            return self.fail(
                f"Bookings on this court must be at least {min_minutes} minutes.",
                details,
            )
        if max_minutes is not None and requested > max_minutes:
            return self.fail(
                f"Bookings on this court may not exceed {max_minutes} minutes.",
                details,
            )
        return self.pass_rule(details)


class OperatingHours(BaseEvaluator):
    rule_code = "CRT-004"
    rule_name = "Operating Hours"
    category = RuleCategory.COURT
    severity = Severity.ERROR

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        open_time = self.time_param(rule_config, "open_time")
        close_time = self.time_param(rule_config, "close_time")
        if open_time is None and close_time is None:
            return self.pass_rule()

        request = context.request
        details = {
            "open_time": format_time(open_time) if open_time else None,
            "close_time": format_time(close_time) if close_time else None,
        }
        too_early = open_time is not None and request.start_time < open_time
        too_late = close_time is not None and request.end_time > close_time
        if too_early or too_late:
            return self.fail(
                "Booking falls outside court operating hours.", details
            )
        return self.pass_rule(details)


class PrimeTimeTierRestriction(BaseEvaluator):
    """
    Only listed tiers may book prime time. Members without a tier do not
    qualify. With enforce=false the failure is downgraded to a warning.
    """

    rule_code = "CRT-005"
    rule_name = "Prime Time Tier Restriction"
    category = RuleCategory.COURT
    severity = Severity.ERROR

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        allowed_tiers = self.list_param(rule_config, "allowed_tier_ids")
        if not allowed_tiers or not context.is_prime_time:
            return self.pass_rule()

        tier = context.user.tier
        details = {
            "tier": tier.name if tier else None,
            "allowed_tier_ids": ", ".join(allowed_tiers),
        }
        if tier is None or tier.id not in allowed_tiers:
            severity = (
                Severity.ERROR
                if self.bool_param(rule_config, "enforce", True)
                else Severity.WARNING
            )
            return self.fail(
                "Your membership tier cannot book prime time on this court.",
                details,
                severity=severity,
            )
        return self.pass_rule(details)


class CourtCancellationCutoff(BaseEvaluator):
    """Informational at booking time; applied by cancellation evaluation."""

    rule_code = "CRT-012"
    rule_name = "Court Cancellation Cutoff"
    category = RuleCategory.COURT
    severity = Severity.WARNING

    def evaluate(
        self, context: RuleContext, rule_config: Mapping[str, Any]
    ) -> RuleResult:
        return self.pass_rule(
            {
                "cutoff_minutes": self.int_param(
                    rule_config, "cancel_cutoff_minutes"
                ),
                "penalty_type": rule_config.get("penalty_type"),
            }
        )


COURT_EVALUATORS = (
    CourtAvailable(),
    AllowedBookingTypes(),
    CourtDurationBounds(),
    OperatingHours(),
    PrimeTimeTierRestriction(),
    CourtCancellationCutoff(),
)
