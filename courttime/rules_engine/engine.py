"""
CourtTime Rules Engine — Orchestrator
=======================================
Evaluates a booking or cancellation against the facility's configured
rules.

Entry points:
    evaluate(request)                        → EvaluationResult
    validate(request)                        → EvaluationResult (alias)
    evaluate_with_override(request, override) → OverrideEvaluationResult
    evaluate_cancellation(request)           → CancellationEvaluationResult

Evaluation order is fixed: court → account → household. Household
rules are skipped as a whole when the user has no household.

Degradation:
    Rule storage not provisioned → allow, single SYSTEM warning
    Evaluator raises             → passing warning, never blocks
    No evaluator for rule code   → skipped, no result
    Override audit write fails   → logged, override still applies

The engine holds no per-call state and may be shared across threads.
It writes only in the override audit path.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional

from courttime.rules_engine.audit import (
    OverrideAuditSink,
    build_override_audit_record,
)
from courttime.rules_engine.cancellation import (
    assess_cancellation,
    resolve_cancellation_policy,
)
from courttime.rules_engine.context import (
    CancellationContextBuilder,
    RuleContextBuilder,
)
from courttime.rules_engine.exceptions import ConfigurationNotProvisioned
from courttime.rules_engine.interpolation import interpolate_message
from courttime.rules_engine.provider import RuleDataProvider
from courttime.rules_engine.registry import EvaluatorRegistry
from courttime.rules_engine.requests import (
    AdminOverride,
    BookingRequest,
    CancellationRequest,
)
from courttime.rules_engine.result import (
    SYSTEM_RULE_CODE,
    CancellationEvaluationResult,
    EvaluationResult,
    OverrideEvaluationResult,
    OverrideStatus,
    RuleResult,
    Severity,
)
from courttime.rules_engine.settings import RulesEngineSettings
from courttime.rules_engine.snapshots import (
    FacilityRuleConfig,
    RuleCategory,
    RuleContext,
)
from courttime.time.clock import Clock, SystemClock

logger = logging.getLogger("courttime.rules")


class RulesEngine:
    """
    Booking rules orchestrator.

    Constructed once by the composition root
    (courttime.rules_engine.bootstrap.build_rules_engine) and passed to
    callers. Tests construct it directly with swapped registries,
    in-memory providers and a FixedClock.

    Usage:
        engine = RulesEngine(
            registry=build_default_registry(),
            provider=InMemoryRuleDataProvider(...),
            audit_sink=InMemoryOverrideAuditSink(),
            clock=FixedClock(now),
        )
        result = engine.evaluate(request)
    """

    def __init__(
        self,
        registry: EvaluatorRegistry,
        provider: RuleDataProvider,
        audit_sink: OverrideAuditSink,
        clock: Clock = None,
        settings: RulesEngineSettings = None,
    ):
        self._registry = registry
        self._audit_sink = audit_sink
        self._clock = clock or SystemClock()
        self._settings = settings or RulesEngineSettings()
        self._context_builder = RuleContextBuilder(
            provider, clock=self._clock, settings=self._settings
        )
        self._cancellation_builder = CancellationContextBuilder(provider)

    @property
    def registry(self) -> EvaluatorRegistry:
        return self._registry

    # ══════════════════════════════════════════════════════════
    # BOOKING EVALUATION
    # ══════════════════════════════════════════════════════════

    def evaluate(self, request: BookingRequest) -> EvaluationResult:
        """
        Evaluate all applicable facility rules for a booking request.

        Flow:
        1. Build context (degrade if storage is not provisioned)
        2. Select applicable rules (court / tier scoping)
        3. Evaluate by category: court → account → household
        4. Aggregate into blockers / warnings / allowed

        Raises:
            ContextAssemblyError: unknown user, court or facility.
            Any unexpected storage error other than
            ConfigurationNotProvisioned.
        """
        try:
            context = self._context_builder.build(request)
        except ConfigurationNotProvisioned as exc:
            logger.warning(
                f"Rules engine tables not found, skipping rule validation: {exc}"
            )
            return self._not_provisioned_result()
        except Exception:
            logger.exception(
                f"Error building rule context for user {request.user_id} "
                f"at facility {request.facility_id}"
            )
            raise

        rules = self.get_applicable_rules(context)

        results: List[RuleResult] = []
        for category in RuleCategory.ORDER:
            if category == RuleCategory.HOUSEHOLD and context.household is None:
                continue

            for rule in rules:
                if rule.rule_category != category:
                    continue
                result = self._evaluate_rule_safe(rule, context)
                if result is not None:
                    results.append(result)

        return EvaluationResult.from_results(
            results, is_prime_time=context.is_prime_time
        )

    def validate(self, request: BookingRequest) -> EvaluationResult:
        """Dry-run evaluation for a booking that is not being created."""
        return self.evaluate(request)

    @staticmethod
    def get_applicable_rules(context: RuleContext) -> List[FacilityRuleConfig]:
        """Facility rules scoped to this court and the user's tier."""
        return [
            rule for rule in context.facility.rules
            if rule.applies_to(context.court.id, context.user.tier_id)
        ]

    # ══════════════════════════════════════════════════════════
    # RULE EXECUTION (FAIL-SAFE)
    # ══════════════════════════════════════════════════════════

    def _evaluate_rule_safe(
        self, rule: FacilityRuleConfig, context: RuleContext
    ) -> Optional[RuleResult]:
        """
        Run one evaluator with error isolation.

        Returns None when no evaluator is registered for the rule code.
        An evaluator fault becomes a passing warning: evaluator bugs
        must never block a booking.
        """
        evaluator = self._registry.get(rule.rule_code)
        if evaluator is None:
            logger.warning(f"No evaluator found for rule: {rule.rule_code}")
            return None

        try:
            result = evaluator.evaluate(context, rule.rule_config)
            if not isinstance(result, RuleResult):
                raise TypeError(
                    f"Evaluator returned {type(result).__name__}, "
                    f"expected RuleResult."
                )
        except Exception as exc:
            logger.error(
                f"Error evaluating rule {rule.rule_code}: {exc}",
                exc_info=True,
            )
            return RuleResult(
                rule_code=rule.rule_code,
                rule_name=rule.rule_name,
                passed=True,
                severity=Severity.WARNING,
                message=f"Error evaluating rule: {rule.rule_name}",
                details={
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )

        message = result.message
        if not result.passed and rule.failure_message_template:
            message = interpolate_message(
                rule.failure_message_template, result.details
            )

        return replace(
            result,
            rule_name=rule.rule_name or result.rule_name,
            message=message,
        )

    @staticmethod
    def _not_provisioned_result() -> EvaluationResult:
        return EvaluationResult(
            allowed=True,
            results=(),
            blockers=(),
            warnings=(
                RuleResult(
                    rule_code=SYSTEM_RULE_CODE,
                    rule_name="Rules Engine",
                    passed=False,
                    severity=Severity.WARNING,
                    message=(
                        "Rule validation skipped - rules engine not configured"
                    ),
                ),
            ),
            is_prime_time=False,
        )

    # ══════════════════════════════════════════════════════════
    # ADMIN OVERRIDE
    # ══════════════════════════════════════════════════════════

    def evaluate_with_override(
        self,
        request: BookingRequest,
        override: AdminOverride,
    ) -> OverrideEvaluationResult:
        """
        Evaluate, then force-allow.

        If the booking was blocked, one audit record is written and every
        blocker is annotated with overridden / overridden_by /
        override_reason. The result is always allowed.
        """
        result = self.evaluate(request)

        if result.allowed:
            return OverrideEvaluationResult(
                allowed=True,
                results=result.results,
                blockers=(),
                warnings=result.warnings,
                is_prime_time=result.is_prime_time,
                override_status=OverrideStatus.NOT_REQUIRED,
            )

        audit_written = self._log_admin_override(
            request, override, result.blockers
        )

        annotated = {
            id(blocker): replace(
                blocker,
                details={
                    **blocker.details,
                    "overridden": True,
                    "overridden_by": override.admin_id,
                    "override_reason": override.reason,
                },
            )
            for blocker in result.blockers
        }

        logger.info(
            f"Admin {override.admin_id} overrode "
            f"{len(result.blockers)} blocker(s) for user {request.user_id} "
            f"at facility {request.facility_id}"
        )

        return OverrideEvaluationResult(
            allowed=True,
            results=tuple(annotated.get(id(r), r) for r in result.results),
            blockers=tuple(annotated[id(b)] for b in result.blockers),
            warnings=result.warnings,
            is_prime_time=result.is_prime_time,
            override_status=(
                OverrideStatus.APPLIED
                if audit_written
                else OverrideStatus.APPLIED_AUDIT_FAILED
            ),
            overridden_rule_codes=tuple(b.rule_code for b in result.blockers),
        )

    def _log_admin_override(
        self,
        request: BookingRequest,
        override: AdminOverride,
        blockers,
    ) -> bool:
        """
        Best-effort audit write. Returns False if the sink raised.
        """
        try:
            self._audit_sink.record(
                build_override_audit_record(request, override, blockers)
            )
            return True
        except Exception as exc:
            logger.error(
                f"Failed to log admin override by {override.admin_id}: {exc}",
                exc_info=True,
            )
            return False

    # ══════════════════════════════════════════════════════════
    # CANCELLATION
    # ══════════════════════════════════════════════════════════

    def evaluate_cancellation(
        self, request: CancellationRequest
    ) -> CancellationEvaluationResult:
        """
        Determine late-cancel and strike consequences.

        Cancellation is always allowed; see
        courttime.rules_engine.cancellation for cutoff priority.
        """
        try:
            context = self._cancellation_builder.build(request)
        except ConfigurationNotProvisioned as exc:
            logger.warning(
                f"Rules engine tables not found, skipping cancellation "
                f"rule evaluation: {exc}"
            )
            return CancellationEvaluationResult(
                is_late_cancel=False,
                strike_will_be_issued=False,
                minutes_before_start=0,
            )

        policy = resolve_cancellation_policy(
            context.facility, self._settings, court_id=context.booking.court_id
        )
        outcome = assess_cancellation(context, policy, self._clock.now_utc())

        logger.debug(
            f"Cancellation of booking {request.booking_id}: "
            f"{outcome.minutes_before_start} min before start, "
            f"cutoff {policy.cutoff_minutes} ({policy.source}), "
            f"late={outcome.is_late_cancel}"
        )
        return outcome
