"""
CourtTime Rules Engine — Result Models
========================================
RuleResult: single rule evaluation outcome.
EvaluationResult: aggregate of all rule results for one booking.
OverrideEvaluationResult: aggregate after an administrator override.
CancellationEvaluationResult: consequences of cancelling a booking.

Severity:
    error    → failed rule blocks the booking
    warning  → failed rule is informational only

These are pure data structures. No side effects. No persistence.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


# ══════════════════════════════════════════════════════════════
# SEVERITY LEVELS
# ══════════════════════════════════════════════════════════════

class Severity:
    ERROR = "error"
    WARNING = "warning"

    ALL = frozenset({"error", "warning"})


SYSTEM_RULE_CODE = "SYSTEM"


# ══════════════════════════════════════════════════════════════
# RULE RESULT (single rule evaluation outcome)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class RuleResult:
    """
    Outcome of a single rule evaluation.

    Fields:
        rule_code:  Stable rule identifier (e.g. 'CRT-012').
        rule_name:  Display name.
        passed:     True if the booking satisfies the rule.
        severity:   error | warning (enforcement only when not passed).
        message:    Human-readable text, rendered from the facility's
                    failure template when the rule fails.
        details:    Values used for interpolation and override annotation.
    """

    rule_code: str
    rule_name: str
    passed: bool
    severity: str
    message: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.rule_code or not isinstance(self.rule_code, str):
            raise ValueError("rule_code must be a non-empty string.")

        if not isinstance(self.passed, bool):
            raise ValueError("passed must be a bool.")

        if self.severity not in Severity.ALL:
            raise ValueError(
                f"severity '{self.severity}' not valid. "
                f"Must be one of: {sorted(Severity.ALL)}"
            )

        object.__setattr__(self, "details", dict(self.details or {}))

    @property
    def is_blocker(self) -> bool:
        return not self.passed and self.severity == Severity.ERROR

    @property
    def is_warning(self) -> bool:
        return not self.passed and self.severity == Severity.WARNING

    def to_payload(self) -> dict:
        return {
            "rule_code": self.rule_code,
            "rule_name": self.rule_name,
            "passed": self.passed,
            "severity": self.severity,
            "message": self.message,
            "details": dict(self.details),
        }


# ══════════════════════════════════════════════════════════════
# EVALUATION RESULT (aggregate for one booking request)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EvaluationResult:
    """
    Aggregate booking decision.

    Fields:
        allowed:        True iff there are no blockers.
        results:        Every evaluated rule, in evaluation order.
        blockers:       Failed results with error severity.
        warnings:       Failed results with warning severity.
        is_prime_time:  Whether the requested slot is prime time.
    """

    allowed: bool
    results: Tuple[RuleResult, ...] = ()
    blockers: Tuple[RuleResult, ...] = ()
    warnings: Tuple[RuleResult, ...] = ()
    is_prime_time: bool = False

    def __post_init__(self):
        object.__setattr__(self, "results", tuple(self.results))
        object.__setattr__(self, "blockers", tuple(self.blockers))
        object.__setattr__(self, "warnings", tuple(self.warnings))
        self._check_allowed()

    def _check_allowed(self) -> None:
        if self.allowed != (len(self.blockers) == 0):
            raise ValueError("allowed must be True exactly when there are no blockers.")

    @classmethod
    def from_results(
        cls, results, is_prime_time: bool = False
    ) -> EvaluationResult:
        results = tuple(results)
        blockers = tuple(r for r in results if r.is_blocker)
        warnings = tuple(r for r in results if r.is_warning)
        return cls(
            allowed=len(blockers) == 0,
            results=results,
            blockers=blockers,
            warnings=warnings,
            is_prime_time=is_prime_time,
        )

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    def to_payload(self) -> dict:
        return {
            "allowed": self.allowed,
            "is_prime_time": self.is_prime_time,
            "results": [r.to_payload() for r in self.results],
            "blockers": [r.to_payload() for r in self.blockers],
            "warnings": [r.to_payload() for r in self.warnings],
        }


# ══════════════════════════════════════════════════════════════
# OVERRIDE RESULT
# ══════════════════════════════════════════════════════════════

class OverrideStatus:
    NOT_REQUIRED = "NOT_REQUIRED"
    APPLIED = "APPLIED"
    APPLIED_AUDIT_FAILED = "APPLIED_AUDIT_FAILED"

    ALL = frozenset({"NOT_REQUIRED", "APPLIED", "APPLIED_AUDIT_FAILED"})


@dataclass(frozen=True)
class OverrideEvaluationResult(EvaluationResult):
    """
    Evaluation after an administrator override.

    allowed is always True. blockers keep the rules that were
    overridden, annotated in their details. override_status tells the
    caller whether the audit trail was written, so audit gaps can be
    alerted on without re-blocking the booking.
    """

    override_status: str = OverrideStatus.NOT_REQUIRED
    overridden_rule_codes: Tuple[str, ...] = ()

    def _check_allowed(self) -> None:
        if self.allowed is not True:
            raise ValueError("An overridden evaluation is always allowed.")
        if self.override_status not in OverrideStatus.ALL:
            raise ValueError(
                f"override_status '{self.override_status}' not valid. "
                f"Must be one of: {sorted(OverrideStatus.ALL)}"
            )

    @property
    def audit_recorded(self) -> bool:
        return self.override_status == OverrideStatus.APPLIED

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["override_status"] = self.override_status
        payload["overridden_rule_codes"] = list(self.overridden_rule_codes)
        return payload


# ══════════════════════════════════════════════════════════════
# CANCELLATION RESULT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CancellationEvaluationResult:
    """
    Consequences of a cancellation. Cancelling is never blocked:
    allowed is always True, only the late/strike flags vary.
    """

    is_late_cancel: bool
    strike_will_be_issued: bool
    minutes_before_start: int
    cutoff_minutes: Optional[int] = None
    penalty_type: Optional[str] = None
    message: Optional[str] = None
    allowed: bool = True

    def __post_init__(self):
        if self.allowed is not True:
            raise ValueError("Cancellation is always allowed.")
        if self.strike_will_be_issued and not self.is_late_cancel:
            raise ValueError("A strike is only issued for a late cancellation.")

    def to_payload(self) -> dict:
        return {
            "allowed": self.allowed,
            "is_late_cancel": self.is_late_cancel,
            "strike_will_be_issued": self.strike_will_be_issued,
            "minutes_before_start": self.minutes_before_start,
            "cutoff_minutes": self.cutoff_minutes,
            "penalty_type": self.penalty_type,
            "message": self.message,
        }
