"""
CourtTime Rules Engine — Booking Rule Evaluation
==================================================
Evaluates booking requests and cancellations against the rules a
facility has configured.

Rules are data, evaluators are code.
Evaluator faults never block a booking.
Missing rule storage degrades to allow-with-warning.
"""

from courttime.rules_engine.audit import (
    InMemoryOverrideAuditSink,
    OverrideAuditRecord,
    OverrideAuditSink,
)
from courttime.rules_engine.bootstrap import build_rules_engine
from courttime.rules_engine.cancellation import (
    CancellationPolicy,
    resolve_cancellation_policy,
)
from courttime.rules_engine.contracts import BaseEvaluator
from courttime.rules_engine.engine import RulesEngine
from courttime.rules_engine.evaluators import build_default_registry
from courttime.rules_engine.exceptions import (
    BookingNotFound,
    ConfigurationNotProvisioned,
    ContextAssemblyError,
    CourtNotFound,
    DuplicateEvaluatorError,
    FacilityNotFound,
    RegistryLockedError,
    RulesEngineError,
    UserNotFound,
)
from courttime.rules_engine.interpolation import interpolate_message
from courttime.rules_engine.provider import (
    InMemoryRuleDataProvider,
    RuleDataProvider,
)
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

__all__ = [
    # ── Contract ──────────────────────────────────────────────
    "BaseEvaluator",
    # ── Engine ────────────────────────────────────────────────
    "RulesEngine",
    "RulesEngineSettings",
    "build_rules_engine",
    # ── Registry ──────────────────────────────────────────────
    "EvaluatorRegistry",
    "build_default_registry",
    # ── Requests ──────────────────────────────────────────────
    "BookingRequest",
    "CancellationRequest",
    "AdminOverride",
    # ── Context ───────────────────────────────────────────────
    "RuleContext",
    "RuleCategory",
    "FacilityRuleConfig",
    "RuleDataProvider",
    "InMemoryRuleDataProvider",
    # ── Results ───────────────────────────────────────────────
    "RuleResult",
    "Severity",
    "SYSTEM_RULE_CODE",
    "EvaluationResult",
    "OverrideEvaluationResult",
    "OverrideStatus",
    "CancellationEvaluationResult",
    "CancellationPolicy",
    "resolve_cancellation_policy",
    "interpolate_message",
    # ── Audit ─────────────────────────────────────────────────
    "OverrideAuditRecord",
    "OverrideAuditSink",
    "InMemoryOverrideAuditSink",
    # ── Exceptions ────────────────────────────────────────────
    "RulesEngineError",
    "ConfigurationNotProvisioned",
    "ContextAssemblyError",
    "UserNotFound",
    "CourtNotFound",
    "FacilityNotFound",
    "BookingNotFound",
    "DuplicateEvaluatorError",
    "RegistryLockedError",
]
