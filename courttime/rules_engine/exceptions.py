"""
CourtTime Rules Engine — Exceptions
=====================================
Structured errors for rules engine operations.

These are engine-level errors, NOT rule failures.
Rule failures flow through RuleResult → EvaluationResult.
"""

from __future__ import annotations


class RulesEngineError(Exception):
    """Base error for rules engine operations."""
    pass


# ══════════════════════════════════════════════════════════════
# STORAGE DEGRADATION
# ══════════════════════════════════════════════════════════════

class ConfigurationNotProvisioned(RulesEngineError):
    """
    Rule configuration relations do not exist in storage yet.

    Raised by the persistence layer, never by evaluators. The engine
    recovers from it by degrading to an always-allow result.
    """

    def __init__(self, relation: str = "", cause: Exception = None):
        self.relation = relation
        self.cause = cause
        detail = f" (relation '{relation}')" if relation else ""
        super().__init__(
            f"Rule configuration storage is not provisioned{detail}."
        )


# ══════════════════════════════════════════════════════════════
# CONTEXT ASSEMBLY (fatal to the caller)
# ══════════════════════════════════════════════════════════════

class ContextAssemblyError(RulesEngineError):
    """A referenced entity could not be loaded into the rule context."""

    entity = "entity"

    def __init__(self, entity_id):
        self.entity_id = entity_id
        super().__init__(f"{self.entity.capitalize()} '{entity_id}' not found.")


class UserNotFound(ContextAssemblyError):
    entity = "user"


class CourtNotFound(ContextAssemblyError):
    entity = "court"


class FacilityNotFound(ContextAssemblyError):
    entity = "facility"


class BookingNotFound(ContextAssemblyError):
    entity = "booking"


# ══════════════════════════════════════════════════════════════
# REGISTRY (bootstrap)
# ══════════════════════════════════════════════════════════════

class DuplicateEvaluatorError(RulesEngineError):
    """Evaluator for this rule code already registered."""

    def __init__(self, rule_code: str):
        self.rule_code = rule_code
        super().__init__(
            f"Evaluator for rule '{rule_code}' is already registered."
        )


class RegistryLockedError(RulesEngineError):
    """Evaluator registry is locked; no modifications allowed."""

    def __init__(self):
        super().__init__(
            "Evaluator Registry is locked after bootstrap. "
            "No dynamic evaluator registration allowed."
        )
