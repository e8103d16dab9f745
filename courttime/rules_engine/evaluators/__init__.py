"""
CourtTime Evaluators — Fixed Evaluator Collections
====================================================
Three collections, one per rule category. The default registry is
built from exactly these; tests build registries from their own sets.
"""

from courttime.rules_engine.evaluators.account import ACCOUNT_EVALUATORS
from courttime.rules_engine.evaluators.court import COURT_EVALUATORS
from courttime.rules_engine.evaluators.household import HOUSEHOLD_EVALUATORS
from courttime.rules_engine.registry import EvaluatorRegistry


def build_default_registry() -> EvaluatorRegistry:
    """Register every shipped evaluator and lock."""
    registry = EvaluatorRegistry()
    for collection in (ACCOUNT_EVALUATORS, COURT_EVALUATORS, HOUSEHOLD_EVALUATORS):
        for evaluator in collection:
            registry.register(evaluator)
    registry.lock()
    return registry


__all__ = [
    "ACCOUNT_EVALUATORS",
    "COURT_EVALUATORS",
    "HOUSEHOLD_EVALUATORS",
    "build_default_registry",
]
