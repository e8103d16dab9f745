"""
CourtTime Rules Engine — Evaluator Registry
=============================================
Lookup table from rule code to evaluator.

Responsibilities:
- Register evaluator instances
- Enforce unique rule codes
- Index by category
- Lock after bootstrap (read-only thereafter)

Built once by the composition root from the three fixed evaluator
collections. No global registration, no dynamic imports.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, Iterable, List, Optional

from courttime.rules_engine.contracts import BaseEvaluator
from courttime.rules_engine.exceptions import (
    DuplicateEvaluatorError,
    RegistryLockedError,
)
from courttime.rules_engine.snapshots import RuleCategory

logger = logging.getLogger("courttime.rules")


class EvaluatorRegistry:
    """
    Rule code → evaluator, locked after bootstrap.

    Usage:
        registry = EvaluatorRegistry()
        registry.register(MaxBookingsPerWeek())
        registry.lock()

        evaluator = registry.get("ACC-002")
    """

    def __init__(self, evaluators: Iterable[BaseEvaluator] = ()):
        self._evaluators: Dict[str, BaseEvaluator] = {}
        self._category_index: Dict[str, List[BaseEvaluator]] = {
            category: [] for category in RuleCategory.ORDER
        }
        self._locked: bool = False
        self._lock = Lock()

        for evaluator in evaluators:
            self.register(evaluator)

    # ══════════════════════════════════════════════════════════
    # REGISTRATION
    # ══════════════════════════════════════════════════════════

    def register(self, evaluator: BaseEvaluator) -> None:
        if not isinstance(evaluator, BaseEvaluator):
            raise TypeError(
                f"Expected BaseEvaluator instance, got {type(evaluator).__name__}."
            )

        with self._lock:
            if self._locked:
                raise RegistryLockedError()

            if evaluator.rule_code in self._evaluators:
                raise DuplicateEvaluatorError(evaluator.rule_code)

            self._evaluators[evaluator.rule_code] = evaluator
            self._category_index[evaluator.category].append(evaluator)

            logger.debug(
                f"Evaluator registered: {evaluator.rule_code} "
                f"[{evaluator.severity}] category={evaluator.category}"
            )

    def lock(self) -> None:
        with self._lock:
            if not self._locked:
                self._locked = True
                logger.info(
                    f"Evaluator Registry LOCKED: "
                    f"{len(self._evaluators)} evaluators"
                )

    @property
    def is_locked(self) -> bool:
        with self._lock:
            return self._locked

    # ══════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════
    # After lock() the dicts are never written again, so reads
    # need no synchronisation.

    def get(self, rule_code: str) -> Optional[BaseEvaluator]:
        return self._evaluators.get(rule_code)

    def __contains__(self, rule_code: str) -> bool:
        return rule_code in self._evaluators

    def __len__(self) -> int:
        return len(self._evaluators)

    def by_category(self, category: str) -> List[BaseEvaluator]:
        """Evaluators of one category, sorted by rule code."""
        return sorted(
            self._category_index.get(category, []),
            key=lambda e: e.rule_code,
        )

    def rule_codes(self) -> List[str]:
        return sorted(self._evaluators)
