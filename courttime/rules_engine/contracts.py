"""
CourtTime Rules Engine — Evaluator Contract
=============================================
Abstract base class for all booking rule evaluators.

Every evaluator must:
- Be pure (no side effects, no writes)
- Be deterministic (same context + config → same result)
- Not read the system clock (use context.evaluated_at)
- Declare its rule_code, rule_name, category and severity

Contract validation enforced at class creation time:
- rule_code: non-empty string
- category:  court | account | household
- severity:  error | warning
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import time
from typing import Any, Mapping, Optional

from courttime.rules_engine.result import RuleResult, Severity
from courttime.rules_engine.snapshots import RuleCategory, RuleContext


class BaseEvaluator(ABC):
    """
    Abstract base for rule evaluators, one subclass per rule code.

    Subclasses must:
    - Set rule_code (e.g. 'ACC-002')
    - Set rule_name (display name used in results)
    - Set category (court | account | household)
    - Set severity (error | warning)
    - Implement evaluate()

    Invalid evaluators cannot exist: the contract is checked in
    __init_subclass__.
    """

    rule_code: str = ""
    rule_name: str = ""
    category: str = ""
    severity: str = Severity.ERROR

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)

        # Skip validation for intermediate abstract classes.
        # __abstractmethods__ is not computed yet at this point.
        if getattr(cls.evaluate, "__isabstractmethod__", False):
            return

        if not cls.rule_code or not isinstance(cls.rule_code, str):
            raise TypeError(
                f"Evaluator class {cls.__name__} must declare "
                f"rule_code as non-empty string."
            )

        if not cls.rule_name or not isinstance(cls.rule_name, str):
            raise TypeError(
                f"Evaluator class {cls.__name__} must declare "
                f"rule_name as non-empty string."
            )

        if cls.category not in RuleCategory.ALL:
            raise TypeError(
                f"Evaluator class {cls.__name__} category "
                f"'{cls.category}' must be one of: {sorted(RuleCategory.ALL)}"
            )

        if cls.severity not in Severity.ALL:
            raise TypeError(
                f"Evaluator class {cls.__name__} severity "
                f"'{cls.severity}' must be one of: {sorted(Severity.ALL)}"
            )

    @abstractmethod
    def evaluate(
        self,
        context: RuleContext,
        rule_config: Mapping[str, Any],
    ) -> RuleResult:
        """
        Evaluate this rule for the booking described by context.

        MUST be pure. No DB. No writes. No clock.

        Args:
            context:      Immutable rule context for the request.
            rule_config:  Facility-configured parameters for this rule.

        Returns:
            RuleResult with passed=True (ok) or passed=False (violation).
        """
        ...

    # ══════════════════════════════════════════════════════════
    # CONVENIENCE BUILDERS (for subclasses)
    # ══════════════════════════════════════════════════════════

    def pass_rule(self, details: dict = None) -> RuleResult:
        return RuleResult(
            rule_code=self.rule_code,
            rule_name=self.rule_name,
            passed=True,
            severity=self.severity,
            details=details or {},
        )

    def fail(
        self,
        message: str,
        details: dict = None,
        severity: str = None,
    ) -> RuleResult:
        """Build a failing RuleResult, by default with this rule's severity."""
        return RuleResult(
            rule_code=self.rule_code,
            rule_name=self.rule_name,
            passed=False,
            severity=severity or self.severity,
            message=message,
            details=details or {},
        )

    # ══════════════════════════════════════════════════════════
    # CONFIG READERS
    # ══════════════════════════════════════════════════════════
    # Rule configs are admin-edited JSON. A missing or blank value
    # means "not configured"; a malformed one raises and the engine
    # turns it into a non-blocking warning.

    @staticmethod
    def int_param(rule_config: Mapping[str, Any], key: str) -> Optional[int]:
        value = rule_config.get(key)
        if value is None or value == "":
            return None
        if isinstance(value, bool):
            raise ValueError(f"Config '{key}' must be an integer, got bool.")
        return int(value)

    @staticmethod
    def list_param(rule_config: Mapping[str, Any], key: str) -> tuple:
        value = rule_config.get(key)
        if value is None:
            return ()
        if isinstance(value, str):
            return tuple(part.strip() for part in value.split(",") if part.strip())
        return tuple(str(item) for item in value)

    @staticmethod
    def time_param(rule_config: Mapping[str, Any], key: str) -> Optional[time]:
        value = rule_config.get(key)
        if not value:
            return None
        if isinstance(value, time):
            return value
        return time.fromisoformat(str(value))

    @staticmethod
    def bool_param(
        rule_config: Mapping[str, Any], key: str, default: bool
    ) -> bool:
        value = rule_config.get(key)
        if value is None:
            return default
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)
