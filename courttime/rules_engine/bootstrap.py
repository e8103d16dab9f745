"""
CourtTime Rules Engine — Composition Root
===========================================
Wires the default registry, Django-backed storage and settings into a
RulesEngine. Anything passed explicitly replaces the default.
"""

from __future__ import annotations

from courttime.rules_engine.audit import OverrideAuditSink
from courttime.rules_engine.engine import RulesEngine
from courttime.rules_engine.evaluators import build_default_registry
from courttime.rules_engine.provider import RuleDataProvider
from courttime.rules_engine.registry import EvaluatorRegistry
from courttime.rules_engine.settings import RulesEngineSettings
from courttime.time.clock import Clock, SystemClock


def build_rules_engine(
    provider: RuleDataProvider = None,
    audit_sink: OverrideAuditSink = None,
    clock: Clock = None,
    settings: RulesEngineSettings = None,
    registry: EvaluatorRegistry = None,
) -> RulesEngine:
    clock = clock or SystemClock()

    if provider is None:
        from courttime.booking_store.provider import DbRuleDataProvider

        provider = DbRuleDataProvider(clock=clock)

    if audit_sink is None:
        from courttime.booking_store.audit import DbOverrideAuditSink

        audit_sink = DbOverrideAuditSink()

    return RulesEngine(
        registry=registry if registry is not None else build_default_registry(),
        provider=provider,
        audit_sink=audit_sink,
        clock=clock,
        settings=settings or RulesEngineSettings.from_django(),
    )
