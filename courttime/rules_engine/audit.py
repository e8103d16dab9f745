"""
CourtTime Rules Engine — Override Audit
=========================================
Append-only record of administrator overrides.

One record per override of a blocked booking. Records are frozen
dataclasses; sinks persist them. Deletion is never offered.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol

from courttime.rules_engine.requests import AdminOverride, BookingRequest
from courttime.rules_engine.result import RuleResult

VIOLATION_ADMIN_OVERRIDE = "admin_override"


@dataclass(frozen=True)
class OverrideAuditRecord:
    user_id: str
    facility_id: str
    violation_type: str
    violation_description: str
    resolved: bool
    resolved_by: str
    notes: Optional[str] = None


def build_override_audit_record(
    request: BookingRequest,
    override: AdminOverride,
    blockers: Iterable[RuleResult],
) -> OverrideAuditRecord:
    codes = ", ".join(b.rule_code for b in blockers)
    return OverrideAuditRecord(
        user_id=request.user_id,
        facility_id=request.facility_id,
        violation_type=VIOLATION_ADMIN_OVERRIDE,
        violation_description=f"Admin override for rules: {codes}",
        resolved=True,
        resolved_by=override.admin_id,
        notes=override.reason,
    )


class OverrideAuditSink(Protocol):
    def record(self, entry: OverrideAuditRecord) -> None:
        ...


class InMemoryOverrideAuditSink:
    """Append-only in-memory sink used in tests/bootstrap."""

    def __init__(self):
        self._entries: List[OverrideAuditRecord] = []

    def record(self, entry: OverrideAuditRecord) -> None:
        self._entries.append(entry)

    @property
    def entries(self) -> tuple:
        return tuple(self._entries)
