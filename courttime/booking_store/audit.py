"""
CourtTime Booking Store - Override Audit Sink
=============================================
Persists admin override records as BookingViolation rows.
"""

from __future__ import annotations

from django.db import transaction
from django.utils import timezone

from courttime.booking_store.models import BookingViolation
from courttime.rules_engine.audit import OverrideAuditRecord


class DbOverrideAuditSink:
    def record(self, entry: OverrideAuditRecord) -> None:
        # Own savepoint, so the caller's transaction survives a failed insert.
        with transaction.atomic():
            BookingViolation.objects.create(
                user_id=entry.user_id,
                facility_id=entry.facility_id,
                violation_type=entry.violation_type,
                violation_description=entry.violation_description,
                resolved=entry.resolved,
                resolved_at=timezone.now() if entry.resolved else None,
                resolved_by=entry.resolved_by,
                notes=entry.notes,
            )
