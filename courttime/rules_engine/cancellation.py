"""
CourtTime Rules Engine — Cancellation Consequences
====================================================
Cancelling is never blocked. Rules only decide whether the
cancellation is late and whether a strike follows.

Cutoff resolution priority:
    1. CRT-012 court cancellation rule   (cancel_cutoff_minutes)
    2. ACC-008 late cancellation rule    (late_cancel_cutoff_minutes)
    3. Engine defaults                   (240 minutes, strike)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from courttime.rules_engine.result import CancellationEvaluationResult
from courttime.rules_engine.settings import PENALTY_STRIKE, RulesEngineSettings
from courttime.rules_engine.snapshots import CancellationContext, FacilitySnapshot
from courttime.time.slots import combine_date_and_time, minutes_between

COURT_CANCEL_RULE_CODE = "CRT-012"
LATE_CANCEL_RULE_CODE = "ACC-008"

SOURCE_COURT = "court"
SOURCE_ACCOUNT = "account"
SOURCE_DEFAULT = "default"


@dataclass(frozen=True)
class CancellationPolicy:
    cutoff_minutes: int
    penalty_type: str
    source: str = SOURCE_DEFAULT


def resolve_cancellation_policy(
    facility: FacilitySnapshot,
    settings: RulesEngineSettings,
    court_id: Optional[str] = None,
) -> CancellationPolicy:
    """
    Pick the cutoff/penalty by configuration priority.

    A configured rule wins even when its config is empty; blank values
    inside the winning rule fall back to the defaults. Given court_id, a
    rule scoped by applies_to_court_ids to other courts is passed over.
    """
    candidates = (
        (COURT_CANCEL_RULE_CODE, "cancel_cutoff_minutes", SOURCE_COURT),
        (LATE_CANCEL_RULE_CODE, "late_cancel_cutoff_minutes", SOURCE_ACCOUNT),
    )
    for rule_code, cutoff_key, source in candidates:
        rule = facility.find_rule(rule_code)
        if rule is None:
            continue
        if court_id is not None and not rule.applies_to(court_id, None):
            continue
        config = rule.rule_config
        return CancellationPolicy(
            cutoff_minutes=int(
                config.get(cutoff_key) or settings.default_cancel_cutoff_minutes
            ),
            penalty_type=(
                config.get("penalty_type") or settings.default_penalty_type
            ),
            source=source,
        )

    return CancellationPolicy(
        cutoff_minutes=settings.default_cancel_cutoff_minutes,
        penalty_type=settings.default_penalty_type,
    )


def assess_cancellation(
    context: CancellationContext,
    policy: CancellationPolicy,
    now: datetime,
) -> CancellationEvaluationResult:
    booking = context.booking
    booking_start = combine_date_and_time(
        booking.booking_date, booking.start_time, context.facility.timezone
    )
    minutes_before_start = minutes_between(now, booking_start)

    is_late_cancel = minutes_before_start < policy.cutoff_minutes
    strike_will_be_issued = (
        is_late_cancel and policy.penalty_type == PENALTY_STRIKE
    )

    message = None
    if is_late_cancel:
        message = (
            f"This is a late cancellation (within {policy.cutoff_minutes} "
            f"minutes of start)."
        )
        if strike_will_be_issued:
            message += " A strike will be issued."

    return CancellationEvaluationResult(
        is_late_cancel=is_late_cancel,
        strike_will_be_issued=strike_will_be_issued,
        minutes_before_start=minutes_before_start,
        cutoff_minutes=policy.cutoff_minutes,
        penalty_type=policy.penalty_type,
        message=message,
    )
