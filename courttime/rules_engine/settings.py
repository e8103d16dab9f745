"""
CourtTime Rules Engine — Settings
===================================
Engine defaults, sourced from the Django COURTTIME_RULES setting.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from courttime.rules_engine.snapshots import BookingStatus

DEFAULT_CANCEL_CUTOFF_MINUTES = 240
PENALTY_STRIKE = "strike"


@dataclass(frozen=True)
class RulesEngineSettings:
    """
    Fields:
        default_cancel_cutoff_minutes: Cutoff when no cancellation rule
                                       is configured.
        default_penalty_type:          Penalty when no cancellation rule
                                       is configured.
        counted_booking_statuses:      Booking statuses that count
                                       against usage limits.
    """

    default_cancel_cutoff_minutes: int = DEFAULT_CANCEL_CUTOFF_MINUTES
    default_penalty_type: str = PENALTY_STRIKE
    counted_booking_statuses: frozenset = field(
        default_factory=lambda: frozenset(
            {BookingStatus.CONFIRMED, BookingStatus.PENDING}
        )
    )

    def __post_init__(self):
        if (
            not isinstance(self.default_cancel_cutoff_minutes, int)
            or self.default_cancel_cutoff_minutes < 0
        ):
            raise ValueError("default_cancel_cutoff_minutes must be int >= 0.")

        if not self.default_penalty_type:
            raise ValueError("default_penalty_type must be a non-empty string.")

        object.__setattr__(
            self,
            "counted_booking_statuses",
            frozenset(self.counted_booking_statuses),
        )

    @classmethod
    def from_django(cls) -> RulesEngineSettings:
        from django.conf import settings

        config = getattr(settings, "COURTTIME_RULES", {}) or {}
        defaults = cls()
        return cls(
            default_cancel_cutoff_minutes=int(
                config.get(
                    "DEFAULT_CANCEL_CUTOFF_MINUTES",
                    defaults.default_cancel_cutoff_minutes,
                )
            ),
            default_penalty_type=config.get(
                "DEFAULT_PENALTY_TYPE", defaults.default_penalty_type
            ),
            counted_booking_statuses=frozenset(
                config.get(
                    "COUNTED_BOOKING_STATUSES",
                    defaults.counted_booking_statuses,
                )
            ),
        )
