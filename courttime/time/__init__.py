"""
CourtTime Time — Public API
=============================
Explicit clock protocol and booking-slot temporal helpers.
Doctrine: NO datetime.now() in evaluator logic.
"""

from courttime.time.clock import (
    Clock,
    FixedClock,
    SystemClock,
    facility_date,
)
from courttime.time.slots import (
    SlotWindow,
    combine_date_and_time,
    iso_week_key,
    minutes_between,
    slots_overlap,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "facility_date",
    "SlotWindow",
    "combine_date_and_time",
    "iso_week_key",
    "minutes_between",
    "slots_overlap",
]
