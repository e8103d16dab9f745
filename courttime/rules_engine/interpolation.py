"""
CourtTime Rules Engine — Failure Message Interpolation
=======================================================
Facility admins write failure templates with {key} placeholders that
are filled from the failing RuleResult's details.

    "Max {limit} bookings per week, you have {count}"
    + {"limit": 3, "count": 5}
    → "Max 3 bookings per week, you have 5"

Placeholders without a matching detail are left verbatim.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")


def interpolate_message(template: str, values: Mapping[str, Any]) -> str:
    def substitute(match: re.Match) -> str:
        key = match.group(1)
        if key in values and values[key] is not None:
            return str(values[key])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(substitute, template)
