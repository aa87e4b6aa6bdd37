from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable, Optional

from shiftdelta.config import TrackingRules
from shiftdelta.models import ParsedShift

SecurityLevels = Mapping[str, int]


def security_level(employee_id: str, levels: Optional[SecurityLevels]) -> int | None:
    """Return the employee's level, or None when the map does not know them."""
    if not levels:
        return None
    return levels.get(employee_id)


def is_tracking_exempt(
    employee_id: str, rules: TrackingRules, levels: Optional[SecurityLevels]
) -> bool:
    level = security_level(employee_id, levels)
    # unknown employees are always tracked
    return level is not None and level in rules.exempt_security_levels


def is_unscheduled_exempt(
    employee_id: str, rules: TrackingRules, levels: Optional[SecurityLevels]
) -> bool:
    if not rules.track_unscheduled_shifts:
        return True
    level = security_level(employee_id, levels)
    return level is not None and level in rules.unscheduled_exempt_levels


def filter_tracked(
    shifts: Iterable[ParsedShift],
    rules: TrackingRules,
    levels: Optional[SecurityLevels],
) -> tuple[list[ParsedShift], int]:
    """Split off shifts of tracking-exempt employees. Returns (tracked, exempt_count)."""
    tracked: list[ParsedShift] = []
    exempt = 0
    for shift in shifts:
        if is_tracking_exempt(shift.employee_id, rules, levels):
            exempt += 1
        else:
            tracked.append(shift)
    return tracked, exempt


def split_unscheduled(
    shifts: Iterable[ParsedShift],
    rules: TrackingRules,
    levels: Optional[SecurityLevels],
) -> tuple[list[ParsedShift], int]:
    """Drop unscheduled shifts that are not reported. Returns (reported, exempt_count)."""
    reported: list[ParsedShift] = []
    exempt = 0
    for shift in shifts:
        if is_unscheduled_exempt(shift.employee_id, rules, levels):
            exempt += 1
        else:
            reported.append(shift)
    return reported, exempt
