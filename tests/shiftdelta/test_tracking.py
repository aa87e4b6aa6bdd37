from __future__ import annotations

from shiftdelta.config import TrackingRules
from shiftdelta.grouping import process_shifts
from shiftdelta.models import RawShiftRow
from shiftdelta.tracking import (
    filter_tracked,
    is_tracking_exempt,
    is_unscheduled_exempt,
    security_level,
    split_unscheduled,
)

RULES = TrackingRules()
LEVELS = {"owner": 0, "admin": 1, "manager": 2, "staff": 5}


def shifts_for(*employee_ids):
    rows = [
        RawShiftRow(emp, "2025-01-05", "A", "B", "Main", "9:00AM", "5:00PM", "Server")
        for emp in employee_ids
    ]
    return process_shifts(rows).shifts


def test_security_level_lookup():
    assert security_level("admin", LEVELS) == 1
    assert security_level("nobody", LEVELS) is None
    assert security_level("admin", None) is None
    assert security_level("admin", {}) is None


def test_unknown_employees_are_always_tracked():
    assert not is_tracking_exempt("nobody", RULES, LEVELS)
    assert not is_tracking_exempt("owner", RULES, None)


def test_exempt_levels():
    assert is_tracking_exempt("owner", RULES, LEVELS)
    assert is_tracking_exempt("admin", RULES, LEVELS)
    assert not is_tracking_exempt("manager", RULES, LEVELS)
    assert not is_tracking_exempt("staff", RULES, LEVELS)


def test_unscheduled_exemption():
    assert is_unscheduled_exempt("manager", RULES, LEVELS)
    assert not is_unscheduled_exempt("staff", RULES, LEVELS)
    assert not is_unscheduled_exempt("nobody", RULES, LEVELS)

    off = TrackingRules(track_unscheduled_shifts=False)
    assert is_unscheduled_exempt("staff", off, LEVELS)
    assert is_unscheduled_exempt("nobody", off, None)


def test_filter_tracked_counts_exempt():
    tracked, exempt = filter_tracked(
        shifts_for("owner", "staff", "nobody", "admin"), RULES, LEVELS
    )
    assert sorted(s.employee_id for s in tracked) == ["nobody", "staff"]
    assert exempt == 2


def test_split_unscheduled_counts_exempt():
    reported, exempt = split_unscheduled(
        shifts_for("manager", "staff"), RULES, LEVELS
    )
    assert [s.employee_id for s in reported] == ["staff"]
    assert exempt == 1


def test_custom_levels():
    rules = TrackingRules(exempt_security_levels=(5,), unscheduled_exempt_levels=())
    assert is_tracking_exempt("staff", rules, LEVELS)
    assert not is_tracking_exempt("owner", rules, LEVELS)
    assert not is_unscheduled_exempt("manager", rules, LEVELS)
