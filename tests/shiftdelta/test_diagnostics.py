from __future__ import annotations

from shiftdelta.diagnostics import (
    GroupDiscrepancy,
    compare_with_optimal,
    optimal_group_assignment,
)
from shiftdelta.grouping import process_shifts
from shiftdelta.models import RawShiftRow


def shifts(*times, emp="E1", date="2025-01-05"):
    rows = [
        RawShiftRow(emp, date, "Ana", "Lopez", "Main", start, end, "Server")
        for start, end in times
    ]
    return process_shifts(rows).shifts


def test_optimal_assignment_pairs_everything_it_can():
    scheduled = shifts(("3:00AM", "7:00AM"), ("8:00AM", "12:00PM"))
    worked = shifts(("7:00AM", "11:00AM"), ("11:30AM", "3:00PM"))
    assert optimal_group_assignment(scheduled, worked) == [(0, 0), (1, 1)]


def test_optimal_assignment_prefers_smaller_total_difference():
    scheduled = shifts(("8:00AM", "12:00PM"), ("2:00PM", "6:00PM"))
    worked = shifts(("8:05AM", "12:00PM"), ("2:10PM", "6:30PM"))
    assert optimal_group_assignment(scheduled, worked) == [(0, 0), (1, 1)]


def test_optimal_assignment_with_nothing_in_window():
    scheduled = shifts(("8:00AM", "9:00AM"))
    worked = shifts(("6:00PM", "9:00PM"))
    assert optimal_group_assignment(scheduled, worked) == []


def test_compare_with_optimal_flags_crossing_case():
    scheduled = shifts(("8:00AM", "12:00PM"), ("3:00AM", "7:00AM"))
    worked = shifts(("7:00AM", "11:00AM"), ("11:30AM", "3:00PM"))
    assert compare_with_optimal(scheduled, worked) == [
        GroupDiscrepancy(
            employee_id="E1",
            date="2025-01-05",
            greedy_pairs=1,
            optimal_pairs=2,
            greedy_total_diff=60,
            optimal_total_diff=450,
        )
    ]


def test_compare_with_optimal_is_quiet_when_greedy_is_optimal():
    scheduled = shifts(("8:00AM", "12:00PM"), ("2:00PM", "6:00PM"))
    worked = shifts(("8:05AM", "12:00PM"), ("2:10PM", "6:30PM"))
    other = shifts(("9:00AM", "5:00PM"), emp="E2")
    assert compare_with_optimal(scheduled + other, worked) == []
