from __future__ import annotations

from datetime import datetime

import pytest

from shiftdelta.errors import TimeFormatError
from shiftdelta.grouping import group_by_day, group_key, process_shifts
from shiftdelta.models import RawShiftRow


def raw(emp, date, in_time, out_time, line_no=2, first="Ana", last="Lopez"):
    return RawShiftRow(
        employee_id=emp,
        date=date,
        first_name=first,
        last_name=last,
        location="Main",
        in_time=in_time,
        out_time=out_time,
        role="Server",
        line_no=line_no,
    )


def test_process_shifts_resolves_times_and_minutes():
    out = process_shifts([raw("0625", "2025-01-05", "9:00AM", "5:00PM")])
    (shift,) = out.shifts
    assert shift.in_time == datetime(2025, 1, 5, 9, 0)
    assert shift.out_time == datetime(2025, 1, 5, 17, 0)
    assert shift.minutes == 480
    assert shift.employee_name == "Ana Lopez"
    assert shift.match_key == "0625-20250105-1"
    assert out.filtered == 0
    assert out.errors == []


def test_sequences_follow_start_time_within_a_day():
    out = process_shifts(
        [
            raw("E1", "2025-01-05", "2:00PM", "6:00PM", line_no=2),
            raw("E1", "2025-01-05", "8:00AM", "12:00PM", line_no=3),
            raw("E1", "2025-01-06", "8:00AM", "12:00PM", line_no=4),
        ]
    )
    keys = [s.match_key for s in out.shifts]
    assert keys == ["E1-20250105-1", "E1-20250105-2", "E1-20250106-1"]
    assert out.shifts[0].in_time.hour == 8


@pytest.mark.parametrize("out_time", ["9:00AM", "8:00AM"])
def test_clock_errors_are_filtered_and_counted(out_time):
    out = process_shifts(
        [
            raw("E1", "2025-01-05", "9:00AM", out_time),
            raw("E2", "2025-01-06", "9:00AM", "5:00PM"),
        ]
    )
    assert out.filtered == 1
    assert [s.employee_id for s in out.shifts] == ["E2"]
    # filtered rows still contribute to the overall date range
    assert sorted(out.dates) == ["2025-01-05", "2025-01-06"]


def test_overnight_shift_counts_as_clock_error():
    out = process_shifts([raw("E1", "2025-01-05", "10:00PM", "6:00AM")])
    assert out.shifts == []
    assert out.filtered == 1


def test_malformed_time_raises_with_side_and_row():
    rows = [
        raw("E1", "2025-01-05", "9:00AM", "5:00PM", line_no=2),
        raw("E2", "2025-01-05", "25:00XM", "5:00PM", line_no=7),
    ]
    with pytest.raises(TimeFormatError) as exc:
        process_shifts(rows, side="worked")
    assert exc.value.side == "worked"
    assert exc.value.row == 7
    assert exc.value.message == "Invalid time format: 25:00XM"


def test_malformed_time_is_collected_when_requested():
    rows = [
        raw("E1", "2025-01-05", "9:00AM", "5:00PM", line_no=2),
        raw("E2", "2025-01-06", "25:00XM", "5:00PM", line_no=7),
    ]
    out = process_shifts(rows, side="worked", row_errors="collect")
    assert out.errors == ["Error parsing worked CSV row 7: Invalid time format: 25:00XM"]
    assert [s.employee_id for s in out.shifts] == ["E1"]
    assert out.dates == ["2025-01-05"]


def test_employee_name_without_last_name():
    out = process_shifts([raw("E1", "2025-01-05", "9:00AM", "5:00PM", last="")])
    assert out.shifts[0].employee_name == "Ana"


def test_group_by_day_keeps_input_order():
    out = process_shifts(
        [
            raw("E1", "2025-01-05", "8:00AM", "12:00PM"),
            raw("E1", "2025-01-05", "2:00PM", "6:00PM"),
            raw("E2", "2025-01-05", "9:00AM", "5:00PM"),
        ]
    )
    groups = group_by_day(out.shifts)
    assert set(groups) == {("E1", "2025-01-05"), ("E2", "2025-01-05")}
    assert [s.sequence for s in groups[("E1", "2025-01-05")]] == [1, 2]
    assert group_key(out.shifts[-1]) == ("E2", "2025-01-05")
