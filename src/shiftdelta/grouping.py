from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Sequence, TypeAlias

from shiftdelta.config import RowErrorPolicy
from shiftdelta.errors import TimeFormatError
from shiftdelta.models import ParsedShift, RawShiftRow
from shiftdelta.timeparse import minutes_between, parse_time

GroupKey: TypeAlias = tuple[str, str]  # (employee_id, date)


@dataclass
class ProcessedShifts:
    """One side of the import after time parsing and clock-error filtering."""

    shifts: list[ParsedShift] = field(default_factory=list)
    filtered: int = 0  # rows with out time <= in time
    errors: list[str] = field(default_factory=list)
    dates: list[str] = field(default_factory=list)  # every parsed row, pre-filter


def group_key(shift: ParsedShift) -> GroupKey:
    return (shift.employee_id, shift.date)


def group_by_day(shifts: Iterable[ParsedShift]) -> dict[GroupKey, list[ParsedShift]]:
    """Group shifts by employee+date, preserving input order within a group."""
    groups: dict[GroupKey, list[ParsedShift]] = {}
    for shift in shifts:
        groups.setdefault(group_key(shift), []).append(shift)
    return groups


def process_shifts(
    rows: Sequence[RawShiftRow],
    *,
    side: str = "shifts",
    row_errors: RowErrorPolicy = "raise",
) -> ProcessedShifts:
    """
    Resolve timestamps, drop clock-error rows, sort, and number shifts per day.

    Sequence numbers only make match keys traceable; the matcher pairs shifts
    by start-time proximity and never looks at them.
    """
    out = ProcessedShifts()
    timed: list[tuple[RawShiftRow, datetime, datetime]] = []

    for row in rows:
        try:
            in_time = parse_time(row.in_time, row.date)
            out_time = parse_time(row.out_time, row.date)
        except TimeFormatError as exc:
            if row_errors == "raise":
                exc.side = side
                exc.row = row.line_no
                raise
            out.errors.append(
                f"Error parsing {side} CSV row {row.line_no}: {exc.message}"
            )
            continue

        out.dates.append(row.date)
        if minutes_between(in_time, out_time) <= 0:
            out.filtered += 1
            continue
        timed.append((row, in_time, out_time))

    timed.sort(key=lambda t: (t[0].date, t[0].employee_id, t[1]))

    seq_by_group: dict[GroupKey, int] = {}
    for row, in_time, out_time in timed:
        key = (row.employee_id, row.date)
        sequence = seq_by_group.get(key, 0) + 1
        seq_by_group[key] = sequence
        out.shifts.append(
            ParsedShift(
                employee_id=row.employee_id,
                employee_name=f"{row.first_name} {row.last_name}".strip(),
                date=row.date,
                in_time=in_time,
                out_time=out_time,
                role=row.role,
                location=row.location,
                minutes=minutes_between(in_time, out_time),
                match_key=f"{row.employee_id}-{row.date.replace('-', '')}-{sequence}",
                sequence=sequence,
            )
        )
    return out
