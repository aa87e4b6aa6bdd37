from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Optional, TypeAlias

EventType: TypeAlias = Literal[
    "no_call_no_show",
    "tardiness_major",
    "tardiness_minor",
    "early_departure",
    "stayed_late",
    "arrived_early",
    "unscheduled_worked",
]

ShiftStatus: TypeAlias = Literal["matched", "no_show", "unscheduled"]


@dataclass(slots=True)
class RawShiftRow:
    """One data line of a shifts export, values still as text."""

    employee_id: str
    date: str  # "2025-01-05"
    first_name: str
    last_name: str
    location: str
    in_time: str  # "10:00AM " (exports pad inconsistently)
    out_time: str
    role: str
    regular_hours: float = 0.0
    ot_hours: float = 0.0
    line_no: int = 0  # 1-based line in the source file, blank lines counted


@dataclass(frozen=True, slots=True)
class ParsedShift:
    """
    A shift with resolved timestamps. Scheduled and worked shifts share this
    type; which side a shift came from is tracked by the collection it lives in.
    """

    employee_id: str
    employee_name: str
    date: str
    in_time: datetime
    out_time: datetime
    role: str
    location: str
    minutes: int
    match_key: str  # "0625-20250105-1" (employeeId-yyyyMMdd-sequence)
    sequence: int

    def __repr__(self) -> str:
        return (
            f"ParsedShift({self.match_key}, {self.employee_name!r}, "
            f"{self.in_time:%H:%M}-{self.out_time:%H:%M})"
        )


@dataclass(frozen=True, slots=True)
class MatchedPair:
    scheduled: ParsedShift
    worked: ParsedShift
    start_time_diff: int  # |worked.in_time - scheduled.in_time| in minutes


@dataclass(frozen=True, slots=True)
class DetectedEvent:
    type: EventType
    description: str
    suggested_points: int
    auto_detected: bool = True


@dataclass(frozen=True, slots=True)
class ShiftDelta:
    """
    One shift outcome. Side-specific fields are None when that side is absent;
    variances are None unless the delta is a matched pair.

    start_variance = worked in - scheduled in   (positive = late)
    end_variance   = worked out - scheduled out (positive = left later)
    """

    match_key: str
    employee_id: str
    employee_name: str
    date: str
    role: str
    status: ShiftStatus
    scheduled_in: Optional[datetime] = None
    scheduled_out: Optional[datetime] = None
    scheduled_minutes: Optional[int] = None
    worked_in: Optional[datetime] = None
    worked_out: Optional[datetime] = None
    worked_minutes: Optional[int] = None
    start_variance: Optional[int] = None
    end_variance: Optional[int] = None
    events: tuple[DetectedEvent, ...] = field(default_factory=tuple)

    @property
    def suggested_points(self) -> int:
        return sum(ev.suggested_points for ev in self.events)

    @property
    def first_timestamp(self) -> datetime:
        """Earliest known start for ordering deltas within one employee/day."""
        stamp = self.scheduled_in or self.worked_in
        assert stamp is not None, "a delta always carries at least one side"
        return stamp
