# shiftdelta/result_types.py
from __future__ import annotations

from dataclasses import dataclass, field

from shiftdelta.models import ShiftDelta


@dataclass
class DeltaResult:
    """Structured output of a delta run."""

    scheduled_count: int
    worked_count: int
    matched_count: int
    no_show_count: int
    unscheduled_count: int
    exempt_count: int
    filtered_count: int
    date_range: tuple[str, str]
    errors: list[str] = field(default_factory=list)
    deltas: list[ShiftDelta] = field(default_factory=list)

    @classmethod
    def empty(cls, errors: list[str] | None = None) -> "DeltaResult":
        return cls(
            scheduled_count=0,
            worked_count=0,
            matched_count=0,
            no_show_count=0,
            unscheduled_count=0,
            exempt_count=0,
            filtered_count=0,
            date_range=("", ""),
            errors=list(errors or []),
            deltas=[],
        )

    @property
    def ok(self) -> bool:
        return not self.errors

    def deltas_with_events(self) -> list[ShiftDelta]:
        return [d for d in self.deltas if d.events]
