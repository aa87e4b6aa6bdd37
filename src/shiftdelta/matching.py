"""
Time-proximity matching of worked shifts to scheduled shifts.

Within one employee/day group, worked shifts are taken in ascending start
order and each claims the unclaimed scheduled shift with the nearest start
time, provided the gap is within the match window. Unclaimed scheduled shifts
are no-shows; worked shifts that claim nothing are unscheduled work.

This is greedy nearest-neighbour matching, not a minimum-cost assignment: an
earlier worked shift may claim a scheduled shift that a later one needed,
leaving the later one unscheduled. Groups hold a handful of shifts, and the
processing order is fixed, so the result is deterministic. See
`shiftdelta.diagnostics` for a comparison against the optimal assignment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from shiftdelta.grouping import GroupKey, group_by_day
from shiftdelta.models import MatchedPair, ParsedShift
from shiftdelta.timeparse import minutes_between

DEFAULT_MATCH_WINDOW_MINUTES = 240


@dataclass
class MatchOutcome:
    pairs: list[MatchedPair] = field(default_factory=list)
    no_shows: list[ParsedShift] = field(default_factory=list)
    unscheduled: list[ParsedShift] = field(default_factory=list)

    def extend(self, other: "MatchOutcome") -> None:
        self.pairs.extend(other.pairs)
        self.no_shows.extend(other.no_shows)
        self.unscheduled.extend(other.unscheduled)


def match_group(
    scheduled: Sequence[ParsedShift],
    worked: Sequence[ParsedShift],
    window_minutes: int = DEFAULT_MATCH_WINDOW_MINUTES,
) -> MatchOutcome:
    """Match one employee/day group."""
    out = MatchOutcome()
    claimed = [False] * len(scheduled)

    for work in sorted(worked, key=lambda w: w.in_time):
        best_idx: int | None = None
        best_diff = 0
        for idx, sched in enumerate(scheduled):
            if claimed[idx]:
                continue
            diff = abs(minutes_between(sched.in_time, work.in_time))
            if diff > window_minutes:
                continue
            # strict < keeps the earlier scheduled shift on ties
            if best_idx is None or diff < best_diff:
                best_idx, best_diff = idx, diff

        if best_idx is None:
            out.unscheduled.append(work)
            continue
        claimed[best_idx] = True
        out.pairs.append(
            MatchedPair(
                scheduled=scheduled[best_idx],
                worked=work,
                start_time_diff=best_diff,
            )
        )

    out.no_shows.extend(s for s, taken in zip(scheduled, claimed) if not taken)
    return out


def match_shifts(
    scheduled: Sequence[ParsedShift],
    worked: Sequence[ParsedShift],
    window_minutes: int = DEFAULT_MATCH_WINDOW_MINUTES,
) -> MatchOutcome:
    """
    Match every employee/day group. Groups are visited in (date, employee id)
    order so repeated runs produce identical output.
    """
    sched_groups = group_by_day(scheduled)
    work_groups = group_by_day(worked)
    keys: list[GroupKey] = sorted(
        set(sched_groups) | set(work_groups), key=lambda k: (k[1], k[0])
    )

    outcome = MatchOutcome()
    for key in keys:
        group_sched = sorted(sched_groups.get(key, []), key=lambda s: s.in_time)
        outcome.extend(
            match_group(group_sched, work_groups.get(key, []), window_minutes)
        )
    return outcome
