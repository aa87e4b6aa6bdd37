# shiftdelta/diagnostics.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ortools.sat.python import cp_model

from shiftdelta.grouping import group_by_day
from shiftdelta.matching import DEFAULT_MATCH_WINDOW_MINUTES, match_group
from shiftdelta.models import ParsedShift
from shiftdelta.timeparse import minutes_between


@dataclass(frozen=True)
class GroupDiscrepancy:
    """An employee/day where greedy matching is worse than the optimal assignment."""

    employee_id: str
    date: str
    greedy_pairs: int
    optimal_pairs: int
    greedy_total_diff: int
    optimal_total_diff: int


def setup_solver(time_limit_sec: float = 5.0) -> cp_model.CpSolver:
    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = time_limit_sec
    solver.parameters.num_search_workers = 1
    solver.parameters.log_search_progress = False
    return solver


def optimal_group_assignment(
    scheduled: Sequence[ParsedShift],
    worked: Sequence[ParsedShift],
    window_minutes: int = DEFAULT_MATCH_WINDOW_MINUTES,
    time_limit_sec: float = 5.0,
) -> list[tuple[int, int]]:
    """
    Best one-to-one pairing for one employee/day group.

    Maximises the number of pairs, then minimises the summed start-time
    difference. Returns (worked_index, scheduled_index) tuples sorted by
    worked index.
    """
    m = cp_model.CpModel()
    x: dict[tuple[int, int], cp_model.IntVar] = {}
    cost: dict[tuple[int, int], int] = {}
    for i, work in enumerate(worked):
        for j, sched in enumerate(scheduled):
            diff = abs(minutes_between(sched.in_time, work.in_time))
            if diff <= window_minutes:
                x[(i, j)] = m.NewBoolVar(f"x_w{i}_s{j}")
                cost[(i, j)] = diff
    if not x:
        return []

    for i in range(len(worked)):
        m.AddAtMostOne([v for (wi, _), v in x.items() if wi == i])
    for j in range(len(scheduled)):
        m.AddAtMostOne([v for (_, sj), v in x.items() if sj == j])

    # one extra pair always outweighs any total difference
    pair_weight = window_minutes * min(len(worked), len(scheduled)) + 1
    m.Maximize(sum(pair_weight * v - cost[k] * v for k, v in x.items()))

    solver = setup_solver(time_limit_sec)
    status = solver.Solve(m)
    if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        return []
    return sorted(k for k, v in x.items() if solver.Value(v) == 1)


def compare_with_optimal(
    scheduled: Sequence[ParsedShift],
    worked: Sequence[ParsedShift],
    window_minutes: int = DEFAULT_MATCH_WINDOW_MINUTES,
) -> list[GroupDiscrepancy]:
    """
    List the groups where greedy matching pairs fewer shifts, or pairs them
    with a larger total start difference, than the optimal assignment.

    Engine output is unaffected; this only measures the greedy trade-off.
    """
    sched_groups = group_by_day(scheduled)
    work_groups = group_by_day(worked)
    keys = sorted(set(sched_groups) & set(work_groups), key=lambda k: (k[1], k[0]))

    found: list[GroupDiscrepancy] = []
    for key in keys:
        group_sched = sorted(sched_groups[key], key=lambda s: s.in_time)
        group_work = sorted(work_groups[key], key=lambda w: w.in_time)

        greedy = match_group(group_sched, group_work, window_minutes)
        greedy_diff = sum(p.start_time_diff for p in greedy.pairs)

        best = optimal_group_assignment(group_sched, group_work, window_minutes)
        best_diff = sum(
            abs(minutes_between(group_sched[j].in_time, group_work[i].in_time))
            for i, j in best
        )

        if len(greedy.pairs) < len(best) or (
            len(greedy.pairs) == len(best) and greedy_diff > best_diff
        ):
            found.append(
                GroupDiscrepancy(
                    employee_id=key[0],
                    date=key[1],
                    greedy_pairs=len(greedy.pairs),
                    optimal_pairs=len(best),
                    greedy_total_diff=greedy_diff,
                    optimal_total_diff=best_diff,
                )
            )
    return found
