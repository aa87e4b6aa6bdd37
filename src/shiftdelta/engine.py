from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional, Sequence, Type

from shiftdelta.config import DEFAULT_CONFIG, DateRange, DeltaConfig
from shiftdelta.csv_parser import parse_shifts_csv
from shiftdelta.detection import (
    build_rules,
    no_show_event,
    run_rules,
    unscheduled_event,
)
from shiftdelta.errors import CsvStructureError
from shiftdelta.grouping import process_shifts
from shiftdelta.matching import match_shifts
from shiftdelta.models import MatchedPair, ParsedShift, RawShiftRow, ShiftDelta
from shiftdelta.result_types import DeltaResult
from shiftdelta.rules.base import EventRule, RuleSpec
from shiftdelta.timeparse import minutes_between
from shiftdelta.tracking import SecurityLevels, filter_tracked, split_unscheduled


@dataclass
class PreparedShifts:
    """Both sides after parsing, clock-error, date-range and tracking filters."""

    scheduled: list[ParsedShift] = field(default_factory=list)
    worked: list[ParsedShift] = field(default_factory=list)
    exempt: int = 0
    filtered: int = 0
    date_range: tuple[str, str] = ("", "")
    errors: list[str] = field(default_factory=list)
    structural_failure: bool = False


def prepare_shifts(
    scheduled_csv: str,
    worked_csv: str,
    config: DeltaConfig | None = None,
    *,
    date_range: DateRange | None = None,
    security_levels: Optional[SecurityLevels] = None,
) -> PreparedShifts:
    """
    Run every step that precedes matching.

    A structural CSV error on either side sets `structural_failure` and
    leaves the shift lists empty. Malformed times raise or are collected
    according to `config.row_errors`.
    """
    cfg_obj = config or DEFAULT_CONFIG
    out = PreparedShifts()

    scheduled_raw: list[RawShiftRow] = []
    worked_raw: list[RawShiftRow] = []
    try:
        scheduled_raw = parse_shifts_csv(scheduled_csv)
    except CsvStructureError as exc:
        out.errors.append(f"Error parsing scheduled CSV: {exc}")
    try:
        worked_raw = parse_shifts_csv(worked_csv)
    except CsvStructureError as exc:
        out.errors.append(f"Error parsing worked CSV: {exc}")
    if out.errors:
        out.structural_failure = True
        return out

    scheduled = process_shifts(
        scheduled_raw, side="scheduled", row_errors=cfg_obj.row_errors
    )
    worked = process_shifts(worked_raw, side="worked", row_errors=cfg_obj.row_errors)
    out.errors.extend(scheduled.errors)
    out.errors.extend(worked.errors)
    out.filtered = scheduled.filtered + worked.filtered

    all_dates = sorted(scheduled.dates + worked.dates)
    if all_dates:
        out.date_range = (all_dates[0], all_dates[-1])

    sched_shifts = scheduled.shifts
    work_shifts = worked.shifts
    if date_range is not None:
        sched_shifts = [s for s in sched_shifts if date_range.contains(s.date)]
        work_shifts = [w for w in work_shifts if date_range.contains(w.date)]

    out.scheduled, sched_exempt = filter_tracked(
        sched_shifts, cfg_obj.tracking, security_levels
    )
    out.worked, work_exempt = filter_tracked(
        work_shifts, cfg_obj.tracking, security_levels
    )
    out.exempt = sched_exempt + work_exempt
    return out


def calculate_deltas(
    scheduled_csv: str,
    worked_csv: str,
    config: DeltaConfig | None = None,
    *,
    date_range: DateRange | None = None,
    security_levels: Optional[SecurityLevels] = None,
    rules: Sequence[RuleSpec | Type[EventRule]] | None = None,
    validate_config: bool = True,
) -> DeltaResult:
    """
    Reconcile a scheduled-shifts export against a worked-shifts export.

    Parameters
    ----------
    scheduled_csv, worked_csv:
        Full CSV text of each export.
    config:
        Thresholds, tracking rules, point values, match window and row-error
        policy. Defaults to `shiftdelta.config.DEFAULT_CONFIG`.
    date_range:
        Optional inclusive filter applied to both sides before matching.
    security_levels:
        Optional employee id -> security level map. Employees missing from the
        map are always tracked.
    rules:
        Optional event rules (RuleSpec or EventRule subclasses). `None` uses
        the default tardiness, early-departure and reduction rules.
    validate_config:
        Toggle to run `DeltaConfig.validate()` (and `DateRange.validate()`).

    Returns
    -------
    DeltaResult
        Counts, overall date range, error messages and the sorted deltas. A
        structural CSV problem on either side yields an all-zero result whose
        `errors` explain why.

    Raises
    ------
    TimeFormatError
        A malformed in/out time when `config.row_errors == "raise"`.
    """
    cfg_obj = config or DEFAULT_CONFIG
    if validate_config:
        cfg_obj.validate()
        if date_range is not None:
            date_range.validate()

    prepared = prepare_shifts(
        scheduled_csv,
        worked_csv,
        cfg_obj,
        date_range=date_range,
        security_levels=security_levels,
    )
    if prepared.structural_failure:
        return DeltaResult.empty(prepared.errors)

    outcome = match_shifts(
        prepared.scheduled, prepared.worked, cfg_obj.match_window_minutes
    )
    reported_unscheduled, unscheduled_exempt = split_unscheduled(
        outcome.unscheduled, cfg_obj.tracking, security_levels
    )

    active_rules = build_rules(cfg_obj.thresholds, cfg_obj.points, rules)
    deltas: list[ShiftDelta] = []
    for pair in outcome.pairs:
        deltas.append(_matched_delta(pair, active_rules))
    for sched in outcome.no_shows:
        deltas.append(_no_show_delta(sched, cfg_obj))
    for work in reported_unscheduled:
        deltas.append(_unscheduled_delta(work, cfg_obj))

    deltas.sort(
        key=lambda d: (d.date, d.employee_name, d.employee_id, d.first_timestamp)
    )

    return DeltaResult(
        scheduled_count=len(prepared.scheduled),
        worked_count=len(prepared.worked) - unscheduled_exempt,
        matched_count=len(outcome.pairs),
        no_show_count=len(outcome.no_shows),
        unscheduled_count=len(reported_unscheduled),
        exempt_count=prepared.exempt + unscheduled_exempt,
        filtered_count=prepared.filtered,
        date_range=prepared.date_range,
        errors=list(prepared.errors),
        deltas=deltas,
    )


def _matched_delta(pair: MatchedPair, rules: Sequence[EventRule]) -> ShiftDelta:
    sched, work = pair.scheduled, pair.worked
    base = ShiftDelta(
        match_key=sched.match_key,
        employee_id=sched.employee_id,
        employee_name=sched.employee_name or work.employee_name,
        date=sched.date,
        role=sched.role or work.role,
        status="matched",
        scheduled_in=sched.in_time,
        scheduled_out=sched.out_time,
        scheduled_minutes=sched.minutes,
        worked_in=work.in_time,
        worked_out=work.out_time,
        worked_minutes=work.minutes,
        start_variance=minutes_between(sched.in_time, work.in_time),
        end_variance=minutes_between(sched.out_time, work.out_time),
    )
    return replace(base, events=tuple(run_rules(base, rules)))


def _no_show_delta(sched: ParsedShift, cfg: DeltaConfig) -> ShiftDelta:
    return ShiftDelta(
        match_key=sched.match_key,
        employee_id=sched.employee_id,
        employee_name=sched.employee_name,
        date=sched.date,
        role=sched.role,
        status="no_show",
        scheduled_in=sched.in_time,
        scheduled_out=sched.out_time,
        scheduled_minutes=sched.minutes,
        events=(no_show_event(sched, cfg.points),),
    )


def _unscheduled_delta(work: ParsedShift, cfg: DeltaConfig) -> ShiftDelta:
    return ShiftDelta(
        match_key=work.match_key,
        employee_id=work.employee_id,
        employee_name=work.employee_name,
        date=work.date,
        role=work.role,
        status="unscheduled",
        worked_in=work.in_time,
        worked_out=work.out_time,
        worked_minutes=work.minutes,
        events=(unscheduled_event(work, cfg.points),),
    )
