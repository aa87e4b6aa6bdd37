from __future__ import annotations

from typing import Sequence, Type

from shiftdelta.config import PointThresholds, PointValues
from shiftdelta.models import DetectedEvent, ParsedShift, ShiftDelta
from shiftdelta.rules.base import EventRule, RuleSpec
from shiftdelta.rules.registry import normalize_rule_specs
from shiftdelta.timeparse import format_time


def build_rules(
    thresholds: PointThresholds,
    points: PointValues,
    rules: Sequence[RuleSpec | Type[EventRule]] | None = None,
) -> list[EventRule]:
    """Instantiate enabled rules, sorted by their effective order."""
    instances: list[tuple[int, int, EventRule]] = []
    for pos, spec in enumerate(normalize_rule_specs(rules)):
        if not spec.enabled:
            continue
        rule = spec.cls(thresholds, points, **spec.settings)
        if not rule.enabled:
            continue
        order = spec.order if spec.order is not None else rule.order
        instances.append((order, pos, rule))
    instances.sort(key=lambda t: (t[0], t[1]))
    return [rule for _, _, rule in instances]


def run_rules(delta: ShiftDelta, rules: Sequence[EventRule]) -> list[DetectedEvent]:
    events: list[DetectedEvent] = []
    for rule in rules:
        events.extend(rule.detect(delta))
    return events


def detect_events(
    delta: ShiftDelta,
    thresholds: PointThresholds,
    points: PointValues | None = None,
    rules: Sequence[RuleSpec | Type[EventRule]] | None = None,
) -> list[DetectedEvent]:
    """
    Classify a matched delta against the thresholds. Each rule is evaluated
    on its own, so a late arrival and an early departure both fire.
    """
    return run_rules(delta, build_rules(thresholds, points or PointValues(), rules))


def no_show_event(shift: ParsedShift, points: PointValues) -> DetectedEvent:
    return DetectedEvent(
        type="no_call_no_show",
        description=(
            f"Scheduled {format_time(shift.in_time)} - "
            f"{format_time(shift.out_time)}, did not clock in"
        ),
        suggested_points=points.no_call_no_show,
        auto_detected=True,
    )


def unscheduled_event(shift: ParsedShift, points: PointValues) -> DetectedEvent:
    # informational, not a demerit by default
    return DetectedEvent(
        type="unscheduled_worked",
        description=(
            f"Worked {format_time(shift.in_time)} - "
            f"{format_time(shift.out_time)} without being scheduled"
        ),
        suggested_points=points.unscheduled_worked,
        auto_detected=True,
    )
