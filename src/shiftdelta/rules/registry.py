from __future__ import annotations

from typing import Any, Sequence, Tuple, Type

from shiftdelta.rules.base import EventRule, RuleSpec
from shiftdelta.rules.early_departure import EarlyDepartureRule
from shiftdelta.rules.reductions import ArrivedEarlyRule, StayedLateRule
from shiftdelta.rules.tardiness import TardinessRule

RuleTemplate = Tuple[Type[EventRule], int, dict[str, Any]]

TARDINESS_RULE_TEMPLATE: RuleTemplate = (TardinessRule, 10, {})
EARLY_DEPARTURE_RULE_TEMPLATE: RuleTemplate = (EarlyDepartureRule, 20, {})
ARRIVED_EARLY_RULE_TEMPLATE: RuleTemplate = (ArrivedEarlyRule, 30, {})
STAYED_LATE_RULE_TEMPLATE: RuleTemplate = (StayedLateRule, 40, {})

_DEFAULT_RULE_TEMPLATES: list[RuleTemplate] = [
    TARDINESS_RULE_TEMPLATE,
    EARLY_DEPARTURE_RULE_TEMPLATE,
    ARRIVED_EARLY_RULE_TEMPLATE,
    STAYED_LATE_RULE_TEMPLATE,
]


def default_rule_specs() -> list[RuleSpec]:
    """Return fresh copies of the default rule specifications."""
    return [
        RuleSpec(cls=cls, order=order, settings=dict(settings))
        for cls, order, settings in _DEFAULT_RULE_TEMPLATES
    ]


def normalize_rule_specs(
    rules: Sequence[RuleSpec | Type[EventRule]] | None,
) -> list[RuleSpec]:
    """Turn user-provided rules into RuleSpec objects."""
    if rules is None:
        return default_rule_specs()

    normalized: list[RuleSpec] = []
    for item in rules:
        if isinstance(item, RuleSpec):
            normalized.append(item)
        elif isinstance(item, type) and issubclass(item, EventRule):
            normalized.append(RuleSpec(cls=item))
        else:
            raise TypeError(
                "Rules must be RuleSpec instances or EventRule subclasses; "
                f"got {type(item)!r}"
            )
    return normalized
