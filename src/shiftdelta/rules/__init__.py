from .base import EventRule, RuleSpec
from .early_departure import EarlyDepartureRule
from .reductions import ArrivedEarlyRule, StayedLateRule
from .registry import default_rule_specs, normalize_rule_specs
from .tardiness import TardinessRule

__all__ = [
    "EventRule",
    "RuleSpec",
    "TardinessRule",
    "EarlyDepartureRule",
    "ArrivedEarlyRule",
    "StayedLateRule",
    "default_rule_specs",
    "normalize_rule_specs",
]
