from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal, Optional, TypeAlias

RowErrorPolicy: TypeAlias = Literal["raise", "collect"]

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class PointThresholds:
    """Detection thresholds, all in minutes."""

    tardiness_minor_min: int = 5
    tardiness_major_min: int = 15
    early_departure_min: int = 30
    stayed_late_min: int = 60
    arrived_early_min: int = 30

    def validate(self) -> None:
        for attr in (
            "tardiness_minor_min",
            "tardiness_major_min",
            "early_departure_min",
            "stayed_late_min",
            "arrived_early_min",
        ):
            if getattr(self, attr) < 0:
                raise ValueError(f"{attr} must be non-negative.")
        if self.tardiness_minor_min > self.tardiness_major_min:
            raise ValueError("Require tardiness_minor_min <= tardiness_major_min.")


@dataclass(frozen=True)
class TrackingRules:
    """Which security levels are left out of attendance tracking."""

    # Levels removed from matching entirely (owners, admins by default)
    exempt_security_levels: tuple[int, ...] = (0, 1)

    # When False, no unscheduled work is ever reported
    track_unscheduled_shifts: bool = True

    # Levels whose unscheduled work is expected (managers clocking in ad hoc)
    unscheduled_exempt_levels: tuple[int, ...] = (0, 1, 2)

    def validate(self) -> None:
        for attr in ("exempt_security_levels", "unscheduled_exempt_levels"):
            for level in getattr(self, attr):
                if not isinstance(level, int) or isinstance(level, bool):
                    raise ValueError(f"{attr} must contain integers, got {level!r}.")


@dataclass(frozen=True)
class PointValues:
    """Suggested points per detected event (positive = penalty, negative = credit)."""

    no_call_no_show: int = 6
    tardiness_major: int = 2
    tardiness_minor: int = 1
    early_departure: int = 2
    unscheduled_worked: int = 0
    stayed_late: int = -1
    arrived_early: int = -1

    def validate(self) -> None:
        for attr in (
            "no_call_no_show",
            "tardiness_major",
            "tardiness_minor",
            "early_departure",
            "unscheduled_worked",
        ):
            if getattr(self, attr) < 0:
                raise ValueError(f"{attr} is a penalty and must be >= 0.")
        for attr in ("stayed_late", "arrived_early"):
            if getattr(self, attr) > 0:
                raise ValueError(f"{attr} is a reduction and must be <= 0.")

    def for_event(self, event_type: str) -> int:
        return int(getattr(self, event_type))


@dataclass(frozen=True)
class DateRange:
    """Inclusive YYYY-MM-DD window. ISO dates compare correctly as strings."""

    start: str
    end: str

    def validate(self) -> None:
        for attr in ("start", "end"):
            val = getattr(self, attr)
            if not isinstance(val, str) or not _ISO_DATE.match(val):
                raise ValueError(f"DateRange.{attr} must be YYYY-MM-DD, got {val!r}.")
        if self.start > self.end:
            raise ValueError("DateRange.start must not be after DateRange.end.")

    def contains(self, date: str) -> bool:
        return self.start <= date <= self.end


@dataclass(frozen=True)
class DeltaConfig:
    """Everything one delta run needs besides the two exports."""

    thresholds: PointThresholds = field(default_factory=PointThresholds)
    tracking: TrackingRules = field(default_factory=TrackingRules)
    points: PointValues = field(default_factory=PointValues)

    # Largest |worked start - scheduled start| that still counts as the same shift
    match_window_minutes: int = 240

    # "raise" aborts the run on a malformed time; "collect" skips the row and
    # reports it in DeltaResult.errors
    row_errors: RowErrorPolicy = "raise"

    def validate(self) -> None:
        """
        Validate every nested record before a run.
        """
        self.thresholds.validate()
        self.tracking.validate()
        self.points.validate()
        if self.match_window_minutes < 0:
            raise ValueError("match_window_minutes must be >= 0.")
        if self.row_errors not in ("raise", "collect"):
            raise ValueError("row_errors must be 'raise' or 'collect'.")


DEFAULT_CONFIG = DeltaConfig()


def _record(value: Any, name: str) -> Mapping[str, Any]:
    """A nested config record; null counts as absent."""
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"{name} must be a mapping, got {type(value).__name__}.")
    return value


def _get(record: Mapping[str, Any], key: str, default: Any) -> Any:
    # stored configs carry explicit nulls for unset fields
    value = record.get(key)
    return default if value is None else value


def _int(value: Any, key: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be an integer, got {value!r}.") from exc


def _levels(
    record: Mapping[str, Any], key: str, default: tuple[int, ...]
) -> tuple[int, ...]:
    value = _get(record, key, default)
    if isinstance(value, (str, bytes, Mapping)) or not hasattr(value, "__iter__"):
        raise ValueError(f"{key} must be a list of integers, got {value!r}.")
    return tuple(_int(v, key) for v in value)


def thresholds_from_config(config: Optional[Mapping[str, Any]]) -> PointThresholds:
    """Build PointThresholds from the snake_case `detection_thresholds` record."""
    record = _record(config, "detection_thresholds")
    defaults = PointThresholds()
    return PointThresholds(
        **{
            name: _int(_get(record, name, getattr(defaults, name)), name)
            for name in (
                "tardiness_minor_min",
                "tardiness_major_min",
                "early_departure_min",
                "stayed_late_min",
                "arrived_early_min",
            )
        }
    )


def tracking_rules_from_config(config: Optional[Mapping[str, Any]]) -> TrackingRules:
    """Build TrackingRules from the snake_case `tracking_rules` record."""
    record = _record(config, "tracking_rules")
    defaults = TrackingRules()
    return TrackingRules(
        exempt_security_levels=_levels(
            record, "exempt_security_levels", defaults.exempt_security_levels
        ),
        track_unscheduled_shifts=bool(
            _get(record, "track_unscheduled_shifts", defaults.track_unscheduled_shifts)
        ),
        unscheduled_exempt_levels=_levels(
            record, "unscheduled_exempt_levels", defaults.unscheduled_exempt_levels
        ),
    )


def point_values_from_config(
    point_values: Optional[Mapping[str, Any]] = None,
    reduction_values: Optional[Mapping[str, Any]] = None,
) -> PointValues:
    """
    Build PointValues from the `point_values` / `reduction_values` records.

    Reductions are keyed `stay_late` / `arrive_early` there; keys that do not
    correspond to an auto-detected event are ignored.
    """
    pv = _record(point_values, "point_values")
    rv = _record(reduction_values, "reduction_values")
    defaults = PointValues()
    penalties = {
        name: _int(_get(pv, name, getattr(defaults, name)), name)
        for name in (
            "no_call_no_show",
            "tardiness_major",
            "tardiness_minor",
            "early_departure",
            "unscheduled_worked",
        )
    }
    return PointValues(
        **penalties,
        stayed_late=_int(_get(rv, "stay_late", defaults.stayed_late), "stay_late"),
        arrived_early=_int(
            _get(rv, "arrive_early", defaults.arrived_early), "arrive_early"
        ),
    )


def config_from_mapping(data: Optional[Mapping[str, Any]]) -> DeltaConfig:
    """
    Build a DeltaConfig from a performance-config style mapping, e.g. loaded
    from JSON:

        {"detection_thresholds": {...}, "tracking_rules": {...},
         "point_values": {...}, "reduction_values": {...},
         "match_window_minutes": 240, "row_errors": "collect"}

    Null values fall back to the defaults. Raises ValueError when the
    mapping or one of its records has the wrong shape.
    """
    record = _record(data, "config")
    if not record:
        return DeltaConfig()
    return DeltaConfig(
        thresholds=thresholds_from_config(record.get("detection_thresholds")),
        tracking=tracking_rules_from_config(record.get("tracking_rules")),
        points=point_values_from_config(
            record.get("point_values"), record.get("reduction_values")
        ),
        match_window_minutes=_int(
            _get(record, "match_window_minutes", 240), "match_window_minutes"
        ),
        row_errors=_get(record, "row_errors", "raise"),
    )
