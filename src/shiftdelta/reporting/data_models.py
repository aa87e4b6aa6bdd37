from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EmployeeSummary:
    """Per-employee tally over one import."""

    employee_id: str
    employee_name: str
    shifts: int
    matched: int
    no_shows: int
    unscheduled: int
    late_arrivals: int  # tardiness_minor + tardiness_major
    early_departures: int
    reductions: int  # stayed_late + arrived_early
    net_points: int  # sum of suggested points, reductions included


@dataclass(frozen=True)
class VarianceStats:
    """Distribution of start/end variances (minutes) across matched shifts."""

    matched: int
    start_mean: float
    start_median: float
    start_p95: float
    end_mean: float
    end_median: float
    end_p5: float
    on_time_rate: float  # share of matched shifts with start_variance <= 0
