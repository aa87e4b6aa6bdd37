from __future__ import annotations

from .data_models import EmployeeSummary, VarianceStats
from .metrics import deltas_to_frame, employee_summaries, event_counts, variance_stats
from .reporter import Reporter, export_deltas

__all__ = [
    "Reporter",
    "export_deltas",
    "EmployeeSummary",
    "VarianceStats",
    "deltas_to_frame",
    "employee_summaries",
    "event_counts",
    "variance_stats",
]
