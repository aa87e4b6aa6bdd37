from __future__ import annotations

from collections import Counter
from typing import Any, cast

import numpy as np
import pandas as pd

from shiftdelta.result_types import DeltaResult

from .data_models import EmployeeSummary, VarianceStats

EVENT_ORDER: tuple[str, ...] = (
    "no_call_no_show",
    "tardiness_major",
    "tardiness_minor",
    "early_departure",
    "unscheduled_worked",
    "arrived_early",
    "stayed_late",
)

DELTA_COLUMNS: list[str] = [
    "match_key",
    "employee_id",
    "employee_name",
    "date",
    "role",
    "status",
    "scheduled_in",
    "scheduled_out",
    "scheduled_minutes",
    "worked_in",
    "worked_out",
    "worked_minutes",
    "start_variance",
    "end_variance",
    "event_types",
    "suggested_points",
]


def deltas_to_frame(result: DeltaResult) -> pd.DataFrame:
    """One row per delta; event types joined with ';'."""
    rows: list[dict[str, Any]] = []
    for d in result.deltas:
        rows.append(
            {
                "match_key": d.match_key,
                "employee_id": d.employee_id,
                "employee_name": d.employee_name,
                "date": d.date,
                "role": d.role,
                "status": d.status,
                "scheduled_in": d.scheduled_in,
                "scheduled_out": d.scheduled_out,
                "scheduled_minutes": d.scheduled_minutes,
                "worked_in": d.worked_in,
                "worked_out": d.worked_out,
                "worked_minutes": d.worked_minutes,
                "start_variance": d.start_variance,
                "end_variance": d.end_variance,
                "event_types": ";".join(ev.type for ev in d.events),
                "suggested_points": d.suggested_points,
            }
        )
    if not rows:
        return pd.DataFrame(columns=DELTA_COLUMNS)

    df = pd.DataFrame(rows, columns=DELTA_COLUMNS)
    for col in (
        "scheduled_minutes",
        "worked_minutes",
        "start_variance",
        "end_variance",
    ):
        df[col] = pd.to_numeric(df[col], errors="coerce").astype("Int64")
    return df


def event_counts(result: DeltaResult) -> dict[str, int]:
    """Count detected events by type, in a fixed severity order."""
    counts = Counter(ev.type for d in result.deltas for ev in d.events)
    return {t: int(counts[t]) for t in EVENT_ORDER if counts.get(t)}


def employee_summaries(result: DeltaResult) -> list[EmployeeSummary]:
    """Per-employee tallies, worst net points first."""
    df = deltas_to_frame(result)
    if df.empty:
        return []

    types = df["event_types"].astype(str)
    df = df.assign(
        is_matched=(df["status"] == "matched").astype(int),
        is_no_show=(df["status"] == "no_show").astype(int),
        is_unscheduled=(df["status"] == "unscheduled").astype(int),
        late=types.str.count("tardiness_"),
        early=types.str.count("early_departure"),
        credit=types.str.count("stayed_late|arrived_early"),
    )
    agg = (
        df.groupby(["employee_id", "employee_name"], sort=True)
        .agg(
            shifts=("match_key", "size"),
            matched=("is_matched", "sum"),
            no_shows=("is_no_show", "sum"),
            unscheduled=("is_unscheduled", "sum"),
            late_arrivals=("late", "sum"),
            early_departures=("early", "sum"),
            reductions=("credit", "sum"),
            net_points=("suggested_points", "sum"),
        )
        .reset_index()
        .sort_values(["net_points", "employee_name"], ascending=[False, True])
    )
    out: list[EmployeeSummary] = []
    for rec in agg.to_dict(orient="records"):
        rec = cast(dict[str, Any], rec)
        out.append(
            EmployeeSummary(
                employee_id=str(rec["employee_id"]),
                employee_name=str(rec["employee_name"]),
                **{
                    k: int(rec[k])
                    for k in (
                        "shifts",
                        "matched",
                        "no_shows",
                        "unscheduled",
                        "late_arrivals",
                        "early_departures",
                        "reductions",
                        "net_points",
                    )
                },
            )
        )
    return out


def variance_stats(result: DeltaResult) -> VarianceStats:
    """Summary statistics over matched deltas. NaN fields when nothing matched."""
    matched = [d for d in result.deltas if d.status == "matched"]
    start = np.array([d.start_variance for d in matched], dtype=float)
    end = np.array([d.end_variance for d in matched], dtype=float)
    if start.size == 0:
        nan = float("nan")
        return VarianceStats(0, nan, nan, nan, nan, nan, nan, nan)

    return VarianceStats(
        matched=int(start.size),
        start_mean=float(np.mean(start)),
        start_median=float(np.median(start)),
        start_p95=float(np.percentile(start, 95.0)),
        end_mean=float(np.mean(end)),
        end_median=float(np.median(end)),
        end_p5=float(np.percentile(end, 5.0)),
        on_time_rate=float(np.mean(start <= 0)),
    )
