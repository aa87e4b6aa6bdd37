from __future__ import annotations

import matplotlib
import pandas as pd

matplotlib.use("Agg", force=True)

from shiftdelta.engine import calculate_deltas
from shiftdelta.reporting.reporter import Reporter, export_deltas
from shiftdelta.result_types import DeltaResult

DAY = "2025-01-05"


def make_result(make_csv, shift_row):
    return calculate_deltas(
        make_csv(
            shift_row("E1", DAY, "9:00AM", "5:00PM"),
            shift_row("E2", DAY, "9:00AM", "5:00PM", first="Bo"),
        ),
        make_csv(
            shift_row("E1", DAY, "9:30AM", "5:00PM"),
            shift_row("E3", DAY, "9:00AM", "1:00PM", first="Cy"),
        ),
    )


def test_post_run_triggers_render_and_plots(monkeypatch, make_csv, shift_row):
    reporter = Reporter(enable_plots=True)
    calls = []
    monkeypatch.setattr(
        "shiftdelta.reporting.reporter.ReportDocument.write", lambda self: None
    )
    monkeypatch.setattr(
        "shiftdelta.reporting.reporter.render_text_report",
        lambda *a, **k: calls.append("render"),
    )
    monkeypatch.setattr(
        "shiftdelta.reporting.reporter.show_variance_histograms",
        lambda *a, **k: calls.append("variance"),
    )
    monkeypatch.setattr(
        "shiftdelta.reporting.reporter.show_events_by_date",
        lambda *a, **k: calls.append("events"),
    )

    reporter.post_run(make_result(make_csv, shift_row))
    assert calls == ["render", "variance", "events"]


def test_post_run_skips_plots_when_disabled(monkeypatch, make_csv, shift_row):
    reporter = Reporter(enable_plots=False)
    calls = []
    monkeypatch.setattr(
        "shiftdelta.reporting.reporter.ReportDocument.write", lambda self: None
    )
    monkeypatch.setattr(
        "shiftdelta.reporting.reporter.render_text_report",
        lambda *a, **k: calls.append("render"),
    )
    monkeypatch.setattr(
        "shiftdelta.reporting.reporter.show_variance_histograms",
        lambda *a, **k: calls.append("variance"),
    )
    reporter.post_run(make_result(make_csv, shift_row))
    assert calls == ["render"]


def test_post_run_writes_pdf_even_without_deltas(tmp_path, monkeypatch):
    monkeypatch.setattr(
        "shiftdelta.reporting.reporter.render_text_report", lambda *a, **k: None
    )
    Reporter(out_dir=tmp_path).post_run(DeltaResult.empty(["boom"]))
    assert (tmp_path / "report.pdf").exists()


def test_export_deltas(tmp_path, make_csv, shift_row):
    result = make_result(make_csv, shift_row)
    deltas_path, summary_path = export_deltas(result, tmp_path / "out")

    deltas = pd.read_csv(deltas_path, dtype={"employee_id": str})
    assert len(deltas) == len(result.deltas) == 3
    assert set(deltas["status"]) == {"matched", "no_show", "unscheduled"}

    summary = pd.read_csv(summary_path, dtype={"employee_id": str})
    assert list(summary["employee_id"]) == ["E2", "E1", "E3"]
    assert list(summary["net_points"]) == [6, 2, 0]
