from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pandas as pd

from shiftdelta.diagnostics import GroupDiscrepancy
from shiftdelta.result_types import DeltaResult

from .metrics import deltas_to_frame, employee_summaries
from .plots import show_events_by_date, show_variance_histograms
from .text_report import ReportDocument, render_text_report, set_active_report


class Reporter:
    """Renders the text report, plots and PDF for a finished delta run."""

    def __init__(
        self,
        out_dir: Path | str = Path("outputs"),
        num_print_examples: int = 6,
        enable_plots: bool = True,
    ) -> None:
        self.out_dir = Path(out_dir)
        self.num_print_examples = num_print_examples
        self.enable_plots = enable_plots

    def render_text_report(
        self,
        result: DeltaResult,
        discrepancies: Sequence[GroupDiscrepancy] | None = None,
    ) -> None:
        """Public entry point for callers that want text reporting only."""
        render_text_report(
            result,
            num_print_examples=self.num_print_examples,
            discrepancies=discrepancies,
        )

    def post_run(
        self,
        result: DeltaResult,
        discrepancies: Sequence[GroupDiscrepancy] | None = None,
    ) -> None:
        """Print the report and write it (with any plots) to out_dir/report.pdf."""
        report_doc = ReportDocument(self.out_dir / "report.pdf")
        set_active_report(report_doc)
        try:
            self.render_text_report(result, discrepancies)
            if not self.enable_plots or not result.deltas:
                return
            show_variance_histograms(result, out_dir=self.out_dir)
            show_events_by_date(result, out_dir=self.out_dir)
        finally:
            set_active_report(None)
            report_doc.write()


def export_deltas(result: DeltaResult, out_dir: Path | str) -> tuple[Path, Path]:
    """Write deltas.csv and employee_summary.csv; returns both paths."""
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    deltas_path = out / "deltas.csv"
    deltas_to_frame(result).to_csv(deltas_path, index=False)

    summary_path = out / "employee_summary.csv"
    summaries = employee_summaries(result)
    pd.DataFrame(
        [s.__dict__ for s in summaries],
        columns=[
            "employee_id",
            "employee_name",
            "shifts",
            "matched",
            "no_shows",
            "unscheduled",
            "late_arrivals",
            "early_departures",
            "reductions",
            "net_points",
        ],
    ).to_csv(summary_path, index=False)
    return deltas_path, summary_path
