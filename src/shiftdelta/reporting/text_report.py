from __future__ import annotations

import io
from pathlib import Path
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import pandas as pd
from matplotlib.backends.backend_pdf import PdfPages

from shiftdelta.diagnostics import GroupDiscrepancy
from shiftdelta.result_types import DeltaResult
from shiftdelta.timeparse import format_time, format_variance

from .metrics import employee_summaries, event_counts, variance_stats

A4_PORTRAIT = (8.27, 11.69)
LINES_PER_PAGE = 90


class ReportDocument:
    """
    Collects printed report lines and figures, then writes them to one PDF:
    text pages first (split every LINES_PER_PAGE lines), then one page per
    figure.
    """

    def __init__(self, path: Path, title: str = "Attendance delta report") -> None:
        self.path = path
        self.title = title
        self.lines: list[str] = []
        self.figures: list[plt.Figure] = []

    def add_text(self, text: str) -> None:
        self.lines.extend(text.split("\n"))

    def add_figure(self, fig: plt.Figure) -> None:
        self.figures.append(fig)

    def _text_pages(self) -> list[list[str]]:
        if not self.lines:
            return [] if self.figures else [["No attendance data in this run."]]
        return [
            self.lines[i : i + LINES_PER_PAGE]
            for i in range(0, len(self.lines), LINES_PER_PAGE)
        ]

    def write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        pages = self._text_pages()
        with PdfPages(self.path) as pdf:
            for page_no, chunk in enumerate(pages, start=1):
                page, ax = plt.subplots(figsize=A4_PORTRAIT)
                ax.axis("off")
                heading = self.title
                if len(pages) > 1:
                    heading += f" ({page_no}/{len(pages)})"
                ax.set_title(heading, loc="left", fontsize=10)
                ax.text(
                    0.0,
                    1.0,
                    "\n".join(chunk),
                    ha="left",
                    va="top",
                    fontsize=7,
                    family="monospace",
                    transform=ax.transAxes,
                )
                pdf.savefig(page)
                plt.close(page)
            for fig in self.figures:
                pdf.savefig(fig, bbox_inches="tight")
                plt.close(fig)


_active: Optional[ReportDocument] = None


def set_active_report(doc: Optional[ReportDocument]) -> None:
    global _active
    _active = doc


def get_active_report() -> Optional[ReportDocument]:
    return _active


def _log_print(*args, **kwargs) -> None:
    """print(), also recorded in the active report when there is one."""
    print(*args, **kwargs)
    if _active is None:
        return
    buf = io.StringIO()
    print(*args, sep=kwargs.get("sep", " "), end="", file=buf)
    _active.add_text(buf.getvalue())


def _fmt_float(x: float | None, nd: int = 1, as_pct: bool = False) -> str:
    if x is None or pd.isna(x):
        return "nan"
    value = 100 * float(x) if as_pct else float(x)
    return f"{value:.{nd}f}%" if as_pct else f"{value:.{nd}f}"


def render_text_report(
    result: DeltaResult,
    *,
    num_print_examples: int = 6,
    discrepancies: Sequence[GroupDiscrepancy] | None = None,
) -> None:
    start, end = result.date_range
    _log_print(f"Attendance delta import: {start or '?'} to {end or '?'}")

    if result.errors:
        _log_print(f"\n⚠️ {len(result.errors)} error(s):")
        for msg in result.errors:
            _log_print(f"  - {msg}")
        if not result.deltas and result.scheduled_count == result.worked_count == 0:
            _log_print("No shifts were compared.")
            return

    _log_print(
        f"\nScheduled={result.scheduled_count:,} | worked={result.worked_count:,} | "
        f"matched={result.matched_count:,} | no-show={result.no_show_count:,} | "
        f"unscheduled={result.unscheduled_count:,}"
    )
    _log_print(
        f"Exempt shifts={result.exempt_count:,} | "
        f"clock-error rows filtered={result.filtered_count:,}"
    )

    counts = event_counts(result)
    if counts:
        _log_print("\nDetected events:")
        width = max(len(t) for t in counts)
        for event_type, n in counts.items():
            bar = "█" * min(n, 50)
            _log_print(f"  {event_type:<{width}} : {n:>4}  {bar}")
    else:
        _log_print("\nNo attendance events detected.")

    stats = variance_stats(result)
    if stats.matched:
        _log_print(
            "\nStart variance (min): "
            f"mean={_fmt_float(stats.start_mean)} | "
            f"median={_fmt_float(stats.start_median)} | "
            f"p95={_fmt_float(stats.start_p95)} | "
            f"on time={_fmt_float(stats.on_time_rate, as_pct=True)}"
        )
        _log_print(
            "End variance (min):   "
            f"mean={_fmt_float(stats.end_mean)} | "
            f"median={_fmt_float(stats.end_median)} | "
            f"p5={_fmt_float(stats.end_p5)}"
        )

    summaries = employee_summaries(result)
    flagged = [s for s in summaries if s.net_points > 0]
    if flagged:
        _log_print(
            "\nEmployees with the most suggested points "
            f"(top {num_print_examples}):"
        )
        df = pd.DataFrame([s.__dict__ for s in flagged[:num_print_examples]])
        _log_print(
            df[
                [
                    "employee_name",
                    "shifts",
                    "no_shows",
                    "late_arrivals",
                    "early_departures",
                    "reductions",
                    "net_points",
                ]
            ].to_string(index=False)
        )

    with_events = result.deltas_with_events()
    if with_events:
        _log_print(f"\nExample deltas (first {num_print_examples}):")
        for d in with_events[:num_print_examples]:
            if d.status == "matched":
                assert d.scheduled_in and d.worked_in
                timing = (
                    f"sched {format_time(d.scheduled_in)} / "
                    f"in {format_time(d.worked_in)} "
                    f"({format_variance(d.start_variance or 0)}, "
                    f"end {format_variance(d.end_variance or 0)})"
                )
            else:
                timing = d.status.replace("_", " ")
            descriptions = "; ".join(ev.description for ev in d.events)
            _log_print(f"  {d.date} {d.employee_name:<20} {timing} -> {descriptions}")

    if discrepancies:
        _log_print(
            "\nGroups where nearest-start matching differs from the optimal pairing:"
        )
        for g in discrepancies:
            _log_print(
                f"  - {g.employee_id} on {g.date}: greedy pairs={g.greedy_pairs} "
                f"(Σdiff={g.greedy_total_diff}m) vs optimal pairs={g.optimal_pairs} "
                f"(Σdiff={g.optimal_total_diff}m)"
            )
