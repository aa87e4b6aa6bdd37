from __future__ import annotations

from collections import Counter
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from shiftdelta.result_types import DeltaResult

from .metrics import EVENT_ORDER
from .text_report import get_active_report


def _save_and_show(fig: plt.Figure, filename: str, out_dir: Path) -> None:
    """Persist the plot under out_dir and show it."""
    out_dir.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_dir / filename, dpi=fig.dpi, bbox_inches="tight")
    plt.show()
    report = get_active_report()
    if report is not None:
        report.add_figure(fig)


def show_variance_histograms(
    result: DeltaResult,
    enable_plot: bool = True,
    out_dir: Path = Path("outputs"),
) -> None:
    """Side-by-side histograms of start and end variance over matched shifts."""
    if not enable_plot:
        return
    matched = [d for d in result.deltas if d.status == "matched"]
    if not matched:
        return

    start = np.array([d.start_variance for d in matched], dtype=float)
    end = np.array([d.end_variance for d in matched], dtype=float)

    fig, axes = plt.subplots(1, 2, figsize=(9, 3.5), dpi=150, sharey=True)
    for ax, values, title, color in (
        (axes[0], start, "Start variance (+ = late)", "#F59E0B"),
        (axes[1], end, "End variance (+ = stayed later)", "#3B82F6"),
    ):
        lo = min(float(values.min()), -5.0)
        hi = max(float(values.max()), 5.0)
        bins = np.linspace(lo, hi, num=min(30, max(5, len(values))))
        ax.hist(values, bins=bins, color=color, alpha=0.85, edgecolor="none")
        ax.axvline(0, color="0.3", linestyle="--", linewidth=0.8)
        ax.set_title(title, fontsize=10)
        ax.set_xlabel("Minutes")
        for spine in ("top", "right"):
            ax.spines[spine].set_visible(False)
    axes[0].set_ylabel("Matched shifts")
    fig.tight_layout()
    _save_and_show(fig, "variance_histograms.png", out_dir)


def show_events_by_date(
    result: DeltaResult,
    enable_plot: bool = True,
    out_dir: Path = Path("outputs"),
) -> None:
    """Stacked bar chart of detected events per date."""
    if not enable_plot:
        return
    per_date: dict[str, Counter[str]] = {}
    for d in result.deltas:
        for ev in d.events:
            per_date.setdefault(d.date, Counter())[ev.type] += 1
    if not per_date:
        return

    dates = sorted(per_date)
    types = [t for t in EVENT_ORDER if any(per_date[day][t] for day in dates)]
    cmap = plt.get_cmap("Set2")

    fig, ax = plt.subplots(figsize=(max(6.0, 0.5 * len(dates)), 4), dpi=150)
    bottom = np.zeros(len(dates))
    for i, event_type in enumerate(types):
        vals = np.array([per_date[day][event_type] for day in dates], dtype=float)
        ax.bar(
            dates,
            vals,
            bottom=bottom,
            label=event_type,
            color=cmap(i % cmap.N),
            width=0.8,
            edgecolor="none",
        )
        bottom += vals
    ax.set_ylabel("Events")
    ax.set_title("Detected events by date", fontsize=11)
    ax.tick_params(axis="x", labelrotation=45)
    for spine in ("top", "right"):
        ax.spines[spine].set_visible(False)
    ax.legend(frameon=False, fontsize=8)
    fig.tight_layout()
    _save_and_show(fig, "events_by_date.png", out_dir)
