"""
Command-line entry point for reconciling two shift exports.

Usage:
    shiftdelta scheduled.csv worked.csv --start 2025-01-01 --end 2025-01-07
    python -m shiftdelta.main scheduled.csv worked.csv --row-errors collect
"""

from __future__ import annotations

import argparse
import json
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any, Optional, Sequence, Type

from shiftdelta.config import DateRange, DeltaConfig, config_from_mapping
from shiftdelta.diagnostics import GroupDiscrepancy, compare_with_optimal
from shiftdelta.engine import calculate_deltas, prepare_shifts
from shiftdelta.errors import TimeFormatError
from shiftdelta.reporting import Reporter, export_deltas
from shiftdelta.result_types import DeltaResult
from shiftdelta.rules.base import EventRule, RuleSpec
from shiftdelta.tracking import SecurityLevels


def run_deltas(
    scheduled_csv: str,
    worked_csv: str,
    config: DeltaConfig | None = None,
    *,
    date_range: DateRange | None = None,
    security_levels: Optional[SecurityLevels] = None,
    rules: Sequence[RuleSpec | Type[EventRule]] | None = None,
    reporter: Reporter | None = None,
    enable_reporting: bool = True,
    compare_optimal: bool = False,
    export_dir: Path | None = None,
) -> DeltaResult:
    """
    Calculate deltas, then optionally report on and export them.

    Parameters
    ----------
    scheduled_csv, worked_csv, config, date_range, security_levels, rules:
        Passed straight to `shiftdelta.engine.calculate_deltas`.
    reporter:
        Custom reporter instance. Defaults to `Reporter()` when reporting is on.
    enable_reporting:
        When False, nothing is printed and no PDF or plots are written.
    compare_optimal:
        Also solve each employee/day group with CP-SAT and list the groups
        where greedy matching falls short of the optimal pairing.
    export_dir:
        When given, write deltas.csv and employee_summary.csv there.

    Returns
    -------
    DeltaResult
        The engine result, unchanged by reporting.
    """
    result = calculate_deltas(
        scheduled_csv,
        worked_csv,
        config,
        date_range=date_range,
        security_levels=security_levels,
        rules=rules,
    )

    discrepancies: list[GroupDiscrepancy] = []
    if compare_optimal and result.deltas:
        prepared = prepare_shifts(
            scheduled_csv,
            worked_csv,
            config,
            date_range=date_range,
            security_levels=security_levels,
        )
        window = (config or DeltaConfig()).match_window_minutes
        discrepancies = compare_with_optimal(
            prepared.scheduled, prepared.worked, window
        )

    if enable_reporting:
        active_reporter = reporter or Reporter()
        active_reporter.post_run(result, discrepancies)

    if export_dir is not None:
        export_deltas(result, export_dir)

    return result


def _load_json_object(path: str | None, flag: str) -> Mapping[str, Any] | None:
    """Read a JSON file that must hold an object; null counts as absent."""
    if path is None:
        return None
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if data is None:
        return None
    if not isinstance(data, Mapping):
        raise ValueError(
            f"{flag} must be a JSON object, got {type(data).__name__} in {path}"
        )
    return data


def _security_levels(raw: Mapping[str, Any] | None) -> dict[str, int]:
    levels: dict[str, int] = {}
    for emp, level in (raw or {}).items():
        if isinstance(level, bool) or not isinstance(level, int):
            raise ValueError(
                f"--levels: security level for {emp!r} must be an integer, "
                f"got {level!r}"
            )
        levels[str(emp)] = level
    return levels


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compare scheduled shifts against worked shifts."
    )
    parser.add_argument("scheduled", help="Scheduled-shifts CSV export.")
    parser.add_argument("worked", help="Worked-hours CSV export.")
    parser.add_argument("--start", help="First date to include (YYYY-MM-DD).")
    parser.add_argument("--end", help="Last date to include (YYYY-MM-DD).")
    parser.add_argument(
        "--levels",
        help="JSON object mapping employee id to security level.",
    )
    parser.add_argument(
        "--config",
        help="JSON file with detection_thresholds, tracking_rules, point_values, "
        "reduction_values, match_window_minutes and row_errors.",
    )
    parser.add_argument(
        "--row-errors",
        choices=["raise", "collect"],
        help="Override how malformed time cells are handled.",
    )
    parser.add_argument(
        "--out-dir",
        default="outputs",
        help="Directory for the PDF report and plots (default: outputs).",
    )
    parser.add_argument(
        "--export-dir", help="Write deltas.csv and employee_summary.csv here."
    )
    parser.add_argument(
        "--compare-optimal",
        action="store_true",
        help="List employee/days where greedy matching is not optimal.",
    )
    parser.add_argument("--no-plots", action="store_true", help="Skip plots.")
    parser.add_argument(
        "--no-report", action="store_true", help="Skip the text and PDF report."
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)

    if (args.start is None) != (args.end is None):
        print("Both --start and --end are required to filter by date.")
        return 2

    try:
        config = config_from_mapping(_load_json_object(args.config, "--config"))
        if args.row_errors is not None:
            config = replace(config, row_errors=args.row_errors)
        levels = _security_levels(_load_json_object(args.levels, "--levels"))
        date_range = DateRange(args.start, args.end) if args.start else None

        scheduled_csv = Path(args.scheduled).read_text(encoding="utf-8-sig")
        worked_csv = Path(args.worked).read_text(encoding="utf-8-sig")

        result = run_deltas(
            scheduled_csv,
            worked_csv,
            config,
            date_range=date_range,
            security_levels=levels,
            reporter=Reporter(args.out_dir, enable_plots=not args.no_plots),
            enable_reporting=not args.no_report,
            compare_optimal=args.compare_optimal,
            export_dir=Path(args.export_dir) if args.export_dir else None,
        )
    except TimeFormatError as exc:
        where = f"{exc.side} CSV row {exc.row}: " if exc.side else ""
        print(f"Error parsing {where}{exc.message}")
        return 1
    except (ValueError, OSError) as exc:
        print(f"Error: {exc}")
        return 1

    return 0 if result.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
