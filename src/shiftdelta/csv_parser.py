from __future__ import annotations

from shiftdelta.errors import CsvStructureError
from shiftdelta.models import RawShiftRow

REQUIRED_COLUMNS: tuple[str, ...] = (
    "employee id",
    "date",
    "first",
    "last",
    "in time",
    "out time",
)


def parse_csv_line(line: str) -> list[str]:
    """
    Split one CSV line on commas that are not inside double quotes.

    Quote characters only toggle the in-quotes state and are dropped; there is
    no escaped-quote handling because the vendor exports never emit one.
    """
    result: list[str] = []
    current: list[str] = []
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            result.append("".join(current))
            current = []
        else:
            current.append(char)
    result.append("".join(current))
    return result


def _clean(value: str) -> str:
    return value.replace('"', "").strip()


def _to_float(value: str) -> float:
    try:
        return float(value) if value else 0.0
    except ValueError:
        return 0.0


def parse_shifts_csv(csv_content: str) -> list[RawShiftRow]:
    """
    Parse a shifts export (scheduled or worked hours) into raw rows.

    Raises CsvStructureError when the file has no data rows or the header
    lacks a required column. Rows without an employee id, date, in time or
    out time are skipped; exports commonly end with blank trailer rows.
    """
    # line numbers are 1-based positions in the file as given, blank lines included
    lines = [
        (line_no, line.strip())
        for line_no, line in enumerate(csv_content.splitlines(), start=1)
        if line.strip()
    ]
    if len(lines) < 2:
        raise CsvStructureError("CSV file is empty or has no data rows")

    # a repeated header name resolves to its last column
    col_index: dict[str, int] = {}
    for idx, col in enumerate(parse_csv_line(lines[0][1])):
        col_index[_clean(col).lower()] = idx

    for col in REQUIRED_COLUMNS:
        if col not in col_index:
            raise CsvStructureError(f"Missing required column: {col}")

    def _get(cols: list[str], name: str) -> str:
        idx = col_index.get(name)
        if idx is None or idx >= len(cols):
            return ""
        return _clean(cols[idx])

    rows: list[RawShiftRow] = []
    for line_no, line in lines[1:]:
        cols = parse_csv_line(line)

        employee_id = _get(cols, "employee id")
        date = _get(cols, "date")
        in_time = _get(cols, "in time")
        out_time = _get(cols, "out time")
        if not employee_id or not date or not in_time or not out_time:
            continue

        rows.append(
            RawShiftRow(
                employee_id=employee_id,
                date=date,
                first_name=_get(cols, "first"),
                last_name=_get(cols, "last"),
                location=_get(cols, "location"),
                in_time=in_time,
                out_time=out_time,
                role=_get(cols, "role"),
                regular_hours=_to_float(_get(cols, "regular hours")),
                ot_hours=_to_float(_get(cols, "ot hours")),
                line_no=line_no,
            )
        )
    return rows
