from __future__ import annotations

import re
from datetime import datetime

from shiftdelta.errors import TimeFormatError

# "10:00AM ", " 3:00PM", "10:00 am" are all seen in exports
_TIME_RE = re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)", re.IGNORECASE)
_DATE_RE = re.compile(r"^\s*(\d{4})-(\d{2})-(\d{2})\s*$")


def parse_time(time_str: str, date_str: str) -> datetime:
    """
    Combine a 12-hour clock string and a YYYY-MM-DD date into a naive local
    datetime with zero seconds.

    12 AM maps to hour 0, 12 PM stays 12, other PM hours add 12.
    Raises TimeFormatError on anything that does not fit the pattern.
    """
    match = _TIME_RE.search(time_str.strip().upper())
    if not match:
        raise TimeFormatError(f"Invalid time format: {time_str}")

    hours = int(match.group(1))
    minutes = int(match.group(2))
    period = match.group(3).upper()
    if hours > 12 or minutes > 59:
        raise TimeFormatError(f"Invalid time format: {time_str}")

    if period == "PM" and hours != 12:
        hours += 12
    elif period == "AM" and hours == 12:
        hours = 0

    date_match = _DATE_RE.match(date_str)
    if not date_match:
        raise TimeFormatError(f"Invalid date format: {date_str}")
    year, month, day = (int(g) for g in date_match.groups())
    try:
        return datetime(year, month, day, hours, minutes, 0)
    except ValueError as exc:
        raise TimeFormatError(f"Invalid date format: {date_str}") from exc


def minutes_between(start: datetime, end: datetime) -> int:
    """Signed whole minutes from start to end."""
    return int((end - start).total_seconds() // 60)


def format_time(dt: datetime) -> str:
    """'9:00 AM' style clock label."""
    hour = dt.hour % 12 or 12
    period = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {period}"


def format_variance(minutes: float) -> str:
    """
    Render a variance for display: "+1h 5m", "-12m", or "On time".
    """
    abs_min = abs(round(minutes))
    hours, mins = divmod(abs_min, 60)
    text = f"{hours}h {mins}m" if hours > 0 else f"{mins}m"
    if minutes > 0 and abs_min:
        return f"+{text}"
    if minutes < 0 and abs_min:
        return f"-{text}"
    return "On time"
