# shiftdelta/errors.py
from __future__ import annotations

from typing import Optional


class DeltaEngineError(ValueError):
    """Base class for input problems detected by the delta engine."""


class CsvStructureError(DeltaEngineError):
    """The CSV export is empty or lacks a required header column."""


class TimeFormatError(DeltaEngineError):
    """A time (or date) cell does not match the vendor export format.

    `side` and `row` are filled in by the shift processor when known so that
    callers can point at the offending line of the offending file.
    """

    def __init__(
        self, message: str, *, side: Optional[str] = None, row: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.side = side
        self.row = row
