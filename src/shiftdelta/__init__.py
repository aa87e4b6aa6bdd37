from .config import (
    DEFAULT_CONFIG,
    DateRange,
    DeltaConfig,
    PointThresholds,
    PointValues,
    TrackingRules,
    config_from_mapping,
)
from .engine import calculate_deltas
from .errors import CsvStructureError, DeltaEngineError, TimeFormatError
from .main import run_deltas
from .models import DetectedEvent, ParsedShift, ShiftDelta
from .result_types import DeltaResult

__all__ = [
    "DEFAULT_CONFIG",
    "DateRange",
    "DeltaConfig",
    "PointThresholds",
    "PointValues",
    "TrackingRules",
    "config_from_mapping",
    "calculate_deltas",
    "run_deltas",
    "CsvStructureError",
    "DeltaEngineError",
    "TimeFormatError",
    "DetectedEvent",
    "ParsedShift",
    "ShiftDelta",
    "DeltaResult",
]
