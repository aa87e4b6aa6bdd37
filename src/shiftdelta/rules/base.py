# src/shiftdelta/rules/base.py
from __future__ import annotations

from abc import ABC
from dataclasses import dataclass, field
from typing import Any, Type

from shiftdelta.config import PointThresholds, PointValues
from shiftdelta.models import DetectedEvent, EventType, ShiftDelta


@dataclass
class RuleSpec:
    cls: Type["EventRule"]
    order: int | None = None
    enabled: bool = True
    settings: dict[str, Any] = field(default_factory=dict)


class EventRule(ABC):
    """
    One attendance check over a matched delta. Rules are independent: each
    sees the same delta and may emit zero or more events.
    """

    order: int = 100
    enabled: bool = True
    name: str = "EventRule"

    def __init__(
        self, thresholds: PointThresholds, points: PointValues, **settings: Any
    ) -> None:
        self.thresholds = thresholds
        self.points = points
        self._settings: dict[str, Any] = settings

    def detect(self, delta: ShiftDelta) -> list[DetectedEvent]:
        return []

    def event(self, event_type: EventType, description: str) -> DetectedEvent:
        return DetectedEvent(
            type=event_type,
            description=description,
            suggested_points=self.points.for_event(event_type),
            auto_detected=True,
        )

    # Helper for subclasses to read optional settings
    def setting(self, key: str, default: Any) -> Any:
        return self._settings.get(key, default)
