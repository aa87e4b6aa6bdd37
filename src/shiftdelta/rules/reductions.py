from shiftdelta.models import DetectedEvent, ShiftDelta
from shiftdelta.rules.base import EventRule


class ArrivedEarlyRule(EventRule):
    """Reduction: clocked in at least `arrived_early_min` before the scheduled start."""

    order = 30
    name = "ArrivedEarly"

    def detect(self, delta: ShiftDelta) -> list[DetectedEvent]:
        if delta.start_variance is None:
            return []
        limit = self.setting("min_minutes", self.thresholds.arrived_early_min)
        if delta.start_variance <= -limit:
            return [
                self.event(
                    "arrived_early",
                    f"Arrived {round(abs(delta.start_variance))} min early",
                )
            ]
        return []


class StayedLateRule(EventRule):
    """Reduction: clocked out at least `stayed_late_min` after the scheduled end."""

    order = 40
    name = "StayedLate"

    def detect(self, delta: ShiftDelta) -> list[DetectedEvent]:
        if delta.end_variance is None:
            return []
        limit = self.setting("min_minutes", self.thresholds.stayed_late_min)
        if delta.end_variance >= limit:
            return [
                self.event("stayed_late", f"Stayed {round(delta.end_variance)} min late")
            ]
        return []
