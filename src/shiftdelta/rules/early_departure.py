from shiftdelta.models import DetectedEvent, ShiftDelta
from shiftdelta.rules.base import EventRule


class EarlyDepartureRule(EventRule):
    """Clocked out at least `early_departure_min` before the scheduled end."""

    order = 20
    name = "EarlyDeparture"

    def detect(self, delta: ShiftDelta) -> list[DetectedEvent]:
        if delta.end_variance is None:
            return []
        limit = self.setting("min_minutes", self.thresholds.early_departure_min)
        if delta.end_variance <= -limit:
            return [
                self.event(
                    "early_departure",
                    f"Left {round(abs(delta.end_variance))} min early",
                )
            ]
        return []
