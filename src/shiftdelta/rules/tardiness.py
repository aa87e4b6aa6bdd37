from shiftdelta.models import DetectedEvent, ShiftDelta
from shiftdelta.rules.base import EventRule


class TardinessRule(EventRule):
    """
    Late arrival. Major and minor are exclusive; the major threshold is
    checked first.

    Settings (default to the run's PointThresholds):
      major_min, minor_min
    """

    order = 10
    name = "Tardiness"

    def detect(self, delta: ShiftDelta) -> list[DetectedEvent]:
        if delta.start_variance is None:
            return []
        late = delta.start_variance
        major = self.setting("major_min", self.thresholds.tardiness_major_min)
        minor = self.setting("minor_min", self.thresholds.tardiness_minor_min)
        if late >= major:
            return [self.event("tardiness_major", f"Arrived {round(late)} min late")]
        if late >= minor:
            return [self.event("tardiness_minor", f"Arrived {round(late)} min late")]
        return []
