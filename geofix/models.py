import math
from dataclasses import asdict, dataclass
from enum import Enum


class AcquisitionState(Enum):
    IDLE = "idle"
    QUERYING = "querying"
    STOPPED_LOOPING = "stopped_looping"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Sample:
    latitude: float
    longitude: float
    accuracy: float
    timestamp: float
    altitude: float | None = None
    speed: float | None = None
    heading: float | None = None

    def age(self, now: float) -> float:
        return abs(now - self.timestamp)

    def is_better_than(self, other: "Sample | None") -> bool:
        if other is None:
            return True
        return self.accuracy < other.accuracy

    def __str__(self):
        accuracy = "?" if math.isinf(self.accuracy) else f"{self.accuracy:.1f}m"
        return f"Location ({round(self.latitude, 5)}, {round(self.longitude, 5)}) ±{accuracy}"

    def as_dict(self):
        return asdict(self)
