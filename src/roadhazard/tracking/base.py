from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional

from roadhazard.utils.types import ObjectLabel, PointXY


@dataclass(frozen=True)
class MotionSample:
    center: PointXY
    area: float
    timestamp_s: float


@dataclass
class MotionTrack:
    track_id: int
    label: ObjectLabel
    max_samples: int = 5
    samples: Deque[MotionSample] = field(default_factory=deque)

    def __post_init__(self) -> None:
        self.samples = deque(self.samples, maxlen=max(2, int(self.max_samples)))

    @property
    def last(self) -> Optional[MotionSample]:
        if not self.samples:
            return None
        return self.samples[-1]

    def append(self, sample: MotionSample) -> None:
        self.samples.append(sample)

    def mean_x(self) -> Optional[float]:
        if not self.samples:
            return None
        return sum(s.center[0] for s in self.samples) / len(self.samples)
