from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol

import numpy as np

from roadhazard.utils.types import Detection


@dataclass(frozen=True)
class DetectorInput:
    frame_index: int
    timestamp_s: float
    image_bgr: Optional[np.ndarray] = None


class Detector(Protocol):
    def detect(self, inp: DetectorInput) -> List[Detection]:
        ...
