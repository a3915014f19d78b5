from __future__ import annotations

import logging
import math
from typing import List, Optional

from roadhazard.tracking.base import MotionSample, MotionTrack
from roadhazard.utils.types import Detection


logger = logging.getLogger("roadhazard.tracking.store")


class MotionTrackStore:
    """Short-lived tracks re-associated every frame by label and proximity.

    The detector supplies no cross-frame identity, so each detection is matched
    greedily to the nearest same-label track. Tracks expire once their newest
    sample is older than ``max_age_s``.
    """

    def __init__(self, max_samples: int = 5, max_age_s: float = 1.8, max_match_distance: float = 0.3) -> None:
        self._max_samples = int(max_samples)
        self._max_age_s = float(max_age_s)
        self._max_match_distance = float(max_match_distance)
        self._next_id = 1
        self._tracks: List[MotionTrack] = []

    @property
    def tracks(self) -> List[MotionTrack]:
        return list(self._tracks)

    def __len__(self) -> int:
        return len(self._tracks)

    def get(self, index: Optional[int]) -> Optional[MotionTrack]:
        if index is None or index < 0 or index >= len(self._tracks):
            return None
        return self._tracks[index]

    def prune(self, now_s: float) -> int:
        alive: List[MotionTrack] = []
        for tr in self._tracks:
            last = tr.last
            if last is None or (float(now_s) - last.timestamp_s) > self._max_age_s:
                continue
            alive.append(tr)
        removed = len(self._tracks) - len(alive)
        self._tracks = alive
        if removed and logger.isEnabledFor(logging.DEBUG):
            logger.debug("pruned %d stale track(s), %d remain", removed, len(alive))
        return removed

    def match(self, det: Detection) -> Optional[int]:
        cx, cy = det.center
        best_index: Optional[int] = None
        best_dist = float("inf")
        for i, tr in enumerate(self._tracks):
            if tr.label != det.label:
                continue
            last = tr.last
            if last is None:
                continue
            dist = math.hypot(last.center[0] - cx, last.center[1] - cy)
            if dist < best_dist:
                best_dist = dist
                best_index = i
        if best_index is None or not best_dist < self._max_match_distance:
            return None
        return best_index

    def update(self, det: Detection, matched_index: Optional[int], now_s: float) -> MotionTrack:
        sample = MotionSample(center=det.center, area=det.area, timestamp_s=float(now_s))
        tr = self.get(matched_index)
        if tr is not None:
            tr.append(sample)
            return tr
        tr = MotionTrack(track_id=self._next_id, label=det.label, max_samples=self._max_samples)
        self._next_id += 1
        tr.append(sample)
        self._tracks.append(tr)
        return tr

    def reset(self) -> None:
        self._tracks = []
        self._next_id = 1
