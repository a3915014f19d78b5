from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from roadhazard.hazard.config import RegionConfig
from roadhazard.tracking.base import MotionTrack
from roadhazard.tracking.motion import previous_growth_rate
from roadhazard.utils.types import Detection, PointXY


@dataclass(frozen=True)
class Region:
    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def contains(self, p: PointXY) -> bool:
        return self.x_min <= p[0] <= self.x_max and self.y_min <= p[1] <= self.y_max

    def contains_x(self, x: float) -> bool:
        return self.x_min <= x <= self.x_max

    def expanded(self, margin: float) -> "Region":
        return Region(
            x_min=self.x_min - margin,
            x_max=self.x_max + margin,
            y_min=self.y_min - margin,
            y_max=self.y_max + margin,
        )


class SpatialClassifier:
    """Rectangle tests on detection centers in normalized frame coordinates."""

    def __init__(self, cfg: RegionConfig) -> None:
        self._cfg = cfg
        self.forward_path = Region(cfg.forward_path_x[0], cfg.forward_path_x[1], cfg.forward_path_y[0], cfg.forward_path_y[1])
        self.center_lane = Region(cfg.center_lane_x[0], cfg.center_lane_x[1], cfg.center_lane_y[0], cfg.center_lane_y[1])
        self.near_path = self.forward_path.expanded(cfg.near_path_margin)

    def is_in_forward_path(self, det: Detection) -> bool:
        return self.forward_path.contains(det.center)

    def is_in_center_lane(self, det: Detection) -> bool:
        return self.center_lane.contains(det.center)

    def is_near_forward_path(self, det: Detection) -> bool:
        return self.near_path.contains(det.center)

    def is_adjacent_lane(self, track: Optional[MotionTrack]) -> bool:
        if track is None:
            return False
        mean_x = track.mean_x()
        if mean_x is None:
            return False
        return not self.center_lane.contains_x(mean_x)

    def center_lane_run(self, det: Detection, track: Optional[MotionTrack]) -> int:
        if not self.is_in_center_lane(det):
            return 0
        run = 1
        if track is None:
            return run
        for s in reversed(track.samples):
            if not self.center_lane.contains(s.center):
                break
            run += 1
        return run

    def has_sustained_presence(self, det: Detection, track: Optional[MotionTrack]) -> bool:
        return self.center_lane_run(det, track) >= self._cfg.required_center_lane_frames


def has_sustained_growth(current_growth: float, track: Optional[MotionTrack], threshold: float) -> bool:
    if track is None or len(track.samples) < 2:
        return False
    return current_growth > threshold and previous_growth_rate(track) > threshold
