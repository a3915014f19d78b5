from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from roadhazard.hazard.config import HazardEngineConfig
from roadhazard.hazard.regions import SpatialClassifier
from roadhazard.hazard.rules import AlertCooldowns, DetectionContext, HazardRules
from roadhazard.tracking.motion import growth_rate, speed, weighted_velocity
from roadhazard.tracking.track_store import MotionTrackStore
from roadhazard.utils.types import AnalysisResult, Detection, HazardEvent, VectorXY


logger = logging.getLogger("roadhazard.hazard.engine")


class RoadHazardEngine:
    """Per-frame road hazard analysis for a single video stream.

    Holds the motion tracks and alert cooldowns for one stream. Not thread
    safe: callers must serialize ``analyze`` and ``reset``.
    """

    def __init__(self, cfg: Optional[HazardEngineConfig] = None) -> None:
        self._cfg = cfg or HazardEngineConfig()
        tcfg = self._cfg.tracking
        self._store = MotionTrackStore(
            max_samples=tcfg.max_track_samples,
            max_age_s=tcfg.max_track_age_s,
            max_match_distance=tcfg.max_match_distance,
        )
        self._regions = SpatialClassifier(self._cfg.regions)
        self._cooldowns = AlertCooldowns(self._cfg.alerts.cooldown_s)
        self._rules = HazardRules(self._cfg, self._regions, self._cooldowns)
        self._last_analysis_time_s: Optional[float] = None

    @property
    def config(self) -> HazardEngineConfig:
        return self._cfg

    @property
    def track_store(self) -> MotionTrackStore:
        return self._store

    @property
    def regions(self) -> SpatialClassifier:
        return self._regions

    @property
    def cooldowns(self) -> AlertCooldowns:
        return self._cooldowns

    @property
    def last_analysis_time_s(self) -> Optional[float]:
        return self._last_analysis_time_s

    @property
    def is_fresh(self) -> bool:
        return self._last_analysis_time_s is None

    def analyze(self, detections: Sequence[Detection], timestamp_s: float) -> AnalysisResult:
        now = float(timestamp_s)
        events: List[HazardEvent] = []
        motion_vectors: Dict[str, VectorXY] = {}

        self._store.prune(now)
        if detections and logger.isEnabledFor(logging.DEBUG):
            logger.debug("analyzing %d detection(s) t=%.3f tracks=%d", len(detections), now, len(self._store))

        # matching sees only the tracks as they stood before this frame
        pending: List[Tuple[Detection, Optional[int]]] = []
        min_area = self._cfg.tracking.min_tracking_area
        for det in detections:
            if not det.area >= min_area:
                continue

            idx = self._store.match(det)
            track = self._store.get(idx)
            velocity = weighted_velocity(track)
            ctx = DetectionContext(det=det, track=track, velocity=velocity, growth_rate=growth_rate(det, track, now), now_s=now)

            ev = self._rules.check_predictive_path(ctx)
            if ev is not None:
                events.append(ev)

            if (
                velocity is not None
                and speed(velocity) >= self._cfg.prediction.min_speed
                and det.area >= self._cfg.overlay.motion_vector_min_area
            ):
                motion_vectors[det.det_id] = velocity

            if not self._regions.is_in_forward_path(det):
                pending.append((det, idx))
                continue

            if det.label.is_vulnerable_road_user:
                ev = self._rules.check_pedestrian(ctx)
            elif det.label.is_vehicle and self._regions.has_sustained_presence(det, track):
                ev = self._rules.check_vehicle(ctx)
            else:
                ev = None
            if ev is not None:
                events.append(ev)
            pending.append((det, idx))

        for det, idx in pending:
            self._store.update(det, idx, now)

        self._last_analysis_time_s = now
        if events:
            logger.debug("generated %d hazard event(s) t=%.3f", len(events), now)
        return AnalysisResult(events=events, motion_vectors=motion_vectors)

    def reset(self) -> None:
        self._store.reset()
        self._cooldowns.clear()
        self._last_analysis_time_s = None
        logger.info("hazard engine state reset")
