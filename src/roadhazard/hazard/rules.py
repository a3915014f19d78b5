from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from roadhazard.hazard.config import HazardEngineConfig
from roadhazard.hazard.regions import SpatialClassifier, has_sustained_growth
from roadhazard.hazard.scoring import hazard_score, latency_compensated, severity_for
from roadhazard.tracking.base import MotionTrack
from roadhazard.tracking.motion import project, speed
from roadhazard.utils.types import Detection, HazardEvent, HazardSeverity, HazardType, VectorXY


logger = logging.getLogger("roadhazard.hazard.rules")


class AlertCooldowns:
    """Last-fired timestamps per alert key (``"<prefix>_<label>"``)."""

    def __init__(self, cooldown_s: float) -> None:
        self._cooldown_s = float(cooldown_s)
        self._last: Dict[str, float] = {}

    def is_cooling(self, key: str, now_s: float) -> bool:
        last = self._last.get(key)
        return last is not None and (float(now_s) - last) < self._cooldown_s

    def mark(self, key: str, now_s: float) -> None:
        self._last[key] = float(now_s)

    def last_fired(self, key: str) -> Optional[float]:
        return self._last.get(key)

    def clear(self) -> None:
        self._last.clear()


@dataclass(frozen=True)
class DetectionContext:
    det: Detection
    track: Optional[MotionTrack]
    velocity: Optional[VectorXY]
    growth_rate: float
    now_s: float


def alert_key(prefix: str, det: Detection) -> str:
    return f"{prefix}_{det.label.value}"


class HazardRules:
    def __init__(self, cfg: HazardEngineConfig, regions: SpatialClassifier, cooldowns: AlertCooldowns) -> None:
        self._cfg = cfg
        self._regions = regions
        self._cooldowns = cooldowns

    def _emit(
        self,
        key: str,
        ctx: DetectionContext,
        hazard_type: HazardType,
        severity: HazardSeverity,
        description: str,
        score: float,
    ) -> HazardEvent:
        self._cooldowns.mark(key, ctx.now_s)
        logger.info("HAZARD %s severity=%s score=%.3f key=%s t=%.3f", hazard_type.value, severity.name, score, key, ctx.now_s)
        return HazardEvent(
            type=hazard_type,
            severity=severity,
            timestamp_s=float(ctx.now_s),
            description=description,
            triggering_object=ctx.det,
            hazard_score=float(score),
            alert_key=key,
        )

    def check_pedestrian(self, ctx: DetectionContext) -> Optional[HazardEvent]:
        det = ctx.det
        if not det.label.is_vulnerable_road_user:
            return None
        key = alert_key("ped", det)
        if self._cooldowns.is_cooling(key, ctx.now_s):
            return None
        # pedestrian motion is too erratic for approach rate
        score = hazard_score(det, 0.0, True, self._cfg.scoring)
        return self._emit(
            key,
            ctx,
            HazardType.PEDESTRIAN_AHEAD,
            severity_for(score, False),
            f"{det.label.display_name} ahead",
            score,
        )

    def check_vehicle(self, ctx: DetectionContext) -> Optional[HazardEvent]:
        det = ctx.det
        vcfg = self._cfg.vehicle
        if not det.label.is_vehicle:
            return None
        key = alert_key("veh", det)
        if self._cooldowns.is_cooling(key, ctx.now_s):
            return None

        growth = ctx.growth_rate
        if growth < vcfg.receding_growth_threshold:
            return None
        if ctx.velocity is not None and ctx.velocity[1] < vcfg.receding_velocity_y_threshold:
            return None

        area = det.area
        if area < vcfg.vehicle_ahead_min_area:
            return None
        approaching = growth > vcfg.approach_growth_threshold
        if not (area > vcfg.close_area_threshold or (approaching and area > self._cfg.tracking.min_tracking_area * 3.0)):
            return None

        score = hazard_score(det, growth, False, self._cfg.scoring)
        if approaching:
            score = latency_compensated(score, area, growth, self._cfg.scoring)

        adjacent = self._regions.is_adjacent_lane(ctx.track)
        closing_fast = (
            growth > vcfg.rapid_growth_threshold
            and has_sustained_growth(growth, ctx.track, vcfg.sustained_growth_threshold)
            and not adjacent
        )
        severity = severity_for(score, closing_fast)
        if adjacent:
            severity = min(severity, HazardSeverity.LOW)

        name = det.label.display_name
        if closing_fast:
            return self._emit(key, ctx, HazardType.CLOSING_FAST, severity, f"{name} closing fast", score)
        return self._emit(key, ctx, HazardType.VEHICLE_AHEAD, severity, f"{name} ahead", score)

    def check_predictive_path(self, ctx: DetectionContext) -> Optional[HazardEvent]:
        det = ctx.det
        pcfg = self._cfg.prediction
        close_area = self._cfg.vehicle.close_area_threshold
        if not det.label.is_road_relevant:
            return None
        if not self._regions.is_near_forward_path(det):
            return None
        key = alert_key("pred", det)
        if self._cooldowns.is_cooling(key, ctx.now_s):
            return None
        if ctx.velocity is None or speed(ctx.velocity) < pcfg.min_speed:
            return None

        area = det.area
        if self._regions.is_in_forward_path(det) and area > close_area:
            return None

        area_boost = min(1.0 + area * pcfg.area_boost_gain, pcfg.max_area_boost)
        disp, predicted_center = project(det.center, ctx.velocity, pcfg.horizon_s, area_boost)
        predicted_area = area + ctx.growth_rate * pcfg.horizon_s

        if not self._regions.center_lane.contains(predicted_center):
            return None
        if not (predicted_area > area * pcfg.min_area_growth_ratio or disp[1] > pcfg.min_approach_dy):
            return None

        if predicted_area > close_area or disp[1] > pcfg.high_severity_dy:
            severity = HazardSeverity.HIGH
        else:
            severity = HazardSeverity.MEDIUM
        score = hazard_score(det, ctx.growth_rate, det.label.is_vulnerable_road_user, self._cfg.scoring)
        return self._emit(key, ctx, HazardType.FUTURE_PATH, severity, f"{det.label.display_name} entering path", score)
