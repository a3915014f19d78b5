from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from roadhazard.utils.config import load_yaml, parse_range


@dataclass(frozen=True)
class TrackingConfig:
    max_track_samples: int = 5
    max_track_age_s: float = 1.8
    max_match_distance: float = 0.3
    min_tracking_area: float = 0.003

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "TrackingConfig":
        cfg = TrackingConfig(
            max_track_samples=int(d.get("max_track_samples", 5)),
            max_track_age_s=float(d.get("max_track_age_s", 1.8)),
            max_match_distance=float(d.get("max_match_distance", 0.3)),
            min_tracking_area=float(d.get("min_tracking_area", 0.003)),
        )
        if cfg.max_track_samples < 2:
            raise ValueError("tracking.max_track_samples must be >= 2")
        if cfg.max_track_age_s <= 0.0:
            raise ValueError("tracking.max_track_age_s must be positive")
        if cfg.max_match_distance <= 0.0:
            raise ValueError("tracking.max_match_distance must be positive")
        return cfg


@dataclass(frozen=True)
class RegionConfig:
    forward_path_x: Tuple[float, float] = (0.1, 0.9)
    forward_path_y: Tuple[float, float] = (0.1, 0.95)
    center_lane_x: Tuple[float, float] = (0.35, 0.65)
    center_lane_y: Tuple[float, float] = (0.1, 0.95)
    near_path_margin: float = 0.12
    required_center_lane_frames: int = 2

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "RegionConfig":
        fp = d.get("forward_path", {}) or {}
        cl = d.get("center_lane", {}) or {}
        cfg = RegionConfig(
            forward_path_x=parse_range(fp.get("x"), (0.1, 0.9), "regions.forward_path.x"),
            forward_path_y=parse_range(fp.get("y"), (0.1, 0.95), "regions.forward_path.y"),
            center_lane_x=parse_range(cl.get("x"), (0.35, 0.65), "regions.center_lane.x"),
            center_lane_y=parse_range(cl.get("y"), (0.1, 0.95), "regions.center_lane.y"),
            near_path_margin=float(d.get("near_path_margin", 0.12)),
            required_center_lane_frames=int(d.get("required_center_lane_frames", 2)),
        )
        if cfg.near_path_margin < 0.0:
            raise ValueError("regions.near_path_margin must be non-negative")
        if cfg.required_center_lane_frames < 1:
            raise ValueError("regions.required_center_lane_frames must be >= 1")
        return cfg


@dataclass(frozen=True)
class ScoringConfig:
    area_weight: float = 0.4
    centrality_weight: float = 0.25
    growth_weight: float = 0.35
    vru_boost: float = 0.15
    large_area_threshold: float = 0.10
    critical_growth_threshold: float = 0.04
    confidence_floor: float = 0.7
    latency_compensation_s: float = 0.7
    max_latency_ratio: float = 1.5
    latency_bias: float = 0.1

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ScoringConfig":
        cfg = ScoringConfig(
            area_weight=float(d.get("area_weight", 0.4)),
            centrality_weight=float(d.get("centrality_weight", 0.25)),
            growth_weight=float(d.get("growth_weight", 0.35)),
            vru_boost=float(d.get("vru_boost", 0.15)),
            large_area_threshold=float(d.get("large_area_threshold", 0.10)),
            critical_growth_threshold=float(d.get("critical_growth_threshold", 0.04)),
            confidence_floor=float(d.get("confidence_floor", 0.7)),
            latency_compensation_s=float(d.get("latency_compensation_s", 0.7)),
            max_latency_ratio=float(d.get("max_latency_ratio", 1.5)),
            latency_bias=float(d.get("latency_bias", 0.1)),
        )
        if cfg.large_area_threshold <= 0.0 or cfg.critical_growth_threshold <= 0.0:
            raise ValueError("scoring thresholds must be positive")
        if not 0.0 <= cfg.confidence_floor <= 1.0:
            raise ValueError("scoring.confidence_floor must be within [0, 1]")
        return cfg


@dataclass(frozen=True)
class VehicleRuleConfig:
    vehicle_ahead_min_area: float = 0.06
    close_area_threshold: float = 0.08
    approach_growth_threshold: float = 0.005
    rapid_growth_threshold: float = 0.02
    sustained_growth_threshold: float = 0.005
    receding_growth_threshold: float = -0.005
    receding_velocity_y_threshold: float = -0.02

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "VehicleRuleConfig":
        return VehicleRuleConfig(
            vehicle_ahead_min_area=float(d.get("vehicle_ahead_min_area", 0.06)),
            close_area_threshold=float(d.get("close_area_threshold", 0.08)),
            approach_growth_threshold=float(d.get("approach_growth_threshold", 0.005)),
            rapid_growth_threshold=float(d.get("rapid_growth_threshold", 0.02)),
            sustained_growth_threshold=float(d.get("sustained_growth_threshold", 0.005)),
            receding_growth_threshold=float(d.get("receding_growth_threshold", -0.005)),
            receding_velocity_y_threshold=float(d.get("receding_velocity_y_threshold", -0.02)),
        )


@dataclass(frozen=True)
class PredictionConfig:
    horizon_s: float = 1.2
    min_speed: float = 0.04
    area_boost_gain: float = 6.0
    max_area_boost: float = 2.5
    min_area_growth_ratio: float = 1.02
    min_approach_dy: float = 0.01
    high_severity_dy: float = 0.08

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "PredictionConfig":
        cfg = PredictionConfig(
            horizon_s=float(d.get("horizon_s", 1.2)),
            min_speed=float(d.get("min_speed", 0.04)),
            area_boost_gain=float(d.get("area_boost_gain", 6.0)),
            max_area_boost=float(d.get("max_area_boost", 2.5)),
            min_area_growth_ratio=float(d.get("min_area_growth_ratio", 1.02)),
            min_approach_dy=float(d.get("min_approach_dy", 0.01)),
            high_severity_dy=float(d.get("high_severity_dy", 0.08)),
        )
        if cfg.horizon_s <= 0.0:
            raise ValueError("prediction.horizon_s must be positive")
        return cfg


@dataclass(frozen=True)
class AlertConfig:
    cooldown_s: float = 4.0

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "AlertConfig":
        cfg = AlertConfig(cooldown_s=float(d.get("cooldown_s", 4.0)))
        if cfg.cooldown_s <= 0.0:
            raise ValueError("alerts.cooldown_s must be positive")
        return cfg


@dataclass(frozen=True)
class OverlayConfig:
    motion_vector_min_area: float = 0.01

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "OverlayConfig":
        return OverlayConfig(motion_vector_min_area=float(d.get("motion_vector_min_area", 0.01)))


@dataclass(frozen=True)
class HazardEngineConfig:
    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    regions: RegionConfig = field(default_factory=RegionConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    vehicle: VehicleRuleConfig = field(default_factory=VehicleRuleConfig)
    prediction: PredictionConfig = field(default_factory=PredictionConfig)
    alerts: AlertConfig = field(default_factory=AlertConfig)
    overlay: OverlayConfig = field(default_factory=OverlayConfig)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "HazardEngineConfig":
        return HazardEngineConfig(
            tracking=TrackingConfig.from_dict(dict(d.get("tracking", {}) or {})),
            regions=RegionConfig.from_dict(dict(d.get("regions", {}) or {})),
            scoring=ScoringConfig.from_dict(dict(d.get("scoring", {}) or {})),
            vehicle=VehicleRuleConfig.from_dict(dict(d.get("vehicle", {}) or {})),
            prediction=PredictionConfig.from_dict(dict(d.get("prediction", {}) or {})),
            alerts=AlertConfig.from_dict(dict(d.get("alerts", {}) or {})),
            overlay=OverlayConfig.from_dict(dict(d.get("overlay", {}) or {})),
        )

    @staticmethod
    def from_yaml(path: str) -> "HazardEngineConfig":
        return HazardEngineConfig.from_dict(load_yaml(path))
