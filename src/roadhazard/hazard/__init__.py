from .config import (
    AlertConfig,
    HazardEngineConfig,
    OverlayConfig,
    PredictionConfig,
    RegionConfig,
    ScoringConfig,
    TrackingConfig,
    VehicleRuleConfig,
)
from .engine import RoadHazardEngine
from .regions import Region, SpatialClassifier, has_sustained_growth
from .rules import AlertCooldowns, DetectionContext, HazardRules, alert_key
from .scoring import hazard_score, latency_compensated, severity_for

__all__ = [
    "AlertConfig",
    "AlertCooldowns",
    "DetectionContext",
    "HazardEngineConfig",
    "HazardRules",
    "OverlayConfig",
    "PredictionConfig",
    "Region",
    "RegionConfig",
    "RoadHazardEngine",
    "ScoringConfig",
    "SpatialClassifier",
    "TrackingConfig",
    "VehicleRuleConfig",
    "alert_key",
    "has_sustained_growth",
    "hazard_score",
    "latency_compensated",
    "severity_for",
]
