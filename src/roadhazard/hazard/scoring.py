from __future__ import annotations

import math

from roadhazard.hazard.config import ScoringConfig
from roadhazard.utils.types import Detection, HazardSeverity


def _clamp01(v: float) -> float:
    if v != v:
        return 0.0
    return max(0.0, min(1.0, float(v)))


def hazard_score(det: Detection, growth_rate: float, is_vulnerable: bool, cfg: ScoringConfig) -> float:
    """Additive hazard score in [0, 1].

    Sub-scores are summed rather than multiplied so that one strong factor,
    e.g. a very large box, is not cancelled out by a weak one.
    """
    area_score = min(1.0, det.area / cfg.large_area_threshold)
    cx, cy = det.center
    dist = math.hypot(cx - 0.5, cy - 0.5)
    centrality = max(0.0, 1.0 - 2.0 * dist)
    growth_score = _clamp01(growth_rate / cfg.critical_growth_threshold)

    raw = cfg.area_weight * area_score + cfg.centrality_weight * centrality + cfg.growth_weight * growth_score
    if is_vulnerable:
        raw += cfg.vru_boost
    raw = _clamp01(raw)

    confidence = _clamp01(det.confidence)
    factor = cfg.confidence_floor + (1.0 - cfg.confidence_floor) * confidence
    return _clamp01(raw * factor)


def latency_compensated(score: float, area: float, growth_rate: float, cfg: ScoringConfig) -> float:
    """Project the box area forward by the end-to-end alert latency and scale the score."""
    if area <= 0.0 or growth_rate <= 0.0:
        return _clamp01(score)
    projected = area + growth_rate * cfg.latency_compensation_s
    ratio = min(cfg.max_latency_ratio, projected / area)
    return _clamp01(min(1.0, score * ratio + cfg.latency_bias))


def severity_for(score: float, closing_fast: bool = False) -> HazardSeverity:
    if score >= 0.75 or (closing_fast and score >= 0.5):
        return HazardSeverity.CRITICAL
    if score >= 0.5:
        return HazardSeverity.HIGH
    if score >= 0.3:
        return HazardSeverity.MEDIUM
    return HazardSeverity.LOW
