from __future__ import annotations

import math
from typing import List, Optional, Tuple

import numpy as np

from roadhazard.tracking.base import MotionSample, MotionTrack
from roadhazard.utils.types import Detection, VectorXY


def _pair_velocity(s0: MotionSample, s1: MotionSample) -> Optional[VectorXY]:
    dt = float(s1.timestamp_s - s0.timestamp_s)
    if dt <= 0.0:
        return None
    return ((s1.center[0] - s0.center[0]) / dt, (s1.center[1] - s0.center[1]) / dt)


def weighted_velocity(track: Optional[MotionTrack]) -> Optional[VectorXY]:
    """Recency-weighted mean velocity over consecutive sample pairs.

    Pair ``i`` of ``n`` gets weight ``0.6 + i / n`` so the newest motion counts
    roughly 1.6x and the oldest 0.6x. Pairs with non-positive dt are skipped.
    """
    if track is None or len(track.samples) < 2:
        return None
    samples = list(track.samples)
    total_pairs = len(samples) - 1
    velocities: List[VectorXY] = []
    weights: List[float] = []
    for i in range(total_pairs):
        v = _pair_velocity(samples[i], samples[i + 1])
        if v is None:
            continue
        velocities.append(v)
        weights.append(0.6 + float(i) / float(total_pairs))
    if not velocities or sum(weights) <= 0.0:
        return None
    avg = np.average(np.asarray(velocities, dtype=np.float64), axis=0, weights=np.asarray(weights, dtype=np.float64))
    return (float(avg[0]), float(avg[1]))


def speed(v: Optional[VectorXY]) -> float:
    if v is None:
        return 0.0
    return float(math.hypot(v[0], v[1]))


def growth_rate(det: Detection, track: Optional[MotionTrack], now_s: float) -> float:
    if track is None or track.last is None:
        return 0.0
    last = track.last
    dt = float(now_s - last.timestamp_s)
    if dt <= 0.0:
        return 0.0
    return float((det.area - last.area) / dt)


def previous_growth_rate(track: Optional[MotionTrack]) -> float:
    if track is None or len(track.samples) < 2:
        return 0.0
    s0, s1 = track.samples[-2], track.samples[-1]
    dt = float(s1.timestamp_s - s0.timestamp_s)
    if dt <= 0.0:
        return 0.0
    return float((s1.area - s0.area) / dt)


def project(center: Tuple[float, float], v: VectorXY, horizon_s: float, gain: float = 1.0) -> Tuple[VectorXY, Tuple[float, float]]:
    disp = (v[0] * horizon_s * gain, v[1] * horizon_s * gain)
    return disp, (center[0] + disp[0], center[1] + disp[1])
