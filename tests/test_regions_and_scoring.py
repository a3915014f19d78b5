import pytest

from roadhazard.hazard.config import HazardEngineConfig, RegionConfig, ScoringConfig
from roadhazard.hazard.regions import Region, SpatialClassifier, has_sustained_growth
from roadhazard.hazard.scoring import hazard_score, latency_compensated, severity_for
from roadhazard.tracking.base import MotionSample, MotionTrack
from roadhazard.utils.types import Detection, HazardSeverity, NormBox, ObjectLabel


def _det(cx: float, cy: float, area: float = 0.04, conf: float = 0.9, label: ObjectLabel = ObjectLabel.CAR) -> Detection:
    side = area ** 0.5
    return Detection(label=label, confidence=conf, bbox=NormBox.from_center(cx, cy, side, side))


def _track(xs, area: float = 0.05, dt: float = 0.2) -> MotionTrack:
    tr = MotionTrack(track_id=1, label=ObjectLabel.CAR)
    for i, x in enumerate(xs):
        tr.append(MotionSample(center=(x, 0.5), area=area, timestamp_s=i * dt))
    return tr


def test_region_bounds_are_inclusive_and_expandable() -> None:
    r = Region(0.1, 0.9, 0.1, 0.95)
    assert r.contains((0.1, 0.1))
    assert r.contains((0.9, 0.95))
    assert not r.contains((0.95, 0.5))
    near = r.expanded(0.12)
    assert near.contains((0.95, 0.5))
    assert near.contains((1.0, 1.0))
    assert not near.contains((1.05, 0.5))


def test_classifiers_are_pure_functions_of_position() -> None:
    sc = SpatialClassifier(RegionConfig())
    dets = [_det(0.5, 0.5), _det(0.2, 0.5), _det(0.95, 0.5), _det(0.5, 0.05), _det(1.1, 0.5)]
    first = [(sc.is_in_forward_path(d), sc.is_in_center_lane(d), sc.is_near_forward_path(d)) for d in dets]
    second = [(sc.is_in_forward_path(d), sc.is_in_center_lane(d), sc.is_near_forward_path(d)) for d in reversed(dets)]
    assert first == list(reversed(second))
    assert first == [
        (True, True, True),
        (True, False, True),
        (False, False, True),
        (False, False, True),
        (False, False, False),
    ]


def test_adjacent_lane_uses_mean_lateral_position() -> None:
    sc = SpatialClassifier(RegionConfig())
    assert not sc.is_adjacent_lane(None)
    assert sc.is_adjacent_lane(_track([0.15, 0.17, 0.2, 0.4]))
    assert not sc.is_adjacent_lane(_track([0.45, 0.5, 0.55]))


def test_center_lane_run_counts_back_through_history() -> None:
    sc = SpatialClassifier(RegionConfig())
    inside = _det(0.5, 0.5)
    assert sc.center_lane_run(inside, None) == 1
    assert not sc.has_sustained_presence(inside, None)
    assert sc.center_lane_run(inside, _track([0.5, 0.2, 0.5])) == 2
    assert sc.center_lane_run(inside, _track([0.2, 0.45, 0.5])) == 3
    assert sc.has_sustained_presence(inside, _track([0.5]))
    assert sc.center_lane_run(_det(0.2, 0.5), _track([0.5, 0.5])) == 0


def test_sustained_growth_needs_two_measurements() -> None:
    tr = MotionTrack(track_id=1, label=ObjectLabel.CAR)
    tr.append(MotionSample(center=(0.5, 0.5), area=0.05, timestamp_s=0.0))
    assert not has_sustained_growth(0.1, tr, 0.005)
    tr.append(MotionSample(center=(0.5, 0.5), area=0.07, timestamp_s=0.2))
    assert has_sustained_growth(0.1, tr, 0.005)
    assert not has_sustained_growth(0.004, tr, 0.005)
    tr.append(MotionSample(center=(0.5, 0.5), area=0.07, timestamp_s=0.4))
    assert not has_sustained_growth(0.1, tr, 0.005)


def test_severity_mapping() -> None:
    assert severity_for(0.8, False) == HazardSeverity.CRITICAL
    assert severity_for(0.6, False) == HazardSeverity.HIGH
    assert severity_for(0.4, False) == HazardSeverity.MEDIUM
    assert severity_for(0.1, False) == HazardSeverity.LOW
    assert severity_for(0.55, True) == HazardSeverity.CRITICAL
    assert severity_for(0.45, True) == HazardSeverity.MEDIUM
    assert HazardSeverity.LOW < HazardSeverity.MEDIUM < HazardSeverity.HIGH < HazardSeverity.CRITICAL


def test_hazard_score_components() -> None:
    cfg = ScoringConfig()
    det = _det(0.5, 0.5, area=0.04, conf=1.0)
    # area 0.4*0.4 + centrality 0.25
    assert abs(hazard_score(det, 0.0, False, cfg) - 0.41) < 1e-6
    assert abs(hazard_score(det, 0.0, True, cfg) - 0.56) < 1e-6
    assert abs(hazard_score(det, 0.02, False, cfg) - (0.41 + 0.175)) < 1e-6

    low_conf = _det(0.5, 0.5, area=0.04, conf=0.0)
    assert abs(hazard_score(low_conf, 0.0, False, cfg) - 0.41 * 0.7) < 1e-6


def test_hazard_score_is_bounded() -> None:
    cfg = ScoringConfig()
    for area in (0.0, 0.003, 0.05, 0.1, 0.5, 1.0):
        for conf in (0.0, 0.5, 1.0):
            for growth in (-100.0, -0.1, 0.0, 0.03, 1.0, 1e9):
                for vru in (False, True):
                    for cx in (0.0, 0.5, 1.0):
                        s = hazard_score(_det(cx, 0.5, area=area, conf=conf), growth, vru, cfg)
                        assert 0.0 <= s <= 1.0


def test_latency_compensation() -> None:
    cfg = ScoringConfig()
    # (0.1 + 0.01*0.7) / 0.1 = 1.07
    assert abs(latency_compensated(0.5, 0.1, 0.01, cfg) - (0.5 * 1.07 + 0.1)) < 1e-9
    # ratio capped at 1.5
    assert abs(latency_compensated(0.4, 0.05, 1.0, cfg) - (0.4 * 1.5 + 0.1)) < 1e-9
    assert latency_compensated(0.9, 0.05, 1.0, cfg) == 1.0
    assert latency_compensated(0.5, 0.1, 0.0, cfg) == 0.5


def test_config_from_dict_defaults_and_overrides() -> None:
    cfg = HazardEngineConfig.from_dict({})
    assert cfg.tracking.max_track_samples == 5
    assert cfg.tracking.max_track_age_s == 1.8
    assert cfg.regions.center_lane_x == (0.35, 0.65)
    assert cfg.alerts.cooldown_s == 4.0
    assert cfg.vehicle.close_area_threshold == 0.08

    cfg2 = HazardEngineConfig.from_dict({"alerts": {"cooldown_s": 2.5}, "regions": {"center_lane": {"x": [0.4, 0.6]}}})
    assert cfg2.alerts.cooldown_s == 2.5
    assert cfg2.regions.center_lane_x == (0.4, 0.6)
    assert cfg2.regions.center_lane_y == (0.1, 0.95)


def test_config_rejects_invalid_values() -> None:
    with pytest.raises(ValueError):
        HazardEngineConfig.from_dict({"alerts": {"cooldown_s": 0}})
    with pytest.raises(ValueError):
        HazardEngineConfig.from_dict({"regions": {"forward_path": {"x": [0.9, 0.1]}}})
    with pytest.raises(ValueError):
        HazardEngineConfig.from_dict({"tracking": {"max_track_samples": 1}})


def test_config_from_yaml(tmp_path) -> None:
    p = tmp_path / "engine.yaml"
    p.write_text("tracking:\n  max_match_distance: 0.2\nprediction:\n  horizon_s: 1.5\n", encoding="utf-8")
    cfg = HazardEngineConfig.from_yaml(str(p))
    assert cfg.tracking.max_match_distance == 0.2
    assert cfg.prediction.horizon_s == 1.5

    bad = tmp_path / "bad.yaml"
    bad.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        HazardEngineConfig.from_yaml(str(bad))
