from roadhazard.tracking.base import MotionSample, MotionTrack
from roadhazard.tracking.motion import growth_rate, previous_growth_rate, weighted_velocity
from roadhazard.tracking.track_store import MotionTrackStore
from roadhazard.utils.types import Detection, NormBox, ObjectLabel


def _det(label: ObjectLabel, cx: float, cy: float, w: float = 0.2, h: float = 0.2, conf: float = 0.9) -> Detection:
    return Detection(label=label, confidence=conf, bbox=NormBox.from_center(cx, cy, w, h))


def _track(points, label: ObjectLabel = ObjectLabel.CAR) -> MotionTrack:
    tr = MotionTrack(track_id=1, label=label)
    for x, y, area, t in points:
        tr.append(MotionSample(center=(x, y), area=area, timestamp_s=t))
    return tr


def test_track_keeps_at_most_five_samples() -> None:
    tr = _track([(0.1 * i, 0.5, 0.01, float(i)) for i in range(7)])
    assert len(tr.samples) == 5
    assert tr.samples[0].timestamp_s == 2.0
    assert tr.last is not None and tr.last.timestamp_s == 6.0


def test_weighted_velocity_needs_two_samples() -> None:
    assert weighted_velocity(None) is None
    assert weighted_velocity(_track([(0.5, 0.5, 0.01, 0.0)])) is None


def test_weighted_velocity_constant_motion() -> None:
    tr = _track([(0.1, 0.5, 0.01, 0.0), (0.2, 0.5, 0.01, 1.0), (0.3, 0.5, 0.01, 2.0)])
    v = weighted_velocity(tr)
    assert v is not None
    assert abs(v[0] - 0.1) < 1e-9
    assert abs(v[1]) < 1e-9


def test_weighted_velocity_favours_recent_pairs() -> None:
    # pair 0 is still (weight 0.6), pair 1 moves at 1.0/s (weight 1.1)
    tr = _track([(0.0, 0.5, 0.01, 0.0), (0.0, 0.5, 0.01, 1.0), (1.0, 0.5, 0.01, 2.0)])
    v = weighted_velocity(tr)
    assert v is not None
    assert abs(v[0] - 1.1 / 1.7) < 1e-9


def test_weighted_velocity_skips_degenerate_time_steps() -> None:
    tr = _track([(0.2, 0.5, 0.01, 1.0), (0.4, 0.5, 0.01, 1.0)])
    assert weighted_velocity(tr) is None

    tr2 = _track([(0.2, 0.5, 0.01, 1.0), (0.4, 0.5, 0.01, 1.0), (0.5, 0.5, 0.01, 2.0)])
    v = weighted_velocity(tr2)
    assert v is not None
    assert abs(v[0] - 0.1) < 1e-9


def test_growth_rate_guards() -> None:
    det = _det(ObjectLabel.CAR, 0.5, 0.5, w=0.3, h=0.3)
    assert growth_rate(det, None, 1.0) == 0.0

    tr = _track([(0.5, 0.5, 0.05, 1.0)])
    assert growth_rate(det, tr, 1.0) == 0.0
    assert growth_rate(det, tr, 0.5) == 0.0
    assert abs(growth_rate(det, tr, 1.5) - (0.09 - 0.05) / 0.5) < 1e-9


def test_previous_growth_rate() -> None:
    assert previous_growth_rate(_track([(0.5, 0.5, 0.05, 0.0)])) == 0.0
    tr = _track([(0.5, 0.5, 0.05, 0.0), (0.5, 0.5, 0.07, 0.2)])
    assert abs(previous_growth_rate(tr) - 0.1) < 1e-9


def test_store_matches_nearest_same_label_track() -> None:
    store = MotionTrackStore()
    store.update(_det(ObjectLabel.CAR, 0.3, 0.5), None, 0.0)
    store.update(_det(ObjectLabel.CAR, 0.6, 0.5), None, 0.0)
    store.update(_det(ObjectLabel.PERSON, 0.55, 0.5), None, 0.0)
    assert len(store) == 3

    idx = store.match(_det(ObjectLabel.CAR, 0.5, 0.5))
    assert idx == 1
    assert store.match(_det(ObjectLabel.BUS, 0.5, 0.5)) is None
    assert store.match(_det(ObjectLabel.CAR, 0.95, 0.95)) is None


def test_store_update_appends_or_creates() -> None:
    store = MotionTrackStore()
    t1 = store.update(_det(ObjectLabel.CAR, 0.5, 0.5), None, 0.0)
    t2 = store.update(_det(ObjectLabel.CAR, 0.52, 0.5), 0, 0.1)
    assert t1 is t2
    assert len(t1.samples) == 2
    t3 = store.update(_det(ObjectLabel.CAR, 0.1, 0.1), None, 0.1)
    assert t3.track_id != t1.track_id
    assert len(store) == 2


def test_store_prunes_by_age() -> None:
    store = MotionTrackStore(max_age_s=1.8)
    store.update(_det(ObjectLabel.CAR, 0.5, 0.5), None, 0.0)
    store.update(_det(ObjectLabel.CAR, 0.2, 0.2), None, 1.0)
    assert store.prune(1.8) == 0
    assert store.prune(2.0) == 1
    assert len(store) == 1
    assert store.tracks[0].last is not None
    assert abs(store.tracks[0].last.center[0] - 0.2) < 1e-9


def test_store_reset() -> None:
    store = MotionTrackStore()
    store.update(_det(ObjectLabel.CAR, 0.5, 0.5), None, 0.0)
    store.reset()
    assert len(store) == 0
    assert store.get(0) is None
