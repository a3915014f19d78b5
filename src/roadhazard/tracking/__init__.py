from .base import MotionSample, MotionTrack
from .motion import growth_rate, previous_growth_rate, project, speed, weighted_velocity
from .track_store import MotionTrackStore

__all__ = [
    "MotionSample",
    "MotionTrack",
    "MotionTrackStore",
    "growth_rate",
    "previous_growth_rate",
    "project",
    "speed",
    "weighted_velocity",
]
