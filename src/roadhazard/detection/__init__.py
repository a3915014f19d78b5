from .base import Detector, DetectorInput
from .registry import create_detector
from .scripted import ReplayDetector, ScriptedDetector, detection_from_dict

__all__ = [
    "Detector",
    "DetectorInput",
    "ReplayDetector",
    "ScriptedDetector",
    "create_detector",
    "detection_from_dict",
]
