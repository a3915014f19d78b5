from __future__ import annotations

from typing import Any, Dict

from roadhazard.detection.base import Detector
from roadhazard.detection.scripted import ReplayDetector, ScriptedDetector


def create_detector(backend: str, params: Dict[str, Any]) -> Detector:
    if backend == "scripted":
        return ScriptedDetector()

    if backend == "replay":
        path = params.get("path")
        if not path:
            raise ValueError("replay detector requires params.path")
        return ReplayDetector(path=str(path))

    if backend == "ultralytics_yolo":
        from roadhazard.detection.yolo_ultralytics import UltralyticsYoloDetector

        device = params.get("device")
        return UltralyticsYoloDetector(
            model_path=str(params["model_path"]),
            conf_threshold=float(params.get("conf_threshold", 0.25)),
            iou_threshold=float(params.get("iou_threshold", 0.5)),
            device=str(device) if device is not None else None,
            road_relevant_only=bool(params.get("road_relevant_only", True)),
        )

    raise ValueError(f"Unknown detector backend: {backend}")
