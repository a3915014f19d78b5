from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from roadhazard.detection.base import Detector, DetectorInput
from roadhazard.utils.types import Detection, NormBox, ObjectLabel


@dataclass
class UltralyticsYoloDetector(Detector):
    model_path: str
    conf_threshold: float = 0.25
    iou_threshold: float = 0.5
    device: Optional[str] = None
    road_relevant_only: bool = True

    def __post_init__(self) -> None:
        from ultralytics import YOLO

        self._model = YOLO(self.model_path)

    def detect(self, inp: DetectorInput) -> List[Detection]:
        if inp.image_bgr is None:
            return []
        frame_h, frame_w = inp.image_bgr.shape[:2]
        results = self._model.predict(
            source=inp.image_bgr,
            conf=self.conf_threshold,
            iou=self.iou_threshold,
            device=self.device,
            verbose=False,
        )
        if not results:
            return []
        r0 = results[0]
        names = r0.names if hasattr(r0, "names") else {}
        dets: List[Detection] = []
        boxes = getattr(r0, "boxes", None)
        if boxes is None:
            return dets
        xyxy = boxes.xyxy.cpu().numpy()
        conf = boxes.conf.cpu().numpy()
        cls = boxes.cls.cpu().numpy().astype(int)
        for (x1, y1, x2, y2), s, c in zip(xyxy, conf, cls):
            name = names.get(int(c))
            label = ObjectLabel.from_coco_name(name) if name is not None else ObjectLabel.from_coco_index(int(c))
            if self.road_relevant_only and not label.is_road_relevant:
                continue
            dets.append(
                Detection(
                    label=label,
                    confidence=float(s),
                    bbox=NormBox.from_xyxy_px(float(x1), float(y1), float(x2), float(y2), frame_w, frame_h),
                )
            )
        return dets
