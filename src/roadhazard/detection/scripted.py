from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Tuple

from roadhazard.detection.base import Detector, DetectorInput
from roadhazard.utils.types import Detection, NormBox, ObjectLabel


logger = logging.getLogger("roadhazard.detection.scripted")


def detection_from_dict(d: Dict[str, Any]) -> Detection:
    bbox = d.get("bbox")
    if not isinstance(bbox, (list, tuple)) or len(bbox) != 4:
        raise ValueError("detection.bbox must be [x, y, width, height]")
    return Detection(
        label=ObjectLabel.from_coco_name(str(d.get("label", "unknown"))),
        confidence=float(d.get("confidence", 1.0)),
        bbox=NormBox(x=float(bbox[0]), y=float(bbox[1]), width=float(bbox[2]), height=float(bbox[3])),
    )


@dataclass
class ScriptedDetector(Detector):
    """Returns pre-recorded detections for each frame index, empty once exhausted."""

    frames: Sequence[List[Detection]] = field(default_factory=list)

    def detect(self, inp: DetectorInput) -> List[Detection]:
        if 0 <= inp.frame_index < len(self.frames):
            return list(self.frames[inp.frame_index])
        return []


@dataclass
class ReplayDetector(Detector):
    """Detections read from a JSONL log, one frame per line.

    Each line holds ``{"frame_index": int, "timestamp_s": float, "detections":
    [{"label": str, "confidence": float, "bbox": [x, y, w, h]}, ...]}``.
    """

    path: str

    def __post_init__(self) -> None:
        self._by_frame: Dict[int, List[Detection]] = {}
        self._timestamps: Dict[int, float] = {}
        with open(self.path, "r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    obj = json.loads(line)
                except json.JSONDecodeError as e:
                    raise ValueError(f"{self.path}:{line_no}: invalid JSON") from e
                fi = int(obj.get("frame_index", len(self._by_frame)))
                self._by_frame[fi] = [detection_from_dict(d) for d in obj.get("detections", []) or []]
                self._timestamps[fi] = float(obj.get("timestamp_s", 0.0))
        logger.info("loaded %d frame(s) of detections from %s", len(self._by_frame), self.path)

    def frames(self) -> List[Tuple[int, float]]:
        return [(fi, self._timestamps[fi]) for fi in sorted(self._by_frame.keys())]

    def detect(self, inp: DetectorInput) -> List[Detection]:
        return list(self._by_frame.get(inp.frame_index, []))
