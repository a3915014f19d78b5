from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, List, Optional, Tuple

PointXY = Tuple[float, float]
VectorXY = Tuple[float, float]

COCO_CLASS_NAMES = [
    "person", "bicycle", "car", "motorcycle", "airplane", "bus", "train", "truck", "boat",
    "traffic light", "fire hydrant", "stop sign", "parking meter", "bench", "bird", "cat", "dog",
    "horse", "sheep", "cow", "elephant", "bear", "zebra", "giraffe", "backpack", "umbrella",
    "handbag", "tie", "suitcase", "frisbee", "skis", "snowboard", "sports ball", "kite",
    "baseball bat", "baseball glove", "skateboard", "surfboard", "tennis racket", "bottle",
    "wine glass", "cup", "fork", "knife", "spoon", "bowl", "banana", "apple", "sandwich",
    "orange", "broccoli", "carrot", "hot dog", "pizza", "donut", "cake", "chair", "couch",
    "potted plant", "bed", "dining table", "toilet", "tv", "laptop", "mouse", "remote",
    "keyboard", "cell phone", "microwave", "oven", "toaster", "sink", "refrigerator", "book",
    "clock", "vase", "scissors", "teddy bear", "hair drier", "toothbrush",
]


class ObjectLabel(str, Enum):
    CAR = "car"
    TRUCK = "truck"
    BUS = "bus"
    MOTORCYCLE = "motorcycle"
    BICYCLE = "bicycle"
    PERSON = "person"
    UNKNOWN = "unknown"

    @property
    def is_vehicle(self) -> bool:
        return self in (ObjectLabel.CAR, ObjectLabel.TRUCK, ObjectLabel.BUS, ObjectLabel.MOTORCYCLE)

    @property
    def is_vulnerable_road_user(self) -> bool:
        return self in (ObjectLabel.PERSON, ObjectLabel.BICYCLE)

    @property
    def is_road_relevant(self) -> bool:
        return self.is_vehicle or self.is_vulnerable_road_user

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @staticmethod
    def from_coco_name(name: str) -> "ObjectLabel":
        key = str(name).strip().lower()
        try:
            return ObjectLabel(key)
        except ValueError:
            return ObjectLabel.UNKNOWN

    @staticmethod
    def from_coco_index(index: int) -> "ObjectLabel":
        if index < 0 or index >= len(COCO_CLASS_NAMES):
            return ObjectLabel.UNKNOWN
        return ObjectLabel.from_coco_name(COCO_CLASS_NAMES[index])


@dataclass(frozen=True)
class NormBox:
    """Bounding box in frame-normalized units, origin at the top-left corner."""

    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return float(self.width) * float(self.height)

    @property
    def center(self) -> PointXY:
        return (float(self.x) + 0.5 * float(self.width), float(self.y) + 0.5 * float(self.height))

    def to_xyxy(self) -> Tuple[float, float, float, float]:
        return (float(self.x), float(self.y), float(self.x + self.width), float(self.y + self.height))

    @staticmethod
    def from_center(cx: float, cy: float, width: float, height: float) -> "NormBox":
        return NormBox(x=float(cx) - 0.5 * float(width), y=float(cy) - 0.5 * float(height), width=float(width), height=float(height))

    @staticmethod
    def from_xyxy_px(x1: float, y1: float, x2: float, y2: float, frame_width: int, frame_height: int) -> "NormBox":
        w = max(1, int(frame_width))
        h = max(1, int(frame_height))
        if x2 < x1:
            x1, x2 = x2, x1
        if y2 < y1:
            y1, y2 = y2, y1
        return NormBox(x=float(x1) / w, y=float(y1) / h, width=float(x2 - x1) / w, height=float(y2 - y1) / h)


def _new_det_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Detection:
    label: ObjectLabel
    confidence: float
    bbox: NormBox
    det_id: str = field(default_factory=_new_det_id)

    @property
    def area(self) -> float:
        return self.bbox.area

    @property
    def center(self) -> PointXY:
        return self.bbox.center


class HazardType(str, Enum):
    VEHICLE_AHEAD = "vehicle_ahead"
    PEDESTRIAN_AHEAD = "pedestrian_ahead"
    CLOSING_FAST = "closing_fast"
    FUTURE_PATH = "future_path"


class HazardSeverity(IntEnum):
    LOW = 1
    MEDIUM = 2
    HIGH = 3
    CRITICAL = 4


@dataclass(frozen=True)
class HazardEvent:
    type: HazardType
    severity: HazardSeverity
    timestamp_s: float
    description: str
    triggering_object: Optional[Detection]
    hazard_score: float
    alert_key: str = ""

    @property
    def object_label(self) -> str:
        if self.triggering_object is None:
            return "obstacle"
        return self.triggering_object.label.value


@dataclass(frozen=True)
class AnalysisResult:
    events: List[HazardEvent]
    motion_vectors: Dict[str, VectorXY]
