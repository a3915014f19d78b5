from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from roadhazard.utils.types import HazardEvent


def _ensure_parent(path: str) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def event_to_dict(e: HazardEvent) -> Dict[str, Any]:
    obj: Dict[str, Any] = {
        "type": e.type.value,
        "severity": e.severity.name.lower(),
        "timestamp_s": e.timestamp_s,
        "description": e.description,
        "hazard_score": e.hazard_score,
        "alert_key": e.alert_key,
        "label": e.object_label,
    }
    det = e.triggering_object
    if det is not None:
        obj["detection"] = {
            "det_id": det.det_id,
            "confidence": det.confidence,
            "bbox": [det.bbox.x, det.bbox.y, det.bbox.width, det.bbox.height],
        }
    return obj


_CSV_FIELDS = ["timestamp_s", "type", "severity", "label", "hazard_score", "alert_key", "description", "center_x", "center_y", "area"]


@dataclass
class CsvEventSink:
    path: str
    _f: Optional[object] = None
    _w: Optional[csv.DictWriter] = None

    def open(self) -> None:
        _ensure_parent(self.path)
        self._f = open(self.path, "w", newline="", encoding="utf-8")
        self._w = csv.DictWriter(self._f, fieldnames=_CSV_FIELDS)
        self._w.writeheader()

    def write(self, e: HazardEvent) -> None:
        if self._w is None:
            raise RuntimeError("CsvEventSink not opened")
        det = e.triggering_object
        cx, cy = det.center if det is not None else (float("nan"), float("nan"))
        self._w.writerow(
            {
                "timestamp_s": e.timestamp_s,
                "type": e.type.value,
                "severity": e.severity.name.lower(),
                "label": e.object_label,
                "hazard_score": e.hazard_score,
                "alert_key": e.alert_key,
                "description": e.description,
                "center_x": cx,
                "center_y": cy,
                "area": det.area if det is not None else float("nan"),
            }
        )

    def close(self) -> None:
        if self._f is not None:
            self._f.close()
        self._f = None
        self._w = None


@dataclass
class JsonlEventSink:
    path: str
    _f: Optional[object] = None

    def open(self) -> None:
        _ensure_parent(self.path)
        self._f = open(self.path, "w", encoding="utf-8")

    def write(self, e: HazardEvent) -> None:
        if self._f is None:
            raise RuntimeError("JsonlEventSink not opened")
        self._f.write(json.dumps(event_to_dict(e), ensure_ascii=False) + "\n")

    def close(self) -> None:
        if self._f is not None:
            self._f.close()
        self._f = None


@dataclass
class HazardEventSinks:
    csv: Optional[CsvEventSink] = None
    jsonl: Optional[JsonlEventSink] = None

    def open(self) -> None:
        if self.csv is not None:
            self.csv.open()
        if self.jsonl is not None:
            self.jsonl.open()

    def write(self, e: HazardEvent) -> None:
        if self.csv is not None:
            self.csv.write(e)
        if self.jsonl is not None:
            self.jsonl.write(e)

    def close(self) -> None:
        if self.csv is not None:
            self.csv.close()
        if self.jsonl is not None:
            self.jsonl.close()
