from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from roadhazard.detection.base import Detector, DetectorInput
from roadhazard.hazard.engine import RoadHazardEngine
from roadhazard.output.notifier import Notifier
from roadhazard.output.sinks import HazardEventSinks
from roadhazard.utils.types import Detection, HazardEvent, HazardSeverity, VectorXY


logger = logging.getLogger("roadhazard.pipeline.road")


Frame = Tuple[int, float, Optional[np.ndarray]]


@dataclass(frozen=True)
class RoadPipelineOutput:
    frame_index: int
    timestamp_s: float
    detections: List[Detection]
    motion_vectors: Dict[str, VectorXY]
    hazard_events: List[HazardEvent]

    @property
    def has_critical_hazard(self) -> bool:
        return any(e.severity >= HazardSeverity.HIGH for e in self.hazard_events)

    @property
    def vehicles(self) -> List[Detection]:
        return [d for d in self.detections if d.label.is_vehicle]

    @property
    def vulnerable_road_users(self) -> List[Detection]:
        return [d for d in self.detections if d.label.is_vulnerable_road_user]


class RoadPipeline:
    """Detector followed by the hazard engine for one stream.

    A frame that arrives while the previous one is still being analysed is
    dropped instead of queued, so results always describe the freshest frame.
    """

    def __init__(
        self,
        detector: Detector,
        engine: Optional[RoadHazardEngine] = None,
        notifier: Optional[Notifier] = None,
        sinks: Optional[HazardEventSinks] = None,
        stream_id: str = "road",
    ) -> None:
        self._detector = detector
        self._engine = engine or RoadHazardEngine()
        self._notifier = notifier
        self._sinks = sinks
        self._stream_id = stream_id
        self._busy = threading.Lock()
        self._dropped = 0
        self._processed = 0
        self._latest: Optional[RoadPipelineOutput] = None
        self._running = False

    @property
    def engine(self) -> RoadHazardEngine:
        return self._engine

    @property
    def dropped_frames(self) -> int:
        return self._dropped

    @property
    def processed_frames(self) -> int:
        return self._processed

    @property
    def latest_output(self) -> Optional[RoadPipelineOutput]:
        return self._latest

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        self.stop()
        # a new stream must not inherit tracks or cooldowns from the previous one
        with self._busy:
            self._engine.reset()
        if self._sinks is not None:
            self._sinks.open()
        self._dropped = 0
        self._processed = 0
        self._running = True
        logger.info("road pipeline started stream=%s", self._stream_id)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        if self._sinks is not None:
            self._sinks.close()
        self._latest = None
        logger.info(
            "road pipeline stopped stream=%s processed=%d dropped=%d",
            self._stream_id,
            self._processed,
            self._dropped,
        )

    def process_frame(self, frame_index: int, timestamp_s: float, image_bgr: Optional[np.ndarray] = None) -> Optional[RoadPipelineOutput]:
        if not self._busy.acquire(blocking=False):
            self._dropped += 1
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("dropped frame %d stream=%s (analysis in flight)", frame_index, self._stream_id)
            return None
        try:
            dets = self._detector.detect(DetectorInput(frame_index=frame_index, timestamp_s=timestamp_s, image_bgr=image_bgr))
            analysis = self._engine.analyze(dets, timestamp_s)
            out = RoadPipelineOutput(
                frame_index=int(frame_index),
                timestamp_s=float(timestamp_s),
                detections=list(dets),
                motion_vectors=dict(analysis.motion_vectors),
                hazard_events=list(analysis.events),
            )
            self._processed += 1
            self._latest = out
        finally:
            self._busy.release()

        for e in out.hazard_events:
            if self._notifier is not None:
                self._notifier.notify_hazard(e)
            if self._sinks is not None and self._running:
                self._sinks.write(e)
        return out

    def run(self, frames: Iterable[Frame]) -> List[HazardEvent]:
        events: List[HazardEvent] = []
        self.start()
        try:
            for frame_index, t_s, image in frames:
                out = self.process_frame(frame_index, t_s, image)
                if out is not None:
                    events.extend(out.hazard_events)
        finally:
            self.stop()
        return events
