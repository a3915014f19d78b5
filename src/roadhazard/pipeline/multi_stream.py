from __future__ import annotations

import glob
import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from roadhazard.detection.base import Detector, DetectorInput
from roadhazard.detection.registry import create_detector
from roadhazard.detection.scripted import ReplayDetector
from roadhazard.hazard.config import HazardEngineConfig
from roadhazard.hazard.engine import RoadHazardEngine
from roadhazard.output.notifier import create_notifier
from roadhazard.output.sinks import CsvEventSink, HazardEventSinks, JsonlEventSink
from roadhazard.pipeline.road_pipeline import RoadPipeline
from roadhazard.utils.config import load_yaml, resolve_path
from roadhazard.utils.types import HazardEvent


logger = logging.getLogger("roadhazard.pipeline.multi")


@dataclass
class _LockedDetector(Detector):
    detector: Detector

    def __post_init__(self) -> None:
        self._lock = threading.Lock()

    def detect(self, inp: DetectorInput):
        with self._lock:
            return self.detector.detect(inp)


@dataclass(frozen=True)
class StreamResult:
    stream_id: str
    events: List[HazardEvent]
    processed_frames: int
    dropped_frames: int


@dataclass(frozen=True)
class MultiStreamRunnerConfig:
    streams_dir: str
    engine_yaml: Optional[str]
    base_dir: str


def build_sinks(out_cfg: Dict[str, Any], base_dir: str) -> HazardEventSinks:
    csv_cfg = out_cfg.get("csv", {}) or {}
    jsonl_cfg = out_cfg.get("jsonl", {}) or {}
    return HazardEventSinks(
        csv=CsvEventSink(resolve_path(str(csv_cfg.get("path")), base_dir)) if bool(csv_cfg.get("enabled", False)) else None,
        jsonl=JsonlEventSink(resolve_path(str(jsonl_cfg.get("path")), base_dir)) if bool(jsonl_cfg.get("enabled", False)) else None,
    )


class MultiStreamRunner:
    """Replays several recorded detection streams concurrently.

    Every stream gets its own engine so tracks and cooldowns never mix
    between unrelated video sources. The stream's detection log always drives
    the frame clock; ``detection.backend`` picks what produces detections.
    """

    def __init__(self, cfg: MultiStreamRunnerConfig) -> None:
        self._cfg = cfg

    def _detector_params(self, det_cfg: Dict[str, Any], detections_path: str) -> Tuple[str, Dict[str, Any]]:
        backend = str(det_cfg.get("backend", "replay"))
        params = dict(det_cfg.get("params", {}) or {})
        if backend == "replay":
            params["path"] = detections_path
        return backend, params

    def _shared_detector(self, stream_cfgs: List[Tuple[str, Dict[str, Any]]]) -> Optional[Detector]:
        shared_backend: Optional[str] = None
        shared_params: Optional[Dict[str, Any]] = None
        for _, stream_cfg in stream_cfgs:
            det_cfg = dict(stream_cfg.get("detection", {}) or {})
            if not bool(det_cfg.get("shared", False)):
                return None
            backend, params = self._detector_params(det_cfg, resolve_path(str(det_cfg.get("path", "")), self._cfg.base_dir))
            if shared_backend is None:
                shared_backend = backend
                shared_params = params
            elif backend != shared_backend or params != shared_params:
                return None
        if shared_backend is None or shared_params is None:
            return None
        logger.info("sharing one %s detector across %d stream(s)", shared_backend, len(stream_cfgs))
        return _LockedDetector(create_detector(shared_backend, shared_params))

    def run(self) -> List[StreamResult]:
        stream_paths = sorted(glob.glob(str(Path(self._cfg.streams_dir) / "*.yaml")))
        if not stream_paths:
            raise RuntimeError(f"No stream configs found in: {self._cfg.streams_dir}")

        engine_cfg = HazardEngineConfig()
        if self._cfg.engine_yaml:
            engine_cfg = HazardEngineConfig.from_yaml(self._cfg.engine_yaml)

        stream_cfgs = [(p, load_yaml(p)) for p in stream_paths]
        shared_detector = self._shared_detector(stream_cfgs)

        results: List[StreamResult] = []
        errors: List[BaseException] = []
        results_lock = threading.Lock()

        def _worker(stream_path: str, stream_cfg: Dict[str, Any]) -> None:
            try:
                stream_id = str(stream_cfg.get("stream_id", Path(stream_path).stem))
                det_cfg = dict(stream_cfg.get("detection", {}) or {})
                detections_path = resolve_path(str(det_cfg.get("path", "")), self._cfg.base_dir)
                frames = ReplayDetector(path=detections_path).frames()
                detector = shared_detector
                if detector is None:
                    detector = create_detector(*self._detector_params(det_cfg, detections_path))
                notifier = create_notifier(dict(stream_cfg.get("notifier", {}) or {}))
                pipeline = RoadPipeline(
                    detector=detector,
                    engine=RoadHazardEngine(engine_cfg),
                    notifier=notifier,
                    sinks=build_sinks(dict(stream_cfg.get("output", {}) or {}), self._cfg.base_dir),
                    stream_id=stream_id,
                )
                events = pipeline.run((fi, t_s, None) for fi, t_s in frames)
                with results_lock:
                    results.append(
                        StreamResult(
                            stream_id=stream_id,
                            events=events,
                            processed_frames=pipeline.processed_frames,
                            dropped_frames=pipeline.dropped_frames,
                        )
                    )
            except BaseException as e:
                logger.exception("Stream pipeline failed: %s", stream_path)
                with results_lock:
                    errors.append(e)

        threads: List[threading.Thread] = []
        for stream_path, stream_cfg in stream_cfgs:
            t = threading.Thread(target=_worker, args=(stream_path, stream_cfg), daemon=True)
            threads.append(t)
            t.start()

        for t in threads:
            t.join()

        if errors:
            logger.error("%d stream pipeline(s) failed, others may have succeeded", len(errors))
        return sorted(results, key=lambda r: r.stream_id)
