from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from roadhazard.detection.scripted import ReplayDetector
from roadhazard.hazard.config import HazardEngineConfig
from roadhazard.hazard.engine import RoadHazardEngine
from roadhazard.output.notifier import LogNotifier
from roadhazard.output.sinks import CsvEventSink, HazardEventSinks, JsonlEventSink
from roadhazard.pipeline.multi_stream import MultiStreamRunner, MultiStreamRunnerConfig
from roadhazard.pipeline.road_pipeline import RoadPipeline
from roadhazard.utils.config import resolve_path
from roadhazard.utils.logging import setup_logging


def main() -> None:
    ap = argparse.ArgumentParser(description="Replay recorded detections through the road hazard engine")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--detections", help="JSONL detection log of a single stream")
    src.add_argument("--streams", help="Directory of stream YAML files (detection.backend selects the detector), replayed concurrently")
    ap.add_argument("--config", default="configs/hazard_engine.yaml", help="Hazard engine YAML")
    ap.add_argument("--events-jsonl", default=None, help="Write events to this JSONL file (single stream)")
    ap.add_argument("--events-csv", default=None, help="Write events to this CSV file (single stream)")
    ap.add_argument("--log-level", default="INFO")
    ap.add_argument("--log-file", default=None)
    ap.add_argument("--debug-engine", action="store_true", help="Log per-frame engine details")
    args = ap.parse_args()

    base_dir = os.getcwd()
    setup_logging(level=args.log_level, log_file=args.log_file, debug_engine=args.debug_engine)
    config_path = resolve_path(args.config, base_dir)
    if not os.path.exists(config_path):
        config_path = None

    if args.streams:
        runner = MultiStreamRunner(
            MultiStreamRunnerConfig(streams_dir=resolve_path(args.streams, base_dir), engine_yaml=config_path, base_dir=base_dir)
        )
        for r in runner.run():
            print(f"stream={r.stream_id} frames={r.processed_frames} dropped={r.dropped_frames} events={len(r.events)}")
        return

    cfg = HazardEngineConfig.from_yaml(config_path) if config_path else HazardEngineConfig()
    replay = ReplayDetector(path=resolve_path(args.detections, base_dir))
    sinks = HazardEventSinks(
        csv=CsvEventSink(resolve_path(args.events_csv, base_dir)) if args.events_csv else None,
        jsonl=JsonlEventSink(resolve_path(args.events_jsonl, base_dir)) if args.events_jsonl else None,
    )
    pipeline = RoadPipeline(detector=replay, engine=RoadHazardEngine(cfg), notifier=LogNotifier(), sinks=sinks)
    events = pipeline.run((fi, t_s, None) for fi, t_s in replay.frames())
    print(f"frames={pipeline.processed_frames} events={len(events)}")


if __name__ == "__main__":
    main()
