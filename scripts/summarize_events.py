from __future__ import annotations

import argparse
import json
from collections import Counter
from typing import Any, Dict, List


def _read_events(path: str) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                out.append(json.loads(line))
    return out


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--events", required=True, help="Hazard events JSONL written by run_replay.py")
    args = ap.parse_args()

    events = _read_events(args.events)
    if not events:
        print("event_count=0")
        return

    by_type = Counter(str(e.get("type")) for e in events)
    by_severity = Counter(str(e.get("severity")) for e in events)
    scores = sorted(float(e.get("hazard_score", 0.0)) for e in events)
    t0 = float(events[0].get("timestamp_s", 0.0))
    t1 = float(events[-1].get("timestamp_s", 0.0))
    span = max(t1 - t0, 1e-9)

    print(f"event_count={len(events)} span_s={t1 - t0:.2f} rate_per_min={60.0 * len(events) / span:.2f}")
    print("by_type " + " ".join(f"{k}={v}" for k, v in sorted(by_type.items())))
    print("by_severity " + " ".join(f"{k}={v}" for k, v in sorted(by_severity.items())))
    print(f"score_mean={sum(scores) / len(scores):.3f} score_p95={scores[int(0.95 * (len(scores) - 1))]:.3f}")


if __name__ == "__main__":
    main()
