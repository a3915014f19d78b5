from __future__ import annotations

import json
import logging
import urllib.request
from dataclasses import dataclass
from typing import Any, Dict, Protocol

from roadhazard.output.sinks import event_to_dict
from roadhazard.utils.types import HazardEvent, HazardSeverity


logger = logging.getLogger("roadhazard.output.notifier")


class Notifier(Protocol):
    def notify_hazard(self, event: HazardEvent) -> None:
        ...


@dataclass
class LogNotifier(Notifier):
    level: str = "WARNING"

    def notify_hazard(self, event: HazardEvent) -> None:
        lvl = getattr(logging, str(self.level).upper(), logging.WARNING)
        if event.severity >= HazardSeverity.CRITICAL:
            lvl = max(lvl, logging.ERROR)
        logger.log(
            lvl,
            "ROAD_HAZARD type=%s severity=%s label=%s score=%.3f desc=%r t=%.3f",
            event.type.value,
            event.severity.name,
            event.object_label,
            event.hazard_score,
            event.description,
            event.timestamp_s,
        )


@dataclass
class HttpWebhookNotifier(Notifier):
    url: str
    headers: Dict[str, str]
    timeout_s: float = 2.0

    def notify_hazard(self, event: HazardEvent) -> None:
        payload = {"kind": "road_hazard", **event_to_dict(event)}
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        req = urllib.request.Request(self.url, data=data, method="POST")
        req.add_header("Content-Type", "application/json")
        for k, v in self.headers.items():
            if k.lower() == "content-type":
                continue
            req.add_header(str(k), str(v))
        try:
            with urllib.request.urlopen(req, timeout=float(self.timeout_s)) as resp:
                _ = resp.read(1)
        except Exception:
            logger.exception("Failed to POST hazard event to webhook")


def create_notifier(cfg: Dict[str, Any]) -> Notifier:
    t = str(cfg.get("type", "log")).lower()
    if t == "log":
        return LogNotifier(level=str(cfg.get("level", "WARNING")))
    if t == "http":
        http = dict(cfg.get("http", {}) or {})
        url = str(http.get("url", ""))
        if not url:
            raise ValueError("notifier.http.url is required when notifier.type=http")
        headers = http.get("headers", {}) or {}
        if not isinstance(headers, dict):
            raise ValueError("notifier.http.headers must be a dict")
        return HttpWebhookNotifier(
            url=url,
            headers={str(k): str(v) for k, v in headers.items()},
            timeout_s=float(http.get("timeout_s", 2.0)),
        )
    raise ValueError(f"Unknown notifier.type: {t}")
