from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

import yaml


def load_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a dict at root of YAML: {path}")
    return data


def resolve_path(path: str, base_dir: Optional[str] = None) -> str:
    p = Path(path)
    if p.is_absolute():
        return str(p)
    if base_dir is None:
        base_dir = os.getcwd()
    return str((Path(base_dir) / p).resolve())


def parse_range(v: Any, default: Tuple[float, float], name: str) -> Tuple[float, float]:
    if v is None:
        return default
    if not isinstance(v, Sequence) or isinstance(v, str) or len(v) != 2:
        raise ValueError(f"{name} must be a [min, max] pair")
    lo, hi = float(v[0]), float(v[1])
    if hi < lo:
        raise ValueError(f"{name} is inverted: [{lo}, {hi}]")
    return (lo, hi)
