from .config import load_yaml, parse_range, resolve_path
from .logging import setup_logging
from .types import (
    AnalysisResult,
    Detection,
    HazardEvent,
    HazardSeverity,
    HazardType,
    NormBox,
    ObjectLabel,
    PointXY,
    VectorXY,
)

__all__ = [
    "AnalysisResult",
    "Detection",
    "HazardEvent",
    "HazardSeverity",
    "HazardType",
    "NormBox",
    "ObjectLabel",
    "PointXY",
    "VectorXY",
    "load_yaml",
    "parse_range",
    "resolve_path",
    "setup_logging",
]
