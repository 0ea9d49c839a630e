from .config import load_yaml, positive_float, resolve_path
from .logging import setup_logging
from .types import (
    ApproachPoint,
    KinematicSample,
    ManeuverSegment,
    ManeuverSet,
    ObjectMarker,
    RawTimestamp,
    SharpTurn,
    SmoothedPoint,
    SpeedProfile,
    TrajectoryPoint,
)

__all__ = [
    "ApproachPoint",
    "KinematicSample",
    "ManeuverSegment",
    "ManeuverSet",
    "ObjectMarker",
    "RawTimestamp",
    "SharpTurn",
    "SmoothedPoint",
    "SpeedProfile",
    "TrajectoryPoint",
    "load_yaml",
    "positive_float",
    "resolve_path",
    "setup_logging",
]
