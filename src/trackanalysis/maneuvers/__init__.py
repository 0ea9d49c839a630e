from .detector import (
    ManeuverConfig,
    SegmentTracker,
    detect_acceleration_events,
    detect_maneuvers,
    detect_segments,
    detect_sharp_turns,
)

__all__ = [
    "ManeuverConfig",
    "SegmentTracker",
    "detect_acceleration_events",
    "detect_maneuvers",
    "detect_segments",
    "detect_sharp_turns",
]
