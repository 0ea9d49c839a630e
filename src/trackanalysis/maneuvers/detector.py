"""
Driving maneuver detection over a kinematics-annotated trajectory.

Hard braking and rapid acceleration are contiguous runs of per-point
acceleration beyond a threshold; sharp turns are single points whose
bearing change exceeds an angle. Each run detector is an explicit
Idle / Active(start) state machine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from trackanalysis.geometry.geodesy import bearing_between, distance_between
from trackanalysis.kinematics.math import acceleration_mps2, bearing_change_deg, frame_duration_s, speed_mps
from trackanalysis.kinematics.units import kmh_to_mps, mps_to_kmh
from trackanalysis.timing.ordering import sort_by_frame_index
from trackanalysis.utils.config import positive_float
from trackanalysis.utils.types import ManeuverSegment, ManeuverSet, SharpTurn, TrajectoryPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManeuverConfig:
    braking_threshold_mps2: float = -3.0
    acceleration_threshold_mps2: float = 2.5
    sharp_turn_deg: float = 30.0

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ManeuverConfig":
        braking = float(d.get("braking_threshold_mps2", -3.0))
        accel = float(d.get("acceleration_threshold_mps2", 2.5))
        turn = float(d.get("sharp_turn_deg", 30.0))
        if braking >= 0.0:
            raise ValueError(f"maneuvers.braking_threshold_mps2 must be negative, got {braking}")
        if accel <= 0.0:
            raise ValueError(f"maneuvers.acceleration_threshold_mps2 must be positive, got {accel}")
        if not 0.0 < turn < 180.0:
            raise ValueError(f"maneuvers.sharp_turn_deg must be within (0, 180), got {turn}")
        return ManeuverConfig(
            braking_threshold_mps2=braking,
            acceleration_threshold_mps2=accel,
            sharp_turn_deg=turn,
        )


class SegmentTracker:
    """Two-state run detector: Idle, or Active with the index the run started at."""

    def __init__(self, predicate: Callable[[float], bool]) -> None:
        self._predicate = predicate
        self._start: Optional[int] = None
        self._values: List[float] = []
        self._segments: List[ManeuverSegment] = []

    @property
    def active(self) -> bool:
        return self._start is not None

    def step(self, index: int, value: float) -> None:
        if self._predicate(value):
            if self._start is None:
                self._start = index
            self._values.append(float(value))
        elif self._start is not None:
            self._close(self._start)

    def finish(self) -> Tuple[ManeuverSegment, ...]:
        if self._start is not None:
            self._close(self._start)
        return tuple(self._segments)

    def _close(self, start: int) -> None:
        end = start + len(self._values) - 1
        mean = sum(self._values) / len(self._values)
        self._segments.append(ManeuverSegment(start_index=start, end_index=end, mean_value=float(mean)))
        self._start = None
        self._values = []


def detect_segments(values: Sequence[float], predicate: Callable[[float], bool]) -> Tuple[ManeuverSegment, ...]:
    tracker = SegmentTracker(predicate)
    for i, v in enumerate(values):
        tracker.step(i, v)
    return tracker.finish()


def detect_acceleration_events(
    accelerations: Sequence[float],
    cfg: Optional[ManeuverConfig] = None,
) -> Tuple[Tuple[ManeuverSegment, ...], Tuple[ManeuverSegment, ...]]:
    """Return `(hard_braking, rapid_acceleration)` runs for a per-point acceleration series."""
    cfg = cfg or ManeuverConfig()
    braking = SegmentTracker(lambda a: a < cfg.braking_threshold_mps2)
    rapid = SegmentTracker(lambda a: a > cfg.acceleration_threshold_mps2)
    for i, a in enumerate(accelerations):
        braking.step(i, a)
        rapid.step(i, a)
    return braking.finish(), rapid.finish()


def detect_sharp_turns(bearing_changes: Sequence[float], cfg: Optional[ManeuverConfig] = None) -> Tuple[SharpTurn, ...]:
    cfg = cfg or ManeuverConfig()
    return tuple(
        SharpTurn(index=i, angle_deg=float(d)) for i, d in enumerate(bearing_changes) if d > cfg.sharp_turn_deg
    )


def per_point_speeds_kmh(points: Sequence[TrajectoryPoint], frame_rate: float) -> Tuple[float, ...]:
    """Speed arriving at each point; attached kinematics win over recomputation. First point is 0."""
    speeds: List[float] = []
    for i, p in enumerate(points):
        if i == 0:
            speeds.append(0.0)
        elif p.kinematics is not None:
            speeds.append(float(p.kinematics.speed_kmh))
        else:
            prev = points[i - 1]
            dt = frame_duration_s(prev.frame_index, p.frame_index, frame_rate)
            speeds.append(mps_to_kmh(speed_mps(distance_between(prev, p), dt)))
    return tuple(speeds)


def per_point_accelerations(
    points: Sequence[TrajectoryPoint],
    speeds_kmh: Sequence[float],
    frame_rate: float,
) -> Tuple[float, ...]:
    accels: List[float] = []
    for i, p in enumerate(points):
        if i == 0:
            accels.append(0.0)
            continue
        dt = frame_duration_s(points[i - 1].frame_index, p.frame_index, frame_rate)
        accels.append(acceleration_mps2(kmh_to_mps(speeds_kmh[i - 1]), kmh_to_mps(speeds_kmh[i]), dt))
    return tuple(accels)


def bearing_changes_deg(points: Sequence[TrajectoryPoint]) -> Tuple[float, ...]:
    """Change between the incoming bearings of consecutive points, folded into [0, 180]."""
    changes: List[float] = []
    prev_bearing: Optional[float] = None
    for i, p in enumerate(points):
        if i == 0:
            changes.append(0.0)
            continue
        if p.kinematics is not None:
            bearing = float(p.kinematics.bearing_deg)
        else:
            bearing = bearing_between(points[i - 1], p)
        changes.append(bearing_change_deg(prev_bearing, bearing) if prev_bearing is not None else 0.0)
        prev_bearing = bearing
    return tuple(changes)


def detect_maneuvers(
    trajectory: Sequence[TrajectoryPoint],
    frame_rate: float,
    cfg: Optional[ManeuverConfig] = None,
) -> ManeuverSet:
    """Detect hard braking, rapid acceleration and sharp turns.

    Indices in the result refer to the trajectory in frame-index order.
    """
    cfg = cfg or ManeuverConfig()
    positive_float(frame_rate, "frame_rate")
    points = sort_by_frame_index(trajectory)
    if len(points) < 2:
        return ManeuverSet(hard_braking=(), rapid_acceleration=(), sharp_turns=())

    speeds = per_point_speeds_kmh(points, frame_rate)
    accels = per_point_accelerations(points, speeds, frame_rate)
    braking, rapid = detect_acceleration_events(accels, cfg)
    turns = detect_sharp_turns(bearing_changes_deg(points), cfg)

    logger.debug(
        "Detected %d hard braking, %d rapid acceleration, %d sharp turn events over %d points",
        len(braking),
        len(rapid),
        len(turns),
        len(points),
    )
    return ManeuverSet(hard_braking=braking, rapid_acceleration=rapid, sharp_turns=turns)
