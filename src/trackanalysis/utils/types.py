from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

RawTimestamp = Union[str, int, float, None]


@dataclass(frozen=True)
class KinematicSample:
    distance_m: float
    duration_s: float
    speed_mps: float
    speed_kmh: float
    bearing_deg: float
    acceleration_mps2: Optional[float]
    reliability: float
    timestamp_ms: Optional[float] = None


@dataclass(frozen=True)
class TrajectoryPoint:
    frame_index: int
    timestamp: RawTimestamp
    latitude: float
    longitude: float
    kinematics: Optional[KinematicSample] = None


@dataclass(frozen=True)
class ObjectMarker:
    frame_index: int
    latitude: float
    longitude: float
    timestamp: RawTimestamp = None
    session_name: str = ""


@dataclass(frozen=True)
class SpeedProfile:
    samples: Tuple[KinematicSample, ...]
    distances_m: Tuple[float, ...]
    speeds_kmh: Tuple[float, ...]
    time_intervals_s: Tuple[float, ...]
    bearings_deg: Tuple[float, ...]
    accelerations_mps2: Tuple[float, ...]
    cumulative_distance_m: Tuple[float, ...]
    smoothed_speeds_kmh: Tuple[float, ...]
    max_speed_kmh: float
    average_speed_kmh: float
    total_distance_m: float

    @staticmethod
    def empty() -> "SpeedProfile":
        return SpeedProfile(
            samples=(),
            distances_m=(),
            speeds_kmh=(),
            time_intervals_s=(),
            bearings_deg=(),
            accelerations_mps2=(),
            cumulative_distance_m=(0.0,),
            smoothed_speeds_kmh=(),
            max_speed_kmh=0.0,
            average_speed_kmh=0.0,
            total_distance_m=0.0,
        )


@dataclass(frozen=True)
class SmoothedPoint:
    frame_index: int
    timestamp: RawTimestamp
    latitude: float
    longitude: float
    speed_kmh: Optional[float] = None


@dataclass(frozen=True)
class ManeuverSegment:
    start_index: int
    end_index: int
    mean_value: float


@dataclass(frozen=True)
class SharpTurn:
    index: int
    angle_deg: float


@dataclass(frozen=True)
class ManeuverSet:
    hard_braking: Tuple[ManeuverSegment, ...]
    rapid_acceleration: Tuple[ManeuverSegment, ...]
    sharp_turns: Tuple[SharpTurn, ...]


@dataclass(frozen=True)
class ApproachPoint:
    target_distance_m: float
    latitude: float
    longitude: float
    frame_index: int
    timestamp_ms: Optional[float]
    distance_m: float
    time_offset_s: float
    bearing_to_marker_deg: float
    speed_kmh: float
    interpolated: bool = False
