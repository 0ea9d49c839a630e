from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from trackanalysis.geometry.geodesy import bearing_between, distance_between
from trackanalysis.kinematics.math import MIN_DURATION_S, acceleration_mps2, frame_duration_s, speed_mps
from trackanalysis.kinematics.reliability import ReliabilityConfig, reliability_score
from trackanalysis.kinematics.smoothing import smooth_values
from trackanalysis.kinematics.units import kmh_to_mps, mps_to_kmh
from trackanalysis.timing.ordering import sort_by_frame_index
from trackanalysis.timing.timestamps import try_parse_timestamp
from trackanalysis.utils.types import KinematicSample, SpeedProfile, TrajectoryPoint

logger = logging.getLogger(__name__)

PROFILE_SMOOTHING_WINDOW = 5
PLAUSIBLE_SPEED_KMH = (0.0, 200.0)


def between_points(
    p1: TrajectoryPoint,
    p2: TrajectoryPoint,
    frame_rate: float,
    prev_speed_kmh: Optional[float] = None,
    reliability_cfg: Optional[ReliabilityConfig] = None,
) -> KinematicSample:
    distance = distance_between(p1, p2)
    bearing = bearing_between(p1, p2)
    duration = frame_duration_s(p1.frame_index, p2.frame_index, frame_rate)
    timestamp_ms = try_parse_timestamp(p2.timestamp)

    if duration < MIN_DURATION_S:
        return KinematicSample(
            distance_m=distance,
            duration_s=0.0,
            speed_mps=0.0,
            speed_kmh=0.0,
            bearing_deg=bearing,
            acceleration_mps2=None,
            reliability=0.0,
            timestamp_ms=timestamp_ms,
        )

    v_mps = speed_mps(distance, duration)
    v_kmh = mps_to_kmh(v_mps)
    accel: Optional[float] = None
    if prev_speed_kmh is not None:
        accel = acceleration_mps2(kmh_to_mps(prev_speed_kmh), v_mps, duration)

    return KinematicSample(
        distance_m=distance,
        duration_s=duration,
        speed_mps=v_mps,
        speed_kmh=v_kmh,
        bearing_deg=bearing,
        acceleration_mps2=accel,
        reliability=reliability_score(v_kmh, accel, reliability_cfg),
        timestamp_ms=timestamp_ms,
    )


def speed_profile(
    trajectory: Sequence[TrajectoryPoint],
    frame_rate: float,
    reliability_cfg: Optional[ReliabilityConfig] = None,
) -> SpeedProfile:
    """Per-pair kinematics plus aggregates for a whole trajectory.

    Points are processed in frame-index order. Max and average speed only
    consider samples with 0 < speed < 200 km/h; implausible samples remain
    in the raw series.
    """
    if len(trajectory) < 2:
        return SpeedProfile.empty()

    points = sort_by_frame_index(trajectory)
    samples: List[KinematicSample] = []
    distances: List[float] = []
    speeds: List[float] = []
    intervals: List[float] = []
    bearings: List[float] = []
    accels: List[float] = []
    cumulative: List[float] = [0.0]

    total = 0.0
    prev_v_mps = 0.0
    for i in range(1, len(points)):
        prev_speed = speeds[-1] if speeds else None
        s = between_points(points[i - 1], points[i], frame_rate, prev_speed, reliability_cfg)
        samples.append(s)

        total += s.distance_m
        distances.append(s.distance_m)
        cumulative.append(total)
        intervals.append(frame_duration_s(points[i - 1].frame_index, points[i].frame_index, frame_rate))
        bearings.append(s.bearing_deg)
        speeds.append(s.speed_kmh)
        accels.append(acceleration_mps2(prev_v_mps, s.speed_mps, s.duration_s))
        prev_v_mps = s.speed_mps

    smoothed = smooth_values([speeds[0]] + speeds, PROFILE_SMOOTHING_WINDOW)[1:]

    lo, hi = PLAUSIBLE_SPEED_KMH
    valid = [v for v in speeds if lo < v < hi]
    max_speed = max(valid) if valid else 0.0
    avg_speed = sum(valid) / len(valid) if valid else 0.0
    if len(valid) < len(speeds):
        logger.debug("Excluded %d implausible speed samples from aggregates", len(speeds) - len(valid))

    return SpeedProfile(
        samples=tuple(samples),
        distances_m=tuple(distances),
        speeds_kmh=tuple(speeds),
        time_intervals_s=tuple(intervals),
        bearings_deg=tuple(bearings),
        accelerations_mps2=tuple(accels),
        cumulative_distance_m=tuple(cumulative),
        smoothed_speeds_kmh=tuple(smoothed),
        max_speed_kmh=float(max_speed),
        average_speed_kmh=float(avg_speed),
        total_distance_m=float(total),
    )


def annotate_kinematics(
    trajectory: Sequence[TrajectoryPoint],
    frame_rate: float,
    profile: Optional[SpeedProfile] = None,
) -> Tuple[TrajectoryPoint, ...]:
    """Return frame-ordered copies of the points with their incoming kinematics attached."""
    points = sort_by_frame_index(trajectory)
    if len(points) < 2:
        return tuple(replace(p, kinematics=None) for p in points)
    profile = profile or speed_profile(points, frame_rate)
    out = [replace(points[0], kinematics=None)]
    for p, s in zip(points[1:], profile.samples):
        out.append(replace(p, kinematics=s))
    return tuple(out)
