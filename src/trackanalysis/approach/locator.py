"""
Approach point search.

For an object marker and a ladder of target distances, find the earliest
trajectory position (at or before the marker) lying at each distance from
the marker. A sample within tolerance of a target is taken as-is;
otherwise a crossing between two consecutive samples is linearly
interpolated.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from trackanalysis.geometry.geodesy import distance_between, haversine_distance_m, initial_bearing_deg
from trackanalysis.timing.ordering import resolve_ordering
from trackanalysis.utils.config import positive_float
from trackanalysis.utils.types import ApproachPoint, ObjectMarker, TrajectoryPoint

logger = logging.getLogger(__name__)

DEFAULT_TARGET_DISTANCES_M: Tuple[float, ...] = (50.0, 100.0, 150.0, 200.0, 250.0)
# Haversine round-off on a sample that sits on the tolerance edge stays below this.
DISTANCE_EPSILON_M = 1e-6


@dataclass(frozen=True)
class ApproachConfig:
    target_distances_m: Tuple[float, ...] = DEFAULT_TARGET_DISTANCES_M
    match_tolerance_m: float = 5.0

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ApproachConfig":
        raw = d.get("target_distances_m") or DEFAULT_TARGET_DISTANCES_M
        targets = tuple(sorted({float(t) for t in raw}))
        if any(t <= 0.0 for t in targets):
            raise ValueError(f"approach.target_distances_m must all be positive, got {list(raw)}")
        return ApproachConfig(
            target_distances_m=targets,
            match_tolerance_m=positive_float(d.get("match_tolerance_m", 5.0), "approach.match_tolerance_m"),
        )


def _speed_kmh(p: TrajectoryPoint) -> float:
    return float(p.kinematics.speed_kmh) if p.kinematics is not None else 0.0


def _within_tolerance(distance_m: float, target_m: float, tol_m: float) -> bool:
    return abs(distance_m - target_m) < tol_m - DISTANCE_EPSILON_M


def _lerp(a: float, b: float, ratio: float) -> float:
    return float(a + ratio * (b - a))


def _time_offset_s(
    marker: ObjectMarker,
    marker_ms: Optional[float],
    point_ms: Optional[float],
    frame_index: float,
    frame_rate: float,
) -> float:
    if marker_ms is not None and point_ms is not None:
        return float((marker_ms - point_ms) / 1000.0)
    return float((marker.frame_index - frame_index) / frame_rate)


def find_approach_points(
    trajectory: Sequence[TrajectoryPoint],
    marker: ObjectMarker,
    frame_rate: float,
    cfg: Optional[ApproachConfig] = None,
) -> Tuple[ApproachPoint, ...]:
    """Locate one approach point per reachable target distance.

    Only samples ordered at or before the marker are considered. Ordering is
    by timestamp when the marker and every sample carry a valid timestamp,
    otherwise by frame index for all of them. Targets that are never reached
    are absent from the result, which is sorted by target distance.
    """
    cfg = cfg or ApproachConfig()
    fps = positive_float(frame_rate, "frame_rate")
    ordered = resolve_ordering(trajectory, marker)
    marker_key = ordered.marker_key
    if marker_key is None:
        return ()

    history = [i for i, k in enumerate(ordered.keys) if k <= marker_key]
    points = [ordered.points[i] for i in history]
    epoch_ms = [ordered.epoch_ms[i] for i in history]
    distances = [distance_between(p, marker) for p in points]
    marker_ms = ordered.marker_epoch_ms
    tol = float(cfg.match_tolerance_m)

    found: Set[float] = set()
    out: List[ApproachPoint] = []
    for i, p in enumerate(points):
        if len(found) == len(cfg.target_distances_m):
            break
        d_here = distances[i]
        d_next = distances[i + 1] if i + 1 < len(points) else None
        for target in cfg.target_distances_m:
            if target in found:
                continue
            if _within_tolerance(d_here, target, tol):
                found.add(target)
                out.append(
                    ApproachPoint(
                        target_distance_m=target,
                        latitude=float(p.latitude),
                        longitude=float(p.longitude),
                        frame_index=int(p.frame_index),
                        timestamp_ms=epoch_ms[i],
                        distance_m=float(d_here),
                        time_offset_s=_time_offset_s(marker, marker_ms, epoch_ms[i], p.frame_index, fps),
                        bearing_to_marker_deg=initial_bearing_deg(p.latitude, p.longitude, marker.latitude, marker.longitude),
                        speed_kmh=_speed_kmh(p),
                        interpolated=False,
                    )
                )
            # A next sample within tolerance matches on its own at the next step.
            elif d_next is not None and d_here > target > d_next and not _within_tolerance(d_next, target, tol):
                nxt = points[i + 1]
                ratio = (d_here - target) / (d_here - d_next)
                lat = _lerp(p.latitude, nxt.latitude, ratio)
                lon = _lerp(p.longitude, nxt.longitude, ratio)
                frame = int(math.floor(_lerp(p.frame_index, nxt.frame_index, ratio) + 0.5))
                t_here, t_next = epoch_ms[i], epoch_ms[i + 1]
                t_ms = _lerp(t_here, t_next, ratio) if t_here is not None and t_next is not None else None
                found.add(target)
                out.append(
                    ApproachPoint(
                        target_distance_m=target,
                        latitude=lat,
                        longitude=lon,
                        frame_index=frame,
                        timestamp_ms=t_ms,
                        distance_m=haversine_distance_m(lat, lon, marker.latitude, marker.longitude),
                        time_offset_s=_time_offset_s(marker, marker_ms, t_ms, frame, fps),
                        bearing_to_marker_deg=initial_bearing_deg(lat, lon, marker.latitude, marker.longitude),
                        speed_kmh=_lerp(_speed_kmh(p), _speed_kmh(nxt), ratio),
                        interpolated=True,
                    )
                )

    logger.debug(
        "Marker at frame %d: %d/%d target distances located over %d candidate points (%s order)",
        marker.frame_index,
        len(out),
        len(cfg.target_distances_m),
        len(points),
        ordered.basis.value,
    )
    return tuple(sorted(out, key=lambda a: a.target_distance_m))
