from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from trackanalysis.approach.locator import DEFAULT_TARGET_DISTANCES_M
from trackanalysis.geometry.geodesy import distance_between
from trackanalysis.timing.timestamps import try_parse_timestamp
from trackanalysis.utils.types import ObjectMarker, TrajectoryPoint

logger = logging.getLogger(__name__)


class TimeFilter(str, Enum):
    BEFORE = "before"
    AFTER = "after"
    ALL = "all"
    NONE = "none"


@dataclass(frozen=True)
class DistanceFilter:
    distance_m: float
    count: int


def marker_from_frame(
    trajectory: Sequence[TrajectoryPoint],
    frame_index: int,
    session_name: str = "",
) -> Optional[ObjectMarker]:
    """Place a marker on the sample with `frame_index`, or return None if the frame is absent."""
    for p in trajectory:
        if p.frame_index == frame_index:
            return ObjectMarker(
                frame_index=p.frame_index,
                latitude=float(p.latitude),
                longitude=float(p.longitude),
                timestamp=p.timestamp,
                session_name=session_name,
            )
    return None


def distances_to_nearest_marker(
    trajectory: Sequence[TrajectoryPoint],
    markers: Sequence[ObjectMarker],
) -> Tuple[float, ...]:
    if not markers:
        raise ValueError("At least one marker is required")
    return tuple(min(distance_between(p, m) for m in markers) for p in trajectory)


def count_within_distances(
    distances: Sequence[float],
    ladder: Sequence[float] = DEFAULT_TARGET_DISTANCES_M,
) -> Tuple[DistanceFilter, ...]:
    return tuple(
        DistanceFilter(distance_m=float(limit), count=sum(1 for d in distances if d <= limit))
        for limit in sorted(ladder)
    )


def filter_by_distance(
    trajectory: Sequence[TrajectoryPoint],
    markers: Sequence[ObjectMarker],
    max_distance_m: float,
) -> Tuple[TrajectoryPoint, ...]:
    distances = distances_to_nearest_marker(trajectory, markers)
    return tuple(p for p, d in zip(trajectory, distances) if d <= max_distance_m)


def filter_by_marker_time(
    trajectory: Sequence[TrajectoryPoint],
    markers: Sequence[ObjectMarker],
    mode: TimeFilter,
) -> Tuple[TrajectoryPoint, ...]:
    """Keep samples before or after the earliest marker time.

    Samples with an invalid timestamp are dropped whenever a reference time
    exists. Without any valid marker time the trajectory is returned as-is.
    """
    mode = TimeFilter(mode)
    if mode is TimeFilter.NONE:
        return ()
    marker_times = [t for t in (try_parse_timestamp(m.timestamp) for m in markers) if t is not None]
    if not marker_times:
        if markers:
            logger.info("No marker carries a valid timestamp; time filter '%s' not applied", mode.value)
        return tuple(trajectory)

    reference = min(marker_times)
    out = []
    for p in trajectory:
        t = try_parse_timestamp(p.timestamp)
        if t is None:
            continue
        if mode is TimeFilter.BEFORE and not t < reference:
            continue
        if mode is TimeFilter.AFTER and not t >= reference:
            continue
        out.append(p)
    return tuple(out)
