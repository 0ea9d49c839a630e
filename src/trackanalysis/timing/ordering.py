from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from trackanalysis.timing.timestamps import try_parse_timestamp
from trackanalysis.utils.types import ObjectMarker, TrajectoryPoint

logger = logging.getLogger(__name__)


class OrderingBasis(str, Enum):
    TIMESTAMP = "timestamp"
    FRAME_INDEX = "frame_index"


@dataclass(frozen=True)
class OrderedTrajectory:
    basis: OrderingBasis
    points: Tuple[TrajectoryPoint, ...]
    keys: Tuple[float, ...]
    epoch_ms: Tuple[Optional[float], ...]
    marker_key: Optional[float] = None
    marker_epoch_ms: Optional[float] = None


def sort_by_frame_index(points: Sequence[TrajectoryPoint]) -> Tuple[TrajectoryPoint, ...]:
    return tuple(sorted(points, key=lambda p: p.frame_index))


def resolve_ordering(points: Sequence[TrajectoryPoint], marker: Optional[ObjectMarker] = None) -> OrderedTrajectory:
    """Order a trajectory by timestamp when every involved timestamp parses, else by frame index.

    The choice is made once for the marker and all points together, so keys of
    the two kinds are never compared with each other.
    """
    parsed: List[Optional[float]] = [try_parse_timestamp(p.timestamp) for p in points]
    marker_ms = try_parse_timestamp(marker.timestamp) if marker is not None else None
    marker_ok = marker is None or marker_ms is not None
    use_time = bool(points) and marker_ok and all(t is not None for t in parsed)

    if use_time:
        order = sorted(range(len(points)), key=lambda i: (parsed[i], points[i].frame_index))
        basis = OrderingBasis.TIMESTAMP
        keys = tuple(float(parsed[i]) for i in order)
        marker_key = marker_ms
    else:
        order = sorted(range(len(points)), key=lambda i: points[i].frame_index)
        basis = OrderingBasis.FRAME_INDEX
        keys = tuple(float(points[i].frame_index) for i in order)
        marker_key = float(marker.frame_index) if marker is not None else None

    logger.debug("Ordering %d points by %s", len(points), basis.value)
    return OrderedTrajectory(
        basis=basis,
        points=tuple(points[i] for i in order),
        keys=keys,
        epoch_ms=tuple(parsed[i] for i in order),
        marker_key=marker_key,
        marker_epoch_ms=marker_ms,
    )
