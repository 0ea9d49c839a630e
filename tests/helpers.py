from __future__ import annotations

from typing import List, Optional, Sequence

from trackanalysis.geometry.geodesy import destination_point
from trackanalysis.utils.types import TrajectoryPoint

ORIGIN = (52.0, 4.0)
BASE_MS = 1737886091800


def line_points(
    distances_m: Sequence[float],
    bearing_deg: float = 0.0,
    origin=ORIGIN,
    frame_step: int = 1,
    timestamps: Optional[Sequence[object]] = None,
) -> List[TrajectoryPoint]:
    """Points at the given distances from `origin` along one bearing, frames 0, step, 2*step..."""
    out = []
    for i, d in enumerate(distances_m):
        lat, lon = destination_point(origin[0], origin[1], d, bearing_deg)
        ts = timestamps[i] if timestamps is not None else None
        out.append(TrajectoryPoint(frame_index=i * frame_step, timestamp=ts, latitude=lat, longitude=lon))
    return out
