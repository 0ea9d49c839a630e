from .filters import (
    DistanceFilter,
    TimeFilter,
    count_within_distances,
    distances_to_nearest_marker,
    filter_by_distance,
    filter_by_marker_time,
    marker_from_frame,
)
from .locator import DEFAULT_TARGET_DISTANCES_M, ApproachConfig, find_approach_points

__all__ = [
    "DEFAULT_TARGET_DISTANCES_M",
    "ApproachConfig",
    "DistanceFilter",
    "TimeFilter",
    "count_within_distances",
    "distances_to_nearest_marker",
    "filter_by_distance",
    "filter_by_marker_time",
    "find_approach_points",
    "marker_from_frame",
]
