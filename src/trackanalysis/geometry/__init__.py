from .geodesy import (
    EARTH_RADIUS_M,
    bearing_between,
    destination_point,
    distance_between,
    haversine_distance_m,
    initial_bearing_deg,
    is_moving_toward,
    is_within_radius,
)

__all__ = [
    "EARTH_RADIUS_M",
    "bearing_between",
    "destination_point",
    "distance_between",
    "haversine_distance_m",
    "initial_bearing_deg",
    "is_moving_toward",
    "is_within_radius",
]
