import math

from trackanalysis.geometry.geodesy import (
    EARTH_RADIUS_M,
    destination_point,
    haversine_distance_m,
    initial_bearing_deg,
    is_moving_toward,
    is_within_radius,
)
from trackanalysis.utils.types import ObjectMarker, TrajectoryPoint

SAMPLES = [
    (52.0, 4.0),
    (-33.86, 151.21),
    (0.0, 0.0),
    (89.9, -179.9),
    (40.7128, -74.006),
]


def test_distance_zero_for_identical_points() -> None:
    for lat, lon in SAMPLES:
        assert haversine_distance_m(lat, lon, lat, lon) == 0.0


def test_distance_symmetric() -> None:
    for a in SAMPLES:
        for b in SAMPLES:
            d1 = haversine_distance_m(a[0], a[1], b[0], b[1])
            d2 = haversine_distance_m(b[0], b[1], a[0], a[1])
            assert abs(d1 - d2) < 1e-6


def test_one_degree_of_latitude() -> None:
    d = haversine_distance_m(0.0, 0.0, 1.0, 0.0)
    assert abs(d - EARTH_RADIUS_M * math.pi / 180.0) < 1e-6


def test_bearing_range_and_cardinals() -> None:
    for a in SAMPLES:
        for b in SAMPLES:
            brg = initial_bearing_deg(a[0], a[1], b[0], b[1])
            assert 0.0 <= brg < 360.0
    assert abs(initial_bearing_deg(0.0, 0.0, 1.0, 0.0) - 0.0) < 1e-9
    assert abs(initial_bearing_deg(0.0, 0.0, 0.0, 1.0) - 90.0) < 1e-9
    assert abs(initial_bearing_deg(0.0, 0.0, -1.0, 0.0) - 180.0) < 1e-9
    assert abs(initial_bearing_deg(0.0, 0.0, 0.0, -1.0) - 270.0) < 1e-9


def test_destination_point_round_trip() -> None:
    lat, lon = destination_point(52.0, 4.0, 150.0, 60.0)
    assert abs(haversine_distance_m(52.0, 4.0, lat, lon) - 150.0) < 1e-6
    assert abs(initial_bearing_deg(52.0, 4.0, lat, lon) - 60.0) < 1e-4


def test_radius_and_moving_toward() -> None:
    lat, lon = destination_point(52.0, 4.0, 40.0, 0.0)
    assert is_within_radius(52.0, 4.0, lat, lon, 50.0)
    assert not is_within_radius(52.0, 4.0, lat, lon, 30.0)

    target = ObjectMarker(frame_index=0, latitude=52.0, longitude=4.0)
    far = TrajectoryPoint(frame_index=0, timestamp=None, latitude=lat, longitude=lon)
    near_lat, near_lon = destination_point(52.0, 4.0, 20.0, 0.0)
    near = TrajectoryPoint(frame_index=1, timestamp=None, latitude=near_lat, longitude=near_lon)
    assert is_moving_toward(near, far, target)
    assert not is_moving_toward(far, near, target)
