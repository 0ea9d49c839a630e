import pytest

from helpers import BASE_MS, ORIGIN, line_points
from trackanalysis.approach.locator import ApproachConfig, find_approach_points
from trackanalysis.geometry.geodesy import haversine_distance_m
from trackanalysis.kinematics.engine import annotate_kinematics
from trackanalysis.utils.types import ObjectMarker

MARKER = ObjectMarker(frame_index=10, latitude=ORIGIN[0], longitude=ORIGIN[1])


def _approach(timestamps=None):
    # 100, 90, ..., 0 m south of the marker, heading north into it
    return line_points([100.0 - 10.0 * i for i in range(11)], bearing_deg=180.0, timestamps=timestamps)


def test_exact_matches_on_default_ladder() -> None:
    out = find_approach_points(_approach(), MARKER, 30.0)
    assert [a.target_distance_m for a in out] == [50.0, 100.0]
    assert all(not a.interpolated for a in out)
    assert out[0].frame_index == 5
    assert out[1].frame_index == 0
    assert abs(out[0].time_offset_s - 5.0 / 30.0) < 1e-12
    assert abs(out[0].bearing_to_marker_deg - 0.0) < 1e-6 or abs(out[0].bearing_to_marker_deg - 360.0) < 1e-6


def test_interpolated_point_lies_on_target_distance() -> None:
    # The 80 m and 70 m samples are each exactly 5 m from 75 m, outside the default tolerance.
    out = find_approach_points(_approach(), MARKER, 30.0, ApproachConfig(target_distances_m=(50.0, 75.0, 100.0)))
    assert [a.target_distance_m for a in out] == [50.0, 75.0, 100.0]
    assert not out[0].interpolated and not out[2].interpolated
    ap = out[1]
    assert ap.interpolated
    d = haversine_distance_m(ap.latitude, ap.longitude, MARKER.latitude, MARKER.longitude)
    assert abs(d - 75.0) <= 75.0 * 1e-6
    assert abs(ap.distance_m - 75.0) <= 75.0 * 1e-6
    assert ap.frame_index in (2, 3)


def test_interpolates_timestamp_and_speed() -> None:
    ts = [BASE_MS + 1000 * i for i in range(11)]
    pts = annotate_kinematics(_approach(timestamps=ts), 1.0)
    marker = ObjectMarker(frame_index=10, latitude=ORIGIN[0], longitude=ORIGIN[1], timestamp=BASE_MS + 10_000)
    out = find_approach_points(pts, marker, 1.0, ApproachConfig(target_distances_m=(75.0,)))
    ap = out[0]
    assert ap.timestamp_ms is not None
    assert abs(ap.timestamp_ms - (BASE_MS + 2500)) < 1e-3
    assert abs(ap.time_offset_s - 7.5) < 1e-6
    assert abs(ap.speed_kmh - 36.0) < 1e-4


def test_unmatched_targets_are_absent() -> None:
    out = find_approach_points(_approach(), MARKER, 30.0, ApproachConfig(target_distances_m=(500.0, 50.0)))
    assert [a.target_distance_m for a in out] == [50.0]


def test_only_history_before_marker_is_used() -> None:
    # Samples after frame 3 reach 50 m but lie after the marker.
    marker = ObjectMarker(frame_index=3, latitude=ORIGIN[0], longitude=ORIGIN[1])
    out = find_approach_points(_approach(), marker, 30.0)
    assert [a.target_distance_m for a in out] == [100.0]
    assert out[0].frame_index == 0


def test_frame_fallback_when_marker_time_invalid() -> None:
    ts = [BASE_MS + 1000 * i for i in range(11)]
    marker = ObjectMarker(frame_index=10, latitude=ORIGIN[0], longitude=ORIGIN[1], timestamp="N/A")
    out = find_approach_points(_approach(timestamps=ts), marker, 30.0)
    assert [a.target_distance_m for a in out] == [50.0, 100.0]
    assert abs(out[0].time_offset_s - 5.0 / 30.0) < 1e-12


def test_timestamp_order_restricts_by_time() -> None:
    ts = [BASE_MS + 1000 * i for i in range(11)]
    marker = ObjectMarker(frame_index=10, latitude=ORIGIN[0], longitude=ORIGIN[1], timestamp=BASE_MS + 4000)
    out = find_approach_points(_approach(timestamps=ts), marker, 30.0)
    assert [a.target_distance_m for a in out] == [100.0]
    assert abs(out[0].time_offset_s - 4.0) < 1e-9


def test_input_not_mutated_and_empty_ok() -> None:
    pts = _approach()
    before = list(pts)
    find_approach_points(pts, MARKER, 30.0)
    assert pts == before
    assert find_approach_points([], MARKER, 30.0) == ()


def test_approach_config_from_dict() -> None:
    cfg = ApproachConfig.from_dict({"target_distances_m": [100, 50, 100], "match_tolerance_m": 2})
    assert cfg.target_distances_m == (50.0, 100.0)
    assert cfg.match_tolerance_m == 2.0
    assert ApproachConfig.from_dict({}).target_distances_m == (50.0, 100.0, 150.0, 200.0, 250.0)
    with pytest.raises(ValueError):
        ApproachConfig.from_dict({"target_distances_m": [0, 50]})


def test_sample_on_tolerance_edge_is_not_an_exact_match() -> None:
    # 55 m sample and a 50 m target: round-off must not pull it inside the 5 m tolerance.
    pts = line_points([65.0, 55.0, 45.0], bearing_deg=180.0)
    marker = ObjectMarker(frame_index=2, latitude=ORIGIN[0], longitude=ORIGIN[1])
    out = find_approach_points(pts, marker, 30.0, ApproachConfig(target_distances_m=(50.0,)))
    assert len(out) == 1
    assert out[0].interpolated
    assert abs(out[0].distance_m - 50.0) <= 50.0 * 1e-6
