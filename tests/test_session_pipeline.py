import pytest

from helpers import BASE_MS, ORIGIN, line_points
from trackanalysis.approach.filters import marker_from_frame
from trackanalysis.geometry.geodesy import destination_point
from trackanalysis.output.sinks import JsonlSink, ResultSinks
from trackanalysis.pipeline.session import SessionAnalyzer, SessionAnalyzerConfig
from trackanalysis.utils.types import ObjectMarker


def _session():
    # 1 fps, 10 m/s along a straight line, 300 m long
    return line_points([10.0 * i for i in range(31)], timestamps=[BASE_MS + 1000 * i for i in range(31)])


def test_analyze_session() -> None:
    pts = _session()
    # 3 m past the last sample, so no distance lands on a filter boundary
    lat, lon = destination_point(ORIGIN[0], ORIGIN[1], 303.0, 0.0)
    marker = ObjectMarker(frame_index=30, latitude=lat, longitude=lon, timestamp=BASE_MS + 30_000, session_name="s1")
    analyzer = SessionAnalyzer(SessionAnalyzerConfig.from_dict({"frame_rate": 1}))
    result = analyzer.analyze(pts, [marker], name="s1")

    assert abs(result.profile.total_distance_m - 300.0) < 1e-6
    assert abs(result.profile.max_speed_kmh - 36.0) < 1e-6
    assert len(result.smoothed) == len(pts)
    assert result.maneuvers.hard_braking == ()
    # The first sample jumps from standstill to 10 m/s.
    assert [(s.start_index, s.end_index) for s in result.maneuvers.rapid_acceleration] == [(1, 1)]

    aps = result.approach_points[30]
    assert [a.target_distance_m for a in aps] == [50.0, 100.0, 150.0, 200.0, 250.0]
    assert [a.frame_index for a in aps] == [25, 20, 15, 10, 5]
    assert abs(aps[0].time_offset_s - 5.0) < 1e-9
    assert [f.count for f in result.distance_filters] == [5, 10, 15, 20, 25]


def test_analyze_without_markers() -> None:
    result = SessionAnalyzer().analyze(_session())
    assert result.approach_points == {}
    assert result.distance_filters == ()


def test_export_writes_every_point(tmp_path) -> None:
    pts = _session()
    marker = marker_from_frame(pts, 30)
    analyzer = SessionAnalyzer(SessionAnalyzerConfig(frame_rate=1.0))
    result = analyzer.analyze(pts, [marker])
    n = analyzer.export(result, [marker], ResultSinks(csv=None, jsonl=JsonlSink(str(tmp_path / "a.jsonl"))))
    assert n == 5
    assert len((tmp_path / "a.jsonl").read_text(encoding="utf-8").splitlines()) == 5


def test_config_from_yaml(tmp_path) -> None:
    path = tmp_path / "analysis.yaml"
    path.write_text(
        "frame_rate: 18\n"
        "smoothing:\n  method: rolling\n  window_size: 5\n"
        "approach:\n  target_distances_m: [25, 75]\n",
        encoding="utf-8",
    )
    cfg = SessionAnalyzerConfig.from_yaml(str(path))
    assert cfg.frame_rate == 18.0
    assert cfg.smoothing.method == "rolling"
    assert cfg.smoothing.window_size == 5
    assert cfg.approach.target_distances_m == (25.0, 75.0)
    assert cfg.maneuvers.sharp_turn_deg == 30.0


def test_config_rejects_bad_frame_rate() -> None:
    with pytest.raises(ValueError):
        SessionAnalyzerConfig.from_dict({"frame_rate": 0})
    with pytest.raises(ValueError):
        SessionAnalyzerConfig.from_dict({"frame_rate": -30})


def test_config_from_yaml_rejects_misspelled_section(tmp_path) -> None:
    path = tmp_path / "analysis.yaml"
    path.write_text("frame_rate: 30\nmaneuver:\n  sharp_turn_deg: 45\n", encoding="utf-8")
    with pytest.raises(ValueError, match="maneuver"):
        SessionAnalyzerConfig.from_yaml(str(path))
