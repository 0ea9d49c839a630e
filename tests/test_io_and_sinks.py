import csv
import json

import pytest

from helpers import ORIGIN, line_points
from trackanalysis.approach.locator import find_approach_points
from trackanalysis.io.csv_reader import read_trajectory_csv
from trackanalysis.output.sinks import ApproachPointCsvSink, JsonlSink, ResultSinks
from trackanalysis.utils.types import ObjectMarker


def test_read_trajectory_csv(tmp_path) -> None:
    path = tmp_path / "clip_01.csv"
    path.write_text(
        "datetime_timestamp,frameId,lat,long\n"
        "1737886091800,1,52.0,4.0\n"
        "N/A,2,52.0001,4.0\n"
        "1737886091900,3,,4.0\n"
        "1737886092000,,52.0002,abc\n"
        "2025-01-26T10:08:12.100Z,4,52.0003,4.0001\n",
        encoding="utf-8",
    )
    res = read_trajectory_csv(str(path))
    assert res.name == "clip_01"
    assert res.invalid_row_count == 2
    assert [p.frame_index for p in res.points] == [1, 2, 4]
    assert res.points[1].timestamp == "N/A"
    assert res.points[2].longitude == 4.0001


def test_read_trajectory_csv_missing_frame_defaults_to_zero(tmp_path) -> None:
    path = tmp_path / "clip.csv"
    path.write_text("datetime_timestamp,frameId,lat,long\n1737886091800,,52.0,4.0\n", encoding="utf-8")
    assert read_trajectory_csv(str(path)).points[0].frame_index == 0


def test_read_trajectory_csv_requires_columns(tmp_path) -> None:
    path = tmp_path / "bad.csv"
    path.write_text("time,lat,lon\n1,2,3\n", encoding="utf-8")
    with pytest.raises(ValueError, match="frameId"):
        read_trajectory_csv(str(path))


def test_sinks_write_approach_points(tmp_path) -> None:
    pts = line_points([100.0 - 10.0 * i for i in range(11)], bearing_deg=180.0)
    marker = ObjectMarker(frame_index=10, latitude=ORIGIN[0], longitude=ORIGIN[1], session_name="clip")
    aps = find_approach_points(pts, marker, 30.0)

    sinks = ResultSinks(
        csv=ApproachPointCsvSink(str(tmp_path / "out" / "approach.csv")),
        jsonl=JsonlSink(str(tmp_path / "out" / "approach.jsonl")),
    )
    sinks.open()
    for ap in aps:
        sinks.write(marker, ap)
    sinks.close()

    with open(tmp_path / "out" / "approach.csv", newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [float(r["target_distance_m"]) for r in rows] == [50.0, 100.0]
    assert rows[0]["interpolated"] == "0"
    assert rows[0]["timestamp_ms"] == ""

    lines = (tmp_path / "out" / "approach.jsonl").read_text(encoding="utf-8").splitlines()
    objs = [json.loads(line) for line in lines]
    assert objs[1]["marker_frame_index"] == 10
    assert objs[1]["session_name"] == "clip"
    assert objs[1]["frame_index"] == 0


def test_sink_requires_open(tmp_path) -> None:
    sink = JsonlSink(str(tmp_path / "x.jsonl"))
    pts = line_points([50.0, 0.0], bearing_deg=180.0)
    marker = ObjectMarker(frame_index=1, latitude=ORIGIN[0], longitude=ORIGIN[1])
    ap = find_approach_points(pts, marker, 30.0)[0]
    with pytest.raises(RuntimeError):
        sink.write(marker, ap)
