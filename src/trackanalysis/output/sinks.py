from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from trackanalysis.utils.types import ApproachPoint, ObjectMarker


def _ensure_parent(path: str) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def approach_point_record(marker: ObjectMarker, ap: ApproachPoint) -> Dict[str, Any]:
    return {
        "session_name": marker.session_name,
        "marker_frame_index": marker.frame_index,
        "marker_latitude": marker.latitude,
        "marker_longitude": marker.longitude,
        **asdict(ap),
    }


@dataclass
class ApproachPointCsvSink:
    path: str
    _f: Optional[object] = None
    _w: Optional[csv.DictWriter] = None

    def open(self) -> None:
        _ensure_parent(self.path)
        self._f = open(self.path, "w", newline="", encoding="utf-8")
        self._w = csv.DictWriter(
            self._f,
            fieldnames=[
                "session_name",
                "marker_frame_index",
                "target_distance_m",
                "frame_index",
                "latitude",
                "longitude",
                "timestamp_ms",
                "distance_m",
                "time_offset_s",
                "bearing_to_marker_deg",
                "speed_kmh",
                "interpolated",
            ],
        )
        self._w.writeheader()

    def write(self, marker: ObjectMarker, ap: ApproachPoint) -> None:
        if self._w is None:
            raise RuntimeError("ApproachPointCsvSink not opened")
        self._w.writerow(
            {
                "session_name": marker.session_name,
                "marker_frame_index": marker.frame_index,
                "target_distance_m": ap.target_distance_m,
                "frame_index": ap.frame_index,
                "latitude": ap.latitude,
                "longitude": ap.longitude,
                "timestamp_ms": "" if ap.timestamp_ms is None else ap.timestamp_ms,
                "distance_m": ap.distance_m,
                "time_offset_s": ap.time_offset_s,
                "bearing_to_marker_deg": ap.bearing_to_marker_deg,
                "speed_kmh": ap.speed_kmh,
                "interpolated": int(ap.interpolated),
            }
        )

    def close(self) -> None:
        if self._f is not None:
            self._f.close()
        self._f = None
        self._w = None


@dataclass
class JsonlSink:
    path: str
    _f: Optional[object] = None

    def open(self) -> None:
        _ensure_parent(self.path)
        self._f = open(self.path, "w", encoding="utf-8")

    def write(self, marker: ObjectMarker, ap: ApproachPoint) -> None:
        if self._f is None:
            raise RuntimeError("JsonlSink not opened")
        self._f.write(json.dumps(approach_point_record(marker, ap), ensure_ascii=False) + "\n")

    def close(self) -> None:
        if self._f is not None:
            self._f.close()
        self._f = None


@dataclass
class ResultSinks:
    csv: Optional[ApproachPointCsvSink]
    jsonl: Optional[JsonlSink]

    def open(self) -> None:
        if self.csv is not None:
            self.csv.open()
        if self.jsonl is not None:
            self.jsonl.open()

    def write(self, marker: ObjectMarker, ap: ApproachPoint) -> None:
        if self.csv is not None:
            self.csv.write(marker, ap)
        if self.jsonl is not None:
            self.jsonl.write(marker, ap)

    def close(self) -> None:
        if self.csv is not None:
            self.csv.close()
        if self.jsonl is not None:
            self.jsonl.close()
