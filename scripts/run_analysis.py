from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from trackanalysis.approach.filters import marker_from_frame
from trackanalysis.io.csv_reader import read_trajectory_csv
from trackanalysis.output.sinks import ApproachPointCsvSink, JsonlSink, ResultSinks
from trackanalysis.pipeline.session import CONFIG_SECTIONS, SessionAnalyzer, SessionAnalyzerConfig
from trackanalysis.timing.timestamps import format_time_difference
from trackanalysis.utils.config import load_yaml, resolve_path
from trackanalysis.utils.logging import setup_logging


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--csv", required=True, help="Clip CSV (datetime_timestamp, frameId, lat, long)")
    ap.add_argument("--config", default="configs/analysis.yaml", help="Analysis YAML")
    ap.add_argument("--marker-frame", type=int, action="append", default=[], help="Frame index to place an object marker on")
    ap.add_argument("--frame-rate", type=float, default=None, help="Override frame_rate from the config")
    ap.add_argument("--out-jsonl", default=None)
    ap.add_argument("--out-approach-csv", default=None)
    ap.add_argument("--log-level", default="INFO")
    ap.add_argument("--log-file", default=None)
    args = ap.parse_args()

    base_dir = os.getcwd()
    setup_logging(level=args.log_level, log_file=args.log_file)

    config_path = resolve_path(args.config, base_dir)
    raw_cfg = load_yaml(config_path, allowed_keys=CONFIG_SECTIONS) if os.path.exists(config_path) else {}
    if args.frame_rate is not None:
        raw_cfg["frame_rate"] = args.frame_rate
    cfg = SessionAnalyzerConfig.from_dict(raw_cfg)

    loaded = read_trajectory_csv(resolve_path(args.csv, base_dir))
    markers = []
    for frame in args.marker_frame:
        m = marker_from_frame(loaded.points, frame, session_name=loaded.name)
        if m is None:
            print(f"Frame {frame} not found in {loaded.name}; marker skipped")
            continue
        markers.append(m)

    analyzer = SessionAnalyzer(cfg)
    result = analyzer.analyze(loaded.points, markers, name=loaded.name)

    print(f"Session {loaded.name}: {len(loaded.points)} points ({loaded.invalid_row_count} invalid rows skipped)")
    print(
        f"  distance {result.profile.total_distance_m:.1f} m, "
        f"max {result.profile.max_speed_kmh:.1f} km/h, avg {result.profile.average_speed_kmh:.1f} km/h"
    )
    print(
        f"  maneuvers: {len(result.maneuvers.hard_braking)} hard braking, "
        f"{len(result.maneuvers.rapid_acceleration)} rapid acceleration, "
        f"{len(result.maneuvers.sharp_turns)} sharp turns"
    )
    for m in markers:
        points = result.approach_points.get(m.frame_index, ())
        print(f"  marker at frame {m.frame_index}: {len(points)} approach points")
        for p in points:
            kind = "interpolated" if p.interpolated else "exact"
            print(
                f"    {p.target_distance_m:.0f} m: frame {p.frame_index}, {p.distance_m:.1f} m away, "
                f"{format_time_difference(-p.time_offset_s)} object, {p.speed_kmh:.1f} km/h ({kind})"
            )

    if args.out_jsonl or args.out_approach_csv:
        sinks = ResultSinks(
            csv=ApproachPointCsvSink(resolve_path(args.out_approach_csv, base_dir)) if args.out_approach_csv else None,
            jsonl=JsonlSink(resolve_path(args.out_jsonl, base_dir)) if args.out_jsonl else None,
        )
        n = analyzer.export(result, markers, sinks)
        print(f"Wrote {n} approach points")


if __name__ == "__main__":
    main()
