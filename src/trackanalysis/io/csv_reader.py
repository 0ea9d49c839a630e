from __future__ import annotations

import csv
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Tuple

from trackanalysis.utils.types import TrajectoryPoint

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("datetime_timestamp", "frameId", "lat", "long")


@dataclass(frozen=True)
class CsvLoadResult:
    name: str
    points: Tuple[TrajectoryPoint, ...]
    invalid_row_count: int


def _to_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        v = float(text)
    except ValueError:
        return None
    return v if math.isfinite(v) else None


def _to_frame_index(value: Any) -> int:
    v = _to_float(value)
    return int(v) if v is not None else 0


def read_trajectory_csv(path: str) -> CsvLoadResult:
    """Read one clip CSV into trajectory points.

    Rows with missing or non-numeric coordinates are skipped and counted.
    Timestamps are kept raw; deciding whether they parse is left to the
    analysis code.
    """
    p = Path(path)
    points: List[TrajectoryPoint] = []
    invalid = 0
    with open(p, "r", newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        missing = [c for c in REQUIRED_COLUMNS if c not in (reader.fieldnames or [])]
        if missing:
            raise ValueError(f"CSV {path} is missing required columns: {', '.join(missing)}")
        for row in reader:
            if not any((v or "").strip() for v in row.values() if isinstance(v, str)):
                continue
            lat = _to_float(row.get("lat"))
            lon = _to_float(row.get("long"))
            if lat is None or lon is None:
                invalid += 1
                continue
            raw_ts = row.get("datetime_timestamp")
            points.append(
                TrajectoryPoint(
                    frame_index=_to_frame_index(row.get("frameId")),
                    timestamp=raw_ts.strip() if isinstance(raw_ts, str) else raw_ts,
                    latitude=lat,
                    longitude=lon,
                )
            )

    logger.info("Loaded %d points from %s (%d invalid rows skipped)", len(points), p.name, invalid)
    return CsvLoadResult(name=p.stem, points=tuple(points), invalid_row_count=invalid)
