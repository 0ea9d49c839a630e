from __future__ import annotations

from trackanalysis.utils.config import positive_float

MIN_DURATION_S = 0.001


def frame_duration_s(frame_a: float, frame_b: float, frame_rate: float) -> float:
    fps = positive_float(frame_rate, "frame_rate")
    return float(abs(float(frame_b) - float(frame_a)) / fps)


def speed_mps(distance_m: float, duration_s: float) -> float:
    if duration_s < MIN_DURATION_S:
        return 0.0
    return float(distance_m / duration_s)


def acceleration_mps2(v_prev_mps: float, v_curr_mps: float, duration_s: float) -> float:
    if duration_s <= 0.0:
        return 0.0
    return float((v_curr_mps - v_prev_mps) / duration_s)


def bearing_change_deg(prev_bearing_deg: float, bearing_deg: float) -> float:
    """Unsigned change between two bearings, folded into [0, 180]."""
    d = abs(float(bearing_deg) - float(prev_bearing_deg)) % 360.0
    if d > 180.0:
        d = 360.0 - d
    return float(d)
