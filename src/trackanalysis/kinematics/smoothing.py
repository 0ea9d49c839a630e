from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from trackanalysis.utils.types import SmoothedPoint, TrajectoryPoint

SMOOTHING_METHODS = {"rolling", "kalman", "none"}


@dataclass(frozen=True)
class SmoothingConfig:
    method: str = "kalman"
    window_size: int = 3
    process_noise: float = 1e-5
    measurement_noise: float = 5e-5
    error_covariance: float = 1.0

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "SmoothingConfig":
        method = str(d.get("method", "kalman")).lower()
        if method not in SMOOTHING_METHODS:
            raise ValueError("smoothing.method must be one of: rolling, kalman, none")
        window = int(d.get("window_size", 3))
        if window < 1:
            raise ValueError(f"smoothing.window_size must be >= 1, got {window}")
        kalman = d.get("kalman", {}) or {}
        return SmoothingConfig(
            method=method,
            window_size=window,
            process_noise=float(kalman.get("process_noise", 1e-5)),
            measurement_noise=float(kalman.get("measurement_noise", 5e-5)),
            error_covariance=float(kalman.get("error_covariance", 1.0)),
        )


def _window_means(arr: np.ndarray, window_size: int) -> np.ndarray:
    """Centered, bounds-clipped window means for the interior of `arr`; ends copied."""
    n = arr.shape[0]
    out = arr.astype(np.float64).copy()
    half = int(window_size) // 2
    csum = np.concatenate([[0.0], np.cumsum(arr, dtype=np.float64)])
    idx = np.arange(1, n - 1)
    lo = np.maximum(0, idx - half)
    hi = np.minimum(n - 1, idx + half)
    out[1 : n - 1] = (csum[hi + 1] - csum[lo]) / (hi - lo + 1)
    return out


def smooth_values(values: Sequence[float], window_size: int = 3) -> Tuple[float, ...]:
    if len(values) <= window_size:
        return tuple(float(v) for v in values)
    arr = np.asarray(values, dtype=np.float64)
    return tuple(float(v) for v in _window_means(arr, window_size))


def _to_smoothed(p: TrajectoryPoint) -> SmoothedPoint:
    speed = p.kinematics.speed_kmh if p.kinematics is not None else None
    return SmoothedPoint(
        frame_index=p.frame_index,
        timestamp=p.timestamp,
        latitude=float(p.latitude),
        longitude=float(p.longitude),
        speed_kmh=speed,
    )


def rolling_window_smooth(points: Sequence[TrajectoryPoint], window_size: int = 3) -> Tuple[SmoothedPoint, ...]:
    """Centered moving average over latitude, longitude and speed.

    The first and last points pass through unchanged, and the sequence is
    returned as-is when it is not longer than the window. Speed is averaged
    for points that carry kinematics; a neighbour without kinematics counts
    as standing still.
    """
    if len(points) <= window_size:
        return tuple(_to_smoothed(p) for p in points)

    lat = _window_means(np.asarray([p.latitude for p in points], dtype=np.float64), window_size)
    lon = _window_means(np.asarray([p.longitude for p in points], dtype=np.float64), window_size)
    speeds = _window_means(
        np.asarray([p.kinematics.speed_kmh if p.kinematics is not None else 0.0 for p in points], dtype=np.float64),
        window_size,
    )

    out: List[SmoothedPoint] = [_to_smoothed(points[0])]
    for i in range(1, len(points) - 1):
        p = points[i]
        out.append(
            SmoothedPoint(
                frame_index=p.frame_index,
                timestamp=p.timestamp,
                latitude=float(lat[i]),
                longitude=float(lon[i]),
                speed_kmh=float(speeds[i]) if p.kinematics is not None else None,
            )
        )
    out.append(_to_smoothed(points[-1]))
    return tuple(out)


@dataclass
class ScalarKalmanFilter:
    """Random-walk Kalman filter for one coordinate axis.

    There is no motion model: the state is a static position whose
    uncertainty grows by `process_noise` between measurements, so the
    filter can only smooth, never extrapolate.
    """

    process_noise: float = 1e-5
    measurement_noise: float = 5e-5
    error_covariance: float = 1.0
    _x: Optional[float] = None
    _P: Optional[float] = None

    def update(self, value: float) -> float:
        z = float(value)
        if self._x is None or self._P is None:
            self._x = z
            self._P = float(self.error_covariance)
            return z

        # Predict
        self._P = self._P + float(self.process_noise)
        # Update
        k = self._P / (self._P + float(self.measurement_noise))
        self._x = self._x + k * (z - self._x)
        self._P = (1.0 - k) * self._P
        return float(self._x)


def kalman_smooth(points: Sequence[TrajectoryPoint], cfg: Optional[SmoothingConfig] = None) -> Tuple[SmoothedPoint, ...]:
    if len(points) <= 2:
        return tuple(_to_smoothed(p) for p in points)
    cfg = cfg or SmoothingConfig()
    kf_lat = ScalarKalmanFilter(cfg.process_noise, cfg.measurement_noise, cfg.error_covariance)
    kf_lon = ScalarKalmanFilter(cfg.process_noise, cfg.measurement_noise, cfg.error_covariance)
    out: List[SmoothedPoint] = []
    for p in points:
        base = _to_smoothed(p)
        out.append(
            SmoothedPoint(
                frame_index=base.frame_index,
                timestamp=base.timestamp,
                latitude=kf_lat.update(p.latitude),
                longitude=kf_lon.update(p.longitude),
                speed_kmh=base.speed_kmh,
            )
        )
    return tuple(out)


def smooth_trajectory(points: Sequence[TrajectoryPoint], cfg: SmoothingConfig) -> Tuple[SmoothedPoint, ...]:
    if cfg.method == "rolling":
        return rolling_window_smooth(points, cfg.window_size)
    if cfg.method == "kalman":
        return kalman_smooth(points, cfg)
    return tuple(_to_smoothed(p) for p in points)
