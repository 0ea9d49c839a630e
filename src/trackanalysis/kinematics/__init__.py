from .engine import annotate_kinematics, between_points, speed_profile
from .reliability import ReliabilityConfig, reliability_score
from .smoothing import SmoothingConfig, kalman_smooth, rolling_window_smooth, smooth_trajectory
from .units import kmh_to_mps, mps_to_kmh, mps_to_mph

__all__ = [
    "ReliabilityConfig",
    "SmoothingConfig",
    "annotate_kinematics",
    "between_points",
    "kalman_smooth",
    "kmh_to_mps",
    "mps_to_kmh",
    "mps_to_mph",
    "reliability_score",
    "rolling_window_smooth",
    "smooth_trajectory",
    "speed_profile",
]
