from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from trackanalysis.approach.filters import DistanceFilter, count_within_distances, distances_to_nearest_marker
from trackanalysis.approach.locator import ApproachConfig, find_approach_points
from trackanalysis.kinematics.engine import annotate_kinematics, speed_profile
from trackanalysis.kinematics.reliability import ReliabilityConfig
from trackanalysis.kinematics.smoothing import SmoothingConfig, smooth_trajectory
from trackanalysis.maneuvers.detector import ManeuverConfig, detect_maneuvers
from trackanalysis.output.sinks import ResultSinks
from trackanalysis.utils.config import load_yaml, positive_float
from trackanalysis.utils.types import ApproachPoint, ManeuverSet, ObjectMarker, SmoothedPoint, SpeedProfile, TrajectoryPoint

logger = logging.getLogger("trackanalysis.pipeline.session")

# Frame rates the capture rigs record at; any positive rate is accepted.
FRAME_RATE_PRESETS = (30.0, 18.0)
CONFIG_SECTIONS = ("frame_rate", "smoothing", "reliability", "maneuvers", "approach")


@dataclass(frozen=True)
class SessionAnalyzerConfig:
    frame_rate: float = 30.0
    smoothing: SmoothingConfig = SmoothingConfig()
    reliability: ReliabilityConfig = ReliabilityConfig()
    maneuvers: ManeuverConfig = ManeuverConfig()
    approach: ApproachConfig = ApproachConfig()

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "SessionAnalyzerConfig":
        fps = positive_float(d.get("frame_rate", 30.0), "frame_rate")
        if fps not in FRAME_RATE_PRESETS:
            logger.info("Using non-preset frame rate %.3f", fps)
        return SessionAnalyzerConfig(
            frame_rate=fps,
            smoothing=SmoothingConfig.from_dict(dict(d.get("smoothing", {}) or {})),
            reliability=ReliabilityConfig.from_dict(dict(d.get("reliability", {}) or {})),
            maneuvers=ManeuverConfig.from_dict(dict(d.get("maneuvers", {}) or {})),
            approach=ApproachConfig.from_dict(dict(d.get("approach", {}) or {})),
        )

    @staticmethod
    def from_yaml(path: str) -> "SessionAnalyzerConfig":
        return SessionAnalyzerConfig.from_dict(load_yaml(path, allowed_keys=CONFIG_SECTIONS))


@dataclass(frozen=True)
class SessionResult:
    name: str
    profile: SpeedProfile
    smoothed: Tuple[SmoothedPoint, ...]
    maneuvers: ManeuverSet
    approach_points: Dict[int, Tuple[ApproachPoint, ...]]
    distance_filters: Tuple[DistanceFilter, ...]


class SessionAnalyzer:
    """Runs every analysis over one complete trajectory and its markers."""

    def __init__(self, cfg: Optional[SessionAnalyzerConfig] = None) -> None:
        self._cfg = cfg or SessionAnalyzerConfig()

    @property
    def config(self) -> SessionAnalyzerConfig:
        return self._cfg

    def analyze(
        self,
        trajectory: Sequence[TrajectoryPoint],
        markers: Sequence[ObjectMarker] = (),
        name: str = "",
    ) -> SessionResult:
        cfg = self._cfg
        profile = speed_profile(trajectory, cfg.frame_rate, cfg.reliability)
        annotated = annotate_kinematics(trajectory, cfg.frame_rate, profile)
        smoothed = smooth_trajectory(annotated, cfg.smoothing)
        maneuvers = detect_maneuvers(annotated, cfg.frame_rate, cfg.maneuvers)

        approach: Dict[int, Tuple[ApproachPoint, ...]] = {}
        for m in markers:
            approach[m.frame_index] = find_approach_points(annotated, m, cfg.frame_rate, cfg.approach)

        filters: Tuple[DistanceFilter, ...] = ()
        if markers:
            filters = count_within_distances(
                distances_to_nearest_marker(annotated, markers), cfg.approach.target_distances_m
            )

        logger.info(
            "Session %r: %d points, %.1f m, max %.1f km/h, avg %.1f km/h, %d markers",
            name,
            len(annotated),
            profile.total_distance_m,
            profile.max_speed_kmh,
            profile.average_speed_kmh,
            len(markers),
        )
        return SessionResult(
            name=name,
            profile=profile,
            smoothed=smoothed,
            maneuvers=maneuvers,
            approach_points=approach,
            distance_filters=filters,
        )

    def export(self, result: SessionResult, markers: Sequence[ObjectMarker], sinks: ResultSinks) -> int:
        """Write every approach point of `result` to `sinks`; returns the number written."""
        written = 0
        sinks.open()
        try:
            for m in markers:
                for ap in result.approach_points.get(m.frame_index, ()):
                    sinks.write(m, ap)
                    written += 1
        finally:
            sinks.close()
        return written
