from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

# (threshold, factor) pairs, most severe first; the first band exceeded applies.
Bands = Tuple[Tuple[float, float], ...]

DEFAULT_SPEED_BANDS_KMH: Bands = ((200.0, 0.2), (150.0, 0.6), (120.0, 0.8))
DEFAULT_ACCEL_BANDS_MPS2: Bands = ((30.0, 0.1), (20.0, 0.4), (10.0, 0.7))


@dataclass(frozen=True)
class ReliabilityConfig:
    speed_bands_kmh: Bands = DEFAULT_SPEED_BANDS_KMH
    accel_bands_mps2: Bands = DEFAULT_ACCEL_BANDS_MPS2

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "ReliabilityConfig":
        speed = d.get("speed_bands_kmh")
        accel = d.get("accel_bands_mps2")
        return ReliabilityConfig(
            speed_bands_kmh=_parse_bands(speed, "speed_bands_kmh") if speed else DEFAULT_SPEED_BANDS_KMH,
            accel_bands_mps2=_parse_bands(accel, "accel_bands_mps2") if accel else DEFAULT_ACCEL_BANDS_MPS2,
        )


def _parse_bands(raw: Any, name: str) -> Bands:
    bands = []
    for item in raw:
        thr, factor = float(item[0]), float(item[1])
        if not 0.0 <= factor <= 1.0:
            raise ValueError(f"{name} factors must be within [0, 1], got {factor}")
        bands.append((thr, factor))
    return tuple(sorted(bands, key=lambda b: b[0], reverse=True))


def _band_factor(value: float, bands: Bands) -> float:
    for thr, factor in bands:
        if value > thr:
            return factor
    return 1.0


def reliability_score(
    speed_kmh: float,
    acceleration_mps2: Optional[float] = None,
    cfg: Optional[ReliabilityConfig] = None,
) -> float:
    cfg = cfg or ReliabilityConfig()
    score = 1.0
    score *= _band_factor(float(speed_kmh), cfg.speed_bands_kmh)
    if acceleration_mps2 is not None:
        score *= _band_factor(abs(float(acceleration_mps2)), cfg.accel_bands_mps2)
    return float(score)
