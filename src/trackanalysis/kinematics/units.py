from __future__ import annotations


def mps_to_kmh(v_mps: float) -> float:
    return float(v_mps) * 3.6


def kmh_to_mps(v_kmh: float) -> float:
    return float(v_kmh) / 3.6


def mps_to_mph(v_mps: float) -> float:
    return float(v_mps) * 2.2369362920544
