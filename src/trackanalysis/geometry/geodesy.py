"""
Spherical-Earth geodesy helpers.

Latitude, longitude and bearings are in degrees at the interface; all
trigonometry is done in radians.
"""

from __future__ import annotations

import math
from typing import Any, Tuple

EARTH_RADIUS_M = 6371000.0


def haversine_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlam = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlam / 2.0) ** 2
    a = min(1.0, max(0.0, a))
    c = 2.0 * math.atan2(math.sqrt(a), math.sqrt(1.0 - a))
    return float(EARTH_RADIUS_M * c)


def initial_bearing_deg(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Initial great-circle bearing from point 1 toward point 2, in [0, 360)."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dlam = math.radians(lon2 - lon1)
    y = math.sin(dlam) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(dlam)
    ang = math.degrees(math.atan2(y, x)) % 360.0
    # -0.0 % 360 and tiny negatives can round up to exactly 360.0
    if ang >= 360.0:
        ang -= 360.0
    return float(ang)


def destination_point(lat: float, lon: float, distance_m: float, bearing_deg: float) -> Tuple[float, float]:
    delta = float(distance_m) / EARTH_RADIUS_M
    theta = math.radians(bearing_deg)
    phi1 = math.radians(lat)
    lam1 = math.radians(lon)
    phi2 = math.asin(math.sin(phi1) * math.cos(delta) + math.cos(phi1) * math.sin(delta) * math.cos(theta))
    lam2 = lam1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * math.sin(phi2),
    )
    return (float(math.degrees(phi2)), float(math.degrees(lam2)))


def is_within_radius(lat1: float, lon1: float, lat2: float, lon2: float, radius_m: float) -> bool:
    return haversine_distance_m(lat1, lon1, lat2, lon2) <= float(radius_m)


def distance_between(a: Any, b: Any) -> float:
    """Distance between any two objects exposing `latitude` and `longitude`."""
    return haversine_distance_m(a.latitude, a.longitude, b.latitude, b.longitude)


def bearing_between(a: Any, b: Any) -> float:
    return initial_bearing_deg(a.latitude, a.longitude, b.latitude, b.longitude)


def is_moving_toward(current: Any, previous: Any, target: Any) -> bool:
    return distance_between(current, target) < distance_between(previous, target)
