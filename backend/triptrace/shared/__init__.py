"""
Shared utilities (NOT business logic).

Usage:
    from triptrace.shared import haversine, distance_km, total_distance_km
"""
from .geo import (
    HasLatLon,
    haversine,
    distance_km,
    path_length_km,
    total_distance_km,
    round_distance_km,
    bearing_deg,
    angle_diff_deg,
    EARTH_RADIUS_KM,
)

__all__ = [
    "HasLatLon",
    "haversine",
    "distance_km",
    "path_length_km",
    "total_distance_km",
    "round_distance_km",
    "bearing_deg",
    "angle_diff_deg",
    "EARTH_RADIUS_KM",
]
