"""
Geographic utility functions.

This is the SINGLE SOURCE OF TRUTH for geographic calculations.
DO NOT duplicate these functions elsewhere.
"""
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Protocol, Sequence

# Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0

_TWO_PLACES = Decimal("0.01")


class HasLatLon(Protocol):
    """Anything carrying a latitude/longitude pair."""

    @property
    def latitude(self) -> float: ...

    @property
    def longitude(self) -> float: ...


def _check_finite(*values: float) -> None:
    for v in values:
        if not math.isfinite(v):
            raise ValueError(f"Coordinate must be finite, got {v!r}")


def haversine(
    lat1: float, lon1: float,
    lat2: float, lon2: float
) -> float:
    """
    Calculate great-circle distance between two points.

    Args:
        lat1, lon1: First point coordinates (degrees)
        lat2, lon2: Second point coordinates (degrees)

    Returns:
        Distance in kilometers

    Raises:
        ValueError: If any coordinate is NaN or infinite
    """
    _check_finite(lat1, lon1, lat2, lon2)
    if lat1 == lat2 and lon1 == lon2:
        return 0.0

    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) *
        math.sin(delta_lon / 2) ** 2
    )
    # Round-off can push a slightly outside [0, 1]
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance_km(a: HasLatLon, b: HasLatLon) -> float:
    """Great-circle distance in km between two points with latitude/longitude."""
    return haversine(a.latitude, a.longitude, b.latitude, b.longitude)


def path_length_km(points: Sequence[HasLatLon]) -> float:
    """Unrounded sum of distances between consecutive points."""
    total = 0.0

    for i in range(1, len(points)):
        total += distance_km(points[i - 1], points[i])

    return total


def round_distance_km(value: float) -> float:
    """
    Round a distance to 2 decimal places, half-up.

    Rounds the shortest decimal representation of the float, so 0.125
    becomes 0.13 and 0.005 becomes 0.01.
    """
    return float(Decimal(repr(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def total_distance_km(points: Sequence[HasLatLon]) -> float:
    """
    Calculate total distance for a trace.

    Args:
        points: Ordered points with latitude/longitude

    Returns:
        Total distance in kilometers, rounded to 2 decimals (half-up)
    """
    if len(points) < 2:
        return 0.0
    return round_distance_km(path_length_km(points))


def bearing_deg(a: HasLatLon, b: HasLatLon) -> float:
    """Initial bearing from a to b in degrees, 0..360 clockwise from north."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    y = math.sin(d_lon) * math.cos(lat2)
    x = (
        math.cos(lat1) * math.sin(lat2) -
        math.sin(lat1) * math.cos(lat2) * math.cos(d_lon)
    )
    return (math.degrees(math.atan2(y, x)) + 360) % 360


def angle_diff_deg(a: float, b: float) -> float:
    """Smallest absolute difference between two bearings (0..180)."""
    d = abs(a - b) % 360
    if d > 180:
        d = 360 - d
    return d
