"""Data models for location samples and coordinates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Union

from triptrace.shared.geo import HasLatLon


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A bare (latitude, longitude) pair in decimal degrees."""

    latitude: float
    longitude: float

    def to_coordinate(self) -> "Coordinate":
        return self


@dataclass(frozen=True, slots=True)
class LocationSample:
    """A single GPS fix.

    Attributes:
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        timestamp: Unix epoch milliseconds. Non-decreasing within a trip,
            but duplicates and occasional backward steps do occur.
        accuracy: Horizontal accuracy in meters, if the device reported it.
        speed: Speed in meters/second, if the device reported it.
    """

    latitude: float
    longitude: float
    timestamp: int = 0
    accuracy: Optional[float] = None
    speed: Optional[float] = None

    def to_coordinate(self) -> Coordinate:
        """Drop everything except the position."""
        return Coordinate(self.latitude, self.longitude)


TracePoint = Union[LocationSample, Coordinate]
Trace = Sequence[TracePoint]


def to_coordinates(trace: Sequence[HasLatLon]) -> list[Coordinate]:
    """Project a trace onto bare coordinates, preserving order."""
    return [Coordinate(p.latitude, p.longitude) for p in trace]
