"""
Trip Route Service

End-of-trip pipeline:
- Jump removal on the recorded trace
- Road snapping through the trace cache
- Polyline encoding and total distance of the final path

The result is what gets persisted for the trip and drawn on the map.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Sequence

from triptrace.features.polyline import encode
from triptrace.features.snapping.cache import TraceCache
from triptrace.features.snapping.orchestrator import ChunkReport
from triptrace.features.tracking.filters import remove_jumps
from triptrace.features.tracking.models import Coordinate, LocationSample, to_coordinates
from triptrace.shared.geo import total_distance_km

logger = logging.getLogger(__name__)


@dataclass
class TripRoute:
    """Final route of a trip."""
    coordinates: List[Coordinate]
    encoded_polyline: str
    distance_km: float
    raw_point_count: int
    cleaned_point_count: int
    snapped: bool = False
    chunks: List[ChunkReport] = field(default_factory=list)

    @property
    def point_count(self) -> int:
        return len(self.coordinates)

    def to_dict(self) -> dict:
        """Convert to dict for API response."""
        return {
            "points": [
                {"latitude": c.latitude, "longitude": c.longitude}
                for c in self.coordinates
            ],
            "encoded_polyline": self.encoded_polyline,
            "distance_km": self.distance_km,
            "point_count": self.point_count,
            "raw_point_count": self.raw_point_count,
            "cleaned_point_count": self.cleaned_point_count,
            "snapped": self.snapped,
            "chunks": [c.to_dict() for c in self.chunks],
        }


class TripRouteService:
    """Builds the persisted route for a finished trip."""

    def __init__(self, cache: TraceCache, jump_threshold_m: float = 150.0):
        self.cache = cache
        self.jump_threshold_m = jump_threshold_m

    async def finalize(self, samples: Sequence[LocationSample]) -> TripRoute:
        """
        Clean, snap, encode and measure a finished trip.

        Never raises for snap-service problems; an unreachable service
        just yields the cleaned raw path.
        """
        raw_count = len(samples)
        cleaned = remove_jumps(list(samples), self.jump_threshold_m)

        if len(cleaned) < 2:
            path = to_coordinates(cleaned)
            return TripRoute(
                coordinates=path,
                encoded_polyline=encode(path),
                distance_km=0.0,
                raw_point_count=raw_count,
                cleaned_point_count=len(cleaned),
            )

        result = await self.cache.get_or_snap_with_report(cleaned)
        path = result.coordinates

        route = TripRoute(
            coordinates=path,
            encoded_polyline=encode(path),
            distance_km=total_distance_km(path),
            raw_point_count=raw_count,
            cleaned_point_count=len(cleaned),
            snapped=result.snapped,
            chunks=result.chunks,
        )
        logger.info(
            f"Trip finalized: {raw_count} raw -> {len(cleaned)} cleaned -> "
            f"{route.point_count} path points, {route.distance_km} km"
            f"{'' if route.snapped else ' (raw)'}"
        )
        return route
