"""
Trip trace buffer with a live odometer.

Accepted fixes are appended in arrival order; the running distance is
updated incrementally so the UI can show it without re-walking the trace.
"""

import logging
from typing import List, Optional, Tuple

from triptrace.features.tracking.filters import PointFilter
from triptrace.features.tracking.models import LocationSample
from triptrace.shared.geo import distance_km, round_distance_km

logger = logging.getLogger(__name__)


class TraceBuffer:
    """Append-only buffer for one trip."""

    def __init__(
        self,
        point_filter: Optional[PointFilter] = None,
        max_points: int = 10000
    ):
        self.point_filter = point_filter or PointFilter()
        self.max_points = max_points
        self._points: List[LocationSample] = []
        self._distance_km = 0.0
        self._closed = False

    def __len__(self) -> int:
        return len(self._points)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def distance_km(self) -> float:
        """Unrounded distance covered so far."""
        return self._distance_km

    @property
    def display_distance_km(self) -> float:
        """Distance rounded to 2 decimals for display."""
        return round_distance_km(self._distance_km)

    @property
    def last_point(self) -> Optional[LocationSample]:
        return self._points[-1] if self._points else None

    def append(self, sample: LocationSample) -> bool:
        """
        Offer a new fix to the trip.

        Returns:
            True if the fix passed the filter and was stored

        Raises:
            RuntimeError: If the trip is already closed
        """
        if self._closed:
            raise RuntimeError("Cannot append to a closed trace")

        if not self.point_filter.accepts(sample, self._points):
            return False

        if self._points:
            self._distance_km += distance_km(self._points[-1], sample)
        self._points.append(sample)

        if len(self._points) > self.max_points:
            overflow = len(self._points) - self.max_points
            del self._points[:overflow]
            logger.warning(f"Trace buffer full, dropped {overflow} oldest points")

        return True

    def extend(self, samples: List[LocationSample], only_newer: bool = False) -> int:
        """
        Append several fixes; returns how many were accepted.

        Args:
            samples: Fixes in arrival order
            only_newer: Skip fixes not newer than the last stored point,
                for merging batches delivered by background location updates
        """
        if only_newer and self._points:
            last_timestamp = self._points[-1].timestamp
            samples = [s for s in samples if s.timestamp > last_timestamp]
        return sum(1 for sample in samples if self.append(sample))

    def snapshot(self) -> Tuple[LocationSample, ...]:
        """Immutable copy of the points accepted so far."""
        return tuple(self._points)

    def close(self) -> Tuple[LocationSample, ...]:
        """Mark the trip as ended and return the final trace."""
        self._closed = True
        return self.snapshot()
