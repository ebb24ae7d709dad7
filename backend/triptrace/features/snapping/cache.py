"""
Single-slot cache for the most recent snap result.

Map screens re-render with the same trace many times; the fingerprint
(point count + rounded endpoints) lets those repeats skip the network.
Not safe for concurrent get_or_snap() calls on the same instance.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from triptrace.features.snapping.orchestrator import ChunkReport, RoadSnapper, SnapResult
from triptrace.features.tracking.models import Coordinate, TracePoint

logger = logging.getLogger(__name__)

FINGERPRINT_PRECISION = 5

Fingerprint = Tuple[float, ...]


def fingerprint(trace: Sequence[TracePoint]) -> Fingerprint:
    """Cheap summary: (count, first lat, first lon, last lat, last lon), rounded to 5 places."""
    if not trace:
        return (0,)
    first = trace[0]
    last = trace[-1]
    return (
        len(trace),
        round(first.latitude, FINGERPRINT_PRECISION),
        round(first.longitude, FINGERPRINT_PRECISION),
        round(last.latitude, FINGERPRINT_PRECISION),
        round(last.longitude, FINGERPRINT_PRECISION),
    )


@dataclass(frozen=True)
class SnapCacheEntry:
    fingerprint: Fingerprint
    coordinates: Tuple[Coordinate, ...]
    chunks: Tuple[ChunkReport, ...] = ()


class TraceCache:
    """Memoizes RoadSnapper results for the last trace seen."""

    def __init__(self, snapper: RoadSnapper):
        self.snapper = snapper
        self._entry: Optional[SnapCacheEntry] = None

    @property
    def entry(self) -> Optional[SnapCacheEntry]:
        return self._entry

    def clear(self) -> None:
        """Drop the stored result, forcing the next call to snap again."""
        self._entry = None

    def lookup(self, trace: Sequence[TracePoint]) -> Optional[SnapResult]:
        """Return the cached result for this trace, if any."""
        entry = self._entry
        if entry is not None and entry.fingerprint == fingerprint(trace):
            return SnapResult(list(entry.coordinates), list(entry.chunks))
        return None

    async def get_or_snap(self, trace: Sequence[TracePoint]) -> List[Coordinate]:
        """Cached coordinates if the fingerprint matches, otherwise snap and store."""
        result = await self.get_or_snap_with_report(trace)
        return result.coordinates

    async def get_or_snap_with_report(self, trace: Sequence[TracePoint]) -> SnapResult:
        """Same as get_or_snap(), keeping the per-chunk report."""
        points = list(trace)
        if not points:
            return SnapResult([])

        cached = self.lookup(points)
        if cached is not None:
            logger.debug("Snap cache hit")
            return cached

        key = fingerprint(points)
        result = await self.snapper.snap_with_report(points)
        self._entry = SnapCacheEntry(key, tuple(result.coordinates), tuple(result.chunks))
        return SnapResult(list(result.coordinates), list(result.chunks))
