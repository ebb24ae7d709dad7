"""
Road-Snapping Orchestrator

Turns a raw trip trace into a best-effort road-aligned path:
- Downsample to the API-safe total point count
- Split at GPS dropouts so the matcher never bridges a gap
- Chunk each segment with overlap and snap chunk by chunk
- Stitch, collapse overlap duplicates, deduplicate

Every failure (missing key, HTTP error, timeout, empty answer) degrades to
raw coordinates for the affected chunk. snap() never raises.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

import httpx

from triptrace.config import Settings
from triptrace.features.snapping.client import RoadsClient, RoadsError
from triptrace.features.tracking.models import Coordinate, TracePoint, to_coordinates
from triptrace.features.tracking.segmentation import (
    chunk_with_overlap,
    deduplicate,
    downsample,
    split_at_gaps,
)
from triptrace.shared.geo import distance_km

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapSettings:
    """Tunables for the snapping pipeline."""
    api_key: Optional[str] = None
    api_url: str = "https://roads.googleapis.com/v1/snapToRoads"
    max_gap_km: float = 0.5
    max_points_per_request: int = 100
    max_total_points: int = 500
    chunk_overlap: int = 3
    request_timeout_seconds: float = 10.0
    total_timeout_seconds: float = 30.0
    overlap_collapse_km: float = 0.01

    @classmethod
    def from_settings(cls, settings: Settings) -> "SnapSettings":
        return cls(
            api_key=settings.roads_api_key,
            api_url=settings.roads_api_url,
            max_gap_km=settings.snap_max_gap_km,
            max_points_per_request=settings.snap_max_points_per_request,
            max_total_points=settings.snap_max_total_points,
            chunk_overlap=settings.snap_chunk_overlap,
            request_timeout_seconds=settings.snap_request_timeout_seconds,
            total_timeout_seconds=settings.snap_total_timeout_seconds,
            overlap_collapse_km=settings.snap_overlap_collapse_km,
        )


@dataclass
class ChunkReport:
    """Outcome of one chunk request."""
    segment_index: int
    chunk_index: int
    point_count: int
    snapped: bool
    reason: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dict for API response."""
        return {
            "segment_index": self.segment_index,
            "chunk_index": self.chunk_index,
            "point_count": self.point_count,
            "snapped": self.snapped,
            "reason": self.reason,
        }


@dataclass
class SnapResult:
    """Final path plus per-chunk observability."""
    coordinates: List[Coordinate]
    chunks: List[ChunkReport] = field(default_factory=list)

    @property
    def snapped(self) -> bool:
        """True if at least one chunk came back from the service."""
        return any(c.snapped for c in self.chunks)


class RoadSnapper:
    """
    Snaps traces to roads through RoadsClient.

    With no API key configured every call returns raw coordinates.
    """

    def __init__(
        self,
        settings: SnapSettings,
        client: Optional[RoadsClient] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.settings = settings
        if client is None and settings.api_key:
            client = RoadsClient(
                api_key=settings.api_key,
                api_url=settings.api_url,
                timeout=settings.request_timeout_seconds,
                http_client=http_client,
            )
        self.client = client
        self._clock = clock
        self._warned_missing_key = False

    def _now(self) -> float:
        if self._clock is not None:
            return self._clock()
        return asyncio.get_running_loop().time()

    async def snap(self, trace: Sequence[TracePoint]) -> List[Coordinate]:
        """Snap a trace; returns raw coordinates on any failure."""
        result = await self.snap_with_report(trace)
        return result.coordinates

    async def snap_with_report(self, trace: Sequence[TracePoint]) -> SnapResult:
        """
        Snap a trace and report which chunks were snapped.

        The input is copied on entry; later appends by the caller are not seen.
        """
        points = list(trace)
        raw = to_coordinates(points)

        if len(points) < 2:
            return SnapResult(raw)

        if self.client is None:
            if not self._warned_missing_key:
                logger.warning("Roads API key not set, skipping snap-to-roads")
                self._warned_missing_key = True
            return SnapResult(raw)

        try:
            return await self._snap(points, raw)
        except Exception as e:
            logger.exception(f"Snap to roads failed, using raw points: {e}")
            return SnapResult(raw)

    async def _snap(
        self,
        points: List[TracePoint],
        raw: List[Coordinate]
    ) -> SnapResult:
        s = self.settings
        deadline = self._now() + s.total_timeout_seconds

        sampled = downsample(points, s.max_total_points)
        segments = split_at_gaps(sampled, s.max_gap_km)

        stitched: List[Coordinate] = []
        reports: List[ChunkReport] = []
        for segment_index, segment in enumerate(segments):
            if len(segment) < 2:
                stitched.extend(to_coordinates(segment))
                continue
            stitched.extend(
                await self._snap_segment(segment_index, segment, deadline, reports)
            )

        result = deduplicate(stitched)
        snapped_count = sum(1 for r in reports if r.snapped)
        logger.info(
            f"Snap to roads: {len(points)} points, {len(segments)} segments, "
            f"{snapped_count}/{len(reports)} chunks snapped"
        )

        if len(result) < 2 or snapped_count == 0:
            return SnapResult(raw, reports)
        return SnapResult(result, reports)

    async def _snap_segment(
        self,
        segment_index: int,
        segment: List[TracePoint],
        deadline: float,
        reports: List[ChunkReport],
    ) -> List[Coordinate]:
        s = self.settings
        chunks = chunk_with_overlap(segment, s.max_points_per_request, s.chunk_overlap)
        out: List[Coordinate] = []

        for chunk_index, chunk in enumerate(chunks):
            # Overlap points are already in `out` from the previous chunk
            fresh = chunk if chunk_index == 0 else chunk[s.chunk_overlap:]
            report = ChunkReport(segment_index, chunk_index, len(chunk), snapped=False)
            reports.append(report)

            remaining = deadline - self._now()
            if remaining <= 0:
                report.reason = "total timeout exhausted"
                logger.warning(
                    f"Snap budget exhausted, segment {segment_index} "
                    f"chunk {chunk_index} kept raw"
                )
                out.extend(to_coordinates(fresh))
                continue

            try:
                snapped = await asyncio.wait_for(
                    self.client.snap_path(chunk),
                    timeout=min(s.request_timeout_seconds, remaining),
                )
            except asyncio.TimeoutError:
                report.reason = "request timeout"
            except RoadsError as e:
                report.reason = str(e)
            except Exception as e:
                logger.exception(
                    f"Unexpected error snapping segment {segment_index} chunk {chunk_index}"
                )
                report.reason = f"{type(e).__name__}: {e}"
            else:
                if out and snapped and distance_km(out[-1], snapped[0]) < s.overlap_collapse_km:
                    snapped = snapped[1:]
                out.extend(snapped)
                report.snapped = True
                logger.debug(
                    f"Segment {segment_index} chunk {chunk_index}: "
                    f"{len(chunk)} -> {len(snapped)} points"
                )
                continue

            logger.warning(
                f"Segment {segment_index} chunk {chunk_index} kept raw: {report.reason}"
            )
            out.extend(to_coordinates(fresh))

        return out
