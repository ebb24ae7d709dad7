"""
Snap-to-roads module.

Usage:
    from triptrace.features.snapping import RoadSnapper, SnapSettings, TraceCache

Components:
- RoadsClient: HTTP client for the snap service (one request per chunk)
- RoadSnapper: chunked snapping with overlap, budget and raw fallback
- TraceCache: single-slot memo of the last snap result
- SnapToRoadsResponse: Pydantic schema for the service response
"""

from .client import (
    RoadsAPIError,
    RoadsClient,
    RoadsError,
    RoadsNetworkError,
    RoadsResponseError,
)
from .orchestrator import ChunkReport, RoadSnapper, SnapResult, SnapSettings
from .cache import SnapCacheEntry, TraceCache, fingerprint
from .schemas import SnappedPoint, SnapToRoadsResponse

__all__ = [
    # Client
    "RoadsClient",
    "RoadsError",
    "RoadsAPIError",
    "RoadsNetworkError",
    "RoadsResponseError",
    # Orchestrator
    "RoadSnapper",
    "SnapSettings",
    "SnapResult",
    "ChunkReport",
    # Cache
    "TraceCache",
    "SnapCacheEntry",
    "fingerprint",
    # Schemas
    "SnappedPoint",
    "SnapToRoadsResponse",
]
