"""
API dependencies.

One TraceCache per process, built lazily from settings.
"""

import logging
from typing import Optional

from fastapi import Depends

from triptrace.config import settings
from triptrace.features.snapping import RoadSnapper, SnapSettings, TraceCache
from triptrace.features.trips import TripRouteService

logger = logging.getLogger(__name__)

# Module-level singleton
_trace_cache: Optional[TraceCache] = None


def get_trace_cache() -> TraceCache:
    """Get or create the process-wide TraceCache."""
    global _trace_cache
    if _trace_cache is None:
        snapper = RoadSnapper(SnapSettings.from_settings(settings))
        _trace_cache = TraceCache(snapper)
        logger.info(
            "TraceCache initialized (snapping %s)",
            "enabled" if snapper.client else "disabled",
        )
    return _trace_cache


def get_trip_route_service(
    cache: TraceCache = Depends(get_trace_cache)
) -> TripRouteService:
    """TripRouteService sharing the process-wide cache."""
    return TripRouteService(
        cache,
        jump_threshold_m=settings.filter_jump_threshold_m,
    )
