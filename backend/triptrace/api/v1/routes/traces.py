"""
Trace Routes

Endpoints for snapping and finalizing trip traces.
"""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from triptrace.api.deps import get_trace_cache, get_trip_route_service
from triptrace.features.snapping import TraceCache
from triptrace.features.trips import TripRouteService, load_gpx_samples
from triptrace.schemas.trace import SnapResponse, TraceRequest, TripRouteResponse

router = APIRouter()

MAX_GPX_BYTES = 20 * 1024 * 1024  # 20MB


@router.post("/snap", response_model=SnapResponse)
async def snap_trace(
    request: TraceRequest,
    cache: TraceCache = Depends(get_trace_cache)
):
    """
    Snap a trace to roads.

    Falls back to raw coordinates when the snap service is not configured
    or fails; `snapped` tells which happened.
    """
    samples = [s.to_sample() for s in request.samples]
    if request.force:
        cache.clear()

    cached = cache.lookup(samples) is not None
    result = await cache.get_or_snap_with_report(samples)

    return SnapResponse(
        points=[
            {"latitude": c.latitude, "longitude": c.longitude}
            for c in result.coordinates
        ],
        snapped=result.snapped,
        cached=cached,
        chunks=[c.to_dict() for c in result.chunks],
    )


@router.post("/finalize", response_model=TripRouteResponse)
async def finalize_trace(
    request: TraceRequest,
    service: TripRouteService = Depends(get_trip_route_service)
):
    """Build the persisted route (path, polyline, distance) of a finished trip."""
    if request.force:
        service.cache.clear()
    route = await service.finalize([s.to_sample() for s in request.samples])
    return TripRouteResponse(**route.to_dict())


@router.post("/gpx", response_model=TripRouteResponse)
async def finalize_gpx(
    file: UploadFile = File(...),
    service: TripRouteService = Depends(get_trip_route_service)
):
    """Upload a GPX file and process its track as a finished trip."""
    if not file.filename or not file.filename.lower().endswith('.gpx'):
        raise HTTPException(status_code=400, detail="Only .gpx files are allowed")

    content = await file.read()

    if len(content) == 0:
        raise HTTPException(status_code=400, detail="File is empty")

    if len(content) > MAX_GPX_BYTES:
        raise HTTPException(status_code=400, detail="File too large (max 20MB)")

    try:
        samples = load_gpx_samples(content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not samples:
        raise HTTPException(status_code=400, detail="GPX file contains no track or route points")

    route = await service.finalize(samples)
    return TripRouteResponse(**route.to_dict())
