"""
Geometry Routes

Distance and polyline encode/decode endpoints.
"""

from fastapi import APIRouter, HTTPException

from triptrace.features.polyline import CorruptEncodingError, decode, encode
from triptrace.schemas.trace import (
    DecodeRequest,
    DecodeResponse,
    DistanceRequest,
    DistanceResponse,
    EncodeRequest,
    EncodeResponse,
)
from triptrace.shared.geo import total_distance_km

router = APIRouter()


@router.post("/distance", response_model=DistanceResponse)
async def measure_distance(request: DistanceRequest):
    """Total path length in km, rounded to 2 decimals."""
    points = [p.to_coordinate() for p in request.points]
    return DistanceResponse(
        distance_km=total_distance_km(points),
        point_count=len(points),
    )


@router.post("/polyline/encode", response_model=EncodeResponse)
async def encode_polyline(request: EncodeRequest):
    """Encode points as a polyline string."""
    points = [p.to_coordinate() for p in request.points]
    return EncodeResponse(
        polyline=encode(points, precision=request.precision),
        point_count=len(points),
    )


@router.post("/polyline/decode", response_model=DecodeResponse)
async def decode_polyline(request: DecodeRequest):
    """Decode a polyline string into points."""
    try:
        coordinates = decode(request.polyline, precision=request.precision)
    except CorruptEncodingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return DecodeResponse(
        points=[
            {"latitude": c.latitude, "longitude": c.longitude}
            for c in coordinates
        ]
    )
