"""
Trace Schemas

Pydantic models for trace processing requests and responses.
"""

from pydantic import BaseModel, Field
from typing import List, Optional

from triptrace.features.tracking.models import Coordinate, LocationSample


# === Request Models ===

class CoordinateIn(BaseModel):
    """Bare position."""
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    def to_coordinate(self) -> Coordinate:
        return Coordinate(self.latitude, self.longitude)


class LocationSampleIn(CoordinateIn):
    """GPS fix as reported by the device."""
    timestamp: int = Field(default=0, description="Epoch milliseconds")
    accuracy: Optional[float] = Field(default=None, ge=0)
    speed: Optional[float] = None

    def to_sample(self) -> LocationSample:
        return LocationSample(
            latitude=self.latitude,
            longitude=self.longitude,
            timestamp=self.timestamp,
            accuracy=self.accuracy,
            speed=self.speed,
        )


class DistanceRequest(BaseModel):
    """Points to measure."""
    points: List[CoordinateIn]


class EncodeRequest(BaseModel):
    """Points to encode."""
    points: List[CoordinateIn]
    precision: int = Field(default=5, ge=1, le=7)


class DecodeRequest(BaseModel):
    """Polyline to decode."""
    polyline: str
    precision: int = Field(default=5, ge=1, le=7)


class TraceRequest(BaseModel):
    """Trip trace to snap or finalize."""
    samples: List[LocationSampleIn]
    force: bool = Field(default=False, description="Ignore cached snap result")


# === Response Models ===

class CoordinateOut(BaseModel):
    latitude: float
    longitude: float


class DistanceResponse(BaseModel):
    distance_km: float
    point_count: int


class EncodeResponse(BaseModel):
    polyline: str
    point_count: int


class DecodeResponse(BaseModel):
    points: List[CoordinateOut]


class ChunkReportOut(BaseModel):
    """Whether one request chunk was snapped or kept raw."""
    segment_index: int
    chunk_index: int
    point_count: int
    snapped: bool
    reason: Optional[str] = None


class SnapResponse(BaseModel):
    points: List[CoordinateOut]
    snapped: bool
    cached: bool = False
    chunks: List[ChunkReportOut] = []


class TripRouteResponse(BaseModel):
    """Final route handed to persistence / map rendering."""
    points: List[CoordinateOut]
    encoded_polyline: str
    distance_km: float
    point_count: int
    raw_point_count: int
    cleaned_point_count: int
    snapped: bool
    chunks: List[ChunkReportOut] = []
