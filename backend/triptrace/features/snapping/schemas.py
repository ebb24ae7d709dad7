"""
Snap-to-roads response schemas.

Pydantic models for the external service's JSON body. Only the fields we
use are declared; everything else is ignored.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SnappedLocation(BaseModel):
    """Road-aligned position."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class SnappedPoint(BaseModel):
    """Single point returned by the service."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    location: SnappedLocation
    original_index: Optional[int] = Field(default=None, alias="originalIndex")
    place_id: Optional[str] = Field(default=None, alias="placeId")


class SnapToRoadsResponse(BaseModel):
    """Top-level response body."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    snapped_points: Optional[List[SnappedPoint]] = Field(
        default=None, alias="snappedPoints"
    )
    warning_message: Optional[str] = Field(default=None, alias="warningMessage")
