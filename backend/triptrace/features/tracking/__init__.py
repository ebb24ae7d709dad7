"""
Trip tracking module.

Usage:
    from triptrace.features.tracking import LocationSample, Coordinate
    from triptrace.features.tracking import TraceBuffer, PointFilter

Components:
- LocationSample / Coordinate: immutable point types
- PointFilter / remove_jumps: GPS noise filtering
- TraceBuffer: append-only trip buffer with live odometer
- downsample / split_at_gaps / deduplicate / chunk_with_overlap: trace reduction
"""

from .models import Coordinate, LocationSample, Trace, TracePoint, to_coordinates
from .filters import FilterSettings, PointFilter, remove_jumps
from .buffer import TraceBuffer
from .segmentation import chunk_with_overlap, deduplicate, downsample, split_at_gaps

__all__ = [
    # Models
    "Coordinate",
    "LocationSample",
    "Trace",
    "TracePoint",
    "to_coordinates",
    # Filtering
    "FilterSettings",
    "PointFilter",
    "remove_jumps",
    "TraceBuffer",
    # Segmentation
    "chunk_with_overlap",
    "deduplicate",
    "downsample",
    "split_at_gaps",
]
