"""
Point reduction and gap segmentation.

Pure functions over ordered traces:
- downsample: bound the number of points, keeping both endpoints
- split_at_gaps: cut a trace where consecutive fixes are implausibly far apart
- deduplicate: collapse exact consecutive repeats
- chunk_with_overlap: split a segment into request-sized pieces
"""

import math
from typing import List, Sequence, TypeVar

from triptrace.shared.geo import distance_km

P = TypeVar("P")


def downsample(points: Sequence[P], max_count: int) -> List[P]:
    """
    Reduce a trace to at most max_count points at an even index stride.

    First and last points are always kept. Interior index i is
    round(i * (len - 1) / (max_count - 1)), rounded half-up; the stride is
    greater than 1 whenever reduction happens, so no index repeats.

    Raises:
        ValueError: If max_count < 2
    """
    if max_count < 2:
        raise ValueError(f"max_count must be at least 2, got {max_count}")
    if len(points) <= max_count:
        return list(points)

    step = (len(points) - 1) / (max_count - 1)
    result = [points[0]]
    for i in range(1, max_count - 1):
        result.append(points[math.floor(i * step + 0.5)])
    result.append(points[-1])
    return result


def split_at_gaps(points: Sequence[P], max_gap_km: float) -> List[List[P]]:
    """
    Split a trace wherever consecutive points are more than max_gap_km apart.

    A segment closed by a gap is kept only if it has at least 2 points.
    The final segment is always kept, even with a single point.

    Args:
        points: Ordered points with latitude/longitude
        max_gap_km: Largest plausible distance between consecutive fixes

    Returns:
        Segments in trace order; empty list for an empty trace
    """
    if not points:
        return []

    segments: List[List[P]] = []
    current = [points[0]]

    for i in range(1, len(points)):
        if distance_km(points[i - 1], points[i]) > max_gap_km:
            if len(current) >= 2:
                segments.append(current)
            current = [points[i]]
        else:
            current.append(points[i])

    segments.append(current)
    return segments


def deduplicate(points: Sequence[P]) -> List[P]:
    """Drop points exactly equal in position to their immediate predecessor."""
    if not points:
        return []

    result = [points[0]]
    for point in points[1:]:
        prev = result[-1]
        if point.latitude != prev.latitude or point.longitude != prev.longitude:
            result.append(point)
    return result


def chunk_with_overlap(
    points: Sequence[P],
    max_size: int,
    overlap: int
) -> List[List[P]]:
    """
    Split points into chunks of at most max_size sharing `overlap` points.

    Consecutive chunks start max_size - overlap apart; the last chunk ends
    at the final point.

    Raises:
        ValueError: If overlap is not smaller than max_size
    """
    if overlap < 0 or overlap >= max_size:
        raise ValueError(
            f"overlap must be in [0, max_size), got overlap={overlap}, max_size={max_size}"
        )
    if len(points) <= max_size:
        return [list(points)]

    chunks: List[List[P]] = []
    stride = max_size - overlap
    start = 0
    while True:
        end = min(start + max_size, len(points))
        chunks.append(list(points[start:end]))
        if end == len(points):
            break
        start += stride
    return chunks
