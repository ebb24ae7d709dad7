"""
GPX import.

Loads recorded trips from GPX files as LocationSample traces, so saved or
exported trips can be replayed through the pipeline.
"""

import logging
from typing import List, Union

import gpxpy
import gpxpy.gpx

from triptrace.features.tracking.models import LocationSample

logger = logging.getLogger(__name__)


def _to_sample(
    point: Union[gpxpy.gpx.GPXTrackPoint, gpxpy.gpx.GPXRoutePoint]
) -> LocationSample:
    timestamp = int(point.time.timestamp() * 1000) if point.time else 0
    # GPX carries no accuracy in meters (only DOP), so leave it unset
    return LocationSample(
        latitude=point.latitude,
        longitude=point.longitude,
        timestamp=timestamp,
        speed=getattr(point, "speed", None),
    )


def load_gpx_samples(content: bytes) -> List[LocationSample]:
    """
    Extract location samples from GPX content.

    Track points from all tracks and segments are used in file order;
    route points are used only when the file has no track points.

    Args:
        content: GPX file content as bytes

    Returns:
        List of LocationSample (timestamp 0 where the GPX has no time)

    Raises:
        ValueError: If GPX is invalid
    """
    try:
        gpx = gpxpy.parse(content.decode('utf-8'))
    except Exception as e:
        logger.error(f"Failed to parse GPX: {e}")
        raise ValueError(f"Invalid GPX file: {e}")

    samples: List[LocationSample] = []

    # From tracks
    for track in gpx.tracks:
        for segment in track.segments:
            for point in segment.points:
                samples.append(_to_sample(point))

    # From routes (if no tracks)
    if not samples:
        for route in gpx.routes:
            for point in route.points:
                samples.append(_to_sample(point))

    return samples
