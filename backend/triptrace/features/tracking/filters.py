"""
GPS noise filtering.

Two stages:
- PointFilter.accepts() runs on every incoming fix while a trip is live
  and rejects inaccurate, stationary-jitter and teleport fixes.
- remove_jumps() runs once on the finished trace and keeps the longest
  run of points free of large jumps.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

from triptrace.config import Settings
from triptrace.features.tracking.models import Coordinate, LocationSample
from triptrace.shared.geo import angle_diff_deg, bearing_deg, distance_km

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterSettings:
    """Thresholds for live point acceptance."""
    max_accuracy_m: float = 25.0
    min_distance_m: float = 15.0
    max_speed_mps: float = 140.0
    max_reported_speed_mps: float = 45.0
    sharp_angle_deg: float = 140.0
    sharp_angle_max_distance_m: float = 60.0
    stationary_cluster_size: int = 4
    stationary_radius_m: float = 30.0
    stationary_break_m: float = 30.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "FilterSettings":
        return cls(
            max_accuracy_m=settings.filter_max_accuracy_m,
            min_distance_m=settings.filter_min_distance_m,
            max_speed_mps=settings.filter_max_speed_mps,
            max_reported_speed_mps=settings.filter_max_reported_speed_mps,
            sharp_angle_deg=settings.filter_sharp_angle_deg,
            sharp_angle_max_distance_m=settings.filter_sharp_angle_max_distance_m,
            stationary_cluster_size=settings.filter_stationary_cluster_size,
            stationary_radius_m=settings.filter_stationary_radius_m,
            stationary_break_m=settings.filter_stationary_break_m,
        )


def _centroid(points: Sequence[LocationSample]) -> Coordinate:
    return Coordinate(
        sum(p.latitude for p in points) / len(points),
        sum(p.longitude for p in points) / len(points),
    )


class PointFilter:
    """Decides whether a new fix extends the trip trace."""

    def __init__(self, settings: FilterSettings = FilterSettings()):
        self.settings = settings

    def accepts(
        self,
        point: LocationSample,
        existing: Sequence[LocationSample]
    ) -> bool:
        """
        Check a new fix against the already accepted points.

        Rejects, in order: poor accuracy, a device-reported speed above the
        cap, movement below the minimum step, implausible implied speed,
        a sharp turn-back over a short step, and jitter around a
        stationary cluster.
        """
        s = self.settings

        if point.accuracy and point.accuracy > s.max_accuracy_m:
            return False

        if point.speed and point.speed > s.max_reported_speed_mps:
            return False

        if not existing:
            return True

        last = existing[-1]
        step_m = distance_km(last, point) * 1000

        if step_m < s.min_distance_m:
            return False

        # Equal or backward timestamps cannot give a speed
        elapsed_s = (point.timestamp - last.timestamp) / 1000
        if elapsed_s > 0 and step_m / elapsed_s > s.max_speed_mps:
            return False

        if len(existing) >= 2 and step_m < s.sharp_angle_max_distance_m:
            prev = existing[-2]
            turn = angle_diff_deg(bearing_deg(prev, last), bearing_deg(last, point))
            if turn > s.sharp_angle_deg:
                return False

        if self.is_stationary(existing):
            center = _centroid(existing[-s.stationary_cluster_size:])
            if distance_km(center, point) * 1000 < s.stationary_break_m:
                return False

        return True

    def is_stationary(self, points: Sequence[LocationSample]) -> bool:
        """True if the most recent cluster of points sits within the stationary radius."""
        count = self.settings.stationary_cluster_size
        if len(points) < count:
            return False

        recent = points[-count:]
        center = _centroid(recent)
        return all(
            distance_km(center, p) * 1000 <= self.settings.stationary_radius_m
            for p in recent
        )

    def filter(self, points: Sequence[LocationSample]) -> List[LocationSample]:
        """Apply accepts() to a whole batch in order."""
        accepted: List[LocationSample] = []
        for point in points:
            if self.accepts(point, accepted):
                accepted.append(point)
        dropped = len(points) - len(accepted)
        if dropped:
            logger.debug(f"Point filter dropped {dropped}/{len(points)} fixes")
        return accepted


def remove_jumps(
    points: Sequence[LocationSample],
    jump_threshold_m: float = 150.0,
    min_segment_points: int = 3
) -> List[LocationSample]:
    """
    Keep the longest run of points without a jump over the threshold.

    Runs shorter than min_segment_points are ignored. Traces shorter than
    min_segment_points, or with no qualifying run, come back unchanged.
    On equal length the earliest run wins.
    """
    if len(points) < min_segment_points:
        return list(points)

    runs: List[List[LocationSample]] = []
    current = [points[0]]
    for i in range(1, len(points)):
        if distance_km(points[i - 1], points[i]) * 1000 > jump_threshold_m:
            if len(current) >= min_segment_points:
                runs.append(current)
            current = [points[i]]
        else:
            current.append(points[i])
    if len(current) >= min_segment_points:
        runs.append(current)

    if not runs:
        return list(points)

    longest = runs[0]
    for run in runs:
        if len(run) > len(longest):
            longest = run

    if len(longest) < len(points):
        logger.info(f"Jump removal kept {len(longest)}/{len(points)} points")
    return longest
