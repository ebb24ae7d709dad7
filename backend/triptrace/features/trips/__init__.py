"""
Trip route module.

Usage:
    from triptrace.features.trips import TripRouteService, TripRoute
    from triptrace.features.trips import load_gpx_samples

Components:
- TripRouteService: end-of-trip clean/snap/encode/measure pipeline
- TripRoute: result handed to persistence and map rendering
- load_gpx_samples: read a trip from a GPX file
"""

from .gpx_loader import load_gpx_samples
from .service import TripRoute, TripRouteService

__all__ = [
    "TripRoute",
    "TripRouteService",
    "load_gpx_samples",
]
