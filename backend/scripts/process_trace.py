#!/usr/bin/env python3
"""CLI script for running a recorded trip through the route pipeline.

Usage:
    # Filter, snap (if ROADS_API_KEY is set), encode and measure a GPX trip
    python backend/scripts/process_trace.py --gpx trips/2025-03-14.gpx

    # Re-apply the live point filter first, as the app does while recording
    python backend/scripts/process_trace.py --gpx trips/2025-03-14.gpx --filter

    # Save the result as JSON
    python backend/scripts/process_trace.py --gpx trips/2025-03-14.gpx --save out.json

    # Decode a stored polyline and print its length
    python backend/scripts/process_trace.py --polyline '_p~iF~ps|U_ulLnnqC_mqNvxq`@'
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from triptrace.config import settings
from triptrace.features.polyline import CorruptEncodingError, decode
from triptrace.features.snapping import RoadSnapper, SnapSettings, TraceCache
from triptrace.features.tracking import FilterSettings, PointFilter
from triptrace.features.trips import TripRouteService, load_gpx_samples
from triptrace.shared.geo import total_distance_km


def process_gpx(path: Path, apply_filter: bool) -> dict:
    samples = load_gpx_samples(path.read_bytes())
    print(f"Loaded {len(samples)} points from {path}")

    if apply_filter:
        samples = PointFilter(FilterSettings.from_settings(settings)).filter(samples)
        print(f"After point filter: {len(samples)} points")

    cache = TraceCache(RoadSnapper(SnapSettings.from_settings(settings)))
    service = TripRouteService(cache, jump_threshold_m=settings.filter_jump_threshold_m)
    route = asyncio.run(service.finalize(samples))

    print(f"Cleaned points: {route.cleaned_point_count}")
    print(f"Path points:    {route.point_count}")
    print(f"Snapped:        {'yes' if route.snapped else 'no (raw)'}")
    for chunk in route.chunks:
        if not chunk.snapped:
            print(f"  segment {chunk.segment_index} chunk {chunk.chunk_index}: {chunk.reason}")
    print(f"Distance:       {route.distance_km:.2f} km")
    print(f"Polyline:       {len(route.encoded_polyline)} chars")
    return route.to_dict()


def main() -> int:
    parser = argparse.ArgumentParser(description="Process a recorded trip trace")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--gpx", type=Path, help="GPX file with the recorded trip")
    source.add_argument("--polyline", help="Encoded polyline to decode and measure")
    parser.add_argument("--filter", action="store_true", help="Apply the live point filter first")
    parser.add_argument("--save", type=Path, help="Write the route as JSON")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    if args.polyline is not None:
        try:
            points = decode(args.polyline)
        except CorruptEncodingError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"Points:   {len(points)}")
        print(f"Distance: {total_distance_km(points):.2f} km")
        return 0

    try:
        output = process_gpx(args.gpx, args.filter)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.save:
        args.save.write_text(json.dumps(output, indent=2), encoding="utf-8")
        print(f"Saved to {args.save}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
