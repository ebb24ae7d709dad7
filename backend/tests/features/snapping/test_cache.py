"""
Tests for the single-slot trace cache.
"""

import asyncio

from triptrace.features.snapping.cache import TraceCache, fingerprint
from triptrace.features.snapping.orchestrator import RoadSnapper, SnapSettings
from triptrace.features.tracking.models import Coordinate, LocationSample, to_coordinates


def _trace(count, start_lat=43.0):
    return [LocationSample(start_lat + i * 0.0001, 76.0, timestamp=i * 5000) for i in range(count)]


class CountingClient:
    """Fake RoadsClient echoing the chunk shifted east."""

    def __init__(self):
        self.calls = 0

    async def snap_path(self, points):
        self.calls += 1
        return [Coordinate(p.latitude, p.longitude + 0.00002) for p in points]


def _cache():
    client = CountingClient()
    snapper = RoadSnapper(SnapSettings(api_key="k"), client=client)
    return TraceCache(snapper), client


class TestFingerprint:
    """Tests for fingerprint()."""

    def test_empty(self):
        assert fingerprint([]) == (0,)

    def test_rounds_endpoints(self):
        trace = [Coordinate(43.123456789, 76.987654321), Coordinate(43.2, 76.1)]
        assert fingerprint(trace) == (2, 43.12346, 76.98765, 43.2, 76.1)

    def test_interior_points_ignored(self):
        a = [Coordinate(1.0, 1.0), Coordinate(2.0, 2.0), Coordinate(3.0, 3.0)]
        b = [Coordinate(1.0, 1.0), Coordinate(9.0, 9.0), Coordinate(3.0, 3.0)]
        assert fingerprint(a) == fingerprint(b)

    def test_tiny_endpoint_change_ignored(self):
        a = [Coordinate(1.0, 1.0), Coordinate(3.0, 3.0)]
        b = [Coordinate(1.0, 1.0), Coordinate(3.000001, 3.0)]
        assert fingerprint(a) == fingerprint(b)


class TestTraceCache:
    """Tests for TraceCache."""

    def test_hit_skips_network(self):
        cache, client = _cache()
        trace = _trace(20)

        first = asyncio.run(cache.get_or_snap(trace))
        second = asyncio.run(cache.get_or_snap(list(trace)))

        assert client.calls == 1
        assert first == second
        assert cache.entry is not None

    def test_changed_last_point_misses(self):
        cache, client = _cache()
        trace = _trace(20)
        asyncio.run(cache.get_or_snap(trace))

        moved = trace[:-1] + [LocationSample(43.01, 76.0, timestamp=200_000)]
        asyncio.run(cache.get_or_snap(moved))
        assert client.calls == 2

    def test_appended_point_misses(self):
        cache, client = _cache()
        trace = _trace(20)
        asyncio.run(cache.get_or_snap(trace))
        asyncio.run(cache.get_or_snap(_trace(21)))
        assert client.calls == 2

    def test_single_slot(self):
        cache, client = _cache()
        a, b = _trace(10), _trace(10, start_lat=44.0)
        for trace in (a, b, a):
            asyncio.run(cache.get_or_snap(trace))
        assert client.calls == 3

    def test_clear_forces_resnap(self):
        cache, client = _cache()
        trace = _trace(10)
        asyncio.run(cache.get_or_snap(trace))
        cache.clear()
        assert cache.entry is None
        asyncio.run(cache.get_or_snap(trace))
        assert client.calls == 2

    def test_empty_trace_not_stored(self):
        cache, client = _cache()
        assert asyncio.run(cache.get_or_snap([])) == []
        assert cache.entry is None
        assert client.calls == 0

    def test_lookup(self):
        cache, _ = _cache()
        trace = _trace(10)
        assert cache.lookup(trace) is None
        result = asyncio.run(cache.get_or_snap_with_report(trace))
        hit = cache.lookup(trace)
        assert hit is not None
        assert hit.coordinates == result.coordinates
        assert hit.snapped

    def test_returned_list_does_not_alias_cache(self):
        cache, _ = _cache()
        trace = _trace(10)
        result = asyncio.run(cache.get_or_snap(trace))
        result.clear()
        assert len(asyncio.run(cache.get_or_snap(trace))) == 10

    def test_raw_fallback_is_cached(self):
        snapper = RoadSnapper(SnapSettings(api_key=None))
        cache = TraceCache(snapper)
        trace = _trace(5)
        assert asyncio.run(cache.get_or_snap(trace)) == to_coordinates(trace)
        assert cache.entry is not None
