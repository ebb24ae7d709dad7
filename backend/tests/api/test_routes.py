"""
Tests for the HTTP API.

The trace cache is overridden with one backed by a fake snap client.
"""

import pytest
from fastapi.testclient import TestClient

from triptrace.api.deps import get_trace_cache
from triptrace.features.snapping import RoadSnapper, SnapSettings, TraceCache
from triptrace.features.tracking.models import Coordinate
from triptrace.main import app

REFERENCE_POLYLINE = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"
REFERENCE_POINTS = [
    {"latitude": 38.5, "longitude": -120.2},
    {"latitude": 40.7, "longitude": -120.95},
    {"latitude": 43.252, "longitude": -126.453},
]

GPX = b"""<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <trk><trkseg>
    <trkpt lat="43.0000" lon="76.0"><time>2024-05-01T06:00:00Z</time></trkpt>
    <trkpt lat="43.0005" lon="76.0"><time>2024-05-01T06:00:10Z</time></trkpt>
    <trkpt lat="43.0010" lon="76.0"><time>2024-05-01T06:00:20Z</time></trkpt>
  </trkseg></trk>
</gpx>
"""


class EchoClient:
    def __init__(self):
        self.calls = 0

    async def snap_path(self, points):
        self.calls += 1
        return [Coordinate(p.latitude, p.longitude) for p in points]


def _samples(count):
    return [
        {"latitude": 43.0 + i * 0.0005, "longitude": 76.0, "timestamp": i * 10_000}
        for i in range(count)
    ]


@pytest.fixture
def snap_client():
    return EchoClient()


@pytest.fixture
def client(snap_client):
    cache = TraceCache(RoadSnapper(SnapSettings(api_key="k"), client=snap_client))
    app.dependency_overrides[get_trace_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestGeometryRoutes:
    def test_distance(self, client):
        response = client.post("/api/v1/distance", json={"points": [
            {"latitude": 0.0, "longitude": 0.0},
            {"latitude": 0.0, "longitude": 1.0},
        ]})
        assert response.status_code == 200
        assert response.json() == {"distance_km": 111.19, "point_count": 2}

    def test_distance_single_point(self, client):
        response = client.post("/api/v1/distance", json={"points": [{"latitude": 1, "longitude": 2}]})
        assert response.json()["distance_km"] == 0.0

    def test_invalid_latitude(self, client):
        response = client.post("/api/v1/distance", json={"points": [{"latitude": 91, "longitude": 0}]})
        assert response.status_code == 422

    def test_encode(self, client):
        response = client.post("/api/v1/polyline/encode", json={"points": REFERENCE_POINTS})
        assert response.status_code == 200
        assert response.json() == {"polyline": REFERENCE_POLYLINE, "point_count": 3}

    def test_decode(self, client):
        response = client.post("/api/v1/polyline/decode", json={"polyline": REFERENCE_POLYLINE})
        assert response.status_code == 200
        assert response.json()["points"] == REFERENCE_POINTS

    def test_decode_corrupt(self, client):
        response = client.post("/api/v1/polyline/decode", json={"polyline": "_p~iF~ps|U_"})
        assert response.status_code == 400


class TestTraceRoutes:
    def test_snap_then_cached(self, client, snap_client):
        body = {"samples": _samples(10)}

        first = client.post("/api/v1/traces/snap", json=body).json()
        second = client.post("/api/v1/traces/snap", json=body).json()

        assert first["snapped"] is True
        assert first["cached"] is False
        assert second["cached"] is True
        assert second["points"] == first["points"]
        assert snap_client.calls == 1

    def test_snap_force(self, client, snap_client):
        body = {"samples": _samples(10)}
        client.post("/api/v1/traces/snap", json=body)
        response = client.post("/api/v1/traces/snap", json={**body, "force": True}).json()
        assert response["cached"] is False
        assert snap_client.calls == 2

    def test_finalize(self, client):
        response = client.post("/api/v1/traces/finalize", json={"samples": _samples(20)})
        assert response.status_code == 200
        data = response.json()
        assert data["point_count"] == 20
        assert data["raw_point_count"] == 20
        assert data["distance_km"] == pytest.approx(1.06, abs=0.01)
        assert data["encoded_polyline"]

    def test_finalize_empty(self, client):
        response = client.post("/api/v1/traces/finalize", json={"samples": []})
        assert response.status_code == 200
        assert response.json()["points"] == []

    def test_gpx_upload(self, client):
        response = client.post(
            "/api/v1/traces/gpx",
            files={"file": ("ride.gpx", GPX, "application/gpx+xml")},
        )
        assert response.status_code == 200
        assert response.json()["point_count"] == 3

    def test_gpx_wrong_extension(self, client):
        response = client.post(
            "/api/v1/traces/gpx",
            files={"file": ("ride.txt", GPX, "text/plain")},
        )
        assert response.status_code == 400

    def test_gpx_empty_file(self, client):
        response = client.post(
            "/api/v1/traces/gpx",
            files={"file": ("ride.gpx", b"", "application/gpx+xml")},
        )
        assert response.status_code == 400

    def test_gpx_invalid(self, client):
        response = client.post(
            "/api/v1/traces/gpx",
            files={"file": ("ride.gpx", b"not a gpx", "application/gpx+xml")},
        )
        assert response.status_code == 400


def test_run_serves_app_with_uvicorn(monkeypatch):
    import triptrace.main as main_module

    calls = []
    monkeypatch.setattr(main_module.uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))
    main_module.run()

    assert len(calls) == 1
    args, kwargs = calls[0]
    assert args == ("triptrace.main:app",)
    assert kwargs["host"] == main_module.settings.host
    assert kwargs["port"] == main_module.settings.port
