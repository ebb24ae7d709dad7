"""
Tests for Settings.
"""

import pytest
from pydantic import ValidationError

from triptrace.config import Settings
from triptrace.features.snapping import SnapSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("ROADS_API_KEY", "GOOGLE_MAPS_API_KEY", "SNAP_CHUNK_OVERLAP"):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.roads_api_key is None
        assert s.snap_max_points_per_request == 100
        assert s.snap_max_total_points == 500
        assert s.snap_chunk_overlap == 3
        assert s.port == 8000
        assert s.filter_max_reported_speed_mps == 45.0

    def test_blank_key_is_missing(self):
        assert Settings(_env_file=None, roads_api_key="   ").roads_api_key is None

    def test_key_from_env_alias(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "abc")
        assert Settings(_env_file=None).roads_api_key == "abc"

    def test_overlap_must_be_smaller_than_chunk(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, snap_chunk_overlap=100)

    def test_snap_settings_from_settings(self):
        s = Settings(_env_file=None, roads_api_key="k", snap_max_gap_km=1.5)
        snap = SnapSettings.from_settings(s)
        assert snap.api_key == "k"
        assert snap.max_gap_km == 1.5
        assert snap.total_timeout_seconds == 30.0
