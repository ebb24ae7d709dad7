"""
Tests for GPX import.
"""

import pytest

from triptrace.features.trips.gpx_loader import load_gpx_samples


TRACK_GPX = b"""<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <trk>
    <name>Morning ride</name>
    <trkseg>
      <trkpt lat="43.2380" lon="76.8890"><time>2024-05-01T06:00:00Z</time></trkpt>
      <trkpt lat="43.2390" lon="76.8900"><time>2024-05-01T06:00:10Z</time></trkpt>
    </trkseg>
    <trkseg>
      <trkpt lat="43.2400" lon="76.8910"><time>2024-05-01T06:05:00Z</time></trkpt>
    </trkseg>
  </trk>
</gpx>
"""

ROUTE_GPX = b"""<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <rte>
    <rtept lat="43.0" lon="76.0"></rtept>
    <rtept lat="43.1" lon="76.1"></rtept>
  </rte>
</gpx>
"""


class TestLoadGpxSamples:
    """Tests for load_gpx_samples()."""

    def test_track_points_in_order(self):
        samples = load_gpx_samples(TRACK_GPX)
        assert [(s.latitude, s.longitude) for s in samples] == [
            (43.238, 76.889),
            (43.239, 76.89),
            (43.24, 76.891),
        ]

    def test_timestamps_in_ms(self):
        samples = load_gpx_samples(TRACK_GPX)
        assert samples[0].timestamp == 1714543200000
        assert samples[1].timestamp - samples[0].timestamp == 10_000

    def test_accuracy_unset(self):
        assert all(s.accuracy is None for s in load_gpx_samples(TRACK_GPX))

    def test_route_fallback_without_time(self):
        samples = load_gpx_samples(ROUTE_GPX)
        assert len(samples) == 2
        assert all(s.timestamp == 0 for s in samples)

    def test_empty_gpx(self):
        content = b'<?xml version="1.0"?><gpx version="1.1" creator="t"></gpx>'
        assert load_gpx_samples(content) == []

    def test_invalid_gpx(self):
        with pytest.raises(ValueError):
            load_gpx_samples(b"this is not xml")
