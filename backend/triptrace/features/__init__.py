"""
Feature modules.

- tracking: point types, noise filtering, trace buffer, segmentation
- polyline: encoded polyline codec
- snapping: snap-to-roads client, orchestrator and cache
- trips: end-of-trip route pipeline and GPX import
"""
