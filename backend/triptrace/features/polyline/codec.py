"""
Encoded polyline codec.

Compresses a coordinate sequence into the common "encoded polyline" text
format: coordinates scaled to integers (1e5 by default), delta-encoded
against the previous point and written as 5-bit groups offset by ASCII 63.
"""

import math
from typing import List, Sequence

from triptrace.features.tracking.models import Coordinate, HasLatLon

DEFAULT_PRECISION = 5

_CHAR_OFFSET = 63
_CONTINUATION = 0x20
_GROUP_MASK = 0x1F


class CorruptEncodingError(ValueError):
    """Encoded polyline is truncated or contains invalid characters."""

    def __init__(self, message: str, position: int):
        self.position = position
        super().__init__(f"{message} (at index {position})")


def _scale(value: float, factor: int) -> int:
    if not math.isfinite(value):
        raise ValueError(f"Coordinate must be finite, got {value!r}")
    # Round half away from zero
    scaled = math.floor(abs(value) * factor + 0.5)
    return -scaled if value < 0 else scaled


def _encode_value(value: int, out: List[str]) -> None:
    shifted = value << 1
    if value < 0:
        shifted = ~shifted

    while shifted >= _CONTINUATION:
        out.append(chr(((shifted & _GROUP_MASK) | _CONTINUATION) + _CHAR_OFFSET))
        shifted >>= 5
    out.append(chr(shifted + _CHAR_OFFSET))


def encode(points: Sequence[HasLatLon], precision: int = DEFAULT_PRECISION) -> str:
    """
    Encode coordinates into a polyline string.

    Args:
        points: Ordered points with latitude/longitude (degrees)
        precision: Decimal places kept (5 for the standard format)

    Returns:
        Encoded polyline, empty string for empty input

    Raises:
        ValueError: If a coordinate is NaN or infinite
    """
    factor = 10 ** precision
    out: List[str] = []
    prev_lat = 0
    prev_lon = 0

    for point in points:
        lat = _scale(point.latitude, factor)
        lon = _scale(point.longitude, factor)

        _encode_value(lat - prev_lat, out)
        _encode_value(lon - prev_lon, out)

        prev_lat = lat
        prev_lon = lon

    return "".join(out)


def _decode_value(encoded: str, index: int) -> tuple[int, int]:
    """Read one signed value starting at index; return (value, next_index)."""
    result = 0
    shift = 0
    length = len(encoded)

    while True:
        if index >= length:
            raise CorruptEncodingError("Truncated polyline value", index)
        chunk = ord(encoded[index]) - _CHAR_OFFSET
        if chunk < 0 or chunk > 0x3F:
            raise CorruptEncodingError(
                f"Invalid polyline character {encoded[index]!r}", index
            )
        index += 1
        result |= (chunk & _GROUP_MASK) << shift
        shift += 5
        if chunk < _CONTINUATION:
            break

    if result & 1:
        return ~(result >> 1), index
    return result >> 1, index


def decode(encoded: str, precision: int = DEFAULT_PRECISION) -> List[Coordinate]:
    """
    Decode a polyline string back into coordinates.

    Args:
        encoded: Encoded polyline
        precision: Decimal places used when encoding

    Returns:
        List of Coordinate, empty for an empty string

    Raises:
        CorruptEncodingError: If the string is truncated, has a latitude
            without its longitude, or contains characters outside the
            polyline alphabet. Nothing is returned for a corrupt string.
    """
    factor = 10 ** precision
    coordinates: List[Coordinate] = []
    index = 0
    lat = 0
    lon = 0
    length = len(encoded)

    while index < length:
        d_lat, index = _decode_value(encoded, index)
        if index >= length:
            raise CorruptEncodingError("Latitude without longitude", index)
        d_lon, index = _decode_value(encoded, index)

        lat += d_lat
        lon += d_lon
        coordinates.append(Coordinate(lat / factor, lon / factor))

    return coordinates
