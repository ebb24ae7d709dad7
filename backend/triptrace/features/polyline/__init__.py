"""
Encoded polyline module.

Usage:
    from triptrace.features.polyline import encode, decode, CorruptEncodingError
"""

from .codec import CorruptEncodingError, DEFAULT_PRECISION, decode, encode

__all__ = [
    "encode",
    "decode",
    "CorruptEncodingError",
    "DEFAULT_PRECISION",
]
