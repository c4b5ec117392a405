"""Encoded Polyline Algorithm Format codec.

Byte compatible with Google's published algorithm: each value is scaled by
the precision, delta encoded against the previous coordinate, zigzag mapped
and written as 5-bit little-endian groups offset by 63. Some providers use
a precision of 1e6 instead of the default 1e5.
"""

import logging
import math
from typing import Iterable

from gaia_geometry.core.constants import DEFAULT_PRECISION, MAX_GROUPS_PER_VALUE
from gaia_geometry.models import GeoCoordinate

logger = logging.getLogger(__name__)

_CONTINUATION = 0x20
_GROUP_MASK = 0x1F
_OFFSET = 63
_MAX_CHAR = 126


class _MalformedPath(Exception):
    def __init__(self, reason: str, index: int):
        super().__init__(reason)
        self.reason = reason
        self.index = index


def _check_precision(precision: float) -> None:
    if not precision > 0:
        raise ValueError(f"precision must be positive, got {precision}")


def _round(value: float) -> int:
    # Half away from zero, as the reference encoder does.
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _encode_value(value: int, out: list[str]) -> None:
    value = ~(value << 1) if value < 0 else value << 1
    while value >= _CONTINUATION:
        out.append(chr((_CONTINUATION | (value & _GROUP_MASK)) + _OFFSET))
        value >>= 5
    out.append(chr(value + _OFFSET))


def encode(coordinates: Iterable[GeoCoordinate], precision: float = DEFAULT_PRECISION) -> str:
    """Encode coordinates as a polyline string.

    Args:
        coordinates: Ordered coordinates to encode.
        precision: Scale applied before rounding (1e5 or 1e6 in practice).

    Returns:
        The encoded path. An empty sequence encodes to "". Coordinates with a
        NaN or infinite component have no encoding and are left out; the
        next coordinate is delta encoded against the last one written.
    """
    _check_precision(precision)

    out: list[str] = []
    prev_lat = 0
    prev_lon = 0
    skipped = 0
    for coordinate in coordinates:
        if not (math.isfinite(coordinate.latitude) and math.isfinite(coordinate.longitude)):
            skipped += 1
            continue
        lat = _round(coordinate.latitude * precision)
        lon = _round(coordinate.longitude * precision)
        _encode_value(lat - prev_lat, out)
        _encode_value(lon - prev_lon, out)
        prev_lat, prev_lon = lat, lon

    if skipped:
        logger.debug("Skipping %d non-finite coordinates while encoding", skipped)
    return "".join(out)


def _decode_value(encoded: str, index: int) -> tuple[int, int]:
    """Read one zigzag value starting at index; return (value, next index)."""
    result = 0
    shift = 0
    groups = 0
    while True:
        if index >= len(encoded):
            raise _MalformedPath("input ends inside a value", index)
        if groups == MAX_GROUPS_PER_VALUE:
            raise _MalformedPath("value exceeds maximum group count", index)

        code = ord(encoded[index])
        if code < _OFFSET or code > _MAX_CHAR:
            raise _MalformedPath(f"character {encoded[index]!r} out of range", index)

        b = code - _OFFSET
        index += 1
        groups += 1
        result |= (b & _GROUP_MASK) << shift
        shift += 5
        if b < _CONTINUATION:
            break

    value = ~(result >> 1) if result & 1 else result >> 1
    return value, index


def decode(encoded: str, precision: float = DEFAULT_PRECISION) -> list[GeoCoordinate] | None:
    """Decode a polyline string into coordinates.

    Decoding is all or nothing: a truncated path, a value spanning more than
    ``MAX_GROUPS_PER_VALUE`` groups or a character outside [63, 126] makes
    the whole path unreadable and ``None`` is returned.
    """
    _check_precision(precision)

    coordinates = []
    lat = 0
    lon = 0
    index = 0
    try:
        while index < len(encoded):
            dlat, index = _decode_value(encoded, index)
            dlon, index = _decode_value(encoded, index)
            lat += dlat
            lon += dlon
            coordinates.append(GeoCoordinate(latitude=lat / precision, longitude=lon / precision))
    except _MalformedPath as exc:
        logger.debug("Rejected encoded path at offset %d: %s", exc.index, exc.reason)
        return None

    return coordinates
