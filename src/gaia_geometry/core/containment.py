"""Point-in-polygon tests on the sphere.

A polygon is a closed loop of coordinates whose edges are either great-circle
arcs (geodesic) or rhumb lines. A point is inside when the meridian arc from
the point down to the South Pole crosses the polygon's edges an odd number of
times, so the South Pole itself is always outside.
"""

import math
from typing import Iterable, Sequence

from gaia_geometry.core.constants import DEFAULT_PRECISION
from gaia_geometry.core.polyline import decode
from gaia_geometry.models import GeoCoordinate

_HALF_PI = math.pi / 2


def _wrap(value: float) -> float:
    """Wrap an angle in radians into [-pi, pi)."""
    return (value + math.pi) % (2 * math.pi) - math.pi


def _mercator(latitude: float) -> float:
    return math.log(math.tan(latitude * 0.5 + math.pi / 4))


def intersects(
    lat1: float, lat2: float, lng2: float, lat3: float, lng3: float, geodesic: bool
) -> bool:
    """Whether the arc from (lat3, lng3) south to the pole crosses an edge.

    The edge runs from (lat1, 0) to (lat2, lng2); longitudes have already been
    shifted so the edge starts at longitude 0. All values are radians.
    """
    # Both ends on the same side of lng3.
    if (lng3 >= 0 and lng3 >= lng2) or (lng3 < 0 and lng3 < lng2):
        return False
    # South Pole.
    if lat3 <= -_HALF_PI:
        return False
    # Any segment end is a pole.
    if lat1 <= -_HALF_PI or lat2 <= -_HALF_PI or lat1 >= _HALF_PI or lat2 >= _HALF_PI:
        return False
    if lng2 <= -math.pi:
        return False

    linear_lat = (lat1 * (lng2 - lng3) + lat2 * lng3) / lng2
    # Northern hemisphere and point under the lat/lng line.
    if lat1 >= 0 and lat2 >= 0 and lat3 < linear_lat:
        return False
    # Southern hemisphere and point above the lat/lng line.
    if lat1 <= 0 and lat2 <= 0 and lat3 >= linear_lat:
        return True
    # North Pole.
    if lat3 >= _HALF_PI:
        return True

    # Compare through a strictly increasing function of latitude.
    if geodesic:
        # tan(latitude at lng3) on the great circle (lat1, 0) to (lat2, lng2).
        numerator = math.tan(lat1) * math.sin(lng2 - lng3) + math.tan(lat2) * math.sin(lng3)
        return math.tan(lat3) >= numerator / math.sin(lng2)

    # Mercator y at lng3 on the rhumb line (lat1, 0) to (lat2, lng2).
    x = _mercator(lat1) * (lng2 - lng3)
    y = _mercator(lat2) * lng3
    return _mercator(lat3) >= (x + y) / lng2


def contains_position(
    polygon: Sequence[GeoCoordinate], position: GeoCoordinate, geodesic: bool = False
) -> bool:
    """Whether position lies inside the closed polygon.

    Args:
        polygon: Vertices; the last one connects back to the first.
        position: The point to test.
        geodesic: Edges are great-circle arcs if True, rhumb lines otherwise.

    Returns:
        True when inside. A position exactly on a vertex counts as inside;
        an empty polygon contains nothing.
    """
    if not polygon:
        return False

    lat3 = math.radians(position.latitude)
    lng3 = math.radians(position.longitude)

    prev = polygon[-1]
    lat1 = math.radians(prev.latitude)
    lng1 = math.radians(prev.longitude)

    crossings = 0
    for point in polygon:
        dlng3 = _wrap(lng3 - lng1)
        if lat3 == lat1 and dlng3 == 0:
            return True

        lat2 = math.radians(point.latitude)
        lng2 = math.radians(point.longitude)
        if intersects(lat1, lat2, _wrap(lng2 - lng1), lat3, dlng3, geodesic):
            crossings += 1

        lat1, lng1 = lat2, lng2

    return crossings % 2 == 1


def encoded_polygon_contains_position(
    position: GeoCoordinate,
    encoded_polygon: str,
    geodesic: bool = False,
    precision: float = DEFAULT_PRECISION,
) -> bool:
    """Whether position lies inside a polygon given as an encoded path.

    An encoded path that cannot be decoded contains nothing.
    """
    polygon = decode(encoded_polygon, precision)
    if polygon is None:
        return False
    return contains_position(polygon, position, geodesic)


def do_encoded_polygons_contain_position(
    encoded_polygons: Iterable[str],
    position: GeoCoordinate,
    geodesic: bool = False,
    precision: float = DEFAULT_PRECISION,
) -> bool:
    """True if any of the encoded polygons contains position."""
    return any(
        encoded_polygon_contains_position(position, encoded, geodesic, precision)
        for encoded in encoded_polygons
    )
