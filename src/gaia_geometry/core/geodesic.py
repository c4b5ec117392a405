"""Great-circle math on a spherical Earth.

All functions take and return degrees; computations happen in radians.
The Earth is modelled as a sphere of radius ``EARTH_RADIUS``.
"""

import math

from gaia_geometry.core.constants import EARTH_RADIUS
from gaia_geometry.models import GeoCoordinate


def angular_distance(a: GeoCoordinate, b: GeoCoordinate) -> float:
    """Great-circle central angle between two coordinates, in radians."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * math.asin(math.sqrt(min(1.0, max(0.0, h))))


def interpolate(from_: GeoCoordinate, to: GeoCoordinate, fraction: float) -> GeoCoordinate:
    """Return the point ``fraction`` of the way from ``from_`` to ``to``.

    Follows the shortest great-circle path (spherical linear interpolation).
    Fractions outside [0, 1] extrapolate along the same great circle.

    When both coordinates are the same point the arc has no direction and
    ``from_`` is returned unchanged for every fraction.
    """
    delta = angular_distance(from_, to)
    if delta == 0.0:
        return from_

    lat1, lat2 = math.radians(from_.latitude), math.radians(to.latitude)
    lon1, lon2 = math.radians(from_.longitude), math.radians(to.longitude)

    sin_delta = math.sin(delta)
    a = math.sin((1 - fraction) * delta) / sin_delta
    b = math.sin(fraction * delta) / sin_delta

    x = a * math.cos(lat1) * math.cos(lon1) + b * math.cos(lat2) * math.cos(lon2)
    y = a * math.cos(lat1) * math.sin(lon1) + b * math.cos(lat2) * math.sin(lon2)
    z = a * math.sin(lat1) + b * math.sin(lat2)

    return GeoCoordinate(
        latitude=math.degrees(math.atan2(z, math.sqrt(x * x + y * y))),
        longitude=math.degrees(math.atan2(y, x)),
    )


def heading(from_: GeoCoordinate, to: GeoCoordinate) -> float:
    """Initial heading at ``from_`` towards ``to``, degrees clockwise of north.

    The result is in [0, 360). Identical coordinates give 0.
    """
    lat1, lat2 = math.radians(from_.latitude), math.radians(to.latitude)
    dlon = math.radians(to.longitude - from_.longitude)

    y = math.sin(dlon) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)
    theta = math.degrees(math.atan2(y, x))

    result = (theta + 360.0) % 360.0
    return result if result < 360.0 else 0.0


def offset(from_: GeoCoordinate, distance: float, heading: float) -> GeoCoordinate:
    """Destination after travelling ``distance`` meters from ``from_``.

    The path is a great-circle arc leaving ``from_`` at the initial ``heading``
    (degrees clockwise of north). The longitude of the result is in [-180, 180).
    """
    delta = distance / EARTH_RADIUS
    theta = math.radians(heading)

    lat1 = math.radians(from_.latitude)
    lon1 = math.radians(from_.longitude)

    sin_lat2 = math.sin(lat1) * math.cos(delta) + math.cos(lat1) * math.sin(delta) * math.cos(theta)
    lat2 = math.asin(max(-1.0, min(1.0, sin_lat2)))
    x = math.cos(delta) - math.sin(lat1) * math.sin(lat2)
    y = math.sin(theta) * math.sin(delta) * math.cos(lat1)
    lon2 = lon1 + math.atan2(y, x)

    return GeoCoordinate(
        latitude=math.degrees(lat2),
        longitude=(math.degrees(lon2) + 540.0) % 360.0 - 180.0,
    )
