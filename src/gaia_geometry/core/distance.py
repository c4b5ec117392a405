"""Equirectangular distance between coordinates."""

import math

import numpy as np

from gaia_geometry.core.constants import EARTH_RADIUS
from gaia_geometry.models import GeoCoordinate


def distance(a: GeoCoordinate, b: GeoCoordinate) -> float:
    """Return the distance in meters between two coordinates.

    Uses the equirectangular approximation, which is accurate at city and
    regional scale. Use ``geodesic.angular_distance`` when exact great-circle
    distances over long ranges are needed.

    Returns ``math.inf`` if either coordinate is invalid (out of range or NaN),
    so unreliable location data is treated as maximally far away.
    """
    if not a.is_valid or not b.is_valid:
        return math.inf

    lon1, lon2 = math.radians(a.longitude), math.radians(b.longitude)
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    x = (lon2 - lon1) * math.cos((lat1 + lat2) / 2.0)
    y = lat2 - lat1

    return math.sqrt(x * x + y * y) * EARTH_RADIUS


def _valid_mask(lats: np.ndarray, lons: np.ndarray) -> np.ndarray:
    # NaN compares False, so NaN entries are masked out too.
    return (lats >= -90.0) & (lats <= 90.0) & (lons >= -180.0) & (lons <= 180.0)


def distance_array(
    lats1: np.ndarray, lons1: np.ndarray, lats2: np.ndarray, lons2: np.ndarray
) -> np.ndarray:
    """Elementwise ``distance`` over arrays of latitudes/longitudes (degrees)."""
    lats1 = np.asarray(lats1, dtype=float)
    lons1 = np.asarray(lons1, dtype=float)
    lats2 = np.asarray(lats2, dtype=float)
    lons2 = np.asarray(lons2, dtype=float)

    valid = _valid_mask(lats1, lons1) & _valid_mask(lats2, lons2)

    phi1, phi2 = np.radians(lats1), np.radians(lats2)
    x = (np.radians(lons2) - np.radians(lons1)) * np.cos((phi1 + phi2) / 2.0)
    y = phi2 - phi1
    meters = np.sqrt(x * x + y * y) * EARTH_RADIUS

    return np.where(valid, meters, np.inf)
