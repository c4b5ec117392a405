"""Shared numeric constants for the geometry core."""

# Equatorial radius used for every spherical computation, in meters.
EARTH_RADIUS = 6378137.0

DEFAULT_PRECISION = 1e5
HIGH_PRECISION = 1e6

# Coordinates compare equal when they match at 5 decimal digits (~1.1 m).
EQUALITY_SCALE = 1e5

# 6 groups of 5 bits is enough for any longitude at 1e6 precision.
MAX_GROUPS_PER_VALUE = 6
