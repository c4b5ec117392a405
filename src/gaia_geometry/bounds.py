"""Rectangular latitude/longitude bounding boxes.

``CoordinateBounds`` is immutable: every derivation returns a new instance.

Boxes crossing the 180th meridian can be represented (``east < west``) and
are produced by ``from_corners`` when that is the smaller box, but
``from_coordinates`` and ``including_bounds`` do not handle them and
neither supports boxes enclosing a pole.
"""

import logging
from typing import Iterable, Optional, Protocol

import numpy as np
from pydantic import BaseModel, ConfigDict, model_validator

from gaia_geometry.core.distance import distance
from gaia_geometry.core.geodesic import heading, interpolate, offset
from gaia_geometry.models import GeoCoordinate

logger = logging.getLogger(__name__)


class HasBounds(Protocol):
    @property
    def bounds(self) -> Optional["CoordinateBounds"]: ...


class CoordinateBounds(BaseModel):
    model_config = ConfigDict(frozen=True)

    north_east: GeoCoordinate
    south_west: GeoCoordinate

    @model_validator(mode="after")
    def check_north_ge_south(self) -> "CoordinateBounds":
        if self.north_east.latitude < self.south_west.latitude:
            raise ValueError(
                f"north ({self.north_east.latitude}) must not be below "
                f"south ({self.south_west.latitude})"
            )
        return self

    @property
    def north(self) -> float:
        return self.north_east.latitude

    @property
    def south(self) -> float:
        return self.south_west.latitude

    @property
    def east(self) -> float:
        return self.north_east.longitude

    @property
    def west(self) -> float:
        return self.south_west.longitude

    @property
    def crosses_antimeridian(self) -> bool:
        return self.east < self.west

    @property
    def lat_range(self) -> float:
        return self.north - self.south

    @property
    def lon_range(self) -> float:
        if self.crosses_antimeridian:
            return 360.0 - (self.west - self.east)
        return self.east - self.west

    @property
    def center(self) -> GeoCoordinate:
        """Great-circle midpoint of the north-east and south-west corners."""
        return interpolate(self.north_east, self.south_west, 0.5)

    def contains(self, coordinate: GeoCoordinate) -> bool:
        if not self.south <= coordinate.latitude <= self.north:
            return False
        if self.crosses_antimeridian:
            return coordinate.longitude >= self.west or coordinate.longitude <= self.east
        return self.west <= coordinate.longitude <= self.east

    @classmethod
    def from_coordinates(cls, coordinates: Iterable[GeoCoordinate]) -> Optional["CoordinateBounds"]:
        """Smallest non-wrapping box containing every valid coordinate.

        Invalid coordinates are skipped. Returns None if none is valid.
        """
        coordinates = list(coordinates)
        valid = [c for c in coordinates if c.is_valid]
        if len(valid) < len(coordinates):
            logger.debug("Skipping %d invalid coordinates", len(coordinates) - len(valid))
        if not valid:
            return None

        lats = np.array([c.latitude for c in valid], dtype=float)
        lons = np.array([c.longitude for c in valid], dtype=float)
        # Latitude folds are seeded with +-90, longitude folds with +-180.
        north = float(lats.max(initial=-90.0))
        south = float(lats.min(initial=90.0))
        east = float(lons.max(initial=-180.0))
        west = float(lons.min(initial=180.0))

        return cls(
            north_east=GeoCoordinate(latitude=north, longitude=east),
            south_west=GeoCoordinate(latitude=south, longitude=west),
        )

    @classmethod
    def from_corners(cls, corner1: GeoCoordinate, corner2: GeoCoordinate) -> "CoordinateBounds":
        """Box with the two given opposite corners.

        Which way the longitude span runs is ambiguous, so the smaller of the
        two candidate boxes is used. That box may cross the antimeridian.
        """
        north = max(corner1.latitude, corner2.latitude)
        south = min(corner1.latitude, corner2.latitude)
        west = min(corner1.longitude, corner2.longitude)
        east = max(corner1.longitude, corner2.longitude)
        if east - west > 180.0:
            west, east = east, west

        return cls(
            north_east=GeoCoordinate(latitude=north, longitude=east),
            south_west=GeoCoordinate(latitude=south, longitude=west),
        )

    @classmethod
    def from_shapes(cls, shapes: Iterable[HasBounds]) -> Optional["CoordinateBounds"]:
        """Union of the bounds of every shape; shapes without bounds are skipped.

        Returns None when no shape has bounds.
        """
        result = None
        for shape in shapes:
            bounds = shape.bounds
            if bounds is None:
                continue
            result = bounds if result is None else result.including_bounds(bounds)
        return result

    def derive(self, center: GeoCoordinate) -> "CoordinateBounds":
        """Bounds centered at ``center`` that still contain the current box.

        The corner farthest from ``center`` is kept and projected through
        ``center`` to the same distance on the other side.
        """
        north_east_is_farther = distance(center, self.north_east) > distance(center, self.south_west)
        far_corner = self.north_east if north_east_is_farther else self.south_west
        derived_corner = interpolate(far_corner, center, 2.0)

        return CoordinateBounds.from_corners(far_corner, derived_corner)

    def translate_to(self, center: GeoCoordinate) -> "CoordinateBounds":
        """Move the box so it is centered at ``center``, keeping its size."""
        current_center = self.center
        meters = distance(current_center, center)
        angle = heading(current_center, center)

        return CoordinateBounds.from_corners(
            offset(self.north_east, meters, angle),
            offset(self.south_west, meters, angle),
        )

    def extend_south_east(self, offset_factor: float) -> "CoordinateBounds":
        """Push the south-east corner out by ``offset_factor`` times the diagonal.

        Used to shift the visual center of a map when padding is asymmetric.
        """
        north_west = GeoCoordinate(latitude=self.north, longitude=self.west)
        south_east = GeoCoordinate(latitude=self.south, longitude=self.east)

        diagonal = distance(north_west, south_east)
        moved_south_east = offset(south_east, diagonal * offset_factor, 135.0)

        return CoordinateBounds.from_corners(north_west, moved_south_east)

    def bound_to_distance(self, min_distance: float, max_distance: float) -> "CoordinateBounds":
        """Scale the box so its diagonal lies within [min_distance, max_distance] meters.

        Both corners move along the line between them. A box that is already
        within range, or has no extent at all, is returned unchanged.
        """
        if min_distance < 0 or min_distance > max_distance:
            raise ValueError(
                f"invalid distance range [{min_distance}, {max_distance}]"
            )

        visible = distance(self.north_east, self.south_west)
        if min_distance <= visible <= max_distance or visible == 0.0:
            return self

        bounded = min(max(visible, min_distance), max_distance)
        fraction = (1.0 + bounded / visible) / 2.0
        north_east = interpolate(self.south_west, self.north_east, fraction)
        south_west = interpolate(self.north_east, self.south_west, fraction)

        return CoordinateBounds.from_corners(north_east, south_west)

    def including_bounds(self, other: "CoordinateBounds") -> "CoordinateBounds":
        """Smallest box covering both boxes.

        Corners are combined component-wise and the result never wraps, so it
        is wrong when either box crosses the antimeridian.
        """
        north_east = GeoCoordinate(
            latitude=max(other.north, self.north),
            longitude=max(other.east, self.east),
        )
        south_west = GeoCoordinate(
            latitude=min(other.south, self.south),
            longitude=min(other.west, self.west),
        )

        return CoordinateBounds(north_east=north_east, south_west=south_west)
