"""Geometry of the shapes map adapters draw: paths, polylines, polygons, circles.

Only the geographic data lives here. Styling (colors, stroke widths, z-order)
belongs to the adapters that render these shapes.
"""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from gaia_geometry.bounds import CoordinateBounds
from gaia_geometry.core.constants import DEFAULT_PRECISION
from gaia_geometry.core.containment import contains_position
from gaia_geometry.core.distance import distance_array
from gaia_geometry.core.geodesic import offset
from gaia_geometry.core.polyline import decode, encode
from gaia_geometry.models import GeoCoordinate


class Path(BaseModel):
    """An immutable, ordered sequence of coordinates."""
    model_config = ConfigDict(frozen=True)

    coordinates: tuple[GeoCoordinate, ...] = ()

    @classmethod
    def from_encoded_path(
        cls, encoded_path: str, precision: float = DEFAULT_PRECISION
    ) -> Optional["Path"]:
        """Build a path from Google's Encoded Polyline Algorithm Format.

        Returns None if the string is not a valid encoded path.
        """
        coordinates = decode(encoded_path, precision)
        if coordinates is None:
            return None
        return cls(coordinates=tuple(coordinates))

    def encoded_path(self, precision: float = DEFAULT_PRECISION) -> str:
        return encode(self.coordinates, precision)

    def length(self) -> float:
        """Sum of the segment distances in meters (inf if any point is invalid)."""
        if len(self.coordinates) < 2:
            return 0.0
        lats = np.array([c.latitude for c in self.coordinates], dtype=float)
        lons = np.array([c.longitude for c in self.coordinates], dtype=float)
        return float(np.sum(distance_array(lats[:-1], lons[:-1], lats[1:], lons[1:])))


class Shape(BaseModel, ABC):
    """Base class for shapes that cover an area of the map."""
    model_config = ConfigDict(frozen=True)

    @property
    @abstractmethod
    def bounds(self) -> Optional[CoordinateBounds]:
        """The box enclosing the shape, or None if it has no extent."""


class Polyline(Shape):
    """A line drawn through the points of a path, in order."""

    coordinates: tuple[GeoCoordinate, ...] = ()

    @classmethod
    def from_encoded_path(
        cls, encoded_path: str, precision: float = DEFAULT_PRECISION
    ) -> Optional["Polyline"]:
        path = Path.from_encoded_path(encoded_path, precision)
        if path is None:
            return None
        return cls(coordinates=path.coordinates)

    @classmethod
    def from_path(cls, path: Path) -> "Polyline":
        return cls(coordinates=path.coordinates)

    @property
    def path(self) -> Path:
        return Path(coordinates=self.coordinates)

    @property
    def bounds(self) -> Optional[CoordinateBounds]:
        return CoordinateBounds.from_coordinates(self.coordinates)


class Polygon(Polyline):
    """A closed loop of coordinates; the last point connects to the first."""

    def contains_position(self, position: GeoCoordinate, geodesic: bool = False) -> bool:
        """Whether position lies inside the polygon.

        Edges are great-circle arcs when ``geodesic`` is True and rhumb lines
        otherwise. The South Pole is always outside.
        """
        return contains_position(self.coordinates, position, geodesic)


class Circle(Shape):
    """A spherical cap given by its center and radius in meters."""

    center: GeoCoordinate
    radius: float = Field(ge=0)

    @property
    def bounds(self) -> CoordinateBounds:
        # Corners sit one radius out along the diagonals, so the box is
        # smaller than the cap itself.
        north_west = offset(self.center, self.radius, 315.0)
        south_east = offset(self.center, self.radius, 135.0)
        return CoordinateBounds.from_corners(north_west, south_east)
