"""Pydantic value types for geographic coordinates."""

import math

from pydantic import BaseModel, ConfigDict

from gaia_geometry.core.constants import EQUALITY_SCALE


def _scaled(value: float) -> int:
    """Round value * EQUALITY_SCALE half away from zero."""
    return int(math.copysign(math.floor(abs(value) * EQUALITY_SCALE + 0.5), value))


class GeoCoordinate(BaseModel):
    """A latitude/longitude pair in degrees.

    No range validation happens on construction: coordinates coming from
    external sources may be out of range or NaN and are carried around as
    invalid values instead (see ``is_valid``).

    Equality is rounding based: two valid coordinates are equal when they
    match at 5 decimal digits. Invalid coordinates only equal other invalid
    coordinates.
    """
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float

    @property
    def is_valid(self) -> bool:
        return -90.0 <= self.latitude <= 90.0 and -180.0 <= self.longitude <= 180.0

    def as_tuple(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)

    def _key(self) -> tuple[int, int] | None:
        if not self.is_valid:
            return None
        return (_scaled(self.latitude), _scaled(self.longitude))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GeoCoordinate):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())
