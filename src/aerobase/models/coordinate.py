"""Geographic coordinate value type."""

import math
from dataclasses import dataclass

from aerobase.errors import InvalidInputError


@dataclass(frozen=True)
class Coordinate:
    """Geographic position in decimal degrees (WGS84).

    Construction does not validate, so geometry functions stay total over
    whatever the caller hands them. Use ``Coordinate.validated`` at input
    seams where out-of-range values must be rejected.

    Attributes:
        latitude: Latitude in degrees, valid range [-90, 90]
        longitude: Longitude in degrees, valid range [-180, 180]

    Examples:
        >>> jfk = Coordinate(40.6413, -73.7781)
        >>> Coordinate.validated(91.0, 0.0)
        Traceback (most recent call last):
        ...
        aerobase.errors.InvalidInputError: Latitude out of range: 91.0
    """

    latitude: float
    longitude: float

    @classmethod
    def validated(cls, latitude: float, longitude: float) -> "Coordinate":
        """Create a coordinate, rejecting out-of-range or non-finite values.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees

        Returns:
            New Coordinate

        Raises:
            InvalidInputError: If either value is NaN, infinite or out of range
        """
        coord = cls(float(latitude), float(longitude))
        coord.check()
        return coord

    def is_valid(self) -> bool:
        """Check the range invariant.

        Returns:
            True if both components are finite and within range
        """
        return (
            math.isfinite(self.latitude)
            and math.isfinite(self.longitude)
            and -90.0 <= self.latitude <= 90.0
            and -180.0 <= self.longitude <= 180.0
        )

    def check(self) -> None:
        """Raise if the coordinate violates the range invariant.

        Raises:
            InvalidInputError: If latitude or longitude is invalid
        """
        if not (math.isfinite(self.latitude) and -90.0 <= self.latitude <= 90.0):
            raise InvalidInputError(f"Latitude out of range: {self.latitude}")
        if not (math.isfinite(self.longitude) and -180.0 <= self.longitude <= 180.0):
            raise InvalidInputError(f"Longitude out of range: {self.longitude}")

    def __str__(self) -> str:
        return f"({self.latitude:.4f}, {self.longitude:.4f})"
