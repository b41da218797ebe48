"""Navigational point model shared by airports and waypoints.

Typical usage:
    from aerobase.models import NavPoint

    kjfk = NavPoint.airport("KJFK", "John F Kennedy Intl", 40.6413, -73.7781, elevation_ft=13)
    merit = NavPoint.waypoint("MERIT", "MERIT", 41.3819, -73.1375, waypoint_type="fix")
"""

import time
from dataclasses import dataclass, field
from enum import Enum

from aerobase.models.coordinate import Coordinate


class NavPointKind(Enum):
    """Kind of navigational point.

    Attributes:
        AIRPORT: Airport reference point
        WAYPOINT: Enroute waypoint, navaid or fix
    """

    AIRPORT = "airport"
    WAYPOINT = "waypoint"


class WaypointType(Enum):
    """Waypoint classification.

    Attributes:
        AIRPORT: Airport used as a route point
        VOR: VHF Omnidirectional Range
        NDB: Non-Directional Beacon
        FIX: Named intersection
        GPS: RNAV/GPS waypoint
        OTHER: Anything not listed above
    """

    AIRPORT = "AIRPORT"
    VOR = "VOR"
    NDB = "NDB"
    FIX = "FIX"
    GPS = "GPS"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: str | None) -> "WaypointType":
        """Parse a waypoint type string, case-insensitively.

        Args:
            value: Type name such as "vor" or "FIX"

        Returns:
            Matching WaypointType, OTHER when unknown or empty
        """
        if not value:
            return cls.OTHER
        try:
            return cls[value.strip().upper()]
        except KeyError:
            return cls.OTHER


@dataclass(frozen=True)
class NavPoint:
    """A navigational fixed point (airport or waypoint).

    Instances are owned by an index snapshot and never mutated; a data
    refresh replaces the whole snapshot.

    Attributes:
        identifier: Unique key (ICAO code for airports)
        kind: Airport or waypoint
        coordinate: Position in degrees
        name: Display name
        elevation_ft: Field elevation (airports only)
        region: Region or state code
        waypoint_type: Classification (waypoints only)
        icao: ICAO code (airports only)
        iata: IATA code (airports only)
        country: ISO country code (airports only)
        frequency: Navaid frequency, MHz for a VOR and kHz for an NDB
        range_nm: Navaid service range in nautical miles
        created_at: Creation time, epoch seconds
    """

    identifier: str
    kind: NavPointKind
    coordinate: Coordinate
    name: str = ""
    elevation_ft: int | None = None
    region: str | None = None
    waypoint_type: WaypointType | None = None
    icao: str | None = None
    iata: str | None = None
    country: str | None = None
    frequency: float | None = None
    range_nm: float | None = None
    created_at: int = field(default_factory=lambda: int(time.time()), compare=False)

    @classmethod
    def airport(
        cls,
        icao: str,
        name: str,
        latitude: float,
        longitude: float,
        elevation_ft: int | None = None,
        iata: str | None = None,
        country: str | None = None,
        region: str | None = None,
    ) -> "NavPoint":
        """Create an airport point keyed by its ICAO code.

        Examples:
            >>> kjfk = NavPoint.airport("KJFK", "Kennedy", 40.6413, -73.7781)
            >>> kjfk.is_airport
            True
        """
        return cls(
            identifier=icao,
            kind=NavPointKind.AIRPORT,
            coordinate=Coordinate(latitude, longitude),
            name=name,
            elevation_ft=elevation_ft,
            region=region,
            icao=icao,
            iata=iata,
            country=country,
        )

    @classmethod
    def waypoint(
        cls,
        identifier: str,
        name: str,
        latitude: float,
        longitude: float,
        waypoint_type: WaypointType | str | None = None,
        region: str | None = None,
        frequency: float | None = None,
        range_nm: float | None = None,
    ) -> "NavPoint":
        """Create a waypoint point. Navaids may carry a frequency and range."""
        if not isinstance(waypoint_type, WaypointType):
            waypoint_type = WaypointType.parse(waypoint_type)
        return cls(
            identifier=identifier,
            kind=NavPointKind.WAYPOINT,
            coordinate=Coordinate(latitude, longitude),
            name=name,
            region=region,
            waypoint_type=waypoint_type,
            frequency=frequency,
            range_nm=range_nm,
        )

    @property
    def is_airport(self) -> bool:
        return self.kind is NavPointKind.AIRPORT

    @property
    def latitude(self) -> float:
        return self.coordinate.latitude

    @property
    def longitude(self) -> float:
        return self.coordinate.longitude

    def is_in_range(self, position: Coordinate) -> bool:
        """Check whether a position lies within the navaid service range.

        Points without a published range are never in range.
        """
        from aerobase.spatial import geometry

        if self.range_nm is None:
            return False
        return geometry.distance_nm(self.coordinate, position) <= self.range_nm

    def __str__(self) -> str:
        if self.is_airport:
            return f"{self.identifier} ({self.name})"
        kind = self.waypoint_type.value if self.waypoint_type else "WAYPOINT"
        return f"{self.identifier} ({kind})"
