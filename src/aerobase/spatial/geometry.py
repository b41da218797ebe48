"""Great-circle geometry on a spherical Earth.

All functions are pure and total over Coordinate inputs. Range checking is
the caller's job (see ``Coordinate.validated``).

Distances use the haversine formula with the Earth mean radius expressed in
nautical miles. The constant matters: test expectations move with it.

Typical usage:
    from aerobase.spatial import geometry

    nm = geometry.distance_nm(jfk, lax)
    course = geometry.bearing_deg(jfk, lax)
"""

import math

from aerobase.models.coordinate import Coordinate

EARTH_RADIUS_NM = 3440.065  # Earth mean radius in nautical miles
NM_TO_METERS = 1852.0
HALF_CIRCUMFERENCE_NM = math.pi * EARTH_RADIUS_NM


def distance_nm(a: Coordinate, b: Coordinate, radius_nm: float = EARTH_RADIUS_NM) -> float:
    """Calculate great circle distance between two coordinates.

    Uses the Haversine formula. The intermediate term is clamped to [0, 1]
    so rounding near antipodal points never produces a domain error.

    Args:
        a: First coordinate
        b: Second coordinate
        radius_nm: Sphere radius in nautical miles

    Returns:
        Distance in nautical miles (0.0 when a == b)

    Examples:
        >>> jfk = Coordinate(40.6413, -73.7781)
        >>> lax = Coordinate(33.9416, -118.4085)
        >>> round(distance_nm(jfk, lax))
        2146
    """
    if a == b:
        return 0.0

    lat1, lon1 = math.radians(a.latitude), math.radians(a.longitude)
    lat2, lon2 = math.radians(b.latitude), math.radians(b.longitude)

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    h = min(1.0, max(0.0, h))
    c = 2 * math.asin(math.sqrt(h))

    return c * radius_nm


def bearing_deg(a: Coordinate, b: Coordinate) -> float:
    """Calculate initial great circle bearing from a to b.

    Args:
        a: Start coordinate
        b: End coordinate

    Returns:
        True bearing in degrees, in [0, 360). 0.0 when a == b.
    """
    if a == b:
        return 0.0

    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlon = math.radians(b.longitude - a.longitude)

    x = math.sin(dlon) * math.cos(lat2)
    y = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlon)

    bearing = math.degrees(math.atan2(x, y)) % 360.0
    # -0.0 % 360 and tiny negatives can round up to exactly 360.0
    if bearing >= 360.0:
        bearing = 0.0
    return bearing


def destination_point(
    start: Coordinate,
    distance: float,
    bearing: float,
    radius_nm: float = EARTH_RADIUS_NM,
) -> Coordinate:
    """Calculate the point reached by travelling along a great circle.

    Args:
        start: Start coordinate
        distance: Distance to travel in nautical miles
        bearing: Initial true bearing in degrees
        radius_nm: Sphere radius in nautical miles

    Returns:
        Destination coordinate, longitude normalised to [-180, 180]

    Examples:
        >>> dest = destination_point(Coordinate(0.0, 0.0), 60.0, 0.0)
        >>> round(dest.latitude, 1)
        1.0
    """
    angular = distance / radius_nm
    theta = math.radians(bearing)
    lat1 = math.radians(start.latitude)
    lon1 = math.radians(start.longitude)

    sin_lat2 = math.sin(lat1) * math.cos(angular) + math.cos(lat1) * math.sin(angular) * math.cos(
        theta
    )
    lat2 = math.asin(min(1.0, max(-1.0, sin_lat2)))
    lon2 = lon1 + math.atan2(
        math.sin(theta) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * math.sin(lat2),
    )

    lon_deg = (math.degrees(lon2) + 540.0) % 360.0 - 180.0
    return Coordinate(math.degrees(lat2), lon_deg)


def bounding_box(
    center: Coordinate,
    radius_nm: float,
    earth_radius_nm: float = EARTH_RADIUS_NM,
) -> tuple[Coordinate, Coordinate]:
    """Calculate a lat/lon box containing every point within radius of center.

    Latitude extent is exact. Longitude extent uses the meridians tangent to
    the circle, asin(sin(r) / cos(lat)); when the circle reaches a pole the
    box spans every longitude.

    Args:
        center: Circle center
        radius_nm: Circle radius in nautical miles
        earth_radius_nm: Sphere radius in nautical miles

    Returns:
        (min_corner, max_corner) tuple. Longitudes are not wrapped, so a box
        crossing the antimeridian has min longitude < -180 or max > 180.
    """
    angular = max(0.0, radius_nm) / earth_radius_nm
    radius_deg = math.degrees(angular)

    min_lat = center.latitude - radius_deg
    max_lat = center.latitude + radius_deg

    if min_lat <= -90.0 or max_lat >= 90.0 or angular >= math.pi / 2:
        return (
            Coordinate(max(-90.0, min_lat), -180.0),
            Coordinate(min(90.0, max_lat), 180.0),
        )

    lon_deg = math.degrees(math.asin(math.sin(angular) / math.cos(math.radians(center.latitude))))
    return (
        Coordinate(min_lat, center.longitude - lon_deg),
        Coordinate(max_lat, center.longitude + lon_deg),
    )
