"""AeroBase - local aviation reference-data service.

Proximity search over airports and waypoints, flight plan validation and
route evaluation, and per-installation device identity.

Typical usage:
    from aerobase import AeroBase, Coordinate, FlightPlanBuilder

    service = AeroBase.from_config_file("config/aerobase.yaml")
    service.refresh_index()
    route = service.evaluate(
        FlightPlanBuilder().departure("KJFK").destination("KLAX")
        .cruise_altitude(35000).cruise_speed(500).build()
    )
"""

from aerobase.errors import (
    AeroBaseError,
    ErrorKind,
    InternalError,
    InvalidInputError,
    NotFoundError,
    NotInitializedError,
    StoreError,
    UnresolvedWaypointError,
)
from aerobase.models import (
    Coordinate,
    Device,
    FlightPlan,
    FlightPlanBuilder,
    FlightRoute,
    NavPoint,
    NavPointKind,
    TimeRounding,
)
from aerobase.service import AeroBase

__version__ = "0.1.0"

__all__ = [
    "AeroBase",
    "AeroBaseError",
    "Coordinate",
    "Device",
    "ErrorKind",
    "FlightPlan",
    "FlightPlanBuilder",
    "FlightRoute",
    "InternalError",
    "InvalidInputError",
    "NavPoint",
    "NavPointKind",
    "NotFoundError",
    "NotInitializedError",
    "StoreError",
    "TimeRounding",
    "UnresolvedWaypointError",
]
