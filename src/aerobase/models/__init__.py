"""Data model for navigational points, flight plans and devices.

Typical usage:
    from aerobase.models import Coordinate, NavPoint, FlightPlan
"""

from aerobase.models.coordinate import Coordinate
from aerobase.models.device import Device
from aerobase.models.flight import (
    FlightPlan,
    FlightPlanBuilder,
    FlightRoute,
    RouteFix,
    TimeRounding,
    minutes_for,
)
from aerobase.models.navpoint import NavPoint, NavPointKind, WaypointType

__all__ = [
    "Coordinate",
    "Device",
    "FlightPlan",
    "FlightPlanBuilder",
    "FlightRoute",
    "NavPoint",
    "NavPointKind",
    "RouteFix",
    "TimeRounding",
    "WaypointType",
    "minutes_for",
]
