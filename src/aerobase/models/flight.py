"""Flight plan and evaluated route models.

Typical usage:
    from aerobase.models import FlightPlanBuilder

    plan = (
        FlightPlanBuilder()
        .departure("KJFK")
        .destination("KLAX")
        .cruise_altitude(35000)
        .cruise_speed(500)
        .add_waypoint("MERIT")
        .build()
    )
"""

import math
from dataclasses import dataclass, field
from enum import Enum

from aerobase.errors import InvalidInputError
from aerobase.models.coordinate import Coordinate


class TimeRounding(Enum):
    """Rounding policy for converting flight time to whole minutes.

    Attributes:
        CEILING: Any partial minute counts as a full minute
        HALF_UP: Round to nearest minute, halves rounded up
    """

    CEILING = "ceiling"
    HALF_UP = "half_up"

    def apply(self, minutes: float) -> int:
        """Round a minute count according to this policy.

        Args:
            minutes: Non-negative fractional minutes

        Returns:
            Whole minutes
        """
        if self is TimeRounding.CEILING:
            return int(math.ceil(minutes))
        return int(math.floor(minutes + 0.5))


def minutes_for(distance_nm: float, speed_kts: float, rounding: TimeRounding) -> int:
    """Convert a distance flown at a speed into whole minutes.

    Raises:
        InvalidInputError: If speed is not positive
    """
    if not speed_kts > 0:
        raise InvalidInputError(f"Cruise speed must be positive: {speed_kts}")
    return rounding.apply(distance_nm / speed_kts * 60.0)


@dataclass(frozen=True)
class FlightPlan:
    """A requested route between two airports.

    Attributes:
        departure: Departure airport key
        destination: Destination airport key
        cruise_altitude_ft: Planned cruise altitude in feet
        cruise_speed_kts: Planned cruise speed in knots
        route: Ordered waypoint keys, empty for direct routing
        alternate: Alternate airport key
    """

    departure: str
    destination: str
    cruise_altitude_ft: int
    cruise_speed_kts: int
    route: tuple[str, ...] = ()
    alternate: str | None = None

    def __post_init__(self) -> None:
        # Accept any sequence from callers, store an immutable tuple
        object.__setattr__(self, "route", tuple(self.route))

    def route_points(self) -> list[str]:
        """Get every leg endpoint in flying order.

        Returns:
            [departure, *route, destination]
        """
        return [self.departure, *self.route, self.destination]


class FlightPlanBuilder:
    """Fluent builder for FlightPlan.

    Examples:
        >>> plan = FlightPlanBuilder().departure("KJFK").destination("KLAX") \\
        ...     .cruise_altitude(35000).cruise_speed(500).build()
    """

    def __init__(self) -> None:
        self._departure: str | None = None
        self._destination: str | None = None
        self._alternate: str | None = None
        self._altitude: int | None = None
        self._speed: int | None = None
        self._route: list[str] = []

    def departure(self, key: str) -> "FlightPlanBuilder":
        self._departure = key
        return self

    def destination(self, key: str) -> "FlightPlanBuilder":
        self._destination = key
        return self

    def alternate(self, key: str) -> "FlightPlanBuilder":
        self._alternate = key
        return self

    def cruise_altitude(self, altitude_ft: int) -> "FlightPlanBuilder":
        self._altitude = altitude_ft
        return self

    def cruise_speed(self, speed_kts: int) -> "FlightPlanBuilder":
        self._speed = speed_kts
        return self

    def add_waypoint(self, key: str) -> "FlightPlanBuilder":
        self._route.append(key)
        return self

    def route(self, keys: list[str]) -> "FlightPlanBuilder":
        self._route = list(keys)
        return self

    def build(self) -> FlightPlan:
        """Build the flight plan.

        Returns:
            New FlightPlan

        Raises:
            InvalidInputError: If departure, destination, altitude or speed is unset
        """
        if not self._departure:
            raise InvalidInputError("Departure airport required")
        if not self._destination:
            raise InvalidInputError("Destination airport required")
        if self._altitude is None:
            raise InvalidInputError("Cruise altitude required")
        if self._speed is None:
            raise InvalidInputError("Cruise speed required")

        return FlightPlan(
            departure=self._departure,
            destination=self._destination,
            cruise_altitude_ft=self._altitude,
            cruise_speed_kts=self._speed,
            route=tuple(self._route),
            alternate=self._alternate,
        )


@dataclass(frozen=True)
class RouteFix:
    """One resolved point along an evaluated route.

    Attributes:
        identifier: NavPoint key
        name: Display name
        coordinate: Position
        distance_from_previous_nm: Length of the leg ending here
        cumulative_distance_nm: Distance flown from departure
        elapsed_min: Minutes from departure to this fix
    """

    identifier: str
    name: str
    coordinate: Coordinate
    distance_from_previous_nm: float
    cumulative_distance_nm: float
    elapsed_min: int


@dataclass(frozen=True)
class FlightRoute:
    """An evaluated flight plan.

    Derived on every request and never cached.

    Attributes:
        plan: The plan that was evaluated
        total_distance_nm: Sum of great circle leg lengths
        estimated_time_min: Flight time in whole minutes
        fixes: Resolved route points, departure first and destination last
    """

    plan: FlightPlan
    total_distance_nm: float
    estimated_time_min: int
    fixes: tuple[RouteFix, ...] = field(default_factory=tuple)

    @property
    def leg_count(self) -> int:
        return max(0, len(self.fixes) - 1)
