"""Route distance and time evaluation.

The route is flown leg by leg in the order given:
departure -> route[0] -> ... -> route[n-1] -> destination. Total distance
is the sum of the great circle leg lengths, never the direct distance.

Estimated time is ``total_nm / cruise_speed_kts * 60`` minutes rounded by
the configured policy. The default policy is ceiling, so any partial
minute counts as a full one.

Typical usage:
    from aerobase.navigation import RouteEvaluator

    evaluator = RouteEvaluator()
    route = evaluator.evaluate(plan, snapshot)
    print(f"{route.total_distance_nm:.0f} nm, {route.estimated_time_min} min")
"""

import logging

from aerobase.errors import InvalidInputError, UnresolvedWaypointError
from aerobase.models.flight import (
    FlightPlan,
    FlightRoute,
    RouteFix,
    TimeRounding,
    minutes_for,
)
from aerobase.models.navpoint import NavPoint
from aerobase.spatial import geometry
from aerobase.spatial.snapshot import IndexSnapshot

logger = logging.getLogger(__name__)


class RouteEvaluator:
    """Computes distance and time for a validated flight plan.

    The evaluator does not re-run validation. A key that no longer
    resolves is an internal consistency failure and raises
    ``UnresolvedWaypointError``.

    Attributes:
        rounding: Policy for converting fractional minutes
        earth_radius_nm: Sphere radius used for leg distances

    Examples:
        >>> evaluator = RouteEvaluator(rounding=TimeRounding.CEILING)
        >>> route = evaluator.evaluate(plan, snapshot)
    """

    def __init__(
        self,
        rounding: TimeRounding = TimeRounding.CEILING,
        earth_radius_nm: float = geometry.EARTH_RADIUS_NM,
    ) -> None:
        self.rounding = rounding
        self.earth_radius_nm = earth_radius_nm

    def evaluate(self, plan: FlightPlan, snapshot: IndexSnapshot) -> FlightRoute:
        """Evaluate a flight plan.

        Args:
            plan: Plan that already passed validation
            snapshot: Snapshot used for every lookup

        Returns:
            FlightRoute with total distance, time and per-fix breakdown

        Raises:
            UnresolvedWaypointError: If a route point is missing from the snapshot
            InvalidInputError: If cruise speed is not positive
        """
        speed = plan.cruise_speed_kts
        if not speed > 0:
            raise InvalidInputError(f"Cruise speed must be positive: {speed}")

        points = [self._resolve(key, snapshot) for key in plan.route_points()]

        fixes: list[RouteFix] = []
        total = 0.0
        previous: NavPoint | None = None
        for point in points:
            leg = 0.0
            if previous is not None:
                leg = geometry.distance_nm(
                    previous.coordinate, point.coordinate, self.earth_radius_nm
                )
            total += leg
            fixes.append(
                RouteFix(
                    identifier=point.identifier,
                    name=point.name,
                    coordinate=point.coordinate,
                    distance_from_previous_nm=leg,
                    cumulative_distance_nm=total,
                    elapsed_min=minutes_for(total, speed, self.rounding),
                )
            )
            previous = point

        route = FlightRoute(
            plan=plan,
            total_distance_nm=total,
            estimated_time_min=minutes_for(total, speed, self.rounding),
            fixes=tuple(fixes),
        )

        logger.info(
            "Evaluated route %s -> %s: %d legs, %.1f nm, %d min",
            plan.departure,
            plan.destination,
            route.leg_count,
            route.total_distance_nm,
            route.estimated_time_min,
        )
        return route

    @staticmethod
    def _resolve(key: str, snapshot: IndexSnapshot) -> NavPoint:
        point = snapshot.resolve(key)
        if point is None:
            logger.error("Route point %s missing from snapshot v%d", key, snapshot.version)
            raise UnresolvedWaypointError(key)
        return point
