"""Flight plan validation.

Checks run in a fixed order and stop at the first failure, so every
invalid plan maps to exactly one reason:

    1. departure and destination resolve and are airports
    2. departure differs from destination
    3. alternate, if given, resolves to an airport distinct from both
    4. every route key resolves to a waypoint or airport
    5. cruise altitude is positive and at most the ceiling
    6. cruise speed is positive and at most the ceiling

Typical usage:
    from aerobase.navigation import RouteValidator

    validator = RouteValidator()
    result = validator.validate(plan, snapshot)
    if not result:
        logger.warning("Rejected plan: %s", result.detail)
"""

import logging
from dataclasses import dataclass
from enum import Enum

from aerobase.errors import InvalidInputError, NotFoundError
from aerobase.models.flight import FlightPlan
from aerobase.models.navpoint import NavPoint
from aerobase.spatial.snapshot import IndexSnapshot

logger = logging.getLogger(__name__)

DEFAULT_MAX_CRUISE_ALTITUDE_FT = 60000
DEFAULT_MAX_CRUISE_SPEED_KTS = 1000


class ValidationFailure(Enum):
    """Reason a flight plan was rejected."""

    DEPARTURE_NOT_FOUND = "departure_not_found"
    DEPARTURE_NOT_AIRPORT = "departure_not_airport"
    DESTINATION_NOT_FOUND = "destination_not_found"
    DESTINATION_NOT_AIRPORT = "destination_not_airport"
    SAME_DEPARTURE_DESTINATION = "same_departure_destination"
    ALTERNATE_NOT_FOUND = "alternate_not_found"
    ALTERNATE_NOT_AIRPORT = "alternate_not_airport"
    ALTERNATE_NOT_DISTINCT = "alternate_not_distinct"
    WAYPOINT_NOT_FOUND = "waypoint_not_found"
    INVALID_ALTITUDE = "invalid_altitude"
    INVALID_SPEED = "invalid_speed"

    @property
    def is_not_found(self) -> bool:
        return self in _NOT_FOUND_REASONS


_NOT_FOUND_REASONS = frozenset(
    {
        ValidationFailure.DEPARTURE_NOT_FOUND,
        ValidationFailure.DESTINATION_NOT_FOUND,
        ValidationFailure.ALTERNATE_NOT_FOUND,
        ValidationFailure.WAYPOINT_NOT_FOUND,
    }
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one flight plan.

    Truthy when the plan is valid.

    Attributes:
        reason: Failure reason, None when valid
        detail: Human-readable explanation
        key: Offending identifier, when the failure concerns one
    """

    reason: ValidationFailure | None = None
    detail: str = ""
    key: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.reason is None

    def __bool__(self) -> bool:
        return self.is_valid

    def raise_for_failure(self) -> None:
        """Raise the error matching the failure reason.

        Raises:
            NotFoundError: For unresolved airport or waypoint keys
            InvalidInputError: For every other failure
        """
        if self.reason is None:
            return
        if self.reason.is_not_found:
            raise NotFoundError(self.detail, key=self.key)
        raise InvalidInputError(self.detail)


VALID = ValidationResult()


def _fail(reason: ValidationFailure, detail: str, key: str | None = None) -> ValidationResult:
    return ValidationResult(reason=reason, detail=detail, key=key)


class RouteValidator:
    """Validates flight plans against an index snapshot.

    Pure: the result depends only on the plan, the snapshot and the limits.
    Both ceilings are inclusive: a plan cruising exactly at the configured
    maximum is valid, so the accepted range is 0 < value <= maximum.

    Attributes:
        max_cruise_altitude_ft: Highest accepted cruise altitude, inclusive
        max_cruise_speed_kts: Highest accepted cruise speed, inclusive

    Examples:
        >>> validator = RouteValidator(max_cruise_altitude_ft=45000)
        >>> validator.validate(plan, snapshot).is_valid
        True
    """

    def __init__(
        self,
        max_cruise_altitude_ft: int = DEFAULT_MAX_CRUISE_ALTITUDE_FT,
        max_cruise_speed_kts: int = DEFAULT_MAX_CRUISE_SPEED_KTS,
    ) -> None:
        self.max_cruise_altitude_ft = max_cruise_altitude_ft
        self.max_cruise_speed_kts = max_cruise_speed_kts

    def validate(self, plan: FlightPlan, snapshot: IndexSnapshot) -> ValidationResult:
        """Validate a flight plan.

        Args:
            plan: Plan to check
            snapshot: Index snapshot used for every key lookup

        Returns:
            ValidationResult carrying the first failure, or a valid result
        """
        result = self._check(plan, snapshot)
        if result.is_valid:
            logger.debug("Flight plan %s -> %s is valid", plan.departure, plan.destination)
        else:
            logger.debug(
                "Flight plan %s -> %s rejected: %s",
                plan.departure,
                plan.destination,
                result.detail,
            )
        return result

    def _check(self, plan: FlightPlan, snapshot: IndexSnapshot) -> ValidationResult:
        result = self._check_airport(
            snapshot,
            plan.departure,
            "Departure",
            ValidationFailure.DEPARTURE_NOT_FOUND,
            ValidationFailure.DEPARTURE_NOT_AIRPORT,
        )
        if not result:
            return result

        result = self._check_airport(
            snapshot,
            plan.destination,
            "Destination",
            ValidationFailure.DESTINATION_NOT_FOUND,
            ValidationFailure.DESTINATION_NOT_AIRPORT,
        )
        if not result:
            return result

        if plan.departure == plan.destination:
            return _fail(
                ValidationFailure.SAME_DEPARTURE_DESTINATION,
                f"Departure and destination are both {plan.departure}",
                plan.departure,
            )

        if plan.alternate is not None:
            result = self._check_airport(
                snapshot,
                plan.alternate,
                "Alternate",
                ValidationFailure.ALTERNATE_NOT_FOUND,
                ValidationFailure.ALTERNATE_NOT_AIRPORT,
            )
            if not result:
                return result
            if plan.alternate in (plan.departure, plan.destination):
                return _fail(
                    ValidationFailure.ALTERNATE_NOT_DISTINCT,
                    f"Alternate {plan.alternate} repeats the departure or destination",
                    plan.alternate,
                )

        for key in plan.route:
            if snapshot.resolve(key) is None:
                return _fail(
                    ValidationFailure.WAYPOINT_NOT_FOUND, f"Waypoint not found: {key}", key
                )

        if not 0 < plan.cruise_altitude_ft <= self.max_cruise_altitude_ft:
            return _fail(
                ValidationFailure.INVALID_ALTITUDE,
                f"Cruise altitude {plan.cruise_altitude_ft} ft outside "
                f"(0, {self.max_cruise_altitude_ft}]",
            )

        if not 0 < plan.cruise_speed_kts <= self.max_cruise_speed_kts:
            return _fail(
                ValidationFailure.INVALID_SPEED,
                f"Cruise speed {plan.cruise_speed_kts} kts outside "
                f"(0, {self.max_cruise_speed_kts}]",
            )

        return VALID

    @staticmethod
    def _check_airport(
        snapshot: IndexSnapshot,
        key: str,
        label: str,
        missing: ValidationFailure,
        wrong_kind: ValidationFailure,
    ) -> ValidationResult:
        point: NavPoint | None = snapshot.resolve(key)
        if point is None:
            return _fail(missing, f"{label} airport not found: {key}", key)
        if not point.is_airport:
            return _fail(wrong_kind, f"{label} {key} is a waypoint, not an airport", key)
        return VALID
