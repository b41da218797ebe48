"""Tests for flight plan validation."""

import pytest

from aerobase.errors import InvalidInputError, NotFoundError
from aerobase.models.flight import FlightPlan
from aerobase.navigation.validator import (
    RouteValidator,
    ValidationFailure,
    ValidationResult,
)


@pytest.fixture
def validator() -> RouteValidator:
    return RouteValidator()


def make_plan(**overrides) -> FlightPlan:
    fields = {
        "departure": "KJFK",
        "destination": "KLAX",
        "cruise_altitude_ft": 35000,
        "cruise_speed_kts": 450,
        "route": (),
        "alternate": None,
    }
    fields.update(overrides)
    return FlightPlan(**fields)


class TestRouteValidator:
    """Test each validation rule."""

    def test_valid_direct(self, validator, snapshot) -> None:
        """Test a direct plan between known airports."""
        result = validator.validate(make_plan(), snapshot)
        assert result.is_valid
        assert result
        assert result.reason is None

    def test_valid_with_route_and_alternate(self, validator, snapshot) -> None:
        result = validator.validate(
            make_plan(route=("MERIT", "DNW", "ZUN"), alternate="KORD"), snapshot
        )
        assert result.is_valid

    @pytest.mark.parametrize(
        "overrides, reason, key",
        [
            ({"departure": "XXXX"}, ValidationFailure.DEPARTURE_NOT_FOUND, "XXXX"),
            ({"departure": "MERIT"}, ValidationFailure.DEPARTURE_NOT_AIRPORT, "MERIT"),
            ({"destination": "YYYY"}, ValidationFailure.DESTINATION_NOT_FOUND, "YYYY"),
            ({"destination": "OAK"}, ValidationFailure.DESTINATION_NOT_AIRPORT, "OAK"),
            ({"destination": "KJFK"}, ValidationFailure.SAME_DEPARTURE_DESTINATION, "KJFK"),
            ({"alternate": "ZZZZ"}, ValidationFailure.ALTERNATE_NOT_FOUND, "ZZZZ"),
            ({"alternate": "DQO"}, ValidationFailure.ALTERNATE_NOT_AIRPORT, "DQO"),
            ({"alternate": "KLAX"}, ValidationFailure.ALTERNATE_NOT_DISTINCT, "KLAX"),
            ({"route": ("MERIT", "NOPE")}, ValidationFailure.WAYPOINT_NOT_FOUND, "NOPE"),
        ],
    )
    def test_key_failures(self, validator, snapshot, overrides, reason, key) -> None:
        """Test each lookup rule reports its reason and key."""
        result = validator.validate(make_plan(**overrides), snapshot)
        assert not result
        assert result.reason is reason
        assert result.key == key
        assert key in result.detail

    @pytest.mark.parametrize("altitude", [0, -1000, 60001])
    def test_altitude_range(self, validator, snapshot, altitude) -> None:
        result = validator.validate(make_plan(cruise_altitude_ft=altitude), snapshot)
        assert result.reason is ValidationFailure.INVALID_ALTITUDE

    @pytest.mark.parametrize("speed", [0, -100, 1001])
    def test_speed_range(self, validator, snapshot, speed) -> None:
        result = validator.validate(make_plan(cruise_speed_kts=speed), snapshot)
        assert result.reason is ValidationFailure.INVALID_SPEED

    def test_range_limits_inclusive(self, validator, snapshot) -> None:
        """Test the configured maxima themselves are accepted."""
        plan = make_plan(cruise_altitude_ft=60000, cruise_speed_kts=1000)
        assert validator.validate(plan, snapshot).is_valid

    def test_ceiling_boundary_on_custom_limits(self, snapshot) -> None:
        """Test a plan exactly at a custom ceiling passes and one unit above fails."""
        validator = RouteValidator(max_cruise_altitude_ft=41000, max_cruise_speed_kts=480)
        at_limit = make_plan(cruise_altitude_ft=41000, cruise_speed_kts=480)
        assert validator.validate(at_limit, snapshot).is_valid

        above = make_plan(cruise_altitude_ft=41000, cruise_speed_kts=481)
        assert validator.validate(above, snapshot).reason is ValidationFailure.INVALID_SPEED

    def test_configured_ceilings(self, snapshot) -> None:
        """Test ceilings come from the constructor."""
        validator = RouteValidator(max_cruise_altitude_ft=45000, max_cruise_speed_kts=300)
        assert (
            validator.validate(make_plan(cruise_altitude_ft=45001), snapshot).reason
            is ValidationFailure.INVALID_ALTITUDE
        )
        assert (
            validator.validate(make_plan(cruise_speed_kts=301), snapshot).reason
            is ValidationFailure.INVALID_SPEED
        )

    def test_first_failure_wins(self, validator, snapshot) -> None:
        """Test checks run in order and stop at the first failure."""
        plan = make_plan(departure="XXXX", destination="YYYY", cruise_speed_kts=0)
        assert validator.validate(plan, snapshot).reason is ValidationFailure.DEPARTURE_NOT_FOUND

    def test_keys_are_case_sensitive(self, validator, snapshot) -> None:
        result = validator.validate(make_plan(departure="kjfk"), snapshot)
        assert result.reason is ValidationFailure.DEPARTURE_NOT_FOUND

    def test_airport_allowed_in_route(self, validator, snapshot) -> None:
        """Test route entries may be any navigation point."""
        assert validator.validate(make_plan(route=("KORD",)), snapshot).is_valid


class TestValidationResult:
    """Test conversion of failures into errors."""

    def test_valid_does_not_raise(self) -> None:
        ValidationResult().raise_for_failure()

    def test_not_found_raises_not_found(self) -> None:
        result = ValidationResult(ValidationFailure.WAYPOINT_NOT_FOUND, "Waypoint not found: X", "X")
        with pytest.raises(NotFoundError) as exc_info:
            result.raise_for_failure()
        assert exc_info.value.key == "X"

    @pytest.mark.parametrize(
        "reason",
        [
            ValidationFailure.DEPARTURE_NOT_AIRPORT,
            ValidationFailure.SAME_DEPARTURE_DESTINATION,
            ValidationFailure.ALTERNATE_NOT_DISTINCT,
            ValidationFailure.INVALID_ALTITUDE,
            ValidationFailure.INVALID_SPEED,
        ],
    )
    def test_other_failures_raise_invalid_input(self, reason) -> None:
        with pytest.raises(InvalidInputError):
            ValidationResult(reason, "bad").raise_for_failure()

    def test_is_not_found(self) -> None:
        assert ValidationFailure.DEPARTURE_NOT_FOUND.is_not_found
        assert ValidationFailure.ALTERNATE_NOT_FOUND.is_not_found
        assert not ValidationFailure.INVALID_SPEED.is_not_found
