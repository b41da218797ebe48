"""Tests for the Coordinate value type."""

import dataclasses
import math

import pytest

from aerobase.errors import ErrorKind, InvalidInputError
from aerobase.models.coordinate import Coordinate


class TestCoordinate:
    """Test range checking and immutability."""

    def test_validated_accepts_range_limits(self) -> None:
        """Test the closed range endpoints are valid."""
        for lat, lon in [(90, 180), (-90, -180), (0, 0)]:
            coord = Coordinate.validated(lat, lon)
            assert coord.is_valid()
            assert isinstance(coord.latitude, float)

    @pytest.mark.parametrize(
        "lat, lon",
        [(90.0001, 0), (-91, 0), (0, 180.5), (0, -181), (math.nan, 0), (0, math.inf)],
    )
    def test_validated_rejects_out_of_range(self, lat: float, lon: float) -> None:
        """Test out-of-range and non-finite values are rejected."""
        with pytest.raises(InvalidInputError) as exc_info:
            Coordinate.validated(lat, lon)
        assert exc_info.value.kind is ErrorKind.INVALID_INPUT

    def test_plain_construction_does_not_validate(self) -> None:
        """Test geometry inputs can be built without checks."""
        coord = Coordinate(120.0, 0.0)
        assert not coord.is_valid()
        with pytest.raises(InvalidInputError):
            coord.check()

    def test_frozen(self) -> None:
        """Test coordinates cannot be mutated."""
        coord = Coordinate(1.0, 2.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            coord.latitude = 3.0  # type: ignore[misc]

    def test_equality_and_hash(self) -> None:
        """Test value semantics."""
        assert Coordinate(1.0, 2.0) == Coordinate(1.0, 2.0)
        assert len({Coordinate(1.0, 2.0), Coordinate(1.0, 2.0)}) == 1

    def test_str(self) -> None:
        assert str(Coordinate(40.6413, -73.7781)) == "(40.6413, -73.7781)"
