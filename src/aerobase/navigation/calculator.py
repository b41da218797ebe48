"""Flight performance calculations.

Fuel, segment time, arrival time and wind triangle helpers that work on
evaluated routes and plain numbers.

Typical usage:
    from aerobase.navigation import calculator

    fuel_gal = calculator.calculate_fuel(route, fuel_flow_gph=50.0)
    gs = calculator.ground_speed(wind_dir=270, wind_speed=20, course=90, tas=120)
"""

import math

from aerobase.errors import InvalidInputError
from aerobase.models.flight import FlightRoute, TimeRounding

STANDARD_RESERVE_MIN = 45.0
TAXI_FUEL_FRACTION = 0.05


def calculate_fuel(
    route: FlightRoute,
    fuel_flow_gph: float,
    reserve_min: float = STANDARD_RESERVE_MIN,
    taxi_fraction: float = TAXI_FUEL_FRACTION,
) -> float:
    """Calculate total fuel required for a route.

    Trip fuel is flight time times fuel flow. Reserve fuel covers
    ``reserve_min`` minutes at the same flow, and taxi fuel is a fraction
    of trip fuel.

    Args:
        route: Evaluated route
        fuel_flow_gph: Fuel flow in gallons per hour
        reserve_min: Reserve endurance in minutes
        taxi_fraction: Taxi fuel as a fraction of trip fuel

    Returns:
        Total fuel in gallons

    Raises:
        InvalidInputError: If fuel flow is not positive

    Examples:
        >>> calculate_fuel(route_72_min, 50.0)
        100.5
    """
    if not fuel_flow_gph > 0:
        raise InvalidInputError(f"Fuel flow must be positive: {fuel_flow_gph}")

    trip_fuel = route.estimated_time_min / 60.0 * fuel_flow_gph
    reserve_fuel = reserve_min / 60.0 * fuel_flow_gph
    taxi_fuel = trip_fuel * taxi_fraction

    return trip_fuel + reserve_fuel + taxi_fuel


def calculate_segment_time(
    distance_nm: float,
    speed_kts: float,
    rounding: TimeRounding = TimeRounding.HALF_UP,
) -> int:
    """Calculate minutes to fly a segment.

    Returns:
        Whole minutes, 0 when speed is not positive
    """
    if speed_kts <= 0:
        return 0
    return rounding.apply(distance_nm / speed_kts * 60.0)


def calculate_eta(departure_time: int, flight_time_min: int) -> int:
    """Calculate arrival time.

    Args:
        departure_time: Departure, epoch seconds
        flight_time_min: Flight time in minutes

    Returns:
        Arrival, epoch seconds
    """
    return departure_time + flight_time_min * 60


def wind_correction_angle(
    wind_direction: float, wind_speed: float, true_course: float, true_airspeed: float
) -> float:
    """Calculate the heading correction for a crosswind.

    Args:
        wind_direction: Direction the wind blows from, degrees true
        wind_speed: Wind speed in knots
        true_course: Desired course, degrees true
        true_airspeed: True airspeed in knots

    Returns:
        Correction in degrees, positive to the right

    Raises:
        InvalidInputError: If airspeed is not positive or the crosswind
            exceeds it
    """
    if not true_airspeed > 0:
        raise InvalidInputError(f"True airspeed must be positive: {true_airspeed}")

    crosswind = wind_speed * math.sin(math.radians(wind_direction - true_course))
    ratio = crosswind / true_airspeed
    if abs(ratio) > 1.0:
        raise InvalidInputError(
            f"Crosswind {abs(crosswind):.1f} kts exceeds airspeed {true_airspeed:.1f} kts"
        )
    return math.degrees(math.asin(ratio))


def ground_speed(
    wind_direction: float, wind_speed: float, true_course: float, true_airspeed: float
) -> float:
    """Calculate ground speed from the headwind component.

    Returns:
        Ground speed in knots
    """
    headwind = wind_speed * math.cos(math.radians(wind_direction - true_course))
    return true_airspeed - headwind
