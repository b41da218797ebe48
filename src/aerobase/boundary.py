"""Status-code boundary over the AeroBase service.

Mirrors the C-callable surface: every call returns an integer status,
results live in an allocation table and are handed out as integer handles,
and each handle must be released exactly once through the matching
``free_*`` call. The adapter never relies on garbage collection to release
something it handed out; ``outstanding()`` reports what is still held.

Errors are collapsed to ``STATUS_ERROR`` plus a message retrievable with
``last_error()``. The message is kept per adapter instance, not globally.

Typical usage:
    adapter = BoundaryAdapter(service)
    status, handle = adapter.find_airports_within(40.64, -73.78, 30.0)
    if status == STATUS_OK:
        airports = adapter.read(handle)
        adapter.free_airports(handle)
    else:
        print(adapter.last_error())
"""

import itertools
import logging
import numbers
import threading
from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any

from aerobase.errors import AeroBaseError, InvalidInputError
from aerobase.models.coordinate import Coordinate
from aerobase.models.flight import FlightPlan
from aerobase.models.navpoint import NavPointKind
from aerobase.service import AeroBase

logger = logging.getLogger(__name__)

STATUS_OK = 0
STATUS_ERROR = -1

VALID_PLAN = 1
INVALID_PLAN = 0


class HandleKind(Enum):
    """Type of value held behind a handle."""

    DEVICE = "device"
    AIRPORTS = "airports"
    WAYPOINTS = "waypoints"
    FLIGHT_ROUTE = "flight_route"


class BoundaryAdapter:
    """Handle-based, status-code API over an AeroBase service.

    Examples:
        >>> adapter = BoundaryAdapter(service)
        >>> status, handle = adapter.calculate_route(plan)
        >>> adapter.read(handle).estimated_time_min
        258
        >>> adapter.free_flight_route(handle)
        0
    """

    def __init__(self, service: AeroBase) -> None:
        self.service = service
        self._allocations: dict[int, tuple[HandleKind, Any]] = {}
        self._next_handle = itertools.count(1)
        self._lock = threading.Lock()
        self._last_error: str | None = None
        self._closed = False

    def last_error(self) -> str | None:
        """Message of the most recent failure, None after a successful call."""
        return self._last_error

    def outstanding(self) -> int:
        """Number of handles not yet released."""
        with self._lock:
            return len(self._allocations)

    def read(self, handle: int) -> Any:
        """Get the value behind a live handle.

        Raises:
            KeyError: If the handle was never issued or is already released
        """
        with self._lock:
            return self._allocations[handle][1]

    def close(self) -> int:
        """Release the adapter.

        Leaked handles are logged and dropped.

        Returns:
            STATUS_OK
        """
        with self._lock:
            leaked = len(self._allocations)
            self._allocations.clear()
            self._closed = True
        if leaked:
            logger.warning("Boundary adapter closed with %d unreleased handles", leaked)
        return STATUS_OK

    def get_device_fingerprint(self) -> tuple[int, int | None]:
        return self._allocate_result(HandleKind.DEVICE, self.service.get_device_fingerprint)

    def free_device(self, handle: int) -> int:
        return self._release(handle, HandleKind.DEVICE)

    def find_airports_within(
        self, latitude: float, longitude: float, radius_nm: float
    ) -> tuple[int, int | None]:
        return self._allocate_result(
            HandleKind.AIRPORTS,
            lambda: self._find(latitude, longitude, radius_nm, NavPointKind.AIRPORT),
        )

    def free_airports(self, handle: int) -> int:
        return self._release(handle, HandleKind.AIRPORTS)

    def find_waypoints_within(
        self, latitude: float, longitude: float, radius_nm: float
    ) -> tuple[int, int | None]:
        return self._allocate_result(
            HandleKind.WAYPOINTS,
            lambda: self._find(latitude, longitude, radius_nm, NavPointKind.WAYPOINT),
        )

    def free_waypoints(self, handle: int) -> int:
        return self._release(handle, HandleKind.WAYPOINTS)

    def validate_flight_plan(self, plan: FlightPlan | Mapping[str, Any]) -> int:
        """Validate a plan.

        Returns:
            VALID_PLAN (1), INVALID_PLAN (0), or STATUS_ERROR (-1) when the
            plan could not be checked at all
        """
        try:
            result = self.service.validate(plan_from_fields(plan))
        except AeroBaseError as e:
            self._fail(e)
            return STATUS_ERROR

        if result.is_valid:
            self._last_error = None
            return VALID_PLAN
        self._last_error = result.detail
        return INVALID_PLAN

    def calculate_route(self, plan: FlightPlan | Mapping[str, Any]) -> tuple[int, int | None]:
        return self._allocate_result(
            HandleKind.FLIGHT_ROUTE,
            lambda: self.service.evaluate(plan_from_fields(plan)),
        )

    def free_flight_route(self, handle: int) -> int:
        return self._release(handle, HandleKind.FLIGHT_ROUTE)

    def _find(self, latitude: float, longitude: float, radius_nm: float, kind: NavPointKind):
        try:
            center = Coordinate.validated(_real(latitude), _real(longitude))
            radius = _real(radius_nm)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Malformed search query: {e}") from e
        return tuple(self.service.find_within(center, radius, kind))

    def _allocate_result(
        self, kind: HandleKind, produce: Callable[[], Any]
    ) -> tuple[int, int | None]:
        if self._closed:
            self._last_error = "Adapter is closed"
            return STATUS_ERROR, None

        try:
            value = produce()
        except AeroBaseError as e:
            self._fail(e)
            return STATUS_ERROR, None

        with self._lock:
            handle = next(self._next_handle)
            self._allocations[handle] = (kind, value)
        self._last_error = None
        return STATUS_OK, handle

    def _release(self, handle: int, kind: HandleKind) -> int:
        with self._lock:
            entry = self._allocations.get(handle)
            if entry is None:
                message = f"Handle {handle} is not allocated (double free?)"
            elif entry[0] is not kind:
                message = f"Handle {handle} holds {entry[0].value}, not {kind.value}"
            else:
                del self._allocations[handle]
                message = None

        if message:
            logger.error(message)
            self._last_error = message
            return STATUS_ERROR
        self._last_error = None
        return STATUS_OK

    def _fail(self, error: AeroBaseError) -> None:
        logger.warning("Boundary call failed (%s): %s", error.kind.value, error)
        self._last_error = str(error)


def plan_from_fields(plan: FlightPlan | Mapping[str, Any]) -> FlightPlan:
    """Convert boundary plan fields into a FlightPlan.

    Accepts a FlightPlan unchanged, or a mapping with ``departure``,
    ``destination``, ``cruise_altitude``, ``cruise_speed`` and optional
    ``alternate`` and ``route``.

    Raises:
        InvalidInputError: If a required field is missing or malformed
    """
    if isinstance(plan, FlightPlan):
        return plan

    try:
        route = plan.get("route") or ()
        if isinstance(route, (str, bytes)):
            raise TypeError(f"route must be a sequence of keys, not {route!r}")

        return FlightPlan(
            departure=str(plan["departure"]),
            destination=str(plan["destination"]),
            cruise_altitude_ft=_whole(plan["cruise_altitude"]),
            cruise_speed_kts=_whole(plan["cruise_speed"]),
            route=tuple(str(key) for key in route),
            alternate=plan.get("alternate") or None,
        )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise InvalidInputError(f"Malformed flight plan: {e}") from e


def _real(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(f"expected a number, got {value!r}")
    return float(value)


def _whole(value: Any) -> int:
    """Convert to int without truncating; integral strings are accepted."""
    if isinstance(value, str):
        return int(value)
    number = _real(value)
    if not number.is_integer():
        raise ValueError(f"expected a whole number, got {value!r}")
    return int(number)
