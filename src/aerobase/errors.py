"""Error taxonomy shared by every AeroBase component.

Internal callers (and the test suite) distinguish failures by exception
class or by the ``kind`` attribute. The boundary layer collapses all of
them into a status code plus a last-error message.

Typical usage:
    from aerobase.errors import NotFoundError

    try:
        route = service.evaluate(plan)
    except NotFoundError as e:
        log.warning("Unknown fix: %s", e)
"""

from enum import Enum


class ErrorKind(Enum):
    """Classification of AeroBase failures.

    Attributes:
        INVALID_INPUT: Malformed coordinate, radius, altitude or speed
        NOT_FOUND: Unresolvable airport, waypoint or device key
        NOT_INITIALIZED: Index or store not ready
        INTERNAL: Post-validation inconsistency (snapshot race, bad data)
        STORE: Backing store failure
    """

    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    NOT_INITIALIZED = "not_initialized"
    INTERNAL = "internal"
    STORE = "store"


class AeroBaseError(Exception):
    """Base class for all AeroBase errors."""

    kind: ErrorKind = ErrorKind.INTERNAL


class InvalidInputError(AeroBaseError):
    """Raised when caller-supplied values are out of range or malformed."""

    kind = ErrorKind.INVALID_INPUT


class NotFoundError(AeroBaseError):
    """Raised when an airport, waypoint or device key does not resolve.

    Attributes:
        key: The identifier that could not be resolved
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class NotInitializedError(AeroBaseError):
    """Raised when the spatial index or store is queried before it is ready."""

    kind = ErrorKind.NOT_INITIALIZED


class InternalError(AeroBaseError):
    """Raised on internal consistency failures."""

    kind = ErrorKind.INTERNAL


class UnresolvedWaypointError(InternalError):
    """Raised when a validated route references a key missing at evaluation.

    Attributes:
        key: The route point identifier that no longer resolves
    """

    def __init__(self, key: str) -> None:
        super().__init__(f"Route point {key} is absent from the current index snapshot")
        self.key = key


class StoreError(AeroBaseError):
    """Raised when the backing store cannot be read or written."""

    kind = ErrorKind.STORE
