"""Device identity record."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Device:
    """A per-installation device identity.

    Attributes:
        id: Stable device identifier (uuid4 string)
        fingerprint: SHA-256 hex digest of the machine identity
        hardware_info: JSON document describing the host, if collected
        created_at: First registration, epoch seconds
        last_seen: Most recent lookup, epoch seconds
    """

    id: str
    fingerprint: str
    hardware_info: str | None
    created_at: int
    last_seen: int
