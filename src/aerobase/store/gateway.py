"""Read interface over the backing store.

The navigation core only ever reads from the store: it loads the complete
airport and waypoint sets when an index snapshot is built. Device identity
is the one write path and lives behind a separate interface.

Typical usage:
    from aerobase.store import InMemoryStore

    store = InMemoryStore(airports=[kjfk, klax], waypoints=[merit])
    points = store.load_all()
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable

from aerobase.models.device import Device
from aerobase.models.navpoint import NavPoint, NavPointKind

logger = logging.getLogger(__name__)


class StoreGateway(ABC):
    """Abstract read interface for navigation data.

    Implementations load data from a database, files or memory.

    Examples:
        >>> store = SQLiteStore("aerobase.db")
        >>> airports = store.load_airports()
    """

    @abstractmethod
    def load_airports(self) -> list[NavPoint]:
        """Load every airport.

        Returns:
            List of airport NavPoints

        Raises:
            StoreError: If the store cannot be read
        """

    @abstractmethod
    def load_waypoints(self) -> list[NavPoint]:
        """Load every waypoint.

        Returns:
            List of waypoint NavPoints

        Raises:
            StoreError: If the store cannot be read
        """

    def load_all(self) -> list[NavPoint]:
        """Load airports followed by waypoints.

        Airports come first so they win key collisions when a snapshot is
        built.

        Returns:
            Combined list of NavPoints
        """
        airports = self.load_airports()
        waypoints = self.load_waypoints()
        logger.info("Loaded %d airports and %d waypoints", len(airports), len(waypoints))
        return airports + waypoints


class DeviceStore(ABC):
    """Storage interface for device identities."""

    @abstractmethod
    def find_device_by_fingerprint(self, fingerprint: str) -> Device | None:
        """Look up a device by fingerprint."""

    @abstractmethod
    def get_device(self, device_id: str) -> Device | None:
        """Look up a device by identifier."""

    @abstractmethod
    def insert_device(self, device: Device) -> None:
        """Persist a new device.

        Raises:
            StoreError: If the device cannot be written
        """

    @abstractmethod
    def touch_device(self, device_id: str, last_seen: int) -> None:
        """Update the last-seen timestamp of a device."""

    @abstractmethod
    def list_devices(self) -> list[Device]:
        """List every device, most recently seen first."""


class InMemoryStore(StoreGateway, DeviceStore):
    """Store holding everything in process memory.

    Used by tests and for data imported straight from CSV files.
    """

    def __init__(
        self,
        airports: Iterable[NavPoint] = (),
        waypoints: Iterable[NavPoint] = (),
    ) -> None:
        self._airports: dict[str, NavPoint] = {}
        self._waypoints: dict[str, NavPoint] = {}
        self._devices: dict[str, Device] = {}
        self._lock = threading.Lock()
        self.add_points(list(airports) + list(waypoints))

    def add_points(self, points: Iterable[NavPoint]) -> int:
        """Add or replace points.

        Args:
            points: Airports and/or waypoints

        Returns:
            Number of points added
        """
        count = 0
        with self._lock:
            for point in points:
                if point.kind is NavPointKind.AIRPORT:
                    self._airports[point.identifier] = point
                else:
                    self._waypoints[point.identifier] = point
                count += 1
        return count

    def remove_point(self, identifier: str) -> bool:
        """Remove a point by identifier.

        Returns:
            True if a point was removed
        """
        with self._lock:
            removed = self._airports.pop(identifier, None) or self._waypoints.pop(identifier, None)
        return removed is not None

    def load_airports(self) -> list[NavPoint]:
        with self._lock:
            return list(self._airports.values())

    def load_waypoints(self) -> list[NavPoint]:
        with self._lock:
            return list(self._waypoints.values())

    def find_device_by_fingerprint(self, fingerprint: str) -> Device | None:
        with self._lock:
            return next((d for d in self._devices.values() if d.fingerprint == fingerprint), None)

    def get_device(self, device_id: str) -> Device | None:
        with self._lock:
            return self._devices.get(device_id)

    def insert_device(self, device: Device) -> None:
        with self._lock:
            self._devices[device.id] = device

    def touch_device(self, device_id: str, last_seen: int) -> None:
        with self._lock:
            device = self._devices.get(device_id)
            if device is not None:
                self._devices[device_id] = Device(
                    id=device.id,
                    fingerprint=device.fingerprint,
                    hardware_info=device.hardware_info,
                    created_at=device.created_at,
                    last_seen=last_seen,
                )

    def list_devices(self) -> list[Device]:
        with self._lock:
            return sorted(self._devices.values(), key=lambda d: d.last_seen, reverse=True)
