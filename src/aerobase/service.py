"""AeroBase service facade.

Wires the backing store, the index snapshot holder, the route validator
and evaluator, and device management behind one object. Every request
takes the current snapshot once and uses it throughout, so a concurrent
``refresh_index()`` never produces a mixed view.

Typical usage:
    from aerobase.service import AeroBase

    service = AeroBase.from_config_file("config/aerobase.yaml")
    service.refresh_index()

    nearby = service.find_airports_within(Coordinate(40.64, -73.78), 30)
    route = service.evaluate(plan)
"""

import logging
import math
from pathlib import Path

from aerobase.core.config import AeroBaseConfig
from aerobase.device.manager import DeviceManager
from aerobase.errors import InvalidInputError, NotFoundError
from aerobase.models.coordinate import Coordinate
from aerobase.models.device import Device
from aerobase.models.flight import FlightPlan, FlightRoute
from aerobase.models.navpoint import NavPoint, NavPointKind
from aerobase.navigation import calculator
from aerobase.navigation.evaluator import RouteEvaluator
from aerobase.navigation.validator import RouteValidator, ValidationResult
from aerobase.spatial.snapshot import IndexSnapshot, SnapshotHolder
from aerobase.store.gateway import DeviceStore, InMemoryStore, StoreGateway
from aerobase.store.sqlite_store import SQLiteStore

logger = logging.getLogger(__name__)


class AeroBase:
    """Aviation reference-data service.

    Attributes:
        config: Service configuration
        store: Navigation data source
        snapshots: Holder of the current index snapshot
        validator: Flight plan validator
        evaluator: Route evaluator
        devices: Device identity manager

    Examples:
        >>> service = AeroBase(store=InMemoryStore(airports=[kjfk, klax]))
        >>> service.refresh_index()
        1
        >>> service.validate_plan(plan)
        True
    """

    def __init__(
        self,
        config: AeroBaseConfig | None = None,
        store: StoreGateway | None = None,
        device_store: DeviceStore | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            config: Configuration, defaults when omitted
            store: Navigation data source. When omitted a SQLiteStore is
                opened at ``config.database.path`` and migrated.
            device_store: Device storage. Defaults to ``store`` when it
                also stores devices, else an in-memory store.
        """
        self.config = config or AeroBaseConfig()

        if store is None:
            db = self.config.database
            sqlite_store = SQLiteStore(db.path, enable_wal=db.enable_wal, pool_size=db.pool_size)
            sqlite_store.migrate()
            store = sqlite_store
        self.store = store

        if device_store is None:
            device_store = store if isinstance(store, DeviceStore) else InMemoryStore()

        radius = self.config.geo.earth_radius_nm
        self.snapshots = SnapshotHolder(
            cell_size_deg=self.config.index.cell_size_deg, earth_radius_nm=radius
        )
        self.validator = RouteValidator(
            max_cruise_altitude_ft=self.config.validation.max_cruise_altitude_ft,
            max_cruise_speed_kts=self.config.validation.max_cruise_speed_kts,
        )
        self.evaluator = RouteEvaluator(
            rounding=self.config.planning.time_rounding, earth_radius_nm=radius
        )
        self.devices = DeviceManager(device_store)

        logger.info("AeroBase service created (store: %s)", type(store).__name__)

    @classmethod
    def from_config_file(cls, path: str | Path) -> "AeroBase":
        """Create a service from a YAML configuration file.

        Raises:
            ConfigError: If the configuration is invalid
            StoreError: If the database cannot be opened or migrated
        """
        return cls(AeroBaseConfig.load(path))

    @property
    def is_ready(self) -> bool:
        return self.snapshots.is_ready

    def refresh_index(self) -> int:
        """Reload every point from the store and publish a new snapshot.

        In-flight requests keep using the snapshot they started with.

        Returns:
            Version of the published snapshot

        Raises:
            StoreError: If the store cannot be read; the previous snapshot
                stays installed
        """
        points = self.store.load_all()
        snapshot = self.snapshots.publish(points)
        return snapshot.version

    def snapshot(self) -> IndexSnapshot:
        """Get the current snapshot.

        Raises:
            NotInitializedError: If the index has not been loaded
        """
        return self.snapshots.current()

    def get_device_fingerprint(self) -> Device:
        """Get or register the device this process runs on."""
        return self.devices.get_or_create_fingerprint()

    def get_navpoint(self, key: str) -> NavPoint:
        """Look up an airport or waypoint.

        Raises:
            NotFoundError: If the key is unknown
            NotInitializedError: If the index has not been loaded
        """
        point = self.snapshot().resolve(key)
        if point is None:
            raise NotFoundError(f"Navigation point not found: {key}", key=key)
        return point

    def find_within(
        self,
        center: Coordinate,
        radius_nm: float,
        kind: NavPointKind | None = None,
        sort: bool = True,
    ) -> list[NavPoint]:
        """Find navigation points within radius of center.

        Args:
            center: Query center
            radius_nm: Radius in nautical miles, zero or more
            kind: Optional filter by point kind
            sort: Order by distance, ties broken by identifier

        Returns:
            Matching points, empty when nothing matches

        Raises:
            InvalidInputError: If center is out of range or radius is
                negative or NaN
            NotInitializedError: If the index has not been loaded
        """
        center.check()
        if math.isnan(radius_nm) or radius_nm < 0:
            raise InvalidInputError(f"Search radius must be zero or positive: {radius_nm}")

        return self.snapshot().index.within(center, radius_nm, kind=kind, sort=sort)

    def find_airports_within(self, center: Coordinate, radius_nm: float) -> list[NavPoint]:
        return self.find_within(center, radius_nm, NavPointKind.AIRPORT)

    def find_waypoints_within(self, center: Coordinate, radius_nm: float) -> list[NavPoint]:
        return self.find_within(center, radius_nm, NavPointKind.WAYPOINT)

    def find_nearest_airport(self, center: Coordinate) -> NavPoint | None:
        center.check()
        return self.snapshot().index.nearest(center, NavPointKind.AIRPORT)

    def find_nearest_waypoint(self, center: Coordinate) -> NavPoint | None:
        center.check()
        return self.snapshot().index.nearest(center, NavPointKind.WAYPOINT)

    def validate(self, plan: FlightPlan) -> ValidationResult:
        """Validate a flight plan against the current snapshot.

        Raises:
            NotInitializedError: If the index has not been loaded
        """
        return self.validator.validate(plan, self.snapshot())

    def validate_plan(self, plan: FlightPlan) -> bool:
        """Validate a flight plan, reduced to a boolean."""
        return self.validate(plan).is_valid

    def evaluate(self, plan: FlightPlan) -> FlightRoute:
        """Validate and evaluate a flight plan.

        Validation and evaluation share one snapshot.

        Returns:
            Evaluated FlightRoute

        Raises:
            NotFoundError: If an airport or waypoint key is unknown
            InvalidInputError: If the plan is otherwise invalid
            NotInitializedError: If the index has not been loaded
        """
        snapshot = self.snapshot()
        self.validator.validate(plan, snapshot).raise_for_failure()
        return self.evaluator.evaluate(plan, snapshot)

    def calculate_fuel(self, route: FlightRoute, fuel_flow_gph: float) -> float:
        """Calculate fuel for an evaluated route, in gallons."""
        return calculator.calculate_fuel(route, fuel_flow_gph)
