"""SQLite backing store for airports, waypoints and devices.

Each operation opens its own connection, so the store is safe to share
between threads. A bounded semaphore caps the number of connections open
at once.

Typical usage:
    from aerobase.store import SQLiteStore

    store = SQLiteStore("aerobase.db")
    store.migrate()
    store.import_navpoints(points)
    airports = store.load_airports()
"""

import logging
import sqlite3
import threading
import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from aerobase.errors import StoreError
from aerobase.models.coordinate import Coordinate
from aerobase.models.device import Device
from aerobase.models.navpoint import NavPoint, NavPointKind, WaypointType
from aerobase.store.gateway import DeviceStore, StoreGateway

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 2

_SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS schema_version (
        version INTEGER PRIMARY KEY,
        applied_at INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS devices (
        id TEXT PRIMARY KEY,
        fingerprint TEXT UNIQUE NOT NULL,
        hardware_info TEXT,
        created_at INTEGER NOT NULL,
        last_seen INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS waypoints (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        latitude REAL NOT NULL,
        longitude REAL NOT NULL,
        region TEXT,
        type TEXT,
        frequency REAL,
        range_nm REAL,
        created_at INTEGER NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_waypoints_location ON waypoints(latitude, longitude)",
    """
    CREATE TABLE IF NOT EXISTS airports (
        id TEXT PRIMARY KEY,
        icao TEXT UNIQUE NOT NULL,
        iata TEXT,
        name TEXT NOT NULL,
        latitude REAL NOT NULL,
        longitude REAL NOT NULL,
        elevation INTEGER,
        country TEXT,
        region TEXT,
        created_at INTEGER NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_airports_location ON airports(latitude, longitude)",
]

# Upgrade statements keyed by the schema version they produce
_UPGRADES = {
    2: [
        "ALTER TABLE waypoints ADD COLUMN frequency REAL",
        "ALTER TABLE waypoints ADD COLUMN range_nm REAL",
    ],
}


class SQLiteStore(StoreGateway, DeviceStore):
    """Durable store backed by a SQLite file.

    Attributes:
        path: Database file path (":memory:" is not supported since every
            call opens a fresh connection)
        enable_wal: Put the database in write-ahead-log mode on migrate
    """

    def __init__(self, path: str | Path, enable_wal: bool = True, pool_size: int = 4) -> None:
        if pool_size < 1:
            raise ValueError(f"Pool size must be at least 1: {pool_size}")
        self.path = Path(path)
        self.enable_wal = enable_wal
        self._slots = threading.BoundedSemaphore(pool_size)

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Open a connection, committing on success and rolling back on error.

        Yields:
            sqlite3.Connection with Row factory

        Raises:
            StoreError: If SQLite reports an error
        """
        with self._slots:
            try:
                conn = sqlite3.connect(self.path, timeout=5.0)
            except sqlite3.Error as e:
                raise StoreError(f"Cannot open database {self.path}: {e}") from e

            conn.row_factory = sqlite3.Row
            try:
                yield conn
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StoreError(f"Database error: {e}") from e
            finally:
                conn.close()

    def schema_version(self) -> int:
        """Get the applied schema version, 0 for a fresh database."""
        with self.connection() as conn:
            exists = conn.execute(
                "SELECT 1 FROM sqlite_master WHERE type='table' AND name='schema_version'"
            ).fetchone()
            if not exists:
                return 0
            row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
            return row[0] or 0

    def migrate(self) -> None:
        """Create or upgrade the schema.

        Raises:
            StoreError: If the migration fails
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        current = self.schema_version()
        logger.info("Database schema version: %d", current)

        if current >= SCHEMA_VERSION:
            logger.info("Database schema is up to date")
            return

        with self.connection() as conn:
            if self.enable_wal:
                conn.execute("PRAGMA journal_mode=WAL")
            if current == 0:
                statements = list(_SCHEMA)
            else:
                statements = [
                    statement
                    for version in range(current + 1, SCHEMA_VERSION + 1)
                    for statement in _UPGRADES.get(version, ())
                ]
            for statement in statements:
                conn.execute(statement)
            conn.execute(
                "INSERT OR REPLACE INTO schema_version (version, applied_at) VALUES (?, ?)",
                (SCHEMA_VERSION, int(time.time())),
            )

        logger.info("Migrated database %s to schema version %d", self.path, SCHEMA_VERSION)

    def import_navpoints(self, points: Iterable[NavPoint]) -> int:
        """Insert or replace airports and waypoints.

        Args:
            points: NavPoints of either kind

        Returns:
            Number of rows written
        """
        airports = []
        waypoints = []
        for p in points:
            if p.kind is NavPointKind.AIRPORT:
                airports.append(
                    (
                        p.identifier,
                        p.icao or p.identifier,
                        p.iata,
                        p.name,
                        p.latitude,
                        p.longitude,
                        p.elevation_ft,
                        p.country,
                        p.region,
                        p.created_at,
                    )
                )
            else:
                waypoints.append(
                    (
                        p.identifier,
                        p.name,
                        p.latitude,
                        p.longitude,
                        p.region,
                        p.waypoint_type.value if p.waypoint_type else None,
                        p.frequency,
                        p.range_nm,
                        p.created_at,
                    )
                )

        with self.connection() as conn:
            conn.executemany(
                "INSERT OR REPLACE INTO airports (id, icao, iata, name, latitude, longitude, "
                "elevation, country, region, created_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                airports,
            )
            conn.executemany(
                "INSERT OR REPLACE INTO waypoints (id, name, latitude, longitude, region, type, "
                "frequency, range_nm, created_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                waypoints,
            )

        logger.info("Imported %d airports and %d waypoints", len(airports), len(waypoints))
        return len(airports) + len(waypoints)

    def load_airports(self) -> list[NavPoint]:
        with self.connection() as conn:
            rows = conn.execute(
                "SELECT id, icao, iata, name, latitude, longitude, elevation, country, region, "
                "created_at FROM airports"
            ).fetchall()

        return [
            NavPoint(
                identifier=row["id"],
                kind=NavPointKind.AIRPORT,
                coordinate=_coordinate(row),
                name=row["name"],
                elevation_ft=row["elevation"],
                region=row["region"],
                icao=row["icao"],
                iata=row["iata"],
                country=row["country"],
                created_at=row["created_at"],
            )
            for row in rows
        ]

    def load_waypoints(self) -> list[NavPoint]:
        with self.connection() as conn:
            rows = conn.execute(
                "SELECT id, name, latitude, longitude, region, type, frequency, range_nm, "
                "created_at FROM waypoints"
            ).fetchall()

        return [
            NavPoint(
                identifier=row["id"],
                kind=NavPointKind.WAYPOINT,
                coordinate=_coordinate(row),
                name=row["name"],
                region=row["region"],
                waypoint_type=WaypointType.parse(row["type"]),
                frequency=row["frequency"],
                range_nm=row["range_nm"],
                created_at=row["created_at"],
            )
            for row in rows
        ]

    def find_device_by_fingerprint(self, fingerprint: str) -> Device | None:
        with self.connection() as conn:
            row = conn.execute(
                "SELECT * FROM devices WHERE fingerprint = ?", (fingerprint,)
            ).fetchone()
        return _device(row) if row else None

    def get_device(self, device_id: str) -> Device | None:
        with self.connection() as conn:
            row = conn.execute("SELECT * FROM devices WHERE id = ?", (device_id,)).fetchone()
        return _device(row) if row else None

    def insert_device(self, device: Device) -> None:
        with self.connection() as conn:
            conn.execute(
                "INSERT INTO devices (id, fingerprint, hardware_info, created_at, last_seen) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    device.id,
                    device.fingerprint,
                    device.hardware_info,
                    device.created_at,
                    device.last_seen,
                ),
            )

    def touch_device(self, device_id: str, last_seen: int) -> None:
        with self.connection() as conn:
            conn.execute("UPDATE devices SET last_seen = ? WHERE id = ?", (last_seen, device_id))

    def list_devices(self) -> list[Device]:
        with self.connection() as conn:
            rows = conn.execute("SELECT * FROM devices ORDER BY last_seen DESC").fetchall()
        return [_device(row) for row in rows]


def _coordinate(row: sqlite3.Row) -> Coordinate:
    return Coordinate(row["latitude"], row["longitude"])


def _device(row: sqlite3.Row) -> Device:
    return Device(
        id=row["id"],
        fingerprint=row["fingerprint"],
        hardware_info=row["hardware_info"],
        created_at=row["created_at"],
        last_seen=row["last_seen"],
    )
