"""Tests for the SQLite store."""

import sqlite3
import threading

import pytest

from aerobase.errors import StoreError
from aerobase.models.device import Device
from aerobase.models.navpoint import NavPoint, NavPointKind, WaypointType
from aerobase.store.sqlite_store import SCHEMA_VERSION, SQLiteStore


@pytest.fixture
def store(tmp_path) -> SQLiteStore:
    store = SQLiteStore(tmp_path / "data" / "aerobase.db")
    store.migrate()
    return store


class TestSchema:
    """Test schema creation and migration."""

    def test_fresh_database_version(self, tmp_path) -> None:
        store = SQLiteStore(tmp_path / "fresh.db")
        assert store.schema_version() == 0

    def test_migrate_creates_tables(self, store) -> None:
        assert store.schema_version() == SCHEMA_VERSION

        with sqlite3.connect(store.path) as conn:
            tables = {
                row[0]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        assert {"schema_version", "devices", "airports", "waypoints"} <= tables

    def test_migrate_is_idempotent(self, store) -> None:
        store.migrate()
        assert store.schema_version() == SCHEMA_VERSION

    def test_upgrade_from_version_one(self, tmp_path) -> None:
        """Test a version 1 database gains the navaid columns and keeps its rows."""
        path = tmp_path / "old.db"
        with sqlite3.connect(path) as conn:
            conn.executescript(
                """
                CREATE TABLE schema_version (version INTEGER PRIMARY KEY, applied_at INTEGER NOT NULL);
                INSERT INTO schema_version VALUES (1, 0);
                CREATE TABLE waypoints (
                    id TEXT PRIMARY KEY, name TEXT NOT NULL, latitude REAL NOT NULL,
                    longitude REAL NOT NULL, region TEXT, type TEXT, created_at INTEGER NOT NULL
                );
                INSERT INTO waypoints VALUES ('MERIT', 'MERIT', 41.38, -73.14, 'K6', 'FIX', 0);
                """
            )
        conn.close()

        store = SQLiteStore(path)
        store.migrate()

        assert store.schema_version() == SCHEMA_VERSION
        (merit,) = store.load_waypoints()
        assert merit.identifier == "MERIT"
        assert merit.region == "K6"
        assert merit.frequency is None

    def test_wal_mode(self, store) -> None:
        with store.connection() as conn:
            mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        assert mode.lower() == "wal"

    def test_invalid_pool_size(self, tmp_path) -> None:
        with pytest.raises(ValueError):
            SQLiteStore(tmp_path / "x.db", pool_size=0)


class TestNavPoints:
    """Test import and load of airports and waypoints."""

    def test_round_trip(self, store, airports, waypoints) -> None:
        """Test imported points come back with their metadata."""
        assert store.import_navpoints(airports + waypoints) == len(airports) + len(waypoints)

        loaded_airports = {p.identifier: p for p in store.load_airports()}
        loaded_waypoints = {p.identifier: p for p in store.load_waypoints()}
        assert set(loaded_airports) == {p.identifier for p in airports}
        assert set(loaded_waypoints) == {p.identifier for p in waypoints}

        kjfk = loaded_airports["KJFK"]
        assert kjfk.kind is NavPointKind.AIRPORT
        assert kjfk.iata == "JFK"
        assert kjfk.elevation_ft == 13
        assert kjfk.region == "US-NY"
        assert kjfk.latitude == pytest.approx(40.6413)

        assert loaded_airports["KPAO"].iata is None

        oak = loaded_waypoints["OAK"]
        assert oak.kind is NavPointKind.WAYPOINT
        assert oak.waypoint_type is WaypointType.VOR
        assert oak.region == "K2"

    def test_navaid_fields_round_trip(self, store) -> None:
        """Test navaid frequency and range survive the database."""
        store.import_navpoints(
            [
                NavPoint.waypoint(
                    "SFO", "San Francisco", 37.62, -122.37, "vor", frequency=115.8, range_nm=40
                ),
                NavPoint.waypoint("MERIT", "MERIT", 41.38, -73.14, "fix"),
            ]
        )
        loaded = {p.identifier: p for p in store.load_waypoints()}
        assert loaded["SFO"].frequency == pytest.approx(115.8)
        assert loaded["SFO"].range_nm == 40
        assert loaded["MERIT"].frequency is None
        assert loaded["MERIT"].range_nm is None

    def test_load_all_order(self, store, airports, waypoints) -> None:
        store.import_navpoints(waypoints + airports)
        points = store.load_all()
        assert points[0].kind is NavPointKind.AIRPORT
        assert points[-1].kind is NavPointKind.WAYPOINT

    def test_reimport_replaces(self, store, airports) -> None:
        store.import_navpoints(airports)
        store.import_navpoints(airports[:1])
        assert len(store.load_airports()) == len(airports)

    def test_unmigrated_database_raises_store_error(self, tmp_path) -> None:
        """Test SQLite failures surface as StoreError."""
        store = SQLiteStore(tmp_path / "empty.db")
        with pytest.raises(StoreError):
            store.load_airports()


class TestDevices:
    """Test device persistence."""

    def test_insert_and_find(self, store) -> None:
        device = Device("id-1", "abc", '{"os": "Linux"}', created_at=10, last_seen=10)
        store.insert_device(device)

        assert store.find_device_by_fingerprint("abc") == device
        assert store.get_device("id-1") == device
        assert store.find_device_by_fingerprint("zzz") is None
        assert store.get_device("id-2") is None

    def test_fingerprint_unique(self, store) -> None:
        store.insert_device(Device("id-1", "abc", None, 1, 1))
        with pytest.raises(StoreError):
            store.insert_device(Device("id-2", "abc", None, 2, 2))

    def test_touch_and_list(self, store) -> None:
        store.insert_device(Device("a", "fa", None, 1, 1))
        store.insert_device(Device("b", "fb", None, 2, 2))
        assert [d.id for d in store.list_devices()] == ["b", "a"]

        store.touch_device("a", 5)
        assert store.get_device("a").last_seen == 5
        assert [d.id for d in store.list_devices()] == ["a", "b"]

    def test_concurrent_writers(self, store) -> None:
        """Test writers on separate threads each get a connection."""
        errors = []

        def insert(n: int) -> None:
            try:
                store.insert_device(Device(f"id-{n}", f"fp-{n}", None, n, n))
            except StoreError as e:
                errors.append(e)

        threads = [threading.Thread(target=insert, args=(n,)) for n in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(store.list_devices()) == 16
