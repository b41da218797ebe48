"""Pytest configuration and fixtures for all tests."""

import pytest

from aerobase.core.config import AeroBaseConfig
from aerobase.models.navpoint import NavPoint
from aerobase.service import AeroBase
from aerobase.spatial.snapshot import IndexSnapshot
from aerobase.store.gateway import InMemoryStore


@pytest.fixture
def airports() -> list[NavPoint]:
    """Sample airports across the US."""
    return [
        NavPoint.airport("KJFK", "John F Kennedy Intl", 40.6413, -73.7781, 13, "JFK", "US", "US-NY"),
        NavPoint.airport("KLAX", "Los Angeles Intl", 33.9416, -118.4085, 125, "LAX", "US", "US-CA"),
        NavPoint.airport("KBOS", "Boston Logan Intl", 42.3656, -71.0096, 20, "BOS", "US", "US-MA"),
        NavPoint.airport("KORD", "Chicago O'Hare Intl", 41.9742, -87.9073, 672, "ORD", "US", "US-IL"),
        NavPoint.airport("KPAO", "Palo Alto", 37.461, -122.115, 7, None, "US", "US-CA"),
        NavPoint.airport("KSFO", "San Francisco Intl", 37.619, -122.375, 13, "SFO", "US", "US-CA"),
        NavPoint.airport("KSJC", "San Jose Intl", 37.363, -121.929, 62, "SJC", "US", "US-CA"),
        NavPoint.airport("KSQL", "San Carlos", 37.513, -122.221, 5, "SQL", "US", "US-CA"),
    ]


@pytest.fixture
def waypoints() -> list[NavPoint]:
    """Sample enroute waypoints and navaids."""
    return [
        NavPoint.waypoint("MERIT", "MERIT", 41.3819, -73.1375, "fix", "K6"),
        NavPoint.waypoint("DQO", "Dupont VORTAC", 39.6781, -75.6072, "vor", "K6"),
        NavPoint.waypoint("OAK", "Oakland VOR", 37.7259, -122.2236, "vor", "K2"),
        NavPoint.waypoint("DNW", "Denver VOR", 39.8117, -104.6606, "vor", "K2"),
        NavPoint.waypoint("ZUN", "Zuni VORTAC", 34.9657, -109.1545, "vor", "K2"),
    ]


@pytest.fixture
def navpoints(airports, waypoints) -> list[NavPoint]:
    return airports + waypoints


@pytest.fixture
def snapshot(navpoints) -> IndexSnapshot:
    """Snapshot over every sample point."""
    return IndexSnapshot.build(navpoints, version=1, cell_size_deg=1.0)


@pytest.fixture
def memory_store(airports, waypoints) -> InMemoryStore:
    return InMemoryStore(airports=airports, waypoints=waypoints)


@pytest.fixture
def service(memory_store) -> AeroBase:
    """Service over the in-memory sample store, index loaded."""
    svc = AeroBase(AeroBaseConfig(), store=memory_store)
    svc.refresh_index()
    return svc
