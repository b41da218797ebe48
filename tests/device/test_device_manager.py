"""Tests for device registration."""

import uuid

import pytest

from aerobase.device.manager import DeviceManager
from aerobase.store.gateway import InMemoryStore
from aerobase.store.sqlite_store import SQLiteStore


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def make_manager(store, clock, fingerprint="f" * 64) -> DeviceManager:
    return DeviceManager(
        store,
        fingerprint_fn=lambda: fingerprint,
        hardware_info_fn=lambda: '{"system_name": "Linux"}',
        clock=clock,
    )


class TestDeviceManager:
    """Test get-or-create semantics."""

    def test_registers_new_device(self, clock) -> None:
        store = InMemoryStore()
        device = make_manager(store, clock).get_or_create_fingerprint()

        assert uuid.UUID(device.id).version == 4
        assert device.fingerprint == "f" * 64
        assert device.hardware_info == '{"system_name": "Linux"}'
        assert device.created_at == device.last_seen == 1000
        assert store.get_device(device.id) == device

    def test_second_call_returns_same_device(self, clock) -> None:
        """Test an existing fingerprint is reused and touched."""
        store = InMemoryStore()
        manager = make_manager(store, clock)
        first = manager.get_or_create_fingerprint()

        clock.now = 2_000.0
        second = manager.get_or_create_fingerprint()

        assert second.id == first.id
        assert second.created_at == 1000
        assert second.last_seen == 2000
        assert store.get_device(first.id).last_seen == 2000
        assert len(manager.list_devices()) == 1

    def test_distinct_fingerprints(self, clock) -> None:
        store = InMemoryStore()
        a = make_manager(store, clock, "a" * 64).get_or_create_fingerprint()
        b = make_manager(store, clock, "b" * 64).get_or_create_fingerprint()

        assert a.id != b.id
        assert {d.id for d in store.list_devices()} == {a.id, b.id}

    def test_sqlite_backed(self, tmp_path, clock) -> None:
        """Test the identity survives a new manager over the same database."""
        store = SQLiteStore(tmp_path / "devices.db")
        store.migrate()

        first = make_manager(store, clock).get_or_create_fingerprint()
        again = make_manager(SQLiteStore(tmp_path / "devices.db"), clock).get_or_create_fingerprint()

        assert again.id == first.id
        assert make_manager(store, clock).get_device(first.id) == again
