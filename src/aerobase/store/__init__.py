"""Backing store access for navigation data and device identities.

Typical usage:
    from aerobase.store import SQLiteStore

    store = SQLiteStore("aerobase.db")
    store.migrate()
    points = store.load_all()
"""

from aerobase.store.csv_loader import load_navpoints_csv
from aerobase.store.gateway import DeviceStore, InMemoryStore, StoreGateway
from aerobase.store.sqlite_store import SCHEMA_VERSION, SQLiteStore

__all__ = [
    "DeviceStore",
    "InMemoryStore",
    "SCHEMA_VERSION",
    "SQLiteStore",
    "StoreGateway",
    "load_navpoints_csv",
]
