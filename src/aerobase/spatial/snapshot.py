"""Immutable index snapshots and their atomic publication.

A snapshot bundles a fully built SpatialIndex with a key lookup table and
a version number. Readers take one snapshot per request and use it for
every lookup of that request. Writers build a new snapshot off to the side
and publish it with a single reference swap, so no reader ever observes a
partially loaded point set.

Typical usage:
    holder = SnapshotHolder()
    holder.publish(points)

    snapshot = holder.current()
    kjfk = snapshot.resolve("KJFK")
    nearby = snapshot.index.within(kjfk.coordinate, 50)
"""

import logging
import threading
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from aerobase.errors import NotInitializedError
from aerobase.models.navpoint import NavPoint
from aerobase.spatial import geometry
from aerobase.spatial.spatial_index import SpatialIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexSnapshot:
    """A fully loaded, read-only view of the navigation data.

    Attributes:
        version: Monotonic snapshot number
        index: Spatial index over every point
        points: Mapping of identifier to point
        loaded_at: Build time, epoch seconds
    """

    version: int
    index: SpatialIndex
    points: Mapping[str, NavPoint]
    loaded_at: float = field(default_factory=time.time)

    @classmethod
    def build(
        cls,
        points: Iterable[NavPoint],
        version: int = 1,
        cell_size_deg: float = 1.0,
        earth_radius_nm: float = geometry.EARTH_RADIUS_NM,
    ) -> "IndexSnapshot":
        """Build a snapshot from a point collection.

        Identifiers must be unique. When a key appears more than once the
        first occurrence wins and the duplicate is dropped with a warning.

        Args:
            points: Points to load
            version: Snapshot number
            cell_size_deg: Grid cell size for the spatial index
            earth_radius_nm: Sphere radius for distances

        Returns:
            New IndexSnapshot
        """
        by_key: dict[str, NavPoint] = {}
        for point in points:
            if point.identifier in by_key:
                logger.warning(
                    "Duplicate navigation key %s (%s); keeping first %s",
                    point.identifier,
                    point.kind.value,
                    by_key[point.identifier].kind.value,
                )
                continue
            by_key[point.identifier] = point

        index = SpatialIndex(
            by_key.values(), cell_size_deg=cell_size_deg, earth_radius_nm=earth_radius_nm
        )
        return cls(version=version, index=index, points=MappingProxyType(by_key))

    def resolve(self, key: str) -> NavPoint | None:
        """Look up a point by identifier.

        Args:
            key: Identifier (case-sensitive)

        Returns:
            NavPoint if present, None otherwise
        """
        return self.points.get(key)

    def __len__(self) -> int:
        return len(self.points)


class SnapshotHolder:
    """Holds the current snapshot and swaps in replacements atomically.

    Readers never lock: ``current()`` returns whichever snapshot reference
    is installed at the time of the call. The lock only serialises writers
    so version numbers stay monotonic.

    Examples:
        >>> holder = SnapshotHolder(cell_size_deg=1.0)
        >>> holder.publish(points).version
        1
        >>> holder.current().resolve("KJFK")
    """

    def __init__(
        self,
        cell_size_deg: float = 1.0,
        earth_radius_nm: float = geometry.EARTH_RADIUS_NM,
    ) -> None:
        self.cell_size_deg = cell_size_deg
        self.earth_radius_nm = earth_radius_nm
        self._snapshot: IndexSnapshot | None = None
        self._last_version = 0
        self._lock = threading.Lock()

    @property
    def is_ready(self) -> bool:
        return self._snapshot is not None

    @property
    def version(self) -> int:
        """Version of the installed snapshot, 0 before the first publish."""
        snapshot = self._snapshot
        return snapshot.version if snapshot else 0

    def current(self) -> IndexSnapshot:
        """Get the installed snapshot.

        Returns:
            Current IndexSnapshot

        Raises:
            NotInitializedError: If nothing has been published yet
        """
        snapshot = self._snapshot
        if snapshot is None:
            raise NotInitializedError("Navigation index has not been loaded")
        return snapshot

    def publish(self, points: Iterable[NavPoint]) -> IndexSnapshot:
        """Build a snapshot from points and install it.

        The build happens outside the lock; only the version assignment
        and the reference swap are serialised.

        Args:
            points: Complete point set for the new snapshot

        Returns:
            The installed snapshot
        """
        started = time.perf_counter()
        built = IndexSnapshot.build(
            points,
            version=0,
            cell_size_deg=self.cell_size_deg,
            earth_radius_nm=self.earth_radius_nm,
        )

        with self._lock:
            self._last_version += 1
            snapshot = IndexSnapshot(
                version=self._last_version,
                index=built.index,
                points=built.points,
                loaded_at=built.loaded_at,
            )
            self._snapshot = snapshot

        logger.info(
            "Published index snapshot v%d: %d points in %.1f ms",
            snapshot.version,
            len(snapshot),
            (time.perf_counter() - started) * 1000.0,
        )
        return snapshot

    def clear(self) -> None:
        """Drop the installed snapshot."""
        with self._lock:
            self._snapshot = None
        logger.info("Cleared index snapshot")
