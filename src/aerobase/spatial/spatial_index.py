"""Spatial index for fast navigational point queries.

Provides radius and nearest-neighbour queries over a fixed set of
NavPoints using a uniform latitude/longitude grid. The grid only prunes
candidates; the haversine distance is always the final filter.

An index is built once from a bulk load and never mutated afterwards. A
data refresh builds a new index (see ``aerobase.spatial.snapshot``).

Typical usage:
    from aerobase.spatial import SpatialIndex

    index = SpatialIndex.bulk_load(points, cell_size_deg=1.0)
    nearby = index.within(Coordinate(37.46, -122.11), radius_nm=50, sort=True)
"""

import logging
import math
from collections import defaultdict
from collections.abc import Iterable

from aerobase.models.coordinate import Coordinate
from aerobase.models.navpoint import NavPoint, NavPointKind
from aerobase.spatial import geometry

logger = logging.getLogger(__name__)

# Tolerance for a zero-radius query, in nautical miles
ZERO_RADIUS_EPSILON_NM = 1e-9

# Padding added to the candidate box so points on a cell edge are never pruned
_BOX_PAD_DEG = 1e-6


class SpatialIndex:
    """Grid-based spatial index over an immutable set of NavPoints.

    Divides the world into lat/lon cells of ``cell_size_deg`` degrees.
    Each cell holds a tuple of the points that fall inside it.

    Performance:
        - Build: O(n)
        - Radius query: O(c + k) where c = cells overlapping the query box
          and k = points in those cells
        - Memory: O(n)

    Examples:
        >>> index = SpatialIndex([kpao, ksfo, klax], cell_size_deg=1.0)
        >>> [p.identifier for p in index.within(kpao.coordinate, 20, sort=True)]
        ['KPAO', 'KSFO']
    """

    def __init__(
        self,
        points: Iterable[NavPoint] = (),
        cell_size_deg: float = 1.0,
        earth_radius_nm: float = geometry.EARTH_RADIUS_NM,
    ) -> None:
        """Build the index.

        Args:
            points: Points to index
            cell_size_deg: Size of grid cells in degrees (lat/lon).
                          Smaller = more memory, faster queries.
                          Larger = less memory, slower queries.
                          Recommended: 0.5-2.0 degrees.
            earth_radius_nm: Sphere radius used for distances

        Raises:
            ValueError: If cell_size_deg is not positive
        """
        if not cell_size_deg > 0:
            raise ValueError(f"Cell size must be positive: {cell_size_deg}")

        self.cell_size_deg = float(cell_size_deg)
        self.earth_radius_nm = earth_radius_nm
        self._lat_cells = int(math.ceil(180.0 / self.cell_size_deg))
        self._lon_cells = int(math.ceil(360.0 / self.cell_size_deg))

        grid: dict[tuple[int, int], list[NavPoint]] = defaultdict(list)
        count = 0
        for point in points:
            grid[self._cell_for(point.coordinate)].append(point)
            count += 1

        self._grid: dict[tuple[int, int], tuple[NavPoint, ...]] = {
            cell: tuple(items) for cell, items in grid.items()
        }
        self._count = count

        logger.debug(
            "Built spatial index: %d points in %d cells (cell size %.2f deg)",
            self._count,
            len(self._grid),
            self.cell_size_deg,
        )

    @classmethod
    def bulk_load(
        cls,
        points: Iterable[NavPoint],
        cell_size_deg: float = 1.0,
        earth_radius_nm: float = geometry.EARTH_RADIUS_NM,
    ) -> "SpatialIndex":
        """Build an index from a point collection.

        Args:
            points: Points to index
            cell_size_deg: Grid cell size in degrees
            earth_radius_nm: Sphere radius used for distances

        Returns:
            New SpatialIndex
        """
        return cls(points, cell_size_deg=cell_size_deg, earth_radius_nm=earth_radius_nm)

    def __len__(self) -> int:
        return self._count

    @property
    def cell_count(self) -> int:
        """Number of non-empty cells."""
        return len(self._grid)

    @property
    def half_circumference_nm(self) -> float:
        """Largest possible great circle distance."""
        return math.pi * self.earth_radius_nm

    def all_points(self, kind: NavPointKind | None = None) -> list[NavPoint]:
        """Get every indexed point.

        Args:
            kind: Optional filter by point kind

        Returns:
            List of points in no particular order
        """
        return [
            point
            for items in self._grid.values()
            for point in items
            if kind is None or point.kind is kind
        ]

    def within(
        self,
        center: Coordinate,
        radius_nm: float,
        kind: NavPointKind | None = None,
        sort: bool = False,
    ) -> list[NavPoint]:
        """Find every point within radius of center.

        The interval is closed: a point exactly ``radius_nm`` away is
        included, and a zero radius returns the points located at center.

        Args:
            center: Query center
            radius_nm: Radius in nautical miles
            kind: Optional filter by point kind
            sort: Order by distance, ties broken by identifier

        Returns:
            Matching points (empty for a negative or NaN radius)

        Examples:
            >>> index.within(Coordinate(37.461, -122.115), 5)
            [NavPoint(identifier='KPAO', ...)]
        """
        return [point for point, _ in self.within_with_distance(center, radius_nm, kind, sort)]

    def within_with_distance(
        self,
        center: Coordinate,
        radius_nm: float,
        kind: NavPointKind | None = None,
        sort: bool = False,
    ) -> list[tuple[NavPoint, float]]:
        """Find every point within radius of center, with its distance.

        Same contract as ``within``.

        Returns:
            List of (point, distance_nm) tuples
        """
        if math.isnan(radius_nm) or radius_nm < 0:
            return []

        limit = radius_nm if radius_nm > 0 else ZERO_RADIUS_EPSILON_NM

        if radius_nm >= self.half_circumference_nm:
            candidates: Iterable[NavPoint] = self.all_points(kind)
            cells_scanned = len(self._grid)
        else:
            cells = self._cells_for_radius(center, radius_nm)
            cells_scanned = len(cells)
            candidates = (
                point
                for cell in cells
                for point in self._grid.get(cell, ())
                if kind is None or point.kind is kind
            )

        results: list[tuple[NavPoint, float]] = []
        for point in candidates:
            distance = geometry.distance_nm(center, point.coordinate, self.earth_radius_nm)
            if distance <= limit:
                results.append((point, distance))

        if sort:
            results.sort(key=lambda item: (item[1], item[0].identifier))

        logger.debug(
            "Radius query %.1f nm around %s: %d cells, %d results",
            radius_nm,
            center,
            cells_scanned,
            len(results),
        )
        return results

    def nearest(self, center: Coordinate, kind: NavPointKind | None = None) -> NavPoint | None:
        """Find the closest point to center.

        Args:
            center: Query position
            kind: Optional filter by point kind

        Returns:
            Closest point, or None if the index holds no matching point
        """
        found = self.k_nearest(center, 1, kind)
        return found[0] if found else None

    def k_nearest(
        self, center: Coordinate, k: int, kind: NavPointKind | None = None
    ) -> list[NavPoint]:
        """Find the k closest points to center.

        Searches an expanding radius, doubling it until at least k points
        are found or the whole globe is covered.

        Args:
            center: Query position
            k: Number of points wanted
            kind: Optional filter by point kind

        Returns:
            Up to k points sorted by distance, ties broken by identifier
        """
        if k <= 0 or self._count == 0:
            return []

        radius = self.cell_size_deg * 60.0
        while True:
            found = self.within_with_distance(center, radius, kind, sort=True)
            if len(found) >= k or radius >= self.half_circumference_nm:
                return [point for point, _ in found[:k]]
            radius *= 2.0

    def _cell_for(self, coordinate: Coordinate) -> tuple[int, int]:
        """Get grid cell for a position.

        Returns:
            (lat_cell, lon_cell) tuple
        """
        return (self._lat_index(coordinate.latitude), self._lon_index(coordinate.longitude))

    def _lat_index(self, latitude: float) -> int:
        idx = int(math.floor((latitude + 90.0) / self.cell_size_deg))
        return min(max(idx, 0), self._lat_cells - 1)

    def _lon_index(self, longitude: float) -> int:
        idx = int(math.floor((longitude + 180.0) / self.cell_size_deg))
        return min(max(idx, 0), self._lon_cells - 1)

    def _cells_for_radius(self, center: Coordinate, radius_nm: float) -> list[tuple[int, int]]:
        """Get all cells that could contain points within radius.

        Args:
            center: Query center
            radius_nm: Radius in nautical miles

        Returns:
            List of (lat_cell, lon_cell) tuples
        """
        low, high = geometry.bounding_box(center, radius_nm, self.earth_radius_nm)

        lat_range = range(
            self._lat_index(low.latitude - _BOX_PAD_DEG),
            self._lat_index(high.latitude + _BOX_PAD_DEG) + 1,
        )

        min_lon = low.longitude - _BOX_PAD_DEG
        max_lon = high.longitude + _BOX_PAD_DEG
        if max_lon - min_lon >= 360.0:
            lon_spans = [(-180.0, 180.0)]
        elif min_lon < -180.0:
            lon_spans = [(min_lon + 360.0, 180.0), (-180.0, max_lon)]
        elif max_lon > 180.0:
            lon_spans = [(min_lon, 180.0), (-180.0, max_lon - 360.0)]
        else:
            lon_spans = [(min_lon, max_lon)]

        lon_indices: set[int] = set()
        for lo, hi in lon_spans:
            lon_indices.update(range(self._lon_index(lo), self._lon_index(hi) + 1))

        return [(lat, lon) for lat in lat_range for lon in sorted(lon_indices)]
