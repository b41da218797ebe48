"""Great circle geometry and spatial indexing.

Typical usage:
    from aerobase.spatial import SpatialIndex, SnapshotHolder, geometry

    holder = SnapshotHolder(cell_size_deg=1.0)
    holder.publish(points)
    nearby = holder.current().index.within(center, radius_nm=25)
"""

from aerobase.spatial import geometry
from aerobase.spatial.snapshot import IndexSnapshot, SnapshotHolder
from aerobase.spatial.spatial_index import SpatialIndex

__all__ = [
    "IndexSnapshot",
    "SnapshotHolder",
    "SpatialIndex",
    "geometry",
]
