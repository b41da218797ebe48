"""CSV import for airports and waypoints.

Airport files follow the OurAirports column names::

    ident,type,name,latitude_deg,longitude_deg,elevation_ft,iso_country,iso_region,iata_code,icao_code

Waypoint files use::

    identifier,name,type,latitude,longitude,region

with optional ``frequency`` and ``range_nm`` columns for navaids.

Rows with missing or malformed fields are skipped with a warning.

Typical usage:
    from aerobase.store.csv_loader import load_navpoints_csv

    airports = load_navpoints_csv("data/airports.csv", NavPointKind.AIRPORT)
"""

import csv
import logging
from pathlib import Path

from aerobase.errors import InvalidInputError
from aerobase.models.coordinate import Coordinate
from aerobase.models.navpoint import NavPoint, NavPointKind

logger = logging.getLogger(__name__)


def load_navpoints_csv(csv_path: str | Path, kind: NavPointKind) -> list[NavPoint]:
    """Load airports or waypoints from a CSV file.

    Args:
        csv_path: Path to CSV file
        kind: Which layout the file uses

    Returns:
        Parsed NavPoints

    Raises:
        FileNotFoundError: If the CSV file doesn't exist

    Examples:
        >>> points = load_navpoints_csv("data/waypoints.csv", NavPointKind.WAYPOINT)
    """
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"Navigation CSV not found: {csv_path}")

    parse = _parse_airport if kind is NavPointKind.AIRPORT else _parse_waypoint
    points: list[NavPoint] = []
    skipped = 0

    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for line, row in enumerate(reader, start=2):
            try:
                point = parse(row)
            except (KeyError, ValueError, TypeError, InvalidInputError) as e:
                logger.warning("Skipping invalid %s row %d in %s: %s", kind.value, line, path, e)
                skipped += 1
                continue
            if point is not None:
                points.append(point)

    logger.info("Loaded %d %ss from %s (%d skipped)", len(points), kind.value, path, skipped)
    return points


def _optional(row: dict, key: str) -> str | None:
    value = (row.get(key) or "").strip()
    return value or None


def _optional_float(row: dict, key: str) -> float | None:
    value = _optional(row, key)
    return float(value) if value else None


def _parse_airport(row: dict) -> NavPoint | None:
    """Parse one OurAirports row; rows without an ICAO code are ignored."""
    icao = _optional(row, "icao_code") or _optional(row, "gps_code")
    if not icao:
        return None

    coordinate = Coordinate.validated(float(row["latitude_deg"]), float(row["longitude_deg"]))
    elevation = _optional(row, "elevation_ft")

    return NavPoint(
        identifier=icao,
        kind=NavPointKind.AIRPORT,
        coordinate=coordinate,
        name=row["name"].strip(),
        elevation_ft=int(round(float(elevation))) if elevation else None,
        region=_optional(row, "iso_region"),
        icao=icao,
        iata=_optional(row, "iata_code"),
        country=_optional(row, "iso_country"),
    )


def _parse_waypoint(row: dict) -> NavPoint:
    identifier = row["identifier"].strip()
    if not identifier:
        raise ValueError("empty identifier")

    coordinate = Coordinate.validated(float(row["latitude"]), float(row["longitude"]))
    return NavPoint.waypoint(
        identifier,
        (row.get("name") or identifier).strip(),
        coordinate.latitude,
        coordinate.longitude,
        waypoint_type=_optional(row, "type"),
        region=_optional(row, "region"),
        frequency=_optional_float(row, "frequency"),
        range_nm=_optional_float(row, "range_nm"),
    )
