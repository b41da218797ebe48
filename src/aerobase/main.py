"""AeroBase command line.

Imports navigation data, runs proximity queries and evaluates flight plans
against a local database.

Typical usage:
    uv run python -m aerobase.main import --airports data/airports.csv --waypoints data/waypoints.csv
    uv run python -m aerobase.main near 40.6413 -73.7781 --radius 30 --kind airport
    uv run python -m aerobase.main route KJFK KLAX --speed 500 --altitude 35000 --via MERIT
    uv run python -m aerobase.main device
"""

import argparse
import logging
import sys
from dataclasses import replace

from aerobase.core.config import AeroBaseConfig, ConfigError
from aerobase.core.logging_system import LoggingError, initialize_logging
from aerobase.errors import AeroBaseError
from aerobase.models.coordinate import Coordinate
from aerobase.models.flight import FlightPlanBuilder
from aerobase.models.navpoint import NavPointKind
from aerobase.service import AeroBase
from aerobase.store.csv_loader import load_navpoints_csv
from aerobase.store.sqlite_store import SQLiteStore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(prog="aerobase", description="Aviation reference data")
    parser.add_argument("--config", help="Path to aerobase YAML configuration")
    parser.add_argument("--database", help="Override the database path")

    sub = parser.add_subparsers(dest="command", required=True)

    imp = sub.add_parser("import", help="Import airports/waypoints from CSV")
    imp.add_argument("--airports", help="OurAirports-style airports CSV")
    imp.add_argument("--waypoints", help="Waypoints CSV")

    near = sub.add_parser("near", help="List points within a radius")
    near.add_argument("latitude", type=float)
    near.add_argument("longitude", type=float)
    near.add_argument("--radius", type=float, default=25.0, help="Radius in nm")
    near.add_argument("--kind", choices=[k.value for k in NavPointKind])

    route = sub.add_parser("route", help="Evaluate a flight plan")
    route.add_argument("departure")
    route.add_argument("destination")
    route.add_argument("--speed", type=int, required=True, help="Cruise speed in knots")
    route.add_argument("--altitude", type=int, required=True, help="Cruise altitude in feet")
    route.add_argument("--via", nargs="*", default=[], help="Route waypoints in order")
    route.add_argument("--alternate")
    route.add_argument("--fuel-flow", type=float, help="Fuel flow in gallons per hour")

    sub.add_parser("device", help="Show this machine's device identity")

    return parser


def load_config(args: argparse.Namespace) -> AeroBaseConfig:
    config = AeroBaseConfig.load(args.config) if args.config else AeroBaseConfig()
    if args.database:
        config = replace(config, database=replace(config.database, path=args.database))
    return config


def cmd_import(service: AeroBase, args: argparse.Namespace) -> int:
    if not isinstance(service.store, SQLiteStore):
        print("Import requires a SQLite database", file=sys.stderr)
        return 1

    points = []
    if args.airports:
        points.extend(load_navpoints_csv(args.airports, NavPointKind.AIRPORT))
    if args.waypoints:
        points.extend(load_navpoints_csv(args.waypoints, NavPointKind.WAYPOINT))

    count = service.store.import_navpoints(points)
    print(f"Imported {count} navigation points")
    return 0


def cmd_near(service: AeroBase, args: argparse.Namespace) -> int:
    service.refresh_index()
    center = Coordinate.validated(args.latitude, args.longitude)
    kind = NavPointKind(args.kind) if args.kind else None

    for point in service.find_within(center, args.radius, kind):
        print(point)
    return 0


def cmd_route(service: AeroBase, args: argparse.Namespace) -> int:
    service.refresh_index()
    builder = (
        FlightPlanBuilder()
        .departure(args.departure)
        .destination(args.destination)
        .cruise_speed(args.speed)
        .cruise_altitude(args.altitude)
        .route(args.via)
    )
    if args.alternate:
        builder.alternate(args.alternate)

    route = service.evaluate(builder.build())
    for fix in route.fixes:
        print(
            f"{fix.identifier:<8} {fix.distance_from_previous_nm:8.1f} nm "
            f"{fix.cumulative_distance_nm:8.1f} nm {fix.elapsed_min:5d} min"
        )
    print(f"Total: {route.total_distance_nm:.1f} nm, {route.estimated_time_min} min")

    if args.fuel_flow is not None:
        print(f"Fuel: {service.calculate_fuel(route, args.fuel_flow):.1f} gal")
    return 0


def cmd_device(service: AeroBase, args: argparse.Namespace) -> int:
    device = service.get_device_fingerprint()
    print(f"Device {device.id}")
    print(f"Fingerprint {device.fingerprint}")
    return 0


COMMANDS = {
    "import": cmd_import,
    "near": cmd_near,
    "route": cmd_route,
    "device": cmd_device,
}


def main(argv: list[str] | None = None) -> int:
    """Run the command line.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
        initialize_logging(config.logging.config_path, use_platform_dir=True)
        service = AeroBase(config)
        return COMMANDS[args.command](service, args)
    except (ConfigError, LoggingError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except AeroBaseError as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error ({e.kind.value}): {e}", file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
