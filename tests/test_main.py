"""Tests for the command line."""

from unittest.mock import patch

import pytest

from aerobase.main import build_parser, main
from aerobase.store.sqlite_store import SQLiteStore

AIRPORTS_CSV = """\
ident,type,name,latitude_deg,longitude_deg,elevation_ft,iso_country,iso_region,iata_code,icao_code
KJFK,large_airport,John F Kennedy Intl,40.6413,-73.7781,13,US,US-NY,JFK,KJFK
KLAX,large_airport,Los Angeles Intl,33.9416,-118.4085,125,US,US-CA,LAX,KLAX
KLGA,large_airport,La Guardia,40.7769,-73.874,21,US,US-NY,LGA,KLGA
"""

WAYPOINTS_CSV = """\
identifier,name,type,latitude,longitude,region
MERIT,MERIT,fix,41.3819,-73.1375,K6
"""


@pytest.fixture(autouse=True)
def no_log_files():
    """Keep CLI runs from touching the platform log directory."""
    with patch("aerobase.main.initialize_logging") as init:
        yield init


@pytest.fixture
def import_args(tmp_path) -> list[str]:
    """Write sample CSVs and return the arguments that import them."""
    airports = tmp_path / "airports.csv"
    airports.write_text(AIRPORTS_CSV)
    waypoints = tmp_path / "waypoints.csv"
    waypoints.write_text(WAYPOINTS_CSV)

    return [
        "--database",
        str(tmp_path / "nav.db"),
        "import",
        "--airports",
        str(airports),
        "--waypoints",
        str(waypoints),
    ]


@pytest.fixture
def database(tmp_path, import_args) -> list[str]:
    """Import sample data and return the database arguments."""
    assert main(import_args) == 0
    return ["--database", str(tmp_path / "nav.db")]


class TestParser:
    def test_requires_command(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_route_args(self) -> None:
        args = build_parser().parse_args(
            ["route", "KJFK", "KLAX", "--speed", "500", "--altitude", "35000", "--via", "A", "B"]
        )
        assert args.via == ["A", "B"]
        assert args.speed == 500


class TestCommands:
    """Test each subcommand end to end against a temporary database."""

    def test_import(self, tmp_path, import_args, capsys) -> None:
        """Test the import reports its row count and the rows land in the database."""
        assert main(import_args) == 0
        assert "Imported 4 navigation points" in capsys.readouterr().out

        points = SQLiteStore(tmp_path / "nav.db").load_all()
        assert sorted(p.identifier for p in points) == ["KJFK", "KLAX", "KLGA", "MERIT"]

    def test_near(self, database, capsys) -> None:
        capsys.readouterr()
        assert main(database + ["near", "40.6413", "-73.7781", "--radius", "30", "--kind", "airport"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines == ["KJFK (John F Kennedy Intl)", "KLGA (La Guardia)"]

    def test_route(self, database, capsys) -> None:
        capsys.readouterr()
        code = main(
            database
            + ["route", "KJFK", "KLAX", "--speed", "500", "--altitude", "35000", "--fuel-flow", "800"]
        )
        assert code == 0

        out = capsys.readouterr().out
        assert "258 min" in out
        assert "Fuel:" in out

    def test_route_unknown_waypoint(self, database, capsys) -> None:
        code = main(
            database
            + ["route", "KJFK", "KLAX", "--speed", "500", "--altitude", "35000", "--via", "NOPE"]
        )
        assert code == 1
        assert "not_found" in capsys.readouterr().err

    def test_device(self, tmp_path, capsys) -> None:
        assert main(["--database", str(tmp_path / "nav.db"), "device"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("Device ")
        assert "Fingerprint " in out

    def test_missing_csv(self, tmp_path, capsys) -> None:
        code = main(["--database", str(tmp_path / "nav.db"), "import", "--airports", str(tmp_path / "x.csv")])
        assert code == 1

    def test_bad_config(self, tmp_path, capsys) -> None:
        config = tmp_path / "bad.yaml"
        config.write_text("index:\n  cell_size_deg: -1\n")
        assert main(["--config", str(config), "device"]) == 2
        assert "Configuration error" in capsys.readouterr().err

    def test_logging_initialized(self, tmp_path, no_log_files) -> None:
        main(["--database", str(tmp_path / "nav.db"), "device"])
        no_log_files.assert_called_once_with(None, use_platform_dir=True)
