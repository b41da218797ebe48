"""Tests for configuration loading."""

from pathlib import Path

import pytest

from aerobase.core.config import AeroBaseConfig, ConfigError, ConfigLoader
from aerobase.models.flight import TimeRounding
from aerobase.spatial.geometry import EARTH_RADIUS_NM


class TestConfigLoader:
    """Test YAML loading and dot-notation access."""

    def test_load(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("database:\n  path: nav.db\n  pool_size: 2\n")

        loader = ConfigLoader.load(path)
        assert loader.get("database.path") == "nav.db"
        assert loader.get("database.pool_size") == 2
        assert loader.get("database.missing", "fallback") == "fallback"
        assert loader.get("nothing.here") is None

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            ConfigLoader.load(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("database: [unclosed\n")
        with pytest.raises(ConfigError):
            ConfigLoader.load(path)

    def test_root_must_be_mapping(self, tmp_path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            ConfigLoader.load(path)

    def test_empty_file(self, tmp_path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert ConfigLoader.load(path).to_dict() == {}

    def test_set_and_section(self) -> None:
        loader = ConfigLoader()
        loader.set("index.cell_size_deg", 0.5)
        assert loader.get_section("index") == {"cell_size_deg": 0.5}

        with pytest.raises(ConfigError):
            loader.get_section("missing")
        with pytest.raises(ConfigError):
            loader.get_section("index.cell_size_deg")

    def test_merge(self) -> None:
        """Test nested values merge and the other side wins."""
        base = ConfigLoader({"database": {"path": "a.db", "pool_size": 4}})
        base.merge(ConfigLoader({"database": {"path": "b.db"}, "index": {"cell_size_deg": 2}}))

        assert base.get("database.path") == "b.db"
        assert base.get("database.pool_size") == 4
        assert base.get("index.cell_size_deg") == 2

    def test_save_round_trip(self, tmp_path) -> None:
        loader = ConfigLoader({"planning": {"time_rounding": "half_up"}})
        path = tmp_path / "out" / "saved.yaml"
        loader.save(path)
        assert ConfigLoader.load(path).get("planning.time_rounding") == "half_up"


class TestAeroBaseConfig:
    """Test typed configuration."""

    def test_defaults(self) -> None:
        config = AeroBaseConfig()
        assert config.database.path == "aerobase.db"
        assert config.database.pool_size == 4
        assert config.index.cell_size_deg == 1.0
        assert config.geo.earth_radius_nm == EARTH_RADIUS_NM
        assert config.validation.max_cruise_altitude_ft == 60000
        assert config.validation.max_cruise_speed_kts == 1000
        assert config.planning.time_rounding is TimeRounding.CEILING
        assert config.logging.config_path is None

    def test_empty_loader_matches_defaults(self) -> None:
        assert AeroBaseConfig.from_loader(ConfigLoader()) == AeroBaseConfig()

    def test_sample_config_file(self) -> None:
        """Test the shipped sample configuration parses."""
        config = AeroBaseConfig.load(Path(__file__).parents[2] / "config" / "aerobase.yaml")
        assert config.geo.earth_radius_nm == pytest.approx(3440.065)
        assert config.logging.config_path == "config/logging.yaml"

    def test_overrides(self) -> None:
        loader = ConfigLoader(
            {
                "database": {"path": "/tmp/nav.db", "enable_wal": False, "pool_size": 8},
                "index": {"cell_size_deg": 0.25},
                "geo": {"earth_radius_nm": 3440.0},
                "validation": {"max_cruise_altitude_ft": 45000, "max_cruise_speed_kts": 600},
                "planning": {"time_rounding": "HALF_UP"},
            }
        )
        config = AeroBaseConfig.from_loader(loader)

        assert config.database.path == "/tmp/nav.db"
        assert config.database.enable_wal is False
        assert config.database.pool_size == 8
        assert config.index.cell_size_deg == 0.25
        assert config.geo.earth_radius_nm == 3440.0
        assert config.validation.max_cruise_altitude_ft == 45000
        assert config.planning.time_rounding is TimeRounding.HALF_UP

    @pytest.mark.parametrize(
        "key, value",
        [
            ("database.pool_size", 0),
            ("database.pool_size", "many"),
            ("index.cell_size_deg", 0),
            ("index.cell_size_deg", 91),
            ("index.cell_size_deg", True),
            ("geo.earth_radius_nm", -1),
            ("geo.earth_radius_nm", float("nan")),
            ("validation.max_cruise_altitude_ft", 0),
            ("validation.max_cruise_speed_kts", -5),
            ("planning.time_rounding", "floor"),
        ],
    )
    def test_invalid_values(self, key, value) -> None:
        loader = ConfigLoader()
        loader.set(key, value)
        with pytest.raises(ConfigError):
            AeroBaseConfig.from_loader(loader)
