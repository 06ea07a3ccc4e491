import tomllib
from pathlib import Path

import pytest

from config import Config, _write_config, get_migrations_dir, load_config


class TestLoadConfig:
    """Tests for reading the TOML configuration."""

    def test_missing_file_writes_defaults(self, tmp_path):
        """Test that a missing config file is created with default values."""
        config_path = tmp_path / "autocat.toml"

        config = load_config(config_path)

        assert config_path.exists()
        assert config == Config.default()
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        assert data["store"]["backend"] == "sqlite"
        assert data["matching"]["similarity_threshold"] == 80

    def test_reads_settings(self, tmp_path):
        """Test that every section is read."""
        config_path = tmp_path / "autocat.toml"
        config_path.write_text(
            f"""
base_dir = "{tmp_path / 'data'}"

[database]
filename = "money.db"

[store]
backend = "json"
json_filename = "learned.json"

[logging]
level = "DEBUG"

[matching]
similarity_threshold = 85
overlap_threshold = 0.75
fuzzy_limit = 3

[keyword_rules]
path = "rules.yaml"
"""
        )

        config = load_config(config_path)

        assert config.db_path == tmp_path / "data" / "db" / "money.db"
        assert config.store_backend == "json"
        assert config.json_store_path == tmp_path / "data" / "db" / "learned.json"
        assert config.log_level == "DEBUG"
        assert config.log_dir == tmp_path / "data" / "logs"
        assert config.similarity_threshold == 85
        assert config.overlap_threshold == 0.75
        assert config.fuzzy_limit == 3
        assert config.keyword_rules_path == tmp_path / "rules.yaml"

    def test_round_trip(self, tmp_path, test_config):
        """Test that a written config reads back unchanged."""
        config_path = tmp_path / "autocat.toml"
        test_config.keyword_rules_path = tmp_path / "rules.yaml"

        _write_config(test_config, config_path)

        assert load_config(config_path) == test_config

    @pytest.mark.parametrize(
        "section",
        [
            '[store]\nbackend = "csv"',
            "[matching]\nsimilarity_threshold = 150",
            "[matching]\noverlap_threshold = 1.5",
            "[matching]\nfuzzy_limit = 0",
        ],
    )
    def test_invalid_settings(self, tmp_path, section):
        """Test that out-of-range settings are refused."""
        config_path = tmp_path / "autocat.toml"
        config_path.write_text(section + "\n")

        with pytest.raises(ValueError):
            load_config(config_path)


def test_migrations_dir():
    """Test that the migrations directory ships with the code."""
    migrations = get_migrations_dir()

    assert isinstance(migrations, Path)
    assert (migrations / "001_categories.sql").exists()
