from dataclasses import replace

import pytest

from models.category import Category
from models.description_category import DescriptionCategory
from services.base import Services
from services.persistence import JsonFileAdapter, SqliteAdapter


class TestServices:
    """Tests for wiring the services from configuration."""

    def test_sqlite_backend(self, services):
        """Test that the sqlite backend stores through the database."""
        assert isinstance(services.store.adapter, SqliteAdapter)

    def test_open_loads_store(self, services, make_transaction):
        """Test that open() loads associations saved earlier."""
        services.description_categories.insert(DescriptionCategory("NETFLIX.COM", Category("TV")))

        services.open()

        assert services.store.get_exact(make_transaction("NETFLIX.COM")).name == "TV"

    def test_json_backend(self, test_config, db_manager_with_schema, make_transaction):
        """Test that the json backend stores next to the database."""
        config = replace(test_config, store_backend="json")
        services = Services(config, db_manager=db_manager_with_schema)
        services.store.put(make_transaction("NETFLIX.COM"), Category("TV"))

        assert isinstance(services.store.adapter, JsonFileAdapter)
        assert services.store.save().ok
        assert config.json_store_path.exists()

    def test_matching_settings_applied(self, test_config, db_manager_with_schema):
        """Test that thresholds come from the configuration."""
        config = replace(test_config, similarity_threshold=90, overlap_threshold=0.8)

        store = Services(config, db_manager=db_manager_with_schema).store

        assert store.similarity_threshold == 90
        assert store.overlap_threshold == 0.8

    def test_keyword_rules_loaded(self, test_config, db_manager_with_schema, tmp_path):
        """Test that keyword rules are read from the configured path."""
        path = tmp_path / "rules.yaml"
        path.write_text("rules:\n  - keywords: [netflix]\n    category: TV\n")
        config = replace(test_config, keyword_rules_path=path)

        services = Services(config, db_manager=db_manager_with_schema)

        assert services.keyword_rules.find_matching_category(frozenset({"netflix"})) == "TV"

    def test_unknown_backend(self, test_config, db_manager_with_schema):
        """Test that an unknown backend is refused."""
        config = replace(test_config, store_backend="csv")

        with pytest.raises(ValueError):
            Services(config, db_manager=db_manager_with_schema)
