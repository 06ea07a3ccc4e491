import logging
import sqlite3

import pytest

from models.category import Category
from models.description_category import DescriptionCategory


class TestDescriptionCategoryService:
    """Tests for DescriptionCategoryService."""

    def test_insert_creates_category(self, services):
        """Test that inserting an association creates its category."""
        stored = services.description_categories.insert(
            DescriptionCategory("NETFLIX.COM", Category("TV"))
        )

        assert stored.id is not None
        assert stored.category.id == services.categories.find_by_name("TV").id

    def test_find_all(self, services):
        """Test listing every association in insertion order."""
        services.description_categories.insert(DescriptionCategory("NETFLIX.COM", Category("TV")))
        services.description_categories.insert(DescriptionCategory("LOBLAWS", Category("FOOD")))

        rows = services.description_categories.find_all()

        assert [(r.description, r.category.name) for r in rows] == [
            ("NETFLIX.COM", "TV"),
            ("LOBLAWS", "FOOD"),
        ]

    def test_insert_replaces_description(self, services):
        """Test that a description has at most one association."""
        services.description_categories.insert(DescriptionCategory("COSTCO", Category("FOOD")))
        services.description_categories.insert(DescriptionCategory("COSTCO", Category("HOUSEHOLD")))

        rows = services.description_categories.find_all()

        assert [(r.description, r.category.name) for r in rows] == [("COSTCO", "HOUSEHOLD")]

    def test_find_by_description_and_category(self, services):
        """Test the case-insensitive lookup of one association."""
        services.description_categories.insert(DescriptionCategory("Netflix.com", Category("TV")))

        found = services.description_categories.find_by_description_and_category(
            "NETFLIX.COM", Category("tv")
        )
        missing = services.description_categories.find_by_description_and_category(
            "NETFLIX.COM", Category("MUSIC")
        )

        assert found is not None
        assert found.description == "Netflix.com"
        assert missing is None

    def test_orphaned_rows_skipped(self, services, test_db, caplog):
        """Test that rows pointing at a missing category are dropped with a warning."""
        services.description_categories.insert(DescriptionCategory("NETFLIX.COM", Category("TV")))
        test_db.execute(
            "INSERT INTO DescriptionCategory (description, category_id) VALUES ('GHOST', 999)"
        )
        test_db.commit()

        with caplog.at_level(logging.WARNING):
            rows = services.description_categories.find_all()

        assert [r.description for r in rows] == ["NETFLIX.COM"]
        assert "Skipped 1 DescriptionCategory row(s)" in caplog.text

    def test_insert_failure_returns_none(self, services, test_db):
        """Test that a failed write is rolled back and reported as None."""
        test_db.execute("DROP TABLE DescriptionCategory")

        stored = services.description_categories.insert(
            DescriptionCategory("NETFLIX.COM", Category("TV"))
        )

        assert stored is None
        assert services.categories.find_by_name("TV") is None

    def test_find_all_raises_on_broken_schema(self, services, test_db):
        """Test that find_all surfaces read failures to the caller."""
        test_db.execute("DROP TABLE DescriptionCategory")

        with pytest.raises(sqlite3.Error):
            services.description_categories.find_all()
