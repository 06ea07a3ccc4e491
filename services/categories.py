"""Category service for database operations."""

import sqlite3
from typing import List, Optional

from logger import get_logger
from models.category import Category, canonicalize_name

logger = get_logger(__name__)


def _row_to_category(row) -> Category:
    return Category(id=row[0], name=row[1])


class CategoryService:
    """Service for reading and writing the Category table.

    Methods that take a ``conn`` run inside the caller's transaction scope;
    the others open their own read on the shared connection. Failures of a
    single statement are logged and reported as None / an empty list.
    """

    def __init__(self, db_manager):
        """Initialize the category service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self) -> List[Category]:
        """Get all categories from the database.

        Returns:
            List of Category objects, ordered by name.
        """
        try:
            with self.db_manager.connect() as conn:
                rows = conn.execute(
                    "SELECT id, name FROM Category ORDER BY name"
                ).fetchall()
        except sqlite3.Error as e:
            logger.error(f"Failed to select categories: {e}")
            return []

        return [_row_to_category(row) for row in rows]

    def find(self, category_id: int) -> Optional[Category]:
        """Get a single category by ID.

        Args:
            category_id: The category ID to find.

        Returns:
            Category object if found, None otherwise.
        """
        try:
            with self.db_manager.connect() as conn:
                return self.select(conn, category_id)
        except sqlite3.Error as e:
            logger.error(f"Failed to select Category with id {category_id}: {e}")
            return None

    def find_by_name(self, name: str) -> Optional[Category]:
        """Get a single category by (canonical) name."""
        try:
            with self.db_manager.connect() as conn:
                return self.select_by_name(conn, name)
        except sqlite3.Error as e:
            logger.error(f"Failed to select Category with name {name}: {e}")
            return None

    def select(self, conn: sqlite3.Connection, category_id: int) -> Optional[Category]:
        row = conn.execute(
            "SELECT id, name FROM Category WHERE id = ?", (category_id,)
        ).fetchone()
        return _row_to_category(row) if row else None

    def select_by_name(self, conn: sqlite3.Connection, name: str) -> Optional[Category]:
        row = conn.execute(
            "SELECT id, name FROM Category WHERE name = ?", (canonicalize_name(name),)
        ).fetchone()
        return _row_to_category(row) if row else None

    def insert(self, conn: sqlite3.Connection, category: Category) -> Category:
        """Insert a category and return a copy with its id populated."""
        cursor = conn.execute("INSERT INTO Category (name) VALUES (?)", (category.name,))
        return Category(id=cursor.lastrowid, name=category.name)

    def find_or_create(self, conn: sqlite3.Connection, category: Category) -> Category:
        """Return the stored category with this name, inserting it if absent."""
        existing = self.select_by_name(conn, category.name)
        if existing is not None:
            return existing

        logger.debug(f"Implicitly creating Category with name {category.name}")
        return self.insert(conn, category)
