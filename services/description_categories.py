"""DescriptionCategory service for database operations."""

import sqlite3
from typing import List, Optional

from logger import get_logger
from models.category import Category
from models.description_category import DescriptionCategory
from services.categories import CategoryService

logger = get_logger(__name__)

_SELECT_JOINED = """
    SELECT dc.id, dc.description, c.id, c.name
    FROM DescriptionCategory dc
    INNER JOIN Category c ON dc.category_id = c.id
"""


def _row_to_description_category(row) -> DescriptionCategory:
    return DescriptionCategory(
        id=row[0],
        description=row[1],
        category=Category(id=row[2], name=row[3]),
    )


class DescriptionCategoryService:
    """Service for the learned description -> category associations."""

    def __init__(self, db_manager, categories: Optional[CategoryService] = None):
        """Initialize the description category service.

        Args:
            db_manager: Database manager instance for database operations.
            categories: Category service used to find-or-create categories.
        """
        self.db_manager = db_manager
        self.categories = categories or CategoryService(db_manager)

    def find_all(self) -> List[DescriptionCategory]:
        """Select every association, ordered by id.

        Rows whose category_id does not resolve are dropped by the join and
        logged.

        Raises:
            sqlite3.Error: If the table cannot be read.
        """
        with self.db_manager.connect() as conn:
            rows = conn.execute(f"{_SELECT_JOINED} ORDER BY dc.id").fetchall()
            total = conn.execute("SELECT COUNT(*) FROM DescriptionCategory").fetchone()[0]

        if total != len(rows):
            logger.warning(
                f"Skipped {total - len(rows)} DescriptionCategory row(s) "
                "that reference a missing Category"
            )
        return [_row_to_description_category(row) for row in rows]

    def find_by_description_and_category(
        self, description: str, category: Category
    ) -> Optional[DescriptionCategory]:
        """Find the association with this description and category (case-insensitive)."""
        try:
            with self.db_manager.connect() as conn:
                row = conn.execute(
                    f"{_SELECT_JOINED} WHERE upper(dc.description) = ? AND upper(c.name) = ? "
                    "ORDER BY dc.id LIMIT 1",
                    (description.upper(), category.name.upper()),
                ).fetchone()
        except sqlite3.Error as e:
            logger.error(
                f"Failed to select DescriptionCategory ({description}, {category.name}): {e}"
            )
            return None

        return _row_to_description_category(row) if row else None

    def delete_all(self, conn: sqlite3.Connection) -> int:
        """Remove every association inside the caller's transaction.

        Returns:
            The number of rows removed.
        """
        return conn.execute("DELETE FROM DescriptionCategory").rowcount

    def upsert(
        self, conn: sqlite3.Connection, description_category: DescriptionCategory
    ) -> DescriptionCategory:
        """Record an association inside the caller's transaction.

        The category is found or created, and any previous association for the
        same description is replaced.
        """
        category = self.categories.find_or_create(conn, description_category.category)
        conn.execute(
            "DELETE FROM DescriptionCategory WHERE description = ?",
            (description_category.description,),
        )
        cursor = conn.execute(
            "INSERT INTO DescriptionCategory (description, category_id) VALUES (?, ?)",
            (description_category.description, category.id),
        )
        return DescriptionCategory(
            id=cursor.lastrowid,
            description=description_category.description,
            category=category,
        )

    def insert(self, description_category: DescriptionCategory) -> Optional[DescriptionCategory]:
        """Record a single association in its own transaction.

        Returns:
            The stored association, or None if the write failed and was rolled back.
        """
        try:
            with self.db_manager.transaction() as conn:
                return self.upsert(conn, description_category)
        except sqlite3.Error as e:
            logger.error(f"Failed to insert DescriptionCategory {description_category}: {e}")
            return None
