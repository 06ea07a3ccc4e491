"""Durable storage for the learned description -> category index.

Two interchangeable backings are provided: a flat JSON document and the
Category / DescriptionCategory tables in SQLite. Both load the whole index at
startup and rewrite it wholesale on save.
"""

import json
import os
import sqlite3
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict

from db.result import ErrorKind, Result
from errors import StoreDurabilityError
from logger import get_logger
from models.category import Category
from models.description_category import DescriptionCategory
from services.description_categories import DescriptionCategoryService

logger = get_logger(__name__)

_JSON_KEY = "description_categories"


def _intern_categories(pairs) -> Dict[str, Category]:
    """Build an index in which every category name maps to one shared instance."""
    singletons: Dict[str, Category] = {}
    index: Dict[str, Category] = {}
    for description, category in pairs:
        index[description] = singletons.setdefault(category.name, category)
    return index


class CategoryStoreAdapter(ABC):
    """Reads and writes the description -> category index."""

    @abstractmethod
    def load(self) -> Dict[str, Category]:
        """Read the persisted index.

        Raises:
            StoreDurabilityError: If persisted state exists but can't be accessed.
        """

    @abstractmethod
    def save(self, index: Dict[str, Category]) -> Result:
        """Persist the whole index, never raising."""


class JsonFileAdapter(CategoryStoreAdapter):
    """Stores the index as ``{"description_categories": {description: name}}``."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Dict[str, Category]:
        if not self.path.exists():
            logger.info(f"No existing transaction categories in {self.path}")
            return {}

        if not os.access(self.path, os.R_OK):
            raise StoreDurabilityError(
                f"Transaction category store file {self.path} is not readable"
            )
        if not os.access(self.path, os.W_OK):
            raise StoreDurabilityError(
                f"Transaction category store file {self.path} is not writable"
            )

        logger.info(f"Loading transaction categories from {self.path}")
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Transaction category store {self.path} is corrupt, starting empty: {e}")
            return {}
        except OSError as e:
            raise StoreDurabilityError(
                f"Failed to read transaction category store {self.path}: {e}"
            ) from e

        mapping = data.get(_JSON_KEY) if isinstance(data, dict) else None
        if not isinstance(mapping, dict):
            logger.error(f"Transaction category store {self.path} has no {_JSON_KEY}, starting empty")
            return {}

        pairs = []
        for description, name in mapping.items():
            if not isinstance(name, str) or not name.strip():
                logger.warning(f"Skipping malformed entry for '{description}': {name!r}")
                continue
            pairs.append((description, Category(name)))

        return _intern_categories(pairs)

    def save(self, index: Dict[str, Category]) -> Result:
        document = {
            _JSON_KEY: {
                description: category.name
                for description, category in sorted(index.items())
            }
        }

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                json.dump(document, tmp, indent=2)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.error(f"Failed to save transaction category store to {self.path}: {e}")
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            return Result.failure(ErrorKind.DURABILITY, str(e))

        logger.info(f"Saved {len(index)} transaction categories to {self.path}")
        return Result.success(len(index))


class SqliteAdapter(CategoryStoreAdapter):
    """Stores the index in the Category and DescriptionCategory tables."""

    def __init__(self, db_manager, description_categories: DescriptionCategoryService = None):
        self.db_manager = db_manager
        self.description_categories = description_categories or DescriptionCategoryService(
            db_manager
        )

    def load(self) -> Dict[str, Category]:
        try:
            rows = self.description_categories.find_all()
        except sqlite3.Error as e:
            raise StoreDurabilityError(f"Failed to read the category database: {e}") from e

        logger.info(f"Loaded {len(rows)} description categories from the database")
        return _intern_categories((row.description, row.category) for row in rows)

    def save(self, index: Dict[str, Category]) -> Result:
        assigned_ids = []
        try:
            with self.db_manager.transaction() as conn:
                removed = self.description_categories.delete_all(conn)
                logger.debug(f"Replacing {removed} stored description categories")
                for description, category in sorted(index.items()):
                    stored = self.description_categories.upsert(
                        conn, DescriptionCategory(description, category)
                    )
                    assigned_ids.append((category, stored.category.id))
        except sqlite3.Error as e:
            logger.error(f"Failed to save description categories, rolled back: {e}")
            return Result.failure(ErrorKind.TRANSIENT, str(e))

        # only hand persistent ids to the in-memory singletons once committed
        for category, category_id in assigned_ids:
            if category.id is None:
                category.id = category_id

        logger.info(f"Saved {len(index)} description categories to the database")
        return Result.success(len(index))
