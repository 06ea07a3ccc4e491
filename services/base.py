"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager
from services.categories import CategoryService
from services.description_categories import DescriptionCategoryService
from services.keyword_rules import load_keyword_rules
from services.persistence import JsonFileAdapter, SqliteAdapter
from services.store import TransactionCategoryStore


class Services:
    """Container for all application services.

    This class wires the category store to the backend named in the config and
    makes it easy to inject a test database.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If None, one is
            created from config.
    """

    def __init__(self, config: Config, db_manager=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        self.categories = CategoryService(self.db_manager)
        self.description_categories = DescriptionCategoryService(
            self.db_manager, self.categories
        )

        if config.store_backend == "json":
            adapter = JsonFileAdapter(config.json_store_path)
        elif config.store_backend == "sqlite":
            adapter = SqliteAdapter(self.db_manager, self.description_categories)
        else:
            raise ValueError(f"Unknown store backend: {config.store_backend}")

        self.store = TransactionCategoryStore(
            adapter,
            similarity_threshold=config.similarity_threshold,
            overlap_threshold=config.overlap_threshold,
        )
        self.keyword_rules = load_keyword_rules(config.keyword_rules_path)

    def open(self) -> "Services":
        """Create the schema if needed and load the learned categories.

        Raises:
            StoreDurabilityError: If the persisted store can't be read.
        """
        if self.config.store_backend == "sqlite":
            self.db_manager.migrate()
        self.store.load()
        return self

    def close(self) -> None:
        self.db_manager.close()
