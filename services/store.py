"""In-memory store of learned description -> category associations."""

from typing import Dict, List, Optional

from rapidfuzz import fuzz
from rapidfuzz.utils import default_process

from config import DEFAULT_OVERLAP_THRESHOLD, DEFAULT_SIMILARITY_THRESHOLD
from db.result import Result
from logger import get_logger
from models.category import Category
from models.transaction import CategorizedTransaction, Transaction
from services.persistence import CategoryStoreAdapter
from services.token_matching import TokenNormalizer, find_token_matches

logger = get_logger(__name__)


class TransactionCategoryStore:
    """Owns the known categories and the description -> category index.

    Every category in the store is a singleton: putting a category whose
    canonical name is already known binds the association to the existing
    instance instead.

    Args:
        adapter: Where the index is persisted. None keeps the store in memory.
        similarity_threshold: Minimum rapidfuzz WRatio score (0-100) for a
            description to be a fuzzy match.
        overlap_threshold: Minimum token overlap ratio for the token based
            fallback, used only when no description reaches
            similarity_threshold.
        normalizer: Tokenizer for the fallback match.
    """

    def __init__(
        self,
        adapter: Optional[CategoryStoreAdapter] = None,
        similarity_threshold: float = DEFAULT_SIMILARITY_THRESHOLD,
        overlap_threshold: float = DEFAULT_OVERLAP_THRESHOLD,
        normalizer: Optional[TokenNormalizer] = None,
    ):
        self.adapter = adapter
        self.similarity_threshold = similarity_threshold
        self.overlap_threshold = overlap_threshold
        self.normalizer = normalizer or TokenNormalizer()

        self._description_categories: Dict[str, Category] = {}
        self._categories: Dict[str, Category] = {}

    def load(self) -> None:
        """Replace the in-memory state with the persisted index.

        Raises:
            StoreDurabilityError: If persisted state exists but can't be read.
        """
        if self.adapter is None:
            return

        index = self.adapter.load()
        self.clear()
        for description, category in index.items():
            self._description_categories[description] = self._singleton(category)
        logger.info(f"Loaded categories {self.get_names()}")

    def save(self) -> Result:
        """Write the index through the adapter."""
        if self.adapter is None:
            return Result.success(0)
        return self.adapter.save(dict(self._description_categories))

    def clear(self) -> None:
        self._description_categories.clear()
        self._categories.clear()
        logger.debug("TransactionCategoryStore cleared")

    def put(self, transaction: Transaction, category: Category) -> CategorizedTransaction:
        """Map the transaction's description to the category.

        Any previous association for the same description is overwritten.

        Returns:
            The transaction bound to the store's singleton for that category.
        """
        singleton = self._singleton(category)
        if singleton is not category:
            logger.debug(f"Using existing category {singleton.name}")

        previous = self._description_categories.get(transaction.description)
        if previous is not None and previous is not singleton:
            logger.info(
                f"Re-categorized '{transaction.description}' from {previous.name} to {singleton.name}"
            )

        self._description_categories[transaction.description] = singleton
        return CategorizedTransaction(transaction, singleton)

    def get_exact(self, transaction: Transaction) -> Optional[Category]:
        """Category whose description equals the transaction's, ignoring case."""
        wanted = (transaction.description or "").casefold()
        if not wanted:
            return None

        for description in sorted(self._description_categories):
            if description.casefold() == wanted:
                return self._description_categories[description]
        return None

    def get_fuzzy(self, transaction: Transaction, limit: int) -> List[Category]:
        """Categories whose descriptions most closely match the transaction's.

        Both sides are lower-cased and stripped of punctuation before scoring.
        Descriptions scoring at least ``similarity_threshold`` are ranked by
        score, ties broken by description. If none qualify, descriptions with
        enough token overlap are used instead.

        Returns:
            Up to ``limit`` distinct categories, best match first.
        """
        description = transaction.description or ""
        if not description.strip() or limit <= 0:
            return []

        scored = []
        for key, category in self._description_categories.items():
            score = fuzz.WRatio(description, key, processor=default_process)
            if score >= self.similarity_threshold:
                scored.append((score, key, category))
        scored.sort(key=lambda s: (-s[0], s[1]))

        for score, key, category in scored:
            logger.debug(f"Fuzzy match for '{description}': '{key}' {score:.1f}")

        if scored:
            ranked = [category for _, _, category in scored]
        else:
            token_matches = find_token_matches(
                description,
                self._description_categories,
                self.normalizer,
                self.overlap_threshold,
            )
            for match in token_matches:
                logger.debug(
                    f"Token match for '{description}': '{match.description}' {match.overlap:.2f}"
                )
            ranked = [match.category for match in token_matches]

        distinct: List[Category] = []
        for category in ranked:
            if not any(category is seen for seen in distinct):
                distinct.append(category)
            if len(distinct) == limit:
                break
        return distinct

    def get_names(self) -> List[str]:
        """Alphabetically sorted names of all known categories."""
        return sorted(self._categories)

    def get_categories(self) -> List[Category]:
        return [self._categories[name] for name in self.get_names()]

    def find_category(self, name: str) -> Optional[Category]:
        return self._categories.get(Category(name).name)

    def __len__(self) -> int:
        return len(self._description_categories)

    def items(self):
        """(description, category) pairs, sorted by description."""
        return sorted(self._description_categories.items())

    def _singleton(self, category: Category) -> Category:
        return self._categories.setdefault(category.name, category)
