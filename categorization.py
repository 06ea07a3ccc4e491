"""Categorization loop: clean raw records and file each one under a category.

Each transaction goes through the same steps, stopping at the first that
settles it:

1. Transfers are filed under TRANSFER.
2. An exact description match from the store is reused.
3. A keyword rule names the category (applied directly when the rules have
   auto_categorize enabled, otherwise offered to the user first).
4. Fuzzy candidates from the store are offered to the user.
5. The user picks from all known categories or names a new one.

The prompting itself is done by a CategoryPrompt supplied by the caller; this
module never leaves a transaction uncategorized.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from cleaners import get_cleaner
from config import DEFAULT_FUZZY_LIMIT
from errors import InvalidCategoryName
from logger import get_logger
from models.category import TRANSFER, UNKNOWN, Category, validate_category_name
from models.transaction import (
    CategorizedTransaction,
    RawTransaction,
    Transaction,
    TransactionType,
)
from services.keyword_rules import KeywordRules
from services.store import TransactionCategoryStore

logger = get_logger(__name__)

MAX_NAME_ATTEMPTS = 5


class CategoryPrompt(ABC):
    """The interactive collaborator that resolves what the engine can't."""

    @abstractmethod
    def choose_category(
        self, transaction: Transaction, candidates: List[Category]
    ) -> Optional[Category]:
        """Ask the user to pick one of the candidates.

        Returns:
            The chosen category, or None to reject all of them.
        """

    @abstractmethod
    def new_category_name(self, transaction: Transaction, existing_names: List[str]) -> str:
        """Ask the user for a new category name."""

    def reject_category_name(self, name: str, reason: str) -> None:
        """Tell the user why a name was refused before asking again."""


class Categorizer:
    """Runs transactions through the store and prompt until each has a category.

    Args:
        store: The categorization store. Associations are recorded with put().
        prompt: Collaborator used when the store can't decide.
        keyword_rules: Optional keyword rules consulted before fuzzy matching.
        fuzzy_limit: Maximum number of fuzzy candidates offered.
    """

    def __init__(
        self,
        store: TransactionCategoryStore,
        prompt: CategoryPrompt,
        keyword_rules: Optional[KeywordRules] = None,
        fuzzy_limit: int = DEFAULT_FUZZY_LIMIT,
    ):
        self.store = store
        self.prompt = prompt
        self.keyword_rules = keyword_rules or KeywordRules.empty()
        self.fuzzy_limit = fuzzy_limit

    def categorize(self, transaction: Transaction) -> CategorizedTransaction:
        if transaction.type == TransactionType.XFER:
            logger.info(f"Categorized transfer '{transaction.description}' as {TRANSFER.name}")
            return self.store.put(transaction, Category(TRANSFER.name))

        category = self.store.get_exact(transaction)
        if category is not None:
            logger.info(f"Exact match for '{transaction.description}': {category.name}")
            return self.store.put(transaction, category)

        keyword_category = self._keyword_category(transaction)
        if keyword_category is not None and self.keyword_rules.auto_categorize:
            logger.info(
                f"Keyword rule matched '{transaction.description}': {keyword_category.name}"
            )
            return self.store.put(transaction, keyword_category)

        candidates = self.store.get_fuzzy(transaction, self.fuzzy_limit)
        if keyword_category is not None and keyword_category not in candidates:
            candidates = [keyword_category] + candidates[: self.fuzzy_limit - 1]

        if candidates:
            logger.info(
                f"{len(candidates)} candidate(s) for '{transaction.description}': "
                f"{[c.name for c in candidates]}"
            )
            chosen = self.prompt.choose_category(transaction, candidates)
            if chosen is not None:
                return self.store.put(transaction, chosen)

        return self._choose_existing_or_new(transaction)

    def categorize_all(
        self, transactions: Iterable[Transaction]
    ) -> List[CategorizedTransaction]:
        return [self.categorize(t) for t in transactions]

    def _keyword_category(self, transaction: Transaction) -> Optional[Category]:
        if not self.keyword_rules.rules:
            return None
        tokens = self.store.normalizer.normalize(transaction.description)
        name = self.keyword_rules.find_matching_category(tokens)
        if name is None:
            return None
        try:
            name = validate_category_name(name)
        except InvalidCategoryName as e:
            logger.warning(f"Ignoring keyword rule category {name!r}: {e}")
            return None
        return self.store.find_category(name) or Category(name)

    def _choose_existing_or_new(self, transaction: Transaction) -> CategorizedTransaction:
        existing = self.store.get_categories()
        if existing:
            chosen = self.prompt.choose_category(transaction, existing)
            if chosen is not None:
                return self.store.put(transaction, chosen)

        return self.store.put(transaction, Category(self._prompt_for_new_name(transaction)))

    def _prompt_for_new_name(self, transaction: Transaction) -> str:
        names = self.store.get_names()
        for _ in range(MAX_NAME_ATTEMPTS):
            name = self.prompt.new_category_name(transaction, names)
            try:
                return validate_category_name(name)
            except InvalidCategoryName as e:
                logger.info(f"Rejected category name {name!r}: {e}")
                self.prompt.reject_category_name(name, str(e))

        logger.warning(
            f"No valid category name given for '{transaction.description}' "
            f"after {MAX_NAME_ATTEMPTS} attempts, filing it under {UNKNOWN.name}"
        )
        return UNKNOWN.name


def clean_transactions(raw_transactions: Iterable[RawTransaction]) -> List[Transaction]:
    """Run each raw record through the cleaner registered for its institution."""
    return [get_cleaner(raw.institution_id).clean(raw) for raw in raw_transactions]


def import_transactions(
    raw_transactions: Iterable[RawTransaction], categorizer: Categorizer
) -> List[CategorizedTransaction]:
    """Clean, categorize and persist one statement's worth of records.

    Returns:
        The categorized transactions, in input order.
    """
    transactions = clean_transactions(raw_transactions)
    logger.info(f"Cleaned {len(transactions)} transactions")

    categorized = categorizer.categorize_all(transactions)

    result = categorizer.store.save()
    if not result:
        logger.error(f"Failed to save learned categories: {result.error}")
    return categorized
