"""Base class for institution-specific transaction cleaners."""

import re
from typing import List, Sequence, Tuple

from cleaners.rules import TransactionMatchRule, normalize_field
from logger import get_logger
from models.transaction import RawTransaction, Transaction, TransactionType

logger = get_logger(__name__)


class TransactionCleaner:
    """Turns raw statement records from one institution into canonical transactions.

    Subclasses declare their behaviour through class attributes, all of which
    are evaluated in declaration order:

    - ``rules``: TransactionMatchRules; the first matching rule builds the
      transaction on its own.
    - ``discard_patterns``: if a normalized name/memo field matches one of these
      it contributes nothing to the description.
    - ``replace_rules``: ``(pattern, literal)`` pairs; the first pattern that
      matches a field replaces the whole field with the literal.
    """

    bank_id: str = "default"
    institution_name: str = "default"

    rules: Sequence[TransactionMatchRule] = ()
    discard_patterns: Sequence["re.Pattern"] = ()
    replace_rules: Sequence[Tuple["re.Pattern", str]] = ()

    def clean(self, raw: RawTransaction) -> Transaction:
        """Convert a raw record into a canonical Transaction."""
        for rule in self.rules:
            if rule.matches(raw):
                transaction = rule.apply(raw)
                break
        else:
            transaction = Transaction(
                type=self.categorize_transaction_type(raw),
                date=raw.date,
                amount=raw.amount,
                description=self.build_description(raw),
            )

        return transaction.with_changes(
            account_id=raw.account_id,
            balance=raw.balance,
            fit_id=raw.fit_id,
        )

    def categorize_transaction_type(self, raw: RawTransaction) -> TransactionType:
        return TransactionType.from_code(raw.type)

    def build_description(self, raw: RawTransaction) -> str:
        parts: List[str] = [
            self.clean_field(raw.name),
            self.clean_field(raw.memo),
        ]
        return " ".join(part for part in parts if part)

    def clean_field(self, value) -> str:
        """Normalize a single name/memo field and run the discard/replace pipeline."""
        normalized = normalize_field(value)
        if not normalized:
            return ""

        for pattern in self.discard_patterns:
            if pattern.fullmatch(normalized):
                logger.debug(f"Discarded field '{normalized}' ({pattern.pattern})")
                return ""

        for pattern, replacement in self.replace_rules:
            if pattern.fullmatch(normalized):
                logger.debug(f"Replaced field '{normalized}' with '{replacement}'")
                return replacement

        return normalized
