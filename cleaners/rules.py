"""Composable predicates used by transaction cleaners to recognise records."""

import re
from decimal import Decimal
from typing import Callable, Optional, Union

from models.transaction import RawTransaction, Transaction, TransactionType

Number = Union[int, float, str, Decimal]


def normalize_field(value: Optional[str]) -> str:
    """Trim and upper-case a raw name/memo field, treating None as empty."""
    if value is None:
        return ""
    return value.strip().upper()


class AmountRule:
    """Compares a record's amount against a literal.

    Build instances with one of the named constructors; exactly one comparison
    is active per rule.
    """

    def __init__(
        self,
        equal_to: Optional[Number] = None,
        greater_than: Optional[Number] = None,
        less_than: Optional[Number] = None,
    ):
        self._equal_to = Decimal(str(equal_to)) if equal_to is not None else None
        self._greater_than = (
            Decimal(str(greater_than)) if greater_than is not None else None
        )
        self._less_than = Decimal(str(less_than)) if less_than is not None else None

    @classmethod
    def equal_to(cls, amount: Number) -> "AmountRule":
        return cls(equal_to=amount)

    @classmethod
    def greater_than(cls, amount: Number) -> "AmountRule":
        return cls(greater_than=amount)

    @classmethod
    def less_than(cls, amount: Number) -> "AmountRule":
        return cls(less_than=amount)

    def match(self, raw: RawTransaction) -> bool:
        amount = Decimal(str(raw.amount))
        if self._equal_to is not None:
            return amount == self._equal_to
        if self._greater_than is not None:
            return amount > self._greater_than
        if self._less_than is not None:
            return amount < self._less_than
        return False


class TransactionMatchRule:
    """AND-combination of optional matchers plus the transform to run on a match.

    Name and memo patterns must match the whole normalized field.

    Args:
        transform: Builds the cleaned transaction from the raw record.
        type: Raw transaction type the record must have.
        amount: AmountRule the record's amount must satisfy.
        name: Pattern the normalized name field must match.
        memo: Pattern the normalized memo field must match.
        match_all: Allow a rule without any matcher, which matches every record.

    Raises:
        ValueError: If no matcher is configured and match_all is False.
    """

    def __init__(
        self,
        transform: Callable[[RawTransaction], Transaction],
        type: Optional[TransactionType] = None,
        amount: Optional[AmountRule] = None,
        name: Optional[Union[str, "re.Pattern"]] = None,
        memo: Optional[Union[str, "re.Pattern"]] = None,
        match_all: bool = False,
    ):
        if not match_all and type is None and amount is None and name is None and memo is None:
            raise ValueError(
                "TransactionMatchRule needs at least one matcher (or match_all=True)"
            )
        self.transform = transform
        self.type = type
        self.amount = amount
        self.name = re.compile(name, re.IGNORECASE) if isinstance(name, str) else name
        self.memo = re.compile(memo, re.IGNORECASE) if isinstance(memo, str) else memo

    def matches(self, raw: RawTransaction) -> bool:
        if self.type is not None and TransactionType.from_code(raw.type) != self.type:
            return False
        if self.amount is not None and not self.amount.match(raw):
            return False
        if self.name is not None and not self.name.fullmatch(normalize_field(raw.name)):
            return False
        if self.memo is not None and not self.memo.fullmatch(normalize_field(raw.memo)):
            return False
        return True

    def apply(self, raw: RawTransaction) -> Transaction:
        return self.transform(raw)
