from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from models.category import Category


class TransactionType(Enum):
    """Kinds of transaction reported by financial institutions."""

    CREDIT = "CREDIT"
    DEBIT = "DEBIT"
    INT = "INT"  # interest
    DIV = "DIV"  # dividend
    FEE = "FEE"
    SRVCHG = "SRVCHG"  # service charge
    DEP = "DEP"  # deposit
    ATM = "ATM"
    POS = "POS"  # point of sale
    XFER = "XFER"  # transfer
    CHECK = "CHECK"
    PAYMENT = "PAYMENT"
    CASH = "CASH"
    DIRECTDEP = "DIRECTDEP"
    DIRECTDEBIT = "DIRECTDEBIT"
    REPEATPMT = "REPEATPMT"
    OTHER = "OTHER"

    @classmethod
    def from_code(cls, code: Optional[str]) -> "TransactionType":
        """Map a raw type code to a TransactionType, falling back to OTHER."""
        if code is None:
            return cls.OTHER
        if isinstance(code, TransactionType):
            return code
        try:
            return cls[str(code).strip().upper()]
        except KeyError:
            return cls.OTHER


@dataclass(frozen=True)
class RawTransaction:
    """A statement record as produced by the statement parser."""

    type: Optional[str]
    date: date
    amount: Decimal  # signed, negative = outflow
    name: Optional[str]
    memo: Optional[str]
    institution_id: Optional[str] = None
    account_id: Optional[str] = None
    fit_id: Optional[str] = None
    balance: Optional[Decimal] = None


@dataclass(frozen=True)
class Transaction:
    type: TransactionType
    date: date
    amount: Decimal  # signed, negative = outflow
    description: str
    account_id: Optional[str] = None
    balance: Optional[Decimal] = None
    fit_id: Optional[str] = None  # institution's unique id, used for idempotent re-import

    def with_changes(self, **overrides) -> "Transaction":
        """Return a copy of this transaction with the given fields replaced."""
        return replace(self, **overrides)


@dataclass(frozen=True)
class CategorizedTransaction:
    """A transaction bound to the category it was filed under."""

    transaction: Transaction
    category: Category

    @property
    def description(self) -> str:
        return self.transaction.description
