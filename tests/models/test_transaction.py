from decimal import Decimal

import pytest

from models.category import Category
from models.transaction import CategorizedTransaction, TransactionType


class TestTransactionType:
    """Tests for TransactionType.from_code."""

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("DEBIT", TransactionType.DEBIT),
            ("credit", TransactionType.CREDIT),
            (" xfer ", TransactionType.XFER),
            ("SRVCHG", TransactionType.SRVCHG),
        ],
    )
    def test_known_codes(self, code, expected):
        """Test that known codes map case-insensitively."""
        assert TransactionType.from_code(code) == expected

    def test_unknown_code_is_other(self):
        """Test that an unknown code falls back to OTHER."""
        assert TransactionType.from_code("BOGUS") == TransactionType.OTHER

    def test_missing_code_is_other(self):
        """Test that a missing code falls back to OTHER."""
        assert TransactionType.from_code(None) == TransactionType.OTHER

    def test_enum_passes_through(self):
        """Test that an existing TransactionType is returned unchanged."""
        assert TransactionType.from_code(TransactionType.ATM) is TransactionType.ATM


class TestTransaction:
    """Tests for Transaction and CategorizedTransaction."""

    def test_with_changes_returns_copy(self, make_transaction):
        """Test that with_changes leaves the original untouched."""
        original = make_transaction("NETFLIX.COM")

        changed = original.with_changes(account_id="12345", balance=Decimal("90.00"))

        assert changed.account_id == "12345"
        assert changed.balance == Decimal("90.00")
        assert changed.description == "NETFLIX.COM"
        assert original.account_id is None

    def test_categorized_description(self, make_transaction):
        """Test that a categorized transaction exposes its description."""
        categorized = CategorizedTransaction(make_transaction("NETFLIX.COM"), Category("TV"))

        assert categorized.description == "NETFLIX.COM"
        assert categorized.category.name == "TV"
