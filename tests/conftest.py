"""Shared pytest fixtures for all tests."""

import sqlite3
from datetime import date
from decimal import Decimal

import pytest

from config import Config, get_migrations_dir
from db.manager import DatabaseManager
from models.transaction import RawTransaction, Transaction, TransactionType
from services.base import Services
from tests.helpers import run_migrations


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing.

    Yields:
        sqlite3.Connection: Connection to in-memory database.
    """
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary directory.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "autocat",
        db_data_dir=tmp_path / "autocat" / "db",
        db_filename="test.db",
        store_backend="sqlite",
        json_store_filename="store.json",
        log_level="DEBUG",
        log_dir=tmp_path / "autocat" / "logs",
        keyword_rules_path=None,
    )


@pytest.fixture
def db_manager_with_schema(test_db):
    """Create a DatabaseManager with schema already set up.

    The manager wraps the in-memory connection, so nothing touches disk.

    Args:
        test_db: In-memory database connection fixture.

    Returns:
        DatabaseManager: Database manager with schema ready.
    """
    run_migrations(test_db, get_migrations_dir())
    return DatabaseManager(None, connection=test_db)


@pytest.fixture
def services(test_config, db_manager_with_schema):
    """Create a Services container with test database.

    Args:
        test_config: Test configuration fixture.
        db_manager_with_schema: Database manager with schema set up.

    Returns:
        Services: Services container for testing.
    """
    return Services(test_config, db_manager=db_manager_with_schema)


@pytest.fixture
def make_transaction():
    """Factory for cleaned transactions with sensible defaults."""

    def _make(description, type=TransactionType.DEBIT, amount="-10.00", **kwargs):
        return Transaction(
            type=type,
            date=kwargs.pop("date", date(2024, 1, 15)),
            amount=Decimal(amount),
            description=description,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_raw():
    """Factory for raw statement records with sensible defaults."""

    def _make(name=None, memo=None, type="DEBIT", amount="-10.00", **kwargs):
        return RawTransaction(
            type=type,
            date=kwargs.pop("date", date(2024, 1, 15)),
            amount=Decimal(amount),
            name=name,
            memo=memo,
            **kwargs,
        )

    return _make
