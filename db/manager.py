"""Database manager for the SQLite connection and transaction scopes."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from config import Config, get_migrations_dir
from logger import get_logger

logger = get_logger(__name__)


class DatabaseManager:
    """Owns the single SQLite connection used for the lifetime of the process.

    The connection is opened lazily. Writes go through ``transaction()``, which
    commits when the block succeeds and rolls back on any exception. Scopes
    cannot be nested.

    Args:
        config: Application configuration object.
        connection: Optional pre-opened connection (e.g. an in-memory database
            in tests). If provided, config.db_path is not used to connect.
    """

    def __init__(self, config: Optional[Config], connection: Optional[sqlite3.Connection] = None):
        self.config = config
        self._conn = connection
        self._in_transaction = False

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            db_path = self.config.db_path
            db_path.parent.mkdir(parents=True, exist_ok=True)
            logger.info(f"Opening database {db_path}")
            self._conn = sqlite3.connect(db_path)
            self._conn.execute("PRAGMA foreign_keys = ON")
        return self._conn

    @contextmanager
    def connect(self):
        """Yield the live connection for read-only work.

        Yields:
            sqlite3.Connection: Database connection.
        """
        yield self.connection

    @contextmanager
    def transaction(self):
        """Scope a unit of work: commit on success, roll back on any failure.

        Yields:
            sqlite3.Connection: Database connection.

        Raises:
            RuntimeError: If a transaction is already open on this connection.
        """
        if self._in_transaction:
            raise RuntimeError("Nested transactions are not supported")

        conn = self.connection
        self._in_transaction = True
        try:
            yield conn
            conn.commit()
        except BaseException:
            logger.error("Rolling back transaction")
            conn.rollback()
            raise
        finally:
            self._in_transaction = False

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def get_db_path(self) -> Path:
        """Get the current database path.

        Returns:
            Path: Path to the database file.
        """
        return self.config.db_path

    def get_migrations_dir(self) -> Path:
        """Get the migrations directory path.

        Returns:
            Path: Path to the migrations directory.
        """
        return get_migrations_dir()

    def migrate(self) -> None:
        """Create the schema by running every .sql file in the migrations directory."""
        conn = self.connection
        for migration_file in sorted(self.get_migrations_dir().glob("*.sql")):
            logger.debug(f"Applying migration {migration_file.name}")
            conn.executescript(migration_file.read_text())
        conn.commit()
