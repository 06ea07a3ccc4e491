"""Helper utilities for tests."""

from pathlib import Path
import sqlite3

from categorization import CategoryPrompt


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    for migration_file in sorted(migrations_dir.glob("*.sql")):
        conn.executescript(migration_file.read_text())

    conn.commit()


class RecordingPrompt(CategoryPrompt):
    """CategoryPrompt stand-in that replays scripted answers and records calls.

    Args:
        choices: Answers for choose_category, in order. A string picks the
            candidate with that name, None rejects all candidates.
        names: Answers for new_category_name, in order.
    """

    def __init__(self, choices=(), names=()):
        self.choices = list(choices)
        self.names = list(names)
        self.offered = []
        self.asked_for_name = 0
        self.rejections = []

    def choose_category(self, transaction, candidates):
        self.offered.append([c.name for c in candidates])
        if not self.choices:
            return None
        wanted = self.choices.pop(0)
        if wanted is None:
            return None
        return next(c for c in candidates if c.name == wanted)

    def new_category_name(self, transaction, existing_names):
        self.asked_for_name += 1
        return self.names.pop(0) if self.names else ""

    def reject_category_name(self, name, reason):
        self.rejections.append((name, reason))
