"""
SQLite database integration and simple migration system.

This module provides functions for resolving the database path
(``get_database_path``), obtaining a connection (``get_connection``,
``get_cursor``) and applying migrations (``init_db``).  It is used by
``storage.sqlite.SqliteStorage`` when ``STORAGE_BACKEND=sqlite``.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping, Optional

from ..models import DEFAULT_CATEGORIES

logger = logging.getLogger(__name__)


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT NOT NULL UNIQUE COLLATE NOCASE,
            email TEXT NOT NULL UNIQUE COLLATE NOCASE,
            password_hash TEXT NOT NULL,
            full_name TEXT NOT NULL,
            role TEXT NOT NULL DEFAULT 'client',
            phone_number TEXT,
            profile_image TEXT,
            languages TEXT,
            bio TEXT,
            is_verified INTEGER NOT NULL DEFAULT 0,
            avg_rating REAL,
            location TEXT,
            created_at TIMESTAMP NOT NULL,
            last_active TIMESTAMP NOT NULL
        );

        CREATE TABLE IF NOT EXISTS service_categories (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            icon TEXT NOT NULL,
            description TEXT
        );

        -- No REFERENCES on category_id: deleting a category leaves its
        -- services pointing at the old id.
        CREATE TABLE IF NOT EXISTS services (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            assistant_id INTEGER NOT NULL,
            category_id INTEGER NOT NULL,
            price_per_hour REAL NOT NULL,
            description TEXT,
            FOREIGN KEY(assistant_id) REFERENCES users(id)
        );

        CREATE TABLE IF NOT EXISTS bookings (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            client_id INTEGER NOT NULL,
            assistant_id INTEGER NOT NULL,
            service_id INTEGER NOT NULL,
            start_time TIMESTAMP NOT NULL,
            end_time TIMESTAMP NOT NULL,
            location TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'pending',
            total_amount REAL NOT NULL,
            notes TEXT,
            created_at TIMESTAMP NOT NULL,
            FOREIGN KEY(client_id) REFERENCES users(id),
            FOREIGN KEY(assistant_id) REFERENCES users(id),
            FOREIGN KEY(service_id) REFERENCES services(id)
        );

        CREATE TABLE IF NOT EXISTS reviews (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            booking_id INTEGER NOT NULL,
            client_id INTEGER NOT NULL,
            assistant_id INTEGER NOT NULL,
            rating INTEGER NOT NULL,
            comment TEXT,
            created_at TIMESTAMP NOT NULL,
            FOREIGN KEY(booking_id) REFERENCES bookings(id),
            FOREIGN KEY(client_id) REFERENCES users(id),
            FOREIGN KEY(assistant_id) REFERENCES users(id)
        );

        CREATE TABLE IF NOT EXISTS messages (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            sender_id INTEGER NOT NULL,
            receiver_id INTEGER NOT NULL,
            content TEXT NOT NULL,
            created_at TIMESTAMP NOT NULL,
            is_read INTEGER NOT NULL DEFAULT 0,
            FOREIGN KEY(sender_id) REFERENCES users(id),
            FOREIGN KEY(receiver_id) REFERENCES users(id)
        );
        """,
    ),
    # Migration 2: indices for the per-owner lookups
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_services_assistant_id ON services(assistant_id);
        CREATE INDEX IF NOT EXISTS idx_services_category_id ON services(category_id);
        CREATE INDEX IF NOT EXISTS idx_bookings_client_id ON bookings(client_id);
        CREATE INDEX IF NOT EXISTS idx_bookings_assistant_id ON bookings(assistant_id);
        CREATE INDEX IF NOT EXISTS idx_reviews_assistant_id ON reviews(assistant_id);
        CREATE INDEX IF NOT EXISTS idx_messages_pair ON messages(sender_id, receiver_id);
        """,
    ),
    # Migration 3: Unicode case-insensitive uniqueness for usernames and
    # emails.  COLLATE NOCASE only folds ASCII letters.
    (
        3,
        """
        CREATE UNIQUE INDEX IF NOT EXISTS idx_users_username_lower ON users(unicode_lower(username));
        CREATE UNIQUE INDEX IF NOT EXISTS idx_users_email_lower ON users(unicode_lower(email));
        """,
    ),
]


def get_database_path(db_url: str) -> str:
    """Compute the path to the SQLite database file.

    If ``db_url`` is an absolute path, use it directly.  Otherwise
    resolve it relative to the package root.
    """
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # assistant_marketplace_api/
    return str((base_dir / db_url).resolve())


def _unicode_lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if value is not None else None


def get_connection(db_path: str) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be accessed by
    name.  Foreign key enforcement is left at SQLite's default (off):
    the store does not police references, the service layer does.

    Every connection registers ``unicode_lower``, which the user indexes
    and lookups depend on.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.create_function("unicode_lower", 1, _unicode_lower, deterministic=True)
    return conn


@contextmanager
def get_cursor(db_path: str) -> Iterator[sqlite3.Cursor]:
    """Context manager that yields a cursor, commits and closes the connection on exit."""
    conn = get_connection(db_path)
    try:
        yield conn.cursor()
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _seed_categories(cursor: sqlite3.Cursor, categories: Iterable[Mapping[str, Any]]) -> None:
    cursor.executemany(
        "INSERT OR IGNORE INTO service_categories (name, icon, description) VALUES (?, ?, ?)",
        [(c["name"], c["icon"], c.get("description")) for c in categories],
    )


def init_db(db_path: str, seed_categories: bool = True) -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, checks the
    current schema version, and applies any new migrations defined in
    ``MIGRATIONS``.  A brand new database is seeded with the default
    service categories exactly once.
    """
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    with get_cursor(db_path) as cursor:
        cursor.execute(
            "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
        )
        cursor.execute("SELECT MAX(version) as version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0
        fresh = current_version == 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                cursor.executescript(sql)
                cursor.execute(
                    "INSERT INTO migrations (version) VALUES (?)", (version,)
                )
                logger.info("Applied database migration %s", version)
                current_version = version

        if fresh and seed_categories:
            _seed_categories(cursor, DEFAULT_CATEGORIES)
