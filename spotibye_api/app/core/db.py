"""
SQLite database integration.

This module provides functions for obtaining a database connection
(``get_connection``), running a unit of work inside a single
transaction (``transaction``) and creating the schema on application
start (``init_db``).  SQLite is used as a lightweight embedded
database; to switch to another DBMS you would replace the connection
logic and adapt the SQL in the repository layer.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from .config import settings

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS tracks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL CHECK (length(trim(title)) > 0 AND length(title) <= 200),
    artist TEXT NOT NULL CHECK (length(trim(artist)) > 0 AND length(artist) <= 200),
    category TEXT NOT NULL CHECK (length(trim(category)) > 0),
    description TEXT CHECK (description IS NULL OR length(description) <= 1000),
    audio_url TEXT NOT NULL CHECK (length(trim(audio_url)) > 0),
    cover_image TEXT,
    duration INTEGER NOT NULL CHECK (duration >= 0),
    is_favorite INTEGER NOT NULL DEFAULT 0 CHECK (is_favorite IN (0, 1)),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    CHECK (created_at <= updated_at)
);

-- Lookup paths for the category and favorites filters
CREATE INDEX IF NOT EXISTS idx_tracks_category ON tracks(category);
CREATE INDEX IF NOT EXISTS idx_tracks_is_favorite ON tracks(is_favorite);
"""


def get_database_path() -> str:
    """Compute the path to the SQLite database file.

    If ``settings.database_url`` is an absolute path, use it directly.
    Otherwise resolve it relative to the project root.
    """
    db_url = settings.database_url
    if os.path.isabs(db_url):
        return db_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / db_url).resolve())


def _fold_case(value):
    return value.lower() if isinstance(value, str) else value


def get_connection() -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` objects so columns can be
    accessed by name and a ``py_lower`` SQL function applies Python's
    Unicode-aware ``str.lower``.  Timestamps are stored as ISO-8601 text and are
    returned as-is.
    """
    conn = sqlite3.connect(get_database_path())
    conn.row_factory = sqlite3.Row
    # SQLite's own lower() only folds ASCII letters
    conn.create_function("py_lower", 1, _fold_case, deterministic=True)
    return conn


@contextmanager
def transaction(write: bool = False) -> Iterator[sqlite3.Connection]:
    """Yield a connection inside one transaction and close it on exit.

    Write transactions start with ``BEGIN IMMEDIATE`` so that a
    read-modify-write sequence holds the database write lock from the
    first read; concurrent writers queue behind it.  The transaction is
    committed when the block exits normally and rolled back otherwise.
    """
    conn = get_connection()
    try:
        conn.execute("BEGIN IMMEDIATE" if write else "BEGIN")
        try:
            yield conn
        except BaseException:
            conn.rollback()
            raise
        conn.commit()
    finally:
        conn.close()


def init_db() -> None:
    """Create the ``tracks`` table and its indexes if they do not exist."""
    conn = get_connection()
    try:
        conn.executescript(SCHEMA)
        conn.commit()
    finally:
        conn.close()
    logger.info("Database ready at %s", get_database_path())
