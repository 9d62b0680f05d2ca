"""SQLite connection + schema initialisation."""
from __future__ import annotations
import logging
import os
import sqlite3

from superfeynman.core.config import DATABASE_PATH

logger = logging.getLogger(__name__)

_MIGRATIONS_DIR = os.path.join(os.path.dirname(__file__), "..", "..", "migrations")


def get_connection() -> sqlite3.Connection:
    conn = sqlite3.connect(DATABASE_PATH, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    # Cascading deletes (course -> lecture -> concept -> session) depend on this
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def init_db() -> None:
    """Run all migration SQL files against the database, in name order."""
    directory = os.path.dirname(DATABASE_PATH)
    if directory:
        os.makedirs(directory, exist_ok=True)
    conn = get_connection()
    try:
        for name in sorted(os.listdir(_MIGRATIONS_DIR)):
            if not name.endswith(".sql"):
                continue
            with open(os.path.join(_MIGRATIONS_DIR, name), "r", encoding="utf-8") as f:
                conn.executescript(f.read())
        conn.commit()
    finally:
        conn.close()
    logger.info("Database initialised at %s", DATABASE_PATH)


def ping() -> bool:
    """True when the database answers a trivial query."""
    try:
        conn = get_connection()
        try:
            conn.execute("SELECT 1").fetchone()
        finally:
            conn.close()
        return True
    except sqlite3.Error as e:
        logger.error("Database health check failed: %s", e)
        return False
