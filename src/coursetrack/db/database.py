"""SQLite database connection and schema management.

Provides connection management and schema initialization for the progress
store. Uniqueness constraints on progress, badges and certificates are what
keep concurrent requests from creating duplicate rows.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import structlog

from coursetrack.config.app_config import load_app_config

logger = structlog.get_logger(__name__)

# Current database location (module-level, set by init_db)
_db_path: Path | None = None


def _resolve_db_path() -> Path:
    if _db_path is not None:
        return _db_path
    return Path(load_app_config().storage.db_path)


def init_db(db_path: Path | None = None) -> Path:
    """Initialize database with schema.

    Creates the database file and all required tables if they don't exist.

    Args:
        db_path: Path to database file. Defaults to the path of a previous
            init_db call, then to the configured storage path.

    Returns:
        The path of the initialized database.
    """
    global _db_path
    _db_path = db_path or _resolve_db_path()

    _db_path.parent.mkdir(parents=True, exist_ok=True)

    with get_db() as conn:
        _create_schema(conn)

    logger.info("database.initialized", path=str(_db_path))
    return _db_path


def reset_db_path() -> None:
    """Forget the path set by init_db (tests switch databases often)."""
    global _db_path
    _db_path = None


@contextmanager
def get_db(immediate: bool = False) -> Generator[sqlite3.Connection, None, None]:
    """Get database connection as context manager.

    Args:
        immediate: Take the write lock up front (BEGIN IMMEDIATE) so a
            read-modify-write inside the block can't interleave with
            another writer.

    Yields:
        SQLite connection with row factory set to sqlite3.Row

    Example:
        with get_db(immediate=True) as conn:
            row = conn.execute("SELECT ...").fetchone()
            conn.execute("UPDATE ...")
    """
    db_path = _resolve_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, timeout=10.0)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")

    try:
        if immediate:
            conn.execute("BEGIN IMMEDIATE")
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string (the store's timestamp format)."""
    return datetime.now(timezone.utc).isoformat()


def _create_schema(conn: sqlite3.Connection) -> None:
    """Create database schema.

    Uses IF NOT EXISTS for idempotency.
    """
    conn.executescript(
        """
        -- users: one row per identity-provider user id
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            email TEXT,
            first_name TEXT,
            last_name TEXT,
            full_name TEXT,
            phone TEXT,
            profession TEXT,
            course_type TEXT,
            stream TEXT,
            field_of_work TEXT,
            designation TEXT,
            organization TEXT,
            date_of_birth TEXT,
            profile_locked INTEGER NOT NULL DEFAULT 0,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );

        -- user_progress: one row per (user, day)
        CREATE TABLE IF NOT EXISTS user_progress (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            day_id INTEGER NOT NULL CHECK(day_id BETWEEN 1 AND 5),
            completed_sections TEXT NOT NULL DEFAULT '[]',
            completed_slides TEXT NOT NULL DEFAULT '[]',
            quiz_scores TEXT NOT NULL DEFAULT '{}',
            current_slide INTEGER NOT NULL DEFAULT 0,
            is_completed INTEGER NOT NULL DEFAULT 0,
            completed_at TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            UNIQUE(user_id, day_id)
        );

        -- user_badges: badge_day = 0 for badges not tied to a day
        CREATE TABLE IF NOT EXISTS user_badges (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            badge_type TEXT NOT NULL,
            badge_day INTEGER NOT NULL DEFAULT 0,
            badge_data TEXT NOT NULL DEFAULT '{}',
            earned_at TEXT NOT NULL,
            UNIQUE(user_id, badge_type, badge_day)
        );

        -- user_certificates: a single certificate per (user, course)
        CREATE TABLE IF NOT EXISTS user_certificates (
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            course_id TEXT NOT NULL,
            certificate_data TEXT NOT NULL,
            issued_at TEXT NOT NULL,
            UNIQUE(user_id, course_id)
        );

        CREATE INDEX IF NOT EXISTS idx_progress_user ON user_progress(user_id);
        CREATE INDEX IF NOT EXISTS idx_badges_user ON user_badges(user_id);
        CREATE INDEX IF NOT EXISTS idx_certificates_user ON user_certificates(user_id);
        """
    )
