"""Repository functions for the user_badges table."""

from __future__ import annotations

import json
import sqlite3
import uuid
from dataclasses import dataclass, field
from typing import Any

import structlog

from coursetrack.db.database import get_db, utc_now

logger = structlog.get_logger(__name__)

# Stored badge_day for badges that aren't tied to a day
NO_DAY = 0


@dataclass
class BadgeRecord:
    """Badge record from database."""

    id: str
    user_id: str
    badge_type: str
    day_id: int | None
    badge_data: dict[str, Any] = field(default_factory=dict)
    earned_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "badge_type": self.badge_type,
            "day_id": self.day_id,
            "badge_data": dict(self.badge_data),
            "earned_at": self.earned_at,
        }


class DuplicateBadgeError(Exception):
    """Raised when the user already holds a badge with the same (type, day)."""

    def __init__(self, user_id: str, badge_type: str, day_id: int | None):
        self.user_id = user_id
        self.badge_type = badge_type
        self.day_id = day_id
        suffix = f" for day {day_id}" if day_id else ""
        super().__init__(f"Badge '{badge_type}'{suffix} already awarded to {user_id}")


def get_badges(user_id: str) -> list[BadgeRecord]:
    """Get all badges of a user, oldest first."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM user_badges WHERE user_id = ? ORDER BY earned_at, badge_day",
            (user_id,),
        ).fetchall()

    return [_row_to_record(row) for row in rows]


def get_badge(user_id: str, badge_type: str, day_id: int | None = None) -> BadgeRecord | None:
    """Get a badge by its (type, day) key."""
    with get_db() as conn:
        row = conn.execute(
            """
            SELECT * FROM user_badges
            WHERE user_id = ? AND badge_type = ? AND badge_day = ?
            """,
            (user_id, badge_type, day_id or NO_DAY),
        ).fetchone()

    if row is None:
        return None
    return _row_to_record(row)


def has_badge(user_id: str, badge_type: str, day_id: int | None = None) -> bool:
    """Check whether a user holds a badge.

    Args:
        day_id: When given, only a badge for that day counts. When None the
            check is by type alone.
    """
    query = "SELECT 1 FROM user_badges WHERE user_id = ? AND badge_type = ?"
    params: tuple[Any, ...] = (user_id, badge_type)
    if day_id is not None:
        query += " AND badge_day = ?"
        params = (*params, day_id)

    with get_db() as conn:
        row = conn.execute(query + " LIMIT 1", params).fetchone()

    return row is not None


def insert_badge(
    user_id: str,
    badge_type: str,
    badge_data: dict[str, Any],
    day_id: int | None = None,
) -> BadgeRecord:
    """Insert a new badge.

    Raises:
        DuplicateBadgeError: If the user already holds this (type, day) badge
    """
    record = BadgeRecord(
        id=uuid.uuid4().hex,
        user_id=user_id,
        badge_type=badge_type,
        day_id=day_id,
        badge_data=dict(badge_data),
        earned_at=utc_now(),
    )

    try:
        with get_db() as conn:
            conn.execute(
                """
                INSERT INTO user_badges (
                    id, user_id, badge_type, badge_day, badge_data, earned_at
                ) VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    user_id,
                    badge_type,
                    day_id or NO_DAY,
                    json.dumps(record.badge_data),
                    record.earned_at,
                ),
            )
    except sqlite3.IntegrityError as e:
        raise DuplicateBadgeError(user_id, badge_type, day_id) from e

    logger.debug("badges.inserted", user_id=user_id, badge_type=badge_type, day_id=day_id)
    return record


def _row_to_record(row: sqlite3.Row) -> BadgeRecord:
    """Convert database row to BadgeRecord."""
    return BadgeRecord(
        id=row["id"],
        user_id=row["user_id"],
        badge_type=row["badge_type"],
        day_id=row["badge_day"] or None,
        badge_data=json.loads(row["badge_data"] or "{}"),
        earned_at=row["earned_at"],
    )
