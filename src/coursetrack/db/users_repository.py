"""Repository functions for the users table.

Rows are keyed by the identity provider's user id. They are created the
first time an authenticated user reaches the API and never deleted here.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any

import structlog

from coursetrack.db.database import get_db, utc_now

logger = structlog.get_logger(__name__)

# Columns a profile update may touch
PROFILE_FIELDS = (
    "email",
    "first_name",
    "last_name",
    "full_name",
    "phone",
    "profession",
    "course_type",
    "stream",
    "field_of_work",
    "designation",
    "organization",
    "date_of_birth",
    "profile_locked",
)


@dataclass
class UserRecord:
    """User record from database."""

    id: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    full_name: str | None = None
    phone: str | None = None
    profession: str | None = None
    course_type: str | None = None
    stream: str | None = None
    field_of_work: str | None = None
    designation: str | None = None
    organization: str | None = None
    date_of_birth: str | None = None
    profile_locked: bool = False
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "full_name": self.full_name,
            "phone": self.phone,
            "profession": self.profession,
            "course_type": self.course_type,
            "stream": self.stream,
            "field_of_work": self.field_of_work,
            "designation": self.designation,
            "organization": self.organization,
            "date_of_birth": self.date_of_birth,
            "profile_locked": self.profile_locked,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


def get_user(user_id: str) -> UserRecord | None:
    """Get user by ID.

    Returns:
        UserRecord if found, None otherwise
    """
    with get_db() as conn:
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()

    if row is None:
        return None
    return _row_to_record(row)


def ensure_user(
    user_id: str,
    email: str | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
    full_name: str | None = None,
) -> UserRecord:
    """Create the user row if missing and return it.

    Existing rows are left untouched.
    """
    now = utc_now()
    with get_db() as conn:
        cursor = conn.execute(
            """
            INSERT OR IGNORE INTO users (
                id, email, first_name, last_name, full_name, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (user_id, email, first_name, last_name, full_name, now, now),
        )
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()

    if cursor.rowcount > 0:
        logger.info("users.created", user_id=user_id)

    return _row_to_record(row)


def update_user_profile(user_id: str, updates: dict[str, Any]) -> UserRecord:
    """Update profile columns of an existing user.

    Args:
        updates: Column -> value. Keys outside PROFILE_FIELDS are rejected.

    Raises:
        ValueError: If a key isn't a profile column or the user doesn't exist
    """
    unknown = set(updates) - set(PROFILE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}")

    assignments = ", ".join(f"{column} = ?" for column in updates)
    values = [
        int(v) if column == "profile_locked" else v for column, v in updates.items()
    ]

    with get_db() as conn:
        cursor = conn.execute(
            f"UPDATE users SET {assignments}, updated_at = ? WHERE id = ?",
            (*values, utc_now(), user_id),
        )
        if cursor.rowcount == 0:
            raise ValueError(f"User not found: {user_id}")
        row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()

    logger.debug("users.profile_updated", user_id=user_id, fields=sorted(updates))
    return _row_to_record(row)


def _row_to_record(row: sqlite3.Row) -> UserRecord:
    """Convert database row to UserRecord."""
    return UserRecord(
        id=row["id"],
        email=row["email"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        full_name=row["full_name"],
        phone=row["phone"],
        profession=row["profession"],
        course_type=row["course_type"],
        stream=row["stream"],
        field_of_work=row["field_of_work"],
        designation=row["designation"],
        organization=row["organization"],
        date_of_birth=row["date_of_birth"],
        profile_locked=bool(row["profile_locked"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
