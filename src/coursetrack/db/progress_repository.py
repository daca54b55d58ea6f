"""Repository functions for the user_progress table.

One row per (user, day). Set-like columns (completed sections and slides)
are stored as JSON arrays, quiz scores as a JSON object.

The completion flag is only ever stored while every section the course
definition lists for the day is completed. Removing a required section
clears the flag and its timestamp.

Every mutation reads and writes the row inside a single BEGIN IMMEDIATE
transaction, so two concurrent toggles on the same (user, day) serialize
instead of losing an update.
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from dataclasses import dataclass, field
from typing import Any

import structlog

from coursetrack.core.course_definition import missing_sections
from coursetrack.db.database import get_db, utc_now

logger = structlog.get_logger(__name__)


@dataclass
class DayProgress:
    """Progress record for one user on one day."""

    id: str
    user_id: str
    day_id: int
    completed_sections: list[str] = field(default_factory=list)
    completed_slides: list[str] = field(default_factory=list)
    quiz_scores: dict[str, int] = field(default_factory=dict)
    current_slide: int = 0
    is_completed: bool = False
    completed_at: str | None = None
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "day_id": self.day_id,
            "completed_sections": list(self.completed_sections),
            "completed_slides": list(self.completed_slides),
            "quiz_scores": dict(self.quiz_scores),
            "current_slide": self.current_slide,
            "is_completed": self.is_completed,
            "completed_at": self.completed_at,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


# =============================================================================
# READS
# =============================================================================


def get_progress(user_id: str, day_id: int) -> DayProgress | None:
    """Get progress for (user, day).

    Returns:
        DayProgress if found, None otherwise
    """
    with get_db() as conn:
        return _select(conn, user_id, day_id)


def get_all_progress(user_id: str) -> list[DayProgress]:
    """Get every progress row of a user ordered by day."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM user_progress WHERE user_id = ? ORDER BY day_id",
            (user_id,),
        ).fetchall()

    return [_row_to_record(row) for row in rows]


# =============================================================================
# WRITES
# =============================================================================


def create_progress(user_id: str, day_id: int) -> DayProgress:
    """Create an empty progress row, or return the existing one."""
    with get_db(immediate=True) as conn:
        return _select_or_create(conn, user_id, day_id)


def update_section(
    user_id: str, day_id: int, section_id: str, completed: bool
) -> DayProgress:
    """Add or remove a section id from the completed-sections set.

    Creates the row first if the user has no progress for the day yet.
    Both directions are idempotent.
    """
    with get_db(immediate=True) as conn:
        progress = _select_or_create(conn, user_id, day_id)
        progress.completed_sections = _toggle(
            progress.completed_sections, section_id, completed
        )
        _write(conn, progress)

    logger.debug(
        "progress.section_written",
        user_id=user_id,
        day_id=day_id,
        section_id=section_id,
        completed=completed,
    )
    return progress


def update_slide(
    user_id: str,
    day_id: int,
    slide_id: str,
    completed: bool,
    current_slide: int | None = None,
) -> DayProgress:
    """Add or remove a slide marker, optionally moving the current slide."""
    with get_db(immediate=True) as conn:
        progress = _select_or_create(conn, user_id, day_id)
        progress.completed_slides = _toggle(
            progress.completed_slides, slide_id, completed
        )
        if current_slide is not None:
            progress.current_slide = current_slide
        _write(conn, progress)

    logger.debug(
        "progress.slide_written", user_id=user_id, day_id=day_id, slide_id=slide_id
    )
    return progress


def record_quiz_score(
    user_id: str,
    day_id: int,
    quiz_id: str,
    score: int,
    mark_section: bool,
) -> DayProgress:
    """Store a quiz score, overwriting any previous score for that quiz.

    Args:
        mark_section: Also add ``quiz_id`` to the completed sections.
    """
    with get_db(immediate=True) as conn:
        progress = _select_or_create(conn, user_id, day_id)
        progress.quiz_scores[quiz_id] = score
        if mark_section:
            progress.completed_sections = _toggle(
                progress.completed_sections, quiz_id, True
            )
        _write(conn, progress)

    logger.debug(
        "progress.quiz_score_written", user_id=user_id, day_id=day_id, quiz_id=quiz_id
    )
    return progress


def mark_completed(user_id: str, day_id: int) -> DayProgress | None:
    """Set the completion flag if every required section is completed.

    The check and the write share one BEGIN IMMEDIATE transaction, so a
    concurrent section removal can't slip in between. The first completion
    timestamp is kept when a completed day is completed again.

    Returns:
        The stored DayProgress (``is_completed`` stays False when sections are
        missing), or None if the row doesn't exist
    """
    now = utc_now()
    with get_db(immediate=True) as conn:
        progress = _select(conn, user_id, day_id)
        if progress is None:
            return None

        if missing_sections(day_id, progress.completed_sections):
            if progress.is_completed:
                # Rows flagged before sections were enforced
                _write(conn, progress)
            return progress

        conn.execute(
            """
            UPDATE user_progress SET
                is_completed = 1,
                completed_at = COALESCE(completed_at, ?),
                updated_at = ?
            WHERE id = ?
            """,
            (now, now, progress.id),
        )
        progress = _select(conn, user_id, day_id)

    logger.debug("progress.marked_completed", user_id=user_id, day_id=day_id)
    return progress


# =============================================================================
# HELPERS
# =============================================================================


def _toggle(items: list[str], item: str, present: bool) -> list[str]:
    """Return ``items`` with ``item`` added or removed, keeping order, no dupes."""
    if present:
        return items if item in items else [*items, item]
    return [i for i in items if i != item]


def _select(conn: sqlite3.Connection, user_id: str, day_id: int) -> DayProgress | None:
    row = conn.execute(
        "SELECT * FROM user_progress WHERE user_id = ? AND day_id = ?",
        (user_id, day_id),
    ).fetchone()
    if row is None:
        return None
    return _row_to_record(row)


def _select_or_create(
    conn: sqlite3.Connection, user_id: str, day_id: int
) -> DayProgress:
    existing = _select(conn, user_id, day_id)
    if existing is not None:
        return existing

    now = utc_now()
    conn.execute(
        """
        INSERT OR IGNORE INTO user_progress (
            id, user_id, day_id, created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?)
        """,
        (uuid.uuid4().hex, user_id, day_id, now, now),
    )
    logger.info("progress.created", user_id=user_id, day_id=day_id)

    created = _select(conn, user_id, day_id)
    assert created is not None
    return created


def _write(conn: sqlite3.Connection, progress: DayProgress) -> None:
    progress.updated_at = utc_now()
    if progress.is_completed and missing_sections(
        progress.day_id, progress.completed_sections
    ):
        progress.is_completed = False
        progress.completed_at = None
        logger.info(
            "progress.completion_revoked",
            user_id=progress.user_id,
            day_id=progress.day_id,
        )
    conn.execute(
        """
        UPDATE user_progress SET
            completed_sections = ?,
            completed_slides = ?,
            quiz_scores = ?,
            current_slide = ?,
            is_completed = ?,
            completed_at = ?,
            updated_at = ?
        WHERE id = ?
        """,
        (
            json.dumps(progress.completed_sections),
            json.dumps(progress.completed_slides),
            json.dumps(progress.quiz_scores),
            progress.current_slide,
            int(progress.is_completed),
            progress.completed_at,
            progress.updated_at,
            progress.id,
        ),
    )


def _row_to_record(row: sqlite3.Row) -> DayProgress:
    """Convert database row to DayProgress."""
    return DayProgress(
        id=row["id"],
        user_id=row["user_id"],
        day_id=row["day_id"],
        completed_sections=json.loads(row["completed_sections"] or "[]"),
        completed_slides=json.loads(row["completed_slides"] or "[]"),
        quiz_scores=json.loads(row["quiz_scores"] or "{}"),
        current_slide=row["current_slide"],
        is_completed=bool(row["is_completed"]),
        completed_at=row["completed_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
