"""Progress update engine.

Applies single completion events to a user's day record:
- section toggles, validated against the course definition table
- slide toggles, free-form UI markers that are never validated
- quiz scores, which also complete the quiz's section when the quiz id is
  one of the day's sections

None of these operations marks a day complete. Only quiz submission has a
side effect (the quiz_master badge).
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Any

import structlog

from coursetrack.config.app_config import load_app_config
from coursetrack.core.badges import QUIZ_MASTER, award_badge_once, quiz_master_badge_data
from coursetrack.core.course_definition import (
    get_section_ids,
    is_valid_day,
    is_valid_section,
    valid_day_ids,
)
from coursetrack.core.results import FailureReason
from coursetrack.db import progress_repository
from coursetrack.db.badges_repository import BadgeRecord
from coursetrack.db.progress_repository import DayProgress

logger = structlog.get_logger(__name__)


@dataclass
class ProgressResult:
    """Result of a progress update."""

    success: bool
    progress: DayProgress | None
    message: str
    reason: FailureReason | None = None
    details: dict[str, Any] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)


@dataclass
class ProgressListResult:
    """Result of a progress listing."""

    success: bool
    progress: list[DayProgress]
    message: str
    reason: FailureReason | None = None


@dataclass
class QuizResult(ProgressResult):
    """Result of a quiz submission."""

    counted_as_section: bool = False
    badge: BadgeRecord | None = None


def _invalid_day(day_id: int) -> ProgressResult:
    return ProgressResult(
        success=False,
        progress=None,
        message=f"Invalid day ID {day_id}",
        reason=FailureReason.INVALID_DAY,
        details={"day_id": day_id, "valid_days": valid_day_ids()},
    )


def _store_failure(event: str, error: sqlite3.Error, **context: Any) -> ProgressResult:
    logger.error(event, error=str(error), **context)
    return ProgressResult(
        success=False,
        progress=None,
        message=str(error),
        reason=FailureReason.STORE_FAILURE,
    )


# =============================================================================
# READS
# =============================================================================


def get_day_progress(user_id: str, day_id: int) -> ProgressResult:
    """Progress for one day. ``progress`` is None when nothing was recorded."""
    if not is_valid_day(day_id):
        return _invalid_day(day_id)

    try:
        progress = progress_repository.get_progress(user_id, day_id)
    except sqlite3.Error as e:
        return _store_failure("progress.read_failed", e, user_id=user_id, day_id=day_id)

    return ProgressResult(success=True, progress=progress, message="ok")


def get_all_progress(user_id: str) -> ProgressListResult:
    """All recorded progress of a user ordered by day."""
    try:
        rows = progress_repository.get_all_progress(user_id)
    except sqlite3.Error as e:
        logger.error("progress.list_failed", user_id=user_id, error=str(e))
        return ProgressListResult(
            success=False,
            progress=[],
            message=str(e),
            reason=FailureReason.STORE_FAILURE,
        )

    return ProgressListResult(success=True, progress=rows, message="ok")


# =============================================================================
# UPDATES
# =============================================================================


def update_section_progress(
    user_id: str, day_id: int, section_id: str, completed: bool
) -> ProgressResult:
    """Mark a section of a day as completed or not completed.

    Args:
        user_id: Identity-provider user id
        day_id: Course day number
        section_id: Must be one of the day's section ids
        completed: True adds the section, False removes it (both idempotent)

    Returns:
        ProgressResult with the updated DayProgress. On an unknown section the
        result names the offending id and lists the valid ones.
    """
    if not is_valid_day(day_id):
        return _invalid_day(day_id)

    if not is_valid_section(day_id, section_id):
        valid = get_section_ids(day_id)
        return ProgressResult(
            success=False,
            progress=None,
            message=f"Invalid section ID '{section_id}' for day {day_id}",
            reason=FailureReason.INVALID_SECTION,
            details={"section_id": section_id, "valid_sections": valid},
        )

    try:
        progress = progress_repository.update_section(
            user_id, day_id, section_id, completed
        )
    except sqlite3.Error as e:
        return _store_failure(
            "progress.section_update_failed",
            e,
            user_id=user_id,
            day_id=day_id,
            section_id=section_id,
        )

    logger.info(
        "progress.section_updated",
        user_id=user_id,
        day_id=day_id,
        section_id=section_id,
        completed=completed,
        completed_count=len(progress.completed_sections),
    )
    return ProgressResult(success=True, progress=progress, message="Progress updated")


def update_slide_progress(
    user_id: str,
    day_id: int,
    slide_id: str,
    completed: bool,
    current_slide: int | None = None,
) -> ProgressResult:
    """Track a slide marker.

    Slides are pagination state for the UI: any id is accepted for a valid
    day, and slides never count toward day completion.
    """
    if not is_valid_day(day_id):
        return _invalid_day(day_id)

    try:
        progress = progress_repository.update_slide(
            user_id, day_id, slide_id, completed, current_slide=current_slide
        )
    except sqlite3.Error as e:
        return _store_failure(
            "progress.slide_update_failed", e, user_id=user_id, day_id=day_id
        )

    logger.info(
        "progress.slide_updated",
        user_id=user_id,
        day_id=day_id,
        slide_id=slide_id,
        completed=completed,
    )
    return ProgressResult(success=True, progress=progress, message="Progress updated")


def submit_quiz_score(user_id: str, day_id: int, quiz_id: str, score: int) -> QuizResult:
    """Record a quiz score.

    The score replaces any earlier score for the same quiz. When ``quiz_id``
    is one of the day's sections it is also marked completed; otherwise the
    score is kept and a warning is returned. A score at or above the
    configured threshold awards quiz_master, once per user.
    """
    if not is_valid_day(day_id):
        invalid = _invalid_day(day_id)
        return QuizResult(
            success=False,
            progress=None,
            message=invalid.message,
            reason=invalid.reason,
            details=invalid.details,
        )

    counts_as_section = is_valid_section(day_id, quiz_id)
    warnings: list[str] = []
    if not counts_as_section:
        warnings.append(f"Quiz ID '{quiz_id}' is not a valid section for day {day_id}")
        logger.warning(
            "quiz.unlisted_quiz", user_id=user_id, day_id=day_id, quiz_id=quiz_id
        )

    try:
        progress = progress_repository.record_quiz_score(
            user_id, day_id, quiz_id, score, mark_section=counts_as_section
        )
    except sqlite3.Error as e:
        failure = _store_failure(
            "quiz.submit_failed", e, user_id=user_id, day_id=day_id, quiz_id=quiz_id
        )
        return QuizResult(
            success=False,
            progress=None,
            message=failure.message,
            reason=failure.reason,
            warnings=warnings,
        )

    logger.info(
        "quiz.score_recorded",
        user_id=user_id,
        day_id=day_id,
        quiz_id=quiz_id,
        score=score,
        counted_as_section=counts_as_section,
    )

    badge = None
    threshold = load_app_config().course.quiz_master_threshold
    if score >= threshold:
        badge = award_badge_once(user_id, QUIZ_MASTER, quiz_master_badge_data(threshold))

    return QuizResult(
        success=True,
        progress=progress,
        message="Quiz score recorded",
        warnings=warnings,
        counted_as_section=counts_as_section,
        badge=badge,
    )
