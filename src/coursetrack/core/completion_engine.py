"""Day completion engine.

A day may be marked complete only when every section the course definition
lists for it is in the user's completed sections. Completing a day awards
the per-day badge as a best-effort side effect: the completion stands even
if the badge can't be written.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Any

import structlog

from coursetrack.core.badges import DAY_COMPLETE, award_badge_once, day_complete_badge_data
from coursetrack.core.course_definition import (
    get_section_ids,
    is_valid_day,
    missing_sections,
    valid_day_ids,
)
from coursetrack.core.results import FailureReason
from coursetrack.db import progress_repository
from coursetrack.db.badges_repository import BadgeRecord
from coursetrack.db.progress_repository import DayProgress

logger = structlog.get_logger(__name__)


@dataclass
class CompletionResult:
    """Result of a day completion attempt."""

    success: bool
    progress: DayProgress | None
    message: str
    reason: FailureReason | None = None
    missing_sections: list[str] = field(default_factory=list)
    completed_count: int = 0
    total_count: int = 0
    badge: BadgeRecord | None = None

    @property
    def details(self) -> dict[str, Any]:
        """Structured diff for callers rendering the failure."""
        if self.reason is FailureReason.INCOMPLETE_SECTIONS:
            return {
                "missing_sections": self.missing_sections,
                "completed_sections": self.completed_count,
                "total_sections": self.total_count,
            }
        if self.reason is FailureReason.INVALID_DAY:
            return {"valid_days": valid_day_ids()}
        return {}


def complete_day(user_id: str, day_id: int) -> CompletionResult:
    """Try to mark a day complete.

    Returns:
        CompletionResult. On INCOMPLETE_SECTIONS it lists the missing section
        ids in course order with completed/total counts.
    """
    if not is_valid_day(day_id):
        return CompletionResult(
            success=False,
            progress=None,
            message=f"Invalid day ID {day_id}",
            reason=FailureReason.INVALID_DAY,
        )

    try:
        # Gate and flag are checked and written in one transaction
        progress = progress_repository.mark_completed(user_id, day_id)
    except sqlite3.Error as e:
        logger.error("completion.write_failed", user_id=user_id, day_id=day_id, error=str(e))
        return CompletionResult(
            success=False,
            progress=None,
            message=str(e),
            reason=FailureReason.STORE_FAILURE,
        )

    if progress is None:
        return CompletionResult(
            success=False,
            progress=None,
            message="No progress found for this day. Please complete some sections first.",
            reason=FailureReason.NO_PROGRESS_RECORD,
        )

    required = get_section_ids(day_id)
    missing = missing_sections(day_id, progress.completed_sections)
    if missing:
        completed_count = len(required) - len(missing)
        logger.info(
            "completion.incomplete",
            user_id=user_id,
            day_id=day_id,
            missing=missing,
        )
        return CompletionResult(
            success=False,
            progress=progress,
            message=f"Day cannot be completed. Missing sections: {', '.join(missing)}",
            reason=FailureReason.INCOMPLETE_SECTIONS,
            missing_sections=missing,
            completed_count=completed_count,
            total_count=len(required),
        )

    logger.info("completion.day_completed", user_id=user_id, day_id=day_id)

    badge = award_badge_once(
        user_id, DAY_COMPLETE, day_complete_badge_data(day_id), day_id=day_id
    )

    return CompletionResult(
        success=True,
        progress=progress,
        message=f"Day {day_id} completed",
        completed_count=len(required),
        total_count=len(required),
        badge=badge,
    )
