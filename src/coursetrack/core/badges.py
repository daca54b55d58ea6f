"""Badge catalogue and awarding.

Two badges are awarded automatically:
- day_complete: one per (user, day), when a day is marked complete
- quiz_master: one per user, on the first quiz score at or above threshold

Automatic awards are best-effort. A store failure while awarding is logged
and swallowed so the operation that triggered it still succeeds.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Any

import structlog

from coursetrack.core.course_definition import is_valid_day, valid_day_ids
from coursetrack.core.results import FailureReason
from coursetrack.db.badges_repository import (
    BadgeRecord,
    DuplicateBadgeError,
    get_badge,
    get_badges,
    has_badge,
    insert_badge,
)

logger = structlog.get_logger(__name__)

DAY_COMPLETE = "day_complete"
QUIZ_MASTER = "quiz_master"

# Badge types whose key includes the day number
PER_DAY_BADGES = frozenset({DAY_COMPLETE})


def day_complete_badge_data(day_id: int) -> dict[str, Any]:
    """Display metadata for the day_complete badge."""
    return {
        "dayId": day_id,
        "title": f"Day {day_id} Complete",
        "description": f"Completed all activities for Day {day_id}",
        "iconName": "check-circle",
        "color": "green",
    }


def quiz_master_badge_data(threshold: int = 70) -> dict[str, Any]:
    """Display metadata for the quiz_master badge."""
    return {
        "title": "Quiz Master",
        "description": f"Scored {threshold}% or higher on a quiz",
        "iconName": "brain",
        "color": "blue",
    }


@dataclass
class BadgeResult:
    """Result of an explicit badge creation."""

    success: bool
    badge: BadgeRecord | None
    message: str
    created: bool = False
    reason: FailureReason | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class BadgeListResult:
    """Result of a badge listing."""

    success: bool
    badges: list[BadgeRecord]
    message: str
    reason: FailureReason | None = None


def award_badge_once(
    user_id: str,
    badge_type: str,
    badge_data: dict[str, Any],
    day_id: int | None = None,
) -> BadgeRecord | None:
    """Award a badge unless the user already holds it.

    Per-day badges are looked up by (type, day); all others by type alone.

    Returns:
        The new BadgeRecord, or None if already held or the award failed
    """
    if badge_type not in PER_DAY_BADGES:
        day_id = None

    try:
        if has_badge(user_id, badge_type, day_id):
            return None
        badge = insert_badge(user_id, badge_type, badge_data, day_id=day_id)
    except DuplicateBadgeError:
        # Lost a race with a concurrent award; the badge exists either way
        return None
    except sqlite3.Error as e:
        logger.warning(
            "badge.award_failed",
            user_id=user_id,
            badge_type=badge_type,
            day_id=day_id,
            error=str(e),
        )
        return None

    logger.info("badge.awarded", user_id=user_id, badge_type=badge_type, day_id=day_id)
    return badge


def list_badges(user_id: str) -> BadgeListResult:
    """All badges held by a user."""
    try:
        records = get_badges(user_id)
    except sqlite3.Error as e:
        logger.error("badge.list_failed", user_id=user_id, error=str(e))
        return BadgeListResult(
            success=False,
            badges=[],
            message=str(e),
            reason=FailureReason.STORE_FAILURE,
        )

    return BadgeListResult(success=True, badges=records, message="ok")


def create_badge(
    user_id: str,
    badge_type: str,
    badge_data: dict[str, Any],
    day_id: int | None = None,
) -> BadgeResult:
    """Create a badge on explicit request.

    Idempotent: asking again returns the stored badge with ``created=False``.
    Only per-day types take a day, so every other type is held at most once.
    """
    badge_type = badge_type.strip()
    if not badge_type:
        return BadgeResult(
            success=False,
            badge=None,
            message="Badge type is required",
            reason=FailureReason.INVALID_BADGE,
        )

    if badge_type in PER_DAY_BADGES and day_id is None:
        return BadgeResult(
            success=False,
            badge=None,
            message=f"Badge '{badge_type}' requires a day",
            reason=FailureReason.INVALID_BADGE,
            details={"badge_type": badge_type},
        )

    if badge_type not in PER_DAY_BADGES and day_id is not None:
        return BadgeResult(
            success=False,
            badge=None,
            message=f"Badge '{badge_type}' is not tied to a day",
            reason=FailureReason.INVALID_BADGE,
            details={"badge_type": badge_type, "day_id": day_id},
        )

    if day_id is not None and not is_valid_day(day_id):
        return BadgeResult(
            success=False,
            badge=None,
            message=f"Invalid day ID {day_id}",
            reason=FailureReason.INVALID_DAY,
            details={"day_id": day_id, "valid_days": valid_day_ids()},
        )

    try:
        existing = get_badge(user_id, badge_type, day_id)
        if existing is not None:
            return BadgeResult(
                success=True, badge=existing, message="Badge already awarded"
            )
        try:
            badge = insert_badge(user_id, badge_type, badge_data, day_id=day_id)
        except DuplicateBadgeError:
            return BadgeResult(
                success=True,
                badge=get_badge(user_id, badge_type, day_id),
                message="Badge already awarded",
            )
    except sqlite3.Error as e:
        logger.error("badge.create_failed", user_id=user_id, error=str(e))
        return BadgeResult(
            success=False,
            badge=None,
            message=str(e),
            reason=FailureReason.STORE_FAILURE,
        )

    logger.info("badge.created", user_id=user_id, badge_type=badge_type, day_id=day_id)
    return BadgeResult(success=True, badge=badge, message="Badge awarded", created=True)
