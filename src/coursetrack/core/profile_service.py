"""User profile reads and one-time profile completion.

A profile is filled in once: a successful update locks it. Students must
give their course type and stream, working professionals their field of
work and designation.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Any

import structlog

from coursetrack.core.results import FailureReason
from coursetrack.db import users_repository
from coursetrack.db.users_repository import UserRecord

logger = structlog.get_logger(__name__)

STUDENT = "student"


@dataclass
class ProfileUpdate:
    """Profile fields submitted by the user."""

    full_name: str = ""
    email: str = ""
    phone: str = ""
    profession: str = ""
    organization: str = ""
    date_of_birth: str = ""
    course_type: str = ""
    stream: str = ""
    field_of_work: str = ""
    designation: str = ""


@dataclass
class ProfileResult:
    """Result of a profile operation."""

    success: bool
    user: UserRecord | None
    message: str
    reason: FailureReason | None = None
    details: dict[str, Any] = field(default_factory=dict)


def get_profile(user_id: str) -> ProfileResult:
    """Profile of a user."""
    user = users_repository.get_user(user_id)
    if user is None:
        return ProfileResult(
            success=False,
            user=None,
            message=f"User '{user_id}' not found",
            reason=FailureReason.NOT_FOUND,
        )
    return ProfileResult(success=True, user=user, message="ok")


def validate_profile(update: ProfileUpdate, authenticated_email: str | None) -> list[str]:
    """Return the list of problems with a submitted profile (empty when valid)."""
    errors: list[str] = []

    if (update.email or "").strip() != (authenticated_email or "").strip():
        errors.append("Email cannot be changed")

    required = {
        "full_name": update.full_name,
        "email": update.email,
        "phone": update.phone,
        "profession": update.profession,
        "organization": update.organization,
        "date_of_birth": update.date_of_birth,
    }
    for name, value in required.items():
        if not value or not value.strip():
            errors.append(f"{name} is required")

    if update.profession.strip() == STUDENT:
        if not update.course_type.strip() or not update.stream.strip():
            errors.append("Course type and stream are required for students")
    elif update.profession.strip():
        if not update.field_of_work.strip() or not update.designation.strip():
            errors.append(
                "Field of work and designation are required for working professionals"
            )

    return errors


def update_profile(
    user_id: str, authenticated_email: str | None, update: ProfileUpdate
) -> ProfileResult:
    """Validate and store a profile, then lock it."""
    try:
        current = users_repository.ensure_user(user_id, email=authenticated_email)
    except sqlite3.Error as e:
        logger.error("profile.read_failed", user_id=user_id, error=str(e))
        return ProfileResult(
            success=False, user=None, message=str(e), reason=FailureReason.STORE_FAILURE
        )

    if current.profile_locked:
        return ProfileResult(
            success=False,
            user=current,
            message="Profile is locked and cannot be modified",
            reason=FailureReason.PROFILE_LOCKED,
        )

    errors = validate_profile(update, authenticated_email)
    if errors:
        return ProfileResult(
            success=False,
            user=current,
            message=errors[0],
            reason=FailureReason.INVALID_PROFILE,
            details={"errors": errors},
        )

    is_student = update.profession.strip() == STUDENT
    fields: dict[str, Any] = {
        "full_name": update.full_name.strip(),
        "email": update.email.strip(),
        "phone": update.phone.strip(),
        "profession": update.profession.strip(),
        "organization": update.organization.strip(),
        "date_of_birth": update.date_of_birth.strip(),
        "course_type": update.course_type.strip() if is_student else None,
        "stream": update.stream.strip() if is_student else None,
        "field_of_work": None if is_student else update.field_of_work.strip(),
        "designation": None if is_student else update.designation.strip(),
        "profile_locked": True,
    }

    try:
        user = users_repository.update_user_profile(user_id, fields)
    except sqlite3.Error as e:
        logger.error("profile.write_failed", user_id=user_id, error=str(e))
        return ProfileResult(
            success=False, user=current, message=str(e), reason=FailureReason.STORE_FAILURE
        )

    logger.info("profile.updated", user_id=user_id, profession=fields["profession"])
    return ProfileResult(success=True, user=user, message="Profile updated successfully")
