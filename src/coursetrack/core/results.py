"""Failure taxonomy shared by the engines.

Engines report business-rule failures as tagged results instead of raising;
the web layer maps each reason to a status code.
"""

from enum import Enum


class FailureReason(str, Enum):
    """Why an engine operation did not succeed."""

    UNAUTHORIZED = "unauthorized"
    INVALID_DAY = "invalid_day"
    INVALID_SECTION = "invalid_section"
    INVALID_BADGE = "invalid_badge"
    NO_PROGRESS_RECORD = "no_progress_record"
    INCOMPLETE_SECTIONS = "incomplete_sections"
    COURSE_INCOMPLETE = "course_incomplete"
    INVALID_PROFILE = "invalid_profile"
    PROFILE_LOCKED = "profile_locked"
    NOT_FOUND = "not_found"
    STORE_FAILURE = "store_failure"
