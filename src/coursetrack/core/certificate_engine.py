"""Certificate issuance engine.

Issues the single course certificate of a user:

1. If one already exists it is returned as ALREADY_ISSUED, unchanged.
2. Every day 1-5 must be flagged complete *and* have all its sections in
   completed_sections. The flag alone isn't trusted: older rows were
   written before completion was validated.
3. The overall score is the rounded mean of every quiz score recorded on
   any day (one flat list, not an average of day averages), 0 without quizzes.
4. The payload is built and inserted. A uniqueness violation on insert means
   a concurrent request won; its row is returned as ALREADY_ISSUED.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

import structlog

from coursetrack.core.course_definition import (
    COURSE_ID,
    COURSE_TITLE,
    TOTAL_DAYS,
    missing_sections,
)
from coursetrack.core.results import FailureReason
from coursetrack.db import certificates_repository, progress_repository, users_repository
from coursetrack.db.certificates_repository import (
    CertificateRecord,
    DuplicateCertificateError,
)
from coursetrack.db.progress_repository import DayProgress
from coursetrack.db.users_repository import UserRecord

logger = structlog.get_logger(__name__)

DEFAULT_USER_NAME = "Student"


class CertificateStatus(str, Enum):
    """How a successful request obtained its certificate."""

    ISSUED = "issued"
    ALREADY_ISSUED = "already_issued"


@dataclass
class CertificateResult:
    """Result of a certificate request."""

    success: bool
    certificate: CertificateRecord | None
    message: str
    status: CertificateStatus | None = None
    reason: FailureReason | None = None
    missing_days: list[int] = field(default_factory=list)
    completed_days: int = 0
    required_days: int = TOTAL_DAYS
    section_gaps: dict[int, list[str]] = field(default_factory=dict)

    @property
    def already_issued(self) -> bool:
        return self.status is CertificateStatus.ALREADY_ISSUED

    @property
    def details(self) -> dict[str, Any]:
        """Structured diff for callers rendering the failure."""
        if self.reason is not FailureReason.COURSE_INCOMPLETE:
            return {}
        return {
            "missing_days": self.missing_days,
            "completed_days": self.completed_days,
            "required_days": self.required_days,
            "missing_sections": {str(d): s for d, s in self.section_gaps.items()},
        }


@dataclass
class CertificateListResult:
    """Result of a certificate listing."""

    success: bool
    certificates: list[CertificateRecord]
    message: str
    reason: FailureReason | None = None


# =============================================================================
# PURE HELPERS
# =============================================================================


def compute_overall_score(progress_rows: list[DayProgress]) -> int:
    """Rounded mean of every quiz score across all days (0 when none)."""
    scores = [
        score for progress in progress_rows for score in progress.quiz_scores.values()
    ]
    if not scores:
        return 0
    mean = Decimal(sum(scores)) / Decimal(len(scores))
    return int(mean.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def resolve_user_name(user: UserRecord | None) -> str:
    """Display name: "first last", then full name, then email, then a placeholder."""
    if user is None:
        return DEFAULT_USER_NAME

    candidates = [
        f"{user.first_name or ''} {user.last_name or ''}".strip(),
        (user.full_name or "").strip(),
        (user.email or "").strip(),
    ]
    for candidate in candidates:
        if candidate:
            return candidate
    return DEFAULT_USER_NAME


def format_completion_date(day: date) -> str:
    """Locale-style date as shown on certificates (en-US, e.g. 10/19/2026)."""
    return f"{day.month}/{day.day}/{day.year}"


def check_eligibility(
    progress_rows: list[DayProgress],
) -> tuple[list[int], dict[int, list[str]]]:
    """Find the days that keep a user from the certificate.

    Returns:
        (missing day numbers, {day: missing section ids} for days whose
        completion flag is set but whose sections are not all done)
    """
    by_day = {p.day_id: p for p in progress_rows}
    missing_days: list[int] = []
    section_gaps: dict[int, list[str]] = {}

    for day_id in range(1, TOTAL_DAYS + 1):
        progress = by_day.get(day_id)
        if progress is None or not progress.is_completed:
            missing_days.append(day_id)
            continue
        gaps = missing_sections(day_id, progress.completed_sections)
        if gaps:
            missing_days.append(day_id)
            section_gaps[day_id] = gaps

    return missing_days, section_gaps


def build_certificate_payload(
    user: UserRecord | None, progress_rows: list[DayProgress], issued_on: date
) -> dict[str, Any]:
    """Certificate payload stored with the record."""
    return {
        "userName": resolve_user_name(user),
        "courseName": COURSE_TITLE,
        "completionDate": format_completion_date(issued_on),
        "overallScore": compute_overall_score(progress_rows),
        "totalDays": TOTAL_DAYS,
    }


# =============================================================================
# ENGINE
# =============================================================================


def issue_certificate(user_id: str, today: date | None = None) -> CertificateResult:
    """Issue (or return the already issued) course certificate of a user.

    Args:
        user_id: Identity-provider user id
        today: Issuance date, defaults to the current date

    Returns:
        CertificateResult with status ISSUED or ALREADY_ISSUED on success,
        COURSE_INCOMPLETE or STORE_FAILURE otherwise.
    """
    try:
        existing = certificates_repository.get_certificate(user_id, COURSE_ID)
        if existing is not None:
            logger.info("certificate.already_issued", user_id=user_id)
            return _already_issued(existing)

        progress_rows = progress_repository.get_all_progress(user_id)
        missing_days, section_gaps = check_eligibility(progress_rows)
        if missing_days:
            completed = TOTAL_DAYS - len(missing_days)
            logger.info(
                "certificate.course_incomplete",
                user_id=user_id,
                missing_days=missing_days,
            )
            return CertificateResult(
                success=False,
                certificate=None,
                message=(
                    "Course not complete. Missing days: "
                    + ", ".join(str(d) for d in missing_days)
                ),
                reason=FailureReason.COURSE_INCOMPLETE,
                missing_days=missing_days,
                completed_days=completed,
                section_gaps=section_gaps,
            )

        user = users_repository.get_user(user_id)
        payload = build_certificate_payload(user, progress_rows, today or date.today())

        try:
            certificate = certificates_repository.insert_certificate(
                user_id, COURSE_ID, payload
            )
        except DuplicateCertificateError:
            winner = certificates_repository.get_certificate(user_id, COURSE_ID)
            logger.info("certificate.concurrent_issue_resolved", user_id=user_id)
            return _already_issued(winner)

    except sqlite3.Error as e:
        logger.error("certificate.store_failed", user_id=user_id, error=str(e))
        return CertificateResult(
            success=False,
            certificate=None,
            message=str(e),
            reason=FailureReason.STORE_FAILURE,
        )

    logger.info(
        "certificate.issued",
        user_id=user_id,
        certificate_id=certificate.id,
        overall_score=payload["overallScore"],
    )
    return CertificateResult(
        success=True,
        certificate=certificate,
        message="Certificate generated successfully",
        status=CertificateStatus.ISSUED,
        completed_days=TOTAL_DAYS,
    )


def list_certificates(user_id: str) -> CertificateListResult:
    """All certificates of a user."""
    try:
        records = certificates_repository.get_certificates(user_id)
    except sqlite3.Error as e:
        logger.error("certificate.list_failed", user_id=user_id, error=str(e))
        return CertificateListResult(
            success=False,
            certificates=[],
            message=str(e),
            reason=FailureReason.STORE_FAILURE,
        )

    return CertificateListResult(success=True, certificates=records, message="ok")


def _already_issued(certificate: CertificateRecord | None) -> CertificateResult:
    return CertificateResult(
        success=True,
        certificate=certificate,
        message="Certificate already issued",
        status=CertificateStatus.ALREADY_ISSUED,
        completed_days=TOTAL_DAYS,
    )
