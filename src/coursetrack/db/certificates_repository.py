"""Repository functions for the user_certificates table."""

from __future__ import annotations

import json
import sqlite3
import uuid
from dataclasses import dataclass, field
from typing import Any

import structlog

from coursetrack.db.database import get_db, utc_now

logger = structlog.get_logger(__name__)


@dataclass
class CertificateRecord:
    """Certificate record from database."""

    id: str
    user_id: str
    course_id: str
    certificate_data: dict[str, Any] = field(default_factory=dict)
    issued_at: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "course_id": self.course_id,
            "certificate_data": dict(self.certificate_data),
            "issued_at": self.issued_at,
        }


class DuplicateCertificateError(Exception):
    """Raised when a certificate for (user, course) already exists."""

    def __init__(self, user_id: str, course_id: str):
        self.user_id = user_id
        self.course_id = course_id
        super().__init__(f"Certificate for '{course_id}' already issued to {user_id}")


def get_certificate(user_id: str, course_id: str) -> CertificateRecord | None:
    """Get the certificate of a user for a course."""
    with get_db() as conn:
        row = conn.execute(
            "SELECT * FROM user_certificates WHERE user_id = ? AND course_id = ?",
            (user_id, course_id),
        ).fetchone()

    if row is None:
        return None
    return _row_to_record(row)


def get_certificates(user_id: str) -> list[CertificateRecord]:
    """Get all certificates of a user, newest first."""
    with get_db() as conn:
        rows = conn.execute(
            "SELECT * FROM user_certificates WHERE user_id = ? ORDER BY issued_at DESC",
            (user_id,),
        ).fetchall()

    return [_row_to_record(row) for row in rows]


def count_certificates(user_id: str, course_id: str) -> int:
    """Number of stored certificates for (user, course)."""
    with get_db() as conn:
        row = conn.execute(
            "SELECT COUNT(*) FROM user_certificates WHERE user_id = ? AND course_id = ?",
            (user_id, course_id),
        ).fetchone()

    return int(row[0])


def insert_certificate(
    user_id: str, course_id: str, certificate_data: dict[str, Any]
) -> CertificateRecord:
    """Insert a new certificate.

    Raises:
        DuplicateCertificateError: If one already exists for (user, course)
    """
    record = CertificateRecord(
        id=uuid.uuid4().hex,
        user_id=user_id,
        course_id=course_id,
        certificate_data=dict(certificate_data),
        issued_at=utc_now(),
    )

    try:
        with get_db() as conn:
            conn.execute(
                """
                INSERT INTO user_certificates (
                    id, user_id, course_id, certificate_data, issued_at
                ) VALUES (?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    user_id,
                    course_id,
                    json.dumps(record.certificate_data),
                    record.issued_at,
                ),
            )
    except sqlite3.IntegrityError as e:
        raise DuplicateCertificateError(user_id, course_id) from e

    logger.debug("certificates.inserted", user_id=user_id, course_id=course_id)
    return record


def _row_to_record(row: sqlite3.Row) -> CertificateRecord:
    """Convert database row to CertificateRecord."""
    return CertificateRecord(
        id=row["id"],
        user_id=row["user_id"],
        course_id=row["course_id"],
        certificate_data=json.loads(row["certificate_data"] or "{}"),
        issued_at=row["issued_at"],
    )
