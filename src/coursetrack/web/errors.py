"""Mapping from engine failure reasons to HTTP errors."""

from __future__ import annotations

from typing import Any, NoReturn

from fastapi import HTTPException, status

from coursetrack.core.results import FailureReason

STATUS_BY_REASON: dict[FailureReason, int] = {
    FailureReason.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    FailureReason.INVALID_DAY: status.HTTP_400_BAD_REQUEST,
    FailureReason.INVALID_SECTION: status.HTTP_400_BAD_REQUEST,
    FailureReason.INVALID_BADGE: status.HTTP_400_BAD_REQUEST,
    FailureReason.NO_PROGRESS_RECORD: status.HTTP_400_BAD_REQUEST,
    FailureReason.INCOMPLETE_SECTIONS: status.HTTP_400_BAD_REQUEST,
    FailureReason.COURSE_INCOMPLETE: status.HTTP_400_BAD_REQUEST,
    FailureReason.INVALID_PROFILE: status.HTTP_400_BAD_REQUEST,
    FailureReason.PROFILE_LOCKED: status.HTTP_400_BAD_REQUEST,
    FailureReason.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    FailureReason.STORE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def raise_for_failure(
    reason: FailureReason | None, message: str, details: dict[str, Any] | None = None
) -> NoReturn:
    """Raise the HTTPException matching a failed engine result.

    The body is ``{"detail": {"reason", "message", **details}}``.
    """
    reason = reason or FailureReason.STORE_FAILURE
    raise HTTPException(
        status_code=STATUS_BY_REASON[reason],
        detail={"reason": reason.value, "message": message, **(details or {})},
    )
