"""Quiz submission endpoint."""

from fastapi import APIRouter, Depends

from coursetrack.auth.identity import AuthenticatedUser
from coursetrack.core import progress_engine
from coursetrack.web.dependencies import get_current_user
from coursetrack.web.errors import raise_for_failure
from coursetrack.web.schemas import (
    BadgeResponse,
    DayProgressResponse,
    QuizSubmitRequest,
    QuizSubmitResponse,
)

router = APIRouter(prefix="/api/quiz", tags=["quiz"])


@router.post("/{quiz_id}/submit", response_model=QuizSubmitResponse)
def submit_quiz(
    quiz_id: str,
    request: QuizSubmitRequest,
    user: AuthenticatedUser = Depends(get_current_user),
) -> QuizSubmitResponse:
    """Record a quiz score for a day."""
    result = progress_engine.submit_quiz_score(
        user.id, request.day_id, quiz_id, request.score
    )
    if not result.success or result.progress is None:
        raise_for_failure(result.reason, result.message, result.details)

    badge = (
        BadgeResponse.model_validate(result.badge.to_dict()) if result.badge else None
    )
    return QuizSubmitResponse(
        progress=DayProgressResponse.model_validate(result.progress.to_dict()),
        counted_as_section=result.counted_as_section,
        badge=badge,
        warnings=result.warnings,
    )
