"""Progress endpoints: reads, section/slide toggles, day completion."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from coursetrack.auth.identity import AuthenticatedUser
from coursetrack.core import completion_engine, progress_engine
from coursetrack.core.course_definition import TOTAL_DAYS
from coursetrack.web.dependencies import get_current_user
from coursetrack.web.errors import raise_for_failure
from coursetrack.web.schemas import (
    BadgeResponse,
    DayCompletionResponse,
    DayProgressResponse,
    ProgressListResponse,
    ProgressUpdateResponse,
    SectionProgressRequest,
    SlideProgressRequest,
)

router = APIRouter(prefix="/api/progress", tags=["progress"])

DayId = Annotated[int, Path(ge=1, le=TOTAL_DAYS)]


@router.get("", response_model=ProgressListResponse)
def list_progress(
    user: AuthenticatedUser = Depends(get_current_user),
) -> ProgressListResponse:
    """All progress of the current user, ordered by day."""
    result = progress_engine.get_all_progress(user.id)
    if not result.success:
        raise_for_failure(result.reason, result.message)

    return ProgressListResponse(
        progress=[
            DayProgressResponse.model_validate(p.to_dict()) for p in result.progress
        ],
        count=len(result.progress),
    )


@router.get("/{day_id}", response_model=DayProgressResponse | None)
def get_day_progress(
    day_id: DayId,
    user: AuthenticatedUser = Depends(get_current_user),
) -> DayProgressResponse | None:
    """Progress for one day, or null when nothing was recorded yet."""
    result = progress_engine.get_day_progress(user.id, day_id)
    if not result.success:
        raise_for_failure(result.reason, result.message, result.details)
    if result.progress is None:
        return None
    return DayProgressResponse.model_validate(result.progress.to_dict())


@router.post("/{day_id}/sections", response_model=ProgressUpdateResponse)
def update_section(
    request: SectionProgressRequest,
    day_id: DayId,
    user: AuthenticatedUser = Depends(get_current_user),
) -> ProgressUpdateResponse:
    """Mark a section completed or not completed."""
    result = progress_engine.update_section_progress(
        user.id, day_id, request.section_id, request.completed
    )
    if not result.success or result.progress is None:
        raise_for_failure(result.reason, result.message, result.details)

    return ProgressUpdateResponse(
        progress=DayProgressResponse.model_validate(result.progress.to_dict()),
        warnings=result.warnings,
    )


@router.post("/{day_id}/slides", response_model=ProgressUpdateResponse)
def update_slide(
    request: SlideProgressRequest,
    day_id: DayId,
    user: AuthenticatedUser = Depends(get_current_user),
) -> ProgressUpdateResponse:
    """Track a slide marker (UI state, not part of completion)."""
    result = progress_engine.update_slide_progress(
        user.id,
        day_id,
        request.slide_id,
        request.completed,
        current_slide=request.current_slide,
    )
    if not result.success or result.progress is None:
        raise_for_failure(result.reason, result.message, result.details)

    return ProgressUpdateResponse(
        progress=DayProgressResponse.model_validate(result.progress.to_dict()),
        warnings=result.warnings,
    )


@router.post("/{day_id}/complete", response_model=DayCompletionResponse)
def complete_day(
    day_id: DayId,
    user: AuthenticatedUser = Depends(get_current_user),
) -> DayCompletionResponse:
    """Mark a day complete once all of its sections are done."""
    result = completion_engine.complete_day(user.id, day_id)
    if not result.success or result.progress is None:
        raise_for_failure(result.reason, result.message, result.details)

    badge = (
        BadgeResponse.model_validate(result.badge.to_dict()) if result.badge else None
    )
    return DayCompletionResponse(
        progress=DayProgressResponse.model_validate(result.progress.to_dict()),
        badge=badge,
    )
