"""Course definition endpoints (read-only)."""

from fastapi import APIRouter, Path

from coursetrack.core.course_definition import (
    COURSE_ID,
    COURSE_TITLE,
    TOTAL_DAYS,
    get_course_day,
    list_course_days,
)
from coursetrack.core.results import FailureReason
from coursetrack.web.errors import raise_for_failure
from coursetrack.web.schemas import CourseDayResponse, CourseResponse

router = APIRouter(prefix="/api/course", tags=["course"])


@router.get("", response_model=CourseResponse)
async def get_course() -> CourseResponse:
    """The whole course, keyed by day number."""
    return CourseResponse(
        course_id=COURSE_ID,
        title=COURSE_TITLE,
        total_days=TOTAL_DAYS,
        days={
            day.day_id: CourseDayResponse.model_validate(day.to_dict())
            for day in list_course_days()
        },
    )


@router.get("/{day_id}", response_model=CourseDayResponse)
async def get_day(day_id: int = Path(..., ge=1, le=TOTAL_DAYS)) -> CourseDayResponse:
    """One course day with its ordered sections."""
    day = get_course_day(day_id)
    if day is None:
        raise_for_failure(FailureReason.INVALID_DAY, f"Invalid day ID {day_id}")
    return CourseDayResponse.model_validate(day.to_dict())
