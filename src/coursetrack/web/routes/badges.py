"""Badge endpoints."""

from fastapi import APIRouter, Depends, Response, status

from coursetrack.auth.identity import AuthenticatedUser
from coursetrack.core import badges
from coursetrack.web.dependencies import get_current_user
from coursetrack.web.errors import raise_for_failure
from coursetrack.web.schemas import (
    BadgeCreateRequest,
    BadgeCreateResponse,
    BadgeListResponse,
    BadgeResponse,
)

router = APIRouter(prefix="/api/badges", tags=["badges"])


@router.get("", response_model=BadgeListResponse)
def list_badges(
    user: AuthenticatedUser = Depends(get_current_user),
) -> BadgeListResponse:
    """Badges earned by the current user."""
    result = badges.list_badges(user.id)
    if not result.success:
        raise_for_failure(result.reason, result.message)

    records = result.badges
    return BadgeListResponse(
        badges=[BadgeResponse.model_validate(b.to_dict()) for b in records],
        count=len(records),
    )


@router.post("", response_model=BadgeCreateResponse)
def create_badge(
    request: BadgeCreateRequest,
    response: Response,
    user: AuthenticatedUser = Depends(get_current_user),
) -> BadgeCreateResponse:
    """Award a badge. Returns the stored badge if the user already holds it."""
    result = badges.create_badge(
        user.id, request.badge_type, request.badge_data, day_id=request.day_id
    )
    if not result.success or result.badge is None:
        raise_for_failure(result.reason, result.message, result.details)

    if result.created:
        response.status_code = status.HTTP_201_CREATED
    return BadgeCreateResponse(
        badge=BadgeResponse.model_validate(result.badge.to_dict()),
        created=result.created,
    )
