"""Profile endpoints."""

from fastapi import APIRouter, Depends

from coursetrack.auth.identity import AuthenticatedUser
from coursetrack.core import profile_service
from coursetrack.core.profile_service import ProfileUpdate
from coursetrack.web.dependencies import get_current_user
from coursetrack.web.errors import raise_for_failure
from coursetrack.web.schemas import ProfileResponse, ProfileUpdateRequest

router = APIRouter(prefix="/api/profile", tags=["profile"])


@router.get("", response_model=ProfileResponse)
def get_profile(
    user: AuthenticatedUser = Depends(get_current_user),
) -> ProfileResponse:
    """Profile of the current user."""
    result = profile_service.get_profile(user.id)
    if not result.success or result.user is None:
        raise_for_failure(result.reason, result.message, result.details)
    return ProfileResponse.model_validate(result.user.to_dict())


@router.put("", response_model=ProfileResponse)
def update_profile(
    request: ProfileUpdateRequest,
    user: AuthenticatedUser = Depends(get_current_user),
) -> ProfileResponse:
    """Complete the profile. A completed profile is locked."""
    result = profile_service.update_profile(
        user.id, user.email, ProfileUpdate(**request.model_dump())
    )
    if not result.success or result.user is None:
        raise_for_failure(result.reason, result.message, result.details)
    return ProfileResponse.model_validate(result.user.to_dict())
