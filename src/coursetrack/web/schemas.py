"""Pydantic schemas for Web API.

Request bodies are validated here before any engine code runs; responses
mirror the repository records.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from coursetrack.core.course_definition import TOTAL_DAYS


# =============================================================================
# COURSE SCHEMAS
# =============================================================================


class CourseSectionResponse(BaseModel):
    """A section of a course day."""

    id: str
    type: str
    title: str

    model_config = {"from_attributes": True}


class CourseDayResponse(BaseModel):
    """A course day with its ordered sections."""

    day_id: int
    title: str
    description: str
    estimated_time: str
    sections: list[CourseSectionResponse]

    model_config = {"from_attributes": True}


class CourseResponse(BaseModel):
    """The whole course definition, keyed by day number."""

    course_id: str
    title: str
    total_days: int
    days: dict[int, CourseDayResponse]


# =============================================================================
# PROGRESS SCHEMAS
# =============================================================================


class SectionProgressRequest(BaseModel):
    """Request to toggle a section."""

    section_id: str = Field(..., min_length=1, max_length=100)
    completed: bool = True


class SlideProgressRequest(BaseModel):
    """Request to toggle a slide marker."""

    slide_id: str = Field(..., min_length=1, max_length=100)
    completed: bool = True
    current_slide: int | None = Field(default=None, ge=0)


class DayProgressResponse(BaseModel):
    """Progress of one user on one day."""

    id: str
    user_id: str
    day_id: int
    completed_sections: list[str]
    completed_slides: list[str]
    quiz_scores: dict[str, int]
    current_slide: int
    is_completed: bool
    completed_at: str | None
    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


class ProgressListResponse(BaseModel):
    """All progress rows of a user."""

    progress: list[DayProgressResponse]
    count: int


class ProgressUpdateResponse(BaseModel):
    """Response for section and slide toggles."""

    progress: DayProgressResponse
    warnings: list[str] = Field(default_factory=list)


# =============================================================================
# BADGE SCHEMAS
# =============================================================================


class BadgeCreateRequest(BaseModel):
    """Request to create a badge."""

    badge_type: str = Field(..., min_length=1, max_length=50)
    badge_data: dict[str, Any] = Field(default_factory=dict)
    day_id: int | None = Field(default=None, ge=1, le=TOTAL_DAYS)


class BadgeResponse(BaseModel):
    """An awarded badge."""

    id: str
    user_id: str
    badge_type: str
    day_id: int | None
    badge_data: dict[str, Any]
    earned_at: str

    model_config = {"from_attributes": True}


class BadgeListResponse(BaseModel):
    """Badges of a user."""

    badges: list[BadgeResponse]
    count: int


class BadgeCreateResponse(BaseModel):
    """Response for badge creation."""

    badge: BadgeResponse
    created: bool


# =============================================================================
# COMPLETION & QUIZ SCHEMAS
# =============================================================================


class DayCompletionResponse(BaseModel):
    """Response for a successful day completion."""

    progress: DayProgressResponse
    badge: BadgeResponse | None = None


class QuizSubmitRequest(BaseModel):
    """Request to record a quiz score."""

    day_id: int = Field(..., ge=1, le=TOTAL_DAYS)
    score: int = Field(..., ge=0, le=100)


class QuizSubmitResponse(BaseModel):
    """Response for a quiz submission."""

    progress: DayProgressResponse
    counted_as_section: bool
    badge: BadgeResponse | None = None
    warnings: list[str] = Field(default_factory=list)


# =============================================================================
# CERTIFICATE SCHEMAS
# =============================================================================


class CertificateResponse(BaseModel):
    """A stored certificate."""

    id: str
    user_id: str
    course_id: str
    certificate_data: dict[str, Any]
    issued_at: str

    model_config = {"from_attributes": True}


class CertificateIssueResponse(BaseModel):
    """Response for a certificate request (fresh or re-fetched)."""

    certificate: CertificateResponse
    already_issued: bool
    message: str


class CertificateListResponse(BaseModel):
    """Certificates of a user."""

    certificates: list[CertificateResponse]
    count: int


# =============================================================================
# PROFILE SCHEMAS
# =============================================================================


class ProfileUpdateRequest(BaseModel):
    """Request body for completing the profile."""

    full_name: str = Field(default="", max_length=200)
    email: str = Field(default="", max_length=200)
    phone: str = Field(default="", max_length=50)
    profession: str = Field(default="", max_length=50)
    organization: str = Field(default="", max_length=200)
    date_of_birth: str = Field(default="", max_length=20)
    course_type: str = Field(default="", max_length=100)
    stream: str = Field(default="", max_length=100)
    field_of_work: str = Field(default="", max_length=100)
    designation: str = Field(default="", max_length=100)


class ProfileResponse(BaseModel):
    """A user profile."""

    id: str
    email: str | None
    first_name: str | None
    last_name: str | None
    full_name: str | None
    phone: str | None
    profession: str | None
    course_type: str | None
    stream: str | None
    field_of_work: str | None
    designation: str | None
    organization: str | None
    date_of_birth: str | None
    profile_locked: bool
    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
