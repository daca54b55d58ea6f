"""Certificate endpoints."""

import structlog
from fastapi import APIRouter, Depends, Response, status

from coursetrack.auth.identity import AuthenticatedUser
from coursetrack.core import certificate_engine
from coursetrack.web.dependencies import get_current_user
from coursetrack.web.errors import raise_for_failure
from coursetrack.web.schemas import (
    CertificateIssueResponse,
    CertificateListResponse,
    CertificateResponse,
)

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/certificates", tags=["certificates"])


@router.get("", response_model=CertificateListResponse)
def list_certificates(
    user: AuthenticatedUser = Depends(get_current_user),
) -> CertificateListResponse:
    """Certificates issued to the current user."""
    result = certificate_engine.list_certificates(user.id)
    if not result.success:
        raise_for_failure(result.reason, result.message)

    records = result.certificates
    return CertificateListResponse(
        certificates=[CertificateResponse.model_validate(c.to_dict()) for c in records],
        count=len(records),
    )


@router.post("", response_model=CertificateIssueResponse)
def issue_certificate(
    response: Response,
    user: AuthenticatedUser = Depends(get_current_user),
) -> CertificateIssueResponse:
    """Issue the course certificate, or return the one already issued.

    201 for a freshly issued certificate, 200 when it already existed.
    """
    result = certificate_engine.issue_certificate(user.id)
    if not result.success or result.certificate is None:
        raise_for_failure(result.reason, result.message, result.details)

    if not result.already_issued:
        response.status_code = status.HTTP_201_CREATED

    logger.info(
        "certificates_issue",
        user_id=user.id,
        already_issued=result.already_issued,
    )
    return CertificateIssueResponse(
        certificate=CertificateResponse.model_validate(result.certificate.to_dict()),
        already_issued=result.already_issued,
        message=result.message,
    )
