"""Verification API: the caller's verification status and the access gate."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import (
    VerifiedProfessional,
    get_verification_service,
    require_role,
)
from app.application.dtos.identity import SessionClaims
from app.application.services import VerificationService
from app.domain.enums import VerificationStatus
from app.domain.roles import gated_roles
from app.schemas.document import (
    AccessResponse,
    DocumentInfo,
    TransitionInfo,
    VerificationStatusResponse,
)

router = APIRouter()

ProfessionalSession = Annotated[SessionClaims, Depends(require_role(*gated_roles()))]


@router.get("/status", response_model=VerificationStatusResponse)
async def get_status(
    claims: ProfessionalSession,
    service: Annotated[VerificationService, Depends(get_verification_service)],
):
    """Return the caller's overall status, document slots and transition history."""
    overview = await service.overview(claims.role, claims.profile_id)
    return VerificationStatusResponse(
        profile_id=overview.profile_id,
        role=overview.role,
        status=overview.status,
        last_document_update=overview.last_document_update,
        documents=[
            DocumentInfo(
                slot=d.slot,
                filename=d.filename,
                content_type=d.content_type,
                size=d.size,
                status=d.status,
                uploaded_at=d.uploaded_at,
            )
            for d in overview.documents
        ],
        history=[
            TransitionInfo(
                from_status=t.from_status,
                to_status=t.to_status,
                actor=t.actor,
                reason=t.reason,
                created_at=t.created_at,
            )
            for t in overview.history
        ],
    )


@router.get("/access", response_model=AccessResponse)
async def check_access(claims: VerifiedProfessional):
    """200 when the caller's documents are verified; 403 with the gate's reason code otherwise."""
    return AccessResponse(allowed=True, status=VerificationStatus.VERIFIED)
