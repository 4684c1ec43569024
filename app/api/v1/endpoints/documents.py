"""Documents API: verification document upload for professional roles.

Multipart form; every file field is one document slot (its field name is
the slot name). Caller is identified by bearer token, or, right after
sign-up without a token, by an explicit profileId (or userId) form field;
that path only accepts the first submission of a profile.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from app.api.v1.dependencies import OptionalSession, get_verification_service
from app.application.dtos.identity import DocumentUpload
from app.application.services import VerificationService
from app.core.limiter import limit_upload
from app.domain.exceptions import AuthorizationException, ValidationException
from app.domain.roles import parse_role
from app.schemas.document import DocumentUploadResponse
from app.shared.context import SYSTEM_ACTOR, get_actor_context

router = APIRouter()

PROFILE_ID_FIELD = "profileId"
PROFILE_ID_ALIASES = (PROFILE_ID_FIELD, "profile_id", "userId")


@router.post("/upload/{role}", response_model=DocumentUploadResponse)
@limit_upload
async def upload_documents(
    request: Request,
    role: str,
    claims: OptionalSession,
    service: Annotated[VerificationService, Depends(get_verification_service)],
):
    """Store the uploaded files under their slots and move the profile to received."""
    target_role = parse_role(role)
    form = await request.form()
    uploads: list[DocumentUpload] = []
    profile_field: str | None = None
    for name, value in form.multi_items():
        if isinstance(value, UploadFile):
            uploads.append(
                DocumentUpload(
                    slot=name,
                    filename=value.filename or name,
                    content_type=value.content_type or "application/octet-stream",
                    data=await value.read(),
                )
            )
        elif name in PROFILE_ID_ALIASES:
            profile_field = value.strip() or None

    first_upload_only = claims is None
    if claims is not None:
        if claims.role is not target_role:
            raise AuthorizationException([target_role.value], claims.role.value)
        profile_id = claims.profile_id
        actor = get_actor_context().label
    else:
        if not profile_field:
            raise ValidationException(
                "profileId is required when no token is sent", field=PROFILE_ID_FIELD
            )
        profile_id = profile_field
        actor = f"{SYSTEM_ACTOR}:unauthenticated-upload"

    result = await service.upload_documents(
        target_role, profile_id, uploads, actor, first_upload_only=first_upload_only
    )
    return DocumentUploadResponse(
        profile_id=result.profile_id,
        role=result.role,
        uploaded_slots=result.uploaded_slots,
        uploaded_at=result.uploaded_at,
        verification_status=result.verification_status,
    )
