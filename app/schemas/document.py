"""Document upload and verification API schemas."""

from datetime import datetime

from app.domain.enums import Role, VerificationStatus
from app.schemas.base import CamelModel


class DocumentUploadResponse(CamelModel):
    """Response for POST /documents/upload/{role}."""

    message: str = "Documents uploaded successfully"
    profile_id: str
    role: Role
    uploaded_slots: list[str]
    uploaded_at: datetime
    verification_status: VerificationStatus


class DocumentInfo(CamelModel):
    """Stored document metadata (bytes are never returned)."""

    slot: str
    filename: str
    content_type: str
    size: int
    status: VerificationStatus
    uploaded_at: datetime


class TransitionInfo(CamelModel):
    from_status: VerificationStatus
    to_status: VerificationStatus
    actor: str
    reason: str | None = None
    created_at: datetime


class VerificationStatusResponse(CamelModel):
    """Response for GET /verification/status."""

    profile_id: str
    role: Role
    status: VerificationStatus
    last_document_update: datetime | None = None
    documents: list[DocumentInfo] = []
    history: list[TransitionInfo] = []


class AccessResponse(CamelModel):
    """Response for GET /verification/access when access is granted."""

    allowed: bool = True
    status: VerificationStatus
