"""Application DTOs (no ORM dependency)."""

from app.application.dtos.identity import (
    CredentialRecord,
    DocumentResult,
    DocumentUpload,
    LoginCommand,
    LoginResult,
    ProfileCreate,
    ProfileImage,
    ProfileRef,
    ProfileResult,
    RegistrationCommand,
    RegistrationResult,
    SessionClaims,
    SessionTTL,
    UploadResult,
    VerificationOverview,
    VerificationTransition,
)

__all__ = [
    "CredentialRecord",
    "DocumentResult",
    "DocumentUpload",
    "LoginCommand",
    "LoginResult",
    "ProfileCreate",
    "ProfileImage",
    "ProfileRef",
    "ProfileResult",
    "RegistrationCommand",
    "RegistrationResult",
    "SessionClaims",
    "SessionTTL",
    "UploadResult",
    "VerificationOverview",
    "VerificationTransition",
]
