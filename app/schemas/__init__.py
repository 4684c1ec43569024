"""Pydantic request/response schemas for the API."""

from app.schemas.auth import (
    ChangePasswordRequest,
    ChangePasswordResponse,
    SigninRequest,
    SigninResponse,
    SignupRequest,
    SignupResponse,
    VerifyTokenResponse,
)
from app.schemas.base import CamelModel
from app.schemas.document import (
    AccessResponse,
    DocumentInfo,
    DocumentUploadResponse,
    TransitionInfo,
    VerificationStatusResponse,
)
from app.schemas.health import HealthResponse, ReadinessErrorResponse, ReadinessResponse
from app.schemas.profile import ProfileImageResponse, ProfileResponse, ProfileUpdateRequest

__all__ = [
    "AccessResponse",
    "CamelModel",
    "ChangePasswordRequest",
    "ChangePasswordResponse",
    "DocumentInfo",
    "DocumentUploadResponse",
    "HealthResponse",
    "ProfileImageResponse",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "SigninRequest",
    "SigninResponse",
    "SignupRequest",
    "SignupResponse",
    "TransitionInfo",
    "VerificationStatusResponse",
    "VerifyTokenResponse",
]
