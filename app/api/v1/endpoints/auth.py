"""Auth API: sign-up, sign-in, token verification and password change per role.

Uses only injected services from app.api.v1.dependencies; the role is a path
segment (user, admin, dietitian, organization, corporatepartner).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    CurrentSession,
    get_authentication_service,
    get_password_service,
    get_registration_service,
)
from app.application.dtos.identity import LoginCommand, RegistrationCommand
from app.application.services import (
    AuthenticationService,
    PasswordService,
    RegistrationService,
)
from app.core.limiter import limit_auth, limit_writes
from app.schemas.auth import (
    ChangePasswordRequest,
    ChangePasswordResponse,
    SigninRequest,
    SigninResponse,
    SignupRequest,
    SignupResponse,
    VerifyTokenResponse,
)

router = APIRouter()


@router.post("/signup/{role}", response_model=SignupResponse, status_code=201)
@limit_auth
async def signup(
    request: Request,
    role: str,
    body: SignupRequest,
    service: Annotated[RegistrationService, Depends(get_registration_service)],
):
    """Register a new identity for role and return its first session token.

    The returned profileId is needed right away by professional roles to
    upload verification documents.
    """
    result = await service.register(
        RegistrationCommand(
            role=role,
            email=body.email,
            password=body.password,
            display_name=body.name,
            phone_number=body.phone,
            license_number=body.license_number,
            date_of_birth=body.dob,
            gender=body.gender,
            address=body.address,
            age=body.age,
        )
    )
    return SignupResponse(
        token=result.token,
        role=result.role,
        profile_id=result.profile_id,
        display_name=result.display_name,
    )


@router.post("/signin/{role}", response_model=SigninResponse)
@limit_auth
async def signin(
    request: Request,
    role: str,
    body: SigninRequest,
    service: Annotated[AuthenticationService, Depends(get_authentication_service)],
):
    """Authenticate with email, password and the role's secondary factor; return a session token."""
    result = await service.login(
        LoginCommand(
            role=role,
            email=body.email,
            password=body.password,
            license_number=body.license_number,
            admin_key=body.admin_key,
            remember_me=body.remember_me,
        )
    )
    return SigninResponse(token=result.token, role=result.role, expires_in=result.expires_in)


@router.get("/verify-token", response_model=VerifyTokenResponse)
async def verify_token(claims: CurrentSession):
    """Return the claims of the bearer token (401 with reason code when it is not valid)."""
    return VerifyTokenResponse(
        identity_id=claims.identity_id,
        role=claims.role,
        profile_id=claims.profile_id,
    )


@router.post("/change-password", response_model=ChangePasswordResponse)
@limit_writes
async def change_password(
    request: Request,
    body: ChangePasswordRequest,
    claims: CurrentSession,
    service: Annotated[PasswordService, Depends(get_password_service)],
):
    """Change the password of the session's identity."""
    await service.change_password(claims.identity_id, body.old_password, body.new_password)
    return ChangePasswordResponse()
