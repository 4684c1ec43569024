"""Auth API schemas."""

from pydantic import Field

from app.domain.enums import Role
from app.schemas.base import CamelModel


class SignupRequest(CamelModel):
    """Request body for POST /auth/signup/{role}.

    Fields are optional at this layer; the registration service reports every
    missing or malformed field together. Only the fields of the role in the
    path are used.
    """

    email: str | None = None
    password: str | None = None
    name: str | None = Field(default=None, description="Display name (globally unique)")
    phone: str | None = Field(default=None, description="10-digit phone (globally unique)")
    license_number: str | None = Field(default=None, description="Professional roles only")
    dob: str | None = Field(default=None, description="ISO date; user and admin")
    gender: str | None = None
    address: str | None = None
    age: int | None = Field(default=None, description="Dietitian only")


class SigninRequest(CamelModel):
    """Request body for POST /auth/signin/{role}."""

    email: str | None = None
    password: str | None = None
    license_number: str | None = None
    admin_key: str | None = None
    remember_me: bool = False


class ChangePasswordRequest(CamelModel):
    """Request body for POST /auth/change-password."""

    old_password: str | None = None
    new_password: str | None = None


class SignupResponse(CamelModel):
    message: str = "Registration successful"
    token: str
    role: Role
    profile_id: str
    display_name: str


class SigninResponse(CamelModel):
    message: str = "Login successful"
    token: str
    role: Role
    expires_in: str = Field(..., description="Token lifetime label, e.g. '1d' or '7d'")


class VerifyTokenResponse(CamelModel):
    identity_id: str
    role: Role
    profile_id: str


class ChangePasswordResponse(CamelModel):
    success: bool = True
    message: str = "Password changed successfully"
