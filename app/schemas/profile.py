"""Profile API schemas."""

from datetime import date, datetime
from typing import Any

from app.application.dtos.identity import ProfileResult
from app.domain.enums import Role, VerificationStatus
from app.domain.roles import ADDRESS, AGE, DOB, GENDER, NAME, PHONE
from app.schemas.base import CamelModel


class ProfileResponse(CamelModel):
    """The caller's profile. Role-specific fields are null when not applicable."""

    id: str
    role: Role
    name: str
    email: str
    phone: str
    license_number: str | None = None
    dob: date | None = None
    gender: str | None = None
    address: str | None = None
    age: int | None = None
    verification_status: VerificationStatus | None = None
    last_document_update: datetime | None = None
    has_profile_image: bool = False
    created_at: datetime | None = None

    @classmethod
    def from_result(cls, profile: ProfileResult) -> "ProfileResponse":
        attrs = profile.attributes
        return cls(
            id=profile.id,
            role=profile.role,
            name=profile.display_name,
            email=profile.email,
            phone=profile.phone_number,
            license_number=profile.license_number,
            dob=attrs.get(DOB),
            gender=attrs.get(GENDER),
            address=attrs.get(ADDRESS),
            age=attrs.get(AGE),
            verification_status=profile.verification_status,
            last_document_update=profile.last_document_update,
            has_profile_image=profile.has_profile_image,
            created_at=profile.created_at,
        )


class ProfileUpdateRequest(CamelModel):
    """Request body for PUT /profiles/me. Fields not used by the caller's role are ignored."""

    name: str | None = None
    phone: str | None = None
    address: str | None = None
    dob: str | None = None
    gender: str | None = None
    age: int | None = None

    def to_changes(self) -> dict[str, Any]:
        """Map to profile attribute names, dropping fields that were not sent."""
        return {
            attribute: value
            for attribute, value in (
                (NAME, self.name),
                (PHONE, self.phone),
                (ADDRESS, self.address),
                (DOB, self.dob),
                (GENDER, self.gender),
                (AGE, self.age),
            )
            if value is not None
        }


class ProfileImageResponse(CamelModel):
    message: str = "Profile image updated"
    content_type: str
    size: int
