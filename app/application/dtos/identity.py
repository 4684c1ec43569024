"""DTOs for identity use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

from app.domain.enums import Role, VerificationStatus


@dataclass(frozen=True)
class CredentialRecord:
    """Login identity. Carries the password hash; never serialize it to clients."""

    id: str
    email: str
    password_hash: str
    role: Role
    profile_id: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class ProfileResult:
    """Role-specific profile read-model.

    attributes holds the role's extra fields (date_of_birth, gender, address, age).
    license_number and verification fields are None for non-professional roles.
    """

    id: str
    role: Role
    display_name: str
    email: str
    phone_number: str
    attributes: dict[str, Any] = field(default_factory=dict)
    license_number: str | None = None
    verification_status: VerificationStatus | None = None
    last_document_update: datetime | None = None
    has_profile_image: bool = False
    created_at: datetime | None = None


@dataclass(frozen=True)
class ProfileCreate:
    """Validated input for a new profile row."""

    role: Role
    display_name: str
    email: str
    phone_number: str
    license_number: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RegistrationCommand:
    """Raw registration input. Fields are optional here; RegistrationService validates them."""

    role: str
    email: str | None
    password: str | None
    display_name: str | None = None
    phone_number: str | None = None
    license_number: str | None = None
    date_of_birth: date | str | None = None
    gender: str | None = None
    address: str | None = None
    age: int | str | None = None


@dataclass(frozen=True)
class RegistrationResult:
    token: str
    role: Role
    profile_id: str
    display_name: str


@dataclass(frozen=True)
class LoginCommand:
    role: str
    email: str | None
    password: str | None
    license_number: str | None = None
    admin_key: str | None = None
    remember_me: bool = False


@dataclass(frozen=True)
class LoginResult:
    token: str
    role: Role
    expires_in: str


@dataclass(frozen=True)
class SessionClaims:
    """The three claims a session token carries."""

    identity_id: str
    role: Role
    profile_id: str


@dataclass(frozen=True)
class SessionTTL:
    """Token lifetime plus the short label returned to clients ("1d", "7d")."""

    delta: timedelta
    label: str

    @classmethod
    def days(cls, n: int) -> "SessionTTL":
        return cls(delta=timedelta(days=n), label=f"{n}d")


@dataclass(frozen=True)
class DocumentUpload:
    """One uploaded file bound to a named slot."""

    slot: str
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class DocumentResult:
    """Stored document metadata (bytes omitted)."""

    slot: str
    filename: str
    content_type: str
    size: int
    status: VerificationStatus
    uploaded_at: datetime


@dataclass(frozen=True)
class UploadResult:
    profile_id: str
    role: Role
    uploaded_slots: list[str]
    uploaded_at: datetime
    verification_status: VerificationStatus


@dataclass(frozen=True)
class VerificationTransition:
    """One row of the append-only verification log."""

    role: Role
    profile_id: str
    from_status: VerificationStatus
    to_status: VerificationStatus
    actor: str
    reason: str | None
    created_at: datetime


@dataclass(frozen=True)
class VerificationOverview:
    profile_id: str
    role: Role
    status: VerificationStatus
    last_document_update: datetime | None
    documents: list[DocumentResult]
    history: list[VerificationTransition]


@dataclass(frozen=True)
class ProfileImage:
    data: bytes
    content_type: str


@dataclass(frozen=True)
class ProfileRef:
    """Pointer to one profile row and when it was created."""

    role: Role
    profile_id: str
    created_at: datetime | None = None
