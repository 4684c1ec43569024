"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.

Write methods raise ConflictException(field) when a unique value is already
taken; storage errors never leak past these interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Protocol

from app.domain.enums import Role, VerificationStatus

if TYPE_CHECKING:
    from app.application.dtos.identity import (
        CredentialRecord,
        DocumentResult,
        DocumentUpload,
        ProfileCreate,
        ProfileImage,
        ProfileRef,
        ProfileResult,
        VerificationTransition,
    )


# Credential store interface
class ICredentialRepository(Protocol):
    """Protocol for the credential store (one row per login email)."""

    async def get_by_email(self, email: str) -> CredentialRecord | None:
        """Return the credential for a normalized email, or None."""

    async def get_by_id(self, credential_id: str) -> CredentialRecord | None:
        """Return the credential by id, or None."""

    async def create(
        self, email: str, password_hash: str, role: Role, profile_id: str
    ) -> CredentialRecord:
        """Insert a credential; ConflictException('email') if the email exists."""

    async def update_password_hash(self, credential_id: str, password_hash: str) -> bool:
        """Replace the stored hash. Returns False if the credential does not exist."""

    async def profile_ids_for_role(self, role: Role) -> set[str]:
        """Return every profile_id referenced by credentials of role."""

    async def list_all(self, skip: int = 0, limit: int = 1000) -> list[CredentialRecord]:
        """Return credentials with pagination (reconciliation)."""


# Profile store interface (façade over the per-role profile tables)
class IProfileStore(Protocol):
    """Protocol for the role-keyed profile stores."""

    async def get(self, role: Role, profile_id: str) -> ProfileResult | None:
        """Return the profile in role's store, or None."""

    async def create(self, data: ProfileCreate) -> ProfileResult:
        """Insert a profile and its global-uniqueness claims; ConflictException on duplicates."""

    async def update(
        self, role: Role, profile_id: str, changes: dict[str, Any]
    ) -> ProfileResult | None:
        """Apply attribute changes; claims follow name/phone changes. None if missing."""

    async def delete(self, role: Role, profile_id: str) -> bool:
        """Delete the profile and its claims. Returns False if it did not exist."""

    async def exists_with_value(
        self,
        role: Role,
        field: str,
        value: str,
        exclude_profile_id: str | None = None,
    ) -> bool:
        """Return True if role's store holds value in field (optionally ignoring one profile)."""

    async def set_verification_status(
        self,
        role: Role,
        profile_id: str,
        status: VerificationStatus,
        last_document_update: datetime | None = None,
    ) -> None:
        """Persist the overall status (and upload timestamp when given)."""

    async def set_profile_image(
        self, role: Role, profile_id: str, data: bytes, content_type: str
    ) -> bool:
        """Store image bytes. Returns False if the profile does not exist."""

    async def get_profile_image(self, role: Role, profile_id: str) -> ProfileImage | None:
        """Return image bytes and content type, or None."""

    async def list_created_before(self, role: Role, cutoff: datetime) -> list[ProfileRef]:
        """Return refs of profiles in role's store created before cutoff."""


# Document store interface
class IDocumentRepository(Protocol):
    """Protocol for verification documents (one row per profile slot)."""

    async def upsert_many(
        self,
        role: Role,
        profile_id: str,
        uploads: list[DocumentUpload],
        uploaded_at: datetime,
    ) -> list[DocumentResult]:
        """Insert or replace each slot with status received."""

    async def list_for_profile(self, role: Role, profile_id: str) -> list[DocumentResult]:
        """Return document metadata for a profile ordered by slot."""

    async def set_status(
        self,
        role: Role,
        profile_id: str,
        status: VerificationStatus,
        slots: list[str] | None = None,
    ) -> int:
        """Set per-slot status (all slots when slots is None). Returns rows changed."""

    async def delete_for_profile(self, role: Role, profile_id: str) -> int:
        """Delete all documents of a profile. Returns rows deleted."""


# Verification log interface
class IVerificationLogRepository(Protocol):
    """Protocol for the append-only verification transition log."""

    async def append(self, transition: VerificationTransition) -> None:
        """Append one transition row."""

    async def list_for_profile(
        self, role: Role, profile_id: str
    ) -> list[VerificationTransition]:
        """Return transitions oldest first."""

    async def delete_for_profile(self, role: Role, profile_id: str) -> int:
        """Delete a profile's history (orphan sweep only)."""
