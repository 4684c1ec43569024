"""Persistence repositories. Re-exports for dependency injection."""

from app.infrastructure.persistence.repositories.base import (
    BaseRepository,
    conflict_from_integrity_error,
)
from app.infrastructure.persistence.repositories.credential_repo import (
    CredentialRepository,
)
from app.infrastructure.persistence.repositories.document_repo import DocumentRepository
from app.infrastructure.persistence.repositories.profile_store import ProfileStore
from app.infrastructure.persistence.repositories.verification_log_repo import (
    VerificationLogRepository,
)

__all__ = [
    "BaseRepository",
    "CredentialRepository",
    "DocumentRepository",
    "ProfileStore",
    "VerificationLogRepository",
    "conflict_from_integrity_error",
]
