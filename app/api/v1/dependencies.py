"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the DB session, repositories and application
services. Routes depend only on these providers, never on infrastructure
directly. All repositories of one request share the same transactional
session (FastAPI caches dependencies per request); tests override the
repository providers with in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Callable
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.identity import SessionClaims, SessionTTL
from app.application.interfaces.repositories import (
    ICredentialRepository,
    IDocumentRepository,
    IProfileStore,
    IVerificationLogRepository,
)
from app.application.interfaces.services import IPasswordHasher, ITokenCodec
from app.application.services import (
    AuthenticationService,
    PasswordService,
    ProfileFieldValidator,
    ProfileService,
    RegistrationService,
    SessionService,
    UniquenessChecker,
    VerificationService,
)
from app.core.config import get_settings
from app.domain.enums import Role
from app.domain.exceptions import (
    AuthorizationException,
    InvalidTokenFormatException,
    MissingTokenException,
)
from app.infrastructure.persistence.database import get_db_transactional
from app.infrastructure.persistence.repositories import (
    CredentialRepository,
    DocumentRepository,
    ProfileStore,
    VerificationLogRepository,
)
from app.application.services.authentication_service import DUMMY_PASSWORD
from app.infrastructure.security import BcryptPasswordHasher, JoseTokenCodec
from app.shared.context import set_current_identity

# ---- Database and repositories ----


def get_credential_repo(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> ICredentialRepository:
    """Credential repository (composition root)."""
    return CredentialRepository(db)


def get_profile_store(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> IProfileStore:
    """Profile store over all per-role tables (composition root)."""
    return ProfileStore(db)


def get_document_repo(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> IDocumentRepository:
    """Verification document repository (composition root)."""
    return DocumentRepository(db)


def get_verification_log_repo(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> IVerificationLogRepository:
    """Verification transition log repository (composition root)."""
    return VerificationLogRepository(db)


# ---- Security primitives ----


def get_password_hasher() -> IPasswordHasher:
    return BcryptPasswordHasher(rounds=get_settings().bcrypt_rounds)


@lru_cache
def get_dummy_password_hash() -> str:
    """Hash compared against on unknown-email logins; computed once per process."""
    return get_password_hasher().hash(DUMMY_PASSWORD)


def get_token_codec() -> ITokenCodec:
    return JoseTokenCodec()


def get_session_service(
    codec: Annotated[ITokenCodec, Depends(get_token_codec)],
) -> SessionService:
    settings = get_settings()
    return SessionService(
        codec,
        default_ttl=SessionTTL.days(settings.session_ttl_days),
        remember_me_ttl=SessionTTL.days(settings.remember_me_ttl_days),
    )


def get_field_validator() -> ProfileFieldValidator:
    return ProfileFieldValidator(password_min_length=get_settings().password_min_length)


# ---- Application services ----


def get_uniqueness_checker(
    profiles: Annotated[IProfileStore, Depends(get_profile_store)],
) -> UniquenessChecker:
    return UniquenessChecker(profiles)


def get_registration_service(
    credentials: Annotated[ICredentialRepository, Depends(get_credential_repo)],
    profiles: Annotated[IProfileStore, Depends(get_profile_store)],
    uniqueness: Annotated[UniquenessChecker, Depends(get_uniqueness_checker)],
    hasher: Annotated[IPasswordHasher, Depends(get_password_hasher)],
    sessions: Annotated[SessionService, Depends(get_session_service)],
    validator: Annotated[ProfileFieldValidator, Depends(get_field_validator)],
) -> RegistrationService:
    """Registration service (composition root)."""
    return RegistrationService(credentials, profiles, uniqueness, hasher, sessions, validator)


def get_authentication_service(
    credentials: Annotated[ICredentialRepository, Depends(get_credential_repo)],
    profiles: Annotated[IProfileStore, Depends(get_profile_store)],
    hasher: Annotated[IPasswordHasher, Depends(get_password_hasher)],
    sessions: Annotated[SessionService, Depends(get_session_service)],
    dummy_hash: Annotated[str, Depends(get_dummy_password_hash)],
) -> AuthenticationService:
    """Authentication service with the configured admin passphrase (composition root)."""
    admin_key = get_settings().admin_signin_key
    return AuthenticationService(
        credentials,
        profiles,
        hasher,
        sessions,
        dummy_hash=dummy_hash,
        admin_key=admin_key.get_secret_value() if admin_key else None,
    )


def get_password_service(
    credentials: Annotated[ICredentialRepository, Depends(get_credential_repo)],
    hasher: Annotated[IPasswordHasher, Depends(get_password_hasher)],
    validator: Annotated[ProfileFieldValidator, Depends(get_field_validator)],
) -> PasswordService:
    return PasswordService(credentials, hasher, validator)


def get_verification_service(
    profiles: Annotated[IProfileStore, Depends(get_profile_store)],
    documents: Annotated[IDocumentRepository, Depends(get_document_repo)],
    log: Annotated[IVerificationLogRepository, Depends(get_verification_log_repo)],
) -> VerificationService:
    return VerificationService(
        profiles, documents, log, max_document_size=get_settings().max_document_size
    )


def get_profile_service(
    profiles: Annotated[IProfileStore, Depends(get_profile_store)],
    uniqueness: Annotated[UniquenessChecker, Depends(get_uniqueness_checker)],
    validator: Annotated[ProfileFieldValidator, Depends(get_field_validator)],
) -> ProfileService:
    return ProfileService(
        profiles, uniqueness, validator, max_image_size=get_settings().max_document_size
    )


# ---- Auth (session from bearer token) ----


def _bearer_token(authorization: str | None) -> str | None:
    """Return the token from 'Bearer <token>', None when the header is absent.

    Raises InvalidTokenFormatException for any other header shape.
    """
    if authorization is None or not authorization.strip():
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise InvalidTokenFormatException()
    return token.strip()


async def get_optional_session_claims(
    sessions: Annotated[SessionService, Depends(get_session_service)],
    authorization: Annotated[str | None, Header()] = None,
) -> SessionClaims | None:
    """Return session claims when a bearer token is sent; None when no header.

    A present but invalid or expired token still fails (401).
    """
    token = _bearer_token(authorization)
    if token is None:
        return None
    claims = sessions.verify(token)
    set_current_identity(claims.identity_id, claims.role.value)
    return claims


async def get_session_claims(
    claims: Annotated[SessionClaims | None, Depends(get_optional_session_claims)],
) -> SessionClaims:
    """Return session claims; 401 NO_TOKEN when no Authorization header is sent."""
    if claims is None:
        raise MissingTokenException()
    return claims


def require_role(*roles: Role) -> Callable[..., object]:
    """Dependency factory: require a session whose role is one of roles (403 otherwise)."""
    allowed = [r.value for r in roles]

    async def _require(
        claims: Annotated[SessionClaims, Depends(get_session_claims)],
    ) -> SessionClaims:
        if claims.role not in roles:
            raise AuthorizationException(allowed, claims.role.value)
        return claims

    return _require


async def require_verified_professional(
    claims: Annotated[SessionClaims, Depends(get_session_claims)],
    verification: Annotated[VerificationService, Depends(get_verification_service)],
) -> SessionClaims:
    """Allow only verification-gated roles whose documents were verified.

    403 INSUFFICIENT_ROLE for other roles; 403 VERIFICATION_PENDING or
    VERIFICATION_REJECTED when the gate denies.
    """
    decision = await verification.check_access(claims.role, claims.profile_id)
    decision.raise_if_denied()
    return claims


CurrentSession = Annotated[SessionClaims, Depends(get_session_claims)]
OptionalSession = Annotated[SessionClaims | None, Depends(get_optional_session_claims)]
VerifiedProfessional = Annotated[SessionClaims, Depends(require_verified_professional)]
