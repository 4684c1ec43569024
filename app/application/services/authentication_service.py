"""Authentication: password check plus the role's secondary factor, then a session."""

from __future__ import annotations

import asyncio
import hmac
import logging
from typing import TYPE_CHECKING

from app.application.dtos.identity import LoginCommand, LoginResult, SessionClaims
from app.application.services.profile_validation import normalize_email
from app.domain.enums import SecondaryFactor
from app.domain.exceptions import (
    InvalidAdminKeyException,
    InvalidCredentialsException,
    InvalidLicenseException,
    ProfileNotFoundException,
    ValidationException,
)
from app.domain.roles import get_role_spec

if TYPE_CHECKING:
    from app.application.dtos.identity import ProfileResult
    from app.application.interfaces.repositories import (
        ICredentialRepository,
        IProfileStore,
    )
    from app.application.interfaces.services import IPasswordHasher
    from app.application.services.session_service import SessionService

logger = logging.getLogger(__name__)

DUMMY_PASSWORD = "nutrigate-timing-equalizer"


class AuthenticationService:
    """Validates login credentials and issues sessions.

    Unknown email, role mismatch and wrong password all raise the same
    InvalidCredentialsException, and the first two still pay for one bcrypt
    comparison against dummy_hash so response timing does not reveal which
    emails exist. dummy_hash is a hash of DUMMY_PASSWORD made once per process
    with the same cost factor as real hashes.
    Secondary factors are only checked after the password matched.
    """

    def __init__(
        self,
        credential_repo: ICredentialRepository,
        profile_store: IProfileStore,
        password_hasher: IPasswordHasher,
        sessions: SessionService,
        dummy_hash: str,
        admin_key: str | None = None,
    ) -> None:
        self._credentials = credential_repo
        self._profiles = profile_store
        self._hasher = password_hasher
        self._sessions = sessions
        self._admin_key = admin_key
        self._dummy_hash = dummy_hash

    async def login(self, command: LoginCommand) -> LoginResult:
        """Return a session for valid credentials.

        Raises:
            InvalidRoleException: Unknown role.
            ValidationException: Email or password missing.
            InvalidCredentialsException: Unknown email, role mismatch or wrong password.
            ProfileNotFoundException: Credential points at a missing profile.
            InvalidLicenseException: License does not match (professional roles).
            InvalidAdminKeyException: Admin passphrase missing or wrong.
        """
        spec = get_role_spec(command.role)
        email = normalize_email(command.email)
        password = command.password or ""
        if not email or not password:
            raise ValidationException("Email and password are required")

        credential = await self._credentials.get_by_email(email)
        if credential is None or credential.role != spec.role:
            await asyncio.to_thread(self._hasher.verify, password, self._dummy_hash)
            raise InvalidCredentialsException()

        valid = await asyncio.to_thread(self._hasher.verify, password, credential.password_hash)
        if not valid:
            raise InvalidCredentialsException()

        profile = await self._profiles.get(spec.role, credential.profile_id)
        if profile is None:
            logger.error(
                "Credential %s references missing %s profile %s",
                credential.id,
                spec.role.value,
                credential.profile_id,
            )
            raise ProfileNotFoundException(spec.role.value, credential.profile_id)

        if spec.secondary_factor is SecondaryFactor.LICENSE_NUMBER:
            self._check_license(profile, command.license_number, credential.id)
        elif spec.secondary_factor is SecondaryFactor.ADMIN_KEY:
            self._check_admin_key(command.admin_key, credential.id)

        ttl = self._sessions.ttl_for(command.remember_me)
        token = self._sessions.issue(
            SessionClaims(
                identity_id=credential.id, role=spec.role, profile_id=profile.id
            ),
            ttl,
        )
        logger.info("Login for %s identity %s", spec.role.value, credential.id)
        return LoginResult(token=token, role=spec.role, expires_in=ttl.label)

    @staticmethod
    def _check_license(
        profile: ProfileResult, supplied: str | None, identity_id: str
    ) -> None:
        stored = profile.license_number or ""
        given = (supplied or "").strip().upper()
        if not stored or not hmac.compare_digest(given.encode(), stored.encode()):
            logger.warning("License check failed for identity %s", identity_id)
            raise InvalidLicenseException()

    def _check_admin_key(self, supplied: str | None, identity_id: str) -> None:
        if not self._admin_key or not supplied:
            logger.warning("Admin key missing for identity %s", identity_id)
            raise InvalidAdminKeyException()
        if not hmac.compare_digest(supplied.encode(), self._admin_key.encode()):
            logger.warning("Admin key mismatch for identity %s", identity_id)
            raise InvalidAdminKeyException()
