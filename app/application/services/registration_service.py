"""Registration: validate, check uniqueness, create profile then credential, issue a session."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from app.application.dtos.identity import (
    ProfileCreate,
    RegistrationCommand,
    RegistrationResult,
    SessionClaims,
)
from app.application.services.profile_validation import (
    ProfileFieldValidator,
    normalize_email,
)
from app.domain.enums import Role
from app.domain.exceptions import ConflictException, ValidationException
from app.domain.roles import ADDRESS, AGE, DOB, GENDER, LICENSE, NAME, PHONE, get_role_spec

if TYPE_CHECKING:
    from app.application.interfaces.repositories import (
        ICredentialRepository,
        IProfileStore,
    )
    from app.application.interfaces.services import IPasswordHasher
    from app.application.services.session_service import SessionService
    from app.application.services.uniqueness_checker import UniquenessChecker

logger = logging.getLogger(__name__)


class RegistrationService:
    """Orchestrates sign-up for every role.

    Order of checks: role, email/password and field formats, global name and
    phone uniqueness, email uniqueness, required fields (license included),
    license uniqueness within the role. Only then is the password hashed and
    anything written. The profile is created before the credential; if the
    credential insert fails the profile is deleted again (compensation), and
    anything the compensation misses is picked up by the reconciliation sweep.
    """

    def __init__(
        self,
        credential_repo: ICredentialRepository,
        profile_store: IProfileStore,
        uniqueness: UniquenessChecker,
        password_hasher: IPasswordHasher,
        sessions: SessionService,
        validator: ProfileFieldValidator,
    ) -> None:
        self._credentials = credential_repo
        self._profiles = profile_store
        self._uniqueness = uniqueness
        self._hasher = password_hasher
        self._sessions = sessions
        self._validator = validator

    async def register(self, command: RegistrationCommand) -> RegistrationResult:
        """Create profile and credential for a new identity and return its first session.

        Raises:
            InvalidRoleException: Unknown role.
            ValidationException: Missing/malformed input (all field errors together).
            ConflictException: Name, phone, email or license already taken.
        """
        spec = get_role_spec(command.role)
        email = normalize_email(command.email)

        errors = self._validator.credential_errors(email, command.password)
        values, field_errors = self._validator.clean(spec, _profile_fields(command))
        errors.update(field_errors)
        if errors:
            raise ValidationException("Validation failed", errors=errors)

        if NAME in values:
            await self._uniqueness.ensure_globally_unique(NAME, values[NAME])
        if PHONE in values:
            await self._uniqueness.ensure_globally_unique(PHONE, values[PHONE])
        if await self._credentials.get_by_email(email) is not None:
            raise ConflictException("email", "Email already registered")

        missing = self._validator.missing(spec, values)
        if missing:
            raise ValidationException("Validation failed", errors=missing)
        if spec.requires_license:
            await self._uniqueness.ensure_license_unique(spec.role, values[LICENSE])

        password_hash = await asyncio.to_thread(self._hasher.hash, command.password)

        profile = await self._profiles.create(
            ProfileCreate(
                role=spec.role,
                display_name=values.pop(NAME),
                email=email,
                phone_number=values.pop(PHONE),
                license_number=values.pop(LICENSE, None),
                attributes=values,
            )
        )
        try:
            credential = await self._credentials.create(
                email, password_hash, spec.role, profile.id
            )
        except Exception:
            await self._compensate(spec.role, profile.id)
            raise

        token = self._sessions.issue(
            SessionClaims(identity_id=credential.id, role=spec.role, profile_id=profile.id)
        )
        logger.info(
            "Registered %s identity %s (profile %s)", spec.role.value, credential.id, profile.id
        )
        return RegistrationResult(
            token=token,
            role=spec.role,
            profile_id=profile.id,
            display_name=profile.display_name,
        )

    async def _compensate(self, role: Role, profile_id: str) -> None:
        """Delete a profile whose credential could not be written."""
        logger.warning(
            "Credential insert failed; deleting orphaned %s profile %s", role.value, profile_id
        )
        try:
            await self._profiles.delete(role, profile_id)
        except Exception:
            logger.exception(
                "Compensating delete failed for %s profile %s; left for reconciliation",
                role.value,
                profile_id,
            )


def _profile_fields(command: RegistrationCommand) -> dict[str, Any]:
    return {
        NAME: command.display_name,
        PHONE: command.phone_number,
        LICENSE: command.license_number,
        DOB: command.date_of_birth,
        GENDER: command.gender,
        ADDRESS: command.address,
        AGE: command.age,
    }
