"""Password lifecycle: authenticated password change with re-use prevention."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from app.domain.exceptions import (
    InvalidCredentialsException,
    ResourceNotFoundException,
    SamePasswordException,
    ValidationException,
)

if TYPE_CHECKING:
    from app.application.interfaces.repositories import ICredentialRepository
    from app.application.interfaces.services import IPasswordHasher
    from app.application.services.profile_validation import ProfileFieldValidator

logger = logging.getLogger(__name__)


class PasswordService:
    """Change the password of the identity behind a verified session.

    Other sessions stay valid until they expire; there is no session table to
    revoke against.
    """

    def __init__(
        self,
        credential_repo: ICredentialRepository,
        password_hasher: IPasswordHasher,
        validator: ProfileFieldValidator,
    ) -> None:
        self._credentials = credential_repo
        self._hasher = password_hasher
        self._validator = validator

    async def change_password(
        self, identity_id: str, old_password: str | None, new_password: str | None
    ) -> None:
        """Verify old_password, reject re-use and short passwords, then persist the new hash.

        Raises:
            ValidationException: Missing fields or new password too short.
            ResourceNotFoundException: Session identity no longer exists.
            InvalidCredentialsException: old_password does not match.
            SamePasswordException: new_password equals the current password.
        """
        if not old_password or not new_password:
            raise ValidationException(
                "Old password and new password are required",
                errors={
                    key: "This field is required"
                    for key, value in (("oldPassword", old_password), ("newPassword", new_password))
                    if not value
                },
            )
        credential = await self._credentials.get_by_id(identity_id)
        if credential is None:
            raise ResourceNotFoundException("credential", identity_id)

        if not await asyncio.to_thread(
            self._hasher.verify, old_password, credential.password_hash
        ):
            raise InvalidCredentialsException()
        if await asyncio.to_thread(
            self._hasher.verify, new_password, credential.password_hash
        ):
            raise SamePasswordException()

        message = self._validator.password_error(new_password)
        if message:
            raise ValidationException(message, field="newPassword")

        new_hash = await asyncio.to_thread(self._hasher.hash, new_password)
        if not await self._credentials.update_password_hash(credential.id, new_hash):
            raise ResourceNotFoundException("credential", identity_id)
        logger.info("Password changed for identity %s", credential.id)
