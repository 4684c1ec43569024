"""Profile maintenance for the identity behind a session: details, updates, image."""

from __future__ import annotations

import dataclasses
import logging
from datetime import date
from typing import TYPE_CHECKING, Any

from app.application.dtos.identity import ProfileImage, ProfileResult, SessionClaims
from app.domain.exceptions import (
    ProfileNotFoundException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.roles import ADDRESS, AGE, DOB, GENDER, NAME, PHONE, get_role_spec
from app.shared.utils.datetime import age_on

if TYPE_CHECKING:
    from app.application.interfaces.repositories import IProfileStore
    from app.application.services.profile_validation import ProfileFieldValidator
    from app.application.services.uniqueness_checker import UniquenessChecker

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (NAME, PHONE, ADDRESS, DOB, GENDER, AGE)


class ProfileService:
    """Read and update the caller's own profile."""

    def __init__(
        self,
        profile_store: IProfileStore,
        uniqueness: UniquenessChecker,
        validator: ProfileFieldValidator,
        max_image_size: int,
    ) -> None:
        self._profiles = profile_store
        self._uniqueness = uniqueness
        self._validator = validator
        self._max_image_size = max_image_size

    async def get_details(self, claims: SessionClaims) -> ProfileResult:
        """Return the caller's profile; age is derived from dob where the role stores a dob."""
        profile = await self._profiles.get(claims.role, claims.profile_id)
        if profile is None:
            raise ProfileNotFoundException(claims.role.value, claims.profile_id)
        born = profile.attributes.get(DOB)
        if isinstance(born, date) and AGE not in profile.attributes:
            attributes = {**profile.attributes, AGE: age_on(born)}
            profile = dataclasses.replace(profile, attributes=attributes)
        return profile

    async def update_profile(
        self, claims: SessionClaims, changes: dict[str, Any]
    ) -> ProfileResult:
        """Apply the allowed changes for the caller's role.

        Name and phone are re-checked for global uniqueness, ignoring the
        caller's own profile.

        Raises:
            ValidationException: Nothing to update, or a field fails validation.
            ConflictException: New name/phone already taken.
        """
        spec = get_role_spec(claims.role)
        applicable = set(UPDATABLE_FIELDS) & set(spec.required_fields)
        supplied = {
            key: value
            for key, value in changes.items()
            if key in applicable and value is not None
        }
        if not supplied:
            raise ValidationException("No valid fields to update")
        values, errors = self._validator.clean(spec, supplied)
        if errors:
            raise ValidationException("Validation failed", errors=errors)

        for field in (NAME, PHONE):
            if field in values:
                await self._uniqueness.ensure_globally_unique(
                    field,
                    values[field],
                    exclude_role=spec.role,
                    exclude_profile_id=claims.profile_id,
                )
        updated = await self._profiles.update(spec.role, claims.profile_id, values)
        if updated is None:
            raise ProfileNotFoundException(spec.role.value, claims.profile_id)
        logger.info(
            "Updated %s profile %s fields: %s",
            spec.role.value,
            claims.profile_id,
            ", ".join(sorted(values)),
        )
        return updated

    async def set_profile_image(
        self, claims: SessionClaims, data: bytes, content_type: str | None
    ) -> None:
        """Store the caller's profile image (image/* only, size-capped)."""
        if not content_type or not content_type.startswith("image/"):
            raise ValidationException("Only image files are allowed", field="image")
        if not data:
            raise ValidationException("Image file is empty", field="image")
        if len(data) > self._max_image_size:
            raise ValidationException(
                f"Image exceeds the {self._max_image_size} byte limit", field="image"
            )
        if not await self._profiles.set_profile_image(
            claims.role, claims.profile_id, data, content_type
        ):
            raise ProfileNotFoundException(claims.role.value, claims.profile_id)
        logger.info("Profile image updated for %s profile %s", claims.role.value, claims.profile_id)

    async def get_profile_image(self, claims: SessionClaims) -> ProfileImage:
        image = await self._profiles.get_profile_image(claims.role, claims.profile_id)
        if image is None:
            raise ResourceNotFoundException("profile_image", claims.profile_id)
        return image
