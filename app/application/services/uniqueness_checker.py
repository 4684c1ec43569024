"""Uniqueness checks across the per-role profile stores.

display_name and phone_number must be unique across the union of all
profile stores; license_number only within its own role. These probes run
before any write so the client gets a clean 409; the identity_claim table and
per-table unique constraints remain the backstop for concurrent writers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.enums import Role
from app.domain.exceptions import ConflictException
from app.domain.roles import FIELD_LABELS, LICENSE, NAME, PHONE, ROLE_SPECS

if TYPE_CHECKING:
    from app.application.interfaces.repositories import IProfileStore

logger = logging.getLogger(__name__)

GLOBAL_UNIQUE_FIELDS = (NAME, PHONE)


class UniquenessChecker:
    """Probes every profile store for a taken value."""

    def __init__(self, profile_store: IProfileStore) -> None:
        self._profiles = profile_store

    async def find_owner(
        self,
        field: str,
        value: str,
        exclude_role: Role | None = None,
        exclude_profile_id: str | None = None,
    ) -> Role | None:
        """Return the first role whose store already holds value in field, or None.

        Stores share one session, so the probes run one after another.
        """
        for role in ROLE_SPECS:
            exclude = exclude_profile_id if role == exclude_role else None
            if await self._profiles.exists_with_value(role, field, value, exclude):
                return role
        return None

    async def ensure_globally_unique(
        self,
        field: str,
        value: str,
        exclude_role: Role | None = None,
        exclude_profile_id: str | None = None,
    ) -> None:
        """Raise ConflictException naming field if any store holds value."""
        if field not in GLOBAL_UNIQUE_FIELDS:
            raise ValueError(f"{field} is not a globally unique field")
        owner = await self.find_owner(field, value, exclude_role, exclude_profile_id)
        if owner is not None:
            label = FIELD_LABELS[field]
            logger.info("Uniqueness conflict on %s (held by a %s profile)", label, owner.value)
            raise ConflictException(label, f"This {label} is already registered")

    async def ensure_license_unique(
        self, role: Role, license_number: str, exclude_profile_id: str | None = None
    ) -> None:
        """Raise ConflictException if role's store already holds license_number."""
        if await self._profiles.exists_with_value(
            role, LICENSE, license_number, exclude_profile_id
        ):
            label = FIELD_LABELS[LICENSE]
            raise ConflictException(label, "This license number is already registered")
