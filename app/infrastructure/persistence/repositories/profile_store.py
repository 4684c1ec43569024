"""Profile store: one façade over the five per-role profile tables (IProfileStore).

Global uniqueness of display_name and phone_number is backed by identity_claim
rows written in the same savepoint as the profile row; per-table unique
constraints back name, phone and license within a role.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.identity import (
    ProfileCreate,
    ProfileImage,
    ProfileRef,
    ProfileResult,
)
from app.domain.enums import Role, VerificationStatus
from app.domain.exceptions import ConflictException
from app.domain.roles import FIELD_LABELS, NAME, PHONE, get_role_spec
from app.infrastructure.persistence.models.identity_claim import IdentityClaim, claim_key
from app.infrastructure.persistence.models.profiles import PROFILE_MODELS
from app.infrastructure.persistence.repositories.base import conflict_from_integrity_error
from app.shared.utils.datetime import ensure_utc
from app.shared.utils.generators import generate_cuid

logger = logging.getLogger(__name__)

CLAIMED_FIELDS = (NAME, PHONE)


def _profile_to_result(role: Role, row: Any) -> ProfileResult:
    """Map a profile ORM row to ProfileResult (image bytes never loaded here)."""
    spec = get_role_spec(role)
    status = getattr(row, "verification_status", None)
    return ProfileResult(
        id=row.id,
        role=role,
        display_name=row.display_name,
        email=row.email,
        phone_number=row.phone_number,
        attributes={name: getattr(row, name) for name in spec.attributes},
        license_number=getattr(row, "license_number", None),
        verification_status=VerificationStatus(status) if status else None,
        last_document_update=ensure_utc(getattr(row, "last_document_update", None)),
        has_profile_image=row.profile_image_type is not None,
        created_at=ensure_utc(row.created_at),
    )


class ProfileStore:
    """Role-dispatched profile repository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    @staticmethod
    def _model(role: Role) -> Any:
        return PROFILE_MODELS[role]

    async def _get_row(self, role: Role, profile_id: str) -> Any:
        model = self._model(role)
        result = await self.db.execute(select(model).where(model.id == profile_id))
        return result.scalar_one_or_none()

    async def _claim(self, field: str, value: str, role: Role, profile_id: str) -> None:
        """Reserve value for field; ConflictException if another profile holds it."""
        try:
            async with self.db.begin_nested():
                self.db.add(
                    IdentityClaim(
                        id=claim_key(field, value),
                        field=field,
                        role=role.value,
                        profile_id=profile_id,
                    )
                )
                await self.db.flush()
        except IntegrityError as e:
            raise ConflictException(FIELD_LABELS[field]) from e

    async def _release(self, field: str, value: str) -> None:
        await self.db.execute(
            delete(IdentityClaim).where(IdentityClaim.id == claim_key(field, value))
        )

    async def get(self, role: Role, profile_id: str) -> ProfileResult | None:
        row = await self._get_row(role, profile_id)
        return _profile_to_result(role, row) if row else None

    async def create(self, data: ProfileCreate) -> ProfileResult:
        """Insert claims and profile row in one savepoint; ConflictException on duplicates."""
        model = self._model(data.role)
        profile_id = generate_cuid()
        columns: dict[str, Any] = {
            "id": profile_id,
            "display_name": data.display_name,
            "email": data.email,
            "phone_number": data.phone_number,
            **data.attributes,
        }
        if data.license_number is not None:
            columns["license_number"] = data.license_number
        row = model(**columns)
        try:
            async with self.db.begin_nested():
                await self._claim(NAME, data.display_name, data.role, profile_id)
                await self._claim(PHONE, data.phone_number, data.role, profile_id)
                self.db.add(row)
                await self.db.flush()
        except IntegrityError as e:
            raise conflict_from_integrity_error(e, model.__tablename__) from e
        await self.db.refresh(row)
        return _profile_to_result(data.role, row)

    async def update(
        self, role: Role, profile_id: str, changes: dict[str, Any]
    ) -> ProfileResult | None:
        """Apply changes; moves identity claims when name or phone change."""
        model = self._model(role)
        row = await self._get_row(role, profile_id)
        if row is None:
            return None
        try:
            async with self.db.begin_nested():
                for field in CLAIMED_FIELDS:
                    new_value = changes.get(field)
                    old_value = getattr(row, field)
                    if new_value is None or new_value == old_value:
                        continue
                    await self._release(field, old_value)
                    await self._claim(field, new_value, role, profile_id)
                for name, value in changes.items():
                    setattr(row, name, value)
                await self.db.flush()
        except IntegrityError as e:
            raise conflict_from_integrity_error(e, model.__tablename__) from e
        await self.db.refresh(row)
        return _profile_to_result(role, row)

    async def delete(self, role: Role, profile_id: str) -> bool:
        """Delete the profile row and its claims."""
        model = self._model(role)
        await self.db.execute(
            delete(IdentityClaim).where(
                IdentityClaim.role == role.value, IdentityClaim.profile_id == profile_id
            )
        )
        result = await self.db.execute(delete(model).where(model.id == profile_id))
        return bool(result.rowcount)

    async def exists_with_value(
        self,
        role: Role,
        field: str,
        value: str,
        exclude_profile_id: str | None = None,
    ) -> bool:
        model = self._model(role)
        column = getattr(model, field, None)
        if column is None:
            return False
        stmt = select(model.id).where(column == value)
        if exclude_profile_id is not None:
            stmt = stmt.where(model.id != exclude_profile_id)
        result = await self.db.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    async def set_verification_status(
        self,
        role: Role,
        profile_id: str,
        status: VerificationStatus,
        last_document_update: datetime | None = None,
    ) -> None:
        model = self._model(role)
        values: dict[str, Any] = {"verification_status": status.value}
        if last_document_update is not None:
            values["last_document_update"] = last_document_update
        await self.db.execute(update(model).where(model.id == profile_id).values(**values))

    async def set_profile_image(
        self, role: Role, profile_id: str, data: bytes, content_type: str
    ) -> bool:
        model = self._model(role)
        result = await self.db.execute(
            update(model)
            .where(model.id == profile_id)
            .values(profile_image=data, profile_image_type=content_type)
        )
        return bool(result.rowcount)

    async def get_profile_image(self, role: Role, profile_id: str) -> ProfileImage | None:
        model = self._model(role)
        result = await self.db.execute(
            select(model.profile_image, model.profile_image_type).where(model.id == profile_id)
        )
        found = result.one_or_none()
        if found is None or found.profile_image is None:
            return None
        return ProfileImage(
            data=found.profile_image,
            content_type=found.profile_image_type or "application/octet-stream",
        )

    async def list_created_before(self, role: Role, cutoff: datetime) -> list[ProfileRef]:
        model = self._model(role)
        result = await self.db.execute(
            select(model.id, model.created_at)
            .where(model.created_at < cutoff)
            .order_by(model.created_at)
        )
        return [
            ProfileRef(role=role, profile_id=profile_id, created_at=ensure_utc(created_at))
            for profile_id, created_at in result.all()
        ]
