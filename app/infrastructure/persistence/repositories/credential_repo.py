"""Credential repository. Interface methods return application DTOs."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.identity import CredentialRecord
from app.domain.enums import Role
from app.infrastructure.persistence.models.credential import Credential
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc


def _credential_to_record(c: Credential) -> CredentialRecord:
    """Map ORM Credential to application CredentialRecord."""
    return CredentialRecord(
        id=c.id,
        email=c.email,
        password_hash=c.password_hash,
        role=Role(c.role),
        profile_id=c.profile_id,
        created_at=ensure_utc(c.created_at),
    )


class CredentialRepository(BaseRepository[Credential]):
    """Credential store (ICredentialRepository). Emails are stored normalized."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Credential)

    async def get_by_email(self, email: str) -> CredentialRecord | None:
        result = await self.db.execute(select(Credential).where(Credential.email == email))
        row = result.scalar_one_or_none()
        return _credential_to_record(row) if row else None

    async def get_by_id(self, credential_id: str) -> CredentialRecord | None:  # type: ignore[override]
        row = await super().get_by_id(credential_id)
        return _credential_to_record(row) if row else None

    async def create(  # type: ignore[override]
        self, email: str, password_hash: str, role: Role, profile_id: str
    ) -> CredentialRecord:
        """Insert credential; ConflictException('email') on duplicate email."""
        row = Credential(
            email=email,
            password_hash=password_hash,
            role=role.value,
            profile_id=profile_id,
        )
        created = await super().create(row)
        return _credential_to_record(created)

    async def update_password_hash(self, credential_id: str, password_hash: str) -> bool:
        result = await self.db.execute(
            update(Credential)
            .where(Credential.id == credential_id)
            .values(password_hash=password_hash)
        )
        return bool(result.rowcount)

    async def profile_ids_for_role(self, role: Role) -> set[str]:
        result = await self.db.execute(
            select(Credential.profile_id).where(Credential.role == role.value)
        )
        return set(result.scalars().all())

    async def list_all(self, skip: int = 0, limit: int = 1000) -> list[CredentialRecord]:
        result = await self.db.execute(
            select(Credential)
            .order_by(Credential.created_at, Credential.id)
            .offset(skip)
            .limit(limit)
        )
        return [_credential_to_record(row) for row in result.scalars().all()]
