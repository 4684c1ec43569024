"""Verification transition log repository (IVerificationLogRepository). Append-only."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.identity import VerificationTransition as TransitionDTO
from app.domain.enums import Role, VerificationStatus
from app.infrastructure.persistence.models.verification_transition import (
    VerificationTransition,
)
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc


def _transition_to_dto(t: VerificationTransition) -> TransitionDTO:
    return TransitionDTO(
        role=Role(t.role),
        profile_id=t.profile_id,
        from_status=VerificationStatus(t.from_status),
        to_status=VerificationStatus(t.to_status),
        actor=t.actor,
        reason=t.reason,
        created_at=ensure_utc(t.created_at) or t.created_at,
    )


class VerificationLogRepository(BaseRepository[VerificationTransition]):
    """Stores verification status changes; rows are never updated."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, VerificationTransition)

    async def append(self, transition: TransitionDTO) -> None:
        self.db.add(
            VerificationTransition(
                role=transition.role.value,
                profile_id=transition.profile_id,
                from_status=transition.from_status.value,
                to_status=transition.to_status.value,
                actor=transition.actor,
                reason=transition.reason,
                created_at=transition.created_at,
            )
        )
        await self.db.flush()

    async def list_for_profile(self, role: Role, profile_id: str) -> list[TransitionDTO]:
        result = await self.db.execute(
            select(VerificationTransition)
            .where(
                VerificationTransition.role == role.value,
                VerificationTransition.profile_id == profile_id,
            )
            .order_by(VerificationTransition.created_at, VerificationTransition.id)
        )
        return [_transition_to_dto(row) for row in result.scalars().all()]

    async def delete_for_profile(self, role: Role, profile_id: str) -> int:
        result = await self.db.execute(
            delete(VerificationTransition).where(
                VerificationTransition.role == role.value,
                VerificationTransition.profile_id == profile_id,
            )
        )
        return int(result.rowcount or 0)
