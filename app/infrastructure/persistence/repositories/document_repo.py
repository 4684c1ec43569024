"""Profile document repository (IDocumentRepository). Interface methods return DTOs."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.dtos.identity import DocumentResult, DocumentUpload
from app.domain.enums import Role, VerificationStatus
from app.infrastructure.persistence.models.profile_document import ProfileDocument
from app.infrastructure.persistence.repositories.base import BaseRepository
from app.shared.utils.datetime import ensure_utc


def _document_to_result(d: ProfileDocument) -> DocumentResult:
    """Map ORM ProfileDocument to DocumentResult (bytes omitted)."""
    return DocumentResult(
        slot=d.slot,
        filename=d.filename,
        content_type=d.content_type,
        size=d.size,
        status=VerificationStatus(d.status),
        uploaded_at=ensure_utc(d.uploaded_at) or d.uploaded_at,
    )


class DocumentRepository(BaseRepository[ProfileDocument]):
    """Verification documents, one row per (role, profile_id, slot)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ProfileDocument)

    async def _get_slot(self, role: Role, profile_id: str, slot: str) -> ProfileDocument | None:
        result = await self.db.execute(
            select(ProfileDocument).where(
                ProfileDocument.role == role.value,
                ProfileDocument.profile_id == profile_id,
                ProfileDocument.slot == slot,
            )
        )
        return result.scalar_one_or_none()

    async def upsert_many(
        self,
        role: Role,
        profile_id: str,
        uploads: list[DocumentUpload],
        uploaded_at: datetime,
    ) -> list[DocumentResult]:
        """Insert or replace each slot; every stored slot is marked received."""
        stored: list[ProfileDocument] = []
        for upload in uploads:
            row = await self._get_slot(role, profile_id, upload.slot)
            if row is None:
                row = ProfileDocument(role=role.value, profile_id=profile_id, slot=upload.slot)
                self.db.add(row)
            row.filename = upload.filename
            row.content_type = upload.content_type
            row.size = upload.size
            row.data = upload.data
            row.status = VerificationStatus.RECEIVED.value
            row.uploaded_at = uploaded_at
            stored.append(row)
        await self.db.flush()
        return [_document_to_result(row) for row in stored]

    async def list_for_profile(self, role: Role, profile_id: str) -> list[DocumentResult]:
        result = await self.db.execute(
            select(ProfileDocument)
            .where(
                ProfileDocument.role == role.value,
                ProfileDocument.profile_id == profile_id,
            )
            .order_by(ProfileDocument.slot)
        )
        return [_document_to_result(row) for row in result.scalars().all()]

    async def set_status(
        self,
        role: Role,
        profile_id: str,
        status: VerificationStatus,
        slots: list[str] | None = None,
    ) -> int:
        stmt = (
            update(ProfileDocument)
            .where(
                ProfileDocument.role == role.value,
                ProfileDocument.profile_id == profile_id,
            )
            .values(status=status.value)
        )
        if slots is not None:
            stmt = stmt.where(ProfileDocument.slot.in_(slots))
        result = await self.db.execute(stmt)
        return int(result.rowcount or 0)

    async def delete_for_profile(self, role: Role, profile_id: str) -> int:
        result = await self.db.execute(
            delete(ProfileDocument).where(
                ProfileDocument.role == role.value,
                ProfileDocument.profile_id == profile_id,
            )
        )
        return int(result.rowcount or 0)
