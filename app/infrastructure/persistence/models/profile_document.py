"""ProfileDocument ORM model: one verification document per profile slot."""

from datetime import datetime

from sqlalchemy import (
    BigInteger,
    DateTime,
    Index,
    LargeBinary,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import VerificationStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import IdentityModel


class ProfileDocument(IdentityModel, Base):
    """Document entity. Table: profile_document. Re-uploading a slot replaces the row."""

    __tablename__ = "profile_document"

    role: Mapped[str] = mapped_column(String(32), nullable=False)
    profile_id: Mapped[str] = mapped_column(String, nullable=False)
    slot: Mapped[str] = mapped_column(String(100), nullable=False)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False, deferred=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=VerificationStatus.RECEIVED.value
    )
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint("role", "profile_id", "slot", name="uq_profile_document_slot"),
        Index("ix_profile_document_owner", "role", "profile_id"),
    )
