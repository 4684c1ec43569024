"""IdentityClaim ORM model: reservation of a globally unique profile value."""

from datetime import datetime

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.infrastructure.persistence.database import Base


def claim_key(field: str, value: str) -> str:
    """Primary key of the claim for value in field (e.g. 'display_name:Jane Runner')."""
    return f"{field}:{value}"


class IdentityClaim(Base):
    """One row per taken display_name / phone_number across every profile table.

    Written in the same transaction as the profile row; the primary key is the
    storage-level arbiter when two registrations race on the same value.
    """

    __tablename__ = "identity_claim"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    field: Mapped[str] = mapped_column(String(32), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    profile_id: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (Index("ix_identity_claim_owner", "role", "profile_id"),)
