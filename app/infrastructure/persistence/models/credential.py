"""Credential ORM model: one login identity per email."""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import IdentityModel


class Credential(IdentityModel, Base):
    """Credential entity. Table: credential.

    (role, profile_id) points into the role's profile table; it is unique so
    a profile is owned by at most one credential.
    """

    __tablename__ = "credential"

    email: Mapped[str] = mapped_column(String(320), nullable=False)
    password_hash: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    profile_id: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("email", name="uq_credential_email"),
        UniqueConstraint("role", "profile_id", name="uq_credential_profile"),
    )
