"""SQLAlchemy mixins for common model patterns (DRY).

Provides: CuidMixin, TimestampMixin, ProfileColumnsMixin,
ProfessionalColumnsMixin and the combined IdentityModel.
"""

from datetime import datetime
from typing import Any, ClassVar

from sqlalchemy import DateTime, LargeBinary, String, UniqueConstraint
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from app.domain.enums import VerificationStatus
from app.shared.utils.generators import generate_cuid


def unique_constraint_name(table: str, column: str) -> str:
    """Naming convention for single-column unique constraints (uq_<table>_<column>).

    Repositories parse this name back to the conflicting field.
    """
    return f"uq_{table}_{column}"


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_cuid."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class TimestampMixin:
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class ProfileColumnsMixin:
    """Columns every profile table has, plus per-table unique constraints.

    unique_columns lists the columns that get a uq_<table>_<column> constraint.
    """

    unique_columns: ClassVar[tuple[str, ...]] = ("display_name", "phone_number")

    display_name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    phone_number: Mapped[str] = mapped_column(String(10), nullable=False)
    profile_image: Mapped[bytes | None] = mapped_column(
        LargeBinary, nullable=True, deferred=True
    )
    profile_image_type: Mapped[str | None] = mapped_column(String(100), nullable=True)

    @declared_attr.directive
    def __table_args__(cls) -> tuple[Any, ...]:
        return tuple(
            UniqueConstraint(column, name=unique_constraint_name(cls.__tablename__, column))
            for column in cls.unique_columns
        )


class ProfessionalColumnsMixin(ProfileColumnsMixin):
    """License and verification columns for verification-gated roles."""

    unique_columns: ClassVar[tuple[str, ...]] = (
        "display_name",
        "phone_number",
        "license_number",
    )

    license_number: Mapped[str] = mapped_column(String(16), nullable=False)
    verification_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=VerificationStatus.NOT_RECEIVED.value,
        server_default=VerificationStatus.NOT_RECEIVED.value,
    )
    last_document_update: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )


class IdentityModel(CuidMixin, TimestampMixin):
    """Combined mixin: CUID + created_at/updated_at. Common for identity tables."""

    __abstract__ = True
