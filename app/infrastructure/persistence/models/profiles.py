"""Per-role profile ORM models and the Role -> model dispatch table."""

from datetime import date

from sqlalchemy import Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import Role
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    IdentityModel,
    ProfessionalColumnsMixin,
    ProfileColumnsMixin,
)


class UserProfile(IdentityModel, ProfileColumnsMixin, Base):
    """End-user profile. Table: user_profile."""

    __tablename__ = "user_profile"

    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    gender: Mapped[str] = mapped_column(String(10), nullable=False)
    address: Mapped[str] = mapped_column(String(200), nullable=False)


class AdminProfile(IdentityModel, ProfileColumnsMixin, Base):
    """Administrator profile. Table: admin_profile."""

    __tablename__ = "admin_profile"

    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    gender: Mapped[str] = mapped_column(String(10), nullable=False)
    address: Mapped[str] = mapped_column(String(200), nullable=False)


class DietitianProfile(IdentityModel, ProfessionalColumnsMixin, Base):
    """Dietitian profile (license DLNxxxxxx). Table: dietitian_profile."""

    __tablename__ = "dietitian_profile"

    age: Mapped[int] = mapped_column(Integer, nullable=False)


class OrganizationProfile(IdentityModel, ProfessionalColumnsMixin, Base):
    """Certifying organization profile (license OLNxxxxxx). Table: organization_profile."""

    __tablename__ = "organization_profile"

    address: Mapped[str] = mapped_column(String(200), nullable=False)


class CorporatePartnerProfile(IdentityModel, ProfessionalColumnsMixin, Base):
    """Corporate partner profile (license CLNxxxxxx). Table: corporate_partner_profile."""

    __tablename__ = "corporate_partner_profile"

    address: Mapped[str] = mapped_column(String(200), nullable=False)


ProfileModel = (
    UserProfile
    | AdminProfile
    | DietitianProfile
    | OrganizationProfile
    | CorporatePartnerProfile
)

PROFILE_MODELS: dict[Role, type[ProfileModel]] = {
    Role.USER: UserProfile,
    Role.ADMIN: AdminProfile,
    Role.DIETITIAN: DietitianProfile,
    Role.ORGANIZATION: OrganizationProfile,
    Role.CORPORATE_PARTNER: CorporatePartnerProfile,
}

_missing = set(Role) - set(PROFILE_MODELS)
if _missing:
    raise RuntimeError(f"PROFILE_MODELS has no entry for: {sorted(r.value for r in _missing)}")
