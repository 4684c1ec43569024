"""Persistence models: ORM entities and mixins."""

from app.infrastructure.persistence.models.credential import Credential
from app.infrastructure.persistence.models.identity_claim import IdentityClaim, claim_key
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    IdentityModel,
    ProfessionalColumnsMixin,
    ProfileColumnsMixin,
    TimestampMixin,
    unique_constraint_name,
)
from app.infrastructure.persistence.models.profile_document import ProfileDocument
from app.infrastructure.persistence.models.profiles import (
    PROFILE_MODELS,
    AdminProfile,
    CorporatePartnerProfile,
    DietitianProfile,
    OrganizationProfile,
    ProfileModel,
    UserProfile,
)
from app.infrastructure.persistence.models.verification_transition import (
    VerificationTransition,
)

__all__ = [
    "AdminProfile",
    "CorporatePartnerProfile",
    "Credential",
    "CuidMixin",
    "DietitianProfile",
    "IdentityClaim",
    "IdentityModel",
    "OrganizationProfile",
    "PROFILE_MODELS",
    "ProfessionalColumnsMixin",
    "ProfileColumnsMixin",
    "ProfileDocument",
    "ProfileModel",
    "TimestampMixin",
    "UserProfile",
    "VerificationTransition",
    "claim_key",
    "unique_constraint_name",
]
