"""Domain layer: roles, verification state machine, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from app.domain.enums import Gender, Role, SecondaryFactor, VerificationStatus
from app.domain.exceptions import (
    AuthorizationException,
    ConflictException,
    InvalidAdminKeyException,
    InvalidCredentialsException,
    InvalidLicenseException,
    InvalidRoleException,
    InvalidTokenException,
    InvalidTransitionException,
    NutrigateException,
    ProfileNotFoundException,
    ResourceNotFoundException,
    SamePasswordException,
    TokenExpiredException,
    ValidationException,
)
from app.domain.roles import ROLE_SPECS, RoleSpec, get_role_spec, parse_role
from app.domain.verification import AccessDecision, evaluate_access

__all__ = [
    # Enums
    "Gender",
    "Role",
    "SecondaryFactor",
    "VerificationStatus",
    # Exceptions
    "AuthorizationException",
    "ConflictException",
    "InvalidAdminKeyException",
    "InvalidCredentialsException",
    "InvalidLicenseException",
    "InvalidRoleException",
    "InvalidTokenException",
    "InvalidTransitionException",
    "NutrigateException",
    "ProfileNotFoundException",
    "ResourceNotFoundException",
    "SamePasswordException",
    "TokenExpiredException",
    "ValidationException",
    # Roles and verification
    "ROLE_SPECS",
    "RoleSpec",
    "get_role_spec",
    "parse_role",
    "AccessDecision",
    "evaluate_access",
]
