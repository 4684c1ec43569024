"""Application services: registration, authentication, sessions, passwords,
verification, profiles and reconciliation."""

from app.application.services.authentication_service import AuthenticationService
from app.application.services.password_service import PasswordService
from app.application.services.profile_service import ProfileService
from app.application.services.profile_validation import (
    ProfileFieldValidator,
    normalize_email,
)
from app.application.services.reconciliation_service import ReconciliationService
from app.application.services.registration_service import RegistrationService
from app.application.services.session_service import SessionService
from app.application.services.uniqueness_checker import UniquenessChecker
from app.application.services.verification_service import VerificationService

__all__ = [
    "AuthenticationService",
    "PasswordService",
    "ProfileFieldValidator",
    "ProfileService",
    "ReconciliationService",
    "RegistrationService",
    "SessionService",
    "UniquenessChecker",
    "VerificationService",
    "normalize_email",
]
