"""Application layer: DTOs, interfaces, services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (credential store, profile stores,
document store, verification log, password hasher, token codec).
"""

from app.application.interfaces import (
    ICredentialRepository,
    IDocumentRepository,
    IPasswordHasher,
    IProfileStore,
    ITokenCodec,
    IVerificationLogRepository,
)
from app.application.services import (
    AuthenticationService,
    PasswordService,
    ProfileService,
    ReconciliationService,
    RegistrationService,
    SessionService,
    UniquenessChecker,
    VerificationService,
)

__all__ = [
    "AuthenticationService",
    "ICredentialRepository",
    "IDocumentRepository",
    "IPasswordHasher",
    "IProfileStore",
    "ITokenCodec",
    "IVerificationLogRepository",
    "PasswordService",
    "ProfileService",
    "ReconciliationService",
    "RegistrationService",
    "SessionService",
    "UniquenessChecker",
    "VerificationService",
]
