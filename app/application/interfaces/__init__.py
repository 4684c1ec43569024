"""Application interfaces (ports): repository and service protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.repositories import (
    ICredentialRepository,
    IDocumentRepository,
    IProfileStore,
    IVerificationLogRepository,
)
from app.application.interfaces.services import IPasswordHasher, ITokenCodec

__all__ = [
    "ICredentialRepository",
    "IDocumentRepository",
    "IPasswordHasher",
    "IProfileStore",
    "ITokenCodec",
    "IVerificationLogRepository",
]
