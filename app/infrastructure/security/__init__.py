"""Security: JWT session tokens and password hashing."""

from app.infrastructure.security.jwt import (
    JoseTokenCodec,
    create_access_token,
    verify_token,
)
from app.infrastructure.security.password import (
    BcryptPasswordHasher,
    get_password_hash,
    verify_password,
)

__all__ = [
    "BcryptPasswordHasher",
    "JoseTokenCodec",
    "create_access_token",
    "get_password_hash",
    "verify_password",
    "verify_token",
]
