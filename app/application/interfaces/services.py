"""Service interfaces (ports) for the application layer.

Protocols define contracts for security primitives the services depend on (DIP).
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Protocol


# Password hashing interface
class IPasswordHasher(Protocol):
    """Protocol for adaptive, salted password hashing.

    Both methods are CPU-bound and blocking; callers run them via
    asyncio.to_thread.
    """

    def hash(self, password: str) -> str:
        """Return an irreversible hash of password."""

    def verify(self, password: str, password_hash: str) -> bool:
        """Return True if password matches password_hash (constant-time compare)."""


# Token codec interface
class ITokenCodec(Protocol):
    """Protocol for signing and verifying time-bound tokens.

    decode raises TokenExpiredException or InvalidTokenException.
    """

    def encode(self, claims: dict[str, Any], expires_delta: timedelta) -> str:
        """Return a signed token carrying claims and an expiry."""

    def decode(self, token: str) -> dict[str, Any]:
        """Return the verified claims."""
