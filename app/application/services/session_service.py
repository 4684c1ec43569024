"""Session issuance and verification over a signed-token codec."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.application.dtos.identity import SessionClaims, SessionTTL
from app.domain.exceptions import InvalidRoleException, InvalidTokenException
from app.domain.roles import parse_role

if TYPE_CHECKING:
    from app.application.interfaces.services import ITokenCodec

CLAIM_IDENTITY = "sub"
CLAIM_ROLE = "role"
CLAIM_PROFILE = "profile_id"


class SessionService:
    """Issues and verifies session tokens carrying identity id, role and profile id.

    There is no revocation list: expiry is the only bound on a token's lifetime.
    """

    def __init__(
        self,
        codec: ITokenCodec,
        default_ttl: SessionTTL,
        remember_me_ttl: SessionTTL,
    ) -> None:
        self._codec = codec
        self.default_ttl = default_ttl
        self.remember_me_ttl = remember_me_ttl

    def ttl_for(self, remember_me: bool) -> SessionTTL:
        return self.remember_me_ttl if remember_me else self.default_ttl

    def issue(self, claims: SessionClaims, ttl: SessionTTL | None = None) -> str:
        """Return a signed token for claims (default TTL when ttl is None)."""
        payload: dict[str, Any] = {
            CLAIM_IDENTITY: claims.identity_id,
            CLAIM_ROLE: claims.role.value,
            CLAIM_PROFILE: claims.profile_id,
        }
        return self._codec.encode(payload, (ttl or self.default_ttl).delta)

    def verify(self, token: str) -> SessionClaims:
        """Return the claims of a valid token.

        Raises:
            TokenExpiredException: Signature valid but expiry passed.
            InvalidTokenException: Malformed, badly signed, or missing claims.
        """
        payload = self._codec.decode(token)
        identity_id = payload.get(CLAIM_IDENTITY)
        profile_id = payload.get(CLAIM_PROFILE)
        if not identity_id or not profile_id:
            raise InvalidTokenException()
        try:
            role = parse_role(str(payload.get(CLAIM_ROLE) or ""))
        except InvalidRoleException:
            raise InvalidTokenException() from None
        return SessionClaims(
            identity_id=str(identity_id), role=role, profile_id=str(profile_id)
        )
