"""JWT session token encoding and verification (python-jose).

Uses app.core.config for secret and algorithm. Expired tokens are reported
separately from malformed or badly signed ones so clients can tell
"log in again" from "corrupt session".
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import ExpiredSignatureError, JWTError, jwt

from app.core.config import Settings, get_settings
from app.domain.exceptions import InvalidTokenException, TokenExpiredException


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta,
    settings: Settings | None = None,
) -> str:
    """Create a signed JWT with the given claims and an ``exp`` of now + expires_delta.

    Args:
        data: Claims to encode (sub, role, profile_id).
        expires_delta: Token lifetime.
        settings: Optional settings override; defaults to get_settings().

    Returns:
        Encoded JWT string.
    """
    settings = settings or get_settings()
    to_encode = data.copy()
    now = datetime.now(UTC)
    to_encode["iat"] = now
    to_encode["exp"] = now + expires_delta
    encoded = jwt.encode(
        to_encode,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str, settings: Settings | None = None) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Enforces presence of exp and sub.

    Raises:
        TokenExpiredException: Signature is valid but exp has passed.
        InvalidTokenException: Malformed token, bad signature, or missing claims.
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except ExpiredSignatureError as e:
        raise TokenExpiredException() from e
    except JWTError as e:
        raise InvalidTokenException() from e
    if "sub" not in payload:
        raise InvalidTokenException()
    return payload


class JoseTokenCodec:
    """ITokenCodec over create_access_token / verify_token."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings

    def encode(self, claims: dict[str, Any], expires_delta: timedelta) -> str:
        return create_access_token(claims, expires_delta, self._settings)

    def decode(self, token: str) -> dict[str, Any]:
        return verify_token(token, self._settings)
