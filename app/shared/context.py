"""Request context management using contextvars.

Provides async-safe storage for request-scoped data (request ID and the
authenticated identity) so that log records and the verification
transition log can name who did what without threading the values
through every call.

Usage:
    set_request_id("abc123")
    set_current_identity("ckx...", "dietitian")
    identity_id = get_current_identity_id()
"""

from contextvars import ContextVar
from dataclasses import dataclass

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_identity_id: ContextVar[str | None] = ContextVar("identity_id", default=None)
_identity_role: ContextVar[str | None] = ContextVar("identity_role", default=None)

SYSTEM_ACTOR = "system"


@dataclass(frozen=True)
class ActorContext:
    """Immutable snapshot of the current actor context."""

    identity_id: str | None
    role: str | None
    request_id: str | None = None

    @property
    def label(self) -> str:
        """Actor label for audit rows: '<role>:<identity_id>' or 'system'."""
        if not self.identity_id:
            return SYSTEM_ACTOR
        return f"{self.role}:{self.identity_id}" if self.role else self.identity_id


def set_request_id(request_id: str | None) -> None:
    _request_id.set(request_id)


def get_request_id() -> str | None:
    return _request_id.get()


def set_current_identity(identity_id: str | None, role: str | None = None) -> None:
    """Set the authenticated identity for this request (called after token verification)."""
    _identity_id.set(identity_id)
    _identity_role.set(role)


def clear_current_identity() -> None:
    _identity_id.set(None)
    _identity_role.set(None)


def get_current_identity_id() -> str | None:
    return _identity_id.get()


def get_actor_context() -> ActorContext:
    """Return an immutable snapshot of the current request context."""
    return ActorContext(
        identity_id=_identity_id.get(),
        role=_identity_role.get(),
        request_id=_request_id.get(),
    )
