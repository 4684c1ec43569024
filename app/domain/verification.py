"""Verification state machine (pure domain logic).

States: not_received -> received -> {verified | rejected}. Uploading
documents moves any state back to received (resubmission). Reviews are only
accepted while documents are received. Every accepted change is recorded by
the application layer in the transition log.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from app.domain.enums import VerificationStatus
from app.domain.exceptions import (
    InvalidTransitionException,
    NutrigateException,
    VerificationPendingException,
    VerificationRejectedException,
)

_S = VerificationStatus

ALLOWED_TRANSITIONS: dict[VerificationStatus, frozenset[VerificationStatus]] = {
    _S.NOT_RECEIVED: frozenset({_S.RECEIVED}),
    _S.RECEIVED: frozenset({_S.RECEIVED, _S.VERIFIED, _S.REJECTED}),
    _S.VERIFIED: frozenset({_S.RECEIVED}),
    _S.REJECTED: frozenset({_S.RECEIVED}),
}

REVIEW_DECISIONS = frozenset({_S.VERIFIED, _S.REJECTED})


def ensure_transition(
    current: VerificationStatus, target: VerificationStatus
) -> VerificationStatus:
    """Return target if current -> target is allowed; raise InvalidTransitionException otherwise."""
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransitionException(current.value, target.value)
    return target


def collapse_statuses(statuses: Iterable[VerificationStatus]) -> VerificationStatus:
    """Collapse per-slot statuses into the profile's overall status.

    No slots: not_received. Any slot still awaiting review: received.
    Otherwise any rejected slot: rejected. Otherwise verified.
    """
    seen = set(statuses)
    if not seen or seen == {_S.NOT_RECEIVED}:
        return _S.NOT_RECEIVED
    if _S.RECEIVED in seen or _S.NOT_RECEIVED in seen:
        return _S.RECEIVED
    if _S.REJECTED in seen:
        return _S.REJECTED
    return _S.VERIFIED


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of the access gate. reason is None when allowed."""

    allowed: bool
    status: VerificationStatus
    reason: str | None = None

    def raise_if_denied(self) -> None:
        if self.allowed:
            return
        error: NutrigateException
        if self.status is _S.REJECTED:
            error = VerificationRejectedException()
        else:
            error = VerificationPendingException(self.status.value)
        raise error


def evaluate_access(status: VerificationStatus | str | None) -> AccessDecision:
    """Read-and-branch gate used before verification-gated operations.

    verified allows; rejected denies with VERIFICATION_REJECTED; anything
    else (including unknown or missing values) denies as VERIFICATION_PENDING.
    """
    try:
        resolved = VerificationStatus(status) if status else _S.NOT_RECEIVED
    except ValueError:
        resolved = _S.NOT_RECEIVED
    if resolved is _S.VERIFIED:
        return AccessDecision(allowed=True, status=resolved)
    if resolved is _S.REJECTED:
        return AccessDecision(allowed=False, status=resolved, reason="VERIFICATION_REJECTED")
    return AccessDecision(allowed=False, status=resolved, reason="VERIFICATION_PENDING")
