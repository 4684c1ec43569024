"""Shared utilities: request context, logging, and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from app.shared.context import (
    ActorContext,
    clear_current_identity,
    get_actor_context,
    get_current_identity_id,
    get_request_id,
    set_current_identity,
    set_request_id,
)
from app.shared.utils import ensure_utc, generate_cuid, utc_now

__all__ = [
    "ActorContext",
    "clear_current_identity",
    "get_actor_context",
    "get_current_identity_id",
    "get_request_id",
    "set_current_identity",
    "set_request_id",
    "generate_cuid",
    "utc_now",
    "ensure_utc",
]
