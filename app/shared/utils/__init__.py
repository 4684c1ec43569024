"""Shared utilities: datetime, ID generators, and markup stripping."""

from app.shared.utils.datetime import age_on, ensure_utc, utc_now
from app.shared.utils.generators import generate_cuid
from app.shared.utils.sanitization import strip_markup

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "age_on",
    "strip_markup",
]
