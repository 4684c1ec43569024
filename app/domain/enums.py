"""Domain enumerations for the identity core.

Enums represent fixed sets of domain values (actor roles, verification
status, secondary login factors).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class Role(_ValuesMixin, str, Enum):
    """Actor kind. Each role owns one profile store.

    Values match the route segments used by the web client
    (e.g. /signup/corporatepartner).
    """

    USER = "user"
    ADMIN = "admin"
    DIETITIAN = "dietitian"
    ORGANIZATION = "organization"
    CORPORATE_PARTNER = "corporatepartner"


class VerificationStatus(_ValuesMixin, str, Enum):
    """Document-review state of a professional profile (or of a single document slot)."""

    NOT_RECEIVED = "not_received"
    RECEIVED = "received"
    VERIFIED = "verified"
    REJECTED = "rejected"


class SecondaryFactor(_ValuesMixin, str, Enum):
    """Extra login check applied after the password matches."""

    NONE = "none"
    LICENSE_NUMBER = "license_number"
    ADMIN_KEY = "admin_key"


class Gender(_ValuesMixin, str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
