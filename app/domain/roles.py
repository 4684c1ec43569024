"""Role dispatch table.

Every rule that differs between actor kinds (required profile fields,
license format, secondary login factor, verification gating) is declared
once in ROLE_SPECS. Services look rules up here instead of branching on
role strings.
"""

import re
from dataclasses import dataclass

from app.domain.enums import Role, SecondaryFactor
from app.domain.exceptions import InvalidRoleException

# Profile attribute names shared by services, DTOs and ORM models.
NAME = "display_name"
PHONE = "phone_number"
LICENSE = "license_number"
DOB = "date_of_birth"
GENDER = "gender"
ADDRESS = "address"
AGE = "age"

# Client-facing field names, used in request bodies and error payloads.
FIELD_LABELS = {
    NAME: "name",
    PHONE: "phone",
    LICENSE: "licenseNumber",
    DOB: "dob",
    GENDER: "gender",
    ADDRESS: "address",
    AGE: "age",
}

_ROLE_ALIASES = {
    "corporate-partner": Role.CORPORATE_PARTNER,
    "corporate_partner": Role.CORPORATE_PARTNER,
}


@dataclass(frozen=True)
class RoleSpec:
    """Rules for one actor kind."""

    role: Role
    attributes: tuple[str, ...]
    license_pattern: re.Pattern[str] | None = None
    secondary_factor: SecondaryFactor = SecondaryFactor.NONE
    verification_gated: bool = False

    @property
    def requires_license(self) -> bool:
        return self.license_pattern is not None

    @property
    def required_fields(self) -> tuple[str, ...]:
        """Fields that must be present on the profile (license included when needed)."""
        base = (NAME, PHONE, *self.attributes)
        return (*base, LICENSE) if self.requires_license else base

    def accepts(self, attribute: str) -> bool:
        return attribute in self.attributes


ROLE_SPECS: dict[Role, RoleSpec] = {
    Role.USER: RoleSpec(
        role=Role.USER,
        attributes=(DOB, GENDER, ADDRESS),
    ),
    Role.ADMIN: RoleSpec(
        role=Role.ADMIN,
        attributes=(DOB, GENDER, ADDRESS),
        secondary_factor=SecondaryFactor.ADMIN_KEY,
    ),
    Role.DIETITIAN: RoleSpec(
        role=Role.DIETITIAN,
        attributes=(AGE,),
        license_pattern=re.compile(r"^DLN[0-9]{6}$"),
        secondary_factor=SecondaryFactor.LICENSE_NUMBER,
        verification_gated=True,
    ),
    Role.ORGANIZATION: RoleSpec(
        role=Role.ORGANIZATION,
        attributes=(ADDRESS,),
        license_pattern=re.compile(r"^OLN[0-9]{6}$"),
        secondary_factor=SecondaryFactor.LICENSE_NUMBER,
        verification_gated=True,
    ),
    Role.CORPORATE_PARTNER: RoleSpec(
        role=Role.CORPORATE_PARTNER,
        attributes=(ADDRESS,),
        license_pattern=re.compile(r"^CLN[0-9]{6}$"),
        secondary_factor=SecondaryFactor.LICENSE_NUMBER,
        verification_gated=True,
    ),
}

_missing = set(Role) - set(ROLE_SPECS)
if _missing:
    raise RuntimeError(f"ROLE_SPECS has no entry for: {sorted(r.value for r in _missing)}")


def parse_role(value: str | Role) -> Role:
    """Return the Role for a route/body value; raise InvalidRoleException otherwise.

    Case-insensitive; accepts 'corporate-partner' and 'corporate_partner'
    as aliases of 'corporatepartner'.
    """
    if isinstance(value, Role):
        return value
    key = (value or "").strip().lower()
    if key in _ROLE_ALIASES:
        return _ROLE_ALIASES[key]
    try:
        return Role(key)
    except ValueError:
        raise InvalidRoleException(value) from None


def get_role_spec(role: str | Role) -> RoleSpec:
    """Return the RoleSpec for role (parsed with parse_role)."""
    return ROLE_SPECS[parse_role(role)]


def gated_roles() -> list[Role]:
    """Roles whose profiles go through document verification."""
    return [spec.role for spec in ROLE_SPECS.values() if spec.verification_gated]
