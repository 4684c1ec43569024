"""Valid registration input per role, for services (commands) and the API (JSON)."""

from typing import Any

from app.application.dtos.identity import RegistrationCommand
from app.domain.enums import Role

PASSWORD = "secret123"

_BASE: dict[Role, dict[str, Any]] = {
    Role.USER: {
        "email": "ada@example.com",
        "name": "Ada Lovelace",
        "phone": "0712345678",
        "dob": "1990-05-17",
        "gender": "female",
        "address": "12 Analytical Lane",
    },
    Role.ADMIN: {
        "email": "root@example.com",
        "name": "Grace Hopper",
        "phone": "0722222222",
        "dob": "1980-12-09",
        "gender": "female",
        "address": "1 Compiler Road",
    },
    Role.DIETITIAN: {
        "email": "diet@example.com",
        "name": "Dr Jane Dietitian",
        "phone": "0733333333",
        "licenseNumber": "DLN123456",
        "age": 34,
    },
    Role.ORGANIZATION: {
        "email": "org@example.com",
        "name": "Healthy Org Ltd",
        "phone": "0744444444",
        "licenseNumber": "OLN123456",
        "address": "40 Wellness Avenue",
    },
    Role.CORPORATE_PARTNER: {
        "email": "corp@example.com",
        "name": "Corporate Partner Inc",
        "phone": "0755555555",
        "licenseNumber": "CLN123456",
        "address": "99 Commerce Street",
    },
}


def signup_payload(role: Role, **overrides: Any) -> dict[str, Any]:
    """JSON body for POST /auth/signup/{role} (camelCase keys)."""
    payload = {**_BASE[role], "password": PASSWORD, **overrides}
    return {key: value for key, value in payload.items() if value is not None}


def registration_command(role: Role | str, **overrides: Any) -> RegistrationCommand:
    """RegistrationCommand with the same values as signup_payload.

    A plain string role (e.g. an invalid one) reuses the user fields.
    """
    base = _BASE[role] if isinstance(role, Role) else _BASE[Role.USER]
    data = {**base, "password": PASSWORD, **overrides}
    return RegistrationCommand(
        role=role.value if isinstance(role, Role) else role,
        email=data.get("email"),
        password=data.get("password"),
        display_name=data.get("name"),
        phone_number=data.get("phone"),
        license_number=data.get("licenseNumber"),
        date_of_birth=data.get("dob"),
        gender=data.get("gender"),
        address=data.get("address"),
        age=data.get("age"),
    )
