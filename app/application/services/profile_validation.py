"""Field validation for registration and profile updates.

Rules come from the role's RoleSpec; every failing field is collected so the
client gets one ValidationException with ``errors: {field: message}``.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

from email_validator import EmailNotValidError, validate_email

from app.domain.enums import Gender
from app.domain.roles import (
    ADDRESS,
    AGE,
    DOB,
    FIELD_LABELS,
    GENDER,
    LICENSE,
    NAME,
    PHONE,
    RoleSpec,
)
from app.shared.utils.datetime import utc_now
from app.shared.utils.sanitization import strip_markup

MIN_NAME_LENGTH = 5
MAX_ADDRESS_LENGTH = 200
MIN_PROFESSIONAL_AGE = 18
_PHONE_RE = re.compile(r"^[0-9]{10}$")


def normalize_email(email: str | None) -> str | None:
    """Trim and lower-case an email; None for blank input."""
    if email is None:
        return None
    cleaned = email.strip().lower()
    return cleaned or None


def _clean_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class ProfileFieldValidator:
    """Validates credential and profile fields for one role."""

    def __init__(self, password_min_length: int = 6) -> None:
        self._password_min_length = password_min_length

    def password_error(self, password: str | None) -> str | None:
        """Return an error message if password is too short, else None."""
        if not password or len(password) < self._password_min_length:
            return f"Password must be at least {self._password_min_length} characters"
        return None

    def credential_errors(self, email: str | None, password: str | None) -> dict[str, str]:
        """Check the login pair: email present and well-formed, password long enough."""
        errors: dict[str, str] = {}
        if not email:
            errors["email"] = "Email is required"
        else:
            try:
                validate_email(email, check_deliverability=False)
            except EmailNotValidError:
                errors["email"] = "Please provide a valid email"
        password_message = self.password_error(password)
        if password_message:
            errors["password"] = password_message
        return errors

    def clean(self, spec: RoleSpec, raw: dict[str, Any]) -> tuple[dict[str, Any], dict[str, str]]:
        """Normalize the supplied fields that apply to spec's role.

        Returns (values, errors). Fields that are absent are left out of
        values; fields that do not belong to the role are ignored.
        """
        values: dict[str, Any] = {}
        errors: dict[str, str] = {}
        allowed = set(spec.required_fields)
        for attribute, value in raw.items():
            if attribute not in allowed or value is None:
                continue
            label = FIELD_LABELS[attribute]
            cleaned, message = self._clean_field(spec, attribute, value)
            if message:
                errors[label] = message
            elif cleaned is not None:
                values[attribute] = cleaned
        return values, errors

    def missing(self, spec: RoleSpec, values: dict[str, Any]) -> dict[str, str]:
        """Return errors for required fields absent from values."""
        errors: dict[str, str] = {}
        for attribute in spec.required_fields:
            if attribute not in values:
                label = FIELD_LABELS[attribute]
                if attribute == LICENSE:
                    errors[label] = f"License number is required for {spec.role.value}"
                else:
                    errors[label] = f"{label} is required"
        return errors

    def _clean_field(
        self, spec: RoleSpec, attribute: str, value: Any
    ) -> tuple[Any, str | None]:
        if attribute == NAME:
            text = _clean_text(strip_markup(str(value)))
            if text is None or len(text) < MIN_NAME_LENGTH:
                return None, f"Name must be at least {MIN_NAME_LENGTH} characters"
            return text, None
        if attribute == PHONE:
            text = _clean_text(value)
            if text is None or not _PHONE_RE.match(text):
                return None, "Phone number must be exactly 10 digits"
            return text, None
        if attribute == LICENSE:
            text = _clean_text(value)
            if text is None or spec.license_pattern is None:
                return None, "License number is not valid for this role"
            text = text.upper()
            if not spec.license_pattern.match(text):
                return None, f"Invalid license number format for {spec.role.value}"
            return text, None
        if attribute == DOB:
            return self._clean_dob(value)
        if attribute == GENDER:
            text = (_clean_text(value) or "").lower()
            if text not in Gender.values():
                return None, f"Gender must be one of: {', '.join(Gender.values())}"
            return text, None
        if attribute == ADDRESS:
            text = _clean_text(strip_markup(str(value)))
            if text is None:
                return None, "Address cannot be empty"
            if len(text) > MAX_ADDRESS_LENGTH:
                return None, f"Address must be at most {MAX_ADDRESS_LENGTH} characters"
            return text, None
        if attribute == AGE:
            try:
                age = int(value)
            except (TypeError, ValueError):
                return None, "Age must be a whole number"
            if age < MIN_PROFESSIONAL_AGE:
                return None, f"Must be at least {MIN_PROFESSIONAL_AGE} years old"
            return age, None
        return value, None

    @staticmethod
    def _clean_dob(value: Any) -> tuple[date | None, str | None]:
        if isinstance(value, datetime):
            born = value.date()
        elif isinstance(value, date):
            born = value
        else:
            try:
                born = date.fromisoformat(str(value).strip()[:10])
            except ValueError:
                return None, "Date of birth must be an ISO date (YYYY-MM-DD)"
        if born >= utc_now().date():
            return None, "Date of birth must be in the past"
        return born, None
