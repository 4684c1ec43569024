"""Domain exceptions for the identity core.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class NutrigateException(Exception):
    """Base exception for all identity-core errors.

    All custom exceptions inherit from this class so that one handler can
    render them consistently. Presentation layer maps them to HTTP responses
    using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return the error body: stable code, message, and details when present."""
        body: dict[str, Any] = {"error": self.error_code, "message": self.message}
        if self.details:
            body["details"] = self.details
        return body


class ValidationException(NutrigateException):
    """Raised when input validation fails (missing field, bad format or range).

    Either a single field or a mapping of field -> message can be given;
    the mapping is rendered as ``errors`` in the response body.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: dict[str, str] | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = dict(errors)
        super().__init__(message, "VALIDATION_ERROR", details)

    @property
    def errors(self) -> dict[str, str]:
        return self.details.get("errors", {})

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.errors:
            body["errors"] = self.errors
        return body


class InvalidRoleException(NutrigateException):
    """Raised when a role string does not name one of the known actor kinds."""

    def __init__(self, role: str) -> None:
        super().__init__(
            "Invalid role specified",
            "INVALID_ROLE",
            {"role": role},
        )


class ConflictException(NutrigateException):
    """Raised when a unique value (email, name, phone, license) is already taken."""

    def __init__(self, field: str, message: str | None = None) -> None:
        """Initialize with the conflicting field.

        Args:
            field: Field whose value is already in use (e.g. 'name', 'email').
            message: Optional human-readable message; a generic one is built otherwise.
        """
        super().__init__(
            message or f"{field} is already registered",
            "CONFLICT",
            {"field": field},
        )

    @property
    def field(self) -> str:
        return self.details["field"]


class InvalidCredentialsException(NutrigateException):
    """Raised when login or password-change credentials do not match.

    Unknown email, role mismatch and wrong password all raise this same
    exception with the same message, so responses do not reveal which
    accounts exist under which roles.
    """

    message_text = "Invalid credentials"

    def __init__(self, error_code: str = "INVALID_CREDENTIALS") -> None:
        super().__init__(self.message_text, error_code)


class InvalidLicenseException(InvalidCredentialsException):
    """Raised when the license number does not match the professional profile."""

    def __init__(self) -> None:
        super().__init__("INVALID_LICENSE")


class InvalidAdminKeyException(InvalidCredentialsException):
    """Raised when the admin passphrase is missing or wrong."""

    def __init__(self) -> None:
        super().__init__("INVALID_ADMIN_KEY")


class SessionException(NutrigateException):
    """Base for bearer-token failures. ``reason`` is the 401 reason code."""

    def __init__(self, message: str, reason: str) -> None:
        super().__init__(message, reason)

    @property
    def reason(self) -> str:
        return self.error_code


class MissingTokenException(SessionException):
    """Raised when no Authorization header is present."""

    def __init__(self) -> None:
        super().__init__("No token provided. Please login first.", "NO_TOKEN")


class InvalidTokenFormatException(SessionException):
    """Raised when the Authorization header is not ``Bearer <token>``."""

    def __init__(self) -> None:
        super().__init__("Invalid token format. Use Bearer <token>", "INVALID_FORMAT")


class TokenExpiredException(SessionException):
    """Raised when the token signature is valid but its expiry has passed."""

    def __init__(self) -> None:
        super().__init__("Token has expired. Please login again.", "TOKEN_EXPIRED")


class InvalidTokenException(SessionException):
    """Raised when the token is malformed, badly signed or missing claims."""

    def __init__(self) -> None:
        super().__init__("Invalid token. Please login again.", "INVALID_TOKEN")


class ProfileNotFoundException(NutrigateException):
    """Raised when a credential's profile reference does not resolve.

    Signals a broken credential/profile link (data-integrity anomaly),
    not a client error.
    """

    def __init__(self, role: str, profile_id: str) -> None:
        super().__init__(
            "User profile not found",
            "PROFILE_NOT_FOUND",
            {"role": role, "profile_id": profile_id},
        )


class ResourceNotFoundException(NutrigateException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'credential', 'profile_image').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class SamePasswordException(NutrigateException):
    """Raised when the new password equals the current one."""

    def __init__(self) -> None:
        super().__init__(
            "New password must be different from the current password",
            "SAME_PASSWORD",
        )


class AuthorizationException(NutrigateException):
    """Raised when the caller's role may not use the operation."""

    def __init__(self, allowed_roles: list[str], role: str) -> None:
        super().__init__(
            f"Access denied. This resource requires one of these roles: "
            f"{', '.join(allowed_roles)}",
            "INSUFFICIENT_ROLE",
            {"allowed_roles": allowed_roles, "role": role},
        )


class VerificationPendingException(NutrigateException):
    """Raised by the access gate while documents are missing or under review."""

    def __init__(self, status: str) -> None:
        super().__init__(
            "Your verification is still pending. Please try again later.",
            "VERIFICATION_PENDING",
            {"verification_status": status},
        )


class VerificationRejectedException(NutrigateException):
    """Raised by the access gate when the reviewer rejected the documents."""

    def __init__(self) -> None:
        super().__init__(
            "Your verification has been rejected. Please contact support.",
            "VERIFICATION_REJECTED",
            {"verification_status": "rejected"},
        )


class InvalidTransitionException(NutrigateException):
    """Raised when a verification status change is not allowed from the current state."""

    def __init__(self, from_status: str, to_status: str) -> None:
        super().__init__(
            f"Cannot move verification status from {from_status} to {to_status}",
            "INVALID_VERIFICATION_TRANSITION",
            {"from_status": from_status, "to_status": to_status},
        )


class SqlNotConfiguredException(NutrigateException):
    """Raised when an operation requires the database but DATABASE_URL is not set."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
