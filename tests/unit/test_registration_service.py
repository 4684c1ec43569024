"""RegistrationService tests against in-memory stores (uniqueness, ordering, compensation)."""

import pytest

from app.application.services import RegistrationService, SessionService
from app.domain.enums import Role, VerificationStatus
from app.domain.exceptions import ConflictException, InvalidRoleException, ValidationException
from tests.factories import registration_command
from tests.fakes import FakeStores


async def test_user_registration_creates_profile_and_credential(
    registration: RegistrationService, stores: FakeStores, sessions: SessionService
) -> None:
    """A valid user sign-up stores both halves and returns a session for them."""
    result = await registration.register(
        registration_command(Role.USER, email="  Ada@Example.com ")
    )

    assert result.role is Role.USER
    assert result.display_name == "Ada Lovelace"
    credential = await stores.credentials.get_by_email("ada@example.com")
    assert credential is not None
    assert credential.profile_id == result.profile_id
    assert credential.password_hash != "secret123"
    profile = await stores.profiles.get(Role.USER, result.profile_id)
    assert profile is not None
    assert profile.email == "ada@example.com"

    claims = sessions.verify(result.token)
    assert claims.identity_id == credential.id
    assert claims.role is Role.USER
    assert claims.profile_id == result.profile_id


async def test_professional_starts_not_received(
    registration: RegistrationService, stores: FakeStores
) -> None:
    result = await registration.register(registration_command(Role.DIETITIAN))
    profile = await stores.profiles.get(Role.DIETITIAN, result.profile_id)
    assert profile.license_number == "DLN123456"
    assert profile.attributes == {"age": 34}
    assert profile.verification_status is VerificationStatus.NOT_RECEIVED


async def test_name_taken_by_another_role_is_a_conflict(
    registration: RegistrationService, stores: FakeStores
) -> None:
    """Display names are unique across every role's profiles."""
    await registration.register(registration_command(Role.USER))

    with pytest.raises(ConflictException) as exc_info:
        await registration.register(
            registration_command(Role.DIETITIAN, name="Ada Lovelace")
        )
    assert exc_info.value.field == "name"
    assert await stores.credentials.get_by_email("diet@example.com") is None
    assert [key[0] for key in stores.profiles.rows] == [Role.USER]


async def test_phone_taken_by_another_role_is_a_conflict(
    registration: RegistrationService,
) -> None:
    await registration.register(registration_command(Role.ORGANIZATION))
    with pytest.raises(ConflictException) as exc_info:
        await registration.register(registration_command(Role.ADMIN, phone="0744444444"))
    assert exc_info.value.field == "phone"


async def test_email_is_unique_across_roles(registration: RegistrationService) -> None:
    await registration.register(registration_command(Role.USER))
    with pytest.raises(ConflictException) as exc_info:
        await registration.register(registration_command(Role.ADMIN, email="ADA@example.com"))
    assert exc_info.value.field == "email"
    assert exc_info.value.message == "Email already registered"


async def test_uniqueness_is_checked_before_required_fields(
    registration: RegistrationService,
) -> None:
    """A taken name is reported even when the license is also missing."""
    await registration.register(registration_command(Role.USER))
    with pytest.raises(ConflictException):
        await registration.register(
            registration_command(Role.DIETITIAN, name="Ada Lovelace", licenseNumber=None)
        )


async def test_missing_license_is_a_validation_error(
    registration: RegistrationService,
) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await registration.register(registration_command(Role.DIETITIAN, licenseNumber=None))
    assert exc_info.value.errors == {
        "licenseNumber": "License number is required for dietitian"
    }


async def test_license_format_is_checked_per_role(registration: RegistrationService) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await registration.register(
            registration_command(Role.ORGANIZATION, licenseNumber="DLN123456")
        )
    assert "licenseNumber" in exc_info.value.errors


async def test_license_is_unique_within_role(registration: RegistrationService) -> None:
    await registration.register(registration_command(Role.DIETITIAN))
    with pytest.raises(ConflictException) as exc_info:
        await registration.register(
            registration_command(
                Role.DIETITIAN,
                email="other@example.com",
                name="Second Dietitian",
                phone="0799999999",
            )
        )
    assert exc_info.value.field == "licenseNumber"


async def test_all_format_errors_are_reported_together(
    registration: RegistrationService,
) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await registration.register(
            registration_command(
                Role.USER, email="nope", password="123", name="Ada", phone="12"
            )
        )
    assert set(exc_info.value.errors) == {"email", "password", "name", "phone"}


async def test_unknown_role_is_rejected(registration: RegistrationService) -> None:
    with pytest.raises(InvalidRoleException):
        await registration.register(registration_command("superuser"))


async def test_failed_credential_insert_deletes_the_profile(
    registration: RegistrationService, stores: FakeStores
) -> None:
    """Compensation: no profile survives without its credential."""
    stores.credentials.fail_next_create = ConflictException("email", "Email already registered")

    with pytest.raises(ConflictException):
        await registration.register(registration_command(Role.CORPORATE_PARTNER))

    assert stores.profiles.rows == {}
    assert stores.credentials.rows == {}
