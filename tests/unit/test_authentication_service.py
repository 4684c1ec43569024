"""AuthenticationService tests: passwords, secondary factors and session lifetime."""

import pytest

from app.api.v1.dependencies import get_dummy_password_hash
from app.application.dtos.identity import LoginCommand
from app.application.services import (
    AuthenticationService,
    RegistrationService,
    SessionService,
)
from app.application.services.authentication_service import DUMMY_PASSWORD
from app.domain.enums import Role
from app.domain.exceptions import (
    InvalidAdminKeyException,
    InvalidCredentialsException,
    InvalidLicenseException,
    ProfileNotFoundException,
    ValidationException,
)
from app.infrastructure.security import BcryptPasswordHasher
from tests.conftest import TEST_ADMIN_KEY
from tests.factories import PASSWORD, registration_command
from tests.fakes import FakeStores


def _login(role: Role, email: str, **kwargs) -> LoginCommand:
    return LoginCommand(role=role.value, email=email, password=kwargs.pop("password", PASSWORD), **kwargs)


async def test_user_login_returns_one_day_session(
    registration: RegistrationService,
    authentication: AuthenticationService,
    sessions: SessionService,
) -> None:
    registered = await registration.register(registration_command(Role.USER))
    result = await authentication.login(_login(Role.USER, "ADA@example.com"))

    assert result.role is Role.USER
    assert result.expires_in == "1d"
    claims = sessions.verify(result.token)
    assert claims.profile_id == registered.profile_id


async def test_remember_me_extends_session(
    registration: RegistrationService, authentication: AuthenticationService
) -> None:
    await registration.register(registration_command(Role.USER))
    result = await authentication.login(_login(Role.USER, "ada@example.com", remember_me=True))
    assert result.expires_in == "7d"


@pytest.mark.parametrize(
    ("email", "password"),
    [("ada@example.com", "wrong-password"), ("nobody@example.com", PASSWORD)],
)
async def test_bad_email_or_password_is_generic(
    registration: RegistrationService,
    authentication: AuthenticationService,
    email: str,
    password: str,
) -> None:
    await registration.register(registration_command(Role.USER))
    with pytest.raises(InvalidCredentialsException) as exc_info:
        await authentication.login(_login(Role.USER, email, password=password))
    assert exc_info.value.error_code == "INVALID_CREDENTIALS"


async def test_role_mismatch_looks_like_bad_credentials(
    registration: RegistrationService, authentication: AuthenticationService
) -> None:
    """Signing in under another role does not reveal that the account exists."""
    await registration.register(registration_command(Role.USER))
    with pytest.raises(InvalidCredentialsException) as exc_info:
        await authentication.login(
            _login(Role.ADMIN, "ada@example.com", admin_key=TEST_ADMIN_KEY)
        )
    assert type(exc_info.value) is InvalidCredentialsException


async def test_dietitian_needs_matching_license(
    registration: RegistrationService, authentication: AuthenticationService
) -> None:
    await registration.register(registration_command(Role.DIETITIAN))

    result = await authentication.login(
        _login(Role.DIETITIAN, "diet@example.com", license_number="DLN123456")
    )
    assert result.role is Role.DIETITIAN

    for wrong in ("DLN999999", None):
        with pytest.raises(InvalidLicenseException) as exc_info:
            await authentication.login(
                _login(Role.DIETITIAN, "diet@example.com", license_number=wrong)
            )
        assert exc_info.value.message == "Invalid credentials"


async def test_admin_needs_the_configured_passphrase(
    registration: RegistrationService, authentication: AuthenticationService
) -> None:
    await registration.register(registration_command(Role.ADMIN))

    result = await authentication.login(
        _login(Role.ADMIN, "root@example.com", admin_key=TEST_ADMIN_KEY)
    )
    assert result.role is Role.ADMIN

    for wrong in ("guess", None):
        with pytest.raises(InvalidAdminKeyException):
            await authentication.login(_login(Role.ADMIN, "root@example.com", admin_key=wrong))


async def test_admin_login_refused_without_configured_key(
    registration: RegistrationService,
    stores: FakeStores,
    hasher,
    sessions: SessionService,
    dummy_hash: str,
) -> None:
    await registration.register(registration_command(Role.ADMIN))
    service = AuthenticationService(
        stores.credentials, stores.profiles, hasher, sessions, dummy_hash=dummy_hash
    )
    with pytest.raises(InvalidAdminKeyException):
        await service.login(_login(Role.ADMIN, "root@example.com", admin_key="anything"))


async def test_missing_profile_is_reported(
    registration: RegistrationService,
    authentication: AuthenticationService,
    stores: FakeStores,
) -> None:
    registered = await registration.register(registration_command(Role.USER))
    await stores.profiles.delete(Role.USER, registered.profile_id)

    with pytest.raises(ProfileNotFoundException):
        await authentication.login(_login(Role.USER, "ada@example.com"))


async def test_license_is_matched_case_insensitively(
    registration: RegistrationService, authentication: AuthenticationService
) -> None:
    await registration.register(
        registration_command(Role.DIETITIAN, licenseNumber="dln123456")
    )
    result = await authentication.login(
        _login(Role.DIETITIAN, "diet@example.com", license_number=" dln123456 ")
    )
    assert result.role is Role.DIETITIAN


@pytest.mark.parametrize(("email", "password"), [(None, PASSWORD), ("ada@example.com", None)])
async def test_missing_email_or_password_is_a_validation_error(
    authentication: AuthenticationService, email: str | None, password: str | None
) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await authentication.login(
            LoginCommand(role=Role.USER.value, email=email, password=password)
        )
    assert exc_info.value.message == "Email and password are required"


class CountingHasher(BcryptPasswordHasher):
    def __init__(self) -> None:
        super().__init__(rounds=4)
        self.hashes = 0
        self.verifies = 0

    def hash(self, password: str) -> str:
        self.hashes += 1
        return super().hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        self.verifies += 1
        return super().verify(password, password_hash)


async def test_unknown_email_costs_the_same_as_a_wrong_password(
    registration: RegistrationService,
    stores: FakeStores,
    sessions: SessionService,
    dummy_hash: str,
) -> None:
    """A fresh service per request (as the provider builds it) never hashes on login."""
    await registration.register(registration_command(Role.USER))
    attempts = {
        "wrong_password": _login(Role.USER, "ada@example.com", password="wrong-password"),
        "unknown_email": _login(Role.USER, "nobody@example.com"),
        "role_mismatch": _login(Role.ORGANIZATION, "ada@example.com"),
    }
    costs = {}
    for name, command in attempts.items():
        counting = CountingHasher()
        service = AuthenticationService(
            stores.credentials, stores.profiles, counting, sessions, dummy_hash=dummy_hash
        )
        with pytest.raises(InvalidCredentialsException):
            await service.login(command)
        costs[name] = (counting.hashes, counting.verifies)

    assert set(costs.values()) == {(0, 1)}


def test_dummy_hash_provider_hashes_once_per_process() -> None:
    get_dummy_password_hash.cache_clear()
    first = get_dummy_password_hash()
    assert get_dummy_password_hash() is first
    assert get_dummy_password_hash.cache_info().misses == 1
    assert BcryptPasswordHasher(rounds=4).verify(DUMMY_PASSWORD, first)
