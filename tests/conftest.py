"""Pytest configuration and fixtures for nutrigate.

Environment is set before any app import so get_settings() sees test values.
Services run against the in-memory stores in tests.fakes; HTTP tests use the
same stores through FastAPI dependency overrides, so no database is needed.
"""

import os

TEST_ADMIN_KEY = "test-admin-passphrase"

os.environ.setdefault("SECRET_KEY", "nutrigate-test-secret-key-0123456789abcdef")
os.environ.setdefault("ADMIN_SIGNIN_KEY", TEST_ADMIN_KEY)
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from app.api.v1.dependencies import (  # noqa: E402
    get_credential_repo,
    get_document_repo,
    get_profile_store,
    get_verification_log_repo,
)
from app.application.dtos.identity import SessionTTL  # noqa: E402
from app.application.services import (  # noqa: E402
    AuthenticationService,
    PasswordService,
    ProfileFieldValidator,
    ProfileService,
    ReconciliationService,
    RegistrationService,
    SessionService,
    UniquenessChecker,
    VerificationService,
)
from app.application.services.authentication_service import DUMMY_PASSWORD  # noqa: E402
from app.domain.exceptions import SqlNotConfiguredException  # noqa: E402
import app.infrastructure.persistence.models  # noqa: E402, F401
from app.infrastructure.persistence.database import (  # noqa: E402
    Base,
    enable_sqlite_savepoints,
    get_session_factory,
)
from app.infrastructure.security import BcryptPasswordHasher, JoseTokenCodec  # noqa: E402
from app.main import create_app  # noqa: E402
from tests.fakes import FakeStores  # noqa: E402

MAX_TEST_DOCUMENT_SIZE = 1024


@pytest.fixture
def stores() -> FakeStores:
    """Fresh in-memory credential, profile, document and log stores."""
    return FakeStores()


@pytest.fixture
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture(scope="session")
def dummy_hash() -> str:
    """Dummy login hash, made once like the per-process provider does."""
    return BcryptPasswordHasher(rounds=4).hash(DUMMY_PASSWORD)


@pytest.fixture
def sessions() -> SessionService:
    return SessionService(
        JoseTokenCodec(),
        default_ttl=SessionTTL.days(1),
        remember_me_ttl=SessionTTL.days(7),
    )


@pytest.fixture
def validator() -> ProfileFieldValidator:
    return ProfileFieldValidator(password_min_length=6)


@pytest.fixture
def uniqueness(stores: FakeStores) -> UniquenessChecker:
    return UniquenessChecker(stores.profiles)


@pytest.fixture
def registration(
    stores: FakeStores,
    uniqueness: UniquenessChecker,
    hasher: BcryptPasswordHasher,
    sessions: SessionService,
    validator: ProfileFieldValidator,
) -> RegistrationService:
    return RegistrationService(
        stores.credentials, stores.profiles, uniqueness, hasher, sessions, validator
    )


@pytest.fixture
def authentication(
    stores: FakeStores,
    hasher: BcryptPasswordHasher,
    sessions: SessionService,
    dummy_hash: str,
) -> AuthenticationService:
    return AuthenticationService(
        stores.credentials,
        stores.profiles,
        hasher,
        sessions,
        dummy_hash=dummy_hash,
        admin_key=TEST_ADMIN_KEY,
    )


@pytest.fixture
def password_service(
    stores: FakeStores, hasher: BcryptPasswordHasher, validator: ProfileFieldValidator
) -> PasswordService:
    return PasswordService(stores.credentials, hasher, validator)


@pytest.fixture
def verification(stores: FakeStores) -> VerificationService:
    return VerificationService(
        stores.profiles,
        stores.documents,
        stores.log,
        max_document_size=MAX_TEST_DOCUMENT_SIZE,
    )


@pytest.fixture
def profile_service(
    stores: FakeStores, uniqueness: UniquenessChecker, validator: ProfileFieldValidator
) -> ProfileService:
    return ProfileService(
        stores.profiles, uniqueness, validator, max_image_size=MAX_TEST_DOCUMENT_SIZE
    )


@pytest.fixture
def reconciliation(stores: FakeStores) -> ReconciliationService:
    return ReconciliationService(
        stores.credentials, stores.profiles, stores.documents, stores.log
    )


@pytest.fixture
def app(stores: FakeStores):
    """FastAPI app whose repositories are the in-memory stores."""
    application = create_app()
    application.dependency_overrides[get_credential_repo] = lambda: stores.credentials
    application.dependency_overrides[get_profile_store] = lambda: stores.profiles
    application.dependency_overrides[get_document_repo] = lambda: stores.documents
    application.dependency_overrides[get_verification_log_repo] = lambda: stores.log
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository tests. Rolls back after the test.

    Skips when DATABASE_URL is not configured. Mark such tests with
    @pytest.mark.requires_db; run without a database via: pytest -m 'not requires_db'.
    The schema must already exist (alembic upgrade head).
    """
    try:
        factory = get_session_factory()
    except SqlNotConfiguredException:
        pytest.skip(
            "Database not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def sqlite_session() -> AsyncSession:
    """Session on a fresh in-memory SQLite schema (aiosqlite); no server needed.

    Runs the real SQL repositories so unique-constraint translation is
    covered by the default test run.
    """
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    enable_sqlite_savepoints(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
    async with factory() as session:
        yield session
        await session.rollback()
    await engine.dispose()
