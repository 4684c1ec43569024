"""ReconciliationService tests: orphaned profiles and dangling credentials."""

from datetime import timedelta

from app.application.dtos.identity import DocumentUpload, ProfileCreate
from app.application.services import ReconciliationService, RegistrationService
from app.domain.enums import Role
from app.shared.utils.datetime import utc_now
from tests.factories import registration_command
from tests.fakes import FakeStores

GRACE = timedelta(minutes=60)


async def _orphan(stores: FakeStores, age: timedelta) -> str:
    profile = await stores.profiles.create(
        ProfileCreate(
            role=Role.ORGANIZATION,
            display_name=f"Orphan Org {int(age.total_seconds())}",
            email="orphan@example.com",
            phone_number=f"{int(age.total_seconds()):010d}",
            license_number=f"OLN{int(age.total_seconds()) % 1_000_000:06d}",
            attributes={"address": "Nowhere"},
        )
    )
    stores.profiles.backdate(Role.ORGANIZATION, profile.id, utc_now() - age)
    return profile.id


async def test_old_orphans_are_swept_with_their_documents(
    registration: RegistrationService,
    reconciliation: ReconciliationService,
    stores: FakeStores,
) -> None:
    registered = await registration.register(registration_command(Role.ORGANIZATION))
    stores.profiles.backdate(Role.ORGANIZATION, registered.profile_id, utc_now() - timedelta(days=2))
    old = await _orphan(stores, timedelta(hours=3))
    young = await _orphan(stores, timedelta(minutes=5))
    await stores.documents.upsert_many(
        Role.ORGANIZATION,
        old,
        [DocumentUpload(slot="license", filename="l.pdf", content_type="application/pdf", data=b"x")],
        utc_now(),
    )

    found = await reconciliation.find_orphaned_profiles(GRACE)
    assert [ref.profile_id for ref in found] == [old]

    swept = await reconciliation.sweep_orphaned_profiles(GRACE)

    assert [ref.profile_id for ref in swept] == [old]
    assert await stores.profiles.get(Role.ORGANIZATION, old) is None
    assert await stores.profiles.get(Role.ORGANIZATION, young) is not None
    assert await stores.profiles.get(Role.ORGANIZATION, registered.profile_id) is not None
    assert await stores.documents.list_for_profile(Role.ORGANIZATION, old) == []
    assert await reconciliation.sweep_orphaned_profiles(GRACE) == []


async def test_dry_run_keeps_orphans(
    reconciliation: ReconciliationService, stores: FakeStores
) -> None:
    old = await _orphan(stores, timedelta(hours=3))
    swept = await reconciliation.sweep_orphaned_profiles(GRACE, dry_run=True)
    assert [ref.profile_id for ref in swept] == [old]
    assert await stores.profiles.get(Role.ORGANIZATION, old) is not None


async def test_dangling_credentials_are_reported_not_repaired(
    registration: RegistrationService,
    reconciliation: ReconciliationService,
    stores: FakeStores,
) -> None:
    registered = await registration.register(registration_command(Role.USER))
    await stores.profiles.delete(Role.USER, registered.profile_id)

    dangling = await reconciliation.find_dangling_credentials()

    assert [c.profile_id for c in dangling] == [registered.profile_id]
    assert await stores.credentials.get_by_email("ada@example.com") is not None
