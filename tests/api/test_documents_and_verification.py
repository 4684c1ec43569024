"""Document upload and verification endpoint tests."""

import pytest
from httpx import AsyncClient

from app.application.services import VerificationService
from app.domain.enums import Role, VerificationStatus
from tests.factories import signup_payload
from tests.fakes import FakeStores

PDF = ("license.pdf", b"%PDF-1.4 scanned license", "application/pdf")


async def _signup(client: AsyncClient, role: Role) -> dict:
    response = await client.post(
        f"/api/v1/auth/signup/{role.value}", json=signup_payload(role)
    )
    assert response.status_code == 201, response.text
    return response.json()


def _auth(data: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {data['token']}"}


async def test_upload_with_token(client: AsyncClient, stores: FakeStores) -> None:
    data = await _signup(client, Role.DIETITIAN)
    response = await client.post(
        "/api/v1/documents/upload/dietitian",
        files={"license": PDF, "idCard": ("id.png", b"\x89PNG id", "image/png")},
        headers=_auth(data),
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert sorted(body["uploadedSlots"]) == ["idCard", "license"]
    assert body["verificationStatus"] == "received"
    assert body["profileId"] == data["profileId"]
    assert body["uploadedAt"]

    history = await stores.log.list_for_profile(Role.DIETITIAN, data["profileId"])
    assert history[0].actor.startswith("dietitian:")


async def test_upload_right_after_signup_with_profile_id(client: AsyncClient) -> None:
    """Sign-up hands back profileId so documents can follow without a token."""
    data = await _signup(client, Role.ORGANIZATION)
    response = await client.post(
        "/api/v1/documents/upload/organization",
        files={"registration": PDF},
        data={"profileId": data["profileId"]},
    )
    assert response.status_code == 200, response.text
    assert response.json()["uploadedSlots"] == ["registration"]


async def test_upload_accepts_user_id_field(client: AsyncClient) -> None:
    data = await _signup(client, Role.DIETITIAN)
    response = await client.post(
        "/api/v1/documents/upload/dietitian",
        files={"license": PDF},
        data={"userId": data["profileId"]},
    )
    assert response.status_code == 200, response.text
    assert response.json()["profileId"] == data["profileId"]


async def test_tokenless_upload_cannot_reset_a_reviewed_profile(
    client: AsyncClient, stores: FakeStores
) -> None:
    """Once documents were sent, only the signed-in owner may upload again."""
    data = await _signup(client, Role.DIETITIAN)
    await client.post(
        "/api/v1/documents/upload/dietitian", files={"license": PDF}, headers=_auth(data)
    )
    reviewer = VerificationService(
        stores.profiles, stores.documents, stores.log, max_document_size=1024
    )
    await reviewer.review(Role.DIETITIAN, data["profileId"], "verified", "admin:r1")

    response = await client.post(
        "/api/v1/documents/upload/dietitian",
        files={"license": ("junk.pdf", b"junk", "application/pdf")},
        data={"profileId": data["profileId"]},
    )
    assert response.status_code == 401
    assert response.json()["error"] == "NO_TOKEN"

    profile = await stores.profiles.get(Role.DIETITIAN, data["profileId"])
    assert profile.verification_status is VerificationStatus.VERIFIED
    allowed = await client.get("/api/v1/verification/access", headers=_auth(data))
    assert allowed.status_code == 200


async def test_upload_without_token_or_profile_id(client: AsyncClient) -> None:
    response = await client.post("/api/v1/documents/upload/dietitian", files={"license": PDF})
    assert response.status_code == 400
    assert response.json()["details"]["field"] == "profileId"


async def test_upload_with_token_for_other_role(client: AsyncClient) -> None:
    data = await _signup(client, Role.DIETITIAN)
    response = await client.post(
        "/api/v1/documents/upload/organization",
        files={"license": PDF},
        headers=_auth(data),
    )
    assert response.status_code == 403
    assert response.json()["error"] == "INSUFFICIENT_ROLE"


async def test_upload_without_files(client: AsyncClient) -> None:
    data = await _signup(client, Role.DIETITIAN)
    response = await client.post(
        "/api/v1/documents/upload/dietitian",
        data={"note": "nothing attached"},
        headers=_auth(data),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_upload_for_user_role_is_rejected(client: AsyncClient) -> None:
    data = await _signup(client, Role.USER)
    response = await client.post(
        "/api/v1/documents/upload/user", files={"license": PDF}, headers=_auth(data)
    )
    assert response.status_code == 400


async def test_status_and_access_gate(client: AsyncClient, stores: FakeStores) -> None:
    """Access is pending until review verifies the documents."""
    data = await _signup(client, Role.CORPORATE_PARTNER)
    headers = _auth(data)

    pending = await client.get("/api/v1/verification/access", headers=headers)
    assert pending.status_code == 403
    assert pending.json()["error"] == "VERIFICATION_PENDING"

    await client.post(
        "/api/v1/documents/upload/corporatepartner", files={"license": PDF}, headers=headers
    )
    reviewer = VerificationService(
        stores.profiles, stores.documents, stores.log, max_document_size=1024
    )
    await reviewer.review(Role.CORPORATE_PARTNER, data["profileId"], "verified", "admin:r1")

    status = await client.get("/api/v1/verification/status", headers=headers)
    assert status.status_code == 200
    body = status.json()
    assert body["status"] == "verified"
    assert [d["slot"] for d in body["documents"]] == ["license"]
    assert [h["toStatus"] for h in body["history"]] == ["received", "verified"]

    allowed = await client.get("/api/v1/verification/access", headers=headers)
    assert allowed.status_code == 200
    assert allowed.json() == {"allowed": True, "status": "verified"}


async def test_rejected_profile_is_denied(client: AsyncClient, stores: FakeStores) -> None:
    data = await _signup(client, Role.DIETITIAN)
    headers = _auth(data)
    await client.post("/api/v1/documents/upload/dietitian", files={"license": PDF}, headers=headers)
    reviewer = VerificationService(
        stores.profiles, stores.documents, stores.log, max_document_size=1024
    )
    await reviewer.review(Role.DIETITIAN, data["profileId"], "rejected", "admin:r1")

    response = await client.get("/api/v1/verification/access", headers=headers)
    assert response.status_code == 403
    assert response.json()["error"] == "VERIFICATION_REJECTED"


@pytest.mark.parametrize("path", ["/api/v1/verification/status", "/api/v1/verification/access"])
async def test_verification_routes_refuse_non_professionals(
    client: AsyncClient, path: str
) -> None:
    data = await _signup(client, Role.USER)
    response = await client.get(path, headers=_auth(data))
    assert response.status_code == 403
    assert response.json()["error"] == "INSUFFICIENT_ROLE"
