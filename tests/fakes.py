"""In-memory repositories for tests.

They enforce the same unique rules as the database (email globally; name and
phone across every profile store; license within a role) and raise the same
ConflictException the SQL repositories raise.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.application.dtos.identity import (
    CredentialRecord,
    DocumentResult,
    DocumentUpload,
    ProfileCreate,
    ProfileImage,
    ProfileRef,
    ProfileResult,
    VerificationTransition,
)
from app.domain.enums import Role, VerificationStatus
from app.domain.exceptions import ConflictException
from app.domain.roles import FIELD_LABELS, LICENSE, NAME, PHONE, get_role_spec
from app.shared.utils.datetime import utc_now
from app.shared.utils.generators import generate_cuid


class InMemoryCredentialRepository:
    def __init__(self) -> None:
        self.rows: dict[str, CredentialRecord] = {}
        self.fail_next_create: Exception | None = None

    async def get_by_email(self, email: str) -> CredentialRecord | None:
        return next((c for c in self.rows.values() if c.email == email), None)

    async def get_by_id(self, credential_id: str) -> CredentialRecord | None:
        return self.rows.get(credential_id)

    async def create(
        self, email: str, password_hash: str, role: Role, profile_id: str
    ) -> CredentialRecord:
        if self.fail_next_create is not None:
            error, self.fail_next_create = self.fail_next_create, None
            raise error
        if await self.get_by_email(email) is not None:
            raise ConflictException("email", "Email already registered")
        record = CredentialRecord(
            id=generate_cuid(),
            email=email,
            password_hash=password_hash,
            role=role,
            profile_id=profile_id,
            created_at=utc_now(),
        )
        self.rows[record.id] = record
        return record

    async def update_password_hash(self, credential_id: str, password_hash: str) -> bool:
        record = self.rows.get(credential_id)
        if record is None:
            return False
        self.rows[credential_id] = dataclasses.replace(record, password_hash=password_hash)
        return True

    async def profile_ids_for_role(self, role: Role) -> set[str]:
        return {c.profile_id for c in self.rows.values() if c.role is role}

    async def list_all(self, skip: int = 0, limit: int = 1000) -> list[CredentialRecord]:
        return list(self.rows.values())[skip : skip + limit]


def _value_of(profile: ProfileResult, attribute: str) -> Any:
    if attribute == NAME:
        return profile.display_name
    if attribute == PHONE:
        return profile.phone_number
    if attribute == LICENSE:
        return profile.license_number
    return profile.attributes.get(attribute)


class InMemoryProfileStore:
    def __init__(self) -> None:
        self.rows: dict[tuple[Role, str], ProfileResult] = {}
        self.images: dict[tuple[Role, str], ProfileImage] = {}

    def _check_unique(self, role: Role, values: dict[str, Any], exclude_id: str | None) -> None:
        for key, other in self.rows.items():
            if key == (role, exclude_id):
                continue
            for attribute in (NAME, PHONE):
                if attribute in values and _value_of(other, attribute) == values[attribute]:
                    raise ConflictException(FIELD_LABELS[attribute])
            if (
                values.get(LICENSE) is not None
                and other.role is role
                and other.license_number == values[LICENSE]
            ):
                raise ConflictException(FIELD_LABELS[LICENSE])

    def backdate(self, role: Role, profile_id: str, created_at: datetime) -> None:
        key = (role, profile_id)
        self.rows[key] = dataclasses.replace(self.rows[key], created_at=created_at)

    async def get(self, role: Role, profile_id: str) -> ProfileResult | None:
        return self.rows.get((role, profile_id))

    async def create(self, data: ProfileCreate) -> ProfileResult:
        self._check_unique(
            data.role,
            {NAME: data.display_name, PHONE: data.phone_number, LICENSE: data.license_number},
            None,
        )
        gated = get_role_spec(data.role).verification_gated
        profile = ProfileResult(
            id=generate_cuid(),
            role=data.role,
            display_name=data.display_name,
            email=data.email,
            phone_number=data.phone_number,
            attributes=dict(data.attributes),
            license_number=data.license_number,
            verification_status=VerificationStatus.NOT_RECEIVED if gated else None,
            created_at=utc_now(),
        )
        self.rows[(data.role, profile.id)] = profile
        return profile

    async def update(
        self, role: Role, profile_id: str, changes: dict[str, Any]
    ) -> ProfileResult | None:
        profile = self.rows.get((role, profile_id))
        if profile is None:
            return None
        self._check_unique(role, changes, profile_id)
        attributes = dict(profile.attributes)
        kwargs: dict[str, Any] = {}
        for attribute, value in changes.items():
            if attribute == NAME:
                kwargs["display_name"] = value
            elif attribute == PHONE:
                kwargs["phone_number"] = value
            else:
                attributes[attribute] = value
        updated = dataclasses.replace(profile, attributes=attributes, **kwargs)
        self.rows[(role, profile_id)] = updated
        return updated

    async def delete(self, role: Role, profile_id: str) -> bool:
        self.images.pop((role, profile_id), None)
        return self.rows.pop((role, profile_id), None) is not None

    async def exists_with_value(
        self,
        role: Role,
        field: str,
        value: str,
        exclude_profile_id: str | None = None,
    ) -> bool:
        return any(
            p.role is role and p.id != exclude_profile_id and _value_of(p, field) == value
            for p in self.rows.values()
        )

    async def set_verification_status(
        self,
        role: Role,
        profile_id: str,
        status: VerificationStatus,
        last_document_update: datetime | None = None,
    ) -> None:
        profile = self.rows[(role, profile_id)]
        changes: dict[str, Any] = {"verification_status": status}
        if last_document_update is not None:
            changes["last_document_update"] = last_document_update
        self.rows[(role, profile_id)] = dataclasses.replace(profile, **changes)

    async def set_profile_image(
        self, role: Role, profile_id: str, data: bytes, content_type: str
    ) -> bool:
        profile = self.rows.get((role, profile_id))
        if profile is None:
            return False
        self.images[(role, profile_id)] = ProfileImage(data=data, content_type=content_type)
        self.rows[(role, profile_id)] = dataclasses.replace(profile, has_profile_image=True)
        return True

    async def get_profile_image(self, role: Role, profile_id: str) -> ProfileImage | None:
        return self.images.get((role, profile_id))

    async def list_created_before(self, role: Role, cutoff: datetime) -> list[ProfileRef]:
        return [
            ProfileRef(role=role, profile_id=p.id, created_at=p.created_at)
            for p in self.rows.values()
            if p.role is role and p.created_at is not None and p.created_at < cutoff
        ]


class InMemoryDocumentRepository:
    def __init__(self) -> None:
        self.rows: dict[tuple[Role, str, str], DocumentResult] = {}

    async def upsert_many(
        self,
        role: Role,
        profile_id: str,
        uploads: list[DocumentUpload],
        uploaded_at: datetime,
    ) -> list[DocumentResult]:
        stored = []
        for upload in uploads:
            doc = DocumentResult(
                slot=upload.slot,
                filename=upload.filename,
                content_type=upload.content_type,
                size=upload.size,
                status=VerificationStatus.RECEIVED,
                uploaded_at=uploaded_at,
            )
            self.rows[(role, profile_id, upload.slot)] = doc
            stored.append(doc)
        return stored

    async def list_for_profile(self, role: Role, profile_id: str) -> list[DocumentResult]:
        return sorted(
            (d for (r, p, _), d in self.rows.items() if r is role and p == profile_id),
            key=lambda d: d.slot,
        )

    async def set_status(
        self,
        role: Role,
        profile_id: str,
        status: VerificationStatus,
        slots: list[str] | None = None,
    ) -> int:
        changed = 0
        for key, doc in list(self.rows.items()):
            r, p, slot = key
            if r is role and p == profile_id and (slots is None or slot in slots):
                self.rows[key] = dataclasses.replace(doc, status=status)
                changed += 1
        return changed

    async def delete_for_profile(self, role: Role, profile_id: str) -> int:
        keys = [k for k in self.rows if k[0] is role and k[1] == profile_id]
        for key in keys:
            del self.rows[key]
        return len(keys)


class InMemoryVerificationLogRepository:
    def __init__(self) -> None:
        self.rows: list[VerificationTransition] = []

    async def append(self, transition: VerificationTransition) -> None:
        self.rows.append(transition)

    async def list_for_profile(
        self, role: Role, profile_id: str
    ) -> list[VerificationTransition]:
        return [t for t in self.rows if t.role is role and t.profile_id == profile_id]

    async def delete_for_profile(self, role: Role, profile_id: str) -> int:
        before = len(self.rows)
        self.rows = [
            t for t in self.rows if not (t.role is role and t.profile_id == profile_id)
        ]
        return before - len(self.rows)


@dataclass
class FakeStores:
    """One set of in-memory stores shared by services and the API under test."""

    credentials: InMemoryCredentialRepository = field(default_factory=InMemoryCredentialRepository)
    profiles: InMemoryProfileStore = field(default_factory=InMemoryProfileStore)
    documents: InMemoryDocumentRepository = field(default_factory=InMemoryDocumentRepository)
    log: InMemoryVerificationLogRepository = field(
        default_factory=InMemoryVerificationLogRepository
    )
