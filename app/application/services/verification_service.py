"""Document intake, review and access gating for verification-gated roles.

Every status change goes through the domain state machine
(app.domain.verification) and is appended to the transition log with the
acting identity and a reason, so a rejected-then-resubmitted profile can be
reconstructed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.application.dtos.identity import (
    DocumentUpload,
    UploadResult,
    VerificationOverview,
    VerificationTransition,
)
from app.domain.enums import Role, VerificationStatus
from app.domain.exceptions import (
    AuthorizationException,
    MissingTokenException,
    ProfileNotFoundException,
    ValidationException,
)
from app.domain.roles import RoleSpec, gated_roles, get_role_spec
from app.domain.verification import (
    REVIEW_DECISIONS,
    AccessDecision,
    collapse_statuses,
    ensure_transition,
    evaluate_access,
)
from app.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from app.application.dtos.identity import ProfileResult
    from app.application.interfaces.repositories import (
        IDocumentRepository,
        IProfileStore,
        IVerificationLogRepository,
    )

logger = logging.getLogger(__name__)

UPLOAD_REASON = "documents uploaded"


class VerificationService:
    """Drives the verification state machine of professional profiles."""

    def __init__(
        self,
        profile_store: IProfileStore,
        document_repo: IDocumentRepository,
        log_repo: IVerificationLogRepository,
        max_document_size: int,
    ) -> None:
        self._profiles = profile_store
        self._documents = document_repo
        self._log = log_repo
        self._max_document_size = max_document_size

    def _gated_spec(self, role: Role | str) -> RoleSpec:
        spec = get_role_spec(role)
        if not spec.verification_gated:
            raise AuthorizationException([r.value for r in gated_roles()], spec.role.value)
        return spec

    async def _load(self, spec: RoleSpec, profile_id: str) -> ProfileResult:
        profile = await self._profiles.get(spec.role, profile_id)
        if profile is None:
            raise ProfileNotFoundException(spec.role.value, profile_id)
        return profile

    async def _record(
        self,
        spec: RoleSpec,
        profile_id: str,
        current: VerificationStatus,
        target: VerificationStatus,
        actor: str,
        reason: str | None,
    ) -> None:
        await self._log.append(
            VerificationTransition(
                role=spec.role,
                profile_id=profile_id,
                from_status=current,
                to_status=target,
                actor=actor,
                reason=reason,
                created_at=utc_now(),
            )
        )
        logger.info(
            "Verification %s -> %s for %s profile %s by %s",
            current.value,
            target.value,
            spec.role.value,
            profile_id,
            actor,
        )

    def _check_uploads(self, uploads: list[DocumentUpload]) -> None:
        if not uploads:
            raise ValidationException("No files uploaded", field="documents")
        errors: dict[str, str] = {}
        seen: set[str] = set()
        for upload in uploads:
            if not upload.slot:
                errors["documents"] = "Every file must be sent under a named field"
            elif upload.slot in seen:
                errors[upload.slot] = "Only one file per field is accepted"
            elif upload.size == 0:
                errors[upload.slot] = "File is empty"
            elif upload.size > self._max_document_size:
                errors[upload.slot] = (
                    f"File exceeds the {self._max_document_size} byte limit"
                )
            seen.add(upload.slot)
        if errors:
            raise ValidationException("Invalid document upload", errors=errors)

    async def upload_documents(
        self,
        role: Role | str,
        profile_id: str,
        uploads: list[DocumentUpload],
        actor: str,
        first_upload_only: bool = False,
    ) -> UploadResult:
        """Store uploaded files under their slots and move the profile to received.

        first_upload_only is set for callers without a session: they may only
        submit documents while the profile is still not_received.

        Raises:
            ValidationException: Role does not take documents, no files, empty
                file, or a file above the size limit.
            ProfileNotFoundException: profile_id does not exist for role.
            MissingTokenException: first_upload_only and documents were already sent.
        """
        spec = get_role_spec(role)
        if not spec.verification_gated:
            raise ValidationException(
                f"Role {spec.role.value} does not upload verification documents",
                field="role",
            )
        self._check_uploads(uploads)
        profile = await self._load(spec, profile_id)

        current = profile.verification_status or VerificationStatus.NOT_RECEIVED
        if first_upload_only and current is not VerificationStatus.NOT_RECEIVED:
            logger.warning(
                "Refused tokenless upload for %s profile %s in status %s",
                spec.role.value,
                profile_id,
                current.value,
            )
            raise MissingTokenException()
        target = ensure_transition(current, VerificationStatus.RECEIVED)
        uploaded_at = utc_now()
        stored = await self._documents.upsert_many(spec.role, profile_id, uploads, uploaded_at)
        await self._profiles.set_verification_status(spec.role, profile_id, target, uploaded_at)
        if current is not target:
            await self._record(spec, profile_id, current, target, actor, UPLOAD_REASON)
        logger.info(
            "Stored %d document(s) for %s profile %s", len(stored), spec.role.value, profile_id
        )
        return UploadResult(
            profile_id=profile_id,
            role=spec.role,
            uploaded_slots=[doc.slot for doc in stored],
            uploaded_at=uploaded_at,
            verification_status=target,
        )

    async def review(
        self,
        role: Role | str,
        profile_id: str,
        decision: VerificationStatus | str,
        actor: str,
        reason: str | None = None,
        slots: list[str] | None = None,
    ) -> VerificationStatus:
        """Apply a reviewer decision to some or all slots and return the overall status.

        Raises:
            ValidationException: Decision is not verified/rejected, or unknown slot.
            InvalidTransitionException: Profile is not awaiting review.
        """
        spec = self._gated_spec(role)
        try:
            verdict = VerificationStatus(decision)
        except ValueError:
            verdict = None
        if verdict not in REVIEW_DECISIONS:
            raise ValidationException(
                "Decision must be 'verified' or 'rejected'", field="decision"
            )
        profile = await self._load(spec, profile_id)
        current = profile.verification_status or VerificationStatus.NOT_RECEIVED
        ensure_transition(current, verdict)

        if slots:
            existing = await self._documents.list_for_profile(spec.role, profile_id)
            known = {doc.slot for doc in existing}
            unknown = sorted(set(slots) - known)
            if unknown:
                raise ValidationException(
                    "Unknown document slot", errors={slot: "No such document" for slot in unknown}
                )
        await self._documents.set_status(spec.role, profile_id, verdict, slots or None)

        documents = await self._documents.list_for_profile(spec.role, profile_id)
        target = ensure_transition(current, collapse_statuses(doc.status for doc in documents))
        await self._profiles.set_verification_status(spec.role, profile_id, target)
        if target is not current:
            await self._record(spec, profile_id, current, target, actor, reason)
        return target

    async def overview(self, role: Role | str, profile_id: str) -> VerificationOverview:
        """Return status, document metadata and transition history of a profile."""
        spec = self._gated_spec(role)
        profile = await self._load(spec, profile_id)
        return VerificationOverview(
            profile_id=profile_id,
            role=spec.role,
            status=profile.verification_status or VerificationStatus.NOT_RECEIVED,
            last_document_update=profile.last_document_update,
            documents=await self._documents.list_for_profile(spec.role, profile_id),
            history=await self._log.list_for_profile(spec.role, profile_id),
        )

    async def check_access(self, role: Role | str, profile_id: str) -> AccessDecision:
        """Read the profile's status and apply the access gate (no mutation)."""
        spec = self._gated_spec(role)
        profile = await self._load(spec, profile_id)
        return evaluate_access(profile.verification_status)
