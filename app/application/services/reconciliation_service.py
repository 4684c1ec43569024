"""Out-of-band reconciliation of the credential/profile pairing.

A profile is created before its credential, so a crash or client disconnect
between the two writes leaves a profile nothing points at. The sweep deletes
such orphans once they are older than a grace window (younger ones may belong
to a registration still in flight). Credentials whose profile is missing are
only reported; they need a human decision.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from app.domain.roles import ROLE_SPECS
from app.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from app.application.dtos.identity import CredentialRecord, ProfileRef
    from app.application.interfaces.repositories import (
        ICredentialRepository,
        IDocumentRepository,
        IProfileStore,
        IVerificationLogRepository,
    )

logger = logging.getLogger(__name__)

_PAGE_SIZE = 500


class ReconciliationService:
    """Detects and removes orphaned profiles; reports dangling credentials."""

    def __init__(
        self,
        credential_repo: ICredentialRepository,
        profile_store: IProfileStore,
        document_repo: IDocumentRepository,
        log_repo: IVerificationLogRepository,
    ) -> None:
        self._credentials = credential_repo
        self._profiles = profile_store
        self._documents = document_repo
        self._log = log_repo

    async def find_orphaned_profiles(self, grace: timedelta) -> list[ProfileRef]:
        """Profiles older than grace that no credential references."""
        cutoff = utc_now() - grace
        orphans: list[ProfileRef] = []
        for role in ROLE_SPECS:
            referenced = await self._credentials.profile_ids_for_role(role)
            for ref in await self._profiles.list_created_before(role, cutoff):
                if ref.profile_id not in referenced:
                    orphans.append(ref)
        return orphans

    async def sweep_orphaned_profiles(
        self, grace: timedelta, dry_run: bool = False
    ) -> list[ProfileRef]:
        """Delete orphaned profiles with their documents and history.

        Idempotent: a second run finds nothing left to delete.
        Returns the orphans found (deleted unless dry_run).
        """
        orphans = await self.find_orphaned_profiles(grace)
        for ref in orphans:
            if dry_run:
                logger.warning(
                    "Orphaned %s profile %s (dry run, not deleted)",
                    ref.role.value,
                    ref.profile_id,
                )
                continue
            await self._documents.delete_for_profile(ref.role, ref.profile_id)
            await self._log.delete_for_profile(ref.role, ref.profile_id)
            await self._profiles.delete(ref.role, ref.profile_id)
            logger.warning("Deleted orphaned %s profile %s", ref.role.value, ref.profile_id)
        return orphans

    async def find_dangling_credentials(self) -> list[CredentialRecord]:
        """Credentials whose role + profile_id does not resolve to a profile."""
        dangling: list[CredentialRecord] = []
        skip = 0
        while True:
            page = await self._credentials.list_all(skip=skip, limit=_PAGE_SIZE)
            for credential in page:
                if await self._profiles.get(credential.role, credential.profile_id) is None:
                    logger.error(
                        "Credential %s references missing %s profile %s",
                        credential.id,
                        credential.role.value,
                        credential.profile_id,
                    )
                    dangling.append(credential)
            if len(page) < _PAGE_SIZE:
                return dangling
            skip += _PAGE_SIZE
