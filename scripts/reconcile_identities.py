"""Reconcile credentials and profiles.

Deletes profiles that no credential points at (left behind when sign-up
failed between the profile and credential writes) once they are older than
ORPHAN_GRACE_MINUTES, and reports credentials whose profile is missing.

Usage:
    uv run python -m scripts.reconcile_identities [--dry-run] [--grace-minutes N]
Requires DATABASE_URL. All imports use app.*.
"""

import argparse
import asyncio
import sys
from datetime import timedelta

import app.infrastructure.persistence.database as database
from app.application.services import ReconciliationService
from app.core.config import get_settings
from app.domain.exceptions import SqlNotConfiguredException
from app.infrastructure.persistence.repositories import (
    CredentialRepository,
    DocumentRepository,
    ProfileStore,
    VerificationLogRepository,
)
from app.shared.logging import setup_logging


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report orphaned profiles without deleting them",
    )
    parser.add_argument(
        "--grace-minutes",
        type=int,
        default=None,
        help="Skip profiles younger than this (default: ORPHAN_GRACE_MINUTES)",
    )
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    """Run the sweep in one transaction; return the process exit code."""
    args = _parse_args(argv)
    settings = get_settings()
    setup_logging()
    grace_minutes = (
        args.grace_minutes if args.grace_minutes is not None else settings.orphan_grace_minutes
    )
    if grace_minutes < 0:
        print("--grace-minutes must be >= 0", file=sys.stderr)
        return 1

    try:
        factory = database.get_session_factory()
    except SqlNotConfiguredException:
        print("DATABASE_URL is not set", file=sys.stderr)
        return 1

    try:
        async with factory() as session:
            async with session.begin():
                service = ReconciliationService(
                    CredentialRepository(session),
                    ProfileStore(session),
                    DocumentRepository(session),
                    VerificationLogRepository(session),
                )
                orphans = await service.sweep_orphaned_profiles(
                    timedelta(minutes=grace_minutes), dry_run=args.dry_run
                )
                dangling = await service.find_dangling_credentials()
    finally:
        await database.dispose_engine()

    verb = "Found" if args.dry_run else "Deleted"
    print(f"{verb} {len(orphans)} orphaned profile(s)")
    for ref in orphans:
        print(f"  {ref.role.value} {ref.profile_id} (created {ref.created_at})")
    print(f"Found {len(dangling)} credential(s) with a missing profile")
    for credential in dangling:
        print(f"  {credential.id} {credential.email} -> {credential.role.value} {credential.profile_id}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
