"""initial_identity_schema

Revision ID: 4f1c2a9b7d10
Revises:
Create Date: 2026-10-19 09:12:41.118204

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "4f1c2a9b7d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def _profile_columns() -> list[sa.Column]:
    return [
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("phone_number", sa.String(length=10), nullable=False),
        sa.Column("profile_image", sa.LargeBinary(), nullable=True),
        sa.Column("profile_image_type", sa.String(length=100), nullable=True),
    ]


def _professional_columns() -> list[sa.Column]:
    return [
        sa.Column("license_number", sa.String(length=16), nullable=False),
        sa.Column(
            "verification_status",
            sa.String(length=20),
            server_default="not_received",
            nullable=False,
        ),
        sa.Column("last_document_update", sa.DateTime(timezone=True), nullable=True),
    ]


def _create_profile_table(
    table: str, extra: list[sa.Column], unique: tuple[str, ...]
) -> None:
    op.create_table(
        table,
        *_profile_columns(),
        *extra,
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        *(sa.UniqueConstraint(col, name=f"uq_{table}_{col}") for col in unique),
    )
    op.create_index(f"ix_{table}_email", table, ["email"])


_PERSONAL = ("display_name", "phone_number")
_PROFESSIONAL = ("display_name", "phone_number", "license_number")


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "credential",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("profile_id", sa.String(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_credential_email"),
        sa.UniqueConstraint("role", "profile_id", name="uq_credential_profile"),
    )

    for table in ("user_profile", "admin_profile"):
        _create_profile_table(
            table,
            [
                sa.Column("date_of_birth", sa.Date(), nullable=False),
                sa.Column("gender", sa.String(length=10), nullable=False),
                sa.Column("address", sa.String(length=200), nullable=False),
            ],
            _PERSONAL,
        )
    _create_profile_table(
        "dietitian_profile",
        [*_professional_columns(), sa.Column("age", sa.Integer(), nullable=False)],
        _PROFESSIONAL,
    )
    for table in ("organization_profile", "corporate_partner_profile"):
        _create_profile_table(
            table,
            [
                *_professional_columns(),
                sa.Column("address", sa.String(length=200), nullable=False),
            ],
            _PROFESSIONAL,
        )

    op.create_table(
        "identity_claim",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("field", sa.String(length=32), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("profile_id", sa.String(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_identity_claim_owner", "identity_claim", ["role", "profile_id"])

    op.create_table(
        "profile_document",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("profile_id", sa.String(), nullable=False),
        sa.Column("slot", sa.String(length=100), nullable=False),
        sa.Column("filename", sa.String(length=255), nullable=False),
        sa.Column("content_type", sa.String(length=100), nullable=False),
        sa.Column("size", sa.BigInteger(), nullable=False),
        sa.Column("data", sa.LargeBinary(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("uploaded_at", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("role", "profile_id", "slot", name="uq_profile_document_slot"),
    )
    op.create_index("ix_profile_document_owner", "profile_document", ["role", "profile_id"])

    op.create_table(
        "verification_transition",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False),
        sa.Column("profile_id", sa.String(), nullable=False),
        sa.Column("from_status", sa.String(length=20), nullable=False),
        sa.Column("to_status", sa.String(length=20), nullable=False),
        sa.Column("actor", sa.String(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_verification_transition_owner",
        "verification_transition",
        ["role", "profile_id", "created_at"],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_verification_transition_owner", table_name="verification_transition")
    op.drop_table("verification_transition")
    op.drop_index("ix_profile_document_owner", table_name="profile_document")
    op.drop_table("profile_document")
    op.drop_index("ix_identity_claim_owner", table_name="identity_claim")
    op.drop_table("identity_claim")
    for table in (
        "corporate_partner_profile",
        "organization_profile",
        "dietitian_profile",
        "admin_profile",
        "user_profile",
    ):
        op.drop_index(f"ix_{table}_email", table_name=table)
        op.drop_table(table)
    op.drop_table("credential")
