"""add legal_documents and consent_records tables

Revision ID: a1c4e7f2b9d0
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "a1c4e7f2b9d0"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "legal_documents",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("document_type", sa.String(50), nullable=False),
        sa.Column("language", sa.String(10), nullable=False, server_default="en"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("title", sa.String(255), nullable=False, server_default=""),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("is_current", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("acceptance_type", sa.String(20), nullable=False, server_default="active"),
        sa.Column("effective_date", sa.Date(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index(
        "idx_legal_document_current",
        "legal_documents",
        ["document_type", "language", "is_current"],
    )
    op.create_index(
        "idx_legal_document_lineage",
        "legal_documents",
        ["document_type", "language", "version"],
    )

    # Append-only ledger: no uniqueness on (user_id, consent_type, document_version)
    op.create_table(
        "consent_records",
        sa.Column("id", sa.Integer(), primary_key=True, index=True),
        sa.Column("user_id", sa.String(64), nullable=False, index=True),
        sa.Column("consent_type", sa.String(50), nullable=False),
        sa.Column(
            "document_id",
            sa.String(36),
            sa.ForeignKey("legal_documents.id", ondelete="RESTRICT"),
            nullable=True,
        ),
        sa.Column("document_version", sa.Integer(), nullable=True),
        sa.Column("action", sa.String(20), nullable=False, server_default="granted"),
        sa.Column(
            "recorded_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("ip_address", sa.String(45), nullable=True),
        sa.Column("user_agent", sa.String(512), nullable=True),
        sa.Column("context", sa.JSON(), nullable=True),
    )
    op.create_index(
        "idx_consent_user_type",
        "consent_records",
        ["user_id", "consent_type"],
    )
    op.create_index(
        "idx_consent_document",
        "consent_records",
        ["document_id"],
    )


def downgrade() -> None:
    op.drop_index("idx_consent_document", table_name="consent_records")
    op.drop_index("idx_consent_user_type", table_name="consent_records")
    op.drop_table("consent_records")
    op.drop_index("idx_legal_document_lineage", table_name="legal_documents")
    op.drop_index("idx_legal_document_current", table_name="legal_documents")
    op.drop_table("legal_documents")
