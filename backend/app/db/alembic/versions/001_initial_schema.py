"""Initial schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates:
- flex_doc (editor documents)
- doc_version (append-only compiled versions)
- share (tokens, at most one active per document)
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

json_type = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    """Create all tables."""
    # flex_doc table
    op.create_table(
        "flex_doc",
        sa.Column("doc_id", sa.Uuid(), primary_key=True),
        sa.Column("owner_id", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False, server_default=""),
        sa.Column("content", json_type, nullable=False),
        sa.Column("status", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("idx_flex_doc_owner", "flex_doc", ["owner_id", "updated_at"])

    # doc_version table
    op.create_table(
        "doc_version",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("doc_id", sa.Uuid(), nullable=False),
        sa.Column("version_no", sa.Integer(), nullable=False),
        sa.Column("flex_json", json_type, nullable=False),
        sa.Column("validation_report", json_type, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["doc_id"], ["flex_doc.doc_id"], ondelete="CASCADE"),
        sa.UniqueConstraint("doc_id", "version_no", name="uq_doc_version_no"),
    )

    # share table
    op.create_table(
        "share",
        sa.Column("token", sa.Text(), primary_key=True),
        sa.Column("doc_id", sa.Uuid(), nullable=False),
        sa.Column("version_no", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["doc_id"], ["flex_doc.doc_id"], ondelete="CASCADE"),
    )
    op.create_index(
        "uq_share_active_doc",
        "share",
        ["doc_id"],
        unique=True,
        postgresql_where=sa.text("is_active"),
        sqlite_where=sa.text("is_active"),
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_index("uq_share_active_doc", table_name="share")
    op.drop_table("share")
    op.drop_table("doc_version")
    op.drop_index("idx_flex_doc_owner", table_name="flex_doc")
    op.drop_table("flex_doc")
