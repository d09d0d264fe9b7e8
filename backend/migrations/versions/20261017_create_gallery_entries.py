"""Create gallery_entries table.

Revision ID: 20261017_gallery_entries
Revises:
Create Date: 2026-10-17
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20261017_gallery_entries"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "gallery_entries",
        sa.Column("sequence", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("entry_id", sa.String(length=36), nullable=False),
        sa.Column("image_ref", sa.Text(), nullable=False),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("entry_id", name="uq_gallery_entries_entry_id"),
        sa.CheckConstraint(
            "length(trim(image_ref)) > 0", name="ck_gallery_entries_image_ref"
        ),
    )
    op.create_index(
        "ix_gallery_entries_created_at_sequence",
        "gallery_entries",
        [sa.text("created_at DESC"), sa.text("sequence DESC")],
    )


def downgrade() -> None:
    op.drop_index(
        "ix_gallery_entries_created_at_sequence", table_name="gallery_entries"
    )
    op.drop_table("gallery_entries")
