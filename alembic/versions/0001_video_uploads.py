"""video upload tables

Revision ID: 0001_video_uploads
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = "0001_video_uploads"
down_revision = None
branch_labels = None
depends_on = None

TABLES = ("video_uploads", "masterclass_video_uploads")


def upgrade() -> None:
    for table in TABLES:
        op.create_table(
            table,
            sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
            sa.Column("user_id", sa.Text(), nullable=False),
            sa.Column("filename", sa.Text(), nullable=False),
            sa.Column("b2_url", sa.Text(), nullable=True),
            sa.Column("asset_id", sa.String(length=128), nullable=True),
            sa.Column("playback_id", sa.String(length=128), nullable=True),
            sa.Column("status", sa.String(length=32), nullable=False, server_default="processing"),
            sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        )
        op.create_index(f"ix_{table}_user_id", table, ["user_id"])
        op.create_index(f"ix_{table}_asset_id", table, ["asset_id"])


def downgrade() -> None:
    for table in reversed(TABLES):
        op.drop_index(f"ix_{table}_asset_id", table_name=table)
        op.drop_index(f"ix_{table}_user_id", table_name=table)
        op.drop_table(table)
