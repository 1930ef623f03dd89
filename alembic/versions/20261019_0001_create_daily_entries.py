"""create daily_entries table

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 10:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "daily_entries",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("date_key", sa.String(length=10), nullable=False, comment="YYYY-MM-DD (Asia/Kolkata)"),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "date_key", name="uq_daily_entries_user_date"),
    )
    op.create_index("ix_daily_entries_user_id", "daily_entries", ["user_id"], unique=False)
    op.create_index("ix_daily_entries_date_key", "daily_entries", ["date_key"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_daily_entries_date_key", table_name="daily_entries")
    op.drop_index("ix_daily_entries_user_id", table_name="daily_entries")
    op.drop_table("daily_entries")
