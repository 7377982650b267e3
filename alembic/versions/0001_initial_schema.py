"""Initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-01-01 00:00:00
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "group_records",
        sa.Column("id", sa.String(length=16), primary_key=True),
        sa.Column("url_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("budget", sa.Numeric(10, 2), nullable=True),
        sa.Column("organizer_telegram_id", sa.BigInteger(), nullable=True),
        sa.Column("seed", sa.BigInteger(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_group_records_organizer_telegram_id", "group_records", ["organizer_telegram_id"], unique=False
    )

    op.create_table(
        "pairings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("group_id", sa.String(length=16), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("giver_id", sa.String(length=16), nullable=False),
        sa.Column("giver_name", sa.String(), nullable=False),
        sa.Column("receiver_id", sa.String(length=16), nullable=False),
        sa.Column("receiver_name", sa.String(), nullable=False),
        sa.Column("secret_key", sa.String(length=16), nullable=False),
        sa.ForeignKeyConstraint(["group_id"], ["group_records.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("group_id", "giver_id", name="uq_pairings_group_giver"),
        sa.UniqueConstraint("group_id", "receiver_id", name="uq_pairings_group_receiver"),
    )


def downgrade() -> None:
    op.drop_table("pairings")
    op.drop_index("ix_group_records_organizer_telegram_id", table_name="group_records")
    op.drop_table("group_records")
