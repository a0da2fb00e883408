"""create district_data table

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 09:30:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "district_data",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "district_name",
            sa.String(length=255),
            nullable=False,
            comment="Trimmed, lower-cased district name",
        ),
        sa.Column("state_name", sa.String(length=255), nullable=True),
        sa.Column("month", sa.String(length=32), nullable=True),
        sa.Column("fin_year", sa.String(length=32), nullable=True),
        sa.Column("record_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "data",
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
            comment="Raw provider records in arrival order",
        ),
        sa.Column(
            "last_updated",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("district_name", name="uq_district_data_district_name"),
    )
    op.create_index("ix_district_data_last_updated", "district_data", ["last_updated"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_district_data_last_updated", table_name="district_data")
    op.drop_table("district_data")
