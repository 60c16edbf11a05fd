"""Initial migration: address_geographic_mappings table.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "address_geographic_mappings",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("zip_code", sa.String(10), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("county", sa.String(100), nullable=False),
        sa.Column("state", sa.String(2), nullable=False),
        sa.Column("country_code", sa.String(2), nullable=False, server_default="US"),
        sa.Column("criteria_id", sa.String(20), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("zip_code", "city", "county", "country_code", name="uq_agm_zip_city_county_country"),
        sa.UniqueConstraint("criteria_id", name="uq_agm_criteria_id"),
    )
    op.create_index("ix_agm_zip_code", "address_geographic_mappings", ["zip_code"])
    op.create_index("ix_agm_city_state", "address_geographic_mappings", ["city", "state"])
    op.create_index("ix_agm_county_state", "address_geographic_mappings", ["county", "state"])
    op.create_index("ix_agm_state", "address_geographic_mappings", ["state"])


def downgrade() -> None:
    op.drop_index("ix_agm_state", table_name="address_geographic_mappings")
    op.drop_index("ix_agm_county_state", table_name="address_geographic_mappings")
    op.drop_index("ix_agm_city_state", table_name="address_geographic_mappings")
    op.drop_index("ix_agm_zip_code", table_name="address_geographic_mappings")
    op.drop_table("address_geographic_mappings")
