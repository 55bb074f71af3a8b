"""create addresses table

Revision ID: 005
Revises: 004
Create Date: 2026-09-01 09:40:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "addresses",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        # Owner reference; no foreign key because owners live in different tables
        sa.Column("addressable_type", sa.String(64), nullable=False),
        sa.Column("addressable_id", sa.Integer(), nullable=False),
        sa.Column("street_address", sa.String(255), nullable=True),
        sa.Column("post_code", sa.String(16), nullable=True),
        sa.Column("city", sa.String(255), nullable=True),
        sa.Column("country", sa.String(255), nullable=False, server_default="Sverige"),
        sa.Column("region_id", sa.Integer(), nullable=True),
        sa.Column("kommun_id", sa.Integer(), nullable=True),
        sa.Column("visibility", sa.String(32), nullable=False, server_default="street_address"),
        sa.Column("mail", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["region_id"], ["regions.id"]),
        sa.ForeignKeyConstraint(["kommun_id"], ["kommuns.id"]),
        sa.CheckConstraint(
            "visibility IN ('street_address', 'post_code', 'city', 'kommun', 'none')",
            name="ck_addresses_visibility",
        ),
    )
    op.create_index("ix_addresses_id", "addresses", ["id"], unique=False)
    op.create_index("ix_addresses_addressable_id", "addresses", ["addressable_id"], unique=False)
    op.create_index(
        "ix_addresses_addressable", "addresses", ["addressable_type", "addressable_id"], unique=False
    )


def downgrade() -> None:
    op.drop_index("ix_addresses_addressable", table_name="addresses")
    op.drop_index("ix_addresses_addressable_id", table_name="addresses")
    op.drop_index("ix_addresses_id", table_name="addresses")
    op.drop_table("addresses")
