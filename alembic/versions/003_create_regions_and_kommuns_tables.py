"""create regions and kommuns tables

Revision ID: 003
Revises: 002
Create Date: 2026-09-01 09:20:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "regions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("code", sa.String(8), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_regions_name"),
    )
    op.create_index("ix_regions_id", "regions", ["id"], unique=False)

    op.create_table(
        "kommuns",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_kommuns_name"),
    )
    op.create_index("ix_kommuns_id", "kommuns", ["id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_kommuns_id", table_name="kommuns")
    op.drop_table("kommuns")
    op.drop_index("ix_regions_id", table_name="regions")
    op.drop_table("regions")
