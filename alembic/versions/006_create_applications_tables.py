"""create shf_applications, business_categories and their join table

Revision ID: 006
Revises: 005
Create Date: 2026-09-01 09:50:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "business_categories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", name="uq_business_categories_name"),
    )
    op.create_index("ix_business_categories_id", "business_categories", ["id"], unique=False)

    op.create_table(
        "shf_applications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("company_id", sa.Integer(), nullable=False),
        sa.Column("state", sa.String(32), nullable=False, server_default="new"),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"]),
        sa.CheckConstraint(
            "state IN ('new', 'under_review', 'waiting_for_applicant', 'ready_for_review', "
            "'accepted', 'rejected', 'being_destroyed')",
            name="ck_shf_applications_state",
        ),
    )
    op.create_index("ix_shf_applications_id", "shf_applications", ["id"], unique=False)
    op.create_index("ix_shf_applications_user_id", "shf_applications", ["user_id"], unique=False)
    op.create_index("ix_shf_applications_company_id", "shf_applications", ["company_id"], unique=False)

    op.create_table(
        "application_business_categories",
        sa.Column("application_id", sa.Integer(), nullable=False),
        sa.Column("business_category_id", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("application_id", "business_category_id"),
        sa.ForeignKeyConstraint(["application_id"], ["shf_applications.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["business_category_id"], ["business_categories.id"]),
    )


def downgrade() -> None:
    op.drop_table("application_business_categories")
    op.drop_index("ix_shf_applications_company_id", table_name="shf_applications")
    op.drop_index("ix_shf_applications_user_id", table_name="shf_applications")
    op.drop_index("ix_shf_applications_id", table_name="shf_applications")
    op.drop_table("shf_applications")
    op.drop_index("ix_business_categories_id", table_name="business_categories")
    op.drop_table("business_categories")
