"""create users table and seed the first admin

Revision ID: 002
Revises: 001
Create Date: 2026-09-01 09:10:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from passlib.context import CryptContext

# revision identifiers, used by Alembic.
revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("first_name", sa.String(255), nullable=True),
        sa.Column("last_name", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("role_id", sa.Integer(), nullable=False),
        sa.Column("member", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("membership_start_date", sa.Date(), nullable=True),
        sa.Column("membership_expire_date", sa.Date(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"]),
    )
    op.create_index("ix_users_id", "users", ["id"], unique=False)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    from shf.core.config import settings

    connection = op.get_bind()
    admin_role = connection.execute(sa.text("SELECT id FROM roles WHERE name = 'admin'")).fetchone()
    if not admin_role:
        raise ValueError("Admin role not found. Make sure migration 001 has been run.")

    op.execute(
        sa.text(
            """
            INSERT INTO users (email, password_hash, role_id, member)
            VALUES (:email, :password_hash, :role_id, :member)
            """
        ).bindparams(
            email=settings.first_admin_email,
            password_hash=pwd_context.hash(settings.first_admin_password),
            role_id=admin_role[0],
            member=False,
        )
    )


def downgrade() -> None:
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")
