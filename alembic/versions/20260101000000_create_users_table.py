"""Create users table (credentials, role, profile).

Revision ID: 20260101000000
Revises:
Create Date: 2026-01-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "20260101000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_name", sa.String(length=100), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="ReadOnly"),
        sa.Column("email_id", sa.String(length=255), nullable=False),
        sa.Column("mobile_num", sa.String(length=20), nullable=False),
        sa.Column("profile_pic_url", sa.String(length=500), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_users_user_name"),
        "users",
        ["user_name"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_index(op.f("ix_users_user_name"), table_name="users")
    op.drop_table("users")
