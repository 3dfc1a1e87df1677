"""0001 - Leave store tables.

Revision ID: 0001_leave_store
Revises:
Create Date: 2026-10-18 09:00:00.000000+00:00
"""

import sqlalchemy as sa
from alembic import op

revision = "0001_leave_store"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "department",
        sa.Column("name", sa.String(length=255), primary_key=True),
    )
    op.create_table(
        "app_user",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("username", sa.String(length=255), nullable=True, unique=True),
        sa.Column("password", sa.String(length=255), nullable=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("department", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False),
        sa.Column("annual_leave_used", sa.Integer(), nullable=False),
        sa.Column("public_holiday_used", sa.Integer(), nullable=False),
        sa.Column("avatar", sa.String(), nullable=True),
    )
    op.create_index("ix_app_user_department", "app_user", ["department"])

    op.create_table(
        "leave_request",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("user_name", sa.String(length=255), nullable=False),
        sa.Column("department", sa.String(length=255), nullable=False),
        sa.Column("type", sa.String(length=50), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("days_count", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=50), server_default="Pending", nullable=False),
        sa.Column("reason", sa.String(), nullable=True),
    )
    op.create_index("ix_leave_request_user_id", "leave_request", ["user_id"])
    op.create_index("ix_leave_request_department", "leave_request", ["department"])
    op.create_index("ix_leave_request_status", "leave_request", ["status"])
    op.create_index("ix_leave_request_user_type", "leave_request", ["user_id", "type"])

    op.create_table(
        "role_permission",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("role", sa.String(length=50), nullable=False),
        sa.Column("feature", sa.String(length=50), nullable=False),
        sa.Column("allowed", sa.Boolean(), nullable=False),
        sa.UniqueConstraint("role", "feature", name="uq_role_permission"),
    )
    op.create_table(
        "leave_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("annual_leave_limit", sa.Integer(), nullable=False),
        sa.Column("public_holiday_count", sa.Integer(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("leave_settings")
    op.drop_table("role_permission")
    op.drop_index("ix_leave_request_user_type", table_name="leave_request")
    op.drop_index("ix_leave_request_status", table_name="leave_request")
    op.drop_index("ix_leave_request_department", table_name="leave_request")
    op.drop_index("ix_leave_request_user_id", table_name="leave_request")
    op.drop_table("leave_request")
    op.drop_index("ix_app_user_department", table_name="app_user")
    op.drop_table("app_user")
    op.drop_table("department")
