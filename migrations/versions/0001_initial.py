"""Users, work phases and timesheets.

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("access_code", sa.String(length=200), nullable=False),
        sa.Column(
            "role",
            sa.Enum("user", "admin", name="userrole"),
            nullable=False,
            server_default="user",
        ),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_access_code", "users", ["access_code"], unique=True)

    op.create_table(
        "work_phases",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("hour_threshold", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("code", name="uq_work_phases_code"),
    )
    op.create_index("ix_work_phases_category", "work_phases", ["category"], unique=False)

    op.create_table(
        "timesheets",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column(
            "type",
            sa.Enum("worked", "sick", "vacation", name="timesheettype"),
            nullable=False,
        ),
        sa.Column("work_phase_id", sa.Integer(), nullable=True),
        sa.Column("hours", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_timesheets_user", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["work_phase_id"],
            ["work_phases.id"],
            name="fk_timesheets_work_phase",
            ondelete="SET NULL",
        ),
        sa.UniqueConstraint("user_id", "date", name="uq_timesheets_user_date"),
    )
    op.create_index("ix_timesheets_user_id", "timesheets", ["user_id"], unique=False)
    op.create_index("ix_timesheets_date", "timesheets", ["date"], unique=False)
    op.create_index("ix_timesheets_work_phase_id", "timesheets", ["work_phase_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_timesheets_work_phase_id", table_name="timesheets")
    op.drop_index("ix_timesheets_date", table_name="timesheets")
    op.drop_index("ix_timesheets_user_id", table_name="timesheets")
    op.drop_table("timesheets")

    op.drop_index("ix_work_phases_category", table_name="work_phases")
    op.drop_table("work_phases")

    op.drop_index("ix_users_access_code", table_name="users")
    op.drop_table("users")

    # Enum cleanup (Postgres only)
    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        op.execute("DROP TYPE IF EXISTS timesheettype")
        op.execute("DROP TYPE IF EXISTS userrole")
