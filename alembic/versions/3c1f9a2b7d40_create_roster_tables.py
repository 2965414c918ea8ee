"""create roster tables

Revision ID: 3c1f9a2b7d40
Revises:
Create Date: 2026-10-19 10:12:41.508312

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3c1f9a2b7d40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ROLES = ("HOST", "WAIT", "BRUN", "KRUN", "BART", "MGR")


def upgrade():
    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("role", sa.Enum(*ROLES, name="role_code", native_enum=False), nullable=False),
        sa.Column("preferred_start", sa.String(length=32), nullable=True),
        sa.Column("status", sa.Enum("active", "vacation", name="employee_status", native_enum=False), nullable=False),
    )
    op.create_index("ix_employees_role", "employees", ["role"])

    op.create_table(
        "coverage_rules",
        sa.Column("role", sa.Enum(*ROLES, name="role_code", native_enum=False), primary_key=True),
        sa.Column("day_type", sa.Enum("weekday", "weekend", name="day_type", native_enum=False), primary_key=True),
        sa.Column("min_staff", sa.Integer(), nullable=False),
        sa.CheckConstraint("min_staff >= 0", name="ck_coverage_rule_min_staff"),
    )

    op.create_table(
        "requests",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("type", sa.Enum("LIBRE", "unavailable", "VACATION", name="request_type", native_enum=False), nullable=False),
    )
    op.create_index("ix_requests_employee_id", "requests", ["employee_id"])
    op.create_index("ix_requests_date", "requests", ["date"])

    op.create_table(
        "schedule_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("status", sa.Enum("working", "LIBRE", "VACATION", "-", name="entry_status", native_enum=False), nullable=False),
        sa.Column("shift_start", sa.String(length=32), nullable=True),
        sa.UniqueConstraint("employee_id", "date", name="uq_schedule_entry_employee_date"),
    )
    op.create_index("ix_schedule_entries_employee_id", "schedule_entries", ["employee_id"])
    op.create_index("ix_schedule_entries_date", "schedule_entries", ["date"])


def downgrade():
    op.drop_index("ix_schedule_entries_date", table_name="schedule_entries")
    op.drop_index("ix_schedule_entries_employee_id", table_name="schedule_entries")
    op.drop_table("schedule_entries")
    op.drop_index("ix_requests_date", table_name="requests")
    op.drop_index("ix_requests_employee_id", table_name="requests")
    op.drop_table("requests")
    op.drop_table("coverage_rules")
    op.drop_index("ix_employees_role", table_name="employees")
    op.drop_table("employees")
