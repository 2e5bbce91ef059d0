"""initial_task_schema

Revision ID: 3f1c2a9b7d10
Revises:
Create Date: 2026-10-19 09:12:41.518204

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9b7d10"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "app_user",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("full_name", sa.String(length=100), nullable=False),
        sa.Column("role", sa.String(length=50), nullable=False),
        sa.Column(
            "avatar_color",
            sa.String(length=16),
            server_default="#6366f1",
            nullable=False,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username", name="uq_app_user_username"),
    )
    op.create_index("ix_app_user_role", "app_user", ["role"])

    op.create_table(
        "task",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("task_code", sa.String(length=16), nullable=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", postgresql.JSONB(), nullable=True),
        sa.Column("priority", sa.String(length=16), server_default="medium", nullable=False),
        sa.Column("category", sa.String(length=16), server_default="other", nullable=False),
        sa.Column("status", sa.String(length=32), server_default="pending", nullable=False),
        sa.Column(
            "admin_approved", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("assigned_to", sa.Integer(), nullable=True),
        sa.Column("created_by", sa.Integer(), nullable=False),
        sa.Column("parent_task_id", sa.Integer(), nullable=True),
        sa.Column(
            "is_super_task", sa.Boolean(), server_default=sa.text("false"), nullable=False
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("task_code", name="uq_task_task_code"),
        sa.ForeignKeyConstraint(["assigned_to"], ["app_user.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["created_by"], ["app_user.id"]),
        sa.ForeignKeyConstraint(["parent_task_id"], ["task.id"], ondelete="SET NULL"),
        sa.CheckConstraint(
            "status IN ('pending', 'in_progress', 'completed')", name="ck_task_status"
        ),
        sa.CheckConstraint(
            "priority IN ('urgent', 'high', 'medium', 'low')", name="ck_task_priority"
        ),
        sa.CheckConstraint(
            "category IN ('design', 'content', 'video', 'campaign', 'social', 'other')",
            name="ck_task_category",
        ),
        sa.CheckConstraint(
            "NOT (is_super_task AND parent_task_id IS NOT NULL)",
            name="ck_task_super_task_not_nested",
        ),
        sa.CheckConstraint(
            "NOT admin_approved OR status = 'completed'",
            name="ck_task_approved_implies_completed",
        ),
    )
    op.create_index("ix_task_assigned_to", "task", ["assigned_to"])
    op.create_index("ix_task_created_by", "task", ["created_by"])
    op.create_index("ix_task_parent_task_id", "task", ["parent_task_id"])
    op.create_index("ix_task_root_created", "task", ["parent_task_id", "created_at"])

    op.create_table(
        "task_assignment",
        sa.Column("task_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("task_id", "user_id"),
        sa.ForeignKeyConstraint(["task_id"], ["task.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_task_assignment_user_id", "task_assignment", ["user_id"])

    op.create_table(
        "task_counter",
        sa.Column("role_prefix", sa.String(length=2), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("counter", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("role_prefix", "year", "month"),
        sa.CheckConstraint("month BETWEEN 1 AND 12", name="ck_task_counter_month"),
    )

    op.create_table(
        "notification",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(length=32), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("link", sa.String(length=500), nullable=True),
        sa.Column("is_read", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_notification_user_read", "notification", ["user_id", "is_read"])
    op.create_index(
        "ix_notification_user_created", "notification", ["user_id", "created_at"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_notification_user_created", table_name="notification")
    op.drop_index("ix_notification_user_read", table_name="notification")
    op.drop_table("notification")
    op.drop_table("task_counter")
    op.drop_index("ix_task_assignment_user_id", table_name="task_assignment")
    op.drop_table("task_assignment")
    op.drop_index("ix_task_root_created", table_name="task")
    op.drop_index("ix_task_parent_task_id", table_name="task")
    op.drop_index("ix_task_created_by", table_name="task")
    op.drop_index("ix_task_assigned_to", table_name="task")
    op.drop_table("task")
    op.drop_index("ix_app_user_role", table_name="app_user")
    op.drop_table("app_user")
