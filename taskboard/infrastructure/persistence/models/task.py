"""Task, TaskAssignment and TaskCounter ORM models.

A task is either a leaf or a super task container (is_super_task). Leaves
may point at a container through parent_task_id; containers never have a
parent. Check constraints back the structural and approval invariants.
"""

from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from taskboard.infrastructure.persistence.database import Base
from taskboard.infrastructure.persistence.models.mixins import (
    IntegerIdMixin,
    TimestampMixin,
)

# JSONB on PostgreSQL, plain JSON elsewhere.
DescriptionJSON = JSON().with_variant(JSONB(), "postgresql")


class Task(IntegerIdMixin, TimestampMixin, Base):
    """Task (leaf or super task container). Table: task."""

    __tablename__ = "task"

    task_code: Mapped[str | None] = mapped_column(
        String(16), nullable=True, unique=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    # Tagged payload: {"type": "text", "text": ...} | {"type": "checklist", "items": [...]}
    description: Mapped[dict[str, Any] | None] = mapped_column(
        DescriptionJSON, nullable=True
    )
    priority: Mapped[str] = mapped_column(
        String(16), nullable=False, default="medium", server_default="medium"
    )
    category: Mapped[str] = mapped_column(
        String(16), nullable=False, default="other", server_default="other"
    )
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default="pending", server_default="pending"
    )
    admin_approved: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    assigned_to: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_by: Mapped[int] = mapped_column(
        Integer, ForeignKey("app_user.id"), nullable=False, index=True
    )
    parent_task_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("task.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    is_super_task: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'in_progress', 'completed')",
            name="ck_task_status",
        ),
        CheckConstraint(
            "priority IN ('urgent', 'high', 'medium', 'low')",
            name="ck_task_priority",
        ),
        CheckConstraint(
            "category IN ('design', 'content', 'video', 'campaign', 'social', 'other')",
            name="ck_task_category",
        ),
        CheckConstraint(
            "NOT (is_super_task AND parent_task_id IS NOT NULL)",
            name="ck_task_super_task_not_nested",
        ),
        CheckConstraint(
            "NOT admin_approved OR status = 'completed'",
            name="ck_task_approved_implies_completed",
        ),
        Index("ix_task_root_created", "parent_task_id", "created_at"),
    )


class TaskAssignment(Base):
    """Junction: user assigned to a task. Table: task_assignment.

    position keeps the assignee order; position 0 is the primary assignee.
    """

    __tablename__ = "task_assignment"

    task_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("task.id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("app_user.id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (Index("ix_task_assignment_user_id", "user_id"),)


class TaskCounter(Base):
    """Monotonic task code counter per (role_prefix, year, month). Table: task_counter."""

    __tablename__ = "task_counter"

    role_prefix: Mapped[str] = mapped_column(String(2), primary_key=True)
    year: Mapped[int] = mapped_column(Integer, primary_key=True)
    month: Mapped[int] = mapped_column(Integer, primary_key=True)
    counter: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_task_counter_month"),
    )
