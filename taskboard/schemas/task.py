"""Task and super task API schemas.

Descriptions are a tagged union on "type" ("text" or "checklist"); a bare
string is accepted as a text description. Dates accept a calendar date or a
datetime; datetimes are converted to the system time zone first.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskboard.application.dtos.task import UNSET, TaskSnapshot, TaskUpdate
from taskboard.core.config import get_settings
from taskboard.domain.enums import TaskCategory, TaskPriority, TaskStatus
from taskboard.domain.value_objects.core import (
    ChecklistDescription,
    ChecklistItem,
    Description,
    TextDescription,
)
from taskboard.schemas.user import UserSummary
from taskboard.shared.utils.datetime import to_system_date


class ChecklistItemSchema(BaseModel):
    """One checklist entry."""

    id: str = Field(..., min_length=1, max_length=64)
    text: str = Field(default="", max_length=500)
    checked: bool = False

    def to_domain(self) -> ChecklistItem:
        return ChecklistItem(id=self.id, text=self.text, checked=self.checked)


class TextDescriptionSchema(BaseModel):
    type: Literal["text"] = "text"
    text: str = Field(default="", max_length=10_000)


class ChecklistDescriptionSchema(BaseModel):
    type: Literal["checklist"] = "checklist"
    items: list[ChecklistItemSchema] = Field(default_factory=list, max_length=200)

    @field_validator("items")
    @classmethod
    def _unique_ids(cls, v: list[ChecklistItemSchema]) -> list[ChecklistItemSchema]:
        ids = [item.id for item in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Checklist item ids must be unique")
        return v


DescriptionSchema = Annotated[
    TextDescriptionSchema | ChecklistDescriptionSchema, Field(discriminator="type")
]


def _wrap_plain_text(v: Any) -> Any:
    if isinstance(v, str):
        return {"type": "text", "text": v}
    return v


def _system_date(v: date | datetime | None) -> date | None:
    return to_system_date(v, get_settings().timezone)


def description_to_domain(
    schema: TextDescriptionSchema | ChecklistDescriptionSchema | None,
) -> Description | None:
    """Map the request description to the domain tagged union."""
    if schema is None:
        return None
    if isinstance(schema, ChecklistDescriptionSchema):
        return ChecklistDescription(items=tuple(i.to_domain() for i in schema.items))
    return TextDescription(text=schema.text)


class TaskCreateRequest(BaseModel):
    """Request body for creating a task.

    assigned_to, when given, becomes the primary (first) assignee and is
    always part of the assignee set.
    """

    title: str = Field(..., min_length=1, max_length=200)
    description: DescriptionSchema | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    category: TaskCategory = TaskCategory.OTHER
    assigned_users: list[int] = Field(default_factory=list)
    assigned_to: int | None = None
    start_date: date | datetime | None = None
    due_date: date | datetime | None = None
    allow_unassigned: bool = Field(
        default=False, description="Admins only: create the task without assignees"
    )

    @field_validator("description", mode="before")
    @classmethod
    def _plain_text_description(cls, v: Any) -> Any:
        return _wrap_plain_text(v)

    @field_validator("start_date", "due_date", mode="after")
    @classmethod
    def _to_system_date(cls, v: date | datetime | None) -> date | None:
        return _system_date(v)


class TaskUpdateRequest(BaseModel):
    """Partial update. Only fields present in the body are changed.

    description may be null to clear it.
    """

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: DescriptionSchema | None = None
    priority: TaskPriority | None = None
    category: TaskCategory | None = None
    status: TaskStatus | None = None
    assigned_users: list[int] | None = None
    assigned_to: int | None = None
    start_date: date | datetime | None = None
    due_date: date | datetime | None = None

    @field_validator("description", mode="before")
    @classmethod
    def _plain_text_description(cls, v: Any) -> Any:
        return _wrap_plain_text(v)

    @field_validator("start_date", "due_date", mode="after")
    @classmethod
    def _to_system_date(cls, v: date | datetime | None) -> date | None:
        return _system_date(v)

    def to_update(self) -> TaskUpdate:
        """Build a TaskUpdate; fields missing from the body stay UNSET."""
        given = self.model_fields_set
        values: dict[str, Any] = {}
        for name in (
            "title",
            "priority",
            "category",
            "status",
            "assigned_users",
            "assigned_to",
            "start_date",
            "due_date",
        ):
            if name in given:
                values[name] = getattr(self, name)
        if "description" in given:
            values["description"] = description_to_domain(self.description)
        for name in ("title", "priority", "category", "status"):
            if values.get(name, UNSET) is None:
                del values[name]
        return TaskUpdate(**values)


class TaskStatusRequest(BaseModel):
    """Request body for PUT /tasks/{id}/status.

    approve (admins only) approves a completed task; with status=completed
    it completes and approves in one call.
    """

    status: TaskStatus | None = None
    approve: bool = False


class TaskAssigneesRequest(BaseModel):
    """Request body for replacing a task's assignees (first id is primary)."""

    user_ids: list[int] = Field(default_factory=list)
    allow_unassigned: bool = False


class TaskChecklistRequest(BaseModel):
    """Request body for replacing a task description with a checklist."""

    items: list[ChecklistItemSchema] = Field(default_factory=list, max_length=200)


class SuperTaskCreateRequest(BaseModel):
    """Request body for grouping tasks into a super task."""

    title: str = Field(..., min_length=1, max_length=200)
    task_ids: list[int]


class SuperTaskMemberRequest(BaseModel):
    """Request body for adding a task to a super task."""

    task_id: int


class ChecklistProgress(BaseModel):
    checked: int
    total: int


class TaskResponse(BaseModel):
    """Task read-model: resolved assignees and, for super tasks, their members."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    task_code: str | None
    title: str
    description: DescriptionSchema | None = None
    priority: TaskPriority
    category: TaskCategory
    status: TaskStatus
    admin_approved: bool
    start_date: date | None
    due_date: date | None
    assigned_to: int | None
    assigned_users: list[int] = Field(default_factory=list)
    assignees: list[UserSummary] = Field(default_factory=list)
    created_by: int
    parent_task_id: int | None
    is_super_task: bool
    children: list[TaskResponse] = Field(default_factory=list)
    checklist_progress: ChecklistProgress | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_snapshot(cls, snapshot: TaskSnapshot) -> TaskResponse:
        progress = snapshot.checklist_progress
        return cls(
            id=snapshot.id,
            task_code=snapshot.task_code,
            title=snapshot.title,
            description=(
                snapshot.description.to_payload() if snapshot.description else None
            ),
            priority=snapshot.priority,
            category=snapshot.category,
            status=snapshot.status,
            admin_approved=snapshot.admin_approved,
            start_date=snapshot.start_date,
            due_date=snapshot.due_date,
            assigned_to=snapshot.assigned_to,
            assigned_users=list(snapshot.assignee_ids),
            assignees=[UserSummary.model_validate(u) for u in snapshot.assignees],
            created_by=snapshot.created_by,
            parent_task_id=snapshot.parent_task_id,
            is_super_task=snapshot.is_super_task,
            children=[cls.from_snapshot(c) for c in snapshot.children],
            checklist_progress=(
                ChecklistProgress(checked=progress[0], total=progress[1])
                if progress
                else None
            ),
            created_at=snapshot.created_at,
            updated_at=snapshot.updated_at,
        )
