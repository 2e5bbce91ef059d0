"""Domain value objects and shared value types."""

from taskboard.domain.value_objects.core import (
    MONTH_ABBREVIATIONS,
    ChecklistDescription,
    ChecklistItem,
    Description,
    Role,
    TaskCode,
    TextDescription,
    description_from_payload,
)

__all__ = [
    "MONTH_ABBREVIATIONS",
    "ChecklistDescription",
    "ChecklistItem",
    "Description",
    "Role",
    "TaskCode",
    "TextDescription",
    "description_from_payload",
]
