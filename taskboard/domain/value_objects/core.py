"""Domain value objects for the Taskboard application.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass, field
from typing import Any, ClassVar

# Three-letter month abbreviations embedded in task codes (index 0 = January).
MONTH_ABBREVIATIONS: tuple[str, ...] = (
    "ene",
    "feb",
    "mar",
    "abr",
    "may",
    "jun",
    "jul",
    "ago",
    "sep",
    "oct",
    "nov",
    "dic",
)

# PREFIX + month + counter (3+ digits) + 2-digit year, e.g. DGnov00125.
_TASK_CODE_RE = re.compile(r"^([A-Z]{2})([a-z]{3})(\d{3,})(\d{2})$")
_ROLE_PREFIX_RE = re.compile(r"^[A-Z]{2}$")


@dataclass(frozen=True)
class Role:
    """Value object for a user role.

    Roles are free-form strings (custom roles are allowed); capability is
    looked up through RoleRegistry, never by enumerating roles here.
    Normalized to lowercase without surrounding whitespace.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate non-empty and normalize.

        Raises:
            ValueError: If role is empty or longer than 50 characters.
        """
        normalized = (self.value or "").strip().lower()
        object.__setattr__(self, "value", normalized)
        if not normalized:
            raise ValueError("Role must be a non-empty string")
        if len(normalized) > 50:
            raise ValueError("Role must not exceed 50 characters")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TaskCode:
    """Human-readable task reference (role prefix + month + counter + year).

    Allocated once at creation and never mutated. Example: ``DGnov00125`` is
    the first DG task of November 2025.
    """

    role_prefix: str
    year: int
    month: int
    counter: int

    def __post_init__(self) -> None:
        if not _ROLE_PREFIX_RE.match(self.role_prefix):
            raise ValueError("Role prefix must be two upper-case letters")
        if not 1 <= self.month <= 12:
            raise ValueError("Month must be between 1 and 12")
        if self.counter < 1:
            raise ValueError("Counter must be a positive integer")
        if self.year < 2000:
            raise ValueError("Year must be 2000 or later")

    @property
    def value(self) -> str:
        """Formatted code string."""
        month_abbr = MONTH_ABBREVIATIONS[self.month - 1]
        return f"{self.role_prefix}{month_abbr}{self.counter:03d}{self.year % 100:02d}"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, code: str) -> "TaskCode":
        """Parse a formatted code back into its components.

        Raises:
            ValueError: If the code does not match the task code format.
        """
        match = _TASK_CODE_RE.match(code or "")
        if not match:
            raise ValueError(f"Invalid task code: {code!r}")
        prefix, month_abbr, counter, year = match.groups()
        if month_abbr not in MONTH_ABBREVIATIONS:
            raise ValueError(f"Invalid month in task code: {month_abbr!r}")
        return cls(
            role_prefix=prefix,
            year=2000 + int(year),
            month=MONTH_ABBREVIATIONS.index(month_abbr) + 1,
            counter=int(counter),
        )

    @staticmethod
    def is_valid(code: str) -> bool:
        """Return whether code is a well-formed task code."""
        try:
            TaskCode.parse(code)
        except ValueError:
            return False
        return True


@dataclass(frozen=True)
class ChecklistItem:
    """Single checklist entry."""

    id: str
    text: str
    checked: bool = False

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Checklist item id must be a non-empty string")


@dataclass(frozen=True)
class TextDescription:
    """Plain text task description."""

    text: str

    type: ClassVar[str] = "text"

    def to_payload(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class ChecklistDescription:
    """Structured checklist task description."""

    items: tuple[ChecklistItem, ...] = field(default_factory=tuple)

    type: ClassVar[str] = "checklist"

    def __post_init__(self) -> None:
        ids = [item.id for item in self.items]
        if len(ids) != len(set(ids)):
            raise ValueError("Checklist item ids must be unique")

    @property
    def checked_count(self) -> int:
        return sum(1 for item in self.items if item.checked)

    @property
    def total_count(self) -> int:
        return len(self.items)

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "items": [
                {"id": item.id, "text": item.text, "checked": item.checked}
                for item in self.items
            ],
        }


Description = TextDescription | ChecklistDescription


def description_from_payload(payload: dict[str, Any] | None) -> Description | None:
    """Build a Description from its stored tagged payload.

    Raises:
        ValueError: If the payload tag is unknown or items are malformed.
    """
    if payload is None:
        return None
    kind = payload.get("type")
    if kind == TextDescription.type:
        return TextDescription(text=str(payload.get("text") or ""))
    if kind == ChecklistDescription.type:
        items = tuple(
            ChecklistItem(
                id=str(raw["id"]),
                text=str(raw.get("text") or ""),
                checked=bool(raw.get("checked", False)),
            )
            for raw in payload.get("items") or []
        )
        return ChecklistDescription(items=items)
    raise ValueError(f"Unknown description type: {kind!r}")
