"""Domain exceptions for the Taskboard application.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class TaskboardException(Exception):
    """Base exception for all Taskboard application errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging. Presentation layer maps
    these to HTTP responses using message, error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON error responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(TaskboardException):
    """Raised when input validation fails (e.g. empty title, unknown enum value)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(TaskboardException):
    """Raised when a referenced task or user does not exist."""

    def __init__(self, resource_type: str, resource_id: int | str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'task', 'user').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ForbiddenException(TaskboardException):
    """Raised when a capability check fails.

    Examples: a non-admin approving a task, or a direct status write on a
    super task (its status is derived from its children).
    """

    def __init__(
        self,
        message: str = "Forbidden",
        action: str | None = None,
        task_id: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if action:
            details["action"] = action
        if task_id is not None:
            details["task_id"] = task_id
        super().__init__(message, "FORBIDDEN", details)


class InvalidStateException(TaskboardException):
    """Raised when an operation is incompatible with the task's current status."""

    def __init__(self, message: str, task_id: int, status: str | None = None) -> None:
        details: dict[str, Any] = {"task_id": task_id}
        if status is not None:
            details["status"] = status
        super().__init__(message, "INVALID_STATE", details)


class InvalidGroupException(TaskboardException):
    """Raised when grouping constraints are violated (nesting, too few members)."""

    def __init__(
        self,
        message: str,
        task_id: int | None = None,
        error_code: str = "INVALID_GROUP",
    ) -> None:
        details = {"task_id": task_id} if task_id is not None else {}
        super().__init__(message, error_code, details)


class NotASuperTaskException(InvalidGroupException):
    """Raised when a membership operation targets a task that is not a container."""

    def __init__(self, task_id: int) -> None:
        super().__init__(
            f"Task {task_id} is not a super task",
            task_id=task_id,
            error_code="NOT_A_SUPER_TASK",
        )


class AlreadyGroupedException(InvalidGroupException):
    """Raised when adding a task that already belongs to a different super task."""

    def __init__(self, task_id: int, parent_task_id: int) -> None:
        super().__init__(
            f"Task {task_id} already belongs to super task {parent_task_id}",
            task_id=task_id,
            error_code="ALREADY_GROUPED",
        )
        self.details["parent_task_id"] = parent_task_id


class ConflictException(TaskboardException):
    """Raised when a write lost a race or violated a persistence constraint.

    Covers task code allocation failures and assignment replacement
    failures; the enclosing transaction is rolled back.
    """

    def __init__(self, message: str, resource_type: str | None = None) -> None:
        details = {"resource_type": resource_type} if resource_type else {}
        super().__init__(message, "CONFLICT", details)


class SqlNotConfiguredException(TaskboardException):
    """Raised when an operation requires the SQL database but it is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )
