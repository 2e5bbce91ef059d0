"""TaskLifecycleService unit tests over in-memory repositories."""

from dataclasses import replace
from datetime import date, timedelta

import pytest

from taskboard.application.dtos.task import TaskFilters, TaskUpdate
from taskboard.application.dtos.user import UserResult
from taskboard.domain.enums import TaskCategory, TaskEventType, TaskPriority, TaskStatus
from taskboard.domain.exceptions import (
    ConflictException,
    ForbiddenException,
    InvalidStateException,
    ResourceNotFoundException,
    ValidationException,
)
from taskboard.domain.value_objects.core import (
    ChecklistItem,
    TaskCode,
    TextDescription,
)
from tests.conftest import ADMIN_ID, ASSISTANT_ID, AUDIOVISUAL_ID, DESIGNER_ID
from tests.fakes import Services


async def _create(
    services: Services, actor: UserResult, *assignees: int, title: str = "Poster"
) -> int:
    result = await services.lifecycle.create_task(
        actor, title, assigned_users=list(assignees)
    )
    return result.task.id


class TestCreateTask:
    async def test_code_prefix_follows_primary_assignee(
        self, services: Services, admin: UserResult
    ) -> None:
        result = await services.lifecycle.create_task(
            admin,
            "  Launch poster  ",
            assigned_users=[ASSISTANT_ID],
            assigned_to=DESIGNER_ID,
            priority="high",
            category="design",
        )
        task = result.task
        assert task.title == "Launch poster"
        assert task.task_code.startswith("DG")
        assert TaskCode.is_valid(task.task_code)
        assert task.assigned_to == DESIGNER_ID
        assert task.assignee_ids == (DESIGNER_ID, ASSISTANT_ID)
        assert task.priority == TaskPriority.HIGH
        assert task.category == TaskCategory.DESIGN
        assert task.status == TaskStatus.PENDING
        assert not task.admin_approved

    async def test_emits_task_assigned_without_actor(
        self, services: Services, designer: UserResult
    ) -> None:
        result = await services.lifecycle.create_task(
            designer, "Reel", assigned_users=[DESIGNER_ID, AUDIOVISUAL_ID]
        )
        assert [e.event_type for e in result.events] == [TaskEventType.TASK_ASSIGNED]
        assert result.events[0].affected_user_ids == (AUDIOVISUAL_ID,)

    async def test_self_assignment_emits_nothing(
        self, services: Services, designer: UserResult
    ) -> None:
        result = await services.lifecycle.create_task(
            designer, "Reel", assigned_to=DESIGNER_ID
        )
        assert result.events == []

    async def test_codes_are_sequential_per_prefix(
        self, services: Services, admin: UserResult
    ) -> None:
        first = await services.lifecycle.create_task(admin, "A", assigned_to=DESIGNER_ID)
        second = await services.lifecycle.create_task(admin, "B", assigned_to=DESIGNER_ID)
        assert TaskCode.parse(first.task.task_code).counter == 1
        assert TaskCode.parse(second.task.task_code).counter == 2

    async def test_requires_assignees(
        self, services: Services, designer: UserResult
    ) -> None:
        with pytest.raises(ValidationException) as exc_info:
            await services.lifecycle.create_task(designer, "Orphan")
        assert exc_info.value.details == {"field": "assigned_users"}

    async def test_unassigned_allowed_for_admin_only(
        self, services: Services, admin: UserResult, designer: UserResult
    ) -> None:
        with pytest.raises(ForbiddenException):
            await services.lifecycle.create_task(designer, "Orphan", allow_unassigned=True)
        result = await services.lifecycle.create_task(
            admin, "Backlog idea", allow_unassigned=True
        )
        assert result.task.assignees == ()
        assert result.task.assigned_to is None
        assert result.task.task_code.startswith("JM")

    @pytest.mark.parametrize("title", ["", "   ", "x" * 201])
    async def test_title_validation(
        self, services: Services, admin: UserResult, title: str
    ) -> None:
        with pytest.raises(ValidationException):
            await services.lifecycle.create_task(admin, title, assigned_to=DESIGNER_ID)

    async def test_invalid_enum_value(self, services: Services, admin: UserResult) -> None:
        with pytest.raises(ValidationException, match="priority"):
            await services.lifecycle.create_task(
                admin, "Poster", assigned_to=DESIGNER_ID, priority="critical"
            )

    async def test_unknown_assignee(self, services: Services, admin: UserResult) -> None:
        with pytest.raises(ResourceNotFoundException):
            await services.lifecycle.create_task(admin, "Poster", assigned_users=[99])
        assert services.store.tasks == {}
        assert services.store.counters == {}

    async def test_start_date_defaults_before_due_date(
        self, services: Services, admin: UserResult
    ) -> None:
        due = date(2025, 12, 15)
        result = await services.lifecycle.create_task(
            admin, "Poster", assigned_to=DESIGNER_ID, due_date=due
        )
        assert result.task.start_date == due - timedelta(days=7)
        assert result.task.due_date == due

    async def test_due_before_start_rejected(
        self, services: Services, admin: UserResult
    ) -> None:
        with pytest.raises(ValidationException, match="due_date"):
            await services.lifecycle.create_task(
                admin,
                "Poster",
                assigned_to=DESIGNER_ID,
                start_date=date(2025, 12, 10),
                due_date=date(2025, 12, 1),
            )

    async def test_description_is_kept(self, services: Services, admin: UserResult) -> None:
        result = await services.lifecycle.create_task(
            admin,
            "Poster",
            assigned_to=DESIGNER_ID,
            description=TextDescription("A3, two colours"),
        )
        assert result.task.description == TextDescription("A3, two colours")


class TestChangeStatus:
    async def test_non_admin_completion_waits_for_approval(
        self, services: Services, admin: UserResult, designer: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID, ASSISTANT_ID)
        result = await services.lifecycle.change_status(task_id, designer, "completed")
        assert result.task.status == TaskStatus.COMPLETED
        assert result.task.admin_approved is False
        (event,) = result.events
        assert event.event_type == TaskEventType.TASK_COMPLETED
        assert event.affected_user_ids == (ADMIN_ID, ASSISTANT_ID)
        assert event.context == {"approved": False}

    async def test_admin_completion_self_approves(
        self, services: Services, admin: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        result = await services.lifecycle.change_status(
            task_id, admin, TaskStatus.COMPLETED
        )
        assert result.task.admin_approved is True
        assert result.events[0].context == {"approved": True}

    @pytest.mark.parametrize("target", [TaskStatus.PENDING, TaskStatus.IN_PROGRESS])
    async def test_reopen_clears_approval(
        self, services: Services, admin: UserResult, target: TaskStatus
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        await services.lifecycle.change_status(task_id, admin, TaskStatus.COMPLETED)
        result = await services.lifecycle.change_status(task_id, admin, target)
        assert result.task.status == target
        assert result.task.admin_approved is False
        assert result.events == []

    async def test_any_state_reachable(
        self, services: Services, admin: UserResult, designer: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        for status in ("completed", "pending", "in_progress", "pending"):
            result = await services.lifecycle.change_status(task_id, designer, status)
            assert result.task.status == TaskStatus(status)

    async def test_same_status_is_noop(
        self, services: Services, admin: UserResult, designer: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        before = services.store.tasks[task_id]
        result = await services.lifecycle.change_status(task_id, designer, "pending")
        assert result.events == []
        assert services.store.tasks[task_id] == before

    async def test_missing_status_without_approve(
        self, services: Services, admin: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        with pytest.raises(ValidationException):
            await services.lifecycle.change_status(task_id, admin)

    async def test_invalid_status_value(
        self, services: Services, admin: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        with pytest.raises(ValidationException):
            await services.lifecycle.change_status(task_id, admin, "done")

    async def test_unknown_task(self, services: Services, admin: UserResult) -> None:
        with pytest.raises(ResourceNotFoundException):
            await services.lifecycle.change_status(404, admin, "completed")

    async def test_non_admin_cannot_approve_in_status_call(
        self, services: Services, admin: UserResult, designer: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        with pytest.raises(ForbiddenException):
            await services.lifecycle.change_status(
                task_id, designer, "completed", approve=True
            )

    async def test_approve_requires_completed_target(
        self, services: Services, admin: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        with pytest.raises(InvalidStateException):
            await services.lifecycle.change_status(
                task_id, admin, "in_progress", approve=True
            )

    async def test_approve_flag_without_status_approves(
        self, services: Services, admin: UserResult, designer: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        await services.lifecycle.change_status(task_id, designer, "completed")
        result = await services.lifecycle.change_status(task_id, admin, approve=True)
        assert result.task.admin_approved is True

    async def test_admin_recompleting_pending_approval_approves(
        self, services: Services, admin: UserResult, designer: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        await services.lifecycle.change_status(task_id, designer, "completed")
        result = await services.lifecycle.change_status(task_id, admin, "completed")
        assert result.task.admin_approved is True
        (event,) = result.events
        assert event.event_type == TaskEventType.TASK_APPROVED
        assert event.affected_user_ids == (DESIGNER_ID,)


class TestApprove:
    async def test_approve_completed_task(
        self, services: Services, admin: UserResult, designer: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        await services.lifecycle.change_status(task_id, designer, "completed")
        result = await services.lifecycle.approve(task_id, admin)
        assert result.task.admin_approved is True
        (event,) = result.events
        assert event.event_type == TaskEventType.TASK_APPROVED
        assert event.affected_user_ids == (DESIGNER_ID,)

    async def test_approving_twice_is_noop(
        self, services: Services, admin: UserResult, designer: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        await services.lifecycle.change_status(task_id, designer, "completed")
        await services.lifecycle.approve(task_id, admin)
        again = await services.lifecycle.approve(task_id, admin)
        assert again.task.admin_approved is True
        assert again.events == []

    async def test_non_admin_forbidden(
        self, services: Services, admin: UserResult, designer: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        await services.lifecycle.change_status(task_id, designer, "completed")
        with pytest.raises(ForbiddenException):
            await services.lifecycle.approve(task_id, designer)

    async def test_not_completed_is_invalid_state(
        self, services: Services, admin: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        with pytest.raises(InvalidStateException) as exc_info:
            await services.lifecycle.approve(task_id, admin)
        assert exc_info.value.details["status"] == "pending"


class TestAssignment:
    async def test_replace_assignees(
        self, services: Services, admin: UserResult, designer: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        result = await services.lifecycle.update_assignment(
            task_id, designer, [ASSISTANT_ID, DESIGNER_ID, ASSISTANT_ID]
        )
        assert result.task.assignee_ids == (ASSISTANT_ID, DESIGNER_ID)
        assert result.task.assigned_to == ASSISTANT_ID
        (event,) = result.events
        assert event.event_type == TaskEventType.TASK_ASSIGNED
        assert event.affected_user_ids == (ASSISTANT_ID,)

    async def test_same_set_is_noop(self, services: Services, admin: UserResult) -> None:
        task_id = await _create(services, admin, DESIGNER_ID, ASSISTANT_ID)
        result = await services.lifecycle.update_assignment(
            task_id, admin, [DESIGNER_ID, ASSISTANT_ID]
        )
        assert result.events == []

    async def test_outsider_forbidden(
        self, services: Services, admin: UserResult, audiovisual: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        with pytest.raises(ForbiddenException):
            await services.lifecycle.update_assignment(
                task_id, audiovisual, [AUDIOVISUAL_ID]
            )

    async def test_empty_set_requires_admin_opt_in(
        self, services: Services, admin: UserResult, designer: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        with pytest.raises(ValidationException):
            await services.lifecycle.update_assignment(task_id, admin, [])
        with pytest.raises(ForbiddenException):
            await services.lifecycle.update_assignment(
                task_id, designer, [], allow_unassigned=True
            )
        result = await services.lifecycle.update_assignment(
            task_id, admin, [], allow_unassigned=True
        )
        assert result.task.assignees == ()
        assert result.task.assigned_to is None

    async def test_failed_replace_keeps_previous_set(
        self, services: Services, admin: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        services.assignments.fail_on_replace = True
        with pytest.raises(ConflictException):
            await services.lifecycle.update_assignment(task_id, admin, [ASSISTANT_ID])
        assert services.store.assignments[task_id] == [DESIGNER_ID]
        assert services.store.tasks[task_id].assigned_to == DESIGNER_ID

    async def test_group_members_are_reassigned_individually(
        self, services: Services, admin: UserResult
    ) -> None:
        a = await _create(services, admin, DESIGNER_ID)
        b = await _create(services, admin, DESIGNER_ID)
        await services.super_tasks.create_group(admin, "Campaign", [a, b])
        await services.lifecycle.update_assignment(a, admin, [ASSISTANT_ID])
        assert services.store.assignments[b] == [DESIGNER_ID]


class TestUpdateTask:
    async def test_partial_update_changes_only_given_fields(
        self, services: Services, admin: UserResult, designer: UserResult
    ) -> None:
        result = await services.lifecycle.create_task(
            admin, "Poster", assigned_to=DESIGNER_ID, priority="low"
        )
        task_id = result.task.id
        updated = await services.lifecycle.update_task(
            task_id, designer, TaskUpdate(title="Poster v2", category="campaign")
        )
        assert updated.task.title == "Poster v2"
        assert updated.task.category == TaskCategory.CAMPAIGN
        assert updated.task.priority == TaskPriority.LOW
        assert updated.task.task_code == result.task.task_code

    async def test_description_can_be_cleared(
        self, services: Services, admin: UserResult
    ) -> None:
        result = await services.lifecycle.create_task(
            admin, "Poster", assigned_to=DESIGNER_ID, description=TextDescription("x")
        )
        updated = await services.lifecycle.update_task(
            result.task.id, admin, TaskUpdate(description=None)
        )
        assert updated.task.description is None

    async def test_status_through_update_follows_approval_gate(
        self, services: Services, admin: UserResult, designer: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        result = await services.lifecycle.update_task(
            task_id, designer, TaskUpdate(status="completed")
        )
        assert result.task.status == TaskStatus.COMPLETED
        assert result.task.admin_approved is False
        assert [e.event_type for e in result.events] == [TaskEventType.TASK_COMPLETED]

    async def test_assigned_to_moves_primary_to_front(
        self, services: Services, admin: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID, ASSISTANT_ID)
        result = await services.lifecycle.update_task(
            task_id, admin, TaskUpdate(assigned_to=ASSISTANT_ID)
        )
        assert result.task.assignee_ids == (ASSISTANT_ID, DESIGNER_ID)
        assert result.task.assigned_to == ASSISTANT_ID
        assert result.events == []

    async def test_dates_checked_against_stored_values(
        self, services: Services, admin: UserResult
    ) -> None:
        result = await services.lifecycle.create_task(
            admin,
            "Poster",
            assigned_to=DESIGNER_ID,
            start_date=date(2025, 12, 1),
            due_date=date(2025, 12, 10),
        )
        with pytest.raises(ValidationException):
            await services.lifecycle.update_task(
                result.task.id, admin, TaskUpdate(due_date=date(2025, 11, 30))
            )

    async def test_outsider_forbidden(
        self, services: Services, admin: UserResult, audiovisual: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        with pytest.raises(ForbiddenException):
            await services.lifecycle.update_task(
                task_id, audiovisual, TaskUpdate(title="Mine now")
            )

    async def test_status_on_super_task_forbidden(
        self, services: Services, admin: UserResult
    ) -> None:
        a = await _create(services, admin, DESIGNER_ID)
        b = await _create(services, admin, DESIGNER_ID)
        group = await services.super_tasks.create_group(admin, "Campaign", [a, b])
        with pytest.raises(ForbiddenException):
            await services.lifecycle.update_task(
                group.task.id, admin, TaskUpdate(status="completed")
            )
        renamed = await services.lifecycle.update_task(
            group.task.id, admin, TaskUpdate(title="Campaign Q4")
        )
        assert renamed.task.title == "Campaign Q4"


class TestChecklist:
    async def test_checklist_progress(
        self, services: Services, admin: UserResult, designer: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        result = await services.lifecycle.update_checklist(
            task_id,
            designer,
            [
                ChecklistItem(id="1", text="Sketch", checked=True),
                ChecklistItem(id="2", text="Colour"),
                ChecklistItem(id="3", text="Export"),
            ],
        )
        assert result.task.checklist_progress == (1, 3)

    async def test_duplicate_ids_rejected(
        self, services: Services, admin: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        with pytest.raises(ValidationException):
            await services.lifecycle.update_checklist(
                task_id,
                admin,
                [ChecklistItem(id="1", text="a"), ChecklistItem(id="1", text="b")],
            )


class TestDeleteTask:
    async def test_admin_only(
        self, services: Services, admin: UserResult, designer: UserResult
    ) -> None:
        task_id = await _create(services, admin, DESIGNER_ID)
        with pytest.raises(ForbiddenException):
            await services.lifecycle.delete_task(task_id, designer)
        await services.lifecycle.delete_task(task_id, admin)
        assert task_id not in services.store.tasks
        assert task_id not in services.store.assignments

    async def test_deleting_super_task_orphans_members(
        self, services: Services, admin: UserResult
    ) -> None:
        a = await _create(services, admin, DESIGNER_ID)
        b = await _create(services, admin, DESIGNER_ID)
        group = await services.super_tasks.create_group(admin, "Campaign", [a, b])
        await services.lifecycle.delete_task(group.task.id, admin)
        assert group.task.id not in services.store.tasks
        for member in (a, b):
            assert services.store.tasks[member].parent_task_id is None

    async def test_deleting_super_task_locks_members_before_container(
        self, services: Services, admin: UserResult
    ) -> None:
        b = await _create(services, admin, DESIGNER_ID)
        a = await _create(services, admin, DESIGNER_ID)
        group = await services.super_tasks.create_group(admin, "Campaign", [a, b])
        services.store.locked.clear()
        await services.lifecycle.delete_task(group.task.id, admin)
        assert services.store.locked == [b, a, group.task.id]

    async def test_deleting_member_rederives_container(
        self, services: Services, admin: UserResult
    ) -> None:
        a = await _create(services, admin, DESIGNER_ID)
        b = await _create(services, admin, DESIGNER_ID)
        group = await services.super_tasks.create_group(
            services.store.users[DESIGNER_ID], "Campaign", [a, b]
        )
        await services.lifecycle.change_status(a, admin, "completed")
        assert services.store.tasks[group.task.id].status == TaskStatus.IN_PROGRESS

        events = await services.lifecycle.delete_task(b, admin)
        container = services.store.tasks[group.task.id]
        assert container.status == TaskStatus.COMPLETED
        assert container.admin_approved is True
        (event,) = events
        assert event.event_type == TaskEventType.SUPER_TASK_COMPLETED
        assert event.affected_user_ids == (DESIGNER_ID,)


class TestQueries:
    async def test_list_returns_roots_newest_first_with_children(
        self, services: Services, admin: UserResult
    ) -> None:
        a = await _create(services, admin, DESIGNER_ID, title="A")
        b = await _create(services, admin, ASSISTANT_ID, title="B")
        c = await _create(services, admin, ASSISTANT_ID, title="C")
        group = await services.super_tasks.create_group(admin, "Group", [a, b])
        listed = await services.lifecycle.list_tasks()
        assert [t.id for t in listed] == [group.task.id, c]
        assert [child.id for child in listed[0].children] == [a, b]
        assert listed[0].children[0].assignee_ids == (DESIGNER_ID,)

    async def test_filter_by_assignee_and_status(
        self, services: Services, admin: UserResult
    ) -> None:
        a = await _create(services, admin, DESIGNER_ID)
        b = await _create(services, admin, ASSISTANT_ID)
        await services.lifecycle.change_status(b, admin, "in_progress")
        mine = await services.lifecycle.list_tasks(TaskFilters(assigned_to=DESIGNER_ID))
        assert [t.id for t in mine] == [a]
        active = await services.lifecycle.list_tasks(
            TaskFilters(status=TaskStatus.IN_PROGRESS)
        )
        assert [t.id for t in active] == [b]

    async def test_get_by_code(self, services: Services, admin: UserResult) -> None:
        result = await services.lifecycle.create_task(
            admin, "Poster", assigned_to=DESIGNER_ID
        )
        found = await services.lifecycle.get_task_by_code(result.task.task_code)
        assert found.id == result.task.id
        with pytest.raises(ResourceNotFoundException):
            await services.lifecycle.get_task_by_code("DGnov99925")

    async def test_container_status_recomputed_on_read(
        self, services: Services, admin: UserResult
    ) -> None:
        a = await _create(services, admin, DESIGNER_ID)
        b = await _create(services, admin, DESIGNER_ID)
        group = await services.super_tasks.create_group(admin, "Group", [a, b])
        # A child write whose rollup has not landed yet.
        services.store.tasks[a] = replace(
            services.store.tasks[a], status=TaskStatus.IN_PROGRESS
        )
        snapshot = await services.lifecycle.get_task(group.task.id)
        assert snapshot.status == TaskStatus.IN_PROGRESS
        assert services.store.tasks[group.task.id].status == TaskStatus.PENDING
