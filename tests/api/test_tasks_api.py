"""Task endpoint tests (HTTP client over in-memory repositories)."""

from httpx import AsyncClient

from taskboard.domain.value_objects.core import TaskCode
from tests.conftest import ADMIN_ID, ASSISTANT_ID, AUDIOVISUAL_ID, DESIGNER_ID, as_user
from tests.fakes import Services

API = "/api/v1/tasks"


async def _create(client: AsyncClient, actor: int = ADMIN_ID, **body) -> dict:
    payload = {"title": "Poster", "assigned_users": [DESIGNER_ID], **body}
    response = await client.post(API, json=payload, headers=as_user(actor))
    assert response.status_code == 201, response.text
    return response.json()


class TestActingUser:
    async def test_missing_header_is_401(self, client: AsyncClient) -> None:
        response = await client.get(API)
        assert response.status_code == 401

    async def test_unknown_user_is_401(self, client: AsyncClient) -> None:
        response = await client.get(API, headers=as_user(999))
        assert response.status_code == 401

    async def test_non_integer_header_is_400(self, client: AsyncClient) -> None:
        response = await client.get(API, headers={"X-User-ID": "ana"})
        assert response.status_code == 400


class TestCreateAndRead:
    async def test_create_task(self, client: AsyncClient, services: Services) -> None:
        data = await _create(
            client,
            description="A3 poster, two colours",
            assigned_to=ASSISTANT_ID,
            priority="urgent",
            category="design",
            due_date="2025-12-15",
        )
        assert TaskCode.parse(data["task_code"]).role_prefix == "AM"
        assert data["assigned_to"] == ASSISTANT_ID
        assert data["assigned_users"] == [ASSISTANT_ID, DESIGNER_ID]
        assert [u["username"] for u in data["assignees"]] == ["alma", "diego"]
        assert data["description"] == {"type": "text", "text": "A3 poster, two colours"}
        assert data["start_date"] == "2025-12-08"
        assert data["status"] == "pending"
        assert data["admin_approved"] is False
        assert data["children"] == []
        assert [e.event_type.value for e in services.emitter.events] == ["task_assigned"]

    async def test_checklist_description(self, client: AsyncClient) -> None:
        data = await _create(
            client,
            description={
                "type": "checklist",
                "items": [
                    {"id": "1", "text": "Sketch", "checked": True},
                    {"id": "2", "text": "Print"},
                ],
            },
        )
        assert data["description"]["type"] == "checklist"
        assert data["checklist_progress"] == {"checked": 1, "total": 2}

    async def test_datetime_due_date_uses_system_zone(self, client: AsyncClient) -> None:
        data = await _create(client, due_date="2025-12-01T03:00:00Z")
        assert data["due_date"] == "2025-11-30"

    async def test_validation_errors(self, client: AsyncClient) -> None:
        response = await client.post(
            API, json={"title": "", "assigned_users": [DESIGNER_ID]}, headers=as_user(ADMIN_ID)
        )
        assert response.status_code == 422
        response = await client.post(
            API,
            json={"title": "X", "assigned_users": [DESIGNER_ID], "priority": "asap"},
            headers=as_user(ADMIN_ID),
        )
        assert response.status_code == 422

    async def test_no_assignees_is_400(self, client: AsyncClient) -> None:
        response = await client.post(
            API, json={"title": "Orphan"}, headers=as_user(DESIGNER_ID)
        )
        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    async def test_unknown_assignee_is_404(self, client: AsyncClient) -> None:
        response = await client.post(
            API, json={"title": "X", "assigned_users": [42]}, headers=as_user(ADMIN_ID)
        )
        assert response.status_code == 404

    async def test_get_by_id_and_code(self, client: AsyncClient) -> None:
        created = await _create(client)
        by_id = await client.get(f"{API}/{created['id']}", headers=as_user(DESIGNER_ID))
        assert by_id.status_code == 200
        assert by_id.headers["x-poll-interval"]
        by_code = await client.get(
            f"{API}/by-code/{created['task_code']}", headers=as_user(DESIGNER_ID)
        )
        assert by_code.json()["id"] == created["id"]
        missing = await client.get(f"{API}/999", headers=as_user(DESIGNER_ID))
        assert missing.status_code == 404
        assert missing.json()["error"] == "RESOURCE_NOT_FOUND"

    async def test_list_with_filters(self, client: AsyncClient) -> None:
        first = await _create(client, title="Mine")
        second = await _create(client, title="Theirs", assigned_users=[ASSISTANT_ID])
        listed = await client.get(API, headers=as_user(DESIGNER_ID))
        assert [t["id"] for t in listed.json()] == [second["id"], first["id"]]
        mine = await client.get(
            API, params={"assigned_to": DESIGNER_ID}, headers=as_user(DESIGNER_ID)
        )
        assert [t["id"] for t in mine.json()] == [first["id"]]
        urgent = await client.get(
            API, params={"priority": "urgent"}, headers=as_user(DESIGNER_ID)
        )
        assert urgent.json() == []


class TestStatusAndApproval:
    async def test_non_admin_completion_then_admin_approval(
        self, client: AsyncClient
    ) -> None:
        task = await _create(client)
        done = await client.put(
            f"{API}/{task['id']}/status",
            json={"status": "completed"},
            headers=as_user(DESIGNER_ID),
        )
        assert done.status_code == 200
        assert done.json()["admin_approved"] is False

        forbidden = await client.post(
            f"{API}/{task['id']}/approve", headers=as_user(DESIGNER_ID)
        )
        assert forbidden.status_code == 403

        approved = await client.post(
            f"{API}/{task['id']}/approve", headers=as_user(ADMIN_ID)
        )
        assert approved.status_code == 200
        assert approved.json()["admin_approved"] is True

    async def test_admin_completion_self_approves(self, client: AsyncClient) -> None:
        task = await _create(client)
        response = await client.put(
            f"{API}/{task['id']}/status",
            json={"status": "completed"},
            headers=as_user(ADMIN_ID),
        )
        assert response.json()["admin_approved"] is True

    async def test_approving_pending_task_is_409(self, client: AsyncClient) -> None:
        task = await _create(client)
        response = await client.post(
            f"{API}/{task['id']}/approve", headers=as_user(ADMIN_ID)
        )
        assert response.status_code == 409
        assert response.json()["error"] == "INVALID_STATE"

    async def test_completion_notifies_creator(
        self, client: AsyncClient, services: Services
    ) -> None:
        task = await _create(client)
        await client.put(
            f"{API}/{task['id']}/status",
            json={"status": "completed"},
            headers=as_user(DESIGNER_ID),
        )
        inbox = await client.get("/api/v1/notifications", headers=as_user(ADMIN_ID))
        assert inbox.json()["unread_count"] == 1
        assert inbox.json()["notifications"][0]["type"] == "task_completed"


class TestEditing:
    async def test_partial_update(self, client: AsyncClient) -> None:
        task = await _create(client, priority="low")
        response = await client.put(
            f"{API}/{task['id']}",
            json={"title": "Poster v2", "description": None},
            headers=as_user(DESIGNER_ID),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Poster v2"
        assert data["priority"] == "low"
        assert data["description"] is None

    async def test_outsider_cannot_edit(self, client: AsyncClient) -> None:
        task = await _create(client)
        response = await client.put(
            f"{API}/{task['id']}",
            json={"title": "Mine"},
            headers=as_user(AUDIOVISUAL_ID),
        )
        assert response.status_code == 403

    async def test_replace_assignees(self, client: AsyncClient) -> None:
        task = await _create(client)
        response = await client.put(
            f"{API}/{task['id']}/assignees",
            json={"user_ids": [AUDIOVISUAL_ID, DESIGNER_ID]},
            headers=as_user(ADMIN_ID),
        )
        assert response.status_code == 200
        assert response.json()["assigned_users"] == [AUDIOVISUAL_ID, DESIGNER_ID]
        assert response.json()["assigned_to"] == AUDIOVISUAL_ID

    async def test_update_checklist(self, client: AsyncClient) -> None:
        task = await _create(client)
        response = await client.put(
            f"{API}/{task['id']}/checklist",
            json={"items": [{"id": "a", "text": "Draft", "checked": True}]},
            headers=as_user(DESIGNER_ID),
        )
        assert response.json()["checklist_progress"] == {"checked": 1, "total": 1}

    async def test_delete_is_admin_only(self, client: AsyncClient) -> None:
        task = await _create(client)
        forbidden = await client.delete(f"{API}/{task['id']}", headers=as_user(DESIGNER_ID))
        assert forbidden.status_code == 403
        deleted = await client.delete(f"{API}/{task['id']}", headers=as_user(ADMIN_ID))
        assert deleted.status_code == 204
        gone = await client.get(f"{API}/{task['id']}", headers=as_user(ADMIN_ID))
        assert gone.status_code == 404
