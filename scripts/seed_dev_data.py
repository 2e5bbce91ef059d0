"""Seed dev data from scripts/seed-data.json into Postgres.

Loads users (by username; existing ones are kept), then tasks and super
tasks through TaskLifecycleService / SuperTaskService so codes are allocated
and assignments written exactly as the API does. Tasks are skipped when a
root task with the same title already exists.

Usage:
    uv run python -m scripts.seed_dev_data [path/to/seed-data.json]

Requires: DATABASE_URL (Postgres, .env is read by Settings) and a migrated
database (alembic upgrade head).
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

from taskboard.api.v1.dependencies.tasks import build_task_services
from taskboard.application.dtos.task import TaskFilters
from taskboard.application.dtos.user import UserResult
from taskboard.application.services.role_registry import RoleRegistry
from taskboard.core.config import get_settings
from taskboard.domain.value_objects.core import description_from_payload
from taskboard.infrastructure.persistence import database
from taskboard.infrastructure.persistence.repositories.user_repo import UserRepository


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


async def _seed_users(
    repo: UserRepository, users_data: list[dict[str, Any]]
) -> dict[str, UserResult]:
    users: dict[str, UserResult] = {}
    for u in users_data:
        existing = await repo.get_by_username(u["username"])
        if existing:
            print(f"  User {u['username']} already exists, skip")
            users[u["username"]] = existing
            continue
        created = await repo.create_user(
            username=u["username"],
            full_name=u["full_name"],
            role=u["role"],
            avatar_color=u.get("avatar_color", "#6366f1"),
        )
        print(f"  User {created.username} ({created.role}) -> {created.id}")
        users[created.username] = created
    return users


async def run(path: Path) -> None:
    data = json.loads(path.read_text(encoding="utf-8"))
    database.ensure_engine()
    if database.AsyncSessionLocal is None:
        print("DATABASE_URL is not set", file=sys.stderr)
        sys.exit(1)

    roles = RoleRegistry.from_settings(get_settings())
    async with database.AsyncSessionLocal() as session:
        async with session.begin():
            users = await _seed_users(UserRepository(session), data.get("users", []))
            lifecycle, super_tasks = build_task_services(session, roles)

            existing = {
                t.title: t.id for t in await lifecycle.list_tasks(TaskFilters())
            }
            task_ids = dict(existing)
            for t in data.get("tasks", []):
                if t["title"] in existing:
                    print(f"  Task {t['title']!r} already exists, skip")
                    continue
                result = await lifecycle.create_task(
                    users[t["created_by"]],
                    t["title"],
                    description=description_from_payload(t.get("description")),
                    priority=t.get("priority", "medium"),
                    category=t.get("category", "other"),
                    assigned_users=[users[name].id for name in t.get("assignees", [])],
                )
                task_ids[t["title"]] = result.task.id
                print(f"  Task {result.task.task_code} {t['title']!r}")

            for s in data.get("super_tasks", []):
                if s["title"] in existing:
                    print(f"  Super task {s['title']!r} already exists, skip")
                    continue
                members = [task_ids[title] for title in s["tasks"] if title in task_ids]
                if len(members) < 2:
                    print(f"  Skip super task {s['title']!r}: fewer than 2 tasks")
                    continue
                result = await super_tasks.create_group(
                    users[s["created_by"]], s["title"], members
                )
                print(f"  Super task {s['title']!r} -> {result.task.id}")

    print("Seed completed.")


def main() -> None:
    root = _project_root()
    path_arg = sys.argv[1] if len(sys.argv) > 1 else None
    path = Path(path_arg) if path_arg else root / "scripts" / "seed-data.json"
    if not path.is_absolute():
        path = (root / path).resolve()
    asyncio.run(run(path))


if __name__ == "__main__":
    main()
