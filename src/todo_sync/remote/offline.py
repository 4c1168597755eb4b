# src/todo_sync/remote/offline.py

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime

from ..core.errors import RemoteError
from ..core.models import Task, TaskFields, TaskId


class InMemoryTaskStore:
    """
    Offline store used for demos when no backend is configured.

    Behavior:
    - ids are incrementing integers starting at 1
    - created_at comes from the wall clock (UTC)
    - unknown ids raise RemoteError(404), like the HTTP backend would
    - nothing is persisted across runs
    """

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self._tasks: dict[TaskId, Task] = {}
        self._next_id = 1
        for t in tasks or []:
            self._tasks[t.id] = t
            if isinstance(t.id, int):
                self._next_id = max(self._next_id, t.id + 1)

    async def aclose(self) -> None:
        return

    async def list(self) -> list[Task]:
        return list(self._tasks.values())

    async def create(self, fields: TaskFields) -> Task:
        task = Task(
            id=self._next_id,
            title=fields.title,
            description=fields.description,
            completed=False,
            created_at=datetime.now(UTC),
        )
        self._next_id += 1
        self._tasks[task.id] = task
        return task

    async def replace(self, task_id: TaskId, fields: TaskFields) -> Task:
        current = self._tasks.get(task_id)
        if current is None:
            raise RemoteError(404, "HTTP 404: Not Found")
        updated = replace(
            current,
            title=fields.title,
            description=fields.description,
            completed=fields.completed,
        )
        self._tasks[task_id] = updated
        return updated

    async def remove(self, task_id: TaskId) -> None:
        if self._tasks.pop(task_id, None) is None:
            raise RemoteError(404, "HTTP 404: Not Found")
