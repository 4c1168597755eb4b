# tests/fakes.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any

from todo_sync.core.errors import RemoteError
from todo_sync.core.models import Task, TaskFields, TaskId
from todo_sync.sync.notifications import Notice, NoticeKind

FIXED_NOW = datetime(2026, 3, 1, 12, 30, 0, tzinfo=UTC)


class FakeStore:
    """
    In-memory TaskStoreClient for coordinator tests.

    - Records every call for assertions
    - fail_next(op, task_id=None) queues a RemoteError for the next matching call
    - hold(op) returns an Event; the next call of that op waits on it, which
      keeps the request "in flight" until the test releases it
    - ids are assigned when a create completes, not when it starts
    """

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self.tasks: dict[TaskId, Task] = {t.id: t for t in tasks or []}
        self.calls: list[tuple[str, Any]] = []
        self._failures: dict[str, list[tuple[TaskId | None, RemoteError]]] = {}
        self._gates: dict[str, list[asyncio.Event]] = {}
        int_ids = [t.id for t in self.tasks.values() if isinstance(t.id, int)]
        self._next_id = max(int_ids, default=0) + 1

    # ---- test controls ----

    def fail_next(
        self,
        op: str,
        *,
        task_id: TaskId | None = None,
        status: int = 500,
        message: str = "HTTP 500: Internal Server Error",
    ) -> None:
        self._failures.setdefault(op, []).append((task_id, RemoteError(status, message)))

    def hold(self, op: str) -> asyncio.Event:
        gate = asyncio.Event()
        self._gates.setdefault(op, []).append(gate)
        return gate

    def count(self, op: str) -> int:
        return sum(1 for name, _ in self.calls if name == op)

    def args(self, op: str) -> list[Any]:
        return [arg for name, arg in self.calls if name == op]

    async def _enter(self, op: str, arg: Any, task_id: TaskId | None = None) -> None:
        self.calls.append((op, arg))

        failure = None
        queued = self._failures.get(op, [])
        for i, (wanted, err) in enumerate(queued):
            if wanted is None or wanted == task_id:
                failure = queued.pop(i)[1]
                break

        gates = self._gates.get(op)
        if gates:
            await gates.pop(0).wait()

        if failure is not None:
            raise failure

    # ---- TaskStoreClient ----

    async def list(self) -> list[Task]:
        await self._enter("list", None)
        return list(self.tasks.values())

    async def create(self, fields: TaskFields) -> Task:
        await self._enter("create", fields)
        task = Task(
            id=self._next_id,
            title=fields.title,
            description=fields.description,
            completed=False,
            created_at=FIXED_NOW,
        )
        self._next_id += 1
        self.tasks[task.id] = task
        return task

    async def replace(self, task_id: TaskId, fields: TaskFields) -> Task:
        await self._enter("replace", (task_id, fields), task_id)
        current = self.tasks.get(task_id)
        if current is None:
            raise RemoteError(404, "HTTP 404: Not Found")
        updated = replace(current, title=fields.title, description=fields.description, completed=fields.completed)
        self.tasks[task_id] = updated
        return updated

    async def remove(self, task_id: TaskId) -> None:
        await self._enter("remove", task_id, task_id)
        if self.tasks.pop(task_id, None) is None:
            raise RemoteError(404, "HTTP 404: Not Found")


@dataclass(slots=True)
class NoticeLog:
    """Subscriber for NotificationRouter that keeps everything it hears."""

    notices: list[Notice] = field(default_factory=list)

    def __call__(self, notice: Notice) -> None:
        self.notices.append(notice)

    def kinds(self) -> list[NoticeKind]:
        return [n.kind for n in self.notices]

    def texts(self, kind: NoticeKind | None = None) -> list[str]:
        return [n.text for n in self.notices if kind is None or n.kind is kind]


class ScriptedConfirm:
    """ConfirmPrompt that answers with a fixed value and records what it was asked."""

    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.asked: list[tuple[str, int]] = []

    async def confirm(self, message: str, affected: int) -> bool:
        self.asked.append((message, affected))
        return self.answer


async def settle(rounds: int = 10) -> None:
    """Let every runnable task advance to its next real suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)
