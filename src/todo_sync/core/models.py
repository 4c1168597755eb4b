# src/todo_sync/core/models.py

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum

TaskId = int | str

TEMP_ID_PREFIX = "local:"


class DeleteOutcome(StrEnum):
    DELETED = "deleted"
    FAILED = "failed"
    SKIPPED = "skipped"


class SyncState(StrEnum):
    """
    Where a task stands relative to the remote store.

    Notes:
    - "pending_create" tasks carry a temporary id (TEMP_ID_PREFIX + counter).
    - "pending_delete" tasks are optimistically removed and hidden from views.
    """

    PENDING_CREATE = "pending_create"
    SYNCED = "synced"
    PENDING_DELETE = "pending_delete"


class TaskFilter(StrEnum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


def is_temp_id(task_id: TaskId) -> bool:
    return isinstance(task_id, str) and task_id.startswith(TEMP_ID_PREFIX)


@dataclass(slots=True, frozen=True)
class TaskFields:
    """Store-writable part of a task (what goes into POST/PUT bodies)."""

    title: str
    description: str = ""
    completed: bool = False


@dataclass(slots=True, frozen=True)
class Task:
    id: TaskId
    title: str
    completed: bool = False
    description: str = ""
    created_at: datetime | None = None
    # Client-side only; the store never persists it.
    completed_at: datetime | None = None
    state: SyncState = SyncState.SYNCED

    @property
    def is_pending(self) -> bool:
        return self.state is not SyncState.SYNCED

    def fields(self) -> TaskFields:
        return TaskFields(title=self.title, description=self.description, completed=self.completed)

    def with_state(self, state: SyncState) -> Task:
        return replace(self, state=state)


@dataclass(slots=True, frozen=True)
class TaskCounts:
    total: int
    active: int
    completed: int


@dataclass(slots=True, frozen=True)
class TaskView:
    """Everything the render layer needs, derived from a single snapshot."""

    filter: TaskFilter
    tasks: tuple[Task, ...]
    counts: TaskCounts


@dataclass(slots=True, frozen=True)
class BulkResult:
    requested: int
    deleted: int
    failed: int
    # Targets that were already gone or no longer matched once their turn came.
    skipped: int = 0

    @property
    def ok(self) -> bool:
        return self.failed == 0
