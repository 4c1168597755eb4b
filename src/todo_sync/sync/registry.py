# src/todo_sync/sync/registry.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from typing import Any

from ..core.errors import TaskNotFoundError
from ..core.models import TEMP_ID_PREFIX, SyncState, Task, TaskFields, TaskId, is_temp_id

logger = logging.getLogger(__name__)

# Fields a caller may patch through mutate(); id and state belong to the registry.
_MUTABLE_FIELDS = frozenset({"title", "description", "completed", "completed_at"})


class TaskRegistry:
    """
    In-memory authoritative mirror of the task collection.

    Ownership:
    - the registry is the only place Task instances are created or replaced
    - readers (filters, render layer) only ever get frozen snapshots

    Ordering:
    - insertion order, stable across reads
    - a confirmed create is rekeyed in place (same list position)

    Unknown ids:
    - confirm_create / confirm_delete tolerate them (the thing they confirm may
      already have been rolled back or reloaded away)
    - every other mutator raises TaskNotFoundError
    """

    def __init__(self) -> None:
        self._entries: dict[TaskId, Task] = {}
        # temp id -> store id, kept after a rekey so late commands still resolve.
        self._aliases: dict[str, TaskId] = {}
        self._temp_seq = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, task_id: object) -> bool:
        return self.resolve(task_id) in self._entries  # type: ignore[arg-type]

    # ---- low-level helpers ----

    def resolve(self, task_id: TaskId) -> TaskId:
        if isinstance(task_id, str):
            return self._aliases.get(task_id, task_id)
        return task_id

    def _require(self, task_id: TaskId) -> tuple[TaskId, Task]:
        key = self.resolve(task_id)
        task = self._entries.get(key)
        if task is None:
            raise TaskNotFoundError(task_id)
        return key, task

    def _next_temp_id(self) -> str:
        self._temp_seq += 1
        return f"{TEMP_ID_PREFIX}{self._temp_seq}"

    # ---- reads ----

    def get(self, task_id: TaskId) -> Task:
        return self._require(task_id)[1]

    def snapshot(self, task_id: TaskId) -> Task | None:
        return self._entries.get(self.resolve(task_id))

    def all(self, *, include_pending_delete: bool = False) -> list[Task]:
        if include_pending_delete:
            return list(self._entries.values())
        return [t for t in self._entries.values() if t.state is not SyncState.PENDING_DELETE]

    # ---- bulk load ----

    def replace_all(self, tasks: Iterable[Task]) -> None:
        entries: dict[TaskId, Task] = {}
        for t in tasks:
            if is_temp_id(t.id):
                raise ValueError(f"Store id collides with the local id prefix: {t.id!r}")
            if t.id in entries:
                logger.warning("Duplicate task id from store: %r (keeping the first)", t.id)
                continue
            entries[t.id] = t if t.state is SyncState.SYNCED else t.with_state(SyncState.SYNCED)

        self._entries = entries
        self._aliases.clear()
        logger.debug("Registry replaced: %d tasks", len(entries))

    # ---- create lifecycle ----

    def insert_pending(self, fields: TaskFields) -> str:
        temp_id = self._next_temp_id()
        self._entries[temp_id] = Task(
            id=temp_id,
            title=fields.title,
            description=fields.description,
            completed=fields.completed,
            state=SyncState.PENDING_CREATE,
        )
        logger.debug("Inserted pending task %s", temp_id)
        return temp_id

    def confirm_create(self, temp_id: str, confirmed: Task) -> Task | None:
        pending = self._entries.get(temp_id)
        if pending is None or pending.state is not SyncState.PENDING_CREATE:
            logger.warning("confirm_create: no pending entry %s (already rolled back or reloaded)", temp_id)
            return None
        if is_temp_id(confirmed.id):
            raise ValueError(f"Store id collides with the local id prefix: {confirmed.id!r}")

        synced = replace(confirmed, state=SyncState.SYNCED, completed_at=pending.completed_at)

        if confirmed.id in self._entries:
            # A reload already brought the store copy in; keep that position.
            logger.info("confirm_create: %s already present as %r; dropping pending entry", temp_id, confirmed.id)
            del self._entries[temp_id]
            self._entries[confirmed.id] = synced
        else:
            self._entries = {
                (confirmed.id if key == temp_id else key): (synced if key == temp_id else task)
                for key, task in self._entries.items()
            }

        self._aliases[temp_id] = confirmed.id
        logger.debug("Confirmed create %s -> %r", temp_id, confirmed.id)
        return synced

    def discard_pending(self, temp_id: str) -> Task:
        task = self._entries.get(temp_id)
        if task is None or task.state is not SyncState.PENDING_CREATE:
            raise TaskNotFoundError(temp_id)
        del self._entries[temp_id]
        logger.debug("Discarded pending task %s", temp_id)
        return task

    # ---- in-place mutation ----

    def mutate(self, task_id: TaskId, **changes: Any) -> Task:
        """Apply a field patch and return the prior snapshot for rollback."""
        unknown = set(changes) - _MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot mutate fields: {sorted(unknown)}")

        key, prior = self._require(task_id)
        self._entries[key] = replace(prior, **changes)
        return prior

    def rollback(self, task_id: TaskId, prior: Task) -> None:
        key, _ = self._require(task_id)
        if prior.id != key:
            raise ValueError(f"Snapshot id {prior.id!r} does not match {key!r}")
        self._entries[key] = prior
        logger.debug("Rolled back task %r", key)

    def reconcile(self, task_id: TaskId, confirmed: Task) -> Task:
        """
        Commit what the store returned after a replace.

        The store does not know completion times, so the local one survives as
        long as the store agrees the task is completed.
        """
        key, current = self._require(task_id)
        completed_at = current.completed_at if confirmed.completed else None
        merged = replace(
            current,
            title=confirmed.title,
            description=confirmed.description,
            completed=confirmed.completed,
            created_at=confirmed.created_at or current.created_at,
            completed_at=completed_at,
        )
        self._entries[key] = merged
        return merged

    # ---- delete lifecycle ----

    def mark_pending_delete(self, task_id: TaskId) -> Task:
        key, prior = self._require(task_id)
        self._entries[key] = prior.with_state(SyncState.PENDING_DELETE)
        return prior

    def confirm_delete(self, task_id: TaskId) -> bool:
        key = self.resolve(task_id)
        if self._entries.pop(key, None) is None:
            logger.warning("confirm_delete: %r is already gone", task_id)
            return False
        logger.debug("Purged task %r", key)
        return True

    def cancel_pending_delete(self, task_id: TaskId) -> Task:
        key, task = self._require(task_id)
        restored = task.with_state(SyncState.SYNCED)
        self._entries[key] = restored
        return restored
