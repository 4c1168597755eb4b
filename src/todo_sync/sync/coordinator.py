# src/todo_sync/sync/coordinator.py

from __future__ import annotations

"""
Sync coordinator.

Turns user commands into optimistic registry changes plus one remote call each:
- capture a snapshot,
- apply the change locally (the view updates immediately),
- call the store,
- commit what the store returned, or roll back to the snapshot and notify.

Operations on the same task id are queued behind each other (KeyedLocks), so a
late rollback can never clobber a newer optimistic state. Operations on
different ids run concurrently and may finish in any order.
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

from ..core.errors import RemoteError, TaskNotFoundError, ValidationError, friendly_error_message
from ..core.models import BulkResult, DeleteOutcome, SyncState, Task, TaskFields, TaskFilter, TaskId, TaskView
from ..core.ports import ConfirmPrompt, NotificationSink, TaskStoreClient
from .filters import build_view, parse_filter
from .locks import KeyedLocks
from .notifications import BusyCounter
from .registry import TaskRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")
ViewListener = Callable[[TaskView], None]
Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(UTC)


def validate_title(raw: str | None) -> str:
    title = (raw or "").strip()
    if not title:
        raise ValidationError("Task title must not be empty.")
    return title


class AutoConfirm:
    """ConfirmPrompt that approves everything (used when confirmations are disabled)."""

    async def confirm(self, message: str, affected: int) -> bool:
        logger.debug("Auto-confirmed: %s (%d tasks)", message, affected)
        return True


class SyncCoordinator:
    def __init__(
        self,
        client: TaskStoreClient,
        *,
        notifier: NotificationSink,
        confirm: ConfirmPrompt,
        registry: TaskRegistry | None = None,
        busy: BusyCounter | None = None,
        clock: Clock = _utc_now,
    ) -> None:
        self._client = client
        self._notifier = notifier
        self._confirm = confirm
        self._registry = registry if registry is not None else TaskRegistry()
        self._busy = busy if busy is not None else BusyCounter()
        self._clock = clock
        self._locks = KeyedLocks()
        self._filter = TaskFilter.ALL
        self._view_listeners: list[ViewListener] = []

    @property
    def registry(self) -> TaskRegistry:
        return self._registry

    @property
    def busy(self) -> BusyCounter:
        return self._busy

    @property
    def current_filter(self) -> TaskFilter:
        return self._filter

    # ---- view ----

    def view(self) -> TaskView:
        return build_view(self._registry.all(), self._filter)

    def set_filter(self, task_filter: TaskFilter | str) -> TaskView:
        self._filter = parse_filter(task_filter)
        return self._publish_view()

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        self._view_listeners.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._view_listeners.remove(listener)

        return _unsubscribe

    def _publish_view(self) -> TaskView:
        view = self.view()
        for listener in list(self._view_listeners):
            try:
                listener(view)
            except Exception:
                logger.exception("View listener failed.")
        return view

    # ---- low-level helpers ----

    async def _remote(self, call: Awaitable[T]) -> T:
        with self._busy.track():
            return await call

    @contextlib.asynccontextmanager
    async def _serialized(self, task_id: TaskId) -> AsyncIterator[TaskId]:
        """
        Hold the per-id lock and yield the id as the registry knows it now.

        A temporary id that was rekeyed while we waited also takes the store
        id's lock, so both spellings queue behind the same operations.
        """
        async with contextlib.AsyncExitStack() as stack:
            await stack.enter_async_context(self._locks.hold(task_id))
            key = self._registry.resolve(task_id)
            if key != task_id:
                await stack.enter_async_context(self._locks.hold(key))
            yield key

    def _live_task(self, key: TaskId, action: str) -> Task | None:
        task = self._registry.snapshot(key)
        if task is None:
            logger.warning("%s: task %r not found; aborting", action, key)
            return None
        if task.state is not SyncState.SYNCED:
            logger.warning("%s: task %r is %s; aborting", action, key, task.state.value)
            return None
        return task

    def _restore(self, key: TaskId, prior: Task) -> None:
        try:
            self._registry.rollback(key, prior)
        except TaskNotFoundError:
            # Reloaded away while the call was in flight; nothing left to restore.
            logger.info("Rollback skipped: task %r is gone", key)

    async def _optimistic_update(
        self,
        task_id: TaskId,
        action: str,
        patch: Callable[[Task], dict[str, Any]],
    ) -> Task | None:
        async with self._serialized(task_id) as key:
            current = self._live_task(key, action)
            if current is None:
                return None

            prior = self._registry.mutate(key, **patch(current))
            self._publish_view()
            fields = self._registry.get(key).fields()

            try:
                confirmed = await self._remote(self._client.replace(key, fields))
            except RemoteError as e:
                logger.info("%s failed for %r: %s", action, key, e.message)
                self._restore(key, prior)
                self._publish_view()
                self._notifier.error(friendly_error_message(e))
                return None

            try:
                result = self._registry.reconcile(key, confirmed)
            except TaskNotFoundError:
                logger.info("%s: task %r vanished before reconcile", action, key)
                return None
            self._publish_view()
            return result

    # ---- commands ----

    async def load(self) -> bool:
        """Fetch the full list and install it. On failure the registry stays as it was."""
        try:
            tasks = await self._remote(self._client.list())
        except RemoteError as e:
            self._notifier.error(f"Could not load tasks. {friendly_error_message(e)}")
            self._publish_view()
            return False

        self._registry.replace_all(tasks)
        logger.info("Loaded %d tasks", len(tasks))
        self._publish_view()
        return True

    async def add(self, title: str) -> Task | None:
        try:
            text = validate_title(title)
        except ValidationError as e:
            self._notifier.info(str(e))
            return None

        fields = TaskFields(title=text)
        temp_id = self._registry.insert_pending(fields)

        async with self._locks.hold(temp_id):
            self._publish_view()
            try:
                confirmed = await self._remote(self._client.create(fields))
            except RemoteError as e:
                logger.info("create failed for %s: %s", temp_id, e.message)
                try:
                    self._registry.discard_pending(temp_id)
                except TaskNotFoundError:
                    logger.info("Pending task %s already gone", temp_id)
                self._publish_view()
                self._notifier.error(friendly_error_message(e))
                return None

            synced = self._registry.confirm_create(temp_id, confirmed)
            self._publish_view()

        if synced is not None:
            self._notifier.success(f"Added: {synced.title}")
        return synced

    async def toggle_complete(self, task_id: TaskId) -> Task | None:
        def _flip(task: Task) -> dict[str, Any]:
            if task.completed:
                return {"completed": False, "completed_at": None}
            return {"completed": True, "completed_at": self._clock()}

        return await self._optimistic_update(task_id, "toggle_complete", _flip)

    async def edit(self, task_id: TaskId, new_title: str) -> Task | None:
        try:
            text = validate_title(new_title)
        except ValidationError as e:
            self._notifier.info(str(e))
            return None

        result = await self._optimistic_update(task_id, "edit", lambda _task: {"title": text})
        if result is not None:
            self._notifier.success(f"Saved: {result.title}")
        return result

    async def delete(self, task_id: TaskId) -> bool:
        return await self._delete(task_id, announce=True) is DeleteOutcome.DELETED

    async def _delete(
        self,
        task_id: TaskId,
        *,
        announce: bool,
        only_if: Callable[[Task], bool] | None = None,
    ) -> DeleteOutcome:
        async with self._serialized(task_id) as key:
            current = self._live_task(key, "delete")
            if current is None:
                return DeleteOutcome.SKIPPED
            # Targets are chosen before the lock; a queued rollback may have changed the task since.
            if only_if is not None and not only_if(current):
                logger.info("delete: task %r no longer matches; skipping", key)
                return DeleteOutcome.SKIPPED

            self._registry.mark_pending_delete(key)
            self._publish_view()

            try:
                await self._remote(self._client.remove(key))
            except RemoteError as e:
                logger.info("delete failed for %r: %s", key, e.message)
                try:
                    self._registry.cancel_pending_delete(key)
                except TaskNotFoundError:
                    logger.info("Pending delete %r already gone", key)
                self._publish_view()
                if announce:
                    self._notifier.error(friendly_error_message(e))
                return DeleteOutcome.FAILED

            self._registry.confirm_delete(key)
            self._publish_view()

        if announce:
            self._notifier.success(f"Deleted: {current.title}")
        return DeleteOutcome.DELETED

    async def clear_all(self) -> BulkResult | None:
        return await self._clear(
            [t.id for t in self._registry.all() if not t.is_pending],
            prompt="Clear all tasks?",
            empty_text="There are no tasks to clear.",
        )

    async def clear_completed(self) -> BulkResult | None:
        targets = [t.id for t in self._registry.all() if t.completed and not t.is_pending]
        return await self._clear(
            targets,
            prompt=f"Clear {len(targets)} completed tasks?",
            empty_text="There are no completed tasks.",
            only_if=lambda task: task.completed,
        )

    async def _clear(
        self,
        targets: list[TaskId],
        *,
        prompt: str,
        empty_text: str,
        only_if: Callable[[Task], bool] | None = None,
    ) -> BulkResult | None:
        """
        Independent per-id deletes, run concurrently.

        Failures do not undo successes; failed tasks stay visible as synced.
        Each target is re-checked under its own lock: one that is gone by then,
        or no longer satisfies only_if, is skipped rather than counted as failed.
        Returns None when the user declines the confirmation.
        """
        if not targets:
            self._notifier.info(empty_text)
            return BulkResult(requested=0, deleted=0, failed=0)

        if not await self._confirm.confirm(prompt, len(targets)):
            logger.info("Bulk clear declined (%d tasks)", len(targets))
            return None

        outcomes = await asyncio.gather(
            *(self._delete(tid, announce=False, only_if=only_if) for tid in targets)
        )
        result = BulkResult(
            requested=len(targets),
            deleted=outcomes.count(DeleteOutcome.DELETED),
            failed=outcomes.count(DeleteOutcome.FAILED),
            skipped=outcomes.count(DeleteOutcome.SKIPPED),
        )
        if result.skipped:
            logger.info("Bulk clear skipped %d tasks that changed meanwhile", result.skipped)

        if result.ok:
            self._notifier.success(f"Cleared {result.deleted} tasks.")
        else:
            attempted = result.deleted + result.failed
            self._notifier.error(
                f"Cleared {result.deleted} of {attempted} tasks; {result.failed} could not be deleted."
            )
        return result
