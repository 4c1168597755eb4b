# src/todo_sync/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the sync core.

The coordinator depends on Protocols instead of concrete implementations.
This keeps the store transport and the UI swappable and makes testing easier.
"""

from typing import Awaitable, Protocol

from .models import Task, TaskFields, TaskId


class TaskStoreClient(Protocol):
    """
    Remote CRUD contract.

    Every method raises RemoteError on failure. No retries happen behind it.
    """

    def list(self) -> Awaitable[list[Task]]: ...
    def create(self, fields: TaskFields) -> Awaitable[Task]: ...
    def replace(self, task_id: TaskId, fields: TaskFields) -> Awaitable[Task]: ...
    def remove(self, task_id: TaskId) -> Awaitable[None]: ...


class NotificationSink(Protocol):
    """Receives outcome events; the UI decides how to show them."""

    def info(self, text: str) -> None: ...
    def success(self, text: str) -> None: ...
    def error(self, text: str) -> None: ...


class ConfirmPrompt(Protocol):
    """
    Confirmation gate for bulk operations.

    affected is the number of tasks the operation will touch, so the prompt
    can show it.
    """

    def confirm(self, message: str, affected: int) -> Awaitable[bool]: ...
