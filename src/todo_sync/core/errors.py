# src/todo_sync/core/errors.py

from __future__ import annotations

from typing import Any


class TodoSyncError(Exception):
    """Base class for errors raised by the sync layer."""


class ValidationError(TodoSyncError):
    """Rejected before any registry or remote interaction (e.g. empty title)."""


class RemoteError(TodoSyncError):
    """
    Single error shape for everything that goes wrong talking to the store.

    status_code is the HTTP status, or 0 for transport-level faults
    (connection refused, timeout, unreadable body).
    """

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def __repr__(self) -> str:
        return f"RemoteError(status_code={self.status_code!r}, message={self.message!r})"


class TaskNotFoundError(TodoSyncError, LookupError):
    """An operation addressed an id the registry no longer knows (stale reference)."""

    def __init__(self, task_id: Any) -> None:
        super().__init__(f"Task not found: {task_id!r}")
        self.task_id = task_id


def friendly_error_message(err: Exception) -> str:
    if isinstance(err, RemoteError):
        if err.status_code == 0:
            return f"Store is unreachable ({err.message}). Check TODO_API_BASE_URL or try again later."
        return f"Operation failed: {err.message}"
    if isinstance(err, ValidationError):
        return str(err) or "Invalid input."
    if isinstance(err, TaskNotFoundError):
        return "That task no longer exists. Use /list to refresh the view."
    return str(err).strip() or "Unexpected error."
