# src/todo_sync/remote/wire.py

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from ..core.errors import RemoteError
from ..core.models import Task, TaskFields, TaskId, is_temp_id

logger = logging.getLogger(__name__)


def _parse_ts(raw: Any) -> datetime | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, (int, float)):
        return datetime.fromtimestamp(float(raw)).astimezone()
    s = str(raw).strip()
    # fromisoformat() only accepts a trailing "Z" since 3.11; normalize anyway.
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        logger.warning("Unparseable created_at from store: %r", raw)
        return None


def _parse_id(raw: Any) -> TaskId:
    if isinstance(raw, bool) or raw is None:
        raise RemoteError(0, f"Store returned an invalid id: {raw!r}")
    if isinstance(raw, int):
        return raw
    s = str(raw).strip()
    if not s:
        raise RemoteError(0, "Store returned an empty id")
    if s.isdigit():
        return int(s)
    if is_temp_id(s):
        raise RemoteError(0, f"Store id collides with the local id prefix: {s!r}")
    return s


def task_from_wire(data: Any) -> Task:
    """Convert one store JSON object into a synced Task snapshot."""
    if not isinstance(data, dict):
        raise RemoteError(0, f"Expected a JSON object, got {type(data).__name__}")

    return Task(
        id=_parse_id(data.get("id")),
        title=str(data.get("title") or ""),
        description=str(data.get("description") or ""),
        completed=bool(data.get("completed", False)),
        created_at=_parse_ts(data.get("created_at")),
    )


def tasks_from_wire(data: Any) -> list[Task]:
    if not isinstance(data, list):
        raise RemoteError(0, f"Expected a JSON array, got {type(data).__name__}")
    return [task_from_wire(item) for item in data]


def create_body(fields: TaskFields) -> dict[str, Any]:
    return {"title": fields.title, "description": fields.description}


def replace_body(fields: TaskFields) -> dict[str, Any]:
    return {
        "title": fields.title,
        "description": fields.description,
        "completed": fields.completed,
    }
