# src/todo_sync/sync/filters.py

"""
Pure view derivation: which tasks are visible and how many of each kind.

Everything here is deterministic and side-effect free. build_view() computes
the visible list and the counters from the same snapshot so the UI never shows
counts that disagree with the rendered list.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from ..core.models import Task, TaskCounts, TaskFilter, TaskView


def parse_filter(raw: str | TaskFilter) -> TaskFilter:
    if isinstance(raw, TaskFilter):
        return raw
    try:
        return TaskFilter((raw or "").strip().lower())
    except ValueError:
        choices = ", ".join(f.value for f in TaskFilter)
        raise ValueError(f"Unknown filter {raw!r} (expected one of: {choices})") from None


def visible(tasks: Sequence[Task], task_filter: TaskFilter | str) -> list[Task]:
    task_filter = parse_filter(task_filter)
    if task_filter is TaskFilter.ACTIVE:
        return [t for t in tasks if not t.completed]
    if task_filter is TaskFilter.COMPLETED:
        return [t for t in tasks if t.completed]
    return list(tasks)


def counts(tasks: Sequence[Task]) -> TaskCounts:
    done = sum(1 for t in tasks if t.completed)
    return TaskCounts(total=len(tasks), active=len(tasks) - done, completed=done)


def with_completion_time(task: Task) -> Task:
    # Completion time is not stored remotely. After a reload we only know
    # created_at, which is the accepted approximation.
    if task.completed and task.completed_at is None and task.created_at is not None:
        return replace(task, completed_at=task.created_at)
    if not task.completed and task.completed_at is not None:
        return replace(task, completed_at=None)
    return task


def build_view(tasks: Sequence[Task], task_filter: TaskFilter | str) -> TaskView:
    task_filter = parse_filter(task_filter)
    snapshot = tuple(tasks)
    shown = tuple(with_completion_time(t) for t in visible(snapshot, task_filter))
    return TaskView(filter=task_filter, tasks=shown, counts=counts(snapshot))
