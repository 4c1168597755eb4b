# src/todo_sync/connectors/formatting.py

from __future__ import annotations

from datetime import datetime

from ..core.models import SyncState, Task, TaskCounts, TaskView


def _local(ts: datetime) -> datetime:
    # Naive timestamps from the store are taken as already local.
    return ts.astimezone() if ts.tzinfo is not None else ts


def format_time(ts: datetime) -> str:
    return _local(ts).strftime("%Y-%m-%d %H:%M")


def format_completed_time(ts: datetime) -> str:
    return "completed at " + _local(ts).strftime("%Y-%m-%d %H:%M:%S")


def format_counter(counts: TaskCounts) -> str:
    return f"{counts.total} tasks (active: {counts.active}, completed: {counts.completed})"


def format_task_line(position: int, task: Task) -> str:
    mark = "x" if task.completed else " "
    line = f"{position:>3}. [{mark}] {task.title}"

    meta: list[str] = []
    if task.created_at is not None:
        meta.append(format_time(task.created_at))
    if task.completed and task.completed_at is not None:
        meta.append(format_completed_time(task.completed_at))
    if task.state is SyncState.PENDING_CREATE:
        meta.append("saving...")
    if meta:
        line += "  (" + ", ".join(meta) + ")"
    return line


def render_view(view: TaskView) -> str:
    header = f"[{view.filter.value}] {format_counter(view.counts)}"
    if not view.tasks:
        return header + "\n  (nothing to show)"
    lines = [header]
    lines.extend(format_task_line(i, t) for i, t in enumerate(view.tasks, start=1))
    return "\n".join(lines)
