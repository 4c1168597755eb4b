# tests/test_filters.py

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from todo_sync.core.models import Task, TaskFilter
from todo_sync.sync.filters import build_view, counts, parse_filter, visible, with_completion_time

T0 = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)

TASKS = [
    Task(id=1, title="A", completed=False, created_at=T0),
    Task(id=2, title="B", completed=True, created_at=T0),
    Task(id=3, title="C", completed=False),
    Task(id=4, title="D", completed=True),
]


def test_visible_preserves_order_per_filter() -> None:
    assert [t.id for t in visible(TASKS, TaskFilter.ALL)] == [1, 2, 3, 4]
    assert [t.id for t in visible(TASKS, TaskFilter.ACTIVE)] == [1, 3]
    assert [t.id for t in visible(TASKS, TaskFilter.COMPLETED)] == [2, 4]


def test_visible_accepts_filter_names() -> None:
    assert [t.id for t in visible(TASKS, "completed")] == [2, 4]
    assert [t.id for t in visible(TASKS, "active")] == [1, 3]
    assert build_view(TASKS, "completed").filter is TaskFilter.COMPLETED


@pytest.mark.parametrize("n", [0, 1, 2, 3, 4])
def test_counts_total_is_active_plus_completed(n: int) -> None:
    c = counts(TASKS[:n])
    assert c.total == n
    assert c.total == c.active + c.completed


def test_completion_time_falls_back_to_created_at() -> None:
    assert with_completion_time(TASKS[1]).completed_at == T0
    # No created_at either: nothing to derive from.
    assert with_completion_time(TASKS[3]).completed_at is None
    # Active tasks never carry a completion time.
    stale = Task(id=9, title="x", completed=False, completed_at=T0)
    assert with_completion_time(stale).completed_at is None


def test_known_completion_time_is_kept() -> None:
    later = datetime(2026, 5, 5, tzinfo=UTC)
    task = Task(id=9, title="x", completed=True, created_at=T0, completed_at=later)
    assert with_completion_time(task).completed_at == later


def test_build_view_counts_whole_snapshot_but_shows_filtered_tasks() -> None:
    view = build_view(TASKS, TaskFilter.COMPLETED)

    assert view.filter is TaskFilter.COMPLETED
    assert [t.id for t in view.tasks] == [2, 4]
    assert (view.counts.total, view.counts.active, view.counts.completed) == (4, 2, 2)


def test_parse_filter() -> None:
    assert parse_filter(" Active ") is TaskFilter.ACTIVE
    assert parse_filter(TaskFilter.ALL) is TaskFilter.ALL
    with pytest.raises(ValueError):
        parse_filter("done")
