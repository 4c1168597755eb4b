# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_sync.cli.bootstrap import create_initial_state
from todo_sync.core.models import Task
from todo_sync.core.state import AppState
from todo_sync.sync.coordinator import SyncCoordinator
from todo_sync.sync.notifications import BusyCounter, NotificationRouter

from .fakes import FIXED_NOW, FakeStore, NoticeLog, ScriptedConfirm


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than reading the environment,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        api_base_url="http://store.test/api",
        offline_mode=False,
        connect_timeout_seconds=1.0,
        read_timeout_seconds=1.0,
        confirm_bulk=True,
    )


@pytest.fixture()
def seed_tasks() -> list[Task]:
    return [
        Task(id=1, title="A", completed=False, created_at=FIXED_NOW),
        Task(id=2, title="B", completed=True, created_at=FIXED_NOW),
    ]


@pytest.fixture()
def store(seed_tasks: list[Task]) -> FakeStore:
    return FakeStore(seed_tasks)


@pytest.fixture()
def notices() -> NoticeLog:
    return NoticeLog()


@pytest.fixture()
def confirm() -> ScriptedConfirm:
    return ScriptedConfirm(answer=True)


@pytest.fixture()
def coordinator(store: FakeStore, notices: NoticeLog, confirm: ScriptedConfirm) -> SyncCoordinator:
    router = NotificationRouter()
    router.subscribe(notices)
    return SyncCoordinator(
        store,
        notifier=router,
        confirm=confirm,
        busy=BusyCounter(),
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, store: FakeStore, confirm: ScriptedConfirm) -> AppState:
    """AppState wired through the real bootstrap, with the fake store injected."""
    return create_initial_state(settings=settings, client=store, confirm=confirm)
