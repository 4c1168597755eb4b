# src/todo_sync/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the store transport (HTTP or in-memory demo store),
- wires registry, notifications, busy signal and coordinator into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import ConfirmPrompt, TaskStoreClient
from ..core.state import AppState
from ..remote.client import RemoteTaskClient, make_timeout
from ..remote.offline import InMemoryTaskStore
from ..sync.coordinator import AutoConfirm, SyncCoordinator
from ..sync.notifications import BusyCounter, NotificationRouter
from ..sync.registry import TaskRegistry

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_store_client(settings) -> TaskStoreClient:
    if settings.offline_mode:
        logger.info("Offline mode: using the in-memory demo store.")
        return InMemoryTaskStore()

    timeout = make_timeout(
        connect_s=float(settings.connect_timeout_seconds),
        read_s=float(settings.read_timeout_seconds),
    )
    logger.info("Using store at %s", settings.api_base_url)
    return RemoteTaskClient(settings.api_base_url, timeout=timeout)


def create_initial_state(
    *,
    settings=None,
    client: TaskStoreClient | None = None,
    confirm: ConfirmPrompt | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings and the store client injectable makes the app easier to
    test and avoids hidden global config reads. If settings is None, falls back
    to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if client is None:
        client = create_store_client(settings)

    if not getattr(settings, "confirm_bulk", True):
        confirm = AutoConfirm()
    elif confirm is None:
        logger.warning("No confirmation prompt supplied; bulk clears will be auto-approved.")
        confirm = AutoConfirm()

    notifier = NotificationRouter()
    busy = BusyCounter()
    coordinator = SyncCoordinator(
        client,
        notifier=notifier,
        confirm=confirm,
        registry=TaskRegistry(),
        busy=busy,
    )

    return AppState(
        settings=settings,
        client=client,
        notifier=notifier,
        busy=busy,
        coordinator=coordinator,
    )
