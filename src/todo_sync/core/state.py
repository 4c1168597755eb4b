# src/todo_sync/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..sync.coordinator import SyncCoordinator
from ..sync.notifications import BusyCounter, NotificationRouter
from ..sync.registry import TaskRegistry
from .ports import TaskStoreClient


@dataclass
class AppState:
    """
    Everything a connector needs, passed explicitly instead of via module globals.

    The registry is owned by the coordinator; it is exposed here only for reads.
    """

    settings: Any
    client: TaskStoreClient
    notifier: NotificationRouter
    busy: BusyCounter
    coordinator: SyncCoordinator

    @property
    def registry(self) -> TaskRegistry:
        return self.coordinator.registry

    async def aclose(self) -> None:
        close = getattr(self.client, "aclose", None)
        if callable(close):
            await close()
